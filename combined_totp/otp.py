import hashlib
import hmac

from combined_totp.errors import InvalidWindow

DIGITS = 6
DEFAULT_WINDOW = 30
MAX_COUNTER = 2**64 - 1


def counter_to_bytes(counter: int) -> bytes:
    """Encode a time-step counter as 8 big-endian bytes.

    Args:
        counter: Non-negative counter that fits in 64 bits.

    Returns:
        The 8-byte counter message fed to the HMAC.

    Raises:
        ValueError: If the counter is negative or wider than 64 bits.
    """
    if not 0 <= counter <= MAX_COUNTER:
        raise ValueError(f"counter {counter} is out of the 64-bit range.")

    return counter.to_bytes(8, byteorder="big")


def dynamic_truncation(hmac_bytes: bytes) -> int:
    """Extract a 31-bit integer from an HMAC digest via dynamic truncation.

    Args:
        hmac_bytes: Raw HMAC digest bytes (20 bytes for SHA-1).

    Returns:
        31-bit truncated integer derived from the HMAC digest.
    """
    offset = hmac_bytes[19] & 0x0F

    four_bytes = hmac_bytes[offset:offset+4]

    code_32bits = int.from_bytes(four_bytes, byteorder="big")

    return code_32bits & 0x7FFFFFFF


def derive_code(seed: bytes, counter: int) -> str:
    """Derive a 6-digit HOTP code from a seed and a counter.

    Args:
        seed: Secret key as bytes used to compute the HMAC.
        counter: Time-step or event counter.

    Returns:
        6-digit code string zero-padded.
    """
    hs_hmac = hmac.new(seed, counter_to_bytes(counter), hashlib.sha1)
    code = dynamic_truncation(hs_hmac.digest())
    otp = code % 10**DIGITS

    return str(otp).zfill(DIGITS)


def time_step(timestamp: int, window: int) -> int:
    """Return the index of the window containing timestamp.

    Raises:
        InvalidWindow: If window is not a positive integer.
    """
    if window <= 0:
        raise InvalidWindow(f"window must be positive, got {window}.")

    return timestamp // window


def seconds_remaining(timestamp: int, window: int) -> int:
    """Return the seconds left before the current window ends."""
    if window <= 0:
        raise InvalidWindow(f"window must be positive, got {window}.")

    return window - timestamp % window


def derive_windowed_code(seed: bytes, timestamp: int, window: int) -> str:
    """Derive the 6-digit TOTP code of a seed at a given timestamp.

    Args:
        seed: Secret key as bytes.
        timestamp: UNIX timestamp in seconds.
        window: Time step duration in seconds.

    Returns:
        6-digit code string zero-padded.
    """
    return derive_code(seed, time_step(timestamp, window))

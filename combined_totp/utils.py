import time

from combined_totp.errors import ClockUnavailable


def open_file(file: str, mode: str = "r") -> str | bytes:
    """Read and return the entire content of a file.

    Args:
        file: Path to the file to read.
        mode: Open mode, "r" for text or "rb" for bytes.

    Returns:
        Content of the file.
    """
    with open(file, mode) as file:
        data = file.read()

    return data


def current_unix_time() -> int:
    """Return the host wall-clock time in whole seconds since the epoch.

    Raises:
        ClockUnavailable: If the host clock cannot be read or is set
            before the epoch.
    """
    try:
        now = int(time.time())
    except (OSError, OverflowError, ValueError) as e:
        raise ClockUnavailable(f"host clock unavailable: {e}") from e

    if now < 0:
        raise ClockUnavailable(f"host clock is before the epoch: {now}")

    return now

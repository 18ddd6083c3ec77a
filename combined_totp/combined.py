"""Combined tokens: six TOTP codes generated and verified together.

A combined token joins the codes of six independent seeds, in the order
the seeds were given, as DDDDDD-DDDDDD-DDDDDD-DDDDDD-DDDDDD-DDDDDD.
Verification accepts tokens generated a few windows away from the
claimed timestamp to tolerate clock drift.
"""

import re
import hmac
import logging as log
from collections.abc import Sequence

from combined_totp.errors import InvalidSeed, InvalidSeedCount, InvalidWindow
from combined_totp.otp import MAX_COUNTER, derive_windowed_code

SEED_COUNT = 6
DELIMITER = "-"
SECONDS = "seconds"
DEFAULT_ALLOWANCE = 2

TOKEN_RE = re.compile("[0-9]{6}(?:-[0-9]{6}){5}")


def normalize_seeds(seeds: Sequence[str | bytes]) -> list[bytes]:
    """Check the seed sequence and return its seeds as bytes.

    String seeds are encoded as UTF-8. Order is preserved.

    Args:
        seeds: Exactly six non-empty seeds.

    Returns:
        List of six seeds as bytes.

    Raises:
        InvalidSeedCount: If there are not exactly six seeds.
        InvalidSeed: If seeds is a single str or bytes, or a seed is
            empty or neither str, bytes nor bytearray.
    """
    if isinstance(seeds, (str, bytes, bytearray)):
        raise InvalidSeed(
            f"expected a sequence of seeds, got {type(seeds).__name__}."
        )

    if len(seeds) != SEED_COUNT:
        raise InvalidSeedCount(
            f"expected {SEED_COUNT} seeds, got {len(seeds)}."
        )

    normalized = []
    for index, seed in enumerate(seeds):
        if isinstance(seed, str):
            seed = seed.encode("utf-8")
        elif not isinstance(seed, (bytes, bytearray)):
            raise InvalidSeed(
                f"seed #{index + 1} must be str or bytes,"
                f" got {type(seed).__name__}."
            )
        if not seed:
            raise InvalidSeed(f"seed #{index + 1} is empty.")
        normalized.append(bytes(seed))

    return normalized


def is_combined_token(candidate: object) -> bool:
    """Check that candidate has the shape of a combined token."""
    return isinstance(candidate, str) and bool(TOKEN_RE.fullmatch(candidate))


def drift_offsets(allowance: int) -> list[int]:
    """Return the window offsets accepted for a drift allowance.

    The allowance is split between past and future windows, the future
    side taking the extra window when it is odd: 0 gives [0], 1 gives
    [0, 1], 2 gives [0, 1, -1] and 3 gives [0, 1, -1, 2]. Offsets are
    ordered from the current window outward.

    Args:
        allowance: Number of adjacent windows accepted besides the
            current one.

    Returns:
        List of allowance + 1 offsets, in windows.
    """
    past = allowance // 2
    future = allowance - past

    offsets = [0]
    for step in range(1, future + 1):
        offsets.append(step)
        if step <= past:
            offsets.append(-step)

    return offsets


def generate_combined_token(
    seeds: Sequence[str | bytes],
    timestamp: int,
    window: int,
) -> str:
    """Generate a combined token from six seeds.

    Args:
        seeds: Six secret seeds, in slot order.
        timestamp: UNIX timestamp in seconds.
        window: Time step duration in seconds.

    Returns:
        Six 6-digit codes joined with hyphens.

    Raises:
        InvalidSeedCount: If there are not exactly six seeds.
        InvalidSeed: If a seed is empty or not str or bytes.
        InvalidWindow: If window is not positive.
    """
    seeds = normalize_seeds(seeds)

    if window <= 0:
        raise InvalidWindow(f"window must be positive, got {window}.")

    codes = [derive_windowed_code(seed, timestamp, window) for seed in seeds]

    return DELIMITER.join(codes)


def verify_combined_token(
    seeds: Sequence[str | bytes],
    timestamp: int,
    candidate: str,
    window: int,
    allowance: int = DEFAULT_ALLOWANCE,
    unit: str = SECONDS,
) -> bool:
    """Verify a combined token within a drift allowance.

    Malformed candidates, unknown units and invalid windows are
    rejected before any HMAC is computed. Wrong and expired tokens
    are not told apart.

    Args:
        seeds: The six seeds used at generation, in the same order.
        timestamp: UNIX timestamp in seconds the token is checked at.
        candidate: Combined token to verify.
        window: Time step duration in seconds.
        allowance: Number of adjacent windows accepted, see
            drift_offsets().
        unit: Unit of the window; only "seconds" is supported. The
            short tag "s" used by earlier combined-token tools is not
            recognized and makes verification return False.

    Returns:
        True if the candidate matches a token of an accepted window.

    Raises:
        InvalidSeedCount: If there are not exactly six seeds.
        InvalidSeed: If a seed is empty or not str or bytes.
    """
    seeds = normalize_seeds(seeds)

    if unit != SECONDS:
        log.debug(f"Token rejected: unsupported unit {unit!r}")
        return False

    if window <= 0 or allowance < 0:
        log.debug(
            f"Token rejected: invalid window {window} "
            f"or allowance {allowance}"
        )
        return False

    if not is_combined_token(candidate):
        log.debug("Token rejected: malformed token")
        return False

    candidate_bytes = candidate.encode("ascii")

    for offset in drift_offsets(allowance):
        shifted = timestamp + offset * window
        if shifted < 0 or shifted // window > MAX_COUNTER:
            continue

        expected = generate_combined_token(seeds, shifted, window)
        if hmac.compare_digest(expected.encode("ascii"), candidate_bytes):
            log.debug(f"Token matched at window offset {offset:+d}")
            return True

    log.debug(f"Token rejected: no match within allowance {allowance}")
    return False

"""Errors raised on misuse of the combined token functions."""


class InvalidSeedCount(ValueError):
    """Seed sequence does not hold exactly six seeds."""


class InvalidSeed(ValueError):
    """A seed is empty."""


class InvalidWindow(ValueError):
    """Window duration is not a positive number of seconds."""


class ClockUnavailable(OSError):
    """The host clock could not produce a timestamp."""

"""Error types raised by the session core."""


class InvariantViolation(Exception):
    """
    A programming error inside the session core.

    Raised for out-of-range coordinates, digits outside 1-9 and attempts to
    alter a given cell. These never describe a user-facing failure: the
    command queue either re-raises them (strict mode) or logs them and treats
    the offending command as a no-op.
    """

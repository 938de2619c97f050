"""Resumption error hierarchy — classify failures by type, not by message."""


class ResumptionError(Exception):
    """Base class for all resumption errors."""
    pass

class InvalidArgument(ResumptionError, ValueError):
    """A required field was None or missing at construction time."""
    pass

class DecodeError(ResumptionError, ValueError):
    """Token or JSON payload could not be decoded into a cookie."""
    pass


def require(name: str, value):
    """Raise InvalidArgument if value is None, otherwise return it."""
    if value is None:
        raise InvalidArgument(f"'{name}' must not be None")
    return value

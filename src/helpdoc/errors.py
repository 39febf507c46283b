"""Exception taxonomy for helpdoc.

Every failure is surfaced synchronously to the immediate caller. There is
no retry layer.
"""


class HelpDocError(Exception):
    """Base class for all helpdoc errors."""

    pass


class NotFoundError(HelpDocError):
    """Raised when a directory, command, or module does not exist."""

    pass


class MalformedInputError(HelpDocError):
    """Raised when a help extract cannot be read or decoded as text."""

    pass


class HostError(HelpDocError):
    """Raised when the host shell fails or is not available."""

    pass


class ConfigError(HelpDocError):
    """Raised when configuration operations fail."""

    pass


__all__ = [
    "ConfigError",
    "HelpDocError",
    "HostError",
    "MalformedInputError",
    "NotFoundError",
]

"""Exceptions raised by the textcheck glue code; the checks themselves never raise."""


class TextCheckError(Exception):
    """Base class for textcheck errors."""


class ConfigError(TextCheckError):
    """Raised when a project configuration file is malformed."""


class FixConflictError(TextCheckError):
    """Raised when an autofix no longer matches the buffer it targets."""

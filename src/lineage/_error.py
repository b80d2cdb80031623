"""Error classes and helpers"""

__all__ = ["LineageError", "ConfigError", "UsageError", "LifecycleError"]


class LineageError(Exception):
    """Base class for errors raised by lineage."""


class ConfigError(LineageError):
    """Malformed method table entry or initializer configuration.

    Args:
        message: (str) Error description
        key: (str | None) Method name or config key that was rejected

    Attributes:
        message: (str) Error description
        key: (str | None) Method name or config key that was rejected
    """

    def __init__(self, message, key=None):
        self.message = message
        self.key = key
        super().__init__(message)


class UsageError(LineageError):
    """Operation called in a way the Class does not support."""


class LifecycleError(LineageError):
    """Instance was used after it was disposed.

    Args:
        message: (str) Error description
        instance: (Instance) The disposed instance
    """

    def __init__(self, message, instance=None):
        self.message = message
        self.instance = instance
        super().__init__(message)

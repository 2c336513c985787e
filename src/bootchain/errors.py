__all__ = [
    "BootstrapError",
    "InvalidArgumentError",
    "DependencyError",
    "UnresolvableError",
    "AmbiguousError",
    "DetectionError",
    "DetectionWarning",
]


class BootstrapError(Exception):
    """Base class for every error raised by the bootstrap chain."""

    pass


class InvalidArgumentError(BootstrapError, ValueError):
    """Raised synchronously when construction input has the wrong shape."""

    pass


class DependencyError(BootstrapError):
    """Raised when a module parameter cannot be bound to a value."""

    pass


class UnresolvableError(DependencyError):
    """Raised when no variable, service or default exists for a parameter."""

    pass


class AmbiguousError(DependencyError):
    """Raised when a parameter name exists both as a variable and as a service."""

    pass


class DetectionError(BootstrapError, RuntimeError):
    """Raised when an environment detector fails or returns an invalid value."""

    pass


class DetectionWarning(RuntimeWarning):
    """Issued instead of DetectionError where an environment is rendered as a string."""

    pass

"""Exceptions raised or used as rejection reasons by facetwire."""

__all__ = [
    "WiringError",
    "UnresolvedReferenceError",
    "DependencyError",
    "MissingMethodError",
    "DestroyError",
    "ConfigurationError",
    "PromiseStateError",
    "RejectionError",
]


class WiringError(Exception):
    """Base class for all errors raised while wiring a context."""

    pass


class UnresolvedReferenceError(WiringError):
    """Raised when a reference names no component in the context or its parents."""

    def __init__(self, name: str):
        super().__init__(f"Unresolved reference '{name}'")
        self.name = name


class DependencyError(WiringError):
    """Raised when component references form a cycle and cannot be ordered."""

    pass


class MissingMethodError(WiringError):
    """Raised when an invocation targets a name that is not callable."""

    def __init__(self, method_name: str, component):
        super().__init__(f"Cannot invoke '{method_name}' on {component!r}: not callable")
        self.method_name = method_name
        self.component = component


class DestroyError(WiringError):
    """Raised when one or more teardown invocations failed.

    Attributes:
        errors: Every collected failure, in the order the teardowns were registered.
    """

    def __init__(self, errors: list):
        super().__init__(f"{len(errors)} teardown(s) failed: {errors}")
        self.errors = errors


class ConfigurationError(WiringError):
    """Raised when plugin options are unknown or invalid."""

    pass


class PromiseStateError(WiringError):
    """Raised when the value of a pending promise is read."""

    pass


class RejectionError(WiringError):
    """Wraps a rejection reason that is not an exception when it has to be raised."""

    def __init__(self, reason):
        super().__init__(f"Promise rejected with {reason!r}")
        self.reason = reason

class NetworkConfigError(ValueError):
    """Raised when a network, layer or trainer is assembled from a bad configuration."""


class InvariantViolation(RuntimeError):
    """Raised when a call breaks a contract of the engine (a caller bug)."""


class UnsupportedOperation(InvariantViolation, NotImplementedError):
    """Raised when a layer is asked for an operation its kind does not have."""

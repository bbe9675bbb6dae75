class PortalBackendError(RuntimeError):
    """Raised when the portal API answers non-2xx or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PortalNotFoundError(PortalBackendError):
    """Raised when the requested booking or profile does not exist."""
    pass


class PortalValidationError(ValueError):
    """Raised when local input is rejected before any request is made."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class InvalidTransitionError(RuntimeError):
    """Raised when a flow action is not allowed from the current step."""
    pass

"""Error taxonomy shared by services and adapters."""


class OrMasteryError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(OrMasteryError):
    """A required field is empty or an input has the wrong type."""


class AuthError(OrMasteryError):
    """No session exists, or it expired."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class NotFoundError(OrMasteryError):
    """A scoped query matched no row."""


class RemoteError(OrMasteryError):
    """The identity, data, or storage collaborator reported a failure."""

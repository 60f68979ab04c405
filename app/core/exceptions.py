"""Domain errors raised by the service layer.

Routes do not catch these; ``app.main`` maps each class to an HTTP status.
"""


class PromptVaultError(Exception):
    """Base class for service errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(PromptVaultError):
    """Referenced prompt, user or settings record does not exist."""

    status_code = 404


class PermissionDenied(PromptVaultError):
    """Caller does not own the referenced record."""

    status_code = 403


class ValidationError(PromptVaultError):
    """A required text field is empty or an argument is malformed."""

    status_code = 422


class ConfigurationError(PromptVaultError):
    """A required secret or credential is not configured at all."""

    status_code = 400


class UpstreamError(PromptVaultError):
    """Third-party completion call failed."""

    status_code = 502


class InvalidCredential(UpstreamError):
    """The completion service rejected the stored API key."""

    status_code = 401


class ServiceError(UpstreamError):
    """Any other completion service failure, including empty responses."""

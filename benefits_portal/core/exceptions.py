from typing import Any, Optional


class PortalError(Exception):
    """Base class for domain errors that map onto an HTTP status."""
    status_code = 500

    def __init__(self, detail: str, details: Optional[Any] = None):
        self.detail = detail
        self.details = details
        super().__init__(detail)


class ValidationError(PortalError):
    status_code = 400


class AuthenticationError(PortalError):
    status_code = 401


class AuthorizationError(PortalError):
    status_code = 403


class NotFoundError(PortalError):
    status_code = 404

    def __init__(self, resource: str, details: Optional[Any] = None):
        super().__init__(f"{resource} not found", details)


class ConflictError(PortalError):
    status_code = 409


class ProviderError(PortalError):
    """The AI provider could not be reached or returned an unusable reply."""
    status_code = 500


class GenerationError(PortalError):
    """Generated content could not be turned into the expected structure."""
    status_code = 500

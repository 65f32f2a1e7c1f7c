"""Custom exceptions for the studio pipeline service."""


class StudioPipelineException(Exception):
    """Base exception for the studio pipeline service."""

    pass


class ValidationError(StudioPipelineException):
    """Raised when validation fails."""

    pass


class NotFoundError(StudioPipelineException):
    """Raised when a resource is not found."""

    pass


class ConfigurationError(StudioPipelineException):
    """Raised when configuration is invalid."""

    pass


class AuthorizationError(StudioPipelineException):
    """Raised when a caller touches another tenant's data."""

    pass

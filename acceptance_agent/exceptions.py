"""
Custom exceptions for the application.
"""


class BaseAppError(Exception):
    """Base exception class for application errors."""

    pass


class LLMError(BaseAppError):
    """Exception raised for LLM-related errors."""

    pass


class ConfigurationError(BaseAppError):
    """Exception raised for configuration errors (missing credentials or keys)."""

    pass


class CapabilityUnavailableError(BaseAppError):
    """Exception raised when the toolkit client lacks a resource group or operation."""

    pass


class RemoteOperationError(BaseAppError):
    """Exception raised when a call into the payments toolkit fails."""

    pass


class RequestShapeError(BaseAppError):
    """Exception raised when a caller sends an unsupported action or value."""

    pass

"""
Custom exceptions for VWS client library.
"""


class VWSClientError(Exception):
    """Base exception for VWS client errors."""
    pass


class ConfigurationError(VWSClientError):
    """Raised when client configuration is invalid."""
    pass


class MissingTargetIdError(VWSClientError, ValueError):
    """Raised when an operation needs a target id and none was given."""
    pass


class InvalidImageError(VWSClientError, ValueError):
    """Raised when image data is empty or cannot be encoded."""
    pass


class ResponseParseError(VWSClientError):
    """Raised when a response body is not a JSON object with a result code."""
    pass


class InvalidPayloadError(VWSClientError, ValueError):
    """Raised when a request body cannot be encoded as strict JSON."""
    pass

"""
VWS Client Library

A Python client for the Vuforia Web Services target management API.
Requests are signed with the service's HMAC-SHA1 scheme and dispatched
asynchronously; every call resolves to exactly one response.

Example usage:
    from vws_client import VWSClient

    with VWSClient("access-key", "secret-key") as client:
        summary = client.retrieve_database_summary().result()
        print(summary.result_code, summary.name)
"""

from .client import VWSClient
from .builder import Credentials, VWSRequest
from .dispatcher import PendingCall, RequestState
from .exceptions import (
    VWSClientError,
    ConfigurationError,
    MissingTargetIdError,
    InvalidImageError,
    ResponseParseError,
    InvalidPayloadError
)
from .models import (
    DatabaseSummary,
    OperationResponse,
    ResultOutcome,
    TargetPayload,
    TargetRecord,
    TargetSummary,
    VWSResult,
    decode_metadata
)
from .constants import (
    VWS_URL,
    RESULT_SUCCESS,
    RESULT_TARGET_CREATED,
    DEFAULT_CONFIG,
    TransportError
)

__version__ = "1.0.0"
__all__ = [
    "VWSClient",
    "Credentials",
    "VWSRequest",
    "PendingCall",
    "RequestState",
    "VWSClientError",
    "ConfigurationError",
    "MissingTargetIdError",
    "InvalidImageError",
    "ResponseParseError",
    "InvalidPayloadError",
    "DatabaseSummary",
    "OperationResponse",
    "ResultOutcome",
    "TargetPayload",
    "TargetRecord",
    "TargetSummary",
    "VWSResult",
    "decode_metadata",
    "VWS_URL",
    "RESULT_SUCCESS",
    "RESULT_TARGET_CREATED",
    "DEFAULT_CONFIG",
    "TransportError"
]

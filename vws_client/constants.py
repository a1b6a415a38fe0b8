"""
Constants for the VWS client library.
Wire-level names and values expected by the Vuforia Web Services API.
"""

from enum import Enum

# Service origin
VWS_URL = "https://vws.vuforia.com"

# HTTP Headers
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_DATE = "Date"

# Authorization: "VWS <access_key>:<signature>"
AUTH_SCHEME = "VWS"

CONTENT_TYPE_JSON = "application/json"

# Result codes reported by the service on success
RESULT_SUCCESS = "Success"
RESULT_TARGET_CREATED = "TargetCreated"
SUCCESS_CODES = frozenset({RESULT_SUCCESS, RESULT_TARGET_CREATED})


class TransportError(str, Enum):
    """Synthetic result codes for calls that never produced a response body."""

    REQUEST_ERROR = "Request Finished with Error"
    ABORTED = "Request Aborted"
    CONNECTION_TIMED_OUT = "Connection Timed Out"
    TIMED_OUT = "Processing the request Timed Out"


TRANSPORT_ERROR_CODES = frozenset(error.value for error in TransportError)

# Default configuration values
DEFAULT_CONFIG = {
    'connect_timeout': 10,      # seconds to establish the connection
    'read_timeout': 30,         # seconds to wait for the response once connected
    'max_workers': 4,           # concurrent in-flight calls per client
    'content_type': CONTENT_TYPE_JSON,
}

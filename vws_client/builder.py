"""
Request construction for each VWS operation.

A builder turns caller input into a fully signed ``VWSRequest``. Nothing
here performs I/O; the request is handed to the dispatcher afterwards.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Type
from urllib.parse import quote

from .constants import (
    CONTENT_TYPE_JSON,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    HEADER_DATE,
)
from .exceptions import InvalidImageError, InvalidPayloadError, MissingTargetIdError
from .models import (
    DatabaseSummary,
    OperationResponse,
    TargetPayload,
    TargetSummary,
    VWSResult,
    encode_image,
    encode_metadata,
)
from .signer import authorization_header, content_md5, http_date, sign


@dataclass(frozen=True)
class Credentials:
    """Access/secret key pair used to sign requests."""

    access_key: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True)
class VWSRequest:
    """A signed request ready to send. ``body`` is exactly what was hashed."""

    method: str
    path: str
    body: bytes
    headers: Dict[str, str]
    response_type: Type[VWSResult] = OperationResponse


def encode_body(data: Optional[Dict[str, Any]]) -> bytes:
    """Serialize a JSON body; no data means an empty body."""
    if data is None:
        return b''
    try:
        return json.dumps(data, separators=(',', ':'), allow_nan=False).encode('utf-8')
    except ValueError as e:
        raise InvalidPayloadError(f"Request body is not valid JSON: {e}") from e


def build_request(
    credentials: Credentials,
    method: str,
    path: str,
    data: Optional[Dict[str, Any]] = None,
    response_type: Type[VWSResult] = OperationResponse,
    content_type: str = CONTENT_TYPE_JSON,
    date: Optional[str] = None,
) -> VWSRequest:
    """
    Serialize, hash and sign one request.

    Args:
        credentials: Keys to sign with
        method: HTTP method
        path: Request path
        data: JSON body fields (None for bodiless calls)
        response_type: Response shape the body will be parsed into
        content_type: Content-Type header value
        date: Date header value (defaults to now)

    Returns:
        VWSRequest carrying Authorization, Content-Type and Date headers
    """
    body = encode_body(data)
    date = date or http_date()
    signature = sign(credentials.secret_key, method, content_md5(body), content_type, date, path)

    headers = {
        HEADER_AUTHORIZATION: authorization_header(credentials.access_key, signature),
        HEADER_CONTENT_TYPE: content_type,
        HEADER_DATE: date,
    }
    return VWSRequest(method, path, body, headers, response_type)


def _require_target_id(target_id: str) -> str:
    if not target_id or not str(target_id).strip():
        raise MissingTargetIdError("target_id cannot be empty")
    # The signed path must equal the path on the wire.
    return quote(str(target_id).strip(), safe='')


def _require_image(image: bytes) -> bytes:
    if not image:
        raise InvalidImageError("image data cannot be empty")
    return image


def create_target(credentials: Credentials, payload: TargetPayload, **kwargs) -> VWSRequest:
    return build_request(credentials, 'POST', '/targets', payload.model_dump(), **kwargs)


def retrieve_target(credentials: Credentials, target_id: str, **kwargs) -> VWSRequest:
    target_id = _require_target_id(target_id)
    return build_request(credentials, 'GET', f'/targets/{target_id}', **kwargs)


def retrieve_target_list(credentials: Credentials, **kwargs) -> VWSRequest:
    return build_request(credentials, 'GET', '/targets', **kwargs)


def retrieve_target_duplicates(credentials: Credentials, target_id: str, **kwargs) -> VWSRequest:
    target_id = _require_target_id(target_id)
    return build_request(credentials, 'GET', f'/duplicates/{target_id}', **kwargs)


def update_target(credentials: Credentials, target_id: str, payload: TargetPayload, **kwargs) -> VWSRequest:
    target_id = _require_target_id(target_id)
    return build_request(credentials, 'PUT', f'/targets/{target_id}', payload.model_dump(), **kwargs)


def _update_field(credentials: Credentials, target_id: str, name: str, value: Any, **kwargs) -> VWSRequest:
    # Partial update: only the changed field is sent, the service keeps the rest.
    target_id = _require_target_id(target_id)
    return build_request(credentials, 'PUT', f'/targets/{target_id}', {name: value}, **kwargs)


def update_target_name(credentials: Credentials, target_id: str, name: str, **kwargs) -> VWSRequest:
    return _update_field(credentials, target_id, 'name', name, **kwargs)


def update_target_width(credentials: Credentials, target_id: str, width: float, **kwargs) -> VWSRequest:
    return _update_field(credentials, target_id, 'width', float(width), **kwargs)


def update_target_image(credentials: Credentials, target_id: str, image: bytes, **kwargs) -> VWSRequest:
    return _update_field(credentials, target_id, 'image', encode_image(_require_image(image)), **kwargs)


def update_target_flag(credentials: Credentials, target_id: str, active_flag: bool, **kwargs) -> VWSRequest:
    return _update_field(credentials, target_id, 'active_flag', bool(active_flag), **kwargs)


def update_target_metadata(credentials: Credentials, target_id: str, metadata: str, **kwargs) -> VWSRequest:
    return _update_field(credentials, target_id, 'application_metadata', encode_metadata(metadata), **kwargs)


def delete_target(credentials: Credentials, target_id: str, **kwargs) -> VWSRequest:
    target_id = _require_target_id(target_id)
    return build_request(credentials, 'DELETE', f'/targets/{target_id}', **kwargs)


def retrieve_target_summary(credentials: Credentials, target_id: str, **kwargs) -> VWSRequest:
    target_id = _require_target_id(target_id)
    return build_request(credentials, 'GET', f'/summary/{target_id}', response_type=TargetSummary, **kwargs)


def retrieve_database_summary(credentials: Credentials, **kwargs) -> VWSRequest:
    return build_request(credentials, 'GET', '/summary', response_type=DatabaseSummary, **kwargs)


def make_payload(name: str, width: float, image: bytes, active_flag: bool, metadata: str) -> TargetPayload:
    """Validate raw caller input and build the create/full-update body."""
    return TargetPayload.from_raw(name, float(width), _require_image(image), active_flag, metadata)

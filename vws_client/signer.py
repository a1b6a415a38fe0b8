"""
Request signing for the VWS API.

The service authenticates every call by recomputing an HMAC-SHA1 over a
canonical string built from the request:

    METHOD \\n CONTENT-MD5 \\n CONTENT-TYPE \\n DATE \\n PATH

and comparing it with the signature carried in the Authorization header.
"""

import base64
import datetime
import email.utils
import hashlib
import hmac
from typing import Optional

from .constants import AUTH_SCHEME


def content_md5(body: bytes) -> str:
    """
    Compute the content digest of a request body.

    The digest is always computed, including for bodiless requests where
    it is the MD5 of zero bytes.

    Args:
        body: Exact bytes that will be sent

    Returns:
        Lowercase hex MD5 digest
    """
    return hashlib.md5(body).hexdigest()


def http_date(moment: Optional[datetime.datetime] = None) -> str:
    """
    Format a timestamp the way the Date header must carry it.

    Example: ``Mon, 01 Jan 2024 00:00:00 GMT``

    Args:
        moment: Timestamp to format (defaults to now, UTC)

    Returns:
        RFC 1123 date string
    """
    if moment is None:
        moment = datetime.datetime.now(datetime.timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=datetime.timezone.utc)
    else:
        moment = moment.astimezone(datetime.timezone.utc)
    return email.utils.format_datetime(moment, usegmt=True)


def string_to_sign(method: str, content_hash: str, content_type: str, date: str, path: str) -> str:
    """Build the newline-joined canonical string for a request."""
    return "\n".join([method, content_hash, content_type, date, path])


def sign(secret_key: str, method: str, content_hash: str, content_type: str, date: str, path: str) -> str:
    """
    Generate the request signature.

    Args:
        secret_key: Server secret key
        method: HTTP method
        content_hash: Lowercase hex MD5 of the body (see content_md5)
        content_type: Content-Type header value
        date: Date header value
        path: Request path, e.g. "/targets"

    Returns:
        Base64-encoded HMAC-SHA1 signature
    """
    message = string_to_sign(method, content_hash, content_type, date, path)
    mac = hmac.new(
        secret_key.encode('utf-8'),
        message.encode('utf-8'),
        hashlib.sha1
    )
    return base64.b64encode(mac.digest()).decode('ascii')


def sign_body(secret_key: str, method: str, body: bytes, content_type: str, date: str, path: str) -> str:
    """Sign a request given its raw body instead of a precomputed digest."""
    return sign(secret_key, method, content_md5(body), content_type, date, path)


def authorization_header(access_key: str, signature: str) -> str:
    """Build the Authorization header value: ``VWS <access_key>:<signature>``."""
    return f"{AUTH_SCHEME} {access_key}:{signature}"

"""
Unit tests for VWS request construction.
"""

import base64
import json

import pytest

from vws_client import builder
from vws_client.builder import Credentials, build_request, encode_body
from vws_client.constants import HEADER_AUTHORIZATION, HEADER_CONTENT_TYPE, HEADER_DATE
from vws_client.exceptions import InvalidImageError, InvalidPayloadError, MissingTargetIdError
from vws_client.models import DatabaseSummary, OperationResponse, TargetSummary
from vws_client.signer import content_md5, sign

DATE = "Mon, 01 Jan 2024 00:00:00 GMT"
IMAGE = b"\xff\xd8\xff\xe0fake-jpeg"


class TestBuildRequest:
    """Test generic request assembly."""

    @pytest.fixture
    def credentials(self):
        """Create test credentials."""
        return Credentials("test-access", "test-secret")

    def test_encode_body_empty(self):
        """Test no data gives an empty body."""
        assert encode_body(None) == b""

    def test_encode_body_compact_json(self):
        """Test JSON bodies use compact separators."""
        assert encode_body({"name": "box", "width": 1.5}) == b'{"name":"box","width":1.5}'

    def test_headers(self, credentials):
        """Test Authorization, Content-Type and Date headers."""
        request = build_request(credentials, "GET", "/targets", date=DATE)

        expected_signature = sign("test-secret", "GET", content_md5(b""), "application/json", DATE, "/targets")
        assert request.headers[HEADER_AUTHORIZATION] == f"VWS test-access:{expected_signature}"
        assert request.headers[HEADER_CONTENT_TYPE] == "application/json"
        assert request.headers[HEADER_DATE] == DATE

    def test_signature_covers_sent_body(self, credentials):
        """Test the signed digest is computed from the exact body bytes."""
        request = build_request(credentials, "PUT", "/targets/T1", {"name": "new"}, date=DATE)

        expected_signature = sign("test-secret", "PUT", content_md5(request.body),
                                  "application/json", DATE, "/targets/T1")
        assert request.headers[HEADER_AUTHORIZATION].endswith(":" + expected_signature)

    def test_default_date(self, credentials):
        """Test a Date header is generated when none is given."""
        request = build_request(credentials, "GET", "/summary")

        assert request.headers[HEADER_DATE].endswith(" GMT")

    def test_credentials_repr_hides_secret(self, credentials):
        """Test the secret key is not part of the repr."""
        assert "test-secret" not in repr(credentials)


class TestOperations:
    """Test method, path and body of each operation."""

    @pytest.fixture
    def credentials(self):
        """Create test credentials."""
        return Credentials("test-access", "test-secret")

    @pytest.fixture
    def payload(self):
        """Create a full target payload."""
        return builder.make_payload("box", 10.0, IMAGE, True, "meta")

    def test_create_target(self, credentials, payload):
        """Test create sends the full payload."""
        request = builder.create_target(credentials, payload, date=DATE)
        body = json.loads(request.body)

        assert request.method == "POST"
        assert request.path == "/targets"
        assert list(body) == ["name", "width", "image", "active_flag", "application_metadata"]
        assert body["name"] == "box"
        assert body["width"] == 10.0
        assert base64.b64decode(body["image"]) == IMAGE
        assert body["active_flag"] is True
        assert base64.b64decode(body["application_metadata"]) == b"meta"
        assert request.response_type is OperationResponse

    def test_update_target(self, credentials, payload):
        """Test full update sends all five fields."""
        request = builder.update_target(credentials, "T1", payload, date=DATE)

        assert request.method == "PUT"
        assert request.path == "/targets/T1"
        assert len(json.loads(request.body)) == 5

    @pytest.mark.parametrize("func,args,path", [
        (builder.retrieve_target, ("T1",), "/targets/T1"),
        (builder.retrieve_target_list, (), "/targets"),
        (builder.retrieve_target_duplicates, ("T1",), "/duplicates/T1"),
        (builder.retrieve_target_summary, ("T1",), "/summary/T1"),
        (builder.retrieve_database_summary, (), "/summary"),
    ])
    def test_get_operations(self, credentials, func, args, path):
        """Test bodiless GET operations."""
        request = func(credentials, *args, date=DATE)

        assert request.method == "GET"
        assert request.path == path
        assert request.body == b""

    def test_delete_target(self, credentials):
        """Test delete is a bodiless DELETE."""
        request = builder.delete_target(credentials, "T1", date=DATE)

        assert request.method == "DELETE"
        assert request.path == "/targets/T1"
        assert request.body == b""

    def test_summary_response_types(self, credentials):
        """Test summary calls parse into their own shapes."""
        assert builder.retrieve_target_summary(credentials, "T1").response_type is TargetSummary
        assert builder.retrieve_database_summary(credentials).response_type is DatabaseSummary

    @pytest.mark.parametrize("func,value,field,expected", [
        (builder.update_target_name, "renamed", "name", "renamed"),
        (builder.update_target_width, 2, "width", 2.0),
        (builder.update_target_flag, False, "active_flag", False),
        (builder.update_target_metadata, "héllo", "application_metadata",
         base64.b64encode("héllo".encode("utf-8")).decode("ascii")),
        (builder.update_target_image, IMAGE, "image", base64.b64encode(IMAGE).decode("ascii")),
    ])
    def test_partial_updates(self, credentials, func, value, field, expected):
        """Test partial updates carry exactly the changed field."""
        request = func(credentials, "T1", value, date=DATE)
        body = json.loads(request.body)

        assert request.method == "PUT"
        assert request.path == "/targets/T1"
        assert body == {field: expected}

    def test_update_name_body_is_minimal(self, credentials):
        """Test partial update body is compact JSON."""
        request = builder.update_target_name(credentials, "T1", "box", date=DATE)

        assert request.body == b'{"name":"box"}'

    @pytest.mark.parametrize("func,args", [
        (builder.retrieve_target, ()),
        (builder.retrieve_target_duplicates, ()),
        (builder.delete_target, ()),
        (builder.retrieve_target_summary, ()),
        (builder.update_target_name, ("name",)),
        (builder.update_target_width, (1.0,)),
        (builder.update_target_flag, (True,)),
        (builder.update_target_metadata, ("meta",)),
    ])
    @pytest.mark.parametrize("target_id", ["", "   ", None])
    def test_missing_target_id(self, credentials, func, args, target_id):
        """Test operations reject an empty target id."""
        with pytest.raises(MissingTargetIdError):
            func(credentials, target_id, *args)

    def test_missing_target_id_is_value_error(self, credentials):
        """Test the precondition error is also a ValueError."""
        with pytest.raises(ValueError):
            builder.delete_target(credentials, "")

    def test_empty_image_rejected(self, credentials):
        """Test empty image data is rejected."""
        with pytest.raises(InvalidImageError):
            builder.update_target_image(credentials, "T1", b"")

        with pytest.raises(InvalidImageError):
            builder.make_payload("box", 1.0, b"", True, "")

    @pytest.mark.parametrize("width", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_width_rejected(self, credentials, width):
        """Test NaN and infinite widths fail before signing."""
        with pytest.raises(InvalidPayloadError):
            builder.update_target_width(credentials, "T1", width)

        with pytest.raises(InvalidPayloadError):
            builder.create_target(credentials, builder.make_payload("box", width, IMAGE, True, ""))

    def test_encode_body_non_finite_is_value_error(self):
        """Test the payload error is also a ValueError."""
        with pytest.raises(ValueError):
            encode_body({"width": float("nan")})

    @pytest.mark.parametrize("target_id,path", [
        ("a b", "/targets/a%20b"),
        ("a/b", "/targets/a%2Fb"),
        ("a?b#c", "/targets/a%3Fb%23c"),
        ("f0e1d2c3", "/targets/f0e1d2c3"),
    ])
    def test_target_id_encoded_in_signed_path(self, credentials, target_id, path):
        """Test the signature covers the percent-encoded path that is sent."""
        request = builder.retrieve_target(credentials, target_id, date=DATE)

        expected_signature = sign("test-secret", "GET", content_md5(b""), "application/json", DATE, path)
        assert request.path == path
        assert request.headers[HEADER_AUTHORIZATION] == f"VWS test-access:{expected_signature}"

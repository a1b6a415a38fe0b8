"""
Request payloads and response shapes for the VWS API.

Every response carries ``result_code``. Other fields stay ``None`` unless the
service actually sent them, so an absent field is never mistaken for an
empty one. Parsing is field-tolerant: unknown keys are ignored and a field
whose value does not fit its type is dropped rather than failing the call.
"""

import base64
import json
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .constants import SUCCESS_CODES, TRANSPORT_ERROR_CODES, TransportError
from .exceptions import ResponseParseError

T = TypeVar("T", bound="VWSModel")


class ResultOutcome(str, Enum):
    """Coarse classification of a result code."""

    SUCCESS = "success"
    APPLICATION_ERROR = "application_error"
    TRANSPORT_ERROR = "transport_error"


def _validate_tolerant(cls: Type[T], data: Dict[str, Any], required: frozenset) -> T:
    payload = dict(data)
    while True:
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            bad = {err["loc"][0] for err in exc.errors() if err["loc"]}
            if not bad or bad & required:
                raise ResponseParseError(f"Invalid {cls.__name__} payload: {exc}") from exc
            for key in bad:
                payload.pop(key, None)


class VWSModel(BaseModel):
    """Base for all shapes decoded from service JSON."""

    model_config = ConfigDict(extra="ignore")

    required_fields: ClassVar[frozenset] = frozenset()

    @classmethod
    def from_payload(cls: Type[T], data: Dict[str, Any]) -> T:
        """Build from a decoded JSON object, dropping fields of the wrong type."""
        return _validate_tolerant(cls, data, cls.required_fields)


class TargetRecord(VWSModel):
    target_id: Optional[str] = None
    name: Optional[str] = None
    width: Optional[float] = None
    tracking_rating: Optional[int] = None   # -1 until processed, then 0-5
    active_flag: Optional[bool] = None
    reco_rating: Optional[str] = None

    def describe(self) -> str:
        return "\n".join([
            f"Name: {self.name}",
            f"Width: {self.width}",
            f"Active: {self.active_flag}",
            f"Rating: {self.tracking_rating}",
        ])


class VWSResult(VWSModel):
    """
    Common base of every response shape.

    ``result_code`` keeps the exact wire string; ``outcome`` classifies it.
    """

    result_code: str

    required_fields: ClassVar[frozenset] = frozenset({"result_code"})

    @classmethod
    def transport_error(cls: Type[T], error: TransportError) -> T:
        """Build a response for a call that failed before any body arrived."""
        return cls(result_code=error.value)

    @property
    def outcome(self) -> ResultOutcome:
        if self.result_code in TRANSPORT_ERROR_CODES:
            return ResultOutcome.TRANSPORT_ERROR
        if self.result_code in SUCCESS_CODES:
            return ResultOutcome.SUCCESS
        return ResultOutcome.APPLICATION_ERROR

    @property
    def is_success(self) -> bool:
        return self.outcome is ResultOutcome.SUCCESS

    @property
    def is_transport_error(self) -> bool:
        return self.outcome is ResultOutcome.TRANSPORT_ERROR

    @property
    def application_error(self) -> Optional[str]:
        """The service's error code, or None when the call succeeded or never reached it."""
        if self.outcome is ResultOutcome.APPLICATION_ERROR:
            return self.result_code
        return None


class OperationResponse(VWSResult):
    """Response to target create/retrieve/update/delete and list calls."""

    transaction_id: Optional[str] = None
    target_id: Optional[str] = None
    target_record: Optional[TargetRecord] = None
    similar_targets: Optional[List[str]] = None
    results: Optional[List[str]] = None
    status: Optional[str] = None

    @field_validator("target_record", mode="before")
    @classmethod
    def _tolerant_record(cls, value):
        if isinstance(value, dict):
            try:
                return TargetRecord.from_payload(value)
            except ResponseParseError:
                return None
        return value


class TargetSummary(VWSResult):
    transaction_id: Optional[str] = None
    database_name: Optional[str] = None
    target_name: Optional[str] = None
    upload_date: Optional[str] = None
    active_flag: Optional[bool] = None
    status: Optional[str] = None
    tracking_rating: Optional[int] = None
    reco_rating: Optional[str] = None
    total_recos: Optional[int] = None
    current_month_recos: Optional[int] = None
    previous_month_recos: Optional[int] = None

    def describe(self) -> str:
        return "\n".join([
            f"DB Name: {self.database_name}",
            f"Name: {self.target_name}",
            f"Date: {self.upload_date}",
            f"Status: {self.status}",
            f"Total Recos: {self.total_recos}",
            f"Current Month: {self.current_month_recos}",
            f"Previous Month: {self.previous_month_recos}",
        ])


class DatabaseSummary(VWSResult):
    transaction_id: Optional[str] = None
    name: Optional[str] = None
    active_images: Optional[int] = None
    inactive_images: Optional[int] = None
    failed_images: Optional[int] = None

    def describe(self) -> str:
        return "\n".join([
            f"Name: {self.name}",
            f"Active images: {self.active_images}",
            f"Failed images: {self.failed_images}",
            f"Inactive images: {self.inactive_images}",
        ])


class TargetPayload(BaseModel):
    """
    Body of create and full-update calls.

    ``image`` and ``application_metadata`` hold base64 text; use
    ``from_raw`` to build one from JPEG bytes and plain-text metadata.
    """

    name: str
    width: float
    image: str
    active_flag: bool
    application_metadata: str

    @classmethod
    def from_raw(cls, name: str, width: float, image: bytes, active_flag: bool, metadata: str) -> "TargetPayload":
        return cls(
            name=name,
            width=width,
            image=encode_image(image),
            active_flag=active_flag,
            application_metadata=encode_metadata(metadata),
        )


def encode_image(image: bytes) -> str:
    """Base64-encode JPEG bytes for the ``image`` field."""
    return base64.b64encode(image).decode('ascii')


def encode_metadata(metadata: str) -> str:
    """Base64-encode plain-text metadata as UTF-8."""
    return base64.b64encode(metadata.encode('utf-8')).decode('ascii')


def decode_metadata(value: str) -> str:
    """Inverse of encode_metadata."""
    return base64.b64decode(value).decode('utf-8')


def parse_response(response_type: Type[T], body: Union[bytes, str]) -> T:
    """
    Decode a response body into ``response_type``.

    Raises:
        ResponseParseError: If the body is not a JSON object carrying a result code
    """
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise ResponseParseError(f"Response body is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ResponseParseError(f"Expected a JSON object, got {type(data).__name__}")

    return response_type.from_payload(data)

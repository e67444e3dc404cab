"""Domain models for the slot request admin tool.

Pydantic models for the entities the request-list controller holds in
memory. Wire fields are camelCase (as the backend sends them); attributes
are snake_case and populated through aliases.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_TOTAL = 0
DEFAULT_PAGES = 1


class RequestStatus(str, Enum):
    """Slot request lifecycle status.

    Valid transitions:
    - pending → approved
    - pending → rejected
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def classify_status(value: Any) -> RequestStatus:
    """Map a wire status to one of the three display states.

    Anything that is not exactly "approved" or "rejected" is pending.
    """
    if isinstance(value, RequestStatus):
        return value
    if value == RequestStatus.APPROVED.value:
        return RequestStatus.APPROVED
    if value == RequestStatus.REJECTED.value:
        return RequestStatus.REJECTED
    return RequestStatus.PENDING


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _meta_int(value: Any, default: int, minimum: int) -> int:
    """Coerce a metadata value to a whole number >= ``minimum``, else ``default``.

    Missing, non-numeric, non-finite and fractional values fall back;
    "2.7" is not rounded to 2.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number) or not number.is_integer() or number < minimum:
        return default
    return int(number)


def _positive_int(value: Any, default: int) -> int:
    return _meta_int(value, default, 1)


def _non_negative_int(value: Any, default: int) -> int:
    return _meta_int(value, default, 0)


class SlotRequestUser(BaseModel):
    """User who filed the slot request."""

    model_config = ConfigDict(extra="allow")

    email: str | None = None


class SlotRequestVehicle(BaseModel):
    """Vehicle the slot is requested for."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    plate_number: str | None = Field(default=None, alias="plateNumber")
    vehicle_type: str | None = Field(default=None, alias="vehicleType")


class SlotRequest(BaseModel):
    """A user's request to reserve a parking slot."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: int | str
    user: SlotRequestUser | None = None
    vehicle: SlotRequestVehicle | None = None
    slot_number: str | None = Field(default=None, alias="slotNumber")
    request_status: RequestStatus = Field(default=RequestStatus.PENDING, alias="requestStatus")
    created_at: datetime | None = Field(default=None, alias="createdAt")

    @field_validator("request_status", mode="before")
    @classmethod
    def validate_request_status(cls, v: Any) -> RequestStatus:
        return classify_status(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def validate_created_at(cls, v: Any) -> datetime | None:
        return _parse_timestamp(v)

    @field_validator("slot_number", mode="before")
    @classmethod
    def validate_slot_number(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        return str(v)

    @property
    def is_actionable(self) -> bool:
        """Only pending requests can be approved or rejected."""
        return self.request_status is RequestStatus.PENDING

    def matches_id(self, request_id: int | str) -> bool:
        """Compare ids across int/str representations."""
        return str(self.id) == str(request_id)


class Pagination(BaseModel):
    """Current page window over the server-side request list.

    ``page`` may temporarily exceed ``pages`` after a user-driven page
    change; the next fetch corrects it.
    """

    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_LIMIT, gt=0)
    total: int = Field(default=DEFAULT_TOTAL, ge=0)
    pages: int = Field(default=DEFAULT_PAGES, ge=1)

    @classmethod
    def from_meta(cls, meta: Any, default_limit: int = DEFAULT_LIMIT) -> "Pagination":
        """Build pagination from list response metadata.

        Args:
            meta: ``{"currentPage", "limit", "totalItems", "totalPages"}`` (any may be missing)
            default_limit: Fallback when ``limit`` is missing or unusable

        Returns:
            Pagination with every field numeric
        """
        if not isinstance(meta, dict):
            meta = {}
        return cls(
            page=_positive_int(meta.get("currentPage"), DEFAULT_PAGE),
            limit=_positive_int(meta.get("limit"), default_limit),
            total=_non_negative_int(meta.get("totalItems"), DEFAULT_TOTAL),
            pages=_positive_int(meta.get("totalPages"), DEFAULT_PAGES),
        )

    @property
    def range_start(self) -> int:
        """1-based index of the first row on this page (0 when empty)."""
        if self.total == 0:
            return 0
        return (self.page - 1) * self.limit + 1

    @property
    def range_end(self) -> int:
        """1-based index of the last row on this page."""
        return min(self.page * self.limit, self.total)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages


class SlotRequestPage(BaseModel):
    """One page of slot requests as returned by the list operation."""

    data: list[SlotRequest] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)

    @classmethod
    def from_response(cls, body: Any, default_limit: int = DEFAULT_LIMIT) -> "SlotRequestPage":
        """Parse a list response body.

        Raises:
            pydantic.ValidationError: If an entry in ``data`` is malformed
        """
        if not isinstance(body, dict):
            body = {}
        data = body.get("data")
        if not isinstance(data, list):
            data = []
        return cls(
            data=[SlotRequest.model_validate(item) for item in data],
            pagination=Pagination.from_meta(body.get("meta"), default_limit=default_limit),
        )


class ActionResult(BaseModel):
    """Partial slot request returned by approve/reject."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    request_status: RequestStatus = Field(default=RequestStatus.PENDING, alias="requestStatus")
    slot_number: str | None = Field(default=None, alias="slotNumber")

    @field_validator("request_status", mode="before")
    @classmethod
    def validate_request_status(cls, v: Any) -> RequestStatus:
        return classify_status(v)

    @field_validator("slot_number", mode="before")
    @classmethod
    def validate_slot_number(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        return str(v)

    @classmethod
    def from_response(cls, body: Any) -> "ActionResult":
        """Parse an approve/reject response, unwrapping a ``data`` envelope."""
        if not isinstance(body, dict):
            body = {}
        if "requestStatus" not in body and isinstance(body.get("data"), dict):
            body = body["data"]
        return cls.model_validate(body)


class ErrorState(BaseModel):
    """Last user-facing error message; empty when the last operation succeeded."""

    api: str = ""

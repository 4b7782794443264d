"""Incident DTOs for request/response handling."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from ...domain.enums import DEFAULT_SORT_COLUMN, SORTABLE_COLUMNS, UPDATABLE_FIELDS, IncidentSeverity, IncidentStatus, SortOrder


class IncidentCreate(BaseModel):
    """Request DTO for incident creation, built after the payload passed validation."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., min_length=1, max_length=255, description="Short incident title")
    service: str = Field(..., min_length=1, max_length=100, description="Affected service")
    severity: IncidentSeverity = Field(..., description="Severity tier")
    status: IncidentStatus = Field(..., description="Lifecycle stage")
    owner: str | None = Field(default=None, max_length=255, description="Assignee identifier")
    summary: str | None = Field(default=None, description="Free-text summary")

    @field_validator("owner", "summary", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Empty optional fields are stored as null."""
        if isinstance(v, str) and v == "":
            return None
        return v


class IncidentUpdate(BaseModel):
    """
    Request DTO for partial incident updates.

    Every field is optional and enumerations are kept as plain strings here so
    the service can reject out-of-range values with its own messages. Only the
    fields present in the payload are applied.
    """

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(default=None, max_length=255)
    service: str | None = Field(default=None, max_length=100)
    severity: str | None = None
    status: str | None = None
    owner: str | None = Field(default=None, max_length=255)
    summary: str | None = None

    def changes(self) -> dict[str, Any]:
        """Return the fields explicitly sent by the client, in column order."""
        return {name: getattr(self, name) for name in UPDATABLE_FIELDS if name in self.model_fields_set}


class IncidentRecord(BaseModel):
    """A persisted incident as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    service: str
    severity: str
    status: str
    owner: str | None = None
    summary: str | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Some backends drop tzinfo; stored timestamps are always UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, v: datetime) -> str:
        return v.isoformat(timespec="microseconds")


class IncidentListQuery(BaseModel):
    """Normalized list parameters: paging, search, filters and sort."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    search: str | None = None
    services: list[str] = Field(default_factory=list)
    severities: list[str] = Field(default_factory=list)
    statuses: list[str] = Field(default_factory=list)
    sort_by: str = DEFAULT_SORT_COLUMN
    sort_order: SortOrder = SortOrder.DESC

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_params(
        cls,
        page: str | int | None = None,
        limit: str | int | None = None,
        search: str | None = None,
        services: str | None = None,
        severities: str | None = None,
        statuses: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        default_limit: int = 10,
        max_limit: int = 100,
    ) -> IncidentListQuery:
        """
        Build a query from raw query-string values.

        Unparseable or non-positive paging values fall back to the defaults,
        comma-separated filters are split with empty items dropped, and an
        unsupported sort column falls back to ``created_at``.
        """
        return cls(
            page=_positive_int(page, 1),
            limit=min(_positive_int(limit, default_limit), max_limit),
            search=search or None,
            services=split_csv(services),
            severities=split_csv(severities),
            statuses=split_csv(statuses),
            sort_by=sort_by if sort_by in SORTABLE_COLUMNS else DEFAULT_SORT_COLUMN,
            sort_order=SortOrder.parse(sort_order),
        )


class PaginationInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total_count: int = Field(alias="totalCount")
    total_pages: int = Field(alias="totalPages")

    @classmethod
    def build(cls, page: int, limit: int, total_count: int) -> PaginationInfo:
        return cls(page=page, limit=limit, total_count=total_count, total_pages=math.ceil(total_count / limit))


class IncidentListResponse(BaseModel):
    """Response DTO for the list endpoint."""

    incidents: list[IncidentRecord]
    pagination: PaginationInfo


def split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _positive_int(value: str | int | None, default: int) -> int:
    try:
        parsed = int(value) if value is not None else default
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 1 else default

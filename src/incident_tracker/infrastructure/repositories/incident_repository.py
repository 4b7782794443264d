"""SQL-backed incident persistence."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import ValidationError
from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement

from ...application.dtos import IncidentListQuery, IncidentRecord
from ...config import get_logger
from ...core.exceptions import RepositoryError
from ...domain.enums import SortOrder
from ..database.schema import incidents

logger = get_logger("repository.incidents")

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", f"{LIKE_ESCAPE}%").replace("_", f"{LIKE_ESCAPE}_")


def build_filters(query: IncidentListQuery) -> list[ColumnElement[bool]]:
    """
    Translate list parameters into WHERE conditions.

    Search matches title OR summary case-insensitively; each filter list is
    a set-membership test, and conditions are AND-ed together by the caller.
    """
    conditions: list[ColumnElement[bool]] = []

    if query.search:
        pattern = f"%{escape_like(query.search)}%"
        conditions.append(
            incidents.c.title.ilike(pattern, escape=LIKE_ESCAPE) | incidents.c.summary.ilike(pattern, escape=LIKE_ESCAPE)
        )
    if query.services:
        conditions.append(incidents.c.service.in_(query.services))
    if query.severities:
        conditions.append(incidents.c.severity.in_(query.severities))
    if query.statuses:
        conditions.append(incidents.c.status.in_(query.statuses))

    return conditions


def build_ordering(query: IncidentListQuery) -> list[ColumnElement[Any]]:
    column = incidents.c[query.sort_by]
    if query.sort_order is SortOrder.ASC:
        return [column.asc(), incidents.c.id.asc()]
    return [column.desc(), incidents.c.id.desc()]


def _to_record(row: RowMapping) -> IncidentRecord:
    try:
        return IncidentRecord.model_validate(dict(row))
    except ValidationError as e:
        raise RepositoryError("Stored incident is malformed", details={"incident_id": row.get("id"), "error": str(e)}) from e


class IncidentRepository:
    """
    Incident persistence on top of a shared SQLAlchemy engine.

    Each public method checks a connection out of the pool for its own
    statements only. Database failures are wrapped in RepositoryError.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def add(self, values: dict[str, Any]) -> IncidentRecord:
        """Insert one incident and return it as stored."""
        try:
            with self.engine.begin() as conn:
                conn.execute(insert(incidents).values(**values))
                row = conn.execute(select(incidents).where(incidents.c.id == values["id"])).mappings().one()
        except SQLAlchemyError as e:
            raise RepositoryError("Failed to create incident", details={"error": str(e)}) from e

        logger.debug("Incident inserted", incident_id=values["id"])
        return _to_record(row)

    def add_many(self, rows: Iterable[dict[str, Any]]) -> int:
        """Bulk insert incidents; used by the seed command."""
        batch = list(rows)
        if not batch:
            return 0
        try:
            with self.engine.begin() as conn:
                conn.execute(insert(incidents), batch)
        except SQLAlchemyError as e:
            raise RepositoryError("Failed to insert incidents", details={"error": str(e)}) from e
        return len(batch)

    def get(self, incident_id: str) -> IncidentRecord | None:
        try:
            with self.engine.connect() as conn:
                row = conn.execute(select(incidents).where(incidents.c.id == incident_id)).mappings().first()
        except SQLAlchemyError as e:
            raise RepositoryError("Failed to fetch incident", details={"error": str(e)}) from e

        return _to_record(row) if row is not None else None

    def list_page(self, query: IncidentListQuery) -> tuple[list[IncidentRecord], int]:
        """
        Return one page of incidents plus the total number of matches.

        Args:
            query: Normalized paging, filter and sort parameters

        Returns:
            Tuple of the page's records and the unpaged match count
        """
        conditions = build_filters(query)

        count_stmt = select(func.count()).select_from(incidents).where(*conditions)
        page_stmt = (
            select(incidents).where(*conditions).order_by(*build_ordering(query)).limit(query.limit).offset(query.offset)
        )

        try:
            with self.engine.connect() as conn:
                total_count = conn.execute(count_stmt).scalar_one()
                rows = conn.execute(page_stmt).mappings().all()
        except SQLAlchemyError as e:
            raise RepositoryError("Failed to fetch incidents", details={"error": str(e)}) from e

        logger.debug(
            "Incidents listed",
            total_count=total_count,
            returned=len(rows),
            sort_by=query.sort_by,
            sort_order=query.sort_order.value,
        )
        return [_to_record(row) for row in rows], total_count

    def update(self, incident_id: str, changes: dict[str, Any], updated_at: datetime) -> IncidentRecord | None:
        """Apply ``changes`` and the new update timestamp; None if the row is gone."""
        values = {**changes, "updated_at": updated_at}
        try:
            with self.engine.begin() as conn:
                result = conn.execute(update(incidents).where(incidents.c.id == incident_id).values(**values))
                if result.rowcount == 0:
                    return None
                row = conn.execute(select(incidents).where(incidents.c.id == incident_id)).mappings().one()
        except SQLAlchemyError as e:
            raise RepositoryError("Failed to update incident", details={"error": str(e)}) from e

        logger.debug("Incident updated", incident_id=incident_id, fields=sorted(changes))
        return _to_record(row)

    def clear(self) -> int:
        """Delete every incident. Administrative use only, never exposed over HTTP."""
        try:
            with self.engine.begin() as conn:
                result = conn.execute(delete(incidents))
        except SQLAlchemyError as e:
            raise RepositoryError("Failed to clear incidents", details={"error": str(e)}) from e
        return result.rowcount

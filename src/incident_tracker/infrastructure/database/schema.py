"""Table definition and idempotent schema initialization for incidents."""

from sqlalchemy import CheckConstraint, Column, DateTime, Index, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from ...config import get_logger
from ...domain.enums import IncidentSeverity, IncidentStatus

logger = get_logger("database.schema")

metadata = MetaData()


def _in_list(column: str, values: list[str]) -> str:
    quoted = ", ".join(f"'{value}'" for value in values)
    return f"{column} IN ({quoted})"


incidents = Table(
    "incidents",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("title", String(255), nullable=False),
    Column("service", String(100), nullable=False),
    Column("severity", String(10), nullable=False),
    Column("status", String(20), nullable=False),
    Column("owner", String(255), nullable=True),
    Column("summary", Text, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    CheckConstraint(_in_list("severity", IncidentSeverity.values()), name="ck_incidents_severity"),
    CheckConstraint(_in_list("status", IncidentStatus.values()), name="ck_incidents_status"),
)

Index("idx_incidents_service", incidents.c.service)
Index("idx_incidents_status", incidents.c.status)
Index("idx_incidents_severity", incidents.c.severity)
Index("idx_incidents_created_at", incidents.c.created_at.desc())


def init_schema(engine: Engine) -> None:
    """
    Create the incidents table and its indexes if they do not exist.

    Safe to call on every process start.
    """
    metadata.create_all(engine, checkfirst=True)
    logger.info("Database initialized - table ready", table=incidents.name)

from .engine import DatabaseManager, build_engine, database_manager
from .schema import incidents, init_schema, metadata

__all__ = [
    "DatabaseManager",
    "build_engine",
    "database_manager",
    "incidents",
    "metadata",
    "init_schema",
]

"""
Synthetic demo data.

Wipes the incidents table and fills it with randomly generated incidents whose
``created_at`` values are spread over the last 90 days. Direct database access,
not an API operation.
"""

import random
import uuid
from collections.abc import Iterator
from datetime import datetime, timedelta
from typing import Any

from .application.services import utcnow
from .config import Settings, get_logger
from .domain.enums import KNOWN_SERVICES, IncidentSeverity, IncidentStatus
from .infrastructure.database import DatabaseManager
from .infrastructure.repositories import IncidentRepository

logger = get_logger("seed")

OWNERS = [
    "jason@team.com",
    "amy@team.com",
    "dev@team.com",
    "ops@team.com",
    "sarah@team.com",
    "mike@team.com",
    "lisa@team.com",
    "john@team.com",
]

TITLES = [
    "Login Failure",
    "Payment Delay",
    "API Timeout",
    "UI Bug on Dashboard",
    "Database Issue",
    "Server Overload",
    "Cache Miss",
    "Network Latency",
    "Memory Leak",
    "Disk Space Low",
    "500 Error",
    "Slow Query",
    "Connection Timeout",
    "Authentication Error",
    "Data Sync Failed",
    "Deployment Failed",
    "Service Unavailable",
    "Rate Limit Exceeded",
    "Configuration Error",
    "SSL Certificate Expired",
]

SUMMARIES = [
    "Users experiencing login failures due to session timeout.",
    "Payment processing is delayed causing customer complaints.",
    "API requests to the backend service were timing out, causing disruptions for users.",
    "Dashboard rendering issue affecting multiple users.",
    "Database connection pool exhausted.",
    "Server CPU usage at 95% causing slow response times.",
    "Cache invalidation not working properly.",
    "High network latency detected between services.",
    "Memory leak in application causing crashes.",
    "Disk space running low on production servers.",
    "Internal server error affecting API endpoints.",
    "Database queries taking longer than expected.",
    "Timeout errors when connecting to external services.",
    "Authentication service returning errors.",
    "Data synchronization between services failed.",
    "Deployment pipeline failed due to test failures.",
    "Service health check failing intermittently.",
    "API rate limits being exceeded by automated scripts.",
    "Incorrect configuration deployed to production.",
    "SSL certificate expired causing HTTPS errors.",
]

DEFAULT_COUNT = 200
MAX_AGE_DAYS = 90


def generate_incidents(count: int, rng: random.Random, now: datetime) -> Iterator[dict[str, Any]]:
    """Yield ``count`` random incident rows; roughly one in five has no owner."""
    for _ in range(count):
        created_at = now - timedelta(days=rng.randrange(MAX_AGE_DAYS))
        yield {
            "id": str(uuid.UUID(int=rng.getrandbits(128), version=4)),
            "title": rng.choice(TITLES),
            "service": rng.choice(KNOWN_SERVICES),
            "severity": rng.choice(IncidentSeverity.values()),
            "status": rng.choice(IncidentStatus.values()),
            "owner": rng.choice(OWNERS) if rng.random() > 0.2 else None,
            "summary": rng.choice(SUMMARIES),
            "created_at": created_at,
            "updated_at": created_at,
        }


def seed_database(settings: Settings, count: int = DEFAULT_COUNT, seed: int | None = None) -> int:
    """
    Recreate the schema if needed, clear the table and insert ``count`` incidents.

    Returns:
        int: Number of incidents inserted
    """
    manager = DatabaseManager()
    repository = IncidentRepository(manager.initialize(settings))
    try:
        removed = repository.clear()
        logger.info("Cleared existing incidents", removed=removed)

        inserted = repository.add_many(generate_incidents(count, random.Random(seed), utcnow()))
        logger.info("Seeded incidents", count=inserted)
        return inserted
    finally:
        manager.close()

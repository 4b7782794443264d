"""
Incident creation payload validation.

Runs in front of the create handler only. Every rule is checked so the client
gets the full list of problems in one response; a payload that passes is
handed on unchanged.
"""

import json
from typing import Any

from fastapi import Request

from ...core.exceptions import IncidentValidationError
from ...domain.enums import IncidentSeverity, IncidentStatus

SEVERITY_MESSAGE = f"Severity must be one of: {', '.join(IncidentSeverity.values())}"
STATUS_MESSAGE = f"Status must be one of: {', '.join(IncidentStatus.values())}"


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or value.strip() == ""


def collect_creation_errors(payload: Any) -> list[str]:
    """
    Return every creation rule the payload breaks, in a fixed order.

    Args:
        payload: Decoded JSON body

    Returns:
        list[str]: Human-readable messages, empty when the payload is valid
    """
    if not isinstance(payload, dict):
        payload = {}

    errors = []
    if _is_blank(payload.get("title")):
        errors.append("Title is required")
    if _is_blank(payload.get("service")):
        errors.append("Service is required")
    if payload.get("severity") not in IncidentSeverity.values():
        errors.append(SEVERITY_MESSAGE)
    if payload.get("status") not in IncidentStatus.values():
        errors.append(STATUS_MESSAGE)
    return errors


async def validate_incident_payload(request: Request) -> dict[str, Any]:
    """
    FastAPI dependency guarding the create route.

    Raises:
        IncidentValidationError: When any rule fails or the body is not a JSON object
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None

    errors = collect_creation_errors(payload)
    if errors:
        raise IncidentValidationError(errors)
    return payload

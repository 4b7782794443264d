"""
Terminal views for incidents.

The list view keeps its own filter, sort and paging state; detail, edit and
create views render a single incident or form outcome. Everything renders to
``rich`` renderables so callers decide where output goes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..domain.enums import DEFAULT_SORT_COLUMN, SortOrder

STATUS_STYLES = {"OPEN": "bold red", "MITIGATED": "yellow", "RESOLVED": "green"}
SEVERITY_STYLES = {"SEV1": "bold white on red", "SEV2": "red", "SEV3": "yellow", "SEV4": "cyan"}

PAGE_BUTTONS = 5


@dataclass
class ListViewState:
    """
    Filter, sort and paging state of the incident list.

    Any change to search, filters or sort returns to the first page.
    """

    page: int = 1
    limit: int = 10
    search: str = ""
    services: list[str] = field(default_factory=list)
    severities: list[str] = field(default_factory=list)
    statuses: list[str] = field(default_factory=list)
    sort_by: str = DEFAULT_SORT_COLUMN
    sort_order: str = SortOrder.DESC.value

    def set_search(self, term: str) -> None:
        self.search = term.strip()
        self.page = 1

    def toggle_service(self, service: str) -> None:
        self._toggle(self.services, service)

    def toggle_severity(self, severity: str) -> None:
        self._toggle(self.severities, severity)

    def toggle_status(self, status: str) -> None:
        self._toggle(self.statuses, status)

    def sort(self, column: str) -> None:
        """Clicking the current column flips direction; a new column starts ascending."""
        if column == self.sort_by:
            self.sort_order = SortOrder.ASC.value if self.sort_order == SortOrder.DESC.value else SortOrder.DESC.value
        else:
            self.sort_by = column
            self.sort_order = SortOrder.ASC.value
        self.page = 1

    def go_to(self, page: int, total_pages: int) -> None:
        self.page = min(max(page, 1), max(total_pages, 1))

    def to_params(self) -> dict[str, Any]:
        """Keyword arguments for ``IncidentAPIClient.list_incidents``."""
        return {
            "page": self.page,
            "limit": self.limit,
            "search": self.search or None,
            "services": self.services,
            "severities": self.severities,
            "statuses": self.statuses,
            "sort_by": self.sort_by,
            "sort_order": self.sort_order,
        }

    def _toggle(self, selected: list[str], value: str) -> None:
        if value in selected:
            selected.remove(value)
        else:
            selected.append(value)
        self.page = 1


def page_window(page: int, total_pages: int, max_visible: int = PAGE_BUTTONS) -> list[int]:
    """Page numbers to offer around the current page, at most ``max_visible`` of them."""
    if total_pages < 1:
        return []
    start = max(1, page - max_visible // 2)
    end = min(total_pages, start + max_visible - 1)
    if end - start + 1 < max_visible:
        start = max(1, end - max_visible + 1)
    return list(range(start, end + 1))


def format_date(value: str | None) -> str:
    if not value:
        return "-"
    try:
        return datetime.fromisoformat(value).strftime("%m/%d/%Y")
    except ValueError:
        return value


def format_timestamp(value: str | None) -> str:
    if not value:
        return "-"
    try:
        return datetime.fromisoformat(value).strftime("%m/%d/%Y %H:%M:%S")
    except ValueError:
        return value


def _sort_header(column: str, label: str, state: ListViewState | None) -> str:
    if state is None or state.sort_by != column:
        return label
    return f"{label} {'▲' if state.sort_order == SortOrder.ASC.value else '▼'}"


def render_incident_table(data: dict[str, Any], state: ListViewState | None = None) -> Group:
    """Render a list response as a table followed by the pagination line."""
    table = Table(title="Incident List", show_lines=False, expand=True)
    table.add_column("ID", style="dim", no_wrap=True)
    for column in ("title", "service", "severity", "status", "created_at", "owner"):
        label = "Created" if column == "created_at" else column.capitalize()
        table.add_column(_sort_header(column, label, state))

    for incident in data.get("incidents", []):
        table.add_row(
            incident["id"],
            incident["title"],
            incident["service"],
            Text(incident["severity"], style=SEVERITY_STYLES.get(incident["severity"], "")),
            Text(incident["status"], style=STATUS_STYLES.get(incident["status"], "")),
            format_date(incident.get("created_at")),
            incident.get("owner") or "-",
        )

    if not data.get("incidents"):
        table.caption = "No incidents found"

    return Group(table, render_pagination(data.get("pagination", {})))


def render_pagination(pagination: dict[str, Any]) -> Text:
    page = pagination.get("page", 1)
    total_pages = pagination.get("totalPages", 0)

    text = Text(f"Page {page} of {max(total_pages, 1)}  ")
    for number in page_window(page, total_pages):
        text.append(f" {number} ", style="reverse" if number == page else "")
    text.append(f"  ({pagination.get('totalCount', 0)} incidents)", style="dim")
    return text


def render_filters(state: ListViewState) -> Text:
    parts = []
    if state.search:
        parts.append(f"search={state.search!r}")
    for name in ("services", "severities", "statuses"):
        values = getattr(state, name)
        if values:
            parts.append(f"{name}={','.join(values)}")
    parts.append(f"sort={state.sort_by} {state.sort_order}")
    return Text("Filters: " + "  ".join(parts), style="dim")


def render_incident_detail(incident: dict[str, Any]) -> Panel:
    """Render one incident with all its fields."""
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold")
    grid.add_column()

    grid.add_row("ID", incident["id"])
    grid.add_row("Service", incident["service"])
    grid.add_row("Severity", Text(incident["severity"], style=SEVERITY_STYLES.get(incident["severity"], "")))
    grid.add_row("Status", Text(incident["status"], style=STATUS_STYLES.get(incident["status"], "")))
    grid.add_row("Owner", incident.get("owner") or "-")
    grid.add_row("Summary", incident.get("summary") or "-")
    grid.add_row("Created", format_timestamp(incident.get("created_at")))
    grid.add_row("Updated", format_timestamp(incident.get("updated_at")))

    return Panel(grid, title=incident["title"], title_align="left")


def render_error(message: str) -> Panel:
    return Panel(Text(message, style="bold red"), title="Error", border_style="red", title_align="left")


def check_create_form(form: dict[str, Any]) -> str | None:
    """Client-side checks before submitting a new incident; returns the first problem."""
    if not (form.get("title") or "").strip():
        return "Title is required"
    if not form.get("service"):
        return "Service is required"
    if not form.get("status"):
        return "Status is required"
    return None


def build_create_payload(form: dict[str, Any]) -> dict[str, Any]:
    """Empty owner and summary are sent as null."""
    return {
        "title": form.get("title"),
        "service": form.get("service"),
        "severity": form.get("severity") or "SEV1",
        "status": form.get("status"),
        "owner": form.get("owner") or None,
        "summary": form.get("summary") or None,
    }


def build_update_payload(form: dict[str, Any]) -> dict[str, Any]:
    """Keep only the fields the user actually supplied."""
    return {name: value for name, value in form.items() if value is not None}



"""
Command-line entry point.

Usage:
    incident-tracker serve [--host H] [--port P] [--reload]
    incident-tracker seed [--count N] [--random-seed S]
    incident-tracker list [--page N] [--search TEXT] [--service S ...] [--sort-by COL] [--asc]
    incident-tracker show ID
    incident-tracker create --title T --service S --status ST [--severity SEV] [--owner O] [--summary TEXT]
    incident-tracker update ID [--title T] [--service S] [--severity SEV] [--status ST] [--owner O] [--summary TEXT]
"""

import argparse
import sys

from rich.console import Console

from .client import IncidentAPIClient, IncidentAPIError
from .client.views import (
    ListViewState,
    build_create_payload,
    build_update_payload,
    check_create_form,
    render_error,
    render_filters,
    render_incident_detail,
    render_incident_table,
)
from .config import configure_logging, get_settings
from .domain.enums import KNOWN_SERVICES, IncidentSeverity, IncidentStatus

console = Console()


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="incident-tracker", description="Incident tracking API and terminal client")
    parser.add_argument("--api-url", default=settings.api_base_url, help=f"API base URL (default: {settings.api_base_url})")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=settings.api_host, help=f"Host to bind to (default: {settings.api_host})")
    serve.add_argument("--port", type=int, default=settings.api_port, help=f"Port to bind to (default: {settings.api_port})")
    serve.add_argument("--reload", action="store_true", default=False, help="Enable auto-reload for development")

    seed = subparsers.add_parser("seed", help="Replace all incidents with synthetic demo data")
    seed.add_argument("--count", type=int, default=200, help="Number of incidents to create (default: 200)")
    seed.add_argument("--random-seed", type=int, default=None, help="Seed for reproducible data")

    list_cmd = subparsers.add_parser("list", help="List incidents")
    list_cmd.add_argument("--page", type=int, default=1)
    list_cmd.add_argument("--limit", type=int, default=10)
    list_cmd.add_argument("--search", default="")
    list_cmd.add_argument("--service", action="append", default=[], help=f"Repeatable; e.g. {', '.join(KNOWN_SERVICES[:3])}")
    list_cmd.add_argument("--severity", action="append", default=[], choices=IncidentSeverity.values())
    list_cmd.add_argument("--status", action="append", default=[], choices=IncidentStatus.values())
    list_cmd.add_argument("--sort-by", default="created_at")
    list_cmd.add_argument("--asc", action="store_true", help="Sort ascending instead of descending")

    show = subparsers.add_parser("show", help="Show one incident")
    show.add_argument("incident_id")

    create = subparsers.add_parser("create", help="Create an incident")
    create.add_argument("--title", default="")
    create.add_argument("--service", default="")
    create.add_argument("--severity", default="SEV1")
    create.add_argument("--status", default="")
    create.add_argument("--owner", default="")
    create.add_argument("--summary", default="")

    update = subparsers.add_parser("update", help="Edit an incident")
    update.add_argument("incident_id")
    for name in ("title", "service", "severity", "status", "owner", "summary"):
        update.add_argument(f"--{name}", default=None)

    return parser


def _list(client: IncidentAPIClient, args: argparse.Namespace) -> int:
    state = ListViewState(limit=args.limit, sort_by=args.sort_by, sort_order="ASC" if args.asc else "DESC")
    state.set_search(args.search)
    for service in args.service:
        state.toggle_service(service)
    for severity in args.severity:
        state.toggle_severity(severity)
    for status in args.status:
        state.toggle_status(status)
    # Filter changes reset paging, so the requested page is applied last.
    state.page = max(args.page, 1)

    data = client.list_incidents(**state.to_params())
    console.print(render_filters(state))
    console.print(render_incident_table(data, state))
    return 0


def _create(client: IncidentAPIClient, args: argparse.Namespace) -> int:
    form = {name: getattr(args, name) for name in ("title", "service", "severity", "status", "owner", "summary")}
    problem = check_create_form(form)
    if problem:
        console.print(render_error(problem))
        return 1

    incident = client.create_incident(build_create_payload(form))
    console.print(render_incident_detail(incident))
    return 0


def _update(client: IncidentAPIClient, args: argparse.Namespace) -> int:
    form = {name: getattr(args, name) for name in ("title", "service", "severity", "status", "owner", "summary")}
    incident = client.update_incident(args.incident_id, build_update_payload(form))
    console.print(render_incident_detail(incident))
    return 0


def run_client_command(client: IncidentAPIClient, args: argparse.Namespace) -> int:
    """Run one client subcommand, rendering API errors as an error banner."""
    try:
        if args.command == "list":
            return _list(client, args)
        if args.command == "show":
            console.print(render_incident_detail(client.get_incident(args.incident_id)))
            return 0
        if args.command == "create":
            return _create(client, args)
        if args.command == "update":
            return _update(client, args)
    except IncidentAPIError as e:
        console.print(render_error(str(e)))
        return 1
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    if args.command == "serve":
        from .main import run_development_server, run_production_server

        if args.reload:
            run_development_server(host=args.host, port=args.port, reload=True)
        else:
            run_production_server(host=args.host, port=args.port)
        return 0

    if args.command == "seed":
        from .seed import seed_database

        configure_logging()
        inserted = seed_database(settings, count=args.count, seed=args.random_seed)
        console.print(f"Successfully seeded {inserted} incidents!")
        return 0

    with IncidentAPIClient(args.api_url, timeout=settings.client_timeout) as client:
        return run_client_command(client, args)


if __name__ == "__main__":
    sys.exit(main())

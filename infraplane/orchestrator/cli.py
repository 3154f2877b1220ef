"""
Command line entry point for application registration and live discovery.

    python -m infraplane.orchestrator.cli register --name api --source-path ./svc --provider gcp
    python -m infraplane.orchestrator.cli list
    python -m infraplane.orchestrator.cli discover api [--json] [--timeout 60]
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any, Sequence

from pydantic import ValidationError

from infraplane.orchestrator import runner_factory
from shared.models.application import Application
from shared.models.discovery import CloudProvider, LiveResourceResult
from shared.models.errors import InfraplaneError
from shared.utils.logging import setup_logging
from shared.utils.terminal_ui import STATUS_COLORS, Ansi, color, print_compact_panel, print_panel

EXIT_FATAL = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="infraplane",
        description="Discover the live cloud resources behind a registered application.",
    )
    parser.add_argument("--db-path", default=None, help="sqlite application store (default INFRAPLANE_DB_PATH)")
    parser.add_argument("--log-level", default=None, help="override INFRAPLANE_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    register = sub.add_parser("register", help="register an application")
    register.add_argument("--name", required=True)
    register.add_argument("--source-path", default="", help="local directory or git URL")
    register.add_argument("--provider", required=True, choices=[p.value for p in CloudProvider])
    register.add_argument("--description", default="")
    register.add_argument("--git-repo-url", default="")

    sub.add_parser("list", help="list registered applications")

    discover = sub.add_parser("discover", help="discover live resources for an application")
    discover.add_argument("app", help="application name or id")
    discover.add_argument("--json", action="store_true", dest="as_json", help="print the raw result as JSON")
    discover.add_argument("--timeout", type=float, default=None, help="overall deadline in seconds")
    return parser


def _print_applications(apps: list[Application]) -> None:
    if not apps:
        print_compact_panel("Applications", "No applications registered.", Ansi.YELLOW)
        return
    rows: list[tuple[str, Any]] = [
        (app.name, f"{app.provider.value}  {app.source_path or '(no source path)'}  id={app.id}")
        for app in apps
    ]
    print_panel("Applications", rows, Ansi.BLUE)


def _print_result(app_ref: str, result: LiveResourceResult) -> None:
    rows: list[tuple[str, Any]] = [
        ("Application", app_ref),
        ("Resources", len(result.resources)),
        ("Diagnostics", len(result.errors)),
        ("Checked At", result.timestamp.isoformat()),
    ]
    print_panel("Discovery Summary", rows, Ansi.GREEN)

    if result.resources:
        resource_rows: list[tuple[str, Any]] = []
        for resource in result.resources:
            status = color(resource.status.value, STATUS_COLORS.get(resource.status.value, Ansi.BLUE))
            location = resource.region or "global"
            resource_rows.append((resource.resource_type, f"{resource.name} [{status}] {location}"))
        print_panel("Live Resources", resource_rows, Ansi.CYAN)

    if result.errors:
        diagnostic_rows = [(f"Diagnostic {i}", error) for i, error in enumerate(result.errors, start=1)]
        print_panel("Diagnostics", diagnostic_rows, Ansi.YELLOW)


def run(args: argparse.Namespace) -> int:
    store = runner_factory.build_store(args.db_path)

    if args.command == "register":
        app = store.add(
            Application(
                name=args.name,
                description=args.description,
                git_repo_url=args.git_repo_url,
                source_path=args.source_path,
                provider=CloudProvider(args.provider),
            )
        )
        print_panel("Registered", [("Name", app.name), ("Id", app.id), ("Provider", app.provider.value)], Ansi.GREEN)
        return 0

    if args.command == "list":
        _print_applications(store.list())
        return 0

    service = runner_factory.build_discovery_service(store)
    result = asyncio.run(service.discover_live_resources(args.app, timeout=args.timeout))
    if args.as_json:
        print(result.model_dump_json(indent=2))
    else:
        _print_result(args.app, result)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        return run(args)
    except InfraplaneError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FATAL
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        print(f"error: invalid input: {problems}", file=sys.stderr)
        return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())

"""Admin CLI for reviewing parking slot requests.

This module provides human-facing admin tooling for operators to:
- Sign in by storing a backend bearer token
- List, search and page through slot requests
- Approve or reject pending slot requests
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable

import click
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from parking_admin.config import Settings, load_settings_from_file
from parking_admin.domain.models import RequestStatus, SlotRequest
from parking_admin.domain.services.notification import Notification, Notifier
from parking_admin.domain.services.slot_requests import SlotRequestController
from parking_admin.infra.api.client import SlotRequestApiClient
from parking_admin.infra.observability.logging import setup_logging
from parking_admin.infra.session.store import FileSessionStore, SessionStoreError

console = Console()
err_console = Console(stderr=True)

STATUS_BADGES = {
    RequestStatus.APPROVED: "[green]✔ Approved[/green]",
    RequestStatus.REJECTED: "[red]✖ Rejected[/red]",
    RequestStatus.PENDING: "[yellow]⏱ Pending[/yellow]",
}

NOTIFICATION_STYLES = {
    "success": "[green]✓[/green] {message}",
    "info": "[blue]ℹ[/blue] {message}",
    "error": "[red]✗ {message}[/red]",
}


class ConsoleNotifier(Notifier):
    """Notifier that prints to the rich console."""

    def __init__(self) -> None:
        self.error_count = 0

    def notify(self, notification: Notification) -> None:
        if notification.level == "error":
            self.error_count += 1
        err_console.print(NOTIFICATION_STYLES[notification.level].format(message=notification.message))


def load_settings(config_path: str | None) -> Settings:
    """Load settings from config file or environment.

    Args:
        config_path: Optional path to config file

    Returns:
        Settings instance
    """
    if config_path:
        return load_settings_from_file(Path(config_path))
    return Settings()


def build_session_store(settings: Settings) -> FileSessionStore:
    """Create the file-backed session store for this CLI."""

    def _on_redirect(route: str) -> None:
        console.print(
            f"[yellow]Redirecting to {route}: run 'parking-admin login' to sign in again[/yellow]"
        )

    return FileSessionStore(
        path=settings.session_path,
        login_route=settings.login_route,
        on_redirect=_on_redirect,
    )


def run_with_controller(
    settings: Settings,
    operation: Callable[[SlotRequestController], Awaitable[Any]],
) -> SlotRequestController:
    """Run ``operation`` against a fresh controller and return it for rendering."""

    async def _run() -> SlotRequestController:
        store = build_session_store(settings)
        client = SlotRequestApiClient.from_settings(settings, store)
        controller = SlotRequestController(client, store, ConsoleNotifier(), settings)
        try:
            await operation(controller)
        finally:
            controller.close()
            await client.close()
        return controller

    try:
        return asyncio.run(_run())
    except SessionStoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


def format_vehicle(request: SlotRequest) -> str:
    plate = request.vehicle.plate_number if request.vehicle else None
    vehicle_type = request.vehicle.vehicle_type if request.vehicle else None
    return f"{plate or 'N/A'} ({vehicle_type or 'N/A'})"


def render_requests(controller: SlotRequestController) -> None:
    """Print the current page as a table with a range footer."""
    if not controller.requests:
        console.print("No slot requests found")
        return

    table = Table(title="Parking Slot Requests")
    table.add_column("ID", style="cyan")
    table.add_column("User Email", style="white")
    table.add_column("Vehicle", style="magenta")
    table.add_column("Slot", style="white")
    table.add_column("Status")
    table.add_column("Date", style="blue")

    for request in controller.requests:
        table.add_row(
            str(request.id),
            (request.user.email if request.user else None) or "N/A",
            format_vehicle(request),
            request.slot_number or "Not Assigned",
            STATUS_BADGES[request.request_status],
            request.created_at.date().isoformat() if request.created_at else "N/A",
        )

    console.print(table)

    pagination = controller.pagination
    console.print(
        f"Showing {pagination.range_start} to {pagination.range_end} "
        f"of {pagination.total} results (page {pagination.page}/{pagination.pages})"
    )


def exit_on_error(controller: SlotRequestController) -> None:
    """Exit non-zero if the operation left an error or reported one."""
    notifier = controller.notifier
    if controller.errors.api or getattr(notifier, "error_count", 0):
        sys.exit(1)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=str),
    help="Path to configuration file (YAML or TOML)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Override the configured log level",
)
@click.pass_context
def admin(ctx: click.Context, config: str | None, log_level: str | None) -> None:
    """Parking Admin CLI - review and act on parking slot requests."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = config

    try:
        settings = load_settings(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)

    setup_logging(
        level=log_level or ("DEBUG" if settings.debug else settings.log_level),
        json_format=settings.log_format == "json",
    )
    ctx.obj["settings"] = settings


@admin.command("login")
@click.option("--token", help="Backend bearer token (will prompt if not provided)")
@click.option("--email", help="Admin email shown in the session")
@click.pass_context
def login(ctx: click.Context, token: str | None, email: str | None) -> None:
    """Store a bearer token for subsequent commands."""
    settings: Settings = ctx.obj["settings"]
    if not token:
        token = Prompt.ask("Bearer token", password=True)
    if not token:
        console.print("[red]Error: token is required[/red]")
        sys.exit(1)

    store = build_session_store(settings)
    try:
        store.set_token(token)
        if email:
            store.set_user({"email": email, "role": "admin"})
    except SessionStoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    console.print(f"[green]✓[/green] Session saved to {store.path}")


@admin.command("logout")
@click.pass_context
def logout(ctx: click.Context) -> None:
    """Remove the stored session."""
    store = build_session_store(ctx.obj["settings"])
    try:
        store.clear()
    except SessionStoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    console.print("[green]✓[/green] Signed out")


@admin.group()
def requests() -> None:
    """Manage parking slot requests."""
    pass


@requests.command("list")
@click.option("--page", default=1, type=click.IntRange(min=1), help="Page number")
@click.option("--limit", default=None, type=click.IntRange(min=1), help="Rows per page")
@click.option("--search", default="", help="Filter by email, plate or slot")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text", help="Output format")
@click.pass_context
def requests_list(
    ctx: click.Context,
    page: int,
    limit: int | None,
    search: str,
    output_format: str,
) -> None:
    """List slot requests."""
    settings: Settings = ctx.obj["settings"]

    async def _list(controller: SlotRequestController) -> None:
        controller.pagination = controller.pagination.model_copy(
            update={"page": page, "limit": limit or controller.pagination.limit}
        )
        controller.search = search
        await controller.fetch_requests(search)

    controller = run_with_controller(settings, _list)

    if output_format == "json":
        payload = {
            "data": [r.model_dump(mode="json", by_alias=True) for r in controller.requests],
            "pagination": controller.pagination.model_dump(),
            "error": controller.errors.api or None,
        }
        click.echo(json.dumps(payload, indent=2))
    else:
        render_requests(controller)

    exit_on_error(controller)


@requests.command("approve")
@click.argument("request_id")
@click.pass_context
def requests_approve(ctx: click.Context, request_id: str) -> None:
    """Approve a pending slot request."""
    settings: Settings = ctx.obj["settings"]

    async def _approve(controller: SlotRequestController) -> None:
        await controller.approve(request_id)

    controller = run_with_controller(settings, _approve)
    exit_on_error(controller)


@requests.command("reject")
@click.argument("request_id")
@click.option("--reason", default=None, help="Reason for rejection (will prompt if not provided)")
@click.pass_context
def requests_reject(ctx: click.Context, request_id: str, reason: str | None) -> None:
    """Reject a pending slot request with a reason."""
    settings: Settings = ctx.obj["settings"]

    async def _prompt_reason() -> str | None:
        try:
            return Prompt.ask("Please provide a reason for rejection", default="")
        except (EOFError, KeyboardInterrupt):
            return None

    async def _reject(controller: SlotRequestController) -> None:
        if reason is not None:
            await controller.reject(request_id, reason)
            return
        await controller.reject_with_prompt(request_id, _prompt_reason)

    controller = run_with_controller(settings, _reject)
    exit_on_error(controller)


if __name__ == "__main__":
    admin()

# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Command-line interface for mail-dispatch.

Usage:
    mail-dispatch init-db
    mail-dispatch send --org-name "ACME" --org-email ops@acme.test \\
        --organization-id 7 --category billing "Invoice ready" "Your invoice..."
    mail-dispatch logs --organization-id 7 --status error

Every command reads settings from ``--config`` (default ``$MDS_CONFIG`` or
``config.ini``) with ``MDS_*`` environment fallbacks.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings
from .errors import AuditPersistenceFailure, MailDispatchError, TransportError
from .models import Address, Attribution, MailStatus, Organization
from .service import MailService
from .transport import LocalTransport

console = Console()
err_console = Console(stderr=True)


def run_async(coro):
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_json(data: Any) -> None:
    """Print data as formatted JSON."""
    console.print_json(json.dumps(data, indent=2, default=str))


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Path to config.ini (default: $MDS_CONFIG or config.ini).")
@click.option("--db", "db_path", default=None, help="Override the audit database path.")
@click.version_option(package_name="mail-dispatch")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, db_path: str | None) -> None:
    """Multi-tenant transactional mail dispatch with audit trail."""
    try:
        settings = load_settings(config_path)
    except (FileNotFoundError, ValueError) as e:
        print_error(str(e))
        sys.exit(1)
    if db_path:
        settings.db_path = db_path
    configure_logging(settings.log_level)
    ctx.obj = settings


@main.command("init-db")
@click.pass_obj
def init_db(settings: Settings) -> None:
    """Create the mail log table if missing."""

    async def _init():
        async with MailService(settings):
            pass

    run_async(_init())
    print_success(f"Mail log ready at {settings.db_path}")


@main.command("send")
@click.argument("subject")
@click.argument("body")
@click.option("--org-name", required=True, help="Organization name.")
@click.option("--org-email", required=True, help="Organization email (default recipient).")
@click.option("--organization-id", "-o", type=int, required=True, help="Tenant identifier.")
@click.option("--category", "-c", required=True, help="Business reason, e.g. billing.")
@click.option("--to", "to_email", default=None, help="Recipient override email.")
@click.option("--to-name", default="", help="Recipient override display name.")
@click.option("--local", "use_local", is_flag=True,
              help="Hand the message to the in-memory transport (nothing leaves the host).")
@click.pass_obj
def send(
    settings: Settings,
    subject: str,
    body: str,
    org_name: str,
    org_email: str,
    organization_id: int,
    category: str,
    to_email: str | None,
    to_name: str,
    use_local: bool,
) -> None:
    """Send a notification to an organization and record it."""
    if not settings.smtp.host and not use_local:
        print_error("No SMTP host configured; set MDS_SMTP_HOST or pass --local")
        sys.exit(1)

    try:
        organization = Organization(id=organization_id, name=org_name, email=org_email)
        attribution = Attribution(category=category, organization_id=organization_id)
        send_to = Address(name=to_name, email=to_email) if to_email else None
    except ValidationError as e:
        print_error(f"Validation error: {e}")
        sys.exit(1)

    async def _send():
        transport = LocalTransport() if use_local else None
        async with MailService(settings, transport=transport) as service:
            message = service.build_common_message(organization, subject, body, send_to)
            return await service.send(message, attribution)

    try:
        receipt = run_async(_send())
    except TransportError as e:
        print_error(f"Mail not sent: {e}")
        sys.exit(1)
    except AuditPersistenceFailure as e:
        print_error(f"Audit failure: {e}")
        sys.exit(2)
    except (MailDispatchError, ValueError) as e:
        print_error(str(e))
        sys.exit(1)
    print_success(f"Mail sent ({receipt.message_id or '-'})")


@main.command("logs")
@click.option("--category", "-c", default=None, help="Filter by category.")
@click.option("--organization-id", "-o", type=int, default=None, help="Filter by tenant.")
@click.option("--status", "-s", type=click.Choice([s.value for s in MailStatus]), default=None,
              help="Filter by status.")
@click.option("--limit", "-n", type=int, default=50, show_default=True, help="Maximum rows.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_obj
def logs(
    settings: Settings,
    category: str | None,
    organization_id: int | None,
    status: str | None,
    limit: int,
    as_json: bool,
) -> None:
    """List mail log records."""

    async def _list():
        async with MailService(settings) as service:
            return await service.logs.list_all(
                category=category,
                organization_id=organization_id,
                status=status,
                limit=limit,
            )

    records = run_async(_list())

    if as_json:
        print_json([r.model_dump(mode="json") for r in records])
        return

    if not records:
        console.print("[dim]No mail logs found.[/dim]")
        return

    table = Table(title="Mail Logs")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Organization", justify="right")
    table.add_column("Category")
    table.add_column("Status", justify="center")
    table.add_column("Inserted")
    table.add_column("Error")

    for r in records:
        status_cell = "[green]sent[/green]" if r.status is MailStatus.SENT else "[red]error[/red]"
        table.add_row(
            str(r.id),
            str(r.organization_id),
            r.category,
            status_cell,
            r.inserted_at.strftime("%Y-%m-%d %H:%M:%S"),
            r.error or "-",
        )

    console.print(table)


if __name__ == "__main__":
    main()

"""CLI commands for the kitchen display prioritizer."""

import json
import sys
import uuid
from datetime import UTC, datetime
from pathlib import Path

import click
import structlog

from src.kitchen import BottleneckAlert, detect_bottlenecks
from src.observability.logging import bind_run_context, configure_from_settings
from src.prioritizer import (
    Clock,
    FixedClock,
    MenuCatalog,
    PrioritizedTicket,
    PrioritizerError,
    ScorerConfig,
    SystemClock,
    Ticket,
    TicketRanker,
    load_menu_catalog,
    load_tickets,
    urgency_status,
)
from src.settings import AppSettings, get_settings


logger = structlog.get_logger()

COMPONENT_CLI = "cli"


def _parse_now(value: str | None) -> Clock:
    """Build the clock for a command, frozen when --now is given."""
    if value is None:
        return SystemClock()
    try:
        instant = datetime.fromisoformat(value)
    except ValueError as e:
        raise click.BadParameter(f"not an ISO-8601 timestamp: {value}") from e
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return FixedClock(instant)


def _prepare(
    tickets_path: Path,
    verbose: bool,
) -> tuple[AppSettings, str, list[Ticket]]:
    """Configure logging and load the ticket file, exiting on failure."""
    settings = get_settings()
    if verbose:
        settings = settings.model_copy(update={"log_level": "DEBUG"})
    configure_from_settings(settings)

    run_id = uuid.uuid4().hex[:12]
    bind_run_context(run_id)

    try:
        tickets = load_tickets(tickets_path)
    except PrioritizerError as e:
        logger.warning("ticket_load_failed", component=COMPONENT_CLI, error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    return settings, run_id, tickets


def _format_ticket_line(
    position: int,
    ticket: PrioritizedTicket,
    now: datetime,
    late_threshold_minutes: int,
) -> str:
    label = ticket.order_number or ticket.id or "-"
    status = urgency_status(ticket, now, late_threshold_minutes).value
    return (
        f"{position:>3}. {label:<10} {ticket.priority.score:>3} "
        f"[{status}] {ticket.priority.explanation}"
    )


def _format_alert_line(alert: BottleneckAlert) -> str:
    return (
        f"[{alert.severity.value.upper()}] {alert.message}: {alert.suggestion} "
        f"(backlog={alert.metrics.backlog}, avg={alert.metrics.avg_time}min, "
        f"late={alert.metrics.late_rate}%)"
    )


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Kitchen display ticket prioritizer CLI."""


@cli.command()
@click.argument("tickets_path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--menu",
    "menu_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Menu catalog (JSON/YAML) with complexityBase per item.",
)
@click.option(
    "--load",
    "kitchen_load",
    type=int,
    default=None,
    help="Kitchen load 0-100 (default: KDS_KITCHEN_LOAD or 50).",
)
@click.option(
    "--now",
    "now",
    type=str,
    default=None,
    help="Score as of this ISO-8601 time instead of the system clock.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def rank(  # noqa: PLR0913
    tickets_path: Path,
    menu_path: Path | None,
    kitchen_load: int | None,
    now: str | None,
    output_format: str,
    verbose: bool,
) -> None:
    """Rank the tickets in TICKETS_PATH by priority, most urgent first."""
    clock = _parse_now(now)
    settings, run_id, tickets = _prepare(tickets_path, verbose)
    load = settings.kitchen_load if kitchen_load is None else kitchen_load

    catalog_path = menu_path or settings.menu_catalog_path
    try:
        catalog = load_menu_catalog(catalog_path) if catalog_path else MenuCatalog()
    except PrioritizerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    # Ranking and the urgency column share one reading of the clock
    instant = clock.now()
    ranker = TicketRanker(
        run_id=run_id,
        config=ScorerConfig(catalog=catalog, clock=FixedClock(instant)),
    )
    ranked = ranker.sort_tickets_by_priority(tickets, load)

    if output_format == "json":
        payload = [ticket.to_json_dict() for ticket in ranked]
        click.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    for position, ticket in enumerate(ranked, start=1):
        click.echo(
            _format_ticket_line(position, ticket, instant, settings.late_threshold_minutes)
        )


@cli.command()
@click.argument("tickets_path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--load",
    "kitchen_load",
    type=int,
    default=None,
    help="Kitchen load 0-100 (default: KDS_KITCHEN_LOAD or 50).",
)
@click.option(
    "--now",
    "now",
    type=str,
    default=None,
    help="Evaluate as of this ISO-8601 time instead of the system clock.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def bottlenecks(
    tickets_path: Path,
    kitchen_load: int | None,
    now: str | None,
    output_format: str,
    verbose: bool,
) -> None:
    """Report station bottlenecks for the tickets in TICKETS_PATH."""
    clock = _parse_now(now)
    settings, _run_id, tickets = _prepare(tickets_path, verbose)
    load = settings.kitchen_load if kitchen_load is None else kitchen_load

    alerts = detect_bottlenecks(tickets, kitchen_load=load, clock=clock)

    if output_format == "json":
        payload = [alert.model_dump(mode="json") for alert in alerts]
        click.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    if not alerts:
        click.echo("No bottlenecks detected.")
        return
    for alert in alerts:
        click.echo(_format_alert_line(alert))


def main() -> None:
    """Entry point for the ``kds`` console script."""
    cli()

"""Boundary parsing of raw ticket records."""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from src.prioritizer.errors import InvalidTicketError, TicketFileError
from src.prioritizer.metrics import PrioritizerMetrics
from src.prioritizer.models import Ticket


logger = structlog.get_logger()


def _error_details(error: ValidationError) -> list[dict[str, str]]:
    return [
        {
            "loc": ".".join(str(part) for part in detail["loc"]) or "<root>",
            "msg": detail["msg"],
        }
        for detail in error.errors()
    ]


def parse_ticket(record: Mapping[str, Any], ref: str | None = None) -> Ticket:
    """Validate a raw ticket record into a Ticket.

    Accepts camelCase (``promisedAt``) or snake_case field names. Fails fast
    on missing ``promisedAt``, ``items`` or ``stationAssignments`` rather
    than letting a partial record reach the scorer.

    Args:
        record: Raw ticket mapping from the order/kitchen store.
        ref: Reference used in the error when the record has no id.

    Returns:
        Validated Ticket.

    Raises:
        InvalidTicketError: If the record does not describe a valid ticket.
    """
    try:
        return Ticket.model_validate(record)
    except ValidationError as e:
        ticket_ref = record.get("id") if isinstance(record, Mapping) else None
        ticket_ref = str(ticket_ref) if ticket_ref is not None else ref
        details = _error_details(e)
        logger.warning(
            "invalid_ticket",
            component="prioritizer",
            ticket_ref=ticket_ref,
            errors=details,
        )
        PrioritizerMetrics.get_instance().record_invalid()
        raise InvalidTicketError(ticket_ref, details) from e


def parse_tickets(records: Iterable[Mapping[str, Any]]) -> list[Ticket]:
    """Validate a batch of raw ticket records.

    Args:
        records: Raw ticket mappings.

    Returns:
        Validated tickets in input order.

    Raises:
        InvalidTicketError: On the first invalid record (reported by id, or
            by position as ``#<index>`` when it has none).
    """
    return [parse_ticket(record, ref=f"#{index}") for index, record in enumerate(records)]


def load_tickets(path: Path) -> list[Ticket]:
    """Load and validate tickets from a JSON or YAML file.

    The file holds a list of ticket records or a mapping with a
    ``tickets`` list.

    Args:
        path: Path to a ``.json``, ``.yaml`` or ``.yml`` file.

    Returns:
        Validated tickets in file order.

    Raises:
        TicketFileError: If the file is unreadable or has the wrong shape.
        InvalidTicketError: If a record is not a valid ticket.
    """
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text) if path.suffix.lower() == ".json" else yaml.safe_load(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise TicketFileError(str(path), str(e)) from e

    if isinstance(data, Mapping):
        data = data.get("tickets")
    if not isinstance(data, list):
        raise TicketFileError(str(path), "expected a list of tickets")
    return parse_tickets(data)

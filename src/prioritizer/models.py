"""Data models for the ticket prioritizer."""

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class KitchenModel(BaseModel):
    """Base model for kitchen records: immutable, camelCase aliases accepted."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dict using the external field names.

        Returns:
            Dictionary keyed by camelCase aliases.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TicketStatus(str, Enum):
    """Lifecycle status of a kitchen ticket."""

    NEW = "new"
    IN_PROGRESS = "in_progress"
    READY = "ready"
    COMPLETED = "completed"
    RECALLED = "recalled"


class PriorityLevel(str, Enum):
    """Urgency band derived from the final priority score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _ensure_aware(value: datetime | None) -> datetime | None:
    """Treat naive timestamps as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class TicketItem(KitchenModel):
    """A single line item on a kitchen ticket.

    Attributes:
        menu_item_id: Reference into the menu-item catalog.
        quantity: Number of portions (positive).
        modifiers: Modifier labels (e.g. "no onion") or modifier records.
        add_ons: Add-on labels (e.g. "extra cheese") or add-on records.
        id: Optional line identifier.
        name: Optional display name.
        station: Optional station responsible for this line.
    """

    model_config = ConfigDict(extra="allow")

    menu_item_id: Annotated[str, Field(alias="menuItemId", min_length=1)]
    quantity: Annotated[int, Field(gt=0)]
    modifiers: list[str | dict[str, Any]] = Field(default_factory=list)
    add_ons: list[str | dict[str, Any]] = Field(default_factory=list, alias="addOns")
    id: str | None = None
    name: str | None = None
    station: str | None = None


class Ticket(KitchenModel):
    """A kitchen order awaiting or in preparation.

    Only ``promised_at``, ``items`` and ``station_assignments`` feed the
    priority score. The remaining fields are carried for the queue and the
    bottleneck detector.

    Fields owned by the order system that are not listed here (channel,
    timeline, table number and so on) are kept as extras and emitted again
    on output.

    Attributes:
        promised_at: When the kitchen promised the food would be ready.
        items: Ordered line items.
        station_assignments: Stations that must act on this ticket.
        id: Ticket identifier.
        order_number: Human-facing order number.
        status: Lifecycle status.
        created_at: When the ticket reached the kitchen.
        started_at: When preparation started.
        completed_at: When the ticket was completed.
    """

    model_config = ConfigDict(extra="allow")

    promised_at: Annotated[datetime, Field(alias="promisedAt")]
    items: list[TicketItem]
    station_assignments: Annotated[list[str], Field(alias="stationAssignments")]
    id: str | None = None
    order_number: str | None = Field(default=None, alias="orderNumber")
    status: TicketStatus = TicketStatus.NEW
    created_at: datetime | None = Field(default=None, alias="createdAt")
    started_at: datetime | None = Field(default=None, alias="startedAt")
    completed_at: datetime | None = Field(default=None, alias="completedAt")

    @field_validator("promised_at", "created_at", "started_at", "completed_at")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        """Attach UTC to naive timestamps so clock arithmetic never fails."""
        return _ensure_aware(value)


class MenuItem(KitchenModel):
    """Menu catalog entry as consumed by the scorer.

    Attributes:
        id: Menu item identifier.
        complexity_base: Relative preparation complexity (1-5).
        name: Display name.
        station: Station that cooks the item.
        base_cook_minutes: Nominal cook time.
        category: Menu category.
    """

    id: Annotated[str, Field(min_length=1)]
    complexity_base: float = Field(default=0.0, alias="complexityBase", ge=0.0)
    name: str | None = None
    station: str | None = None
    base_cook_minutes: float | None = Field(default=None, alias="baseCookMinutes")
    category: str | None = None


class PriorityFactors(KitchenModel):
    """Unweighted component scores, rounded, before the load multiplier.

    Attributes:
        time_to_promise: Time pressure component.
        complexity: Order complexity component.
        coordination: Cross-station coordination component.
    """

    time_to_promise: Annotated[int, Field(alias="timeToPromise", ge=0, le=100)]
    complexity: Annotated[int, Field(ge=0, le=100)]
    coordination: Annotated[int, Field(ge=0, le=100)]


class PriorityScore(KitchenModel):
    """Structured priority computed for one ticket.

    Attributes:
        level: Urgency band.
        score: Final score in [0, 100].
        explanation: Human-readable summary.
        factors: Per-factor breakdown.
    """

    level: PriorityLevel
    score: Annotated[int, Field(ge=0, le=100)]
    explanation: str
    factors: PriorityFactors


class PrioritizedTicket(Ticket):
    """A ticket merged with its computed priority."""

    priority: PriorityScore

    @classmethod
    def from_ticket(cls, ticket: Ticket, priority: PriorityScore) -> "PrioritizedTicket":
        """Build a prioritized copy of a ticket.

        Args:
            ticket: Source ticket (left untouched).
            priority: Score to attach.

        Returns:
            New PrioritizedTicket carrying every field of the ticket, extras
            included. A priority left over from an earlier pass is replaced.
        """
        fields = {name: getattr(ticket, name) for name in Ticket.model_fields}
        extras = {
            key: value
            for key, value in (ticket.model_extra or {}).items()
            if key != "priority"
        }
        return cls(**fields, **extras, priority=priority)

"""Domain exceptions for the ticket prioritizer.

Scoring itself never raises: every branch has a numeric default. These
exceptions cover the boundary where raw ticket records and menu catalogs
enter the system, so a malformed record fails fast instead of producing a
silently wrong score.
"""


class PrioritizerError(Exception):
    """Base exception for all prioritizer errors."""


class InvalidTicketError(PrioritizerError):
    """Raised when a ticket record is missing fields or has bad values.

    Attributes:
        ticket_ref: Ticket id or position in the batch, when known.
        errors: Validation error details (field location and message).
    """

    def __init__(
        self,
        ticket_ref: str | None,
        errors: list[dict[str, str]],
    ) -> None:
        """Initialize the error.

        Args:
            ticket_ref: Ticket id or position in the batch, when known.
            errors: Validation error details.
        """
        self.ticket_ref = ticket_ref
        self.errors = errors
        where = f" '{ticket_ref}'" if ticket_ref else ""
        summary = "; ".join(f"{e['loc']}: {e['msg']}" for e in errors)
        super().__init__(f"Invalid ticket{where}: {summary}")


class CatalogLoadError(PrioritizerError):
    """Raised when a menu catalog file cannot be read or parsed."""

    def __init__(self, path: str, message: str) -> None:
        """Initialize the error.

        Args:
            path: Path of the catalog file.
            message: Human-readable error message.
        """
        self.path = path
        super().__init__(f"Failed to load menu catalog {path}: {message}")


class TicketFileError(PrioritizerError):
    """Raised when a ticket file cannot be read or is not a list of records."""

    def __init__(self, path: str, message: str) -> None:
        """Initialize the error.

        Args:
            path: Path of the ticket file.
            message: Human-readable error message.
        """
        self.path = path
        super().__init__(f"Failed to read tickets from {path}: {message}")

"""Menu-item complexity catalog."""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import structlog
import yaml
from pydantic import ValidationError

from src.prioritizer.constants import DEFAULT_COMPLEXITY
from src.prioritizer.errors import CatalogLoadError
from src.prioritizer.models import MenuItem


logger = structlog.get_logger()


@runtime_checkable
class ComplexityLookup(Protocol):
    """Read-only lookup from menu item id to its complexity base."""

    def lookup_complexity(self, menu_item_id: str) -> float:
        """Return the complexity for a menu item, never failing.

        Args:
            menu_item_id: Menu item identifier.

        Returns:
            Complexity base, or the default for unknown items.
        """
        ...


class MenuCatalog:
    """In-memory menu catalog keyed by item id.

    Unknown items, and items whose complexity is zero or missing, resolve to
    DEFAULT_COMPLEXITY.
    """

    def __init__(
        self,
        items: Iterable[MenuItem] = (),
        default_complexity: float = DEFAULT_COMPLEXITY,
    ) -> None:
        """Initialize the catalog.

        Args:
            items: Menu items; later duplicates of an id are ignored.
            default_complexity: Complexity used on a miss.
        """
        self._default = default_complexity
        self._items: dict[str, MenuItem] = {}
        for item in items:
            self._items.setdefault(item.id, item)

    @classmethod
    def from_mapping(
        cls,
        complexities: Mapping[str, float],
        default_complexity: float = DEFAULT_COMPLEXITY,
    ) -> "MenuCatalog":
        """Build a catalog from a plain id -> complexity mapping.

        Args:
            complexities: Mapping of menu item id to complexity base.
            default_complexity: Complexity used on a miss.

        Returns:
            MenuCatalog instance.
        """
        items = [
            MenuItem(id=item_id, complexity_base=value)
            for item_id, value in complexities.items()
        ]
        return cls(items, default_complexity=default_complexity)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, menu_item_id: object) -> bool:
        return menu_item_id in self._items

    def get(self, menu_item_id: str) -> MenuItem | None:
        """Return the catalog entry for an id, if any."""
        return self._items.get(menu_item_id)

    def lookup_complexity(self, menu_item_id: str) -> float:
        """Return the complexity base for a menu item.

        Args:
            menu_item_id: Menu item identifier.

        Returns:
            Complexity base, or the default for unknown or zero entries.
        """
        item = self._items.get(menu_item_id)
        if item is None or not item.complexity_base:
            return self._default
        return item.complexity_base


def _extract_entries(data: Any) -> list[Any]:
    if isinstance(data, Mapping):
        data = data.get("items", data.get("menu_items"))
    if not isinstance(data, list):
        msg = "expected a list of menu items or a mapping with an 'items' list"
        raise TypeError(msg)
    return data


def load_menu_catalog(path: Path) -> MenuCatalog:
    """Load a menu catalog from a JSON or YAML file.

    The file holds a list of menu items (``id``, ``complexityBase`` and
    optional display fields) or a mapping with an ``items`` list.

    Args:
        path: Path to a ``.json``, ``.yaml`` or ``.yml`` file.

    Returns:
        Loaded MenuCatalog.

    Raises:
        CatalogLoadError: If the file is unreadable or malformed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogLoadError(str(path), str(e)) from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
        entries = _extract_entries(data)
        items = [MenuItem.model_validate(entry) for entry in entries]
    except (json.JSONDecodeError, yaml.YAMLError, TypeError, ValidationError) as e:
        raise CatalogLoadError(str(path), str(e)) from e

    catalog = MenuCatalog(items)
    logger.info(
        "menu_catalog_loaded",
        component="prioritizer",
        path=str(path),
        items=len(catalog),
    )
    return catalog

"""
Inventory loading for the vending machine.

An inventory resource is a dictionary keyed by selection name, each value
holding a ``price`` and a ``quantity``:

    <dict>
      <key>Soda</key>
      <dict><key>price</key><real>1.5</real><key>quantity</key><real>20</real></dict>
    </dict>

Property lists (``.plist``) and JSON files (``.json``) are supported.  The
format is picked from the file extension, the same way partner feeds pick
an adapter.  Malformed entries are rejected here so the machine never has
to re-validate its catalog.

Usage example:

    from inventory import load_inventory
    from vending_machine import VendingMachine
    machine = VendingMachine(load_inventory("vending_inventory.plist"))
"""

from __future__ import annotations

import json
import logging
import math
import os
import plistlib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from xml.parsers.expat import ExpatError

from vending_machine import VendingItem, VendingSelection

logger = logging.getLogger(__name__)

_THIS_FILE = Path(__file__).resolve()
_DEFAULT_INVENTORY_PATH = (_THIS_FILE.parent / ".." / "data" / "vending_inventory.plist").resolve()


class InventoryError(Exception):
    """Base class for inventory loading failures."""


class InvalidResource(InventoryError):
    """The inventory file is missing or of an unsupported type."""


class ConversionError(InventoryError):
    """The inventory content could not be turned into items."""


class InvalidKey(InventoryError):
    """An inventory key does not name a known selection."""


def _resolve_inventory_path() -> str:
    return os.environ.get("VENDING_INVENTORY_PATH", str(_DEFAULT_INVENTORY_PATH))


def _parse_plist(data: bytes) -> Any:
    try:
        return plistlib.loads(data)
    except (plistlib.InvalidFileException, ExpatError, ValueError) as e:
        raise ConversionError(f"Invalid property list: {e}") from e


def _parse_json(data: bytes) -> Any:
    try:
        return json.loads(data.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConversionError(f"Invalid JSON: {e}") from e


_PARSERS = {
    ".plist": _parse_plist,
    ".json": _parse_json,
}


def dictionary_from_file(file_path: str) -> Dict[str, Any]:
    """Read an inventory resource into a plain dictionary.

    Raises:
        InvalidResource: the file does not exist or its extension is not
            supported.
        ConversionError: the content cannot be parsed or is not a
            dictionary at the top level.
    """
    path = Path(file_path)
    parser = _PARSERS.get(path.suffix.lower())
    if parser is None:
        raise InvalidResource(f"Unsupported inventory format: {path.suffix}")
    if not path.is_file():
        raise InvalidResource(f"Inventory resource not found: {path}")
    dictionary = parser(path.read_bytes())
    if not isinstance(dictionary, dict):
        raise ConversionError("Inventory resource must contain a dictionary")
    return dictionary


def _to_amount(value: Any, field: str, key: str) -> float:
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConversionError(f"{key}: {field} must be a number")
    amount = float(value)
    if not math.isfinite(amount):
        raise ConversionError(f"{key}: {field} must be finite")
    if amount < 0:
        raise ConversionError(f"{key}: {field} cannot be negative")
    return amount


def vending_inventory_from_dictionary(dictionary: Mapping[str, Any]) -> Dict[VendingSelection, VendingItem]:
    """Convert a raw dictionary into the machine's inventory mapping."""
    inventory: Dict[VendingSelection, VendingItem] = {}
    for key, value in dictionary.items():
        try:
            selection = VendingSelection(key)
        except ValueError:
            raise InvalidKey(f"Unknown selection: {key!r}") from None
        if not isinstance(value, Mapping) or "price" not in value or "quantity" not in value:
            raise ConversionError(f"{key}: expected a mapping with price and quantity")
        inventory[selection] = VendingItem(
            price=_to_amount(value["price"], "price", key),
            quantity=_to_amount(value["quantity"], "quantity", key),
        )
    return inventory


def load_inventory(file_path: Optional[str] = None) -> Dict[VendingSelection, VendingItem]:
    """Load the inventory from ``file_path`` or the configured default."""
    path = file_path or _resolve_inventory_path()
    inventory = vending_inventory_from_dictionary(dictionary_from_file(path))
    logger.info("Loaded inventory", extra={"extra": {"path": str(path), "items": len(inventory)}})
    return inventory

#!/usr/bin/env python3
# inventory.py

"""
Car inventory data model and in-memory store.

Features
--------
* One ``InventoryItem`` per car (manufacturer, model, price, color)
* Field coercion on every write (price → non-negative float, color → ``#RRGGBB``)
* Ordered ``Inventory`` store: add, update one field, remove, lookup
* Default seed list used when nothing has been saved yet
"""

import math
import random
import re
import string
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Iterator, List, Optional, Union


DEFAULT_COLOR = "#999999"
ID_LENGTH = 7
ID_ALPHABET = string.ascii_lowercase + string.digits

_NUMBER_PREFIX_RE = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_HEX6_RE = re.compile(r"^#[0-9a-fA-F]{6}$")
_HEX3_RE = re.compile(r"^#[0-9a-fA-F]{3}$")


class Field(Enum):
    """Editable columns of an inventory row."""
    MANUFACTURER = "manufacturer"
    MODEL = "model"
    PRICE = "price"
    COLOR = "color"


# --------------------------------------------------------------------- #
#  Coercion helpers
# --------------------------------------------------------------------- #
def parse_price(value) -> Optional[float]:
    """
    Parse a price the way a number input is read.

    Numbers are taken as-is. Strings are read by their leading numeric
    prefix, so ``"12abc"`` gives 12.0. Returns None when nothing numeric
    can be read. The result may be negative or non-finite.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if value is None:
        return None
    match = _NUMBER_PREFIX_RE.match(str(value))
    if not match:
        return None
    return float(match.group(0))


def coerce_price(value) -> float:
    """Return a finite, non-negative price; anything else becomes 0.0."""
    price = parse_price(value)
    if price is None or not math.isfinite(price) or price < 0:
        return 0.0
    return price


def normalize_color(value) -> str:
    """Return ``value`` as a ``#RRGGBB`` string, keeping its letter case."""
    text = str(value or "").strip()
    if not text:
        return DEFAULT_COLOR
    if not text.startswith("#"):
        text = f"#{text}"
    if _HEX3_RE.match(text):
        text = "#" + "".join(ch * 2 for ch in text[1:])
    if not _HEX6_RE.match(text):
        return DEFAULT_COLOR
    return text


def price_text(price: float) -> str:
    """Text shown in a price entry: ``40000`` rather than ``40000.0``."""
    price = coerce_price(price)
    if price.is_integer():
        return str(int(price))
    return repr(price)


def generate_id(taken=()) -> str:
    """Random 7-character base-36 id that is not in ``taken``."""
    while True:
        new_id = "".join(random.choices(ID_ALPHABET, k=ID_LENGTH))
        if new_id not in taken:
            return new_id


# --------------------------------------------------------------------- #
#  Data model
# --------------------------------------------------------------------- #
@dataclass
class InventoryItem:
    """
    A single car in the inventory.
    """
    id: str                # Unique for the lifetime of the store
    manufacturer: str
    model: str
    price: float = 0.0     # Always finite and >= 0
    color: str = DEFAULT_COLOR

    def __post_init__(self):
        self.id = str(self.id)
        self.manufacturer = str(self.manufacturer)
        self.model = str(self.model)
        self.price = coerce_price(self.price)
        self.color = normalize_color(self.color)

    def set_field(self, field: Field, value) -> None:
        """Overwrite one field, applying that field's coercion."""
        if field is Field.PRICE:
            self.price = coerce_price(value)
        elif field is Field.COLOR:
            self.color = normalize_color(value)
        else:
            setattr(self, field.value, "" if value is None else str(value))

    def to_dict(self) -> dict:
        """Return a JSON-serializable representation."""
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "InventoryItem":
        """Re-create an item from a dict (produced by to_dict)."""
        return InventoryItem(
            id=data["id"],
            manufacturer=data.get("manufacturer", ""),
            model=data.get("model", ""),
            price=data.get("price", 0),
            color=data.get("color", DEFAULT_COLOR),
        )


DEFAULT_ITEMS = (
    {"manufacturer": "BMW", "model": "3 series", "price": 40000, "color": "#1B98E0"},
    {"manufacturer": "Audi", "model": "Q5", "price": 41000, "color": "#453603"},
    {"manufacturer": "Skoda", "model": "Kamiq", "price": 15000, "color": "#ff0000"},
)


class Inventory:
    """
    Ordered inventory container – the single source of truth for the editor,
    the chart and the persistence layer.
    """

    def __init__(self, items: Optional[List[InventoryItem]] = None) -> None:
        self._items: List[InventoryItem] = list(items or [])

    @classmethod
    def with_defaults(cls) -> "Inventory":
        """Fresh inventory holding the three seed cars with new ids."""
        inventory = cls()
        for data in DEFAULT_ITEMS:
            inventory.add_item(InventoryItem(id=inventory.new_id(), **data))
        return inventory

    # --------------------------------------------------------------------- #
    #  Public API
    # --------------------------------------------------------------------- #
    def new_id(self) -> str:
        return generate_id({item.id for item in self._items})

    def add_item(self, item: InventoryItem) -> InventoryItem:
        """Append ``item`` at the end of the list."""
        self._items.append(item)
        return item

    def get_item(self, item_id: str) -> Optional[InventoryItem]:
        """Return the item with ``item_id`` or None if not present."""
        item_id = str(item_id)
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def update_field(self, item_id: str, field: Union[Field, str], value) -> Optional[InventoryItem]:
        """
        Overwrite one field of the item with ``item_id``.

        Returns the updated item, or None when no item has that id.
        """
        field = Field(field)
        item = self.get_item(item_id)
        if item is None:
            return None
        item.set_field(field, value)
        return item

    def remove_item(self, item_id: str) -> bool:
        """Delete the first item with ``item_id``; False if none matched."""
        item_id = str(item_id)
        for index, item in enumerate(self._items):
            if item.id == item_id:
                del self._items[index]
                return True
        return False

    @property
    def items(self) -> List[InventoryItem]:
        """Copy of the ordered item list for read-only iteration."""
        return list(self._items)

    def total_price(self) -> float:
        return sum(item.price for item in self._items)

    def to_dicts(self) -> List[Dict]:
        return [item.to_dict() for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[InventoryItem]:
        return iter(list(self._items))

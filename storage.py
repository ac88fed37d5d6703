#!/usr/bin/env python3
# storage.py

"""
Persistence for the car inventory.

The inventory is kept as one JSON string under a fixed key in a small
key-value store, the same way a browser keeps it in ``localStorage``.
Every save writes the full list; a read that fails for any reason is
reported as "no data".
"""

import json
import os
from typing import Dict, List, Optional

from inventory import Inventory, InventoryItem, generate_id


DATA_FILE = "car_inventory.json"
STORAGE_KEY = "carInventory"


# --------------------------------------------------------------------- #
#   Key-value string stores
# --------------------------------------------------------------------- #
class MemoryStore:
    """Key-value store held in a dict."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """Key-value store kept as one JSON object in a file."""

    def __init__(self, path: str = DATA_FILE):
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"'{self.path}' does not hold a JSON object")
        return data

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except ValueError:
            # Unreadable file is replaced by a fresh one
            data = {}
        data[key] = value
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)


# --------------------------------------------------------------------- #
#   Persistence adapter
# --------------------------------------------------------------------- #
class InventoryStorage:
    """Saves and loads the full item list under one key."""

    def __init__(self, store, key: str = STORAGE_KEY):
        self.store = store
        self.key = key

    def save(self, items: List[InventoryItem]) -> None:
        """Serialise the full list under the storage key."""
        payload = json.dumps([item.to_dict() for item in items])
        self.store.set_item(self.key, payload)

    def load(self) -> Optional[List[InventoryItem]]:
        """
        Return the saved items, or None when nothing usable is stored.

        Missing keys, malformed JSON, payloads that are not a list of
        objects and unreadable files all count as "no data".
        """
        try:
            raw = self.store.get_item(self.key)
            if not raw:
                return None
            data = json.loads(raw)
            if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
                print(f"⚠️  Ignoring saved inventory under '{self.key}': not a list of items.")
                return None
            return _items_from_records(data)
        except (OSError, ValueError, TypeError, KeyError) as e:
            print(f"⚠️  Could not read saved inventory under '{self.key}': {e}")
            return None


def _items_from_records(records: List[Dict]) -> List[InventoryItem]:
    """Build items from stored records, giving a fresh id to any record without one."""
    taken = {str(r["id"]) for r in records if r.get("id")}
    items = []
    for record in records:
        if not record.get("id"):
            record = dict(record, id=generate_id(taken))
            taken.add(record["id"])
        items.append(InventoryItem.from_dict(record))
    return items


def load_or_seed(storage: InventoryStorage) -> Inventory:
    """
    Load the saved inventory, or seed the default cars when there is none.

    The result is saved straight away either way.
    """
    items = storage.load()
    if items is None:
        inventory = Inventory.with_defaults()
        print(f"✅ Seeded {len(inventory)} default cars.")
    else:
        inventory = Inventory(items)
    storage.save(inventory.items)
    return inventory

#!/usr/bin/env python3
# editor.py

"""
Editing operations behind the inventory window.

``InventoryEditor`` receives typed events from the view (field edits,
delete requests, add submissions), applies them to the ``Inventory``,
saves, and asks the render scheduler for a chart redraw. The view is any
object with ``show_message``, ``refresh_rows``, ``reset_add_form`` and
``play_cue``.
"""

import math
from dataclasses import dataclass
from typing import Optional

from inventory import Field, Inventory, InventoryItem, normalize_color, parse_price, price_text
from scheduler import DEBOUNCE_MS, Debouncer


ADD_VALIDATION_MESSAGE = "Please fill Manufacturer, Model and a non-negative Price."


@dataclass(frozen=True)
class FieldEdit:
    """One change to one field of one row."""
    item_id: str
    field: Field
    value: object
    live: bool = False     # True while typing, False once the edit is committed


def display_value(item: InventoryItem, field: Field) -> str:
    """Text a row widget should show for ``field`` of ``item``."""
    if field is Field.PRICE:
        return price_text(item.price)
    return str(getattr(item, field.value))


class InventoryEditor:
    def __init__(self, inventory: Inventory, storage, scheduler, timers, view=None,
                 debounce_ms: int = DEBOUNCE_MS):
        self.inventory = inventory
        self.storage = storage
        self.scheduler = scheduler
        self.view = view
        self._live_save = Debouncer(timers, self._save_and_redraw, debounce_ms)

    def _save(self) -> None:
        self.storage.save(self.inventory.items)

    def _save_and_redraw(self) -> None:
        self._save()
        self.scheduler.request()

    # --------------------------------------------------------------------- #
    #  Row editing
    # --------------------------------------------------------------------- #
    def edit_field(self, edit: FieldEdit) -> Optional[str]:
        """
        Apply ``edit`` to the store.

        Live edits are saved and redrawn once typing pauses; committed edits
        are saved and redrawn right away. Returns the coerced value as
        display text, or None when the row no longer exists.
        """
        item = self.inventory.update_field(edit.item_id, edit.field, edit.value)
        if item is None:
            return None

        if edit.live:
            self._live_save()
        else:
            self._live_save.cancel()
            self._save_and_redraw()
        return display_value(item, edit.field)

    def delete_item(self, item_id: str) -> bool:
        """Remove a row; unknown ids change nothing."""
        if not self.inventory.remove_item(item_id):
            return False
        self._save()
        if self.view is not None:
            self.view.refresh_rows()
        self.scheduler.request()
        return True

    def flush(self) -> None:
        """Save now if a live edit is still waiting for its debounce."""
        self._live_save.flush()

    # --------------------------------------------------------------------- #
    #  Add-item flow
    # --------------------------------------------------------------------- #
    def add_item(self, manufacturer, model, price, color) -> Optional[InventoryItem]:
        """
        Validate the add form and append a new car.

        Returns the new item, or None after showing a message when the
        manufacturer or model is blank or the price is not a finite
        non-negative number.
        """
        manufacturer = str(manufacturer or "").strip()
        model = str(model or "").strip()
        value = parse_price(price)

        if not manufacturer or not model or value is None or not math.isfinite(value) or value < 0:
            if self.view is not None:
                self.view.show_message(ADD_VALIDATION_MESSAGE)
            return None

        color = normalize_color(color)
        item = InventoryItem(
            id=self.inventory.new_id(),
            manufacturer=manufacturer,
            model=model,
            price=value,
            color=color,
        )
        self.inventory.add_item(item)
        self._save()

        if self.view is not None:
            self.view.reset_add_form(color)
            self.view.refresh_rows()
        self.scheduler.request()
        self._play_cue()
        return item

    def _play_cue(self) -> None:
        if self.view is None:
            return
        try:
            self.view.play_cue()
        except Exception as e:
            print(f"Audio cue failed: {e}")

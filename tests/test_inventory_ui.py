import pytest

pytest.importorskip("tkinter")

import tkinter as tk

from editor import InventoryEditor
from inventory import Field
from scheduler import DEBOUNCE_MS, RenderScheduler
from storage import InventoryStorage, JsonFileStore

from conftest import FakeVar
from inventory_ui import CarInventoryApp, RowCell


@pytest.fixture
def editor(cars, storage, timers, view):
    scheduler = RenderScheduler(timers, lambda: None)
    return InventoryEditor(cars, storage, scheduler, timers, view=view)


def test_price_cell_shows_coerced_value_on_commit(editor, cars):
    var = FakeVar("40000")
    cell = RowCell(editor, "a1", Field.PRICE, var)

    var.set("abc")
    assert cell.commit() == "0"
    assert var.get() == "0"
    assert cars.get_item("a1").price == 0.0


def test_price_cell_keeps_typed_text_while_live(editor, cars, storage, timers):
    var = FakeVar("40000")
    RowCell(editor, "a1", Field.PRICE, var)

    var.set("12.")
    assert var.get() == "12."
    assert cars.get_item("a1").price == 12.0
    assert storage.saves == 0
    timers.advance(DEBOUNCE_MS)
    assert storage.saves == 1


def test_write_back_does_not_start_a_live_save(editor, storage, timers):
    var = FakeVar("40000")
    cell = RowCell(editor, "a1", Field.PRICE, var)
    var.value = "7abc"
    cell.commit()
    assert var.get() == "7"
    assert storage.saves == 1
    timers.advance(DEBOUNCE_MS)
    assert storage.saves == 1


def test_text_cell_commit_leaves_text_alone(editor, cars):
    var = FakeVar("3 series")
    cell = RowCell(editor, "a1", Field.MODEL, var)
    var.set(" M3 ")
    assert cell.commit() == " M3 "
    assert var.get() == " M3 "
    assert cars.get_item("a1").model == " M3 "


def test_cell_for_deleted_row_does_nothing(editor, cars):
    var = FakeVar("Q5")
    cell = RowCell(editor, "b2", Field.MODEL, var)
    cars.remove_item("b2")
    var.set("A4")
    assert cell.commit() is None
    assert var.get() == "A4"


@pytest.fixture
def tk_root():
    try:
        root = tk.Tk()
    except tk.TclError:
        pytest.skip("no display available")
    root.withdraw()
    yield root
    root.destroy()


def test_app_price_entry_writes_back_and_chart_draws(tk_root, tmp_path):
    path = tmp_path / "cars.json"
    app = CarInventoryApp(tk_root, data_file=str(path))
    first = app.inventory.items[0]

    cell = app.row_cells[(first.id, Field.PRICE)]
    cell.var.set("abc")
    cell.commit()
    assert cell.var.get() == "0"

    app.render_chart()
    assert len(app.chart_surface.axes.patches) == 2
    assert app.total_var.get() == "$56,000"
    assert InventoryStorage(JsonFileStore(str(path))).load()[0].price == 0.0


def test_app_message_bar_clears(tk_root, tmp_path):
    app = CarInventoryApp(tk_root, data_file=str(tmp_path / "cars.json"))
    app.editor.add_item("", "X", 10, "#000000")
    assert app.message_var.get()
    assert app.message_label.winfo_manager() == "pack"
    app._hide_message()
    assert app.message_var.get() == ""

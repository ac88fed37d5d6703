import pytest

from inventory import Inventory, InventoryItem
from storage import InventoryStorage, MemoryStore


class ManualTimers:
    """Timer backend driven by hand: ``advance(ms)`` fires what is due."""

    def __init__(self):
        self.now = 0
        self._queue = {}
        self._next = 0

    def call_later(self, delay_ms, callback):
        self._next += 1
        self._queue[self._next] = (self.now + delay_ms, callback)
        return self._next

    def cancel(self, handle):
        self._queue.pop(handle, None)

    @property
    def scheduled(self):
        return len(self._queue)

    def advance(self, ms):
        target = self.now + ms
        while True:
            due = [(when, h) for h, (when, _) in self._queue.items() if when <= target]
            if not due:
                break
            when, handle = min(due)
            self.now = when
            _, callback = self._queue.pop(handle)
            callback()
        self.now = target


class RecordingSurface:
    def __init__(self, width=400, height=300, ratio=2.0):
        self.width = width
        self.height = height
        self.ratio = ratio
        self.calls = []

    def size(self):
        return self.width, self.height

    def pixel_ratio(self):
        return self.ratio

    def resize(self, width, height, ratio):
        self.calls.append(("resize", width, height, ratio))

    def clear(self):
        self.calls.append(("clear",))

    def wedge(self, cx, cy, radius, start, end, fill, stroke, stroke_width):
        self.calls.append(("wedge", cx, cy, radius, start, end, fill))

    def text(self, x, y, text, rotation, color, size, bold):
        self.calls.append(("text", x, y, text, rotation, color, size, bold))

    def of_kind(self, kind):
        return [c for c in self.calls if c[0] == kind]


class RecordingPanel:
    def __init__(self):
        self.total = None
        self.notice = None
        self.legend = None

    def set_total(self, text):
        self.total = text

    def show_notice(self, text):
        self.notice = text

    def hide_notice(self):
        self.notice = None

    def set_legend(self, rows):
        self.legend = list(rows)


class FakeView:
    def __init__(self, cue_error=None):
        self.messages = []
        self.row_refreshes = 0
        self.form_resets = []
        self.cues = 0
        self.cue_error = cue_error

    def show_message(self, text):
        self.messages.append(text)

    def refresh_rows(self):
        self.row_refreshes += 1

    def reset_add_form(self, color):
        self.form_resets.append(color)

    def play_cue(self):
        self.cues += 1
        if self.cue_error:
            raise self.cue_error


class FakeVar:
    """Stand-in for a Tk StringVar: ``set`` fires the write traces."""

    def __init__(self, value=""):
        self.value = value
        self.traces = []

    def get(self):
        return self.value

    def set(self, value):
        self.value = value
        for callback in self.traces:
            callback("var", "", "write")

    def trace_add(self, mode, callback):
        self.traces.append(callback)


class CountingStorage(InventoryStorage):
    def __init__(self, store=None):
        super().__init__(store if store is not None else MemoryStore())
        self.saves = 0

    def save(self, items):
        self.saves += 1
        super().save(items)


@pytest.fixture(autouse=True)
def us_locale(monkeypatch):
    monkeypatch.delenv("LANGUAGE", raising=False)
    monkeypatch.setenv("LC_ALL", "en_US.UTF-8")


@pytest.fixture
def timers():
    return ManualTimers()


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def panel():
    return RecordingPanel()


@pytest.fixture
def view():
    return FakeView()


@pytest.fixture
def storage():
    return CountingStorage()


@pytest.fixture
def cars():
    return Inventory([
        InventoryItem(id="a1", manufacturer="BMW", model="3 series", price=40000, color="#1B98E0"),
        InventoryItem(id="b2", manufacturer="Audi", model="Q5", price=41000, color="#453603"),
        InventoryItem(id="c3", manufacturer="Skoda", model="Kamiq", price=15000, color="#ff0000"),
    ])

#!/usr/bin/env python3
# scheduler.py

"""
Deferred work for the editor: coalesced chart redraws and debounced saves.

Both helpers keep a single pending token. A new request cancels the
previous token before scheduling a fresh one, and a callback only runs
if its token is still the current one.
"""

from typing import Any, Callable, Optional


FRAME_MS = 16       # one display frame at ~60 Hz
DEBOUNCE_MS = 200


class TkTimers:
    """Timer backend on top of a Tk widget's ``after`` queue."""

    def __init__(self, widget):
        self.widget = widget

    def call_later(self, delay_ms: int, callback: Callable[[], Any]):
        return self.widget.after(delay_ms, callback)

    def cancel(self, handle) -> None:
        self.widget.after_cancel(handle)


class _PendingTask:
    """Holds at most one scheduled callback on a timer backend."""

    def __init__(self, timers):
        self.timers = timers
        self._token: Optional[object] = None
        self._handle = None

    @property
    def pending(self) -> bool:
        return self._token is not None

    def schedule(self, delay_ms: int, callback: Callable[[], Any]) -> None:
        self.cancel()
        token = object()

        def fire():
            if self._token is not token:
                return
            self._token = None
            self._handle = None
            callback()

        self._token = token
        self._handle = self.timers.call_later(delay_ms, fire)

    def cancel(self) -> None:
        if self._token is None:
            return
        handle = self._handle
        self._token = None
        self._handle = None
        self.timers.cancel(handle)


class RenderScheduler:
    """
    Coalesces redraw requests into one render per frame.

    Every ``request()`` drops the redraw that is still waiting and
    schedules exactly one for the next frame.
    """

    def __init__(self, timers, render: Callable[[], Any], frame_ms: int = FRAME_MS):
        self.render = render
        self.frame_ms = frame_ms
        self._task = _PendingTask(timers)

    @property
    def pending(self) -> bool:
        return self._task.pending

    def request(self) -> None:
        self._task.schedule(self.frame_ms, self.render)

    def cancel(self) -> None:
        self._task.cancel()


class Debouncer:
    """Runs ``action`` once ``delay_ms`` has passed without a new call."""

    def __init__(self, timers, action: Callable[[], Any], delay_ms: int = DEBOUNCE_MS):
        self.action = action
        self.delay_ms = delay_ms
        self._task = _PendingTask(timers)

    @property
    def pending(self) -> bool:
        return self._task.pending

    def __call__(self) -> None:
        self._task.schedule(self.delay_ms, self.action)

    def cancel(self) -> None:
        self._task.cancel()

    def flush(self) -> None:
        """Run the pending action now, if there is one."""
        if self._task.pending:
            self._task.cancel()
            self.action()

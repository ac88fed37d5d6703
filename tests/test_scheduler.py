from scheduler import DEBOUNCE_MS, FRAME_MS, Debouncer, RenderScheduler, TkTimers


def test_requests_within_a_frame_render_once(timers):
    renders = []
    scheduler = RenderScheduler(timers, lambda: renders.append(timers.now))

    for _ in range(5):
        scheduler.request()
    assert scheduler.pending
    assert timers.scheduled == 1

    timers.advance(FRAME_MS)
    assert renders == [FRAME_MS]
    assert not scheduler.pending


def test_new_request_replaces_pending_one(timers):
    renders = []
    scheduler = RenderScheduler(timers, lambda: renders.append(timers.now))
    scheduler.request()
    timers.advance(FRAME_MS - 1)
    scheduler.request()
    timers.advance(FRAME_MS - 1)
    assert renders == []
    timers.advance(1)
    assert renders == [2 * FRAME_MS - 1]


def test_requests_after_a_render_schedule_again(timers):
    renders = []
    scheduler = RenderScheduler(timers, lambda: renders.append(1))
    scheduler.request()
    timers.advance(FRAME_MS)
    scheduler.request()
    timers.advance(FRAME_MS)
    assert renders == [1, 1]


def test_stale_callback_does_nothing():
    class LeakyTimers:
        """Backend whose cancel does not stop the callback."""
        def __init__(self):
            self.callbacks = []

        def call_later(self, delay_ms, callback):
            self.callbacks.append(callback)
            return len(self.callbacks)

        def cancel(self, handle):
            pass

    timers = LeakyTimers()
    renders = []
    scheduler = RenderScheduler(timers, lambda: renders.append(1))
    scheduler.request()
    scheduler.request()
    for callback in timers.callbacks:
        callback()
    assert renders == [1]


def test_cancel_drops_pending_render(timers):
    renders = []
    scheduler = RenderScheduler(timers, lambda: renders.append(1))
    scheduler.request()
    scheduler.cancel()
    timers.advance(100)
    assert renders == []
    assert timers.scheduled == 0


def test_debouncer_waits_for_quiet_period(timers):
    calls = []
    debounced = Debouncer(timers, lambda: calls.append(timers.now))

    for _ in range(4):
        debounced()
        timers.advance(100)
    assert calls == []

    timers.advance(DEBOUNCE_MS)
    assert calls == [300 + DEBOUNCE_MS]


def test_debouncer_flush_runs_now(timers):
    calls = []
    debounced = Debouncer(timers, lambda: calls.append(1), delay_ms=50)
    debounced.flush()
    assert calls == []

    debounced()
    debounced.flush()
    assert calls == [1]
    timers.advance(100)
    assert calls == [1]


def test_tk_timers_delegate_to_after():
    class Widget:
        def __init__(self):
            self.cancelled = []

        def after(self, ms, callback):
            return f"after#{ms}"

        def after_cancel(self, handle):
            self.cancelled.append(handle)

    widget = Widget()
    timers = TkTimers(widget)
    handle = timers.call_later(16, lambda: None)
    timers.cancel(handle)
    assert widget.cancelled == ["after#16"]

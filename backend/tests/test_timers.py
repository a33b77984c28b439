from scramble.services.game import ManualTimer, SocketIOTimer


class _InlineSocketIO:
    """Runs background tasks immediately; records requested sleeps."""

    def __init__(self, cancel_during_sleep=None):
        self.sleeps = []
        self.cancel_during_sleep = cancel_during_sleep

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        if self.cancel_during_sleep:
            self.cancel_during_sleep()

    def start_background_task(self, target, *args):
        self.pending = (target, args)


def test_manual_timer_fires_in_deadline_order():
    timer = ManualTimer()
    calls = []
    timer.call_later(2, lambda: calls.append('b'))
    timer.call_later(1, lambda: calls.append('a'))
    timer.call_later(2, lambda: calls.append('c'))
    assert timer.advance(1) == 1
    assert calls == ['a']
    assert timer.advance(1) == 2
    assert calls == ['a', 'b', 'c']
    assert timer.now == 2


def test_manual_timer_cancel():
    timer = ManualTimer()
    calls = []
    handle = timer.call_later(1, lambda: calls.append(1))
    handle.cancel()
    assert timer.pending == 0
    assert timer.run_all() == 0
    assert calls == []


def test_manual_timer_runs_calls_scheduled_while_advancing():
    timer = ManualTimer()
    calls = []

    def chain():
        calls.append(timer.now)
        if len(calls) < 3:
            timer.call_later(1, chain)

    timer.call_later(1, chain)
    timer.advance(10)
    assert calls == [1, 2, 3]


def test_socketio_timer_sleeps_then_calls():
    sio = _InlineSocketIO()
    calls = []
    handle = SocketIOTimer(sio).call_later(2.5, lambda: calls.append(True))
    target, args = sio.pending
    target(*args)
    assert sio.sleeps == [2.5]
    assert calls == [True]
    assert handle.fired


def test_socketio_timer_skips_cancelled_call():
    calls = []
    holder = {}
    sio = _InlineSocketIO(cancel_during_sleep=lambda: holder['handle'].cancel())
    holder['handle'] = SocketIOTimer(sio).call_later(1, lambda: calls.append(True))
    target, args = sio.pending
    target(*args)
    assert calls == []
    assert not holder['handle'].fired

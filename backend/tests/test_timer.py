from app.services.match.timer import RoundTimer


class Recorder:
    def __init__(self):
        self.ticks = []
        self.expired = []

    def on_tick(self, handle, remaining):
        self.ticks.append(remaining)

    def on_expire(self, handle):
        self.expired.append(handle)


def test_ticks_down_then_expires_once(scheduler):
    rec = Recorder()
    timer = RoundTimer(rec.on_tick, rec.on_expire, spawn=scheduler.spawn, sleep=scheduler.sleep)
    handle = timer.start(3)
    assert timer.running
    assert timer.is_live(handle)

    scheduler.run_pending()
    assert rec.ticks == [2, 1]
    assert rec.expired == [handle]
    assert handle.expired
    assert not timer.running


def test_cancel_before_expiry_fires_nothing(scheduler):
    rec = Recorder()
    timer = RoundTimer(rec.on_tick, rec.on_expire, spawn=scheduler.spawn, sleep=scheduler.sleep)
    handle = timer.start(3)
    timer.cancel()
    scheduler.run_pending()
    assert rec.ticks == []
    assert rec.expired == []
    assert handle.cancelled
    assert not timer.is_live(handle)


def test_start_cancels_previous_timer(scheduler):
    rec = Recorder()
    timer = RoundTimer(rec.on_tick, rec.on_expire, spawn=scheduler.spawn, sleep=scheduler.sleep)
    first = timer.start(2)
    second = timer.start(2)
    assert first.cancelled
    assert not timer.is_live(first)

    scheduler.run_pending()
    assert rec.expired == [second]


def test_cancel_mid_countdown(scheduler):
    rec = Recorder()
    timer = None

    def sleep(seconds):
        if len(rec.ticks) == 1:
            timer.cancel()

    timer = RoundTimer(rec.on_tick, rec.on_expire, spawn=scheduler.spawn, sleep=sleep)
    timer.start(5)
    scheduler.run_pending()
    assert rec.ticks == [4]
    assert rec.expired == []


def test_cancel_after_expiry_is_noop(scheduler):
    rec = Recorder()
    timer = RoundTimer(rec.on_tick, rec.on_expire, spawn=scheduler.spawn, sleep=scheduler.sleep)
    handle = timer.start(1)
    scheduler.run_pending()
    timer.cancel()
    assert handle.expired
    assert not handle.cancelled
    assert rec.expired == [handle]
    assert timer.remaining == 0

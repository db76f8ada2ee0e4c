from typing import Callable, Optional


class TimerHandle:
    def __init__(self, duration: int):
        self.duration = duration
        self.remaining = duration
        self.cancelled = False
        self.expired = False

    def __repr__(self):
        return f'<TimerHandle remaining={self.remaining}/{self.duration} cancelled={self.cancelled} expired={self.expired}>'


class RoundTimer:
    """Single restartable per-round countdown.

    ``spawn`` and ``sleep`` come from the Socket.IO server
    (``start_background_task`` / ``sleep``) so the countdown cooperates with
    whatever async mode the server runs in. ``on_tick(handle, remaining)``
    fires once per interval, ``on_expire(handle)`` fires once at zero. A
    callback whose handle is no longer live must be ignored by the receiver;
    ``is_live`` is the check.
    """

    def __init__(self, on_tick: Callable, on_expire: Callable, spawn: Callable, sleep: Callable,
                 interval: float = 1.0):
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._spawn = spawn
        self._sleep = sleep
        self._interval = interval
        self._handle: Optional[TimerHandle] = None

    @property
    def remaining(self) -> int:
        return self._handle.remaining if self._handle else 0

    @property
    def running(self) -> bool:
        return self._handle is not None and not self._handle.cancelled and not self._handle.expired

    def start(self, duration: int) -> TimerHandle:
        self.cancel()
        handle = TimerHandle(duration)
        self._handle = handle
        self._spawn(self._run, handle)
        return handle

    def cancel(self) -> None:
        if self._handle is not None and not self._handle.expired:
            self._handle.cancelled = True
        self._handle = None

    def is_live(self, handle: TimerHandle) -> bool:
        return handle is self._handle and not handle.cancelled

    def _run(self, handle: TimerHandle) -> None:
        while handle.remaining > 0:
            self._sleep(self._interval)
            if handle.cancelled:
                return
            handle.remaining -= 1
            if handle.remaining > 0:
                self._on_tick(handle, handle.remaining)
        if handle.cancelled:
            return
        handle.expired = True
        self._on_expire(handle)

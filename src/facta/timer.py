"""Cancelable one-second countdown used by quiz sessions."""
import threading


class Countdown:
    """Issues start tokens; only the newest token of a running countdown is live.

    Starting again or cancelling invalidates every token handed out before,
    so a tick that arrives late for an old token can be recognised and dropped.
    """

    def __init__(self):
        self._generation = 0
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def token(self) -> int | None:
        return self._generation if self._running else None

    def start(self) -> int:
        self._generation += 1
        self._running = True
        return self._generation

    def cancel(self) -> None:
        if self._running:
            self._generation += 1
        self._running = False

    def is_current(self, token: int) -> bool:
        return self._running and token == self._generation


class Ticker(threading.Thread):
    """Calls ``tick(token)`` every ``interval`` seconds until it returns False."""

    def __init__(self, tick, token: int, interval: float = 1.0):
        super().__init__(daemon=True)
        self.tick = tick
        self.token = token
        self.interval = interval
        self._stopped = threading.Event()

    def run(self) -> None:
        while not self._stopped.wait(self.interval):
            if not self.tick(self.token):
                break

    def stop(self) -> None:
        self._stopped.set()

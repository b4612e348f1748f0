import logging
import time
from typing import Callable, Optional


class Ticker:
    """Handle for one recurring background timer.

    The worker sleeps ``interval`` seconds between calls and stops as soon as
    the handle is cancelled. The callback receives the handle itself so the
    receiver can discard ticks from a handle it no longer owns.
    """

    def __init__(self, name: str, interval: float, callback: Callable[['Ticker'], None],
                 spawn: Optional[Callable] = None, sleep: Callable[[float], None] = time.sleep,
                 logger: Optional[logging.Logger] = None):
        self.name = name
        self.interval = interval
        self._callback = callback
        self._spawn = spawn
        self._sleep = sleep
        self._logger = logger or logging.getLogger(__name__)
        self._active = False
        self.ticks = 0

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> 'Ticker':
        if self._active:
            return self
        self._active = True
        self._logger.info(f"[timer-set] timer={self.name} interval={self.interval}s")
        if self._spawn is not None:
            self._spawn(self._run)
        return self

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._logger.info(f"[timer-cancel] timer={self.name} after={self.ticks} ticks")

    def _run(self) -> None:
        while self._active:
            self._sleep(self.interval)
            if not self._active:
                break
            self.ticks += 1
            try:
                self._callback(self)
            except Exception:
                self._logger.exception(f"[timer-error] timer={self.name} tick={self.ticks}")


class Clock:
    """Creates tickers; with no ``spawn`` the tickers are driven by hand."""

    def __init__(self, interval: float = 1.0, spawn: Optional[Callable] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 logger: Optional[logging.Logger] = None):
        self.interval = interval
        self._spawn = spawn
        self._sleep = sleep
        self._logger = logger

    @classmethod
    def for_app(cls, app, socketio) -> 'Clock':
        """Clock backed by Socket.IO background tasks.

        - No background tasks in TESTING mode unless ENABLE_CLOCK_IN_TESTS is set
        - Uses socketio.sleep so it cooperates with eventlet/gevent workers
        """
        enabled = not app.config.get('TESTING') or app.config.get('ENABLE_CLOCK_IN_TESTS')
        return cls(
            interval=float(app.config.get('TICK_INTERVAL_SEC', 1.0)),
            spawn=socketio.start_background_task if enabled else None,
            sleep=socketio.sleep,
            logger=app.logger,
        )

    def schedule(self, name: str, callback: Callable[[Ticker], None]) -> Ticker:
        return Ticker(name, self.interval, callback, spawn=self._spawn,
                      sleep=self._sleep, logger=self._logger).start()

import logging
from typing import Callable, Optional

from gridclaim.models import Phase
from .scheduler import Clock, Ticker
from .scoring import determine_winner, recompute_scores
from .session import GameSession


class RoundController:
    """Drives the lobby -> active -> cooldown -> active cycle.

    It is the only component that starts or stops timers. It holds one
    handle per timer kind and cancels the old handle before starting a new
    one. Every transition ends with ``on_change`` (the full broadcast).
    """

    def __init__(self, session: GameSession, clock: Clock,
                 on_change: Callable[[], None],
                 cooldown_duration: int = 10,
                 on_tick: Optional[Callable[[Ticker], None]] = None,
                 logger: Optional[logging.Logger] = None):
        self.session = session
        self.clock = clock
        self.on_change = on_change
        self.cooldown_duration = cooldown_duration
        # Background ticks are routed through the engine so they take the session lock
        self.on_tick = on_tick or self.handle_tick
        self.logger = logger or logging.getLogger(__name__)
        self._round_timer: Optional[Ticker] = None
        self._cooldown_timer: Optional[Ticker] = None

    @property
    def round_timer_active(self) -> bool:
        return self._round_timer is not None and self._round_timer.active

    @property
    def cooldown_timer_active(self) -> bool:
        return self._cooldown_timer is not None and self._cooldown_timer.active

    # ---- transitions ----

    def start_round(self) -> None:
        self._cancel_cooldown_timer()
        self._cancel_round_timer()
        session = self.session
        session.reset_grid()
        recompute_scores(session)
        session.time_left = session.round_duration
        session.winner = None
        session.countdown = None
        session.phase = Phase.ACTIVE
        self._round_timer = self.clock.schedule('round', self.on_tick)
        self.logger.info(f"[round-start] players={len(session.players)} time_left={session.time_left}")
        self.on_change()

    def start_if_idle(self) -> bool:
        """Start a round when a player joins an idle session."""
        if self.session.phase != Phase.LOBBY or self.round_timer_active:
            return False
        self.start_round()
        return True

    def end_round(self) -> None:
        self._cancel_round_timer()
        session = self.session
        session.time_left = 0
        recompute_scores(session)
        session.winner = determine_winner(session)
        session.countdown = self.cooldown_duration
        session.phase = Phase.COOLDOWN
        self._cooldown_timer = self.clock.schedule('cooldown', self.on_tick)
        self.logger.info(
            f"[round-end] winner={session.winner['name']} score={session.winner['score']} "
            f"countdown={session.countdown}"
        )
        self.on_change()

    def reset_to_lobby(self) -> None:
        self._cancel_round_timer()
        self._cancel_cooldown_timer()
        session = self.session
        session.phase = Phase.LOBBY
        session.time_left = session.round_duration
        session.winner = None
        session.countdown = None
        session.reset_grid()
        recompute_scores(session)
        self.logger.info("[lobby-reset] last player left")

    # ---- ticks ----

    def tick(self) -> None:
        """Advance whichever countdown the current phase runs.

        Test hook: bypasses the Ticker handles, which Clock tickers drive
        through ``handle_tick`` instead.
        """
        if self.session.phase == Phase.ACTIVE:
            self._round_tick()
        elif self.session.phase == Phase.COOLDOWN:
            self._cooldown_tick()

    def handle_tick(self, ticker: Ticker) -> None:
        if ticker is self._round_timer and ticker.active:
            self._round_tick()
        elif ticker is self._cooldown_timer and ticker.active:
            self._cooldown_tick()
        else:
            self.logger.info(f"[timer-abort] stale {ticker.name} tick phase={self.session.phase.value}")

    def _round_tick(self) -> None:
        if self.session.time_left - 1 > 0:
            self.session.time_left -= 1
            self.on_change()
        else:
            self.end_round()

    def _cooldown_tick(self) -> None:
        if self.session.countdown - 1 > 0:
            self.session.countdown -= 1
            self.logger.debug(f"[cooldown] countdown={self.session.countdown}")
            self.on_change()
        else:
            self._cancel_cooldown_timer()
            self.start_round()

    def _cancel_round_timer(self) -> None:
        if self._round_timer is not None:
            self._round_timer.cancel()
            self._round_timer = None

    def _cancel_cooldown_timer(self) -> None:
        if self._cooldown_timer is not None:
            self._cooldown_timer.cancel()
            self._cooldown_timer = None

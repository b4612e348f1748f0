import logging
from typing import Any, Dict, Optional, Tuple

from gridclaim.errors import ValidationRejected
from gridclaim.models import UNKNOWN_COUNTRY, Phase
from .admin import AdminManager
from .claims import ClaimArbiter
from .rounds import RoundController
from .scheduler import Clock, Ticker
from .scoring import recompute_scores
from .session import GameSession


class GameEngine:
    """Entry point for every inbound event of one session.

    Each public method handles its event to completion under the session
    lock, broadcast included, so clients never see a half-applied change.
    """

    def __init__(self, broadcaster, clock: Optional[Clock] = None,
                 session: Optional[GameSession] = None,
                 round_duration: int = 60, cooldown_duration: int = 10,
                 logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.session = session or GameSession(round_duration=round_duration)
        self.broadcaster = broadcaster
        self.admin = AdminManager(self.session, broadcaster=broadcaster, logger=self.logger)
        self.claims = ClaimArbiter(self.session, logger=self.logger)
        self.rounds = RoundController(
            self.session,
            clock or Clock(),
            on_change=self._broadcast,
            cooldown_duration=cooldown_duration,
            on_tick=self._on_timer_tick,
            logger=self.logger,
        )
        # connection id -> country resolved at connect time
        self._connections: Dict[str, Dict[str, str]] = {}

    @classmethod
    def from_app(cls, app, socketio, broadcaster) -> 'GameEngine':
        return cls(
            broadcaster,
            clock=Clock.for_app(app, socketio),
            round_duration=int(app.config.get('ROUND_DURATION_SEC', 60)),
            cooldown_duration=int(app.config.get('COOLDOWN_DURATION_SEC', 10)),
            logger=app.logger,
        )

    def _broadcast(self) -> None:
        self.broadcaster.broadcast_all(self.session)

    def snapshot(self) -> Dict[str, Any]:
        with self.session.lock:
            return self.session.snapshot()

    # ---- inbound events ----

    def connect(self, connection_id: str, metadata: Optional[Dict[str, Any]] = None) -> Tuple[Dict[str, Any], bool]:
        """Register a raw connection; returns its greeting snapshot and admin flag."""
        country = (metadata or {}).get('country') or dict(UNKNOWN_COUNTRY)
        with self.session.lock:
            self._connections[connection_id] = country
            is_admin = self.admin.on_connect(connection_id)
            self.logger.info(f"[connect] sid={connection_id} country={country['name']} admin={is_admin}")
            self.broadcaster.notify_admin_status(connection_id, is_admin)
            if is_admin:
                # Cell 0 changed hands; every connected client needs to see it
                snapshot = self.broadcaster.broadcast_all(self.session)
            else:
                snapshot = self.broadcaster.send_to(connection_id, self.session)
            return snapshot, is_admin

    def join_game(self, connection_id: str, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        with self.session.lock:
            country = self._connections.get(connection_id)
            try:
                player = self.admin.add_player(connection_id, data, country)
            except ValidationRejected as exc:
                self.logger.info(f"[join-rejected] sid={connection_id} reason={exc.message}")
                return {'success': False, 'message': exc.message}

            self.logger.info(f"[join] sid={connection_id} name={player.name} color={player.color}")
            self.rounds.start_if_idle()
            recompute_scores(self.session)
            self._broadcast()
            return {'success': True}

    def claim_square(self, connection_id: str, cell_id: Any) -> bool:
        with self.session.lock:
            accepted = self.claims.claim(connection_id, cell_id)
            if accepted:
                self._broadcast()
            return accepted

    def disconnect(self, connection_id: str) -> None:
        with self.session.lock:
            self._connections.pop(connection_id, None)
            if not self.admin.remove_connection(connection_id):
                return
            self.logger.info(f"[disconnect] sid={connection_id} players={len(self.session.players)}")
            if not self.session.players and self.session.phase != Phase.LOBBY:
                self.rounds.reset_to_lobby()
            else:
                recompute_scores(self.session)
            self._broadcast()

    def tick(self) -> None:
        """One clock tick driven by hand.

        Test hook for a Clock built without a spawn function; live timers
        arrive through ``_on_timer_tick``.
        """
        with self.session.lock:
            self.rounds.tick()

    def _on_timer_tick(self, ticker: Ticker) -> None:
        with self.session.lock:
            self.rounds.handle_tick(ticker)

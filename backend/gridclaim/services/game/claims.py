import logging
from typing import Any, Optional

from gridclaim.models import ADMIN_CELL_ID, GRID_SIZE, Phase
from .scoring import recompute_scores
from .session import GameSession


class ClaimArbiter:
    """Accepts or ignores a player's request to own a cell.

    Invalid requests are ignored without telling the caller; the next
    broadcast is the only feedback a client gets.
    """

    def __init__(self, session: GameSession, logger: Optional[logging.Logger] = None):
        self.session = session
        self.logger = logger or logging.getLogger(__name__)

    def rejection_reason(self, player_id: str, cell_id: Any) -> Optional[str]:
        session = self.session
        if session.phase != Phase.ACTIVE or session.winner is not None:
            return f"phase={session.phase.value}"
        # bool is an int subclass; True must not address cell 1
        if isinstance(cell_id, bool) or not isinstance(cell_id, int):
            return f"bad cell id {cell_id!r}"
        if not 0 <= cell_id < GRID_SIZE:
            return f"cell {cell_id} out of range"
        if session.get_player(player_id) is None:
            return "not a player"
        is_admin = session.is_admin(player_id)
        if cell_id == ADMIN_CELL_ID and not is_admin:
            return "cell 0 is reserved for the admin"
        if cell_id != ADMIN_CELL_ID and is_admin:
            return "admin may only hold cell 0"
        return None

    def claim(self, player_id: str, cell_id: Any) -> bool:
        reason = self.rejection_reason(player_id, cell_id)
        if reason is not None:
            self.logger.debug(f"[claim-ignored] sid={player_id} cell={cell_id!r} reason={reason}")
            return False

        player = self.session.get_player(player_id)
        self.session.grid[cell_id].assign(player.id, player.name, player.color)
        recompute_scores(self.session)
        return True

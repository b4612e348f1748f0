import threading
from typing import Any, Dict, List, Optional

from gridclaim.models import (
    ADMIN_CELL_ID,
    ADMIN_COLOR,
    GRID_SIZE,
    SENTINEL_ADMIN_ID,
    SENTINEL_ADMIN_NAME,
    Cell,
    Phase,
    Player,
)


class GameSession:
    """Authoritative in-memory state of one game room.

    The session is plain data plus read helpers. Mutation goes through the
    admin manager, the claim arbiter and the round controller, all of which
    run under ``lock``.
    """

    def __init__(self, round_duration: int = 60):
        self.round_duration = round_duration
        self.lock = threading.RLock()
        self.players: List[Player] = []
        self.grid: List[Cell] = [Cell(id=i) for i in range(GRID_SIZE)]
        self.phase = Phase.LOBBY
        self.time_left = round_duration
        self.countdown: Optional[int] = None
        self.winner: Optional[Dict[str, Any]] = None
        self.admin_id: Optional[str] = None
        self.reset_grid()

    # ---- lookups ----

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def admin_player(self) -> Optional[Player]:
        if self.admin_id is None:
            return None
        return self.get_player(self.admin_id)

    def is_admin(self, player_id: str) -> bool:
        return self.admin_id is not None and player_id == self.admin_id

    def name_in_use(self, name: str) -> bool:
        return any(p.name == name for p in self.players)

    def color_in_use(self, color: str, exclude_id: Optional[str] = None) -> bool:
        return any(p.color == color for p in self.players if p.id != exclude_id)

    # ---- grid helpers ----

    def assign_admin_cell(self) -> None:
        """Point cell 0 at the current admin, or the sentinel when there is none."""
        admin = self.admin_player()
        if self.admin_id is None:
            owner_id, owner_name = SENTINEL_ADMIN_ID, SENTINEL_ADMIN_NAME
        else:
            owner_id = self.admin_id
            owner_name = admin.name if admin else SENTINEL_ADMIN_NAME
        self.grid[ADMIN_CELL_ID].assign(owner_id, owner_name, ADMIN_COLOR)

    def reset_grid(self) -> None:
        for cell in self.grid:
            if cell.id != ADMIN_CELL_ID:
                cell.clear()
        self.assign_admin_cell()

    def owned_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for cell in self.grid:
            if cell.owner_id:
                counts[cell.owner_id] = counts.get(cell.owner_id, 0) + 1
        return counts

    # ---- views ----

    def snapshot(self) -> Dict[str, Any]:
        """Full wire view of the session; a fresh copy on every call."""
        return {
            'grid': [cell.to_dict() for cell in self.grid],
            'players': [p.to_dict(self.admin_id) for p in self.players],
            'timeLeft': self.time_left,
            'countdown': self.countdown,
            'winner': dict(self.winner) if self.winner is not None else None,
            'phase': self.phase.value,
        }


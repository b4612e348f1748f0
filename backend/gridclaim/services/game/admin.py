import logging
import random
from typing import Any, Dict, Optional

from gridclaim.errors import AlreadyJoined, InvalidName, NameTaken, ReservedName
from gridclaim.models import (
    ADMIN_COLOR,
    MAX_NAME_LENGTH,
    SENTINEL_ADMIN_NAME,
    UNKNOWN_COUNTRY,
    Player,
)
from .session import GameSession


def generate_random_color() -> str:
    hue = random.randrange(360)
    saturation = random.randrange(100)
    lightness = random.randrange(60)
    return f"hsl({hue}, {saturation}%, {lightness}%)"


class AdminManager:
    """Owns the roster and the admin role.

    The admin role binds to a raw connection at connect time, before that
    connection has joined, or to the joining player when nobody holds it.
    When the admin leaves, the earliest joined player still present is
    promoted.
    """

    def __init__(self, session: GameSession, broadcaster=None,
                 logger: Optional[logging.Logger] = None):
        self.session = session
        self.broadcaster = broadcaster
        self.logger = logger or logging.getLogger(__name__)

    def on_connect(self, connection_id: str) -> bool:
        if self.session.admin_id is not None:
            return False
        self.session.admin_id = connection_id
        self.session.assign_admin_cell()
        self.logger.info(f"[admin-assign] sid={connection_id}")
        return True

    def add_player(self, connection_id: str, data: Optional[Dict[str, Any]],
                   country: Optional[Dict[str, str]] = None) -> Player:
        """Validate a join request and append the new player to the roster.

        Raises a ValidationRejected subclass when the request is refused.
        """
        data = data if isinstance(data, dict) else {}
        raw_name = data.get('name')
        if not isinstance(raw_name, str) or not raw_name.strip():
            raise InvalidName()
        if self.session.get_player(connection_id) is not None:
            raise AlreadyJoined()

        name = raw_name[:MAX_NAME_LENGTH]
        if name.lower() == SENTINEL_ADMIN_NAME.lower():
            raise ReservedName()
        if self.session.name_in_use(name):
            raise NameTaken()

        claims_admin = self.session.admin_id is None
        if claims_admin:
            # The role was left unheld by a departed admin; the joiner takes it
            self.session.admin_id = connection_id
            self.logger.info(f"[admin-assign] sid={connection_id} on join")

        if self.session.is_admin(connection_id):
            color = ADMIN_COLOR
        else:
            color = data.get('color')
            if not isinstance(color, str) or not color or color == ADMIN_COLOR \
                    or self.session.color_in_use(color):
                color = self._unused_color()

        player = Player(
            id=connection_id,
            name=name,
            color=color,
            country=dict(country or UNKNOWN_COUNTRY),
        )
        self.session.players.append(player)
        if self.session.is_admin(connection_id):
            # Cell 0 now carries the admin's display name
            self.session.assign_admin_cell()
        if claims_admin and self.broadcaster is not None:
            self.broadcaster.notify_admin_status(connection_id, True)
        return player

    def remove_connection(self, connection_id: str) -> bool:
        """Drop a connection from the roster and hand off admin if needed.

        Returns False when the connection was neither a player nor the admin.
        """
        player = self.session.get_player(connection_id)
        was_admin = self.session.is_admin(connection_id)
        if player is None and not was_admin:
            return False
        if player is not None:
            self.session.players.remove(player)
        if was_admin:
            self._hand_off_admin()
        return True

    def _hand_off_admin(self) -> None:
        if not self.session.players:
            self.session.admin_id = None
            self.session.assign_admin_cell()
            self.logger.info("[admin-clear] no players left, admin unset")
            return

        promoted = self.session.players[0]
        self.session.admin_id = promoted.id
        for other in self.session.players[1:]:
            if other.color == ADMIN_COLOR:
                self._recolor(other, self._unused_color())
                self.logger.info(f"[color-reassign] player={other.name} color={other.color}")
        self._recolor(promoted, ADMIN_COLOR)
        self.session.assign_admin_cell()
        self.logger.info(f"[admin-promote] sid={promoted.id} name={promoted.name}")
        if self.broadcaster is not None:
            self.broadcaster.notify_admin_status(promoted.id, True)

    def _recolor(self, player: Player, color: str) -> None:
        """Change a player's colour along with every cell they hold."""
        player.color = color
        for cell in self.session.grid:
            if cell.owner_id == player.id:
                cell.color = color

    def _unused_color(self) -> str:
        color = generate_random_color()
        while self.session.color_in_use(color):
            color = generate_random_color()
        return color

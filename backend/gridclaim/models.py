from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

GRID_SIZE = 100
ADMIN_CELL_ID = 0
ADMIN_COLOR = '#000000'
UNCLAIMED_COLOR = '#FFFFFF'
MAX_NAME_LENGTH = 15

# Stand-in owner of cell 0 while nobody holds the admin role
SENTINEL_ADMIN_ID = 'admin'
SENTINEL_ADMIN_NAME = 'Admin'

UNKNOWN_COUNTRY = {'code': 'xx', 'name': 'Unknown'}


class Phase(Enum):
    LOBBY = 'lobby'
    ACTIVE = 'active'
    COOLDOWN = 'cooldown'


@dataclass
class Player:
    id: str
    name: str
    color: str
    score: int = 0
    country: Dict[str, str] = field(default_factory=lambda: dict(UNKNOWN_COUNTRY))

    def to_dict(self, admin_id: Optional[str] = None) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'color': self.color,
            'score': self.score,
            'country': dict(self.country),
            'isAdmin': admin_id is not None and self.id == admin_id,
        }


@dataclass
class Cell:
    id: int
    color: str = UNCLAIMED_COLOR
    owner_id: str = ''
    owner_name: str = ''

    @property
    def is_claimed(self) -> bool:
        return bool(self.owner_id)

    def assign(self, owner_id: str, owner_name: str, color: str) -> None:
        self.owner_id = owner_id
        self.owner_name = owner_name
        self.color = color

    def clear(self) -> None:
        self.assign('', '', UNCLAIMED_COLOR)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'color': self.color,
            'ownerId': self.owner_id,
            'ownerName': self.owner_name,
        }


def sentinel_admin_record(admin_id: Optional[str] = None) -> Dict[str, Any]:
    """Winner payload for an admin that has no Player record."""
    return {
        'id': admin_id or SENTINEL_ADMIN_ID,
        'name': SENTINEL_ADMIN_NAME,
        'color': ADMIN_COLOR,
        'score': 1,
        'isAdmin': True,
    }

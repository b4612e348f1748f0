from typing import Any, Dict

from gridclaim.models import sentinel_admin_record
from .session import GameSession


def recompute_scores(session: GameSession) -> None:
    """Set every player's score to the number of cells they own."""
    counts = session.owned_counts()
    for player in session.players:
        player.score = counts.get(player.id, 0)


def determine_winner(session: GameSession) -> Dict[str, Any]:
    """Pick the round winner from current scores.

    Highest score wins; ties go to whoever comes first in roster order.
    When nobody has a positive score the admin wins by default.
    """
    best = None
    for player in session.players:
        if player.score > 0 and (best is None or player.score > best.score):
            best = player
    if best is not None:
        return best.to_dict(session.admin_id)

    admin = session.admin_player()
    if admin is not None:
        return admin.to_dict(session.admin_id)
    return sentinel_admin_record(session.admin_id)

from typing import Any, Dict

from .session import GameSession

GAME_STATE_EVENT = 'gameState'
ADMIN_STATUS_EVENT = 'adminStatus'


class SnapshotBroadcaster:
    """Pushes full session snapshots over Socket.IO. No diffing."""

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def broadcast_all(self, session: GameSession) -> Dict[str, Any]:
        snapshot = session.snapshot()
        # Use socketio.emit since this may be called from a background task
        self.socketio.emit(GAME_STATE_EVENT, snapshot, namespace=self.namespace)
        return snapshot

    def send_to(self, connection_id: str, session: GameSession) -> Dict[str, Any]:
        snapshot = session.snapshot()
        self.socketio.emit(GAME_STATE_EVENT, snapshot, to=connection_id, namespace=self.namespace)
        return snapshot

    def notify_admin_status(self, connection_id: str, is_admin: bool) -> None:
        self.socketio.emit(ADMIN_STATUS_EVENT, is_admin, to=connection_id, namespace=self.namespace)

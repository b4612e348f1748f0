from flask import current_app, request
from gridclaim import ENGINE_EXTENSION, socketio
from gridclaim.services.game.engine import GameEngine
from gridclaim.services.game.geo import client_ip, resolve_country


def _engine() -> GameEngine:
    return current_app.extensions[ENGINE_EXTENSION]


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    ip = client_ip(request.headers, request.remote_addr)
    country = resolve_country(ip, current_app.config.get('COUNTRY_LOOKUP'), current_app.logger)
    _engine().connect(_get_sid(), {'country': country, 'ip': ip})


def handle_disconnect(reason=None):
    _engine().disconnect(_get_sid())


def handle_join_game(data=None):
    # The return value is delivered as the Socket.IO acknowledgement
    return _engine().join_game(_get_sid(), data)


def handle_claim_square(cell_id=None):
    _engine().claim_square(_get_sid(), cell_id)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('joinGame', handle_join_game, namespace=namespace)
    socketio.on_event('claimSquare', handle_claim_square, namespace=namespace)

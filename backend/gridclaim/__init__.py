from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

ENGINE_EXTENSION = 'gridclaim'

socketio = SocketIO(async_mode=None)


def _allowed_origins(value):
    if not value or value == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config, country_lookup=None):
    """Build the Flask app and its single game session.

    ``country_lookup`` maps a client IP to a country code; without one every
    client is reported as Unknown.
    """
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ALLOWED_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from gridclaim.services.game import GameEngine
    from gridclaim.services.game.broadcaster import SnapshotBroadcaster
    engine = GameEngine.from_app(flask_app, socketio, SnapshotBroadcaster(socketio))
    flask_app.extensions[ENGINE_EXTENSION] = engine
    flask_app.config['COUNTRY_LOOKUP'] = country_lookup

    from gridclaim.main import main
    flask_app.register_blueprint(main)

    from gridclaim.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    return flask_app

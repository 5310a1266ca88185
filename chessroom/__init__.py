from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('CORS_ALLOWED_ORIGINS') or []
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/ws')
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Each app owns its registry; nothing about live sessions is module-global
    from chessroom.coordinator import Coordinator
    from chessroom.registry import SessionRegistry
    from chessroom.services.sessions.rules import ChessRules
    from chessroom.services.sessions.sweeper import BackgroundScheduler
    from chessroom.services.sessions.transport import SocketIOTransport

    rules = ChessRules()
    flask_app.extensions['coordinator'] = Coordinator(
        registry=SessionRegistry(rules),
        rules=rules,
        transport=SocketIOTransport(socketio.server, namespace=namespace, logger=flask_app.logger),
        scheduler=BackgroundScheduler(socketio),
        grace_period=flask_app.config.get('SESSION_GRACE_PERIOD_SEC', 60),
        logger=flask_app.logger,
    )

    # Import and register blueprints here
    from chessroom.main import main
    flask_app.register_blueprint(main)

    from chessroom.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    # Register Socket.IO event handlers
    from chessroom.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    return flask_app

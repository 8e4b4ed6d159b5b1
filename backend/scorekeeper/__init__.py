from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Session-scoped scoring state lives on the app, not in module globals
    from scorekeeper.services.scoring import ScoreBounds, ScoreError, SessionLifecycle
    from scorekeeper.stores import GameCatalog, SessionStore, ScoreStore
    flask_app.extensions['scorekeeper'] = SessionLifecycle(
        GameCatalog(),
        SessionStore(),
        ScoreStore(),
        bounds=ScoreBounds(flask_app.config.get('SCORE_MIN'), flask_app.config.get('SCORE_MAX')),
        strict_rounds=bool(flask_app.config.get('STRICT_ROUNDS', False)),
        default_score_limit=flask_app.config.get('DEFAULT_SCORE_LIMIT'),
    )

    from scorekeeper.main import main
    flask_app.register_blueprint(main)

    from scorekeeper.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api')

    from scorekeeper.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api')

    @flask_app.errorhandler(ScoreError)
    def handle_score_error(exc):
        flask_app.logger.info(f"[error] {type(exc).__name__}: {exc.message}")
        return jsonify({'error': exc.message}), exc.status_code

    from scorekeeper.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from scorekeeper.defaults import seed_default_games
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            added = seed_default_games(GameCatalog())
            print(f'Database has been reset and seeded with {len(added)} games!')

    @click.command('seed-games')
    def seed_games_command():
        """Adds any missing default games to the catalog."""
        from scorekeeper.defaults import seed_default_games
        with flask_app.app_context():
            added = seed_default_games(GameCatalog())
            print(f'Added {len(added)} games.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(seed_games_command)

    return flask_app

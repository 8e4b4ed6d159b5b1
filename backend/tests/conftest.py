import os
import sys
import pytest

# Ensure the backend root (containing the `scorekeeper` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from scorekeeper import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SCORE_MIN = None
    SCORE_MAX = None
    STRICT_ROUNDS = False
    DEFAULT_SCORE_LIMIT = None


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import scorekeeper.models  # noqa: F401
        from scorekeeper.defaults import seed_default_games
        from scorekeeper.stores import GameCatalog
        db.create_all()
        seed_default_games(GameCatalog())
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def game_ids(client):
    """Default catalog keyed by game name."""
    return {g['name']: g['id'] for g in client.get('/api/games').get_json()}

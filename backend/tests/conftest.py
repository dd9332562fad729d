import os
import sys
import pytest
import mongomock

# Ensure the backend root (containing the `keyboard_challenge` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from keyboard_challenge.config import Config
from keyboard_challenge import create_app


class TestConfig(Config):
    TESTING = True
    APP_ENV = 'testing'
    PRODUCTION = False
    # No connection string: the app runs in memory-only mode
    MONGODB_URI = ''
    MONGODB_DB_NAME = 'keyboard-challenge-test'
    MONGODB_COLLECTION = 'scores'
    STATIC_DIR = os.path.join(BACKEND_ROOT, 'keyboard_challenge', 'static')
    CORS_ORIGINS = ['*']
    MEMORY_LEADERBOARD_CAP = 50
    LEADERBOARD_DEFAULT_LIMIT = 20
    LEADERBOARD_MAX_LIMIT = 50


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture()
def mongo_app(mongo_client):
    application = create_app(TestConfig, mongo_client=mongo_client)
    with application.app_context():
        yield application


@pytest.fixture()
def mongo_http(mongo_app):
    return mongo_app.test_client()


@pytest.fixture()
def scores_collection(mongo_client):
    return mongo_client[TestConfig.MONGODB_DB_NAME][TestConfig.MONGODB_COLLECTION]


@pytest.fixture()
def leaderboard(flask_app):
    return flask_app.extensions['leaderboard']


@pytest.fixture()
def mongo_leaderboard(mongo_app):
    return mongo_app.extensions['leaderboard']


@pytest.fixture()
def make_app():
    """Build an app from TestConfig with some settings overridden."""
    def _make(mongo_client=None, **overrides):
        config_class = type('OverriddenConfig', (TestConfig,), overrides)
        return create_app(config_class, mongo_client=mongo_client)
    return _make

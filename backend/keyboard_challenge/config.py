import os
from urllib.parse import urlparse

PACKAGE_ROOT = os.path.abspath(os.path.dirname(__file__))


def _database_from_uri(uri, default='keyboard-challenge'):
    if not uri:
        return default
    path = urlparse(uri).path.lstrip('/')
    return path or default


class Config:
    PORT = int(os.environ.get('PORT', '3000'))
    HOST = os.environ.get('HOST', '0.0.0.0')
    APP_ENV = os.environ.get('APP_ENV') or os.environ.get('FLASK_ENV') or 'development'
    # Production hides stack traces in error responses
    PRODUCTION = APP_ENV == 'production'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    APP_VERSION = '1.0.0'

    # Empty string disables the document store (memory-only mode)
    MONGODB_URI = os.environ.get('MONGODB_URI', os.environ.get('MONGO_URI', 'mongodb://localhost:27017/keyboard-challenge'))
    MONGODB_DB_NAME = os.environ.get('MONGODB_DB_NAME') or _database_from_uri(MONGODB_URI)
    MONGODB_COLLECTION = os.environ.get('MONGODB_COLLECTION', 'scores')
    MONGODB_TIMEOUT_MS = int(os.environ.get('MONGODB_TIMEOUT_MS', '5000'))

    STATIC_DIR = os.environ.get('STATIC_DIR') or os.path.join(PACKAGE_ROOT, 'static')
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]

    # Leaderboard limits
    NAME_MAX_LENGTH = 20
    MEMORY_LEADERBOARD_CAP = int(os.environ.get('MEMORY_LEADERBOARD_CAP', '50'))
    LEADERBOARD_DEFAULT_LIMIT = int(os.environ.get('LEADERBOARD_DEFAULT_LIMIT', '20'))
    LEADERBOARD_MAX_LIMIT = int(os.environ.get('LEADERBOARD_MAX_LIMIT', '50'))

import atexit
import os
import time

import click
from flask import Flask, request
from flask.cli import with_appcontext
from flask_cors import CORS
from pymongo.errors import PyMongoError

from keyboard_challenge.config import Config
from keyboard_challenge.errors import register_error_handlers
from keyboard_challenge.services import LeaderboardService, get_leaderboard
from keyboard_challenge.storage import MemoryLeaderboardStore, MongoLeaderboardStore, StorageSelector


def create_app(config_class=Config, mongo_client=None):
    """Build the Flask app.

    `mongo_client` installs a ready-made client (tests pass a mongomock one)
    instead of connecting to `MONGODB_URI`.
    """
    # Every file in the static directory is served from the URL root
    flask_app = Flask(__name__, static_folder=config_class.STATIC_DIR, static_url_path='')
    flask_app.config.from_object(config_class)
    flask_app.config['STARTED_AT'] = time.time()
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    static_dir = flask_app.config['STATIC_DIR']

    origins = flask_app.config.get('CORS_ORIGINS') or ['*']
    # a bare wildcard keeps the plain `Access-Control-Allow-Origin: *` header
    if '*' in origins:
        CORS(flask_app, origins='*', send_wildcard=True)
    else:
        CORS(flask_app, origins=origins)

    flask_app.logger.info("[startup] Keyboard Challenge server starting")
    flask_app.logger.info(f"[startup] env={flask_app.config['APP_ENV']} port={flask_app.config['PORT']}")
    flask_app.logger.info(
        f"[startup] static dir={static_dir} files={sorted(os.listdir(static_dir)) if os.path.isdir(static_dir) else []}"
    )

    selector = StorageSelector(flask_app.logger)
    persistent = MongoLeaderboardStore(selector, flask_app.config.get('MONGODB_COLLECTION', 'scores'))
    if mongo_client is not None:
        selector.attach(mongo_client, flask_app.config.get('MONGODB_DB_NAME', 'keyboard-challenge'))
    else:
        selector.init_app(flask_app)
        atexit.register(selector.close)
    if selector.reachable:
        try:
            persistent.ensure_indexes()
        except PyMongoError as exc:
            flask_app.logger.warning(f"[mongo] could not create indexes: {exc}")

    memory = MemoryLeaderboardStore(flask_app.config.get('MEMORY_LEADERBOARD_CAP', 50))
    flask_app.extensions['leaderboard'] = LeaderboardService.from_config(
        flask_app.config, selector, persistent, memory, logger=flask_app.logger
    )
    flask_app.logger.info(f"[startup] storage={flask_app.extensions['leaderboard'].storage}")

    @flask_app.before_request
    def log_request():
        flask_app.logger.info(f"[request] {request.method} {request.full_path.rstrip('?')}")

    from keyboard_challenge.main import main
    flask_app.register_blueprint(main)

    from keyboard_challenge.api.scores import scores
    flask_app.register_blueprint(scores, url_prefix='/api')

    register_error_handlers(flask_app)

    @click.command('leaderboard-reset')
    @with_appcontext
    def leaderboard_reset_command():
        """Clears every score in the active storage."""
        storage = get_leaderboard().clear()
        click.echo(f'Leaderboard cleared ({storage} storage).')

    @click.command('leaderboard-show')
    @click.option('--limit', default=None, type=int, help='Number of entries to print.')
    @with_appcontext
    def leaderboard_show_command(limit):
        """Prints the current leaderboard."""
        page = get_leaderboard().read(limit)
        if page.is_empty:
            click.echo(f'No records yet ({page.storage} storage).')
            return
        for rank, record in enumerate(page.records, start=1):
            click.echo(f'{rank:>3}. {record.name:<20} {record.time:>8.2f}s {record.accuracy}%')
        click.echo(f'{page.count} total ({page.storage} storage).')

    flask_app.cli.add_command(leaderboard_reset_command)
    flask_app.cli.add_command(leaderboard_show_command)

    return flask_app


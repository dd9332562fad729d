import gc
import os
import platform
import time

try:
    import resource
except ImportError:  # Windows
    resource = None

from flask import Blueprint, current_app, jsonify, send_from_directory

from keyboard_challenge.clock import timestamp
from keyboard_challenge.services import get_leaderboard

main = Blueprint('main', __name__)

ENDPOINTS = [
    {'path': '/', 'description': 'Home page'},
    {'path': '/game', 'description': 'Game page'},
    {'path': '/health', 'description': 'Health check'},
    {'path': '/api/status', 'description': 'API status'},
    {'path': '/api/leaderboard', 'description': 'Leaderboard (GET, DELETE)'},
    {'path': '/api/score', 'description': 'Submit a score (POST)'},
]


def _static_page(filename):
    static_dir = current_app.config['STATIC_DIR']
    page = os.path.join(static_dir, filename)
    if os.path.isfile(page):
        current_app.logger.info(f"[page] serving {page}")
        return send_from_directory(static_dir, filename)
    current_app.logger.error(f"[page] missing {page}")
    return None


def _memory_usage():
    max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss if resource else None
    return {
        'maxRssKb': max_rss,
        'gcObjects': len(gc.get_objects()),
    }


@main.route('/')
def index():
    response = _static_page('index.html')
    if response is not None:
        return response
    static_dir = current_app.config['STATIC_DIR']
    return jsonify({
        'error': 'Home page not found',
        'staticDir': static_dir,
        'files': sorted(os.listdir(static_dir)) if os.path.isdir(static_dir) else [],
        'timestamp': timestamp(),
    }), 404


@main.route('/game')
def game():
    response = _static_page('game.html')
    if response is not None:
        return response
    return jsonify({'error': 'Game page not found', 'timestamp': timestamp()}), 404


@main.route('/health')
def health():
    leaderboard = get_leaderboard()
    return jsonify({
        'status': 'healthy',
        'uptime': round(time.time() - current_app.config['STARTED_AT'], 3),
        'timestamp': timestamp(),
        'pythonVersion': platform.python_version(),
        'memoryUsage': _memory_usage(),
        'storeConnected': leaderboard.selector.reachable,
        'storage': leaderboard.storage,
    })


@main.route('/api/status')
def api_status():
    return jsonify({
        'status': 'ok',
        'message': 'Keyboard Challenge API is running!',
        'version': current_app.config['APP_VERSION'],
        'timestamp': timestamp(),
        'storage': get_leaderboard().storage,
        'endpoints': ENDPOINTS,
    })

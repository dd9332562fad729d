from flask import Blueprint, jsonify, request

from keyboard_challenge.clock import timestamp
from keyboard_challenge.services import get_leaderboard

scores = Blueprint('scores', __name__)


@scores.route('/score', methods=['POST'])
def submit_score():
    data = request.get_json(silent=True) or {}
    submission = get_leaderboard().submit(data)
    payload = submission.to_dict()
    payload['timestamp'] = timestamp()
    return jsonify(payload), 201


@scores.route('/leaderboard', methods=['GET'])
def get_leaderboard_page():
    page = get_leaderboard().read(request.args.get('limit'))
    payload = page.to_dict()
    payload['timestamp'] = timestamp()
    return jsonify(payload)


@scores.route('/leaderboard', methods=['DELETE'])
def clear_leaderboard():
    storage = get_leaderboard().clear()
    return jsonify({
        'success': True,
        'message': 'Leaderboard cleared',
        'storage': storage,
        'timestamp': timestamp(),
    })

from flask import Blueprint, current_app, jsonify
from chessroom.exceptions import SessionNotFound

games = Blueprint('games', __name__)


@games.route('', methods=['GET'])
def list_games():
    """
    Returns the lobby listing, most recently created first.
    """
    return jsonify(current_app.extensions['coordinator'].lobby_snapshot()), 200


@games.route('/<string:session_id>', methods=['GET'])
def get_game(session_id):
    """
    Returns a session's name and full state snapshot.
    """
    try:
        game = current_app.extensions['coordinator'].describe(session_id)
    except SessionNotFound:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify(game), 200

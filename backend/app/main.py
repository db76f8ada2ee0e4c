from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Wager Duel server!'})


@main.route('/api/match/state', methods=['GET'])
def match_state():
    """Live view of the match. Wager amounts stay sealed."""
    return jsonify(current_app.extensions['match'].snapshot())

from flask import Blueprint, jsonify, request
from app.models import MatchRecord

matches = Blueprint('matches', __name__)

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


@matches.route('', methods=['GET'])
def list_matches():
    """
    Returns the most recently finished matches, newest first.
    """
    try:
        limit = int(request.args.get('limit', DEFAULT_LIMIT))
    except ValueError:
        return jsonify({'error': 'limit must be an integer'}), 400
    limit = max(1, min(limit, MAX_LIMIT))
    records = MatchRecord.query.order_by(MatchRecord.finished_at.desc(), MatchRecord.id.desc()).limit(limit).all()
    return jsonify([r.to_dict() for r in records]), 200


@matches.route('/<int:match_id>', methods=['GET'])
def get_match(match_id):
    record = MatchRecord.query.filter_by(id=match_id).first_or_404()
    return jsonify(record.to_dict(include_history=True)), 200

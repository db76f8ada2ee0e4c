from app import db
import json
import time


class MatchRecord(db.Model):
    __tablename__ = 'match_record'
    id = db.Column(db.Integer, primary_key=True)
    winner = db.Column(db.String(1), nullable=True)  # 'A', 'B' or NULL for a draw
    reason = db.Column(db.String(32), nullable=False)  # bankruptcy, triple_timeout
    rounds_played = db.Column(db.Integer, nullable=False, default=0)
    balance_a = db.Column(db.Integer, nullable=False)
    balance_b = db.Column(db.Integer, nullable=False)
    finished_at = db.Column(db.Float, nullable=False, default=time.time, index=True)
    round_history = db.Column(db.Text, nullable=True)  # JSON-encoded list of round summaries

    def to_dict(self, include_history=False):
        data = {
            'id': self.id,
            'winner': self.winner,
            'draw': self.winner is None,
            'reason': self.reason,
            'rounds_played': self.rounds_played,
            'units': {'A': self.balance_a, 'B': self.balance_b},
            'finished_at': self.finished_at,
        }
        if include_history:
            try:
                data['round_history'] = json.loads(self.round_history) if self.round_history else []
            except ValueError:
                data['round_history'] = []
        return data

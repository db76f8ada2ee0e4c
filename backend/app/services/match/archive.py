import json

from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.models import MatchRecord
from .controller import MatchSummary


def record_match_result(app, summary: MatchSummary) -> None:
    """Store the result of a finished match.

    Runs after the controller has released its lock, from a socket handler
    or a timer task, so it opens its own app context.
    """
    with app.app_context():
        record = MatchRecord(
            winner=summary.winner.value if summary.winner else None,
            reason=summary.reason,
            rounds_played=summary.rounds_played,
            balance_a=summary.balance_a,
            balance_b=summary.balance_b,
            round_history=json.dumps(summary.history),
        )
        try:
            db.session.add(record)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            app.logger.exception(f"[archive-failed] reason={summary.reason} rounds={summary.rounds_played}")
            return
        app.logger.info(f"[archive] match={record.id} winner={record.winner} reason={record.reason}")

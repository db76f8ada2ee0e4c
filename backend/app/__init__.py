from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from functools import partial
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def _discard_task(target, *args, **kwargs):
    """Stand-in for start_background_task while testing: timers never run."""
    return None


def _build_match_controller(flask_app):
    from app.services.match import MatchController, MatchRules
    from app.services.match.archive import record_match_result
    from app.socketio_events import emit_to_connection

    if flask_app.config.get('TESTING') and not flask_app.config.get('ENABLE_TIMERS_IN_TESTS'):
        spawn = _discard_task
    else:
        spawn = socketio.start_background_task

    return MatchController(
        MatchRules.from_config(flask_app.config),
        emit=emit_to_connection,
        spawn=spawn,
        sleep=socketio.sleep,
        logger=flask_app.logger,
        on_match_over=partial(record_match_result, flask_app),
    )


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from app.main import main
    flask_app.register_blueprint(main)

    from app.api.matches import matches
    flask_app.register_blueprint(matches, url_prefix='/api/matches')

    # One match per process; handlers and routes reach it through app.extensions
    flask_app.extensions['match'] = _build_match_controller(flask_app)

    from app.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the match archive tables."""
        import app.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app

import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///wager_duel.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Browser origins allowed to talk to the API and socket (comma-separated)
    CORS_ORIGINS = [o.strip() for o in os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,http://127.0.0.1:3000',
    ).split(',') if o.strip()]
    # Match rules
    STARTING_BALANCE = int(os.environ.get('STARTING_BALANCE', '200'))
    MIN_WAGER = int(os.environ.get('MIN_WAGER', '10'))
    BANKRUPTCY_THRESHOLD = int(os.environ.get('BANKRUPTCY_THRESHOLD', '20'))
    DISPARITY_MULTIPLIER = int(os.environ.get('DISPARITY_MULTIPLIER', '4'))
    DOUBLE_TIMEOUT_LIMIT = int(os.environ.get('DOUBLE_TIMEOUT_LIMIT', '3'))
    # Round countdown (seconds)
    ROUND_DURATION_SEC = int(os.environ.get('ROUND_DURATION_SEC', '60'))
    # Optional: hold a disconnected player's seat this long for a reconnect. 0 releases immediately.
    RECONNECT_GRACE_SEC = float(os.environ.get('RECONNECT_GRACE_SEC', '0'))
    # Optional: heartbeat interval for round timer logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))

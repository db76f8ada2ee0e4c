from flask import current_app, request
from flask_socketio import disconnect, emit
from app import socketio
from app.services.match import MatchController, MatchError, SeatUnavailable
from typing import Any

NAMESPACE = '/ws'


def emit_to_connection(event: str, payload: Any, to: str) -> None:
    # socketio.emit rather than emit(): also called from timer background tasks
    socketio.emit(event, payload, to=to, namespace=NAMESPACE)


def _match() -> MatchController:
    return current_app.extensions['match']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _parse_amount(data: Any) -> Any:
    raw = data.get('amount') if isinstance(data, dict) else data
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return raw
    return raw


def handle_connect():
    emit('connected', {'message': 'Connected to /ws', 'sid': _get_sid()})


def handle_disconnect(reason=None):
    _match().leave(_get_sid())


def handle_join_match(data=None):
    token = data.get('session_token') if isinstance(data, dict) else None
    try:
        _match().join(_get_sid(), session_token=token)
    except SeatUnavailable as exc:
        current_app.logger.info(f"[seat-reject] sid={_get_sid()} match full")
        emit(exc.event, {'message': str(exc)})
        disconnect()


def handle_leave_match(data=None):
    _match().leave(_get_sid(), hold=False)
    emit('left', {'sid': _get_sid()})


def handle_place_wager(data=None):
    try:
        _match().submit_wager(_get_sid(), _parse_amount(data))
    except MatchError as exc:
        emit(exc.event, {'message': str(exc)})


def handle_request_rematch(data=None):
    try:
        _match().request_rematch(_get_sid())
    except MatchError as exc:
        emit(exc.event, {'message': str(exc)})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('join_match', handle_join_match, namespace=NAMESPACE)
    socketio.on_event('leave_match', handle_leave_match, namespace=NAMESPACE)
    socketio.on_event('place_wager', handle_place_wager, namespace=NAMESPACE)
    socketio.on_event('request_rematch', handle_request_rematch, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)

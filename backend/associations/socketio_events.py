from flask import current_app, request
from flask_socketio import join_room, leave_room, emit
from typing import Dict, Any
import time

from associations import socketio
from associations.engine import SessionError
from associations.services import sessions

_sid_to_ctx: Dict[str, Dict[str, Any]] = {}
_last_controller_action: Dict[str, float] = {}


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    # On disconnect, if this socket was a host for a room, give the host a
    # grace period to come back before ending the session
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if not ctx:
        return
    if ctx.get('is_host'):
        sessions.host_left(current_app._get_current_object(), ctx['game_code'])


def handle_join_game(data):
    data = data or {}
    game_code = data.get('game_code')
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    code = game_code.upper()
    is_host = bool(data.get('is_host'))
    join_room(sessions.game_room(code))
    _sid_to_ctx[_get_sid()] = {
        'game_code': code,
        'is_host': is_host,
        'player_id': data.get('player_id') or data.get('player_name'),
        'player_name': data.get('player_name'),
    }
    emit('joined', {'room': sessions.game_room(code)})
    if is_host:
        join_room(sessions.host_room(code))
        sessions.host_joined(code)
        session = sessions.open_session(current_app._get_current_object(), code)
        emit('turn_state', session.to_dict())
    else:
        session = sessions.get_session(code)
        if session is not None:
            emit('turn_update', session.to_dict(reveal_word=False))


def handle_leave_game(data):
    game_code = (data or {}).get('game_code')
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    code = game_code.upper()
    ctx = _sid_to_ctx.get(_get_sid()) or {}
    session = sessions.get_session(code)
    if session is not None:
        player_id = (data or {}).get('player_id') or ctx.get('player_id') or ''
        player_name = (data or {}).get('player_name') or ctx.get('player_name') or player_id
        sessions.dispatch(session, 'leave', player_id, player_name)
    leave_room(sessions.game_room(code))
    emit('left', {'room': sessions.game_room(code)})
    # Explicit quit by the host ends the session immediately
    if ctx.get('is_host') and ctx.get('game_code') == code:
        _sid_to_ctx.pop(_get_sid(), None)
        sessions.end_session(code)


def handle_ping(data=None):
    emit('pong', data or {})


def _debounced(command: str, game_code: str) -> bool:
    try:
        debounce_ms = int(current_app.config.get('CONTROLLER_DEBOUNCE_MS', 0))
    except (TypeError, ValueError):
        debounce_ms = 0
    if debounce_ms <= 0:
        return False
    key = f"{command}:{game_code}"
    now = time.time() * 1000.0
    last = _last_controller_action.get(key, 0)
    if now - last < debounce_ms:
        return True
    _last_controller_action[key] = now
    return False


def _host_command(command: str, debounce: bool = False):
    def handler(data=None):
        ctx = _sid_to_ctx.get(_get_sid())
        if not ctx or not ctx.get('is_host'):
            emit('error', {'message': 'Only the host may control the turn'})
            return
        code = ctx['game_code']
        session = sessions.get_session(code)
        if session is None:
            emit('error', {'message': f'No live session for game {code}'})
            return
        if debounce and _debounced(command, code):
            return
        try:
            sessions.dispatch(session, command)
        except SessionError as exc:
            emit('error', {'message': str(exc)})
    handler.__name__ = f"handle_{command}"
    return handler


handle_start_turn = _host_command('start_turn')
handle_next_word = _host_command('word_advance', debounce=True)
handle_skip_word = _host_command('word_skip', debounce=True)
handle_hold_start = _host_command('hold_start')
handle_hold_end = _host_command('hold_end')


def register_socketio_handlers(flask_app, testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = {
        'connect': handle_connect,
        'disconnect': handle_disconnect,
        'join_game': handle_join_game,
        'leave_game': handle_leave_game,
        'ping': handle_ping,
        'start_turn': handle_start_turn,
        'next_word': handle_next_word,
        'skip_word': handle_skip_word,
        'hold_start': handle_hold_start,
        'hold_end': handle_hold_end,
    }
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        for event, handler in handlers.items():
            socketio.on_event(event, handler, namespace=namespace)
    flask_app.logger.debug(f"Socket.IO handlers registered on {namespaces}")

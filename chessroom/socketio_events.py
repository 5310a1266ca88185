from flask import current_app, request
from flask_socketio import emit
from chessroom import socketio
from chessroom.exceptions import InvalidMove, SessionNotFound


def _coordinator():
    return current_app.extensions['coordinator']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _session_id(data):
    # The lobby sends a bare id; the game page wraps it in an object
    if isinstance(data, str):
        return data
    data = data or {}
    return data.get('sessionId') or data.get('gameId')


def _require_session_id(data):
    session_id = _session_id(data)
    if not session_id:
        emit('error', {'message': 'sessionId is required'})
    return session_id


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")
    emit('connected', {'message': f'Connected to {request.namespace}'})


def handle_disconnect(reason=None):
    current_app.logger.info(f"[disconnect] sid={_get_sid()} reason={reason}")
    _coordinator().handle_disconnect(_get_sid())


def handle_list_games(data=None):
    _coordinator().handle_list_request(_get_sid())


def handle_create_game(data):
    data = data or {}
    _coordinator().handle_create(_get_sid(), data.get('name'), data.get('side'))


def _join(data, announce):
    session_id = _require_session_id(data)
    if not session_id:
        return
    try:
        _coordinator().handle_join_request(_get_sid(), session_id, announce=announce)
    except SessionNotFound as exc:
        emit('error', exc.to_dict())


def handle_join_game(data):
    _join(data, announce=True)


def handle_join_game_room(data):
    _join(data, announce=False)


def handle_move(data):
    if not isinstance(data, dict):
        emit('error', {'message': 'move payload must be an object'})
        return
    session_id = _require_session_id(data)
    if not session_id:
        return
    move = {key: data.get(key) for key in ('from', 'to', 'promotion') if data.get(key) is not None}
    try:
        _coordinator().handle_move(_get_sid(), session_id, move)
    except SessionNotFound as exc:
        emit('error', exc.to_dict())
    except InvalidMove:
        emit('invalidMove', data)


def _player_action(action):
    def handler(data):
        session_id = _require_session_id(data)
        if not session_id:
            return
        try:
            getattr(_coordinator(), action)(_get_sid(), session_id)
        except SessionNotFound as exc:
            emit('error', exc.to_dict())

    handler.__name__ = action
    return handler


handle_resign = _player_action('handle_resign')
handle_offer_draw = _player_action('handle_draw_offer')
handle_accept_draw = _player_action('handle_draw_accept')
handle_decline_draw = _player_action('handle_draw_decline')


def handle_error(exc):
    # One broken action must not take the connection down with it
    current_app.logger.exception(f"[handler-error] sid={_get_sid()} event={request.event}: {exc}")
    emit('error', {'message': 'Internal server error'})


EVENT_HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'listGames': handle_list_games,
    'getGames': handle_list_games,
    'createGame': handle_create_game,
    'joinGame': handle_join_game,
    'joinGameRoom': handle_join_game_room,
    'move': handle_move,
    'resign': handle_resign,
    'offerDraw': handle_offer_draw,
    'acceptDraw': handle_accept_draw,
    'declineDraw': handle_decline_draw,
}


def register_socketio_handlers(namespace='/ws') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    for event, handler in EVENT_HANDLERS.items():
        socketio.on_event(event, handler, namespace=namespace)
    socketio.on_error(namespace)(handle_error)

from flask_socketio import join_room, leave_room, emit
from scorekeeper import socketio


def session_room(session_id) -> str:
    return f"session:{session_id}"


def broadcast(event: str, session_id, payload=None) -> None:
    """Emit an event to every client watching a session.

    Uses socketio.emit so it works from HTTP handlers as well as socket ones.
    """
    data = {'session_id': session_id}
    data.update(payload or {})
    socketio.emit(event, data, to=session_room(session_id), namespace='/ws')


def _session_id(data):
    raw = (data or {}).get('session_id')
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_session(data):
    session_id = _session_id(data)
    if session_id is None:
        emit('error', {'message': 'session_id is required'})
        return
    room = session_room(session_id)
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_session(data):
    session_id = _session_id(data)
    if session_id is None:
        emit('error', {'message': 'session_id is required'})
        return
    room = session_room(session_id)
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_session', handle_join_session, namespace='/ws')
    socketio.on_event('leave_session', handle_leave_session, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        # Test-only mirror on default namespace
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('join_session', handle_join_session, namespace='/')
        socketio.on_event('leave_session', handle_leave_session, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')

from flask_socketio import join_room, leave_room, emit
from flask import current_app, request
from scramble import socketio
from scramble.runs import run_state
from scramble.services.game import RunNotFound
from scramble.sinks import NAMESPACE, room_for
from typing import Dict, Any
import time

OWNER_GRACE_SEC = 2.0


def _registry():
    return current_app.extensions['scramble']


def _get_sid() -> str:
    return request.sid  # type: ignore[attr-defined]


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    # The socket that owns a run takes it down with it, after a short grace
    # period in case the page is only reloading.
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if not ctx or not ctx.get('is_owner'):
        return
    code = ctx['code']
    _owner_count[code] = max(0, _owner_count.get(code, 0) - 1)
    if _owner_count[code] > 0:
        return
    registry = _registry()
    if current_app.config.get('TESTING'):
        _end_run(registry, code)
        return
    _schedule_end_if_no_owner(registry, code)


def handle_join_run(data):
    code = ((data or {}).get('code') or '').upper()
    is_owner = bool((data or {}).get('is_owner'))
    if not code:
        emit('error', {'message': 'code is required'})
        return
    try:
        session = _registry().get(code)
    except RunNotFound:
        emit('error', {'message': f'Run {code} not found'})
        return
    join_room(room_for(code))
    _sid_to_ctx[_get_sid()] = {'code': code, 'is_owner': is_owner}
    if is_owner:
        _owner_count[code] = _owner_count.get(code, 0) + 1
        _end_deadline.pop(code, None)
    emit('joined', run_state(code, session))


def handle_leave_run(data):
    code = ((data or {}).get('code') or '').upper()
    if not code:
        emit('error', {'message': 'code is required'})
        return
    leave_room(room_for(code))
    emit('left', {'room': room_for(code)})
    ctx = _sid_to_ctx.get(_get_sid())
    if ctx and ctx.get('is_owner') and ctx.get('code') == code:
        # Explicit quit by the owner: end immediately
        _sid_to_ctx.pop(_get_sid(), None)
        _end_run(_registry(), code)


def handle_select(data):
    code = ((data or {}).get('code') or '').upper()
    token_id = (data or {}).get('token_id')
    if not code or isinstance(token_id, bool) or not isinstance(token_id, int):
        emit('error', {'message': 'code and integer token_id are required'})
        return
    try:
        session = _registry().get(code)
    except RunNotFound:
        emit('error', {'message': f'Run {code} not found'})
        return
    session.select(token_id)
    state = run_state(code, session)
    # Reply to the sender even if it never joined the room, then tell the watchers
    emit('run_state', state)
    emit('run_state', state, to=room_for(code), include_self=False)


def handle_ping(data):
    emit('pong', data or {})

# ---- Run owner lifecycle helpers ----

_sid_to_ctx: Dict[str, Dict[str, Any]] = {}
_owner_count: Dict[str, int] = {}
_end_deadline: Dict[str, float] = {}


def _end_run(registry, code: str) -> None:
    """Stop the run's schedule, tell watchers, and forget it."""
    socketio.emit('run_ended', {'code': code}, to=room_for(code), namespace=NAMESPACE)
    registry.end(code)
    _owner_count.pop(code, None)
    _end_deadline.pop(code, None)


def _schedule_end_if_no_owner(registry, code: str, delay_sec: float = OWNER_GRACE_SEC) -> None:
    deadline = time.time() + delay_sec
    _end_deadline[code] = deadline

    def _runner():
        socketio.sleep(max(0.0, deadline - time.time()))
        if _owner_count.get(code, 0) == 0 and _end_deadline.get(code) == deadline:
            _end_run(registry, code)

    socketio.start_background_task(_runner)


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = [NAMESPACE, '/'] if testing else [NAMESPACE]
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        socketio.on_event('join_run', handle_join_run, namespace=namespace)
        socketio.on_event('leave_run', handle_leave_run, namespace=namespace)
        socketio.on_event('select', handle_select, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)

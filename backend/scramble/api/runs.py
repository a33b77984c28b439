from flask import Blueprint, jsonify, request, current_app
from scramble import messages, socketio
from scramble.runs import run_state
from scramble.services.game import InfeasibleField, InvalidTokenCount, RunNotFound
from scramble.sinks import NAMESPACE, room_for


runs = Blueprint('runs', __name__)


def _registry():
    return current_app.extensions['scramble']


def _int_field(data, name, required=False):
    """Read an integer from the JSON body. Returns (value, error_response)."""
    raw = data.get(name)
    if raw is None:
        if required:
            return None, (jsonify({'error': f'{name} is required'}), 400)
        return None, None
    # JSON integers only: no floats, numeric strings or booleans
    if isinstance(raw, bool) or not isinstance(raw, int):
        return None, (jsonify({'error': f'{name} must be an integer'}), 400)
    return raw, None


def _range_error():
    cfg = current_app.config
    text = messages.TOKEN_COUNT_RANGE.format(minimum=cfg.get('MIN_TOKENS', 3), maximum=cfg.get('MAX_TOKENS', 7))
    return jsonify({'error': text}), 400


def _state_update(code):
    socketio.emit('state_update', {'code': code.upper()}, to=room_for(code), namespace=NAMESPACE)


@runs.errorhandler(RunNotFound)
def run_not_found(exc):
    return jsonify({'error': 'Run not found', 'code': exc.code}), 404


@runs.route('', methods=['POST'])
def create_run():
    data = request.get_json(silent=True) or {}
    token_count, err = _int_field(data, 'token_count', required=True)
    if err:
        return err
    sizes = {}
    for key, name in (('width', 'field_width'), ('height', 'field_height'), ('size', 'token_size')):
        sizes[key], err = _int_field(data, name)
        if err:
            return err

    try:
        code, session = _registry().create(token_count, **sizes)
    except InvalidTokenCount:
        return _range_error()
    except InfeasibleField as exc:
        current_app.logger.info(f"[run-reject] tokens={token_count} {exc}")
        return jsonify({'error': messages.FIELD_TOO_SMALL}), 400

    return jsonify(run_state(code, session)), 201


@runs.route('/<string:code>', methods=['GET'])
def get_run(code):
    session = _registry().get(code)
    return jsonify(run_state(code, session))


@runs.route('/<string:code>/select', methods=['POST'])
def select_token(code):
    session = _registry().get(code)
    data = request.get_json(silent=True) or {}
    token_id, err = _int_field(data, 'token_id', required=True)
    if err:
        return err
    if session.judge is None:
        return jsonify({'error': 'Run is not in progress'}), 400
    session.select(token_id)
    _state_update(code)
    return jsonify(run_state(code, session))


@runs.route('/<string:code>/restart', methods=['POST'])
def restart_run(code):
    session = _registry().get(code)
    data = request.get_json(silent=True) or {}
    token_count, err = _int_field(data, 'token_count')
    if err:
        return err
    if token_count is None:
        token_count = session.token_count
    try:
        session.start_run(token_count)
    except InvalidTokenCount:
        return _range_error()
    except InfeasibleField:
        return jsonify({'error': messages.FIELD_TOO_SMALL}), 400
    _state_update(code)
    return jsonify(run_state(code, session))


@runs.route('/<string:code>', methods=['DELETE'])
def delete_run(code):
    if not _registry().end(code):
        raise RunNotFound(code.upper())
    return jsonify({'message': 'Run ended', 'code': code.upper()})

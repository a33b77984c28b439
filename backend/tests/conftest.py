import os
import sys
import pytest

# Ensure the backend root (containing the `scramble` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from scramble import create_app, socketio  # noqa: E402


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    FIRST_ROUND_DELAY_PER_TOKEN_SEC = 1.0
    ROUND_INTERVAL_SEC = 2.0
    MIN_TOKENS = 3
    MAX_TOKENS = 7
    FIELD_WIDTH = 800
    FIELD_HEIGHT = 600
    TOKEN_SIZE = 80
    PLACEMENT_MAX_ATTEMPTS = 1000
    RUN_TTL_SEC = 1800
    CORS_ORIGINS = ['http://localhost:5173']


class RecordingHandle:
    def __init__(self, log, token_id):
        self.log = log
        self.token_id = token_id

    def set_position(self, x, y):
        self.log.append(('move', self.token_id, x, y))

    def hide_label(self):
        self.log.append(('hide', self.token_id))

    def show_label(self):
        self.log.append(('show', self.token_id))

    def destroy(self):
        self.log.append(('destroy', self.token_id))


class RecordingRenderer:
    def __init__(self):
        self.log = []

    def create_token(self, token_id, label, color):
        self.log.append(('create', token_id, label, color))
        return RecordingHandle(self.log, token_id)

    def events(self, kind):
        return [e for e in self.log if e[0] == kind]


class RecordingNotifier:
    def __init__(self):
        self.log = []

    def notify(self, text):
        self.log.append(text)

    def clear_notification(self):
        self.log.append(None)


@pytest.fixture()
def renderer():
    return RecordingRenderer()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
        application.extensions['scramble'].end_all()


@pytest.fixture()
def timer(flask_app):
    return flask_app.extensions['scramble'].timer


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')

"""Socket.IO rendering and messaging sinks.

Every call turns into one event on the run's room in the /ws namespace; the
browser does the drawing.
"""

from scramble import socketio

NAMESPACE = '/ws'


def room_for(code: str) -> str:
    return f"run:{code.upper()}"


class SocketTokenHandle:
    def __init__(self, code: str, token_id: int, label: str):
        self.room = room_for(code)
        self.token_id = token_id
        self.label = label

    def _emit(self, event, payload):
        socketio.emit(event, payload, to=self.room, namespace=NAMESPACE)

    def set_position(self, x: int, y: int) -> None:
        self._emit('token_moved', {'id': self.token_id, 'x': x, 'y': y})

    def hide_label(self) -> None:
        self._emit('token_label', {'id': self.token_id, 'label': None})

    def show_label(self) -> None:
        self._emit('token_label', {'id': self.token_id, 'label': self.label})

    def destroy(self) -> None:
        self._emit('token_removed', {'id': self.token_id})


class SocketRenderer:
    def __init__(self, code: str):
        self.code = code

    def create_token(self, token_id: int, label: str, color: str) -> SocketTokenHandle:
        socketio.emit(
            'token_created',
            {'id': token_id, 'label': label, 'color': color},
            to=room_for(self.code),
            namespace=NAMESPACE,
        )
        return SocketTokenHandle(self.code, token_id, label)


class SocketNotifier:
    def __init__(self, code: str):
        self.room = room_for(code)

    def notify(self, text: str) -> None:
        socketio.emit('notification', {'text': text}, to=self.room, namespace=NAMESPACE)

    def clear_notification(self) -> None:
        socketio.emit('notification', {'text': ''}, to=self.room, namespace=NAMESPACE)

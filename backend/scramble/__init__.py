from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import random
import click
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Runs live in memory; tests drive time by hand through a manual timer
    from scramble.runs import RunRegistry
    from scramble.services.game import ManualTimer, SocketIOTimer
    timer = ManualTimer() if flask_app.config.get('TESTING') else SocketIOTimer(socketio)
    flask_app.extensions['scramble'] = RunRegistry(timer, flask_app.config)

    # Import and register blueprints here
    from scramble.main import main
    flask_app.register_blueprint(main)

    from scramble.api.runs import runs
    flask_app.register_blueprint(runs, url_prefix='/api/runs')

    # Register Socket.IO event handlers on the initialized socketio instance
    from scramble.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('preview-layout')
    @click.option('--tokens', default=5, show_default=True, help='Number of tokens to place.')
    @click.option('--width', default=None, type=int, help='Field width (defaults to FIELD_WIDTH).')
    @click.option('--height', default=None, type=int, help='Field height (defaults to FIELD_HEIGHT).')
    @click.option('--size', default=None, type=int, help='Token footprint (defaults to TOKEN_SIZE).')
    @click.option('--seed', default=None, type=int, help='Seed for a repeatable layout.')
    def preview_layout_command(tokens, width, height, size, seed):
        """Prints one random, non-overlapping layout."""
        from scramble.services.game import PlacementField, PlacementError, Token
        cfg = flask_app.config
        width = width or cfg['FIELD_WIDTH']
        height = height or cfg['FIELD_HEIGHT']
        size = size or cfg['TOKEN_SIZE']
        field = PlacementField(random.Random(seed), max_attempts=cfg['PLACEMENT_MAX_ATTEMPTS'])
        try:
            layout = field.layout([Token(id=i, label=str(i)) for i in range(1, tokens + 1)], size, width, height)
        except PlacementError as exc:
            raise click.ClickException(str(exc))
        click.echo(f'field={width}x{height} size={size}')
        for token_id, (x, y) in sorted(layout.items()):
            click.echo(f'{token_id}: ({x}, {y})')

    flask_app.cli.add_command(preview_layout_command)

    return flask_app

from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    cfg = current_app.config
    return jsonify({
        'message': 'Welcome to the Scramble memory server!',
        'min_tokens': cfg.get('MIN_TOKENS', 3),
        'max_tokens': cfg.get('MAX_TOKENS', 7),
    })

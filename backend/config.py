import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Schedule timing (seconds). The first relocation waits this long per token.
    FIRST_ROUND_DELAY_PER_TOKEN_SEC = float(os.environ.get('FIRST_ROUND_DELAY_PER_TOKEN_SEC', '1.0'))
    ROUND_INTERVAL_SEC = float(os.environ.get('ROUND_INTERVAL_SEC', '2.0'))
    # Accepted token counts
    MIN_TOKENS = int(os.environ.get('MIN_TOKENS', '3'))
    MAX_TOKENS = int(os.environ.get('MAX_TOKENS', '7'))
    # Default play area and token footprint (px)
    FIELD_WIDTH = int(os.environ.get('FIELD_WIDTH', '800'))
    FIELD_HEIGHT = int(os.environ.get('FIELD_HEIGHT', '600'))
    TOKEN_SIZE = int(os.environ.get('TOKEN_SIZE', '80'))
    # Candidate draws per token before a round falls back to grid packing
    PLACEMENT_MAX_ATTEMPTS = int(os.environ.get('PLACEMENT_MAX_ATTEMPTS', '1000'))
    # Runs nobody has read or clicked for this long are dropped on the next create. 0 keeps them forever.
    RUN_TTL_SEC = float(os.environ.get('RUN_TTL_SEC', '1800'))
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
        ).split(',') if o.strip()
    ]

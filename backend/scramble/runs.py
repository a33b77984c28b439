import logging
import random
import string
import threading
import time
from typing import Dict, Optional

from scramble.services.game import GameSession, RunNotFound
from scramble.sinks import SocketNotifier, SocketRenderer

logger = logging.getLogger(__name__)


class RunRegistry:
    """In-memory runs keyed by a short code. Nothing outlives the process."""

    def __init__(self, timer, config, clock=time.monotonic):
        self.timer = timer
        self.config = config
        self.clock = clock
        self._runs: Dict[str, GameSession] = {}
        self._touched: Dict[str, float] = {}
        self._lock = threading.Lock()

    def generate_code(self, length=4) -> str:
        """Generate a unique, short run code."""
        while True:
            code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
            if code not in self._runs:
                return code

    def new_session(self, code: str, width: Optional[int] = None, height: Optional[int] = None,
                    size: Optional[int] = None) -> GameSession:
        cfg = self.config
        return GameSession(
            self.timer,
            renderer=SocketRenderer(code),
            notifier=SocketNotifier(code),
            width=int(width if width is not None else cfg.get('FIELD_WIDTH', 800)),
            height=int(height if height is not None else cfg.get('FIELD_HEIGHT', 600)),
            size=int(size if size is not None else cfg.get('TOKEN_SIZE', 80)),
            first_delay_per_round=float(cfg.get('FIRST_ROUND_DELAY_PER_TOKEN_SEC', 1.0)),
            round_interval=float(cfg.get('ROUND_INTERVAL_SEC', 2.0)),
            min_tokens=int(cfg.get('MIN_TOKENS', 3)),
            max_tokens=int(cfg.get('MAX_TOKENS', 7)),
            max_attempts=int(cfg.get('PLACEMENT_MAX_ATTEMPTS', 1000)),
        )

    def create(self, token_count: int, width=None, height=None, size=None):
        self.sweep()
        with self._lock:
            code = self.generate_code()
            session = self.new_session(code, width, height, size)
            # Validate before registering so a rejected run leaves nothing behind.
            session.check_token_count(token_count)
            self._runs[code] = session
            self._touched[code] = self.clock()
        session.start_run(token_count)
        logger.info(f"[run-create] code={code} tokens={token_count}")
        return code, session

    def get(self, code: str) -> GameSession:
        session = self._runs.get((code or '').upper())
        if session is None:
            raise RunNotFound((code or '').upper())
        self._touched[(code or '').upper()] = self.clock()
        return session

    def end(self, code: str) -> bool:
        with self._lock:
            session = self._runs.pop((code or '').upper(), None)
            self._touched.pop((code or '').upper(), None)
        if session is None:
            return False
        session.clear_game()
        logger.info(f"[run-end] code={code.upper()}")
        return True

    def sweep(self) -> int:
        """End runs nobody has looked at for RUN_TTL_SEC. 0 disables expiry."""
        ttl = float(self.config.get('RUN_TTL_SEC', 0) or 0)
        if ttl <= 0:
            return 0
        cutoff = self.clock() - ttl
        stale = [code for code, touched in list(self._touched.items()) if touched < cutoff]
        for code in stale:
            logger.info(f"[run-expire] code={code} idle>{ttl}s")
            self.end(code)
        return len(stale)

    def end_all(self) -> None:
        for code in list(self._runs):
            self.end(code)

    def __contains__(self, code) -> bool:
        return (code or '').upper() in self._runs

    def __len__(self) -> int:
        return len(self._runs)


def run_state(code: str, session: GameSession):
    payload = session.to_dict()
    payload['code'] = code.upper()
    return payload

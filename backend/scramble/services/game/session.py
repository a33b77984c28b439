from __future__ import annotations

import logging
import random
import threading
from typing import List, Optional

from scramble import messages
from .errors import InfeasibleField, InvalidTokenCount
from .judge import SequenceJudge, Verdict
from .placement import PlacementField, capacity
from .scheduler import RoundScheduler
from .tokens import Token

logger = logging.getLogger(__name__)

PALETTE = ('#FF5733', '#33FF57', '#3357FF', '#FFFF33', '#FF33F6', '#33FFF6', '#FF9933')


class GameSession:
    """One player's board: owns the tokens and wires the scheduler and judge to them.

    ``renderer.create_token(id, label, color)`` returns the handle each token drives;
    ``notifier`` needs ``notify(text)`` and ``clear_notification()``. Either may be
    None for a headless session. All entry points run under one re-entrant lock
    shared with the scheduler's ticks.
    """

    def __init__(
        self,
        timer,
        renderer=None,
        notifier=None,
        width: int = 800,
        height: int = 600,
        size: int = 80,
        first_delay_per_round: float = 1.0,
        round_interval: float = 2.0,
        min_tokens: int = 3,
        max_tokens: int = 7,
        max_attempts: int = 1000,
        rng: Optional[random.Random] = None,
    ):
        self.renderer = renderer
        self.notifier = notifier
        self.width = width
        self.height = height
        self.size = size
        self.min_tokens = min_tokens
        self.max_tokens = max_tokens
        self.rng = rng or random.Random()
        self.lock = threading.RLock()

        self.tokens: List[Token] = []
        self.judge: Optional[SequenceJudge] = None
        self.notification = ''
        self.scheduler = RoundScheduler(
            PlacementField(self.rng, max_attempts=max_attempts),
            timer,
            size,
            width,
            height,
            first_delay_per_round=first_delay_per_round,
            round_interval=round_interval,
            lock=self.lock,
            on_error=self._placement_failed,
        )

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    def check_token_count(self, token_count) -> int:
        if isinstance(token_count, bool) or not isinstance(token_count, int):
            raise InvalidTokenCount(token_count, self.min_tokens, self.max_tokens)
        if not (self.min_tokens <= token_count <= self.max_tokens):
            raise InvalidTokenCount(token_count, self.min_tokens, self.max_tokens)
        if self.size > self.width or self.size > self.height:
            raise InfeasibleField(f'Footprint {self.size} does not fit a {self.width}x{self.height} field')
        room = capacity(self.size, self.width, self.height)
        if token_count > room:
            raise InfeasibleField(f'{token_count} tokens cannot fit a field that holds {room}')
        return token_count

    def start_run(self, token_count: int) -> None:
        token_count = self.check_token_count(token_count)
        with self.lock:
            self.clear_game()
            self.tokens = self._create_tokens(token_count)
            self.judge = SequenceJudge(
                self.tokens,
                [t.id for t in self.tokens],
                notify=self._notify,
            )
            logger.info(f"[run-start] tokens={token_count} field={self.width}x{self.height} size={self.size}")
            self.scheduler.start(self.tokens, token_count)

    def clear_game(self) -> None:
        with self.lock:
            # Cancel the pending tick before anything it could touch goes away.
            self.scheduler.reset()
            for token in self.tokens:
                token.destroy()
            if self.tokens:
                logger.info(f"[run-clear] tokens={len(self.tokens)}")
            self.tokens = []
            self.judge = None
            self._clear_notification()

    def select(self, token_id) -> Optional[Verdict]:
        with self.lock:
            if self.judge is None:
                return None
            return self.judge.submit(token_id)

    def _create_tokens(self, token_count: int) -> List[Token]:
        colors = list(PALETTE[:token_count])
        self.rng.shuffle(colors)
        per_row = max(1, self.width // self.size)
        tokens = []
        for i in range(1, token_count + 1):
            token = Token(id=i, label=str(i), color=colors[(i - 1) % len(colors)])
            if self.renderer is not None:
                token.handle = self.renderer.create_token(token.id, token.label, token.color)
            # Start in reading order, the way they first appear before any shuffle.
            slot = i - 1
            token.move_to((slot % per_row) * self.size, (slot // per_row) * self.size)
            tokens.append(token)
        return tokens

    def _placement_failed(self, exc) -> None:
        self._notify(messages.PLACEMENT_FAILED)

    def _notify(self, text: str) -> None:
        self.notification = text
        if self.notifier is not None:
            self.notifier.notify(text)

    def _clear_notification(self) -> None:
        self.notification = ''
        if self.notifier is not None:
            self.notifier.clear_notification()

    def to_dict(self):
        # A tick moves tokens under this lock; never report a half-applied round.
        with self.lock:
            judge = self.judge.to_dict() if self.judge else {'verdict': None, 'progress': []}
            return {
                'token_count': self.token_count,
                'field': {'width': self.width, 'height': self.height, 'token_size': self.size},
                'scheduler': self.scheduler.to_dict(),
                'verdict': judge['verdict'],
                'progress': judge['progress'],
                'notification': self.notification,
                'tokens': [t.to_dict() for t in self.tokens],
                'delays': {
                    'first_round': self.scheduler.first_delay(self.token_count),
                    'round_interval': self.scheduler.round_interval,
                },
            }

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from .errors import PlacementError
from .placement import PlacementField
from .tokens import Position, Token

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    OBSCURED = 'obscured'
    FAILED = 'failed'


class RoundScheduler:
    """Relocate tokens once per round on a timer, then hide every label.

    - First relocation fires ``first_delay_per_round * max_rounds`` seconds after start
    - Later relocations fire every ``round_interval`` seconds
    - Each pending tick carries the generation it was scheduled under; a tick from
      an older generation (after stop/reset/restart) is dropped
    - A placement error leaves tokens where they were and ends the schedule
    """

    def __init__(
        self,
        placement: PlacementField,
        timer,
        size: int,
        width: int,
        height: int,
        first_delay_per_round: float = 1.0,
        round_interval: float = 2.0,
        lock=None,
        on_round: Optional[Callable[[int, Dict[int, Position]], None]] = None,
        on_obscured: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[PlacementError], None]] = None,
    ):
        self.placement = placement
        self.timer = timer
        self.size = size
        self.width = width
        self.height = height
        self.first_delay_per_round = first_delay_per_round
        self.round_interval = round_interval
        self.on_round = on_round
        self.on_obscured = on_obscured
        self.on_error = on_error
        self._lock = lock if lock is not None else threading.RLock()

        self.state = SchedulerState.IDLE
        self.tokens: List[Token] = []
        self.round_index = 0
        self.max_rounds = 0
        self.rounds_applied: List[int] = []
        self.hide_count = 0
        self._generation = 0
        self._handle = None

    def first_delay(self, max_rounds: int) -> float:
        return self.first_delay_per_round * max_rounds

    def start(self, tokens: Sequence[Token], max_rounds: int) -> None:
        with self._lock:
            if self.state != SchedulerState.IDLE:
                self.reset()
            self.tokens = list(tokens)
            self.round_index = 0
            self.max_rounds = int(max_rounds)
            self.state = SchedulerState.RUNNING
            self._schedule(self.first_delay(self.max_rounds))

    def stop(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None
            self._generation += 1
            self.state = SchedulerState.IDLE

    def reset(self) -> None:
        with self._lock:
            self.stop()
            self.tokens = []
            self.round_index = 0
            self.max_rounds = 0
            self.rounds_applied = []
            self.hide_count = 0

    def _schedule(self, delay: float) -> None:
        generation = self._generation
        logger.info(f"[timer-set] round={self.round_index}/{self.max_rounds} delay={delay}s gen={generation}")
        self._handle = self.timer.call_later(delay, lambda: self._tick(generation))

    def _tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self.state != SchedulerState.RUNNING:
                logger.info(
                    f"[timer-abort] gen={generation} current_gen={self._generation} state={self.state.value}"
                )
                return
            self._handle = None

            if self.round_index >= self.max_rounds:
                for token in self.tokens:
                    token.hide()
                self.hide_count += 1
                self.state = SchedulerState.OBSCURED
                logger.info(f"[obscure] rounds={self.round_index} tokens={len(self.tokens)}")
                if self.on_obscured:
                    self.on_obscured()
                return

            try:
                layout = self.placement.layout(self.tokens, self.size, self.width, self.height)
            except PlacementError as exc:
                self.state = SchedulerState.FAILED
                logger.error(f"[placement-error] round={self.round_index} {exc}")
                if self.on_error is None:
                    raise
                self.on_error(exc)
                return

            # Layout is complete before any token moves.
            by_id = {t.id: t for t in self.tokens}
            for token_id, (x, y) in layout.items():
                by_id[token_id].move_to(x, y)
            applied = self.round_index
            self.rounds_applied.append(applied)
            self.round_index += 1
            logger.info(f"[round] {applied + 1}/{self.max_rounds} applied")
            if self.on_round:
                self.on_round(applied, layout)
            self._schedule(self.round_interval)

    def to_dict(self):
        return {
            'state': self.state.value,
            'round': self.round_index,
            'max_rounds': self.max_rounds,
        }

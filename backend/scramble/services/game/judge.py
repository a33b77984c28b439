from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional, Sequence

from scramble import messages
from .tokens import Token

logger = logging.getLogger(__name__)


class Verdict(str, Enum):
    COLLECTING = 'collecting'
    SUCCESS = 'success'
    FAILED = 'failed'


class SequenceJudge:
    """Checks each selection against the canonical order.

    A match reveals that token. A miss reveals every token in canonical order.
    Once the run succeeded or failed, further submissions change nothing.
    """

    def __init__(
        self,
        tokens: Sequence[Token],
        canonical_order: Optional[Sequence[int]] = None,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.tokens = {t.id: t for t in tokens}
        if canonical_order is None:
            canonical_order = [t.id for t in tokens]
        self.canonical_order = tuple(canonical_order)
        if not self.canonical_order:
            raise ValueError('Canonical order must not be empty')
        unknown = [i for i in self.canonical_order if i not in self.tokens]
        if unknown:
            raise ValueError(f'Canonical order references unknown tokens: {unknown}')
        self.progress: List[int] = []
        self.verdict = Verdict.COLLECTING
        self._notify = notify

    @property
    def expected(self) -> Optional[int]:
        if self.verdict != Verdict.COLLECTING:
            return None
        return self.canonical_order[len(self.progress)]

    def submit(self, token_id) -> Verdict:
        if self.verdict != Verdict.COLLECTING:
            logger.info(f"[judge] ignored token={token_id} verdict={self.verdict.value}")
            return self.verdict

        expected = self.canonical_order[len(self.progress)]
        if token_id == expected:
            self.tokens[token_id].reveal()
            self.progress.append(token_id)
            if len(self.progress) == len(self.canonical_order):
                self.verdict = Verdict.SUCCESS
                logger.info(f"[judge] success after {len(self.progress)} selections")
                self._emit(messages.SUCCESS)
            return self.verdict

        self.verdict = Verdict.FAILED
        logger.info(f"[judge] wrong token={token_id} expected={expected} position={len(self.progress)}")
        for canonical_id in self.canonical_order:
            self.tokens[canonical_id].reveal()
        self._emit(messages.WRONG_ORDER)
        return self.verdict

    def _emit(self, text: str) -> None:
        if self._notify is not None:
            self._notify(text)

    def to_dict(self):
        return {
            'verdict': self.verdict.value,
            'progress': list(self.progress),
        }

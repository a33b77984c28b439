"""Random, collision-free token layouts inside a bounded field.

Candidates are drawn uniformly and rejected while they overlap an already
accepted square. Each token gets a finite candidate budget; when one runs
dry the round is re-dealt onto a shuffled grid of footprint-sized cells so a
dense field can never hang the caller. Only if the grid is too small does
``PlacementExhausted`` escape.
"""

from __future__ import annotations

import logging
import random
from typing import Dict, Iterable, List, Optional, Sequence

from .errors import InfeasibleField, PlacementExhausted
from .tokens import Position

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 1000


def overlaps(a: Position, b: Position, size: int) -> bool:
    """True when two size x size squares anchored at a and b intersect."""
    return abs(a[0] - b[0]) < size and abs(a[1] - b[1]) < size


def capacity(size: int, width: int, height: int) -> int:
    """Number of axis-aligned squares that fit in the field."""
    if size <= 0:
        return 0
    return (width // size) * (height // size)


def is_valid_layout(layout: Dict[int, Position], size: int, width: int, height: int) -> bool:
    positions = list(layout.values())
    for x, y in positions:
        if not (0 <= x <= width - size and 0 <= y <= height - size):
            return False
    for i, a in enumerate(positions):
        for b in positions[i + 1:]:
            if overlaps(a, b, size):
                return False
    return True


class PlacementField:
    def __init__(self, rng: Optional[random.Random] = None, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError('max_attempts must be at least 1')
        self.rng = rng or random.Random()
        self.max_attempts = max_attempts

    def layout(self, tokens: Sequence, size: int, width: int, height: int) -> Dict[int, Position]:
        """Return one position per token id. Does not touch the tokens."""
        if not tokens:
            raise InfeasibleField('No tokens to place')
        if size <= 0:
            raise InfeasibleField(f'Footprint must be positive, got {size}')
        if size > width or size > height:
            raise InfeasibleField(f'Footprint {size} does not fit a {width}x{height} field')

        ids = [t.id for t in tokens]
        placed = self._sample(ids, size, width, height)
        if placed is None:
            logger.warning(
                f"[placement-fallback] tokens={len(ids)} size={size} field={width}x{height} "
                f"budget={self.max_attempts} exhausted, packing onto grid"
            )
            placed = self._grid(ids, size, width, height)
        return placed

    def _sample(self, ids: Iterable[int], size: int, width: int, height: int) -> Optional[Dict[int, Position]]:
        max_x = width - size
        max_y = height - size
        placed: Dict[int, Position] = {}
        for token_id in ids:
            for _ in range(self.max_attempts):
                candidate = (self.rng.randint(0, max_x), self.rng.randint(0, max_y))
                if not any(overlaps(candidate, p, size) for p in placed.values()):
                    placed[token_id] = candidate
                    break
            else:
                return None
        return placed

    def _grid(self, ids: List[int], size: int, width: int, height: int) -> Dict[int, Position]:
        cells = [
            (col * size, row * size)
            for row in range(height // size)
            for col in range(width // size)
        ]
        if len(cells) < len(ids):
            raise PlacementExhausted(
                f'{len(ids)} tokens of size {size} cannot fit a {width}x{height} field '
                f'({len(cells)} cells)'
            )
        self.rng.shuffle(cells)
        return dict(zip(ids, cells))

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

Position = Tuple[int, int]


class TokenHandle(Protocol):
    """Rendering side of a token. The engine only ever calls these four."""

    def set_position(self, x: int, y: int) -> None: ...

    def hide_label(self) -> None: ...

    def show_label(self) -> None: ...

    def destroy(self) -> None: ...


class Positionable(Protocol):
    id: int

    def move_to(self, x: int, y: int) -> None: ...


class Revealable(Protocol):
    id: int
    revealed: bool

    def reveal(self) -> None: ...

    def hide(self) -> None: ...


@dataclass
class Token:
    """One selectable unit. Position belongs to the scheduler, visibility to both machines."""
    id: int
    label: str
    color: Optional[str] = None
    position: Optional[Position] = None
    revealed: bool = True
    handle: Optional[TokenHandle] = None

    def move_to(self, x: int, y: int) -> None:
        self.position = (x, y)
        if self.handle is not None:
            self.handle.set_position(x, y)

    def reveal(self) -> None:
        self.revealed = True
        if self.handle is not None:
            self.handle.show_label()

    def hide(self) -> None:
        self.revealed = False
        if self.handle is not None:
            self.handle.hide_label()

    def destroy(self) -> None:
        if self.handle is not None:
            self.handle.destroy()
            self.handle = None

    def to_dict(self):
        x, y = self.position if self.position is not None else (None, None)
        return {
            'id': self.id,
            'label': self.label if self.revealed else None,
            'color': self.color,
            'x': x,
            'y': y,
        }

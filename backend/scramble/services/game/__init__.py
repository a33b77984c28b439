"""Game engine: placement, round scheduling and sequence judging.

Nothing in here knows about HTTP or sockets. Routes and socket handlers build
a GameSession with rendering/messaging sinks and a timer, and call into it.
"""

from .errors import (  # noqa: F401
    GameError,
    InfeasibleField,
    InvalidTokenCount,
    PlacementError,
    PlacementExhausted,
    RunNotFound,
)
from .judge import SequenceJudge, Verdict  # noqa: F401
from .placement import PlacementField, capacity, is_valid_layout, overlaps  # noqa: F401
from .scheduler import RoundScheduler, SchedulerState  # noqa: F401
from .session import GameSession  # noqa: F401
from .timers import ManualTimer, SocketIOTimer  # noqa: F401
from .tokens import Token  # noqa: F401

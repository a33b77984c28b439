class GameError(Exception):
    """Base class for errors raised by the game engine."""


class InvalidTokenCount(GameError):
    def __init__(self, count, minimum: int, maximum: int):
        super().__init__(f"Token count must be between {minimum} and {maximum}, got {count!r}")
        self.count = count
        self.minimum = minimum
        self.maximum = maximum


class PlacementError(GameError):
    """A round could not be laid out."""


class InfeasibleField(PlacementError):
    """No valid placement can exist for the requested footprint and field."""


class PlacementExhausted(PlacementError):
    """Sampling budget ran out and the grid fallback had too few cells."""


class RunNotFound(GameError):
    def __init__(self, code: str):
        super().__init__(f"Run {code} not found")
        self.code = code

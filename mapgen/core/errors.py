"""Error types raised by the generation pipeline."""


class MapGenError(Exception):
    """Base class for all map generation errors."""


class ConfigurationError(MapGenError, ValueError):
    """Configuration is malformed or out of range; nothing was generated."""


class InvariantViolation(MapGenError, RuntimeError):
    """A stage produced output that breaks one of its guarantees.

    This always indicates a bug in stage logic, never bad user input.
    """

    def __init__(self, stage: str, message: str):
        super().__init__(f"[{stage}] {message}")
        self.stage = stage

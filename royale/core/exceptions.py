"""
Exceptions for match engine errors.
"""

from typing import Any


class MatchEngineError(Exception):
    """Base class for match engine errors."""


class InvalidStateError(MatchEngineError):
    """Raised when a caller passes an undefined state to the state machine."""

    def __init__(self, value: Any, message: str = ""):
        self.value = value
        self.message = message or f"Invalid game state: {value!r}"
        super().__init__(self.message)


class ConfigurationError(MatchEngineError):
    """Raised when match or zone configuration data cannot be interpreted."""

    def __init__(self, key: str, message: str = ""):
        self.key = key
        self.message = message or f"Invalid configuration value for '{key}'"
        super().__init__(self.message)

"""Custom exception hierarchy for the puzzle grid engines."""


class PuzzleGridError(Exception):
    """Base exception for engine failures."""


class ConfigurationError(PuzzleGridError, ValueError):
    """Raised when an engine is built from an invalid configuration."""


class LetterGenerationError(ConfigurationError):
    """Raised when a letter request cannot be satisfied by the frequency table."""

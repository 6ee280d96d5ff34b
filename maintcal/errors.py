"""Exception types raised by the maintenance calendar engine."""


class MaintCalError(Exception):
    """Base class for engine errors."""


class OutOfRangeError(MaintCalError, ValueError):
    """A (year, week) pair outside the supported calendar range."""


class PopulationError(MaintCalError):
    """A full-year population could not start (e.g. data source unreachable)."""

    def __init__(self, year: int, message: str):
        super().__init__(f"Population of {year} failed: {message}")
        self.year = year


class ConfigError(MaintCalError):
    """Invalid or unreadable engine configuration."""

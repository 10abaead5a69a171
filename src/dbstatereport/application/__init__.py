"""Application layer: the state reporting use case."""

from .state_reporter import StateReporter, get_database_state

__all__ = ["StateReporter", "get_database_state"]

"""Stateful managers for the event timeline.

- completion_manager: In-memory daily/weekly/monthly completion store
"""

from .completion_manager import CompletionManager, CompletionSnapshot

__all__ = ["CompletionManager", "CompletionSnapshot"]

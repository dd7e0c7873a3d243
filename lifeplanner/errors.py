"""
Exceptions raised by LifePlanner.

The analysis functions only raise for structurally invalid input (an empty
collection they cannot reduce). Well-typed but odd data is handled in place.
"""

from __future__ import annotations


class LifePlannerError(Exception):
    """Base class for every error this package raises on purpose."""


class InvalidInput(LifePlannerError, ValueError):
    """Input is structurally unusable (e.g. an empty fitness history)."""


class TaskNotFound(LifePlannerError, LookupError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id

# src/todo_client/core/errors.py

from __future__ import annotations


class SessionRequiredError(RuntimeError):
    """An authenticated call was attempted without a bearer token."""

    def __init__(self, message: str = "No active session: log in first.") -> None:
        super().__init__(message)


class TaskNotFoundError(LookupError):
    """The task id is not present in the local collection."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id

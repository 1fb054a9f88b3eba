# src/todo_client/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Fields a client may send when editing a task.
TASK_FIELDS = ("title", "description", "completed")


@dataclass(slots=True)
class Task:
    """
    A task as the server returns it.

    Notes:
    - id is always server-assigned; the client never invents one.
    - description is optional on the wire (missing and null both map to None).
    """

    id: int
    title: str
    completed: bool = False
    description: str | None = None

    @classmethod
    def from_api(cls, data: Any) -> Task:
        if not isinstance(data, dict):
            raise ValueError(f"Expected task object, got {type(data).__name__}")

        raw_id = data.get("id")
        # bool is an int subclass; a boolean id is a broken payload.
        if not isinstance(raw_id, int) or isinstance(raw_id, bool):
            raise ValueError(f"Task id must be an integer, got {raw_id!r}")

        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValueError(f"Task {raw_id} has no title")

        description = data.get("description")
        if description is not None and not isinstance(description, str):
            raise ValueError(f"Task {raw_id} description must be a string")

        return cls(
            id=raw_id,
            title=title,
            completed=bool(data.get("completed", False)),
            description=description,
        )

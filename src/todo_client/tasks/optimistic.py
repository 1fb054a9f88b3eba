# src/todo_client/tasks/optimistic.py

"""
Optimistic update with rollback for an id-keyed task list.

Steps:
1. capture the current entry (snapshot),
2. apply the local change right away,
3. run the remote call,
4a. success -> replace the entry with the server's version,
4b. failure -> put the changed fields back to their snapshot values on the
    *current* entry, then re-raise.

Only the fields the change touched are restored in 4b, so anything else that
changed locally while the request was in flight survives the rollback.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Awaitable, Callable
from typing import Any

from ..core.errors import TaskNotFoundError
from .task_models import Task

ChangeBuilder = Callable[[Task], dict[str, Any]]
RemoteCommit = Callable[[dict[str, Any]], Awaitable[Task]]


def index_of(tasks: list[Task], task_id: int) -> int | None:
    for i, task in enumerate(tasks):
        if task.id == task_id:
            return i
    return None


async def apply_optimistic(
    tasks: list[Task],
    task_id: int,
    build_changes: ChangeBuilder,
    commit: RemoteCommit,
) -> Task:
    index = index_of(tasks, task_id)
    if index is None:
        raise TaskNotFoundError(task_id)

    snapshot = tasks[index]
    changes = build_changes(snapshot)
    tasks[index] = dataclasses.replace(snapshot, **changes)

    try:
        confirmed = await commit(changes)
    except BaseException:
        # BaseException: a cancelled request must not leave the unconfirmed value behind.
        index = index_of(tasks, task_id)
        if index is not None:
            restored = {name: getattr(snapshot, name) for name in changes}
            tasks[index] = dataclasses.replace(tasks[index], **restored)
        raise

    index = index_of(tasks, task_id)
    if index is not None:
        tasks[index] = confirmed
    return confirmed

# src/todo_client/tasks/task_store.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from ..api.client import MalformedResponseError, TodoApiClient
from ..core.errors import TaskNotFoundError
from ..session.manager import SessionManager
from .optimistic import apply_optimistic, index_of
from .task_models import Task

logger = logging.getLogger(__name__)


def _parse_task(data: Any) -> Task:
    try:
        return Task.from_api(data)
    except ValueError as e:
        raise MalformedResponseError(f"Invalid task in response: {e}") from e


class TaskStore:
    """
    Local mirror of the user's tasks, backed by the remote API.

    Collection rules:
    - list_tasks() replaces everything (server order),
    - create appends, update/toggle replace in place, delete removes,
    - nothing enters the list without a server-assigned id.

    Every remote call takes the bearer token from the session at call time;
    without one the call fails fast with SessionRequiredError.

    Concurrency:
    - single event loop, no threads,
    - toggle/update on the same id are serialized (per-id asyncio.Lock), so a
      rollback of one request can never clobber the optimistic state of the next.
    """

    def __init__(self, api: TodoApiClient, session: SessionManager, *, page_size: int = 100) -> None:
        self._api = api
        self._session = session
        self._page_size = page_size
        self._tasks: list[Task] = []
        self._locks: dict[int, asyncio.Lock] = {}

        session.add_token_listener(self._on_token_acquired)

    # ---- read API ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def get(self, task_id: int) -> Task | None:
        index = index_of(self._tasks, task_id)
        return self._tasks[index] if index is not None else None

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- sync ----

    async def _on_token_acquired(self, token: str) -> None:
        logger.info("Session token acquired, refreshing tasks")
        await self.list_tasks()

    async def list_tasks(self, skip: int = 0, limit: int | None = None) -> list[Task]:
        """
        Fetch one page and make it the whole local collection.

        Pages are not merged: entries outside the fetched page are dropped.
        """
        token = self._session.require_token()
        limit = self._page_size if limit is None else limit

        data = await self._api.list_todos(token, skip=skip, limit=limit)
        if not isinstance(data, list):
            raise MalformedResponseError("Task list response is not a list")

        fetched = [_parse_task(item) for item in data]
        if self._session.token != token:
            logger.info("Session changed while fetching tasks; ignoring result")
            return fetched

        # In place: an in-flight toggle holds a reference to this list.
        self._tasks[:] = fetched
        self._prune_locks()
        logger.info("Fetched %d tasks (skip=%d limit=%d)", len(fetched), skip, limit)
        return fetched

    # ---- mutations ----

    @asynccontextmanager
    async def _serialized(self, task_id: int) -> AsyncIterator[None]:
        lock = self._locks.setdefault(task_id, asyncio.Lock())
        async with lock:
            yield

    def _prune_locks(self) -> None:
        known = {t.id for t in self._tasks}
        for task_id, lock in list(self._locks.items()):
            if task_id not in known and not lock.locked():
                del self._locks[task_id]

    async def create_task(self, title: str, description: str | None = None) -> Task:
        if not title or not title.strip():
            raise ValueError("title is required")
        token = self._session.require_token()

        task = _parse_task(await self._api.create_todo(token, title=title, description=description))
        self._tasks.append(task)
        logger.info("Created task id=%s", task.id)
        return task

    async def update_task(
        self,
        task_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        completed: bool | None = None,
    ) -> Task:
        fields: dict[str, Any] = {}
        if title is not None:
            if not title.strip():
                raise ValueError("title cannot be blank")
            fields["title"] = title
        if description is not None:
            fields["description"] = description
        if completed is not None:
            fields["completed"] = bool(completed)
        if not fields:
            raise ValueError("nothing to update")

        token = self._session.require_token()

        async with self._serialized(task_id):
            task = _parse_task(await self._api.update_todo(token, task_id, fields))
            index = index_of(self._tasks, task_id)
            if index is not None:
                self._tasks[index] = task
        logger.info("Updated task id=%s fields=%s", task_id, sorted(fields))
        return task

    async def delete_task(self, task_id: int) -> Task:
        token = self._session.require_token()
        previous = self.get(task_id)

        data = await self._api.delete_todo(token, task_id)
        self._tasks[:] = [t for t in self._tasks if t.id != task_id]
        self._prune_locks()
        logger.info("Deleted task id=%s", task_id)

        try:
            return _parse_task(data)
        except MalformedResponseError:
            # The delete went through; fall back to the last known local copy.
            if previous is None:
                raise
            logger.warning("Delete of task id=%s returned an unusable body", task_id)
            return previous

    async def toggle_completed(self, task_id: int) -> Task:
        token = self._session.require_token()
        if self.get(task_id) is None:
            raise TaskNotFoundError(task_id)

        async def commit(changes: dict[str, Any]) -> Task:
            return _parse_task(await self._api.update_todo(token, task_id, changes))

        async with self._serialized(task_id):
            try:
                task = await apply_optimistic(
                    self._tasks,
                    task_id,
                    lambda current: {"completed": not current.completed},
                    commit,
                )
            except TaskNotFoundError:
                raise
            except Exception:
                logger.exception("Error toggling task id=%s; local state rolled back", task_id)
                raise
        return task

# src/todo_client/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..api.client import TodoApiClient
from ..session.manager import SessionManager
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """Everything the front end needs, wired once by the composition root."""

    settings: Any
    api: TodoApiClient
    session: SessionManager
    tasks: TaskStore

    async def aclose(self) -> None:
        await self.session.wait_for_listeners()
        await self.api.aclose()

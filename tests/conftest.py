# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_client.cli.bootstrap import create_initial_state
from todo_client.core.state import AppState

from .fakes import BASE_URL, FakeTodoBackend, MemoryTokenStorage, ScriptedIdentityProvider

ALICE = "alice@example.com"
ALICE_PASSWORD = "Secret#123"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap code.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        api_base_url=BASE_URL,
        http_timeout=None,
        data_dir=tmp_path / "data",
        token_store_path=tmp_path / "data" / "auth.json",
        tasks_page_size=100,
        google_client_id="client-id.apps.googleusercontent.com",
        google_scopes=["profile", "email"],
        console_enabled=False,
    )


@pytest.fixture()
def backend() -> FakeTodoBackend:
    backend = FakeTodoBackend()
    backend.add_user(ALICE, ALICE_PASSWORD, name="Alice")
    return backend


@pytest.fixture()
def storage() -> MemoryTokenStorage:
    return MemoryTokenStorage()


@pytest.fixture()
def identity() -> ScriptedIdentityProvider:
    return ScriptedIdentityProvider()


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    backend: FakeTodoBackend,
    storage: MemoryTokenStorage,
    identity: ScriptedIdentityProvider,
) -> AppState:
    """
    AppState wired with deterministic fakes.

    The real SessionManager/TaskStore/TodoApiClient run unchanged; only the
    HTTP transport, token storage and identity provider are fake.
    """
    return create_initial_state(settings=settings, http=backend.client(), storage=storage, identity=identity)

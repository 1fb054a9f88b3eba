# tests/test_task_store.py

from __future__ import annotations

import asyncio

import pytest

from todo_client.api.client import ApiError
from todo_client.core.errors import SessionRequiredError, TaskNotFoundError
from todo_client.tasks.task_models import Task

from .conftest import ALICE, ALICE_PASSWORD

BOB = "bob@example.com"


async def _login(state, email: str = ALICE, password: str = ALICE_PASSWORD) -> None:
    assert await state.session.login(email, password)
    await state.session.wait_for_listeners()


@pytest.mark.asyncio
async def test_login_refreshes_tasks_for_that_user(state, backend) -> None:
    backend.add_user(BOB, "Bobby#123")
    backend.add_todo(ALICE, "Alice 1")
    backend.add_todo(BOB, "Bob 1")
    backend.add_todo(ALICE, "Alice 2")

    await _login(state)
    assert [t.title for t in state.tasks.tasks] == ["Alice 1", "Alice 2"]

    await state.session.logout()
    await _login(state, BOB, "Bobby#123")
    assert [t.title for t in state.tasks.tasks] == ["Bob 1"]


@pytest.mark.asyncio
async def test_list_replaces_whole_collection(state, backend) -> None:
    for title in ("a", "b", "c"):
        backend.add_todo(ALICE, title)
    await _login(state)

    page = await state.tasks.list_tasks(skip=1, limit=1)

    assert [t.title for t in page] == ["b"]
    assert [t.title for t in state.tasks.tasks] == ["b"]
    assert backend.requests[-1].path == "/todos/"

    await state.tasks.list_tasks()
    assert [t.title for t in state.tasks.tasks] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_list_requires_session(state, backend) -> None:
    with pytest.raises(SessionRequiredError):
        await state.tasks.list_tasks()
    assert backend.requests == []


@pytest.mark.asyncio
async def test_create_appends_server_task(state, backend) -> None:
    await _login(state)
    backend.next_todo_id = 42

    task = await state.tasks.create_task("Pay bill")

    assert task == Task(id=42, title="Pay bill", completed=False)
    assert state.tasks.tasks[-1] == task
    assert backend.requests[-1].body == {"title": "Pay bill"}


@pytest.mark.asyncio
async def test_creates_get_distinct_ids(state) -> None:
    await _login(state)

    first = await state.tasks.create_task("one", "with notes")
    second = await state.tasks.create_task("two")

    assert first.id != second.id
    assert first.description == "with notes"
    assert [t.id for t in state.tasks.tasks] == [first.id, second.id]


@pytest.mark.asyncio
async def test_create_failure_leaves_collection_unchanged(state, backend) -> None:
    backend.add_todo(ALICE, "existing")
    await _login(state)
    before = state.tasks.tasks

    backend.fail("POST", "/todos/", status=500)
    with pytest.raises(ApiError):
        await state.tasks.create_task("new")

    assert state.tasks.tasks == before


@pytest.mark.asyncio
async def test_create_rejects_blank_title_without_request(state, backend) -> None:
    await _login(state)
    seen = len(backend.requests)

    with pytest.raises(ValueError):
        await state.tasks.create_task("   ")

    assert len(backend.requests) == seen


@pytest.mark.asyncio
async def test_update_applies_only_after_server_confirms(state, backend) -> None:
    todo = backend.add_todo(ALICE, "Old title")
    await _login(state)

    release = backend.hold("PUT", f"/todos/{todo['id']}")
    pending = asyncio.create_task(state.tasks.update_task(todo["id"], title="New title"))
    await backend.held.wait()

    assert state.tasks.get(todo["id"]).title == "Old title"

    release.set()
    updated = await pending

    assert updated.title == "New title"
    assert state.tasks.get(todo["id"]) == updated


@pytest.mark.asyncio
async def test_update_failure_keeps_local_entry(state, backend) -> None:
    todo = backend.add_todo(ALICE, "Keep me")
    await _login(state)

    backend.fail("PUT", f"/todos/{todo['id']}", status=500)
    with pytest.raises(ApiError):
        await state.tasks.update_task(todo["id"], title="Changed")

    assert state.tasks.get(todo["id"]).title == "Keep me"


@pytest.mark.asyncio
async def test_update_without_fields_is_rejected(state) -> None:
    await _login(state)
    with pytest.raises(ValueError):
        await state.tasks.update_task(1)


@pytest.mark.asyncio
async def test_delete_removes_entry_and_keeps_order(state, backend) -> None:
    ids = [backend.add_todo(ALICE, title)["id"] for title in ("a", "b", "c")]
    await _login(state)

    removed = await state.tasks.delete_task(ids[1])

    assert removed.title == "b"
    assert [t.title for t in state.tasks.tasks] == ["a", "c"]


@pytest.mark.asyncio
async def test_delete_failure_keeps_entry(state, backend) -> None:
    todo = backend.add_todo(ALICE, "sticky")
    await _login(state)

    backend.fail("DELETE", f"/todos/{todo['id']}", status=404)
    with pytest.raises(ApiError) as exc_info:
        await state.tasks.delete_task(todo["id"])

    assert exc_info.value.status_code == 404
    assert [t.title for t in state.tasks.tasks] == ["sticky"]


@pytest.mark.asyncio
async def test_toggle_is_visible_before_server_answers(state, backend) -> None:
    todo = backend.add_todo(ALICE, "Buy milk")
    await _login(state)

    release = backend.hold("PUT", f"/todos/{todo['id']}")
    pending = asyncio.create_task(state.tasks.toggle_completed(todo["id"]))
    await backend.held.wait()

    assert state.tasks.get(todo["id"]).completed is True

    # Another client renamed the task meanwhile; the server's version wins.
    todo["title"] = "Buy oat milk"
    release.set()
    confirmed = await pending

    assert confirmed == Task(id=todo["id"], title="Buy oat milk", completed=True)
    assert state.tasks.get(todo["id"]) == confirmed
    assert backend.requests[-1].body == {"completed": True}


@pytest.mark.asyncio
async def test_toggle_failure_rolls_back_and_raises(state, backend) -> None:
    todo = backend.add_todo(ALICE, "Buy milk", completed=True)
    await _login(state)

    backend.fail("PUT", f"/todos/{todo['id']}", status=500)
    with pytest.raises(ApiError):
        await state.tasks.toggle_completed(todo["id"])

    assert state.tasks.get(todo["id"]).completed is True


@pytest.mark.asyncio
async def test_toggle_unknown_id_sends_nothing(state, backend) -> None:
    await _login(state)
    seen = len(backend.requests)

    with pytest.raises(TaskNotFoundError) as exc_info:
        await state.tasks.toggle_completed(999)

    assert exc_info.value.task_id == 999
    assert len(backend.requests) == seen


@pytest.mark.asyncio
async def test_toggle_requires_session(state, backend) -> None:
    with pytest.raises(SessionRequiredError):
        await state.tasks.toggle_completed(1)
    assert backend.requests == []


@pytest.mark.asyncio
async def test_toggles_on_same_task_run_one_after_another(state, backend) -> None:
    todo = backend.add_todo(ALICE, "Buy milk")
    await _login(state)
    path = f"/todos/{todo['id']}"

    release = backend.hold("PUT", path)
    backend.fail("PUT", path, status=500)

    first = asyncio.create_task(state.tasks.toggle_completed(todo["id"]))
    await backend.held.wait()
    second = asyncio.create_task(state.tasks.toggle_completed(todo["id"]))
    await asyncio.sleep(0)

    # The second toggle waits for the first; only one request is in flight.
    assert backend.paths("PUT") == [path]

    release.set()
    with pytest.raises(ApiError):
        await first
    confirmed = await second

    # First flip rolled back, then the second flip applied from the restored value.
    assert confirmed.completed is True
    assert state.tasks.get(todo["id"]).completed is True
    assert [r.body for r in backend.requests if r.method == "PUT"] == [
        {"completed": True},
        {"completed": True},
    ]


@pytest.mark.asyncio
async def test_toggle_confirmation_survives_refresh_while_in_flight(state, backend) -> None:
    todo = backend.add_todo(ALICE, "Buy milk")
    await _login(state)

    release = backend.hold("PUT", f"/todos/{todo['id']}")
    pending = asyncio.create_task(state.tasks.toggle_completed(todo["id"]))
    await backend.held.wait()

    # The server has not applied the toggle yet, so the refresh shows it open.
    await state.tasks.list_tasks()
    assert state.tasks.get(todo["id"]).completed is False

    release.set()
    confirmed = await pending

    assert todo["completed"] is True
    assert confirmed.completed is True
    assert state.tasks.get(todo["id"]).completed is True


@pytest.mark.asyncio
async def test_toggle_rollback_lands_in_collection_after_concurrent_delete(state, backend) -> None:
    kept = backend.add_todo(ALICE, "Buy milk")
    other = backend.add_todo(ALICE, "Call mom")
    await _login(state)

    release = backend.hold("PUT", f"/todos/{kept['id']}")
    backend.fail("PUT", f"/todos/{kept['id']}", status=500)
    pending = asyncio.create_task(state.tasks.toggle_completed(kept["id"]))
    await backend.held.wait()

    await state.tasks.delete_task(other["id"])
    release.set()
    with pytest.raises(ApiError):
        await pending

    assert state.tasks.tasks == (Task(id=kept["id"], title="Buy milk", completed=False),)


@pytest.mark.asyncio
async def test_refresh_for_dropped_session_is_ignored(state, backend, storage) -> None:
    backend.add_todo(ALICE, "Buy milk")
    storage.data["authToken"] = backend.issue_token(ALICE)

    release_me = backend.hold("GET", "/users/me")
    release_todos = backend.hold("GET", "/todos/")
    backend.fail("GET", "/users/me", status=500)

    restore = asyncio.create_task(state.session.restore_session())
    while len(backend.requests) < 2:
        await asyncio.sleep(0)

    release_me.set()
    await restore
    assert state.session.token is None

    release_todos.set()
    await state.session.wait_for_listeners()

    assert state.tasks.tasks == ()


@pytest.mark.asyncio
async def test_locks_are_not_kept_for_unknown_or_gone_tasks(state, backend) -> None:
    todo = backend.add_todo(ALICE, "Buy milk")
    await _login(state)

    with pytest.raises(TaskNotFoundError):
        await state.tasks.toggle_completed(999)
    assert 999 not in state.tasks._locks

    await state.tasks.toggle_completed(todo["id"])
    assert todo["id"] in state.tasks._locks

    backend.todos.clear()
    await state.tasks.list_tasks()
    assert state.tasks._locks == {}

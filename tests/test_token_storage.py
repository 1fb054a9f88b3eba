# tests/test_token_storage.py

from __future__ import annotations

from pathlib import Path

import pytest

from todo_client.session.token_storage import FileTokenStorage


@pytest.mark.asyncio
async def test_set_get_remove_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "auth.json"
    store = FileTokenStorage(path)

    assert await store.get("authToken") is None

    await store.set("authToken", "abc123")
    assert path.exists()
    assert await FileTokenStorage(path).get("authToken") == "abc123"

    await store.remove("authToken")
    assert await store.get("authToken") is None
    assert not path.exists()


@pytest.mark.asyncio
async def test_remove_keeps_other_keys(tmp_path: Path) -> None:
    store = FileTokenStorage(tmp_path / "auth.json")
    await store.set("authToken", "abc123")
    await store.set("other", "x")

    await store.remove("authToken")
    await store.remove("authToken")

    assert await store.get("authToken") is None
    assert await store.get("other") == "x"


@pytest.mark.asyncio
async def test_corrupt_file_reads_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "auth.json"
    path.write_text("{not json", "utf-8")
    store = FileTokenStorage(path)

    assert await store.get("authToken") is None

    await store.set("authToken", "fresh")
    assert await store.get("authToken") == "fresh"


@pytest.mark.asyncio
async def test_empty_value_reads_as_absent(tmp_path: Path) -> None:
    path = tmp_path / "auth.json"
    path.write_text('{"authToken": ""}', "utf-8")

    assert await FileTokenStorage(path).get("authToken") is None

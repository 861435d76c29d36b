"""ProjectStore against an in-memory SQLite database."""
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError

from sitesmith.db.models import utcnow
from sitesmith.db.store import APPEND_RETRIES, ProjectStore


@pytest.fixture
def session(store):
    project = store.create_project("Generated App", description="a todo list app")
    return store.create_chat_session(project.id, analysis_result={"features": ["x"], "pages": ["Home"]})


def test_session_context_roundtrip(store, session):
    structure = {"public": {"type": "directory", "children": {"index.html": {"type": "file", "prompt": "p"}}}}
    store.save_session_context(session.id, file_structure=structure)

    reloaded = store.get_chat_session(session.id)
    assert reloaded.analysis_result == {"features": ["x"], "pages": ["Home"]}
    assert reloaded.file_structure == structure
    assert store.get_project(session.project_id).file_structure == structure


def test_messages_keep_append_order(store, session):
    store.append_messages(session.id, [{"role": "user", "content": "first"}])
    store.append_messages(session.id, [
        {"role": "assistant", "content": "second", "workflow": {"step": 1}},
        {"role": "user", "content": "third"},
    ])

    messages = store.get_messages(session.id)
    assert [m.content for m in messages] == ["first", "second", "third"]
    assert [m.seq for m in messages] == [1, 2, 3]

    as_dict = store.session_to_dict(session)
    assert as_dict["messages"][1]["workflow"] == {"step": 1}
    assert "workflow" not in as_dict["messages"][0]


def test_append_retries_on_sequence_conflict(store, session):
    real_commit = store.db.commit
    calls = {"n": 0}

    def flaky_commit():
        calls["n"] += 1
        if calls["n"] == 1:
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
        return real_commit()

    with patch.object(store.db, "commit", side_effect=flaky_commit):
        store.append_messages(session.id, [{"role": "user", "content": "hello"}])

    assert calls["n"] == 2
    assert [m.content for m in store.get_messages(session.id)] == ["hello"]


def test_append_gives_up_after_retries(store, session):
    error = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
    with patch.object(store.db, "commit", side_effect=error) as commit:
        with pytest.raises(RuntimeError):
            store.append_messages(session.id, [{"role": "user", "content": "hello"}])
    assert commit.call_count == APPEND_RETRIES


def test_upsert_generated_file_overwrites_in_place(store, session):
    first = store.upsert_generated_file(session.project_id, "index.html", "/public/index.html", "generating")
    store.upsert_generated_file(session.project_id, "index.html", "/public/index.html", "generated", content="<p>v1</p>")
    store.upsert_generated_file(session.project_id, "index.html", "/public/index.html", "error")

    rows = store.get_project_files(session.project_id)
    assert len(rows) == 1
    assert rows[0].id == first.id
    assert rows[0].status == "error"
    assert rows[0].content == "<p>v1</p>"


def test_settings_upsert_keeps_keys_when_not_given(store):
    store.upsert_settings("default", "openai", "gpt-4o", api_keys={"openai": "sk-1"})
    row = store.upsert_settings("default", "claude", "claude-3-haiku-20240307")

    assert row.ai_provider == "claude"
    assert row.api_keys == {"openai": "sk-1"}
    assert store.get_settings("someone-else") is None


def test_missing_session_is_none(store):
    assert store.get_chat_session("does-not-exist") is None
    assert isinstance(store, ProjectStore)


def test_timestamps_are_naive_utc(store, session):
    stamp = utcnow()
    assert stamp.tzinfo is None
    assert abs(stamp - datetime.now(timezone.utc).replace(tzinfo=None)) < timedelta(seconds=5)

    message = store.append_messages(session.id, [{"role": "user", "content": "hi"}])[0]
    assert message.timestamp.tzinfo is None
    assert abs(message.timestamp - stamp) < timedelta(seconds=5)

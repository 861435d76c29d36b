"""Shared fixtures: in-memory database, scripted model, API client."""
import json
import os

os.environ["DATABASE_URL"] = "sqlite://"
for var in ("GOOGLE_API_KEY", "GEMINI_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY"):
    os.environ.pop(var, None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sitesmith.main import app
from sitesmith.core.config import settings
from sitesmith.db.session import Base, get_db
from sitesmith.db.store import ProjectStore
from sitesmith.api.deps import get_adapter_cache, get_model_router, get_public_dir
from sitesmith.providers.router import AdapterCache
from sitesmith.workspace.public_dir import PublicDirectory


TODO_ANALYSIS = {
    "features": ["task creation", "task completion toggle", "task deletion", "filter by status"],
    "pages": ["Home", "Statistics"],
    "technical_requirements": {
        "responsive": True,
        "authentication": False,
        "data_persistence": "localStorage",
        "ui_framework": "vanilla",
    },
}

TODO_STRUCTURE = {
    "public": {
        "type": "directory",
        "children": {
            "index.html": {
                "type": "file",
                "prompt": "Create a task list page with at least 10 distinct UI elements: [1] header; [2] task input form",
            },
            "stats.html": {
                "type": "file",
                "prompt": "Create a statistics page with at least 10 distinct UI elements: [1] completion chart",
            },
        },
    }
}


def page_html(title: str, body: str = "") -> str:
    return (
        "<!DOCTYPE html>\n<html lang=\"en\">\n<head>\n<meta charset=\"utf-8\">\n"
        f"<title>{title}</title>\n<style>body {{ font-family: sans-serif; }}</style>\n</head>\n"
        f"<body>\n<h1>{title}</h1>{body}\n<script>document.title = {json.dumps(title)};</script>\n</body>\n</html>"
    )


class ScriptedLLM:
    """
    Stand-in for the model router.

    ``handler`` maps a prompt to a response string, or raises to simulate a
    provider failure. Every prompt is recorded in ``prompts``.
    """

    def __init__(self, handler):
        self.handler = handler
        self.prompts = []

    def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.handler(prompt)


def site_handler(prompt: str) -> str:
    """Answers each stage's prompt the way a well-behaved model would."""
    if "web application analyst" in prompt:
        return "Sure! Here is the analysis:\n```json\n" + json.dumps(TODO_ANALYSIS) + "\n```"
    if "project architect" in prompt:
        return "```json\n" + json.dumps(TODO_STRUCTURE, indent=2) + "\n```"
    if "Expand this page directive" in prompt:
        return "LAYOUT & NAVIGATION:\n- Header: app title\n\nINTERACTIVE COMPONENTS:\n- Task form: add tasks"
    if "Modify the existing HTML" in prompt:
        title = "Foo" if "change the title to Foo" in prompt else "Todo"
        return "```html\n" + page_html(title, "<p>modified</p>") + "\n```"
    if "Generate the file described below" in prompt:
        file_name = prompt.split("File: ", 1)[1].split("\n", 1)[0]
        return "```html\n" + page_html(file_name) + "\n```"
    raise AssertionError(f"Unexpected prompt: {prompt[:80]}")


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def store(db_session):
    return ProjectStore(db_session)


@pytest.fixture
def public_dir(tmp_path):
    sink = PublicDirectory(tmp_path / "public", url_prefix="/public")
    sink.ensure()
    return sink


@pytest.fixture
def fake_llm():
    return ScriptedLLM(site_handler)


@pytest.fixture
def client(db_session, public_dir, fake_llm, monkeypatch):
    """API client whose stages talk to ``fake_llm``."""
    monkeypatch.setattr(settings, "inter_file_delay_seconds", 0)
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_public_dir] = lambda: public_dir
    app.dependency_overrides[get_model_router] = lambda: fake_llm
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def settings_client(db_session, public_dir):
    """API client with the real model router and a fresh adapter cache."""
    cache = AdapterCache()
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_public_dir] = lambda: public_dir
    app.dependency_overrides[get_adapter_cache] = lambda: cache
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

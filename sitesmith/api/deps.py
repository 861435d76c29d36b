"""Per-request wiring of the workflow engine."""
from pathlib import Path
from fastapi import Depends
from sqlalchemy.orm import Session
from sitesmith.core.config import settings
from sitesmith.core.engine import WorkflowEngine
from sitesmith.db.session import get_db
from sitesmith.db.store import ProjectStore
from sitesmith.agents.registry import AgentRegistry
from sitesmith.providers.router import AdapterCache, ModelRouter
from sitesmith.workspace.public_dir import PublicDirectory

# Shared across requests; rebuilt only when the resolved provider config changes
adapter_cache = AdapterCache()


def get_adapter_cache() -> AdapterCache:
    return adapter_cache


def get_store(db: Session = Depends(get_db)) -> ProjectStore:
    return ProjectStore(db)


def get_public_dir() -> PublicDirectory:
    return PublicDirectory(Path(settings.public_dir), url_prefix=settings.public_url_prefix)


def build_router(store: ProjectStore, cache: AdapterCache) -> ModelRouter:
    return ModelRouter(
        cache=cache,
        settings_source=lambda: store.get_settings(settings.default_user_id),
        config=settings,
    )


def get_model_router(
    store: ProjectStore = Depends(get_store),
    cache: AdapterCache = Depends(get_adapter_cache),
) -> ModelRouter:
    return build_router(store, cache)


def build_engine(store: ProjectStore, sink: PublicDirectory, router) -> WorkflowEngine:
    return WorkflowEngine(
        store=store,
        sink=sink,
        registry=AgentRegistry.default(router),
        delay_seconds=settings.inter_file_delay_seconds,
    )


def get_engine(
    store: ProjectStore = Depends(get_store),
    sink: PublicDirectory = Depends(get_public_dir),
    router: ModelRouter = Depends(get_model_router),
) -> WorkflowEngine:
    return build_engine(store, sink, router)

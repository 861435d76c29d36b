from __future__ import annotations
import logging
from sqlalchemy.orm import Session
from sitesmith.tasks.celery_app import celery_app
from sitesmith.db.session import SessionLocal
from sitesmith.db.store import ProjectStore
from sitesmith.api.deps import adapter_cache, build_engine, build_router, get_public_dir

log = logging.getLogger(__name__)

@celery_app.task(name="run_content_pipeline")
def run_content_pipeline(session_id: str) -> dict:
    """Generate every planned file of a chat session and return the aggregate report."""
    db: Session = SessionLocal()
    try:
        store = ProjectStore(db)
        engine = build_engine(store, get_public_dir(), build_router(store, adapter_cache))
        log.info("Starting content pipeline for session %s", session_id, extra={"stage": "GENERATE_CONTENT"})
        report = engine.generate_files(session_id)
        return report.to_dict()
    except Exception:
        log.exception("Content pipeline failed for session %s", session_id, extra={"stage": "GENERATE_CONTENT"})
        raise
    finally:
        db.close()

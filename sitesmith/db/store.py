"""Persistent store used by the workflow engine."""
from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sitesmith.db.models import ChatMessage, ChatSession, GeneratedFile, Project, UserSettings, utcnow

log = logging.getLogger(__name__)

APPEND_RETRIES = 5


def message_to_dict(message: ChatMessage) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": message.id,
        "role": message.role,
        "content": message.content,
        "timestamp": message.timestamp.isoformat(),
    }
    if message.workflow is not None:
        data["workflow"] = message.workflow
    return data


def generated_file_to_dict(row: GeneratedFile) -> Dict[str, Any]:
    return {
        "id": row.id,
        "projectId": row.project_id,
        "fileName": row.file_name,
        "filePath": row.file_path,
        "content": row.content,
        "status": row.status,
        "createdAt": row.created_at.isoformat(),
    }


class ProjectStore:
    """
    Single-entity operations over projects, sessions, messages, files and settings.

    Each call commits on its own; there is no multi-entity transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    # Projects and sessions

    def create_project(self, name: str, description: Optional[str] = None) -> Project:
        project = Project(name=name, description=description, file_structure={})
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)
        return project

    def get_project(self, project_id: str) -> Optional[Project]:
        return self.db.get(Project, project_id)

    def create_chat_session(self, project_id: str, analysis_result: Optional[dict] = None) -> ChatSession:
        session = ChatSession(project_id=project_id, analysis_result=analysis_result)
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def get_chat_session(self, session_id: str) -> Optional[ChatSession]:
        return self.db.get(ChatSession, session_id)

    def save_session_context(
        self,
        session_id: str,
        analysis_result: Optional[dict] = None,
        file_structure: Optional[dict] = None,
    ) -> ChatSession:
        session = self.db.get(ChatSession, session_id)
        if analysis_result is not None:
            session.analysis_result = analysis_result
        if file_structure is not None:
            session.file_structure = file_structure
            project = self.db.get(Project, session.project_id)
            if project is not None:
                project.file_structure = file_structure
        self.db.commit()
        return session

    # Messages

    def get_messages(self, session_id: str) -> List[ChatMessage]:
        stmt = select(ChatMessage).where(ChatMessage.session_id == session_id).order_by(ChatMessage.seq)
        return list(self.db.scalars(stmt))

    def append_messages(self, session_id: str, messages: Iterable[Dict[str, Any]]) -> List[ChatMessage]:
        """
        Append messages after the session's current last message.

        Sequence numbers are unique per session; a concurrent writer that took
        the same numbers first makes the insert fail, and the append is retried
        with fresh numbers.
        """
        pending = list(messages)
        for attempt in range(APPEND_RETRIES):
            next_seq = self.db.scalar(
                select(func.coalesce(func.max(ChatMessage.seq), 0)).where(ChatMessage.session_id == session_id)
            ) + 1
            rows = [
                ChatMessage(
                    session_id=session_id,
                    seq=next_seq + offset,
                    role=m["role"],
                    content=m["content"],
                    timestamp=m.get("timestamp") or utcnow(),
                    workflow=m.get("workflow"),
                )
                for offset, m in enumerate(pending)
            ]
            self.db.add_all(rows)
            try:
                self.db.commit()
                return rows
            except IntegrityError:
                self.db.rollback()
                log.warning("Message sequence conflict on session %s, retrying (attempt %d/%d)",
                            session_id, attempt + 1, APPEND_RETRIES)
        raise RuntimeError(f"Could not append messages to session {session_id} after {APPEND_RETRIES} attempts")

    def session_to_dict(self, session: ChatSession) -> Dict[str, Any]:
        return {
            "id": session.id,
            "projectId": session.project_id,
            "status": session.status,
            "messages": [message_to_dict(m) for m in self.get_messages(session.id)],
            "createdAt": session.created_at.isoformat(),
        }

    # Generated files

    def get_generated_file(self, project_id: str, file_name: str) -> Optional[GeneratedFile]:
        stmt = select(GeneratedFile).where(
            GeneratedFile.project_id == project_id,
            GeneratedFile.file_name == file_name,
        )
        return self.db.scalars(stmt).first()

    def upsert_generated_file(
        self,
        project_id: str,
        file_name: str,
        file_path: str,
        status: str,
        content: Optional[str] = None,
    ) -> GeneratedFile:
        """Create the row for (project, file) or overwrite it in place. ``content=None`` keeps the old content."""
        row = self.get_generated_file(project_id, file_name)
        if row is None:
            row = GeneratedFile(project_id=project_id, file_name=file_name, file_path=file_path, content="")
            self.db.add(row)
        row.file_path = file_path
        row.status = status
        if content is not None:
            row.content = content
        row.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(row)
        return row

    def get_project_files(self, project_id: str) -> List[GeneratedFile]:
        stmt = select(GeneratedFile).where(GeneratedFile.project_id == project_id).order_by(GeneratedFile.created_at)
        return list(self.db.scalars(stmt))

    # Settings

    def get_settings(self, user_id: str = "default") -> Optional[UserSettings]:
        stmt = select(UserSettings).where(UserSettings.user_id == user_id)
        return self.db.scalars(stmt).first()

    def upsert_settings(
        self,
        user_id: str,
        ai_provider: str,
        ai_model: str,
        api_keys: Optional[Dict[str, str]] = None,
        preferences: Optional[Dict[str, Any]] = None,
    ) -> UserSettings:
        row = self.get_settings(user_id)
        if row is None:
            row = UserSettings(user_id=user_id)
            self.db.add(row)
        row.ai_provider = ai_provider
        row.ai_model = ai_model
        if api_keys is not None:
            row.api_keys = dict(api_keys)
        if preferences is not None:
            row.preferences = dict(preferences)
        row.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(row)
        return row

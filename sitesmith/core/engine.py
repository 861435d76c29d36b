from __future__ import annotations
import logging
import time
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from sitesmith.core.errors import MalformedResponseError, NotFoundError, StorageError, ValidationError
from sitesmith.core.pipeline import ContentPipeline, PipelineReport
from sitesmith.core.structure import normalize_file_structure, planned_files
from sitesmith.core.workflow import StepStatus, WorkflowStage, workflow_marker
from sitesmith.agents.registry import AgentRegistry
from sitesmith.db.models import ChatSession, utcnow
from sitesmith.db.store import ProjectStore
from sitesmith.schemas.chat import AnalysisResult
from sitesmith.workspace.public_dir import PublicDirectory

log = logging.getLogger(__name__)


def _message(role: str, content: str, workflow: Optional[dict] = None) -> Dict[str, Any]:
    return {"role": role, "content": content, "timestamp": utcnow(), "workflow": workflow}


class ProjectFileRecorder:
    """Persists per-file progress to the file sink and the generated_files table."""

    def __init__(self, store: ProjectStore, sink: PublicDirectory, project_id: str):
        self.store = store
        self.sink = sink
        self.project_id = project_id

    def started(self, file_name: str) -> None:
        self.store.upsert_generated_file(
            self.project_id, file_name, self.sink.file_path_for(file_name), status="generating",
        )

    def saved(self, file_name: str, content: str) -> str:
        file_path = self.sink.write_file(file_name, content)
        self.store.upsert_generated_file(
            self.project_id, file_name, file_path, status="generated", content=content,
        )
        return file_path

    def failed(self, file_name: str, error: Exception) -> None:
        self.store.db.rollback()
        try:
            self.store.upsert_generated_file(
                self.project_id, file_name, self.sink.file_path_for(file_name), status="error",
            )
        except Exception:
            self.store.db.rollback()
            log.exception("Could not mark %s as failed", file_name, extra={"project_id": self.project_id})


class WorkflowEngine:
    """
    Runs the generation stages for one chat session.

    Analysis, structure planning and modification are all-or-nothing: any
    failure propagates to the caller. Multi-file content generation isolates
    failures per file and reports an aggregate.
    """

    def __init__(
        self,
        store: ProjectStore,
        sink: PublicDirectory,
        registry: AgentRegistry,
        delay_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.store = store
        self.sink = sink
        self.registry = registry
        self.delay_seconds = delay_seconds
        self.sleep = sleep

    def _session(self, session_id: str) -> ChatSession:
        session = self.store.get_chat_session(session_id)
        if session is None:
            raise NotFoundError("Chat session not found")
        return session

    def _pipeline(self, project_id: str) -> ContentPipeline:
        return ContentPipeline(
            agent=self.registry.get(WorkflowStage.GENERATE_CONTENT),
            recorder=ProjectFileRecorder(self.store, self.sink, project_id),
            delay_seconds=self.delay_seconds,
            sleep=self.sleep,
            project_id=project_id,
        )

    @staticmethod
    def _analysis(data: Optional[dict]) -> AnalysisResult:
        if not data:
            raise ValidationError("Analysis result is required; run requirements analysis first")
        try:
            return AnalysisResult.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid analysis result: {e}") from e

    @staticmethod
    def _structure(data: Optional[dict]) -> Dict[str, Any]:
        if not data:
            raise ValidationError("File structure is required; generate the structure first")
        try:
            return normalize_file_structure(data)
        except MalformedResponseError as e:
            raise ValidationError(f"Invalid file structure: {e}") from e

    def start_chat(self, prompt: Optional[str]) -> Dict[str, Any]:
        analysis = self.registry.get(WorkflowStage.ANALYZE_REQUIREMENTS).run(prompt)
        analysis_data = analysis.model_dump()

        project = self.store.create_project(name="Generated App", description=prompt)
        session = self.store.create_chat_session(project.id, analysis_result=analysis_data)
        self.store.append_messages(session.id, [
            _message("user", prompt),
            _message(
                "assistant",
                f"Analysis complete. Extracted {len(analysis.features)} features and {len(analysis.pages)} pages.",
                workflow_marker(WorkflowStage.ANALYZE_REQUIREMENTS, StepStatus.COMPLETED, analysis_data),
            ),
        ])
        log.info("Started chat session %s", session.id,
                 extra={"project_id": project.id, "stage": WorkflowStage.ANALYZE_REQUIREMENTS.value})

        return {
            "projectId": project.id,
            "chatSessionId": session.id,
            "analysisResult": analysis_data,
            "workflow": workflow_marker(WorkflowStage.ANALYZE_REQUIREMENTS, StepStatus.COMPLETED),
        }

    def generate_structure(self, session_id: str, analysis_result: Optional[dict] = None) -> Dict[str, Any]:
        session = self._session(session_id)
        analysis = self._analysis(analysis_result or session.analysis_result)

        structure = self.registry.get(WorkflowStage.PLAN_STRUCTURE).run(analysis)

        self.store.save_session_context(session.id, analysis_result=analysis.model_dump(), file_structure=structure)
        self.store.append_messages(session.id, [
            _message(
                "assistant",
                "File structure generated successfully. Ready to generate individual HTML files.",
                workflow_marker(WorkflowStage.PLAN_STRUCTURE, StepStatus.COMPLETED, structure),
            ),
        ])
        return {
            "fileStructure": structure,
            "workflow": workflow_marker(WorkflowStage.PLAN_STRUCTURE, StepStatus.COMPLETED),
        }

    def generate_content(
        self,
        session_id: str,
        file_name: Optional[str],
        analysis_result: Optional[dict] = None,
        file_structure: Optional[dict] = None,
    ) -> Dict[str, Any]:
        """Generate one planned file. A failure here is reported to the caller."""
        if not file_name:
            raise ValidationError("fileName is required")
        session = self._session(session_id)
        analysis = self._analysis(analysis_result or session.analysis_result)
        structure = self._structure(file_structure) if file_structure else session.file_structure

        generated = self._pipeline(session.project_id).generate_file(file_name, structure, analysis)
        return {
            "fileName": generated.file_name,
            "content": generated.content,
            "filePath": generated.file_path,
            "workflow": workflow_marker(WorkflowStage.GENERATE_CONTENT, StepStatus.COMPLETED),
        }

    def planned_files(self, session_id: str) -> list:
        session = self._session(session_id)
        return planned_files(self._structure(session.file_structure))

    def generate_files(self, session_id: str) -> PipelineReport:
        """Generate every planned file of the session, in plan order."""
        session = self._session(session_id)
        analysis = self._analysis(session.analysis_result)
        structure = self._structure(session.file_structure)

        report = self._pipeline(session.project_id).run(planned_files(structure), structure, analysis)

        status = StepStatus.COMPLETED if report.ok else StepStatus.ERROR
        if report.ok:
            summary = f"Generated all {len(report.succeeded)} files."
        else:
            summary = (f"Generated {len(report.succeeded)} of {len(report.outcomes)} files. "
                       f"Failed: {', '.join(report.failed)}.")
        self.store.append_messages(session.id, [
            _message("assistant", summary, workflow_marker(WorkflowStage.GENERATE_CONTENT, status, report.to_dict())),
        ])
        return report

    def _read_current(self, file_name: str) -> str:
        try:
            return self.sink.read_file(file_name)
        except (NotFoundError, OSError) as e:
            raise StorageError(f"Could not read {file_name}: {e}") from e

    def modify_file(self, session_id: str, file_name: Optional[str], instruction: Optional[str]) -> Dict[str, Any]:
        session = self._session(session_id)
        if not file_name:
            raise ValidationError("fileName is required")
        if not instruction or not instruction.strip():
            raise ValidationError("modificationRequest is required")

        try:
            current = self._read_current(file_name)
            content = self.registry.get(WorkflowStage.MODIFY_FILE).run(file_name, current, instruction)
            file_path = self.sink.write_file(file_name, content)
            self.store.upsert_generated_file(session.project_id, file_name, file_path,
                                             status="generated", content=content)
        except Exception as e:
            self.store.db.rollback()
            log.error("Failed to modify %s: %s", file_name, e,
                      extra={"project_id": session.project_id, "stage": WorkflowStage.MODIFY_FILE.value})
            self.store.append_messages(session.id, [
                _message("user", instruction),
                _message("assistant", f"Error modifying {file_name}: {e}",
                         workflow_marker(WorkflowStage.MODIFY_FILE, StepStatus.ERROR)),
            ])
            raise

        self.store.append_messages(session.id, [
            _message("user", instruction),
            _message("assistant", f"Modified {file_name} successfully.",
                     workflow_marker(WorkflowStage.MODIFY_FILE, StepStatus.COMPLETED)),
        ])
        return {"fileName": file_name, "content": content, "success": True}

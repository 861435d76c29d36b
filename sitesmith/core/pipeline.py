"""Sequential per-file content generation with per-file failure isolation."""
from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Union

from sitesmith.agents.impl_content import ContentGeneratorAgent
from sitesmith.schemas.chat import AnalysisResult

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileGenerated:
    file_name: str
    content: str
    file_path: str
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class FileFailed:
    file_name: str
    error: str
    ok: bool = field(default=False, init=False)


FileOutcome = Union[FileGenerated, FileFailed]


@dataclass(frozen=True)
class PipelineReport:
    """Aggregate result of one pipeline run, in the order files were attempted."""
    outcomes: tuple = ()

    def record(self, outcome: FileOutcome) -> "PipelineReport":
        return PipelineReport(self.outcomes + (outcome,))

    @property
    def succeeded(self) -> List[str]:
        return [o.file_name for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[str]:
        return [o.file_name for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)

    def to_dict(self) -> Dict[str, Any]:
        files = []
        for o in self.outcomes:
            if o.ok:
                files.append({"fileName": o.file_name, "ok": True, "filePath": o.file_path})
            else:
                files.append({"fileName": o.file_name, "ok": False, "error": o.error})
        return {
            "total": len(self.outcomes),
            "succeeded": self.succeeded,
            "failed": self.failed,
            "files": files,
        }


class FileRecorder(Protocol):
    """Where a file's progress is persisted."""
    def started(self, file_name: str) -> None: ...
    def saved(self, file_name: str, content: str) -> str: ...
    def failed(self, file_name: str, error: Exception) -> None: ...


class ContentPipeline:
    def __init__(
        self,
        agent: ContentGeneratorAgent,
        recorder: FileRecorder,
        delay_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        project_id: str = "-",
    ):
        self.agent = agent
        self.recorder = recorder
        self.delay_seconds = delay_seconds
        self.sleep = sleep
        self.project_id = project_id

    def generate_file(self, file_name: str, structure: Optional[Dict[str, Any]], analysis: AnalysisResult) -> FileGenerated:
        """Generate and persist one file. Failures are recorded, then re-raised."""
        self.recorder.started(file_name)
        try:
            content = self.agent.run(file_name, structure, analysis)
            file_path = self.recorder.saved(file_name, content)
        except Exception as e:
            self.recorder.failed(file_name, e)
            raise
        return FileGenerated(file_name=file_name, content=content, file_path=file_path)

    def attempt(self, file_name: str, structure: Optional[Dict[str, Any]], analysis: AnalysisResult) -> FileOutcome:
        try:
            return self.generate_file(file_name, structure, analysis)
        except Exception as e:
            log.exception("Failed to generate %s", file_name,
                          extra={"project_id": self.project_id, "stage": self.agent.stage.value})
            return FileFailed(file_name=file_name, error=str(e))

    def run(self, file_names: Sequence[str], structure: Dict[str, Any], analysis: AnalysisResult) -> PipelineReport:
        """
        Attempt every file in order, one at a time, pausing between attempts.

        A failed file never stops the run; it is reported in the aggregate.
        """
        report = PipelineReport()
        for index, file_name in enumerate(file_names):
            if index and self.delay_seconds > 0:
                self.sleep(self.delay_seconds)
            log.info("Generating file %d/%d: %s", index + 1, len(file_names), file_name,
                     extra={"project_id": self.project_id, "stage": self.agent.stage.value})
            report = report.record(self.attempt(file_name, structure, analysis))

        log.info("Content generation finished: %d succeeded, %d failed",
                 len(report.succeeded), len(report.failed),
                 extra={"project_id": self.project_id, "stage": self.agent.stage.value})
        return report

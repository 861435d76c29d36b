import logging
from typing import Any, Dict
from sitesmith.agents.base import BaseAgent
from sitesmith.agents.prompts import structure_prompt
from sitesmith.core.extract import extract_json
from sitesmith.core.structure import normalize_file_structure, planned_files
from sitesmith.core.workflow import WorkflowStage
from sitesmith.schemas.chat import AnalysisResult

log = logging.getLogger(__name__)


class StructurePlannerAgent(BaseAgent):
    """Plans the flat file tree; each leaf carries a generation directive, not content."""
    stage = WorkflowStage.PLAN_STRUCTURE

    def run(self, analysis: AnalysisResult) -> Dict[str, Any]:
        raw = self._complete(structure_prompt(analysis.model_dump()))
        structure = normalize_file_structure(extract_json(raw))
        log.info("Planned %d files: %s", len(planned_files(structure)), ", ".join(planned_files(structure)),
                 extra={"stage": self.stage.value})
        return structure

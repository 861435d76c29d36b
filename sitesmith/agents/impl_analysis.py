import logging
from pydantic import ValidationError as PydanticValidationError
from sitesmith.agents.base import BaseAgent
from sitesmith.agents.prompts import analysis_prompt
from sitesmith.core.errors import MalformedResponseError, ValidationError
from sitesmith.core.extract import extract_json
from sitesmith.core.workflow import WorkflowStage
from sitesmith.schemas.chat import AnalysisResult

log = logging.getLogger(__name__)


class RequirementsAnalystAgent(BaseAgent):
    """Turns a free-text app request into an AnalysisResult. Any failure fails the stage."""
    stage = WorkflowStage.ANALYZE_REQUIREMENTS

    def run(self, prompt: str | None) -> AnalysisResult:
        if prompt is None or not prompt.strip():
            raise ValidationError("Prompt is required")

        raw = self._complete(analysis_prompt(prompt.strip()))
        data = extract_json(raw)
        try:
            result = AnalysisResult.model_validate(data)
        except PydanticValidationError as e:
            raise MalformedResponseError(f"Analysis response did not match the expected shape: {e}") from e

        log.info("Analysis extracted %d features and %d pages", len(result.features), len(result.pages),
                 extra={"stage": self.stage.value})
        return result

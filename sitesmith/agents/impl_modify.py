import logging
from sitesmith.agents.base import BaseAgent
from sitesmith.agents.prompts import modify_prompt
from sitesmith.core.errors import MalformedResponseError, ValidationError
from sitesmith.core.extract import clean_markup
from sitesmith.core.markup import external_references
from sitesmith.core.workflow import WorkflowStage

log = logging.getLogger(__name__)


class FileModifierAgent(BaseAgent):
    stage = WorkflowStage.MODIFY_FILE

    def run(self, file_name: str, current_content: str, instruction: str | None) -> str:
        if instruction is None or not instruction.strip():
            raise ValidationError("Modification request is required")

        content = clean_markup(self._complete(modify_prompt(file_name, current_content, instruction.strip())))
        if not content:
            raise MalformedResponseError(f"Model returned no content for {file_name}")
        refs = external_references(content)
        if refs:
            log.warning("Modified %s has %d external reference(s): %s", file_name, len(refs), "; ".join(refs),
                        extra={"stage": self.stage.value})
        return content

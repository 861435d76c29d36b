import logging
from typing import Protocol
from sitesmith.core.workflow import WorkflowStage

log = logging.getLogger(__name__)

class TextGenerator(Protocol):
    def generate_text(self, prompt: str) -> str: ...

class BaseAgent:
    """A generation stage. ``llm`` is normally the ModelRouter, so every call re-resolves the active provider."""
    stage: WorkflowStage

    def __init__(self, llm: TextGenerator):
        self.llm = llm

    def _complete(self, prompt: str, project_id: str = "-") -> str:
        log.debug("Calling model (%d prompt chars)", len(prompt),
                  extra={"project_id": project_id, "stage": self.stage.value})
        return self.llm.generate_text(prompt)

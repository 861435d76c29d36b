import logging
from typing import Any, Dict, Optional
from sitesmith.agents.base import BaseAgent
from sitesmith.agents.prompts import content_prompt, enhancement_prompt
from sitesmith.core.errors import MalformedResponseError, SitesmithError
from sitesmith.core.extract import clean_markup
from sitesmith.core.markup import external_references
from sitesmith.core.structure import DEFAULT_DIRECTIVE, file_directive
from sitesmith.core.workflow import WorkflowStage
from sitesmith.schemas.chat import AnalysisResult

log = logging.getLogger(__name__)


class ContentGeneratorAgent(BaseAgent):
    """Generates one planned file: enhance its directive, then generate the page."""
    stage = WorkflowStage.GENERATE_CONTENT

    def __init__(self, llm, enhance: bool = True):
        super().__init__(llm)
        self.enhance = enhance

    def enhance_directive(self, directive: str, file_name: str, analysis: AnalysisResult) -> str:
        """
        Expand a terse directive into a categorized feature checklist.

        Falls back to the original directive when the model call fails or
        returns nothing; the file is still generated.
        """
        try:
            enhanced = self._complete(enhancement_prompt(directive, file_name, analysis.model_dump())).strip()
        except SitesmithError as e:
            log.warning("Failed to enhance directive for %s, using original: %s", file_name, e,
                        extra={"stage": self.stage.value})
            return directive
        if not enhanced:
            log.warning("Empty enhancement for %s, using original directive", file_name,
                        extra={"stage": self.stage.value})
            return directive
        return enhanced

    def generate(self, file_name: str, directive: str, analysis: AnalysisResult) -> str:
        content = clean_markup(self._complete(content_prompt(file_name, directive, analysis.model_dump())))
        if not content:
            raise MalformedResponseError(f"Model returned no content for {file_name}")
        refs = external_references(content)
        if refs:
            log.warning("%s has %d external reference(s): %s", file_name, len(refs), "; ".join(refs),
                        extra={"stage": self.stage.value})
        return content

    def run(self, file_name: str, structure: Optional[Dict[str, Any]], analysis: AnalysisResult) -> str:
        directive = file_directive(structure, file_name) or DEFAULT_DIRECTIVE
        if self.enhance:
            directive = self.enhance_directive(directive, file_name, analysis)
        return self.generate(file_name, directive, analysis)

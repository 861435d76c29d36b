from dataclasses import dataclass
from typing import Dict
from sitesmith.core.workflow import WorkflowStage
from sitesmith.agents.base import BaseAgent, TextGenerator
from sitesmith.agents.impl_analysis import RequirementsAnalystAgent
from sitesmith.agents.impl_structure import StructurePlannerAgent
from sitesmith.agents.impl_content import ContentGeneratorAgent
from sitesmith.agents.impl_modify import FileModifierAgent

@dataclass
class AgentRegistry:
    mapping: Dict[WorkflowStage, BaseAgent]

    def get(self, stage: WorkflowStage) -> BaseAgent:
        return self.mapping[stage]

    @staticmethod
    def default(llm: TextGenerator) -> "AgentRegistry":
        return AgentRegistry(mapping={
            WorkflowStage.ANALYZE_REQUIREMENTS: RequirementsAnalystAgent(llm),
            WorkflowStage.PLAN_STRUCTURE: StructurePlannerAgent(llm),
            WorkflowStage.GENERATE_CONTENT: ContentGeneratorAgent(llm),
            WorkflowStage.MODIFY_FILE: FileModifierAgent(llm),
        })

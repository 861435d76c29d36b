from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

class WorkflowStage(str, Enum):
    ANALYZE_REQUIREMENTS = "ANALYZE_REQUIREMENTS"
    PLAN_STRUCTURE = "PLAN_STRUCTURE"
    GENERATE_CONTENT = "GENERATE_CONTENT"
    MODIFY_FILE = "MODIFY_FILE"

class StepStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ERROR = "error"

@dataclass(frozen=True)
class StepInfo:
    step: int
    name: str

STEPS = {
    WorkflowStage.ANALYZE_REQUIREMENTS: StepInfo(1, "Requirements Analysis"),
    WorkflowStage.PLAN_STRUCTURE: StepInfo(2, "File Structure Generation"),
    WorkflowStage.GENERATE_CONTENT: StepInfo(3, "Content Generation"),
    WorkflowStage.MODIFY_FILE: StepInfo(4, "File Modification"),
}

def workflow_marker(stage: WorkflowStage, status: StepStatus, data: Optional[Any] = None) -> Dict[str, Any]:
    """Build the ``workflow`` payload attached to chat messages and API responses."""
    info = STEPS[stage]
    marker: Dict[str, Any] = {
        "step": info.step,
        "stepName": info.name,
        "status": status.value,
    }
    if data is not None:
        marker["data"] = data
    return marker

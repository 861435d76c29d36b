from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Literal, Optional, Dict, Any, List


class TechnicalRequirements(BaseModel):
    responsive: bool = True
    authentication: bool = False
    data_persistence: Literal["localStorage", "database", "none"] = "none"
    ui_framework: Optional[str] = None

    @field_validator("data_persistence", mode="before")
    @classmethod
    def normalize_persistence(cls, value):
        if value is None:
            return "none"
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in ("localstorage", "local_storage", "local storage"):
                return "localStorage"
            return lowered
        return value


class AnalysisResult(BaseModel):
    features: List[str] = Field(..., min_length=1)
    pages: List[str] = Field(..., min_length=1)
    technical_requirements: TechnicalRequirements


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class StartChatRequest(_CamelModel):
    prompt: Optional[str] = Field(None, examples=["a todo list app"])


class StartChatResponse(_CamelModel):
    project_id: str = Field(..., alias="projectId")
    chat_session_id: str = Field(..., alias="chatSessionId")
    analysis_result: Dict[str, Any] = Field(..., alias="analysisResult")
    workflow: Dict[str, Any]


class GenerateStructureRequest(_CamelModel):
    analysis_result: Optional[Dict[str, Any]] = Field(None, alias="analysisResult")


class GenerateStructureResponse(_CamelModel):
    file_structure: Dict[str, Any] = Field(..., alias="fileStructure")
    workflow: Dict[str, Any]


class GenerateContentRequest(_CamelModel):
    file_name: Optional[str] = Field(None, alias="fileName")
    analysis_result: Optional[Dict[str, Any]] = Field(None, alias="analysisResult")
    file_structure: Optional[Dict[str, Any]] = Field(None, alias="fileStructure")


class GenerateContentResponse(_CamelModel):
    file_name: str = Field(..., alias="fileName")
    content: str
    file_path: str = Field(..., alias="filePath")
    workflow: Dict[str, Any]


class FileReport(_CamelModel):
    file_name: str = Field(..., alias="fileName")
    ok: bool
    file_path: Optional[str] = Field(None, alias="filePath")
    error: Optional[str] = None


class PipelineReportResponse(_CamelModel):
    total: int
    succeeded: List[str]
    failed: List[str]
    files: List[FileReport]
    workflow: Dict[str, Any]


class QueuedPipelineResponse(_CamelModel):
    task_id: str = Field(..., alias="taskId")
    files: List[str]


class ModifyRequest(_CamelModel):
    file_name: Optional[str] = Field(None, alias="fileName")
    modification_request: Optional[str] = Field(None, alias="modificationRequest")


class ModifyResponse(_CamelModel):
    file_name: str = Field(..., alias="fileName")
    content: str
    success: bool


class ChatMessageOut(_CamelModel):
    id: str
    role: Literal["user", "assistant"]
    content: str
    timestamp: str
    workflow: Optional[Dict[str, Any]] = None


class ChatSessionOut(_CamelModel):
    id: str
    project_id: str = Field(..., alias="projectId")
    status: str
    messages: List[ChatMessageOut]
    created_at: str = Field(..., alias="createdAt")


class GeneratedFileOut(_CamelModel):
    id: str
    project_id: str = Field(..., alias="projectId")
    file_name: str = Field(..., alias="fileName")
    file_path: str = Field(..., alias="filePath")
    content: str
    status: Literal["generating", "generated", "error"]
    created_at: str = Field(..., alias="createdAt")
    url: str


class ProjectFilesResponse(_CamelModel):
    files: List[GeneratedFileOut]
    file_list: List[str] = Field(..., alias="fileList")


class FileContentResponse(_CamelModel):
    file_name: str = Field(..., alias="fileName")
    content: str

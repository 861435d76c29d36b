from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sitesmith.api.deps import get_engine, get_store
from sitesmith.core.engine import WorkflowEngine
from sitesmith.core.errors import NotFoundError
from sitesmith.core.workflow import StepStatus, WorkflowStage, workflow_marker
from sitesmith.db.store import ProjectStore
from sitesmith.tasks.generation import run_content_pipeline
from sitesmith.schemas.chat import (
    ChatSessionOut,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerateStructureRequest,
    GenerateStructureResponse,
    ModifyRequest,
    ModifyResponse,
    PipelineReportResponse,
    QueuedPipelineResponse,
    StartChatRequest,
    StartChatResponse,
)

router = APIRouter(prefix="/chat")

@router.post("/start", response_model=StartChatResponse)
def start_chat(req: StartChatRequest, engine: WorkflowEngine = Depends(get_engine)):
    return engine.start_chat(req.prompt)

@router.post("/{session_id}/generate-structure", response_model=GenerateStructureResponse)
def generate_structure(
    session_id: str,
    req: GenerateStructureRequest,
    engine: WorkflowEngine = Depends(get_engine),
):
    return engine.generate_structure(session_id, req.analysis_result)

@router.post("/{session_id}/generate-content", response_model=GenerateContentResponse)
def generate_content(
    session_id: str,
    req: GenerateContentRequest,
    engine: WorkflowEngine = Depends(get_engine),
):
    return engine.generate_content(session_id, req.file_name, req.analysis_result, req.file_structure)

@router.post(
    "/{session_id}/generate-files",
    response_model=PipelineReportResponse,
    responses={202: {"model": QueuedPipelineResponse}},
)
def generate_files(session_id: str, background: bool = False, engine: WorkflowEngine = Depends(get_engine)):
    if background:
        files = engine.planned_files(session_id)
        task = run_content_pipeline.delay(session_id)
        body = QueuedPipelineResponse(task_id=task.id, files=files)
        return JSONResponse(status_code=202, content=body.model_dump(by_alias=True))

    report = engine.generate_files(session_id)
    status = StepStatus.COMPLETED if report.ok else StepStatus.ERROR
    return {**report.to_dict(), "workflow": workflow_marker(WorkflowStage.GENERATE_CONTENT, status)}

@router.post("/{session_id}/modify", response_model=ModifyResponse)
def modify_file(session_id: str, req: ModifyRequest, engine: WorkflowEngine = Depends(get_engine)):
    return engine.modify_file(session_id, req.file_name, req.modification_request)

@router.get("/{session_id}", response_model=ChatSessionOut)
def get_chat_session(session_id: str, store: ProjectStore = Depends(get_store)):
    session = store.get_chat_session(session_id)
    if session is None:
        raise NotFoundError("Chat session not found")
    return store.session_to_dict(session)

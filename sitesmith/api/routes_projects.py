from fastapi import APIRouter, Depends
from sitesmith.api.deps import get_public_dir, get_store
from sitesmith.db.store import ProjectStore, generated_file_to_dict
from sitesmith.schemas.chat import FileContentResponse, ProjectFilesResponse
from sitesmith.workspace.public_dir import PublicDirectory

router = APIRouter()

@router.get("/projects/{project_id}/files", response_model=ProjectFilesResponse)
def get_project_files(
    project_id: str,
    store: ProjectStore = Depends(get_store),
    sink: PublicDirectory = Depends(get_public_dir),
):
    files = [
        {**generated_file_to_dict(row), "url": sink.url_for(row.file_name)}
        for row in store.get_project_files(project_id)
    ]
    return {"files": files, "fileList": sink.list_files()}

@router.get("/files/{file_name}", response_model=FileContentResponse)
def get_file(file_name: str, sink: PublicDirectory = Depends(get_public_dir)):
    return {"fileName": file_name, "content": sink.read_file(file_name)}

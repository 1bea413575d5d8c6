from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional, List
from spartec.schemas import ProjectCreate, ProjectUpdate, Project as ProjectSchema, ProjectStatus
from spartec.services.dependency import get_storage, get_current_user
from spartec.storage.base import Storage, StorageError
import logging

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/projects", response_model=List[ProjectSchema])
async def get_projects(
    status_filter: Optional[ProjectStatus] = Query(None, alias="status"),
    customer_id: Optional[int] = Query(None, alias="customerId"),
    search: Optional[str] = None,
    storage: Storage = Depends(get_storage)
):
    try:
        projects = storage.projects.get_all(status=status_filter, search=search)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error fetching projects")

    if customer_id:
        projects = [p for p in projects if p["customer_id"] == customer_id]

    return projects


@router.get("/projects/{project_id}", response_model=ProjectSchema)
async def get_project(project_id: int, storage: Storage = Depends(get_storage)):
    try:
        project = storage.projects.get_by_id(project_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error fetching project")

    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    return project


@router.post("/projects", response_model=ProjectSchema, status_code=status.HTTP_201_CREATED)
async def create_project(project_data: ProjectCreate, storage: Storage = Depends(get_storage)):
    try:
        return storage.projects.create(project_data.model_dump())
    except StorageError:
        raise HTTPException(status_code=500, detail="Error creating project")


@router.put("/projects/{project_id}", response_model=ProjectSchema)
async def update_project(
    project_id: int,
    project_data: ProjectUpdate,
    storage: Storage = Depends(get_storage)
):
    try:
        project = storage.projects.update(project_id, project_data.model_dump(exclude_unset=True))
    except StorageError:
        raise HTTPException(status_code=500, detail="Error updating project")

    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    logger.info(f"Updated project {project['id']} '{project['title']}'")
    return project


@router.delete("/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: int, storage: Storage = Depends(get_storage)):
    try:
        deleted = storage.projects.delete(project_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error deleting project")

    if not deleted:
        raise HTTPException(status_code=404, detail="Project not found")

    logger.info(f"Deleted project {project_id}")
    return None

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from ..deps import get_repositories
from ..models.schema import ProjectCreate, ProjectUpdate
from ..repositories.factory import RepositoryFactory

router = APIRouter(prefix="/projects", tags=["projects"])
logger = logging.getLogger(__name__)


@router.get("")
async def list_projects(repos: RepositoryFactory = Depends(get_repositories)):
    return await repos.projects.list_projects()


@router.get("/{project_id}")
async def get_project(project_id: int, repos: RepositoryFactory = Depends(get_repositories)):
    project = await repos.projects.get_project(project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("", status_code=201)
async def create_project(req: ProjectCreate, repos: RepositoryFactory = Depends(get_repositories)):
    project = await repos.projects.create_project(req)
    logger.info("projects.create id=%s name=%s", project.id, project.name)
    return project


@router.put("/{project_id}")
async def update_project(
    project_id: int,
    req: ProjectUpdate,
    repos: RepositoryFactory = Depends(get_repositories),
):
    project = await repos.projects.update_project(project_id, req.model_dump(exclude_unset=True))
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.delete("/{project_id}", status_code=204)
async def delete_project(project_id: int, repos: RepositoryFactory = Depends(get_repositories)):
    if not await repos.projects.delete_project(project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    logger.info("projects.delete id=%s", project_id)
    return Response(status_code=204)


@router.get("/{project_id}/files")
async def list_project_files(project_id: int, repos: RepositoryFactory = Depends(get_repositories)):
    if await repos.projects.get_project(project_id) is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return await repos.files.list_files(project_id)

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from ..deps import get_repositories, http_error
from ..errors import WorkspaceError
from ..models.schema import FileCreate, FileUpdate
from ..repositories.factory import RepositoryFactory
from ..services.files import create_entry, delete_entry, update_entry

router = APIRouter(prefix="/files", tags=["files"])


@router.post("", status_code=201)
async def create_file(req: FileCreate, repos: RepositoryFactory = Depends(get_repositories)):
    try:
        return await create_entry(repos.files, repos.projects, req)
    except WorkspaceError as err:
        raise http_error(err)


@router.get("/{file_id}")
async def get_file(file_id: int, repos: RepositoryFactory = Depends(get_repositories)):
    entry = await repos.files.get_file(file_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="File not found")
    return entry


@router.put("/{file_id}")
async def update_file(file_id: int, req: FileUpdate, repos: RepositoryFactory = Depends(get_repositories)):
    try:
        return await update_entry(repos.files, file_id, req)
    except WorkspaceError as err:
        raise http_error(err)


@router.delete("/{file_id}", status_code=204)
async def delete_file(file_id: int, repos: RepositoryFactory = Depends(get_repositories)):
    try:
        await delete_entry(repos.files, file_id)
    except WorkspaceError as err:
        raise http_error(err)
    return Response(status_code=204)

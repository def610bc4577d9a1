# app/api/projects.py
from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.dependencies import get_store
from models.project_models import Project, ProjectCreate, ProjectUpdate
from services.storage import ProjectStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


def _not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content={"message": "Project not found"})


def _invalid(error: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid project data", "error": str(error)},
    )


@router.post("", response_model=Project)
def create_project(body: Dict[str, Any] = Body(...), store: ProjectStore = Depends(get_store)):
    try:
        data = ProjectCreate.model_validate(body)
    except ValidationError as e:
        logger.warning("[api.projects] invalid create payload error=%s", e)
        return _invalid(e)
    return store.create_project(data)


@router.get("", response_model=List[Project])
def list_projects(store: ProjectStore = Depends(get_store)):
    """updatedAt の新しい順。"""
    return store.list_projects()


@router.get("/{project_id}", response_model=Project)
def get_project(project_id: str, store: ProjectStore = Depends(get_store)):
    project = store.get_project(project_id)
    if project is None:
        return _not_found()
    return project


@router.patch("/{project_id}", response_model=Project)
def update_project(
    project_id: str,
    body: Dict[str, Any] = Body(...),
    store: ProjectStore = Depends(get_store),
):
    """
    送られたフィールドだけを更新する。
    存在しない id の場合は 404 で、新規作成はしない。
    """
    try:
        updates = ProjectUpdate.model_validate(body)
    except ValidationError as e:
        logger.warning("[api.projects] invalid update payload id=%s error=%s", project_id, e)
        return _invalid(e)

    changes = updates.model_dump(exclude_unset=True)
    # 必須フィールドを null で消すことはできない
    for key in ("primary_keyword", "status"):
        if key in changes and changes[key] is None:
            changes.pop(key)

    project = store.update_project(project_id, changes)
    if project is None:
        return _not_found()
    return project


@router.delete("/{project_id}")
def delete_project(project_id: str, store: ProjectStore = Depends(get_store)):
    if not store.delete_project(project_id):
        return _not_found()
    return {"message": "Project deleted successfully"}

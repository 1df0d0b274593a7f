# taskboard/routers/tasks.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from taskboard.db import get_db
from taskboard.errors import envelope
from taskboard.models import Role, User
from taskboard.schemas import task_to_dict
from taskboard.security import get_current_user, require_role
from taskboard.services import TaskService

router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(db)


# ================== Admin ==================
# Va antes de /{task_id} para que "admin" no se lea como id

@router.get("/admin/all")
def list_all_tasks(
    status: Optional[str] = None,
    priority: Optional[str] = None,
    owner: Optional[str] = None,
    service: TaskService = Depends(get_task_service),
    current_user: User = Depends(require_role(Role.ADMIN)),
):
    tasks = service.list_all(status=status, priority=priority, owner=owner)
    return envelope(
        True,
        count=len(tasks),
        data={"tasks": [task_to_dict(t, with_owner=True) for t in tasks]},
    )


# ================== Tareas propias ==================

@router.get("")
def list_tasks(
    status: Optional[str] = None,
    priority: Optional[str] = None,
    sort: Optional[str] = None,
    service: TaskService = Depends(get_task_service),
    current_user: User = Depends(get_current_user),
):
    tasks = service.list(current_user, status=status, priority=priority, sort=sort)
    return envelope(
        True,
        count=len(tasks),
        data={"tasks": [task_to_dict(t) for t in tasks]},
    )


@router.get("/{task_id}")
def get_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
    current_user: User = Depends(get_current_user),
):
    task = service.get(current_user, task_id)
    return envelope(True, data={"task": task_to_dict(task)})


@router.post("", status_code=201)
def create_task(
    payload: Dict[str, Any] = Body(...),
    service: TaskService = Depends(get_task_service),
    current_user: User = Depends(get_current_user),
):
    task = service.create(current_user, payload)
    return envelope(True, "Task created successfully", data={"task": task_to_dict(task)})


@router.put("/{task_id}")
def update_task(
    task_id: str,
    payload: Dict[str, Any] = Body(...),
    service: TaskService = Depends(get_task_service),
    current_user: User = Depends(get_current_user),
):
    task = service.update(current_user, task_id, payload)
    return envelope(True, "Task updated successfully", data={"task": task_to_dict(task)})


@router.delete("/{task_id}")
def delete_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
    current_user: User = Depends(get_current_user),
):
    service.delete(current_user, task_id)
    return envelope(True, "Task deleted successfully")

# taskboard/schemas.py
"""
Serialización de modelos a JSON (camelCase, fechas ISO en UTC).

Los cuerpos de petición se validan en taskboard.validation.
"""
from datetime import datetime
from typing import Optional

from taskboard.models import Task, User


def iso(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.isoformat() + "Z"


def user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "role": user.role.value,
        "isActive": user.is_active,
        "createdAt": iso(user.created_at),
    }


def task_to_dict(task: Task, with_owner: bool = False) -> dict:
    data = {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "status": task.status.value,
        "priority": task.priority.value,
        "dueDate": iso(task.due_date),
        "owner": task.owner_id,
        "createdAt": iso(task.created_at),
        "updatedAt": iso(task.updated_at),
    }
    if with_owner:
        data["owner"] = {
            "id": task.owner.id,
            "username": task.owner.username,
            "email": task.owner.email,
        }
    return data

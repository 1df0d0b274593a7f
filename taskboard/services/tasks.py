# taskboard/services/tasks.py
"""
Operaciones sobre tareas.

Todas las consultas de usuario van filtradas por owner_id == usuario.id.
Una tarea ajena y una tarea inexistente dan exactamente el mismo NotFound,
para no revelar qué ids existen.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from taskboard.errors import FieldError, NotFound, ValidationError
from taskboard.models import Task, TaskPriority, TaskStatus, User
from taskboard.validation import PRIORITY_VALUES, STATUS_VALUES, validate_task_fields

log = logging.getLogger("taskboard.tasks")

DEFAULT_SORT = "-createdAt"

SORT_COLUMNS = {
    "createdAt": Task.created_at,
    "updatedAt": Task.updated_at,
    "dueDate": Task.due_date,
    "title": Task.title,
    "status": Task.status,
    "priority": Task.priority,
}


def _parse_id(raw) -> Optional[int]:
    if isinstance(raw, int):
        return raw
    s = str(raw).strip()
    # más de 18 dígitos no cabe en un INTEGER de SQLite
    if not (s.isascii() and s.isdigit()) or len(s) > 18:
        return None
    return int(s)


class TaskService:
    def __init__(self, db: Session):
        self.db = db

    # ---------- consultas ----------

    def _filters(self, status=None, priority=None) -> tuple:
        errors: List[FieldError] = []
        clauses = []
        if status:
            if status not in STATUS_VALUES:
                errors.append(FieldError("status", f"Status must be one of: {', '.join(STATUS_VALUES)}"))
            else:
                clauses.append(Task.status == TaskStatus(status))
        if priority:
            if priority not in PRIORITY_VALUES:
                errors.append(FieldError("priority", f"Priority must be one of: {', '.join(PRIORITY_VALUES)}"))
            else:
                clauses.append(Task.priority == TaskPriority(priority))
        return clauses, errors

    def _order_by(self, sort: Optional[str], errors: List[FieldError]):
        sort = sort or DEFAULT_SORT
        key = sort[1:] if sort.startswith("-") else sort
        column = SORT_COLUMNS.get(key)
        if column is None:
            errors.append(FieldError("sort", f"Sort must be one of: {', '.join(SORT_COLUMNS)} (prefix '-' for descending)"))
            return None
        return column.desc() if sort.startswith("-") else column.asc()

    def list(self, user: User, status=None, priority=None, sort=None) -> List[Task]:
        clauses, errors = self._filters(status, priority)
        order = self._order_by(sort, errors)
        if errors:
            raise ValidationError(errors=errors)

        q = (
            self.db.query(Task)
            .filter(Task.owner_id == user.id, *clauses)
            .order_by(order, Task.id.desc())
        )
        return q.all()

    def list_all(self, status=None, priority=None, owner=None) -> List[Task]:
        """Listado global (solo admin; el role guard va en la ruta)."""
        clauses, errors = self._filters(status, priority)
        if owner:
            owner_id = _parse_id(owner)
            if owner_id is None:
                errors.append(FieldError("owner", "Owner must be a user id"))
            else:
                clauses.append(Task.owner_id == owner_id)
        if errors:
            raise ValidationError(errors=errors)

        q = (
            self.db.query(Task)
            .options(joinedload(Task.owner))
            .filter(*clauses)
            .order_by(Task.created_at.desc(), Task.id.desc())
        )
        return q.all()

    def get(self, user: User, task_id) -> Task:
        tid = _parse_id(task_id)
        task = None
        if tid is not None:
            task = (
                self.db.query(Task)
                .filter(Task.id == tid, Task.owner_id == user.id)
                .first()
            )
        if task is None:
            raise NotFound()
        return task

    # ---------- escrituras ----------

    def create(self, user: User, fields: Dict) -> Task:
        cleaned, errors = validate_task_fields(fields, partial=False)
        if errors:
            raise ValidationError(errors=errors)

        task = Task(owner_id=user.id, **cleaned)
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        log.info("Tarea %s creada por usuario %s", task.id, user.id)
        return task

    def update(self, user: User, task_id, fields: Dict) -> Task:
        task = self.get(user, task_id)

        cleaned, errors = validate_task_fields(fields, partial=True)
        if errors:
            raise ValidationError(errors=errors)

        for key, value in cleaned.items():
            setattr(task, key, value)
        self.db.commit()
        self.db.refresh(task)
        return task

    def delete(self, user: User, task_id) -> None:
        task = self.get(user, task_id)
        self.db.delete(task)
        self.db.commit()
        log.info("Tarea %s eliminada por usuario %s", task_id, user.id)

# taskboard/models/__init__.py

# 👤 Cuentas
from .user import User, Role

# ✅ Tareas
from .task import Task, TaskStatus, TaskPriority


__all__ = [
    "User",
    "Role",
    "Task",
    "TaskStatus",
    "TaskPriority",
]

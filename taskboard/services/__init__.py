# taskboard/services/__init__.py
from .tasks import TaskService

__all__ = ["TaskService"]

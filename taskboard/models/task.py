# taskboard/models/task.py
import enum

from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, Index
from sqlalchemy.orm import relationship

from taskboard.db import Base, utcnow


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _values(e):
    return [m.value for m in e]


class Task(Base):
    """
    Tarea de un usuario.

    owner_id se fija al crear y no cambia nunca: solo el dueño (o un admin,
    en el listado global) puede ver la tarea.
    """
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_owner_status", "owner_id", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    status = Column(
        Enum(TaskStatus, values_callable=_values, native_enum=False),
        nullable=False,
        default=TaskStatus.PENDING,
    )
    priority = Column(
        Enum(TaskPriority, values_callable=_values, native_enum=False),
        nullable=False,
        default=TaskPriority.MEDIUM,
    )
    due_date = Column(DateTime, nullable=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="tasks")

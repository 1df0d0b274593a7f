# taskboard/validation.py
"""
Reglas de validación.

Las reglas se declaran en modelos pydantic; las funciones validate_*
los ejecutan sobre el dict que mandó el cliente y devuelven
(datos_limpios, errores). pydantic revisa todos los campos antes de
fallar, así el cliente recibe la lista completa de problemas de una vez.
Nada aquí depende de FastAPI ni de la base de datos.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Optional, Tuple, Type

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    ValidationError as PydanticValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

from taskboard.errors import FieldError
from taskboard.models.task import TaskPriority, TaskStatus

TITLE_MIN = 3
TITLE_MAX = 100
DESCRIPTION_MAX = 500

USERNAME_MIN = 3
USERNAME_MAX = 30
PASSWORD_MIN = 6
PASSWORD_MAX_BYTES = 72  # límite de bcrypt

STATUS_VALUES = [s.value for s in TaskStatus]
PRIORITY_VALUES = [p.value for p in TaskPriority]

# Mensajes por campo para los errores estándar de pydantic
FIELD_MESSAGES = {
    "title": f"Title must be between {TITLE_MIN} and {TITLE_MAX} characters",
    "description": f"Description cannot exceed {DESCRIPTION_MAX} characters",
    "status": f"Status must be one of: {', '.join(STATUS_VALUES)}",
    "priority": f"Priority must be one of: {', '.join(PRIORITY_VALUES)}",
    "dueDate": "Due date must be a valid date",
    "username": f"Username must be between {USERNAME_MIN} and {USERNAME_MAX} characters",
    "email": "Please provide a valid email",
    "password": f"Password must be at least {PASSWORD_MIN} characters",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ---------- Tareas ----------

class _TaskRules(BaseModel):
    """Reglas comunes; los validadores se heredan en crear y actualizar."""
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, populate_by_name=True)

    @field_validator("description", check_fields=False)
    @classmethod
    def _empty_description_is_none(cls, v):
        return v or None

    @field_validator("due_date", mode="before", check_fields=False)
    @classmethod
    def _empty_due_date_is_none(cls, v):
        return None if v == "" else v

    @field_validator("due_date", check_fields=False)
    @classmethod
    def _due_date_not_in_past(cls, v: Optional[datetime], info: ValidationInfo):
        if v is None:
            return v
        if v.tzinfo is not None:
            try:
                v = v.astimezone(timezone.utc).replace(tzinfo=None)
            except OverflowError:
                # p.ej. 9999-12-31T23:59:59-05:00 se sale del calendario en UTC
                raise PydanticCustomError("due_date_invalid", FIELD_MESSAGES["dueDate"])
        now = (info.context or {}).get("now") or _utcnow()
        if v < now:
            raise PydanticCustomError("due_date_past", "Due date must be in the future")
        return v


class TaskCreate(_TaskRules):
    title: str = Field(min_length=TITLE_MIN, max_length=TITLE_MAX)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX)
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = Field(None, alias="dueDate")


class TaskUpdate(_TaskRules):
    # Los defaults no se validan: ausente = no se toca; null explícito en
    # title/status/priority sí es un error de tipo.
    title: str = Field(None, min_length=TITLE_MIN, max_length=TITLE_MAX)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX)
    status: TaskStatus = None
    priority: TaskPriority = None
    due_date: Optional[datetime] = Field(None, alias="dueDate")


# ---------- Cuentas ----------

class Registration(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=USERNAME_MIN, max_length=USERNAME_MAX)
    ]
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def _bcrypt_limit(cls, v: str) -> str:
        if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise PydanticCustomError("password_too_long", "Password is too long")
        return v


class Login(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=1)]
    password: str = Field(min_length=1)


# ---------- Ejecución ----------

def _to_field_error(err: dict) -> FieldError:
    loc = err.get("loc") or ()
    field = str(loc[0]) if loc else "body"
    kind = err.get("type", "")

    if kind == "missing":
        return FieldError(field, f"{field.capitalize()} is required")
    if kind in ("due_date_invalid", "due_date_past", "password_too_long"):
        return FieldError(field, err.get("msg", "Invalid value"))
    if kind == "string_type" and field in ("title", "description", "username", "email", "password"):
        return FieldError(field, f"{field.capitalize()} must be a string")
    return FieldError(field, FIELD_MESSAGES.get(field, err.get("msg", "Invalid value")))


def _run(model: Type[BaseModel], data: Dict[str, Any], context=None) -> Tuple[Dict[str, Any], List[FieldError]]:
    try:
        obj = model.model_validate(data, context=context)
    except PydanticValidationError as exc:
        return {}, [_to_field_error(e) for e in exc.errors()]
    return obj.model_dump(exclude_unset=True), []


def validate_task_fields(
    data: Dict[str, Any],
    partial: bool = False,
    now: Optional[datetime] = None,
) -> Tuple[Dict[str, Any], List[FieldError]]:
    """
    Valida los campos de una tarea.

    partial=True es el modo de actualización: solo se revisan (y se
    devuelven) las claves presentes en `data`. Las claves del resultado
    usan los nombres de columna (due_date, no dueDate). El dueño nunca
    forma parte del resultado.
    """
    model = TaskUpdate if partial else TaskCreate
    return _run(model, data, context={"now": now or _utcnow()})


def validate_registration(data: Dict[str, Any]) -> Tuple[Dict[str, Any], List[FieldError]]:
    return _run(Registration, data)


def validate_login(data: Dict[str, Any]) -> Tuple[Dict[str, Any], List[FieldError]]:
    return _run(Login, data)

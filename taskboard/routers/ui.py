# taskboard/routers/ui.py
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.templating import Jinja2Templates

router = APIRouter(tags=["UI"])

BASE_DIR = Path(__file__).resolve().parent.parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


# -----------------------------
#   FRONTEND (login + tareas)
# -----------------------------
@router.get("/", name="index_ui", include_in_schema=False)
def index_ui(request: Request):
    return templates.TemplateResponse(
        request,
        "index.html",
        {"api_base": "/api/v1"},
    )

# taskboard/main.py
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from taskboard.config import Settings
from taskboard.db import Base, make_engine, make_session_factory
from taskboard.errors import install_error_handlers

# Registrar los modelos en Base.metadata
import taskboard.models  # noqa: F401

# Routers
from taskboard.routers.auth import router as auth_router
from taskboard.routers.tasks import router as tasks_router
from taskboard.routers.ui import router as ui_router
from taskboard.security import TokenService
from taskboard.services.accounts import ensure_admin


BASE_DIR = Path(__file__).resolve().parent

log = logging.getLogger("taskboard")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    app = FastAPI(
        title="Taskboard API",
        version="1.0.0",
        description="REST API with authentication & role-based access control",
    )

    # ==================== ESTADO (config explícita) ====================
    engine = make_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.tokens = TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.jwt_expires_minutes,
    )

    # ==================== STATIC ====================
    static_dir = BASE_DIR / "static"
    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")
    else:
        log.info("Carpeta static no encontrada en %s", static_dir)

    # ==================== MIDDLEWARES ====================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - start) * 1000
        logging.getLogger("taskboard.http").info(
            "%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed
        )
        return response

    install_error_handlers(app)

    # ==================== ROUTERS ====================
    app.include_router(auth_router)
    app.include_router(tasks_router)
    app.include_router(ui_router)

    # ==================== RUTAS BASE ====================
    @app.get("/health", tags=["Health"])
    def health():
        return {
            "success": True,
            "status": "ok",
            "message": "Server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # ==================== CICLO DE VIDA ====================
    @app.on_event("startup")
    def on_startup():
        log.info("Creando tablas de base de datos (users, tasks)...")
        Base.metadata.create_all(bind=engine)

        if settings.admin_email and settings.admin_password:
            db = app.state.session_factory()
            try:
                ensure_admin(db, settings.admin_username, settings.admin_email, settings.admin_password)
            finally:
                db.close()

        log.info("Taskboard listo; documentación en /docs")

    @app.on_event("shutdown")
    def on_shutdown():
        log.info("Apagando Taskboard...")
        engine.dispose()

    return app


# Arranque directo: python -m taskboard.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("taskboard.main:create_app", factory=True, host="0.0.0.0", port=8000, reload=True)

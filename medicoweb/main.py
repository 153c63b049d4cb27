from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI
from fastapi import Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from medicoweb.config import get_settings
from medicoweb.routers import dose_router, health_router, search_router
from medicoweb.services.search_service import SearchSessionStore
from medicoweb.utils.logging import logger, setup_logging


PROJECT_ROOT = Path(__file__).resolve().parent.parent
STATIC_DIR = PROJECT_ROOT / "static"
INDEX_FILE = STATIC_DIR / "index.html"


def _serve_index() -> Response:
    if INDEX_FILE.exists():
        return FileResponse(str(INDEX_FILE))
    return RedirectResponse(url="/docs", status_code=307)


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description=(
            "AI-generated drug monographs, product illustrations and dose suggestions. "
            "Not a substitute for professional medical advice."
        ),
        version="1.0.0",
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.search_sessions = SearchSessionStore(ttl_seconds=settings.search_session_ttl_seconds)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR), check_dir=False), name="static")

    app.include_router(health_router)
    app.include_router(search_router)
    app.include_router(dose_router)

    @app.get("/", include_in_schema=False)
    def root() -> Response:
        return _serve_index()

    @app.get("/favicon.ico", include_in_schema=False)
    def favicon() -> Response:
        return Response(status_code=204)

    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; every generation request will fail.")

    return app


app = create_app()

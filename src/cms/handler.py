"""
Portfolio CMS API entry point.

Local dev:
    PYTHONPATH=src uv run uvicorn cms.handler:app --reload --port 8001

Lambda handler:
    cms.handler.handler
"""

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from mangum import Mangum

from cms.routes import auth, content, education, experience, projects, skills
from portfolio.backends import build_content_store, build_upload_store
from portfolio.config import Settings, load_settings
from portfolio.errors import ContentError

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def _content_error_handler(request: Request, exc: ContentError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    uploads = build_upload_store(settings)
    store = build_content_store(settings, uploads)

    app = FastAPI(
        title="Portfolio CMS API",
        description="Public content document plus admin editing routes for the portfolio site.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.uploads = uploads
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ContentError, _content_error_handler)

    app.include_router(auth.router)
    app.include_router(content.router)
    app.include_router(skills.router)
    app.include_router(projects.router)
    app.include_router(experience.router)
    app.include_router(education.router)

    if settings.upload_backend == "local":
        # StaticFiles refuses to serve from a directory that does not exist.
        Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
        app.mount(
            settings.upload_url_prefix,
            StaticFiles(directory=settings.upload_dir),
            name="uploads",
        )

    @app.get("/healthz", include_in_schema=False, response_class=PlainTextResponse)
    def healthz():
        return "OK"

    logger.info(
        "Portfolio CMS ready (content=%s, uploads=%s)",
        settings.content_backend,
        settings.upload_backend,
    )
    return app


app = create_app()

# Mangum adapts the FastAPI ASGI app for AWS Lambda + API Gateway (HTTP API).
handler = Mangum(app, lifespan="off")

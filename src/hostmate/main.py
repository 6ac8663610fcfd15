from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from starlette.requests import Request

from hostmate.core import database
from hostmate.core.config import get_settings
from hostmate.core.errors import register_error_handlers
from hostmate.core.logging_utils import configure_logging
from hostmate.routers import allergies, auth, dishes, guests, health, meals

logger = logging.getLogger(__name__)


CORE_ROUTERS = (
    (health.router, {"tags": ["health"]}),
    (auth.router, {}),
    (guests.router, {}),
    (dishes.router, {}),
    (allergies.router, {}),
    (meals.router, {}),
)


@asynccontextmanager
async def lifespan(application: FastAPI):
    database.init_db()
    logger.info("Database ready")
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url=settings.docs_url,
        lifespan=lifespan,
    )

    if not settings.is_prod:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @application.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
        started = time.perf_counter()
        response = await call_next(request)
        logger.debug(
            "%s %s -> %s in %.1fms id=%s",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
            request_id,
        )
        response.headers["X-Request-Id"] = request_id
        if response.headers.get("content-type", "").startswith("application/json"):
            response.headers["content-type"] = "application/json; charset=utf-8"
        return response

    register_error_handlers(application)

    @application.get("/favicon.ico", include_in_schema=False)
    def favicon():
        return Response(status_code=204)

    for router, include_kwargs in CORE_ROUTERS:
        application.include_router(router, **include_kwargs)

    @application.get("/", include_in_schema=False)
    def root():
        target = settings.docs_url or "/docs"
        return RedirectResponse(target)

    return application


app = create_app()

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from medsupply.app.api.v1.endpoints.health import router as health_router
from medsupply.app.api.v1.router import router as api_router
from medsupply.app.core.config import Settings, settings
from medsupply.app.core.exceptions import MedSupplyError
from medsupply.app.db.session import build_engine, build_session_factory

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg: Settings = app.state.settings
    async with httpx.AsyncClient(timeout=cfg.UPSTREAM_TIMEOUT_SECONDS) as client:
        app.state.http_client = client
        yield
    if app.state.engine is not None:
        await app.state.engine.dispose()


async def medsupply_error_handler(request: Request, exc: MedSupplyError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    else:
        logger.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = [
        f"{'.'.join(str(p) for p in err.get('loc', ())[1:]) or 'body'}: {err.get('msg')}"
        for err in exc.errors()
    ]
    message = "Invalid request: " + "; ".join(problems)
    logger.warning("%s %s -> 400 %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"message": message})


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("%s %s database error", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Database error.", "error": str(exc)})


def create_app(cfg: Settings = settings, session_factory: async_sessionmaker | None = None) -> FastAPI:
    configure_logging(cfg.LOG_LEVEL)

    app = FastAPI(title=cfg.PROJECT_NAME, version="0.1.0", lifespan=lifespan)
    app.state.settings = cfg
    app.state.engine = None
    if session_factory is None:
        app.state.engine = build_engine(cfg)
        session_factory = build_session_factory(app.state.engine)
    app.state.session_factory = session_factory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.add_exception_handler(MedSupplyError, medsupply_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    app.include_router(health_router, tags=["health"])
    app.include_router(api_router, prefix=cfg.API_PREFIX)
    return app


app = create_app()

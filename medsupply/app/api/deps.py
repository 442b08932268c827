from __future__ import annotations

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import async_sessionmaker

from medsupply.app.core.config import Settings
from medsupply.services.directory import Directory, build_directory
from medsupply.services.issuance import IssuanceCoordinator


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_factory(request: Request) -> async_sessionmaker:
    # pool process-wide, créé une fois dans create_app()
    return request.app.state.session_factory


def get_http_client(request: Request) -> httpx.AsyncClient | None:
    return getattr(request.app.state, "http_client", None)


def get_directory(
    cfg: Settings = Depends(get_settings),
    session_factory: async_sessionmaker = Depends(get_session_factory),
    http_client: httpx.AsyncClient | None = Depends(get_http_client),
) -> Directory:
    return build_directory(cfg, session_factory, http_client)


def get_issuance_coordinator(
    cfg: Settings = Depends(get_settings),
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> IssuanceCoordinator:
    return IssuanceCoordinator.from_settings(session_factory, cfg)

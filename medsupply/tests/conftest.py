import os

# avant tout import medsupply : Settings lit l'environnement à l'import
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import datetime, timezone

import httpx
import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from medsupply.app.core.config import Settings
from medsupply.app.db.base import Base
from medsupply.app.db.models.models_v1 import MedicalSupplyIssue, MedicalSupplyIssueLine
from medsupply.app.db.session import build_session_factory
from medsupply.app.main import create_app

@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def engine(tmp_path):
    """
    Base SQLite jetable par test (fichier, NullPool).

    Rien n'est partagé entre tests : chaque test repart d'un schéma vide,
    les ids auto-incrémentés recommencent donc à 1.
    """
    eng = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'medsupply.db'}",
        poolclass=NullPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'medsupply.db'}",
        CATALOG_SOURCE="db",
        ISSUE_NO_FORMAT="year",
        ISSUE_REQUIRE_USER=True,
        ISSUE_PLACEHOLDER_USER_ID=1,
        MEDICINE_CATEGORY_ID=285,
        MEDICINE_UOM_ID=18,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(settings, session_factory):
    return create_app(settings, session_factory=session_factory)


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 1, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def row_counts(session_factory):
    """(en-têtes, lignes) réellement committés."""

    async def _count() -> tuple[int, int]:
        async with session_factory() as db:
            headers = await db.scalar(select(func.count()).select_from(MedicalSupplyIssue))
            lines = await db.scalar(select(func.count()).select_from(MedicalSupplyIssueLine))
        return int(headers), int(lines)

    return _count

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from medsupply.app.core.config import Settings


def build_engine(cfg: Settings) -> AsyncEngine:
    if cfg.DATABASE_URL.startswith("sqlite"):
        return create_async_engine(cfg.DATABASE_URL, pool_pre_ping=True)
    return create_async_engine(
        cfg.DATABASE_URL,
        pool_pre_ping=True,
        pool_size=cfg.DB_POOL_SIZE,
        max_overflow=cfg.DB_MAX_OVERFLOW,
        pool_timeout=cfg.DB_POOL_TIMEOUT,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    # expire_on_commit=False : les objets restent lisibles après commit/close
    return async_sessionmaker(bind=bind, autoflush=False, expire_on_commit=False)

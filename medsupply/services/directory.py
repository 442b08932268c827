"""
Directory service.

Utilisateurs, branches et produits viennent soit de l'API REST externe,
soit directement des tables locales (CATALOG_SOURCE). Lecture seule,
sauf la création d'un produit (insert local ou forward vers l'API).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone

import httpx
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from medsupply.app.core.config import Settings
from medsupply.app.core.exceptions import (
    CatalogUnavailable,
    DuplicateProduct,
    UpstreamUnavailable,
    ValidationError,
)
from medsupply.app.db.models.core_types import CatalogSource
from medsupply.app.db.models.models_v1 import Branch, Product, User


@dataclass
class DirectoryUser:
    user_id: int
    email: str
    password: str | None
    full_name: str | None
    is_active: bool


def _by_name(key: str):
    return lambda row: (row.get(key) or "").casefold()


class Directory(ABC):
    """Read access to users, branches and products."""

    @abstractmethod
    async def find_user_by_email(self, email: str) -> DirectoryUser | None:
        pass

    @abstractmethod
    async def list_users(self) -> list[dict]:
        pass

    @abstractmethod
    async def list_branches(self) -> list[dict]:
        pass

    @abstractmethod
    async def list_products(self) -> list[dict]:
        pass

    @abstractmethod
    async def _create_product(self, name: str) -> dict:
        pass

    async def create_product(self, name: str | None) -> dict:
        if not name or not str(name).strip():
            raise ValidationError("productName is required.")
        return await self._create_product(str(name).strip())


# ---------- API externe ----------
class ApiDirectory(Directory):
    def __init__(self, client: httpx.AsyncClient, cfg: Settings):
        self._client = client
        self._cfg = cfg

    async def _get_list(self, url: str, service: str) -> list[dict]:
        try:
            resp = await self._client.get(url, timeout=self._cfg.UPSTREAM_TIMEOUT_SECONDS)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamUnavailable(service) from exc
        return list(data or [])

    async def find_user_by_email(self, email: str) -> DirectoryUser | None:
        users = await self._get_list(self._cfg.USER_API_URL, "user")
        u = next((u for u in users if u.get("email") == email), None)
        if not u:
            return None
        return DirectoryUser(
            user_id=u.get("userId"),
            email=u.get("email"),
            password=u.get("password"),
            full_name=u.get("fullName"),
            is_active=bool(u.get("isActive")),
        )

    async def list_users(self) -> list[dict]:
        users = await self._get_list(self._cfg.USER_API_URL, "user")
        active = [
            {"user_id": u.get("userId"), "full_name": u.get("fullName")}
            for u in users
            if u.get("isActive")
        ]
        return sorted(active, key=_by_name("full_name"))

    async def list_branches(self) -> list[dict]:
        branches = await self._get_list(self._cfg.BRANCH_API_URL, "branch")
        active = [
            {"id": b.get("id"), "branch_name": b.get("branchName")}
            for b in branches
            if b.get("isActive") == 1
        ]
        return sorted(active, key=_by_name("branch_name"))

    async def list_products(self) -> list[dict]:
        # tous les produits actifs, sans filtre catégorie : un produit créé est visible tout de suite
        products = await self._get_list(self._cfg.PRODUCT_API_URL, "product")
        active = [
            {"product_id": p.get("productId"), "product_name": p.get("productName")}
            for p in products
            if p.get("isActive")
        ]
        return sorted(active, key=_by_name("product_name"))

    async def _create_product(self, name: str) -> dict:
        body = {
            "productName": name,
            "categoryId": self._cfg.API_PRODUCT_CATEGORY_ID,
            "isActive": 1,
        }
        try:
            resp = await self._client.post(
                self._cfg.PRODUCT_API_URL,
                json=body,
                timeout=self._cfg.UPSTREAM_TIMEOUT_SECONDS,
            )
            if resp.status_code == 409:
                raise DuplicateProduct()
            resp.raise_for_status()
            data = resp.json() or {}
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamUnavailable("product") from exc

        return {
            "product_id": data.get("productId", data.get("id")),
            "product_name": data.get("productName", name),
        }


# ---------- Tables locales ----------
class DbDirectory(Directory):
    def __init__(self, session_factory: async_sessionmaker, cfg: Settings):
        self._session_factory = session_factory
        self._cfg = cfg

    async def _scalars(self, stmt, failure: str) -> list:
        try:
            async with self._session_factory() as db:
                return list((await db.execute(stmt)).scalars().all())
        except SQLAlchemyError as exc:
            raise CatalogUnavailable(failure) from exc

    async def find_user_by_email(self, email: str) -> DirectoryUser | None:
        rows = await self._scalars(
            select(User).where(User.email == email),
            "Could not load users from database.",
        )
        if not rows:
            return None
        u = rows[0]
        return DirectoryUser(
            user_id=int(u.user_id),
            email=u.email,
            password=u.password,
            full_name=u.full_name,
            is_active=u.is_active,
        )

    async def list_users(self) -> list[dict]:
        rows = await self._scalars(
            select(User).where(User.is_active.is_(True)).order_by(User.full_name),
            "Could not load users from database.",
        )
        return [{"user_id": u.user_id, "full_name": u.full_name} for u in rows]

    async def list_branches(self) -> list[dict]:
        rows = await self._scalars(
            select(Branch).where(Branch.is_active.is_(True)).order_by(Branch.branch_name),
            "Could not load branches from database.",
        )
        return [{"id": b.id, "branch_name": b.branch_name} for b in rows]

    async def list_products(self) -> list[dict]:
        rows = await self._scalars(
            select(Product)
            .where(Product.product_category == self._cfg.MEDICINE_CATEGORY_ID)
            .order_by(Product.product_name),
            "Could not load products from database.",
        )
        return [{"product_id": p.product_id, "product_name": p.product_name} for p in rows]

    async def _create_product(self, name: str) -> dict:
        now = datetime.now(timezone.utc)
        try:
            async with self._session_factory() as db:
                exists = (
                    await db.execute(select(Product).where(Product.product_name == name))
                ).scalar_one_or_none()
                if exists:
                    raise DuplicateProduct()

                p = Product(
                    product_name=name,
                    product_category=self._cfg.MEDICINE_CATEGORY_ID,
                    unit_of_measurement=self._cfg.MEDICINE_UOM_ID,
                    date_added=now,
                    last_updated=now,
                )
                db.add(p)
                await db.commit()
        except IntegrityError as exc:
            # course perdue contre une création concurrente du même nom
            raise DuplicateProduct() from exc
        except SQLAlchemyError as exc:
            raise CatalogUnavailable("Failed to create medicine in database.") from exc

        return {"product_id": p.product_id, "product_name": p.product_name}


def build_directory(
    cfg: Settings,
    session_factory: async_sessionmaker,
    http_client: httpx.AsyncClient | None,
) -> Directory:
    if CatalogSource(cfg.CATALOG_SOURCE) is CatalogSource.api:
        if http_client is None:
            raise RuntimeError("CATALOG_SOURCE=api requires an HTTP client")
        return ApiDirectory(http_client, cfg)
    return DbDirectory(session_factory, cfg)

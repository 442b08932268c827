from __future__ import annotations

import asyncio
import logging
import os

from sqlalchemy import select

from medsupply.app.core.config import settings
from medsupply.app.db.models.models_v1 import Branch, Product, User
from medsupply.app.db.session import build_engine, build_session_factory
from medsupply.services.auth import hash_password

logger = logging.getLogger(__name__)


async def run_seed(session_factory=None):
    engine = None
    if session_factory is None:
        engine = build_engine(settings)
        session_factory = build_session_factory(engine)

    try:
        async with session_factory() as db:
            # 1) Branche principale
            branch = await db.scalar(select(Branch).where(Branch.branch_name == "MAIN PHARMACY"))
            if not branch:
                db.add(Branch(branch_name="MAIN PHARMACY", is_active=True))

            # 2) Admin (mot de passe hashé, jamais en clair)
            admin_email = os.getenv("SEED_ADMIN_EMAIL", "admin@medsupply.local")
            user = await db.scalar(select(User).where(User.email == admin_email))
            if not user:
                db.add(
                    User(
                        email=admin_email,
                        password=hash_password(os.getenv("SEED_ADMIN_PASSWORD", "changeme")),
                        full_name="ADMIN",
                        is_active=True,
                    )
                )

            # 3) Un médicament de démo dans la catégorie listée par /api/products
            product = await db.scalar(select(Product).where(Product.product_name == "PARACETAMOL 500MG"))
            if not product:
                db.add(
                    Product(
                        product_name="PARACETAMOL 500MG",
                        product_category=settings.MEDICINE_CATEGORY_ID,
                        unit_of_measurement=settings.MEDICINE_UOM_ID,
                    )
                )

            await db.commit()
        logger.info("SEED OK: branch=MAIN PHARMACY, user=%s", admin_email)
    finally:
        if engine is not None:
            await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(run_seed())

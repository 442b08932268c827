"""
Issuance service.

Création d'une sortie (en-tête + lignes) en UNE transaction :

    insert en-tête (numéro provisoire)
    -> numéro définitif dérivé de l'id
    -> tampon d'approbation si status == "Approved"
    -> insert des lignes, dans l'ordre de la requête
    -> commit

Toute erreur après l'ouverture de la transaction => rollback complet,
aucune ligne persistée. La session (donc la connexion empruntée au pool)
est rendue sur tous les chemins de sortie, annulation comprise.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Callable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from medsupply.app.core.config import Settings
from medsupply.app.core.exceptions import (
    ConnectionUnavailable,
    NotFound,
    TransactionError,
    ValidationError,
)
from medsupply.app.db.models.core_types import IssueNoFormat, IssueStatus
from medsupply.app.db.models.models_v1 import MedicalSupplyIssue, MedicalSupplyIssueLine
from medsupply.app.schemas.issuance import IssuanceCreate, IssuanceCreated, IssueLineCreate
from medsupply.services.issue_numbers import format_issue_no
from medsupply.services.issue_validation import validate_issuance, validate_line

logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _placeholder_issue_no() -> str:
    # issue_no est UNIQUE : un 'TEMP' fixe ferait collisionner deux créations concurrentes
    return f"TEMP-{uuid.uuid4().hex[:24]}"


class IssuanceCoordinator:
    """Unit of work for issuance creation and read-back."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        *,
        issue_no_format: IssueNoFormat = IssueNoFormat.year,
        require_user: bool = True,
        placeholder_user_id: int = 1,
        clock: Callable[[], datetime] = _local_now,
    ):
        self._session_factory = session_factory
        self.issue_no_format = IssueNoFormat(issue_no_format)
        self.require_user = require_user
        self.placeholder_user_id = placeholder_user_id
        self._clock = clock

    @classmethod
    def from_settings(cls, session_factory: async_sessionmaker, cfg: Settings) -> "IssuanceCoordinator":
        return cls(
            session_factory,
            issue_no_format=cfg.ISSUE_NO_FORMAT,
            require_user=cfg.ISSUE_REQUIRE_USER,
            placeholder_user_id=cfg.ISSUE_PLACEHOLDER_USER_ID,
        )

    # ---------- Public ----------
    async def create_issuance(self, payload: IssuanceCreate) -> IssuanceCreated:
        # préconditions : aucune connexion ouverte si la requête est incomplète
        payload = validate_issuance(payload, require_user=self.require_user)
        created_by = payload.user_id if payload.user_id is not None else self.placeholder_user_id

        async with self._session_factory() as session:
            await self._acquire(session)
            try:
                header = await self._insert_header(session, payload, created_by)
                await self._assign_issue_no(session, header)
                if payload.status == IssueStatus.approved.value:
                    await self._stamp_approval(session, header, created_by)
                for index, item in enumerate(payload.items):
                    await self._insert_line(session, header.id, item, index)
                await session.commit()
            except ValidationError:
                await session.rollback()
                raise
            except asyncio.CancelledError:
                await asyncio.shield(session.rollback())
                raise
            except Exception as exc:
                await session.rollback()
                raise TransactionError(str(exc)) from exc

        logger.info(
            "Issuance %s created (id=%s, branch=%s, lines=%d, status=%s)",
            header.issue_no,
            header.id,
            header.branch_id,
            len(payload.items),
            header.status,
        )
        return IssuanceCreated(issue_id=int(header.id), issue_no=header.issue_no)

    async def get_issuance(self, issue_id: int) -> MedicalSupplyIssue:
        async with self._session_factory() as session:
            header = (
                await session.execute(
                    select(MedicalSupplyIssue)
                    .options(selectinload(MedicalSupplyIssue.lines))
                    .where(MedicalSupplyIssue.id == issue_id)
                )
            ).scalar_one_or_none()

        if not header:
            raise NotFound(f"Issuance {issue_id} not found.")
        return header

    # ---------- Steps ----------
    async def _acquire(self, session: AsyncSession) -> None:
        try:
            await session.connection()
        except SQLAlchemyError as exc:
            raise ConnectionUnavailable(str(exc)) from exc

    async def _insert_header(
        self,
        session: AsyncSession,
        payload: IssuanceCreate,
        created_by: int,
    ) -> MedicalSupplyIssue:
        header = MedicalSupplyIssue(
            issue_no=_placeholder_issue_no(),
            branch_id=payload.branch_id,
            employee_id=payload.employee_id,
            status=payload.status,
            issue_date=payload.issue_date,
            remarks=payload.remarks,
            created_by=created_by,
        )
        session.add(header)
        await session.flush()  # get header.id
        return header

    async def _assign_issue_no(self, session: AsyncSession, header: MedicalSupplyIssue) -> None:
        header.issue_no = format_issue_no(header.id, self._clock().date(), self.issue_no_format)
        await session.flush()

    async def _stamp_approval(self, session: AsyncSession, header: MedicalSupplyIssue, user_id: int) -> None:
        header.approved_by = user_id
        header.approved_at = self._clock()
        await session.flush()

    async def _insert_line(
        self,
        session: AsyncSession,
        issue_id: int,
        item: IssueLineCreate,
        index: int,
    ) -> MedicalSupplyIssueLine:
        item = validate_line(item, index=index)
        line = MedicalSupplyIssueLine(
            issue_id=issue_id,
            product_id=item.product_id,
            qty=item.qty,
            uom=item.uom,
            batch_no=item.batch_no,
            expiry_date=item.expiry_date,
        )
        session.add(line)
        await session.flush()
        return line

from __future__ import annotations

from datetime import datetime, date

from sqlalchemy import (
    String,
    Integer,
    BigInteger,
    DateTime,
    Date,
    Boolean,
    ForeignKey,
    Text,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medsupply.app.db.base import Base, BigIntId


# ---------- DIRECTORY (lecture seule, sauf création produit) ----------
class User(Base):
    __tablename__ = "user"
    user_id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Branch(Base):
    __tablename__ = "branches"
    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    branch_name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Product(Base):
    __tablename__ = "products"
    product_id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_category: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_of_measurement: Mapped[int | None] = mapped_column(Integer)
    date_added: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("product_name", name="uq_products_name"),
        Index("ix_products_category_name", "product_category", "product_name"),
    )


# ---------- ISSUANCE ----------
class MedicalSupplyIssue(Base):
    __tablename__ = "medical_supply_issue"
    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    # Placeholder unique à l'insert, remplacé par le vrai numéro une fois l'id connu
    issue_no: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    branch_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    employee_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str | None] = mapped_column(String(32))
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    remarks: Mapped[str | None] = mapped_column(Text)
    created_by: Mapped[int] = mapped_column(BigInteger, nullable=False)
    approved_by: Mapped[int | None] = mapped_column(BigInteger)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    lines: Mapped[list["MedicalSupplyIssueLine"]] = relationship(
        back_populates="issue",
        cascade="all, delete-orphan",
        order_by="MedicalSupplyIssueLine.id",
    )


class MedicalSupplyIssueLine(Base):
    __tablename__ = "medical_supply_issue_line"
    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    issue_id: Mapped[int] = mapped_column(
        ForeignKey("medical_supply_issue.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    qty: Mapped[int] = mapped_column(Integer, nullable=False)
    uom: Mapped[str | None] = mapped_column(String(32))
    batch_no: Mapped[str | None] = mapped_column(String(64))
    expiry_date: Mapped[date | None] = mapped_column(Date)

    issue: Mapped[MedicalSupplyIssue] = relationship(back_populates="lines")

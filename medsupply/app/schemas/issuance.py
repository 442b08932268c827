from datetime import date

from pydantic import BaseModel, Field, field_validator

from medsupply.app.db.models.core_types import IssueStatus


def _blank_to_none(value):
    # le formulaire envoie "" pour un select non choisi
    if isinstance(value, str) and not value.strip():
        return None
    return value


class IssueLineCreate(BaseModel):
    product_id: int | None = None
    qty: int | None = None
    uom: str | None = Field(default=None, max_length=32)
    batch_no: str | None = Field(default=None, max_length=64)
    expiry_date: date | str | None = None  # "" normalisé par le validateur de lignes

    @field_validator("product_id", "qty", mode="before")
    @classmethod
    def blank_ids(cls, value):
        return _blank_to_none(value)


class IssuanceCreate(BaseModel):
    branch_id: int | None = None
    employee_id: int | None = None
    issue_date: date | None = None
    remarks: str | None = None
    status: str | None = IssueStatus.draft.value
    items: list[IssueLineCreate] | None = None
    user_id: int | None = Field(default=None, alias="userId")

    class Config:
        populate_by_name = True

    @field_validator("branch_id", "employee_id", "issue_date", "user_id", mode="before")
    @classmethod
    def blank_fields(cls, value):
        return _blank_to_none(value)


class IssuanceCreated(BaseModel):
    issue_id: int
    issue_no: str

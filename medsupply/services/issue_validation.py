from __future__ import annotations

from datetime import date
from typing import Sequence

from medsupply.app.core.exceptions import LineItemError, ValidationError
from medsupply.app.schemas.issuance import IssuanceCreate, IssueLineCreate

MISSING_FIELDS_MESSAGE = "Missing required fields, or user is not identified."


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def normalize_expiry(value: date | str | None) -> date | None:
    """'' -> None ; chaîne ISO -> date ; date inchangée."""
    if value is None or isinstance(value, date):
        return value
    value = value.strip()
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise LineItemError(f"Invalid expiry_date '{value}' (expected YYYY-MM-DD).") from None


def validate_line(item: IssueLineCreate, index: int | None = None) -> IssueLineCreate:
    if _is_blank(item.product_id) or item.qty is None:
        raise LineItemError(index=index)
    return item.model_copy(update={"expiry_date": normalize_expiry(item.expiry_date)})


def validate_lines(items: Sequence[IssueLineCreate] | None) -> list[IssueLineCreate]:
    """
    Contrôle de forme des lignes, fail-fast sur la première invalide.
    Pas d'accès DB.
    """
    if not items:
        raise ValidationError(MISSING_FIELDS_MESSAGE)
    return [validate_line(item, index=i) for i, item in enumerate(items)]


def validate_issuance(payload: IssuanceCreate, *, require_user: bool) -> IssuanceCreate:
    if (
        _is_blank(payload.branch_id)
        or _is_blank(payload.employee_id)
        or payload.issue_date is None
        or not payload.items
        or (require_user and _is_blank(payload.user_id))
    ):
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    return payload.model_copy(update={"items": validate_lines(payload.items)})

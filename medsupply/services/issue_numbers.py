from __future__ import annotations

from datetime import date

from medsupply.app.db.models.core_types import IssueNoFormat

ISSUE_NO_PREFIX = "ISS"


def format_issue_no(issue_id: int, on: date, fmt: IssueNoFormat | str = IssueNoFormat.year) -> str:
    """
    Numéro lisible dérivé de l'id attribué par la base.

    - year : ISS-2024-000007 (id paddé sur 6)
    - date : ISS-20240301-7

    Unicité garantie par l'id lui-même : aucun contrôle supplémentaire ici.
    N'appeler qu'après l'insert de l'en-tête (l'id doit exister).
    """
    if issue_id is None or int(issue_id) <= 0:
        raise ValueError("issue_id must be a positive store-assigned id")

    fmt = IssueNoFormat(fmt)
    if fmt is IssueNoFormat.year:
        return f"{ISSUE_NO_PREFIX}-{on.year}-{int(issue_id):06d}"
    return f"{ISSUE_NO_PREFIX}-{on.strftime('%Y%m%d')}-{int(issue_id)}"

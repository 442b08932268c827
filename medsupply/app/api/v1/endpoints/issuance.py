from __future__ import annotations

from fastapi import APIRouter, Depends

from medsupply.app.api.deps import get_issuance_coordinator
from medsupply.app.schemas.issuance import IssuanceCreate
from medsupply.services.issuance import IssuanceCoordinator

router = APIRouter(prefix="/issue")


@router.post("", status_code=201)
async def create_issue(
    payload: IssuanceCreate,
    coordinator: IssuanceCoordinator = Depends(get_issuance_coordinator),
):
    created = await coordinator.create_issuance(payload)
    return {
        "message": "Issuance created successfully!",
        "issueId": created.issue_id,
        "issueNo": created.issue_no,
    }


@router.get("/{issue_id}")
async def get_issue(
    issue_id: int,
    coordinator: IssuanceCoordinator = Depends(get_issuance_coordinator),
):
    h = await coordinator.get_issuance(issue_id)
    return {
        "id": h.id,
        "issue_no": h.issue_no,
        "branch_id": h.branch_id,
        "employee_id": h.employee_id,
        "status": h.status,
        "issue_date": h.issue_date,
        "remarks": h.remarks,
        "created_by": h.created_by,
        "approved_by": h.approved_by,
        "approved_at": h.approved_at,
        "items": [
            {
                "product_id": l.product_id,
                "qty": l.qty,
                "uom": l.uom,
                "batch_no": l.batch_no,
                "expiry_date": l.expiry_date,
            }
            for l in h.lines
        ],
    }

from datetime import datetime

import httpx
import pytest

from medsupply.app.api.deps import get_issuance_coordinator
from medsupply.app.main import create_app
from medsupply.services.issuance import IssuanceCoordinator

pytestmark = pytest.mark.anyio


def _body(**overrides) -> dict:
    body = {
        "branch_id": 2,
        "employee_id": 5,
        "issue_date": "2024-03-01",
        "status": "Draft",
        "items": [{"product_id": 10, "qty": 3, "uom": "BOX"}],
        "userId": 9,
    }
    body.update(overrides)
    return body


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


async def test_create_issue_returns_201_with_number(client, row_counts):
    resp = await client.post("/api/issue", json=_body())

    assert resp.status_code == 201
    data = resp.json()
    assert data["message"] == "Issuance created successfully!"
    assert data["issueId"] == 1
    year = datetime.now().astimezone().year
    assert data["issueNo"] == f"ISS-{year}-{data['issueId']:06d}"
    assert await row_counts() == (1, 1)


async def test_empty_items_is_400(client, row_counts):
    resp = await client.post("/api/issue", json=_body(items=[]))

    assert resp.status_code == 400
    assert resp.json() == {"message": "Missing required fields, or user is not identified."}
    assert await row_counts() == (0, 0)


async def test_item_without_qty_writes_nothing(client, row_counts):
    items = [
        {"product_id": 10, "qty": 3, "uom": "BOX"},
        {"product_id": 11, "uom": "PC"},
        {"product_id": 12, "qty": 1},
    ]
    resp = await client.post("/api/issue", json=_body(items=items))

    assert resp.status_code == 400
    assert resp.json()["message"] == "Each item must have a product and quantity."
    assert await row_counts() == (0, 0)


async def test_missing_user_is_400(client):
    body = _body()
    del body["userId"]
    resp = await client.post("/api/issue", json=body)

    assert resp.status_code == 400


async def test_blank_form_values_are_missing_fields(client):
    resp = await client.post("/api/issue", json=_body(branch_id="", issue_date=""))

    assert resp.status_code == 400
    assert resp.json()["message"] == "Missing required fields, or user is not identified."


async def test_malformed_body_is_400_not_422(client, row_counts):
    resp = await client.post("/api/issue", json=_body(items=[{"product_id": 10, "qty": "three"}]))

    assert resp.status_code == 400
    assert resp.json()["message"].startswith("Invalid request:")
    assert "items.0.qty" in resp.json()["message"]
    assert await row_counts() == (0, 0)


async def test_approved_issue_read_back(client):
    resp = await client.post("/api/issue", json=_body(status="Approved", userId=9))
    assert resp.status_code == 201
    issue_id = resp.json()["issueId"]

    got = await client.get(f"/api/issue/{issue_id}")

    assert got.status_code == 200
    data = got.json()
    assert data["issue_no"] == resp.json()["issueNo"]
    assert data["status"] == "Approved"
    assert data["approved_by"] == 9
    assert data["approved_at"] is not None
    assert data["created_by"] == 9


async def test_read_back_lines(client):
    items = [
        {"product_id": 10, "qty": 3, "uom": "BOX", "batch_no": "B1", "expiry_date": "2026-06-30"},
        {"product_id": 11, "qty": 7, "uom": "PC", "expiry_date": ""},
    ]
    resp = await client.post("/api/issue", json=_body(items=items))
    got = await client.get(f"/api/issue/{resp.json()['issueId']}")

    assert got.json()["approved_by"] is None
    assert got.json()["approved_at"] is None
    assert got.json()["items"] == [
        {"product_id": 10, "qty": 3, "uom": "BOX", "batch_no": "B1", "expiry_date": "2026-06-30"},
        {"product_id": 11, "qty": 7, "uom": "PC", "batch_no": None, "expiry_date": None},
    ]


async def test_unknown_issue_is_404(client):
    resp = await client.get("/api/issue/12345")

    assert resp.status_code == 404
    assert resp.json() == {"message": "Issuance 12345 not found."}


async def test_transaction_failure_is_500_with_detail(app, client, session_factory, row_counts):
    def broken_clock():
        raise RuntimeError("clock unavailable")

    app.dependency_overrides[get_issuance_coordinator] = lambda: IssuanceCoordinator(
        session_factory, clock=broken_clock
    )
    try:
        resp = await client.post("/api/issue", json=_body())
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 500
    assert resp.json() == {"message": "Failed to create issuance.", "error": "clock unavailable"}
    assert await row_counts() == (0, 0)


async def test_user_optional_when_configured(settings, session_factory, row_counts):
    cfg = settings.model_copy(update={"ISSUE_REQUIRE_USER": False, "ISSUE_PLACEHOLDER_USER_ID": 77})
    app = create_app(cfg, session_factory=session_factory)
    body = _body()
    del body["userId"]

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        resp = await c.post("/api/issue", json=body)
        got = await c.get(f"/api/issue/{resp.json()['issueId']}")

    assert resp.status_code == 201
    assert got.json()["created_by"] == 77

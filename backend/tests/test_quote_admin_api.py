from datetime import date, datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app import models
from app.database import get_db
from app.main import app

ADMIN = {"X-Admin-Id": "admin-9"}


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def seed_quote(db, state="draft", with_results=True, **results_fields):
    quote = models.QuoteSubmission(quote_id="q-1", quote_number="Q-0001", quote_state=state)
    db.add(quote)
    if with_results:
        db.add(models.QuoteResults(quote_id="q-1", computed_at=datetime(2025, 1, 6, 10, 0), **results_fields))
    db.add(
        models.QuoteSubOrder(
            id="li-1",
            quote_id="q-1",
            filename="birth_certificate.pdf",
            doc_type="Birth Certificate",
            billable_pages=Decimal("2"),
            unit_rate=Decimal("30"),
            certification_amount=Decimal("10"),
            line_total=Decimal("70"),
        )
    )
    db.commit()
    return quote


def test_update_line_item_recomputes_totals(client, db):
    seed_quote(db)
    resp = client.put(
        "/api/v1/admin/quotes/q-1/line-items",
        json={"line_item_id": "li-1", "updates": {"billable_pages": "3", "unit_rate_override": "25"}},
        headers=ADMIN,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["line_item"]["line_total"] == 85.0
    assert data["line_item"]["unit_rate_override"] == 25.0
    assert data["totals"]["subtotal"] == 85.0
    assert data["totals"]["tax"] == 4.25
    assert data["totals"]["total"] == 89.25

    db.expire_all()
    results = db.get(models.QuoteResults, "q-1")
    assert results.total == Decimal("89.25")
    quote = db.get(models.QuoteSubmission, "q-1")
    assert quote.last_edited_by == "admin-9"
    actions = [row.action for row in db.query(models.AdminActivityLog).all()]
    assert actions == ["quote_line_item_updated"]


def test_update_unknown_line_item_is_404(client, db):
    seed_quote(db)
    resp = client.put(
        "/api/v1/admin/quotes/q-1/line-items",
        json={"line_item_id": "nope", "updates": {"billable_pages": 1}},
    )
    assert resp.status_code == 404
    assert resp.json()["detail"]["field_errors"] == {"line_item_id": "not_found"}


def test_locked_quote_rejects_edits(client, db):
    seed_quote(db, state="sent")
    resp = client.put(
        "/api/v1/admin/quotes/q-1/line-items",
        json={"line_item_id": "li-1", "updates": {"billable_pages": 9}},
        headers=ADMIN,
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["message"] == "Quote is locked"

    db.expire_all()
    assert db.get(models.QuoteSubOrder, "li-1").billable_pages == Decimal("2")
    assert db.query(models.AdminActivityLog).count() == 0


def test_manual_line_item_flow(client, db):
    db.add(models.QuoteSubmission(quote_id="q-2", quote_state="draft"))
    db.commit()
    resp = client.post(
        "/api/v1/admin/quotes/q-2/line-items/manual",
        json={"filename": "diploma.pdf", "billable_pages": 3, "unit_rate": 25},
        headers=ADMIN,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["line_item"]["source"] == "manual"
    assert data["line_item"]["line_total"] == 75.0
    assert data["totals"]["tax"] == 3.75
    assert data["totals"]["total"] == 78.75

    db.expire_all()
    results = db.get(models.QuoteResults, "q-2")
    assert results.subtotal == Decimal("75.00")
    assert results.currency == "CAD"


def test_manual_line_item_validation(client, db):
    seed_quote(db)
    resp = client.post(
        "/api/v1/admin/quotes/q-1/line-items/manual",
        json={"billable_pages": 2},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == {
        "message": "unit_rate required",
        "field_errors": {"unit_rate": "required"},
    }


def test_delete_line_item(client, db):
    seed_quote(db)
    resp = client.delete("/api/v1/admin/quotes/q-1/line-items/li-1", headers=ADMIN)
    assert resp.status_code == 200
    assert resp.json()["totals"]["total"] == 0.0
    db.expire_all()
    assert db.query(models.QuoteSubOrder).filter_by(id="li-1").first() is None


def test_adjustment_create_and_delete(client, db):
    seed_quote(db)
    resp = client.post(
        "/api/v1/admin/quotes/q-1/adjustments",
        json={"type": "discount", "discount_type": "fixed", "discount_value": 20, "description": "Loyalty"},
        headers=ADMIN,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["totals"]["discounts_or_surcharges"] == -20.0
    assert data["totals"]["subtotal"] == 50.0
    adjustment_id = data["adjustment"]["id"]

    resp = client.delete(f"/api/v1/admin/quotes/q-1/adjustments/{adjustment_id}", headers=ADMIN)
    assert resp.status_code == 200
    assert resp.json()["totals"]["subtotal"] == 70.0


def test_adjustment_with_invalid_type(client, db):
    seed_quote(db)
    resp = client.post("/api/v1/admin/quotes/q-1/adjustments", json={"type": "coupon"})
    assert resp.status_code == 400
    assert resp.json()["detail"]["field_errors"] == {"type": "invalid"}


def test_state_transition_then_lock(client, db):
    seed_quote(db, state="ready")
    resp = client.put("/api/v1/admin/quotes/q-1/state", json={"new_state": "sent"}, headers=ADMIN)
    assert resp.status_code == 200
    assert resp.json()["quote"] == {"quote_state": "sent", "can_edit": False}

    db.expire_all()
    quote = db.get(models.QuoteSubmission, "q-1")
    assert quote.state_changed_by == "admin-9"
    assert quote.state_changed_at is not None

    resp = client.put("/api/v1/admin/quotes/q-1/state", json={"new_state": "draft"})
    assert resp.status_code == 400
    assert resp.json()["detail"]["message"] == "Invalid transition sent -> draft"

    resp = client.post(
        "/api/v1/admin/quotes/q-1/line-items/manual",
        json={"billable_pages": 1, "unit_rate": 10},
    )
    assert resp.status_code == 400


def test_state_change_for_unknown_quote(client):
    resp = client.put("/api/v1/admin/quotes/ghost/state", json={"new_state": "ready"})
    assert resp.status_code == 404


def test_calculate_delivery_skips_location_holiday(client, db):
    seed_quote(db)
    db.add(
        models.CompanyHoliday(
            location_id="loc-1", holiday_name="Staff Day", holiday_date=date(2025, 1, 8)
        )
    )
    db.commit()

    resp = client.post(
        "/api/v1/admin/quotes/calculate-delivery",
        json={"quote_id": "q-1", "location_id": "loc-1"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["deliveryInfo"]["estimated_delivery_date"] == "2025-01-14"
    assert data["deliveryInfo"]["skipped_holidays"] == 1
    assert data["deliveryInfo"]["turnaround_time"] == "3-5 business days"
    assert data["deliveryInfo"]["expiry_days"] == 30
    assert data["quote"]["estimated_delivery_date"] == "2025-01-14"
    assert data["quote"]["location_id"] == "loc-1"

    db.expire_all()
    results = db.get(models.QuoteResults, "q-1")
    assert results.quote_expires_at == datetime(2025, 2, 5, 10, 0)
    assert results.delivery_estimate_text == "3-5 business days"


def test_calculate_delivery_uses_app_settings(client, db):
    seed_quote(db)
    db.add_all(
        [
            models.AppSetting(setting_key="default_turnaround_time", setting_value="2 business days"),
            models.AppSetting(setting_key="quote_expiry_days", setting_value="14"),
        ]
    )
    db.commit()
    resp = client.post("/api/v1/admin/quotes/calculate-delivery", json={"quote_id": "q-1"})
    assert resp.status_code == 200
    info = resp.json()["deliveryInfo"]
    assert info["estimated_delivery_date"] == "2025-01-08"
    assert info["expiry_days"] == 14


def test_calculate_delivery_without_results_is_conflict(client, db):
    seed_quote(db, with_results=False)
    resp = client.post("/api/v1/admin/quotes/calculate-delivery", json={"quote_id": "q-1"})
    assert resp.status_code == 409
    assert resp.json()["detail"]["field_errors"] == {"quote_results": "missing"}


def test_calculate_delivery_unknown_quote(client):
    resp = client.post("/api/v1/admin/quotes/calculate-delivery", json={"quote_id": "ghost"})
    assert resp.status_code == 404


def test_list_holidays_filters_by_location(client, db):
    db.add_all(
        [
            models.CompanyHoliday(location_id="loc-1", holiday_name="A", holiday_date=date(2025, 7, 1)),
            models.CompanyHoliday(location_id="loc-2", holiday_name="B", holiday_date=date(2025, 7, 4)),
        ]
    )
    db.commit()
    resp = client.get("/api/v1/admin/settings/holidays", params={"location_id": "loc-1"})
    assert resp.status_code == 200
    holidays = resp.json()["holidays"]
    assert [h["holiday_name"] for h in holidays] == ["A"]
    assert holidays[0]["holiday_date"] == "2025-07-01"


def test_missing_body_field_returns_validation_error(client):
    resp = client.put("/api/v1/admin/quotes/q-1/state", json={})
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["message"] == "Invalid request"
    assert "new_state" in detail["field_errors"]


def test_locked_quote_reported_before_body_validation(client, db):
    seed_quote(db, state="sent")
    resp = client.put(
        "/api/v1/admin/quotes/q-1/line-items",
        json={"updates": {"billable_pages": 4}},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["message"] == "Quote is locked"


def test_update_without_line_item_id(client, db):
    seed_quote(db)
    resp = client.put(
        "/api/v1/admin/quotes/q-1/line-items",
        json={"updates": {"billable_pages": 4}},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["field_errors"] == {"line_item_id": "required"}


def test_fractional_pages_keep_line_and_quote_totals_in_step(client, db):
    db.add(models.QuoteSubmission(quote_id="q-3", quote_state="draft"))
    db.commit()
    resp = client.post(
        "/api/v1/admin/quotes/q-3/line-items/manual",
        json={"billable_pages": 2.555, "unit_rate": 10},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["line_item"]["billable_pages"] == 2.56
    assert data["line_item"]["line_total"] == 25.6
    assert data["totals"]["subtotal"] == data["line_item"]["line_total"]

    db.expire_all()
    row = db.query(models.QuoteSubOrder).filter_by(quote_id="q-3").one()
    assert row.line_total == row.billable_pages * row.unit_rate

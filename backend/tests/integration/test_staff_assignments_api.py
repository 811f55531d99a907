"""
Integration tests for Staff Assignments API endpoints.

Tests end-to-end flows:
- Creating assignments with a linked budget item
- Field errors for invalid time windows
- Partial updates, payment operations and deletion
"""

import pytest


@pytest.fixture
def setup(api_event, api_staff, api_category):
    event = api_event()
    staff = api_staff()
    category = api_category(event["guid"])
    return event, staff, category


def _assignment_payload(event, staff, **overrides):
    payload = {
        "event_guid": event["guid"],
        "staff_guid": staff["guid"],
        "start_time": "2026-05-12T08:00:00Z",
        "end_time": "2026-05-12T18:00:00Z",
    }
    payload.update(overrides)
    return payload


class TestStaffAssignmentsAPI:
    """Integration tests for Staff Assignments API endpoints"""

    def test_create_links_budget_item(self, test_client, setup):
        event, staff, category = setup

        response = test_client.post("/api/staff-assignments", json=_assignment_payload(
            event, staff, payment_amount=500, budget_category_guid=category["guid"],
        ))

        assert response.status_code == 201
        result = response.json()
        assert result["success"] is True
        assert result["data"]["guid"].startswith("sta_")
        assert result["data"]["budget_item_guid"].startswith("bgi_")
        assert result["data"]["payment_status"] == "not_due"
        assert result["data"]["start_time"] == "2026-05-12T08:00:00Z"
        assert "/people/staff" in result["revalidate"]
        assert f"/events/{event['guid']}/budget" in result["revalidate"]

        category_response = test_client.get(f"/api/budget/categories/{category['guid']}")
        detail = category_response.json()
        assert detail["spent_amount"] == 500.0
        assert detail["items"][0]["description"] == "Staff payment: Rossi Anna"

    def test_create_inverted_window_is_field_error(self, test_client, setup):
        event, staff, _ = setup

        response = test_client.post("/api/staff-assignments", json=_assignment_payload(
            event, staff, start_time="2026-05-12T18:00:00Z", end_time="2026-05-12T08:00:00Z",
        ))

        assert response.status_code == 400
        result = response.json()
        assert result["success"] is False
        assert "end_time" in result["errors"]

        listing = test_client.get("/api/staff-assignments", params={"event_guid": event["guid"]})
        assert listing.json() == []

    def test_create_missing_field_is_validation_error(self, test_client, setup):
        event, staff, _ = setup
        payload = _assignment_payload(event, staff)
        del payload["start_time"]

        response = test_client.post("/api/staff-assignments", json=payload)

        assert response.status_code == 422
        result = response.json()
        assert result["success"] is False
        assert result["message"] == "Validation failed"
        assert "start_time" in result["errors"]

    def test_create_unknown_event_is_404(self, test_client, setup):
        _, staff, _ = setup
        response = test_client.post("/api/staff-assignments", json=_assignment_payload(
            {"guid": "evt_00000000000000000000000000"}, staff,
        ))
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_batch_create(self, test_client, setup, api_staff):
        event, staff, category = setup
        other = api_staff(first_name="Luca", last_name="Bianchi")

        response = test_client.post("/api/staff-assignments/batch", json={
            "event_guid": event["guid"],
            "staff_guids": [staff["guid"], other["guid"]],
            "start_time": "2026-05-12T08:00:00Z",
            "end_time": "2026-05-12T18:00:00Z",
            "payment_amount": 200,
            "budget_category_guid": category["guid"],
        })

        assert response.status_code == 201
        assert len(response.json()["data"]["assignments"]) == 2
        detail = test_client.get(f"/api/budget/categories/{category['guid']}").json()
        assert detail["spent_amount"] == 400.0

    def test_patch_updates_item(self, test_client, setup):
        event, staff, category = setup
        created = test_client.post("/api/staff-assignments", json=_assignment_payload(
            event, staff, payment_amount=500, budget_category_guid=category["guid"],
        )).json()["data"]

        response = test_client.patch(
            f"/api/staff-assignments/{created['guid']}", json={"payment_amount": 650}
        )

        assert response.status_code == 200
        assert response.json()["data"]["budget_item_guid"] == created["budget_item_guid"]
        item = test_client.get(f"/api/budget/items/{created['budget_item_guid']}").json()
        assert item["estimated_cost"] == 650.0

    def test_payment_flow(self, test_client, setup):
        event, staff, _ = setup
        created = test_client.post("/api/staff-assignments", json=_assignment_payload(
            event, staff, payment_amount=500, payment_due_date="2099-01-01T00:00:00Z",
        )).json()["data"]
        guid = created["guid"]
        assert created["payment_status"] == "pending"

        paid = test_client.post(f"/api/staff-assignments/{guid}/mark-paid", json={
            "payment_date": "2026-05-20T00:00:00Z",
            "invoice_number": "INV-42",
        }).json()
        assert paid["data"]["payment_status"] == "paid"
        assert "/" in paid["revalidate"]

        cancelled = test_client.post(
            f"/api/staff-assignments/{guid}/cancel-payment", json={"reason": "duplicate"}
        ).json()
        assert cancelled["data"]["payment_status"] == "pending"
        assert cancelled["data"]["invoice_number"] is None

        postponed = test_client.post(f"/api/staff-assignments/{guid}/postpone-payment", json={
            "new_due_date": "2099-06-01T00:00:00Z",
            "reason": "cash flow",
        }).json()
        assert postponed["data"]["payment_due_date"] == "2099-06-01T00:00:00Z"
        assert postponed["data"]["payment_terms"] == "custom"
        assert postponed["data"]["payment_notes"] == (
            "Payment cancelled: duplicate\n\nPostponed to 01/06/2099: cash flow"
        )

    def test_status_change(self, test_client, setup):
        event, staff, _ = setup
        guid = test_client.post(
            "/api/staff-assignments", json=_assignment_payload(event, staff)
        ).json()["data"]["guid"]

        response = test_client.post(
            f"/api/staff-assignments/{guid}/status", json={"assignment_status": "confirmed"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["assignment_status"] == "confirmed"

    def test_delete_removes_item(self, test_client, setup):
        event, staff, category = setup
        created = test_client.post("/api/staff-assignments", json=_assignment_payload(
            event, staff, payment_amount=500, budget_category_guid=category["guid"],
        )).json()["data"]

        response = test_client.delete(f"/api/staff-assignments/{created['guid']}")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert test_client.get(f"/api/staff-assignments/{created['guid']}").status_code == 404
        assert test_client.get(f"/api/budget/items/{created['budget_item_guid']}").status_code == 404
        detail = test_client.get(f"/api/budget/categories/{category['guid']}").json()
        assert detail["spent_amount"] == 0.0

    @pytest.mark.parametrize("field", ["start_time", "end_time", "assignment_status", "payment_terms"])
    def test_patch_null_required_field_is_validation_error(self, test_client, setup, field):
        event, staff, _ = setup
        created = test_client.post(
            "/api/staff-assignments", json=_assignment_payload(event, staff)
        ).json()["data"]

        response = test_client.patch(f"/api/staff-assignments/{created['guid']}", json={field: None})

        assert response.status_code == 422
        result = response.json()
        assert result["success"] is False
        assert field in result["errors"]
        unchanged = test_client.get(f"/api/staff-assignments/{created['guid']}").json()
        assert unchanged[field] == created[field]

    def test_patch_null_optional_field_clears_it(self, test_client, setup):
        event, staff, _ = setup
        created = test_client.post("/api/staff-assignments", json=_assignment_payload(
            event, staff, payment_notes="Net 30",
        )).json()["data"]

        response = test_client.patch(
            f"/api/staff-assignments/{created['guid']}", json={"payment_notes": None}
        )

        assert response.status_code == 200
        assert response.json()["data"]["payment_notes"] is None

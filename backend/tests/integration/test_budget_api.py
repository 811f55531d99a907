"""
Integration tests for Budget API endpoints.

Tests end-to-end flows:
- Category and item CRUD
- Spent amount kept equal to the sum of item actual costs
- Moving items between categories
- Unlinking owners when their budget item goes away
"""

import pytest


class TestBudgetCategoriesAPI:
    """Integration tests for budget category endpoints"""

    def test_create_category(self, test_client, api_event):
        event = api_event()

        response = test_client.post(
            f"/api/events/{event['guid']}/budget/categories",
            json={"name": "Catering", "allocated_amount": 12000, "color": "#3B82F6"},
        )

        assert response.status_code == 201
        result = response.json()
        assert result["success"] is True
        data = result["data"]
        assert data["guid"].startswith("bgc_")
        assert data["event_guid"] == event["guid"]
        assert data["spent_amount"] == 0.0
        assert data["remaining_amount"] == 12000.0
        assert f"/events/{event['guid']}/budget" in result["revalidate"]

    def test_create_category_invalid_color(self, test_client, api_event):
        event = api_event()

        response = test_client.post(
            f"/api/events/{event['guid']}/budget/categories",
            json={"name": "Catering", "allocated_amount": 100, "color": "blue"},
        )

        assert response.status_code == 422
        assert "color" in response.json()["errors"]

    def test_create_category_unknown_event(self, test_client):
        response = test_client.post(
            "/api/events/evt_00000000000000000000000000/budget/categories",
            json={"name": "Catering", "allocated_amount": 100},
        )
        assert response.status_code == 404

    def test_list_categories(self, test_client, api_event, api_category):
        event = api_event()
        api_category(event["guid"], name="Staff")
        api_category(event["guid"], name="Venue")

        response = test_client.get(f"/api/events/{event['guid']}/budget/categories")

        assert response.status_code == 200
        names = {c["name"] for c in response.json()}
        assert names == {"Staff", "Venue"}

    def test_update_category_partial(self, test_client, api_event, api_category):
        event = api_event()
        category = api_category(event["guid"], name="Venue", allocated_amount=1000)

        response = test_client.patch(
            f"/api/budget/categories/{category['guid']}", json={"allocated_amount": 1500}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["allocated_amount"] == 1500.0
        assert data["name"] == "Venue"

    @pytest.mark.parametrize("field", ["name", "allocated_amount", "color"])
    def test_patch_null_required_field_is_validation_error(
        self, test_client, api_event, api_category, field
    ):
        event = api_event()
        category = api_category(event["guid"], name="Venue")

        response = test_client.patch(f"/api/budget/categories/{category['guid']}", json={field: None})

        assert response.status_code == 422
        assert field in response.json()["errors"]
        unchanged = test_client.get(f"/api/budget/categories/{category['guid']}").json()
        assert unchanged[field] == category[field]

    def test_delete_category_unlinks_assignments(
        self, test_client, api_event, api_staff, api_category
    ):
        event = api_event()
        staff = api_staff()
        category = api_category(event["guid"])
        assignment = test_client.post("/api/staff-assignments", json={
            "event_guid": event["guid"],
            "staff_guid": staff["guid"],
            "start_time": "2026-05-12T08:00:00Z",
            "end_time": "2026-05-12T18:00:00Z",
            "payment_amount": 300,
            "budget_category_guid": category["guid"],
        }).json()["data"]

        response = test_client.delete(f"/api/budget/categories/{category['guid']}")

        assert response.status_code == 200
        assert test_client.get(f"/api/budget/categories/{category['guid']}").status_code == 404
        refreshed = test_client.get(f"/api/staff-assignments/{assignment['guid']}").json()
        assert refreshed["budget_item_guid"] is None


class TestBudgetItemsAPI:
    """Integration tests for budget item endpoints"""

    def test_create_item_updates_spent_amount(self, test_client, api_event, api_category):
        event = api_event()
        category = api_category(event["guid"], name="Venue")

        response = test_client.post(
            f"/api/budget/categories/{category['guid']}/items",
            json={"description": "Hall rental", "estimated_cost": 800, "actual_cost": 750},
        )

        assert response.status_code == 201
        item = response.json()["data"]
        assert item["guid"].startswith("bgi_")
        assert item["category_guid"] == category["guid"]

        detail = test_client.get(f"/api/budget/categories/{category['guid']}").json()
        assert detail["spent_amount"] == 750.0
        assert detail["remaining_amount"] == 4250.0
        assert [i["guid"] for i in detail["items"]] == [item["guid"]]

    def test_list_items(self, test_client, api_event, api_category):
        event = api_event()
        category = api_category(event["guid"], name="Venue")
        for description in ("Hall rental", "Projector"):
            test_client.post(
                f"/api/budget/categories/{category['guid']}/items",
                json={"description": description, "estimated_cost": 100},
            )

        response = test_client.get(f"/api/budget/categories/{category['guid']}/items")

        assert response.status_code == 200
        assert len(response.json()) == 2

    def test_move_item_recomputes_both_categories(self, test_client, api_event, api_category):
        event = api_event()
        source = api_category(event["guid"], name="Venue")
        target = api_category(event["guid"], name="Technical")
        item = test_client.post(
            f"/api/budget/categories/{source['guid']}/items",
            json={"description": "Projector", "estimated_cost": 200, "actual_cost": 200},
        ).json()["data"]

        response = test_client.patch(
            f"/api/budget/items/{item['guid']}", json={"category_guid": target["guid"]}
        )

        assert response.status_code == 200
        assert response.json()["data"]["category_guid"] == target["guid"]
        assert test_client.get(f"/api/budget/categories/{source['guid']}").json()["spent_amount"] == 0.0
        assert test_client.get(f"/api/budget/categories/{target['guid']}").json()["spent_amount"] == 200.0

    def test_move_item_to_other_event_rejected(self, test_client, api_event, api_category):
        event = api_event()
        other_event = api_event(title="Other Summit")
        source = api_category(event["guid"], name="Venue")
        foreign = api_category(other_event["guid"], name="Venue")
        item = test_client.post(
            f"/api/budget/categories/{source['guid']}/items",
            json={"description": "Projector", "estimated_cost": 200},
        ).json()["data"]

        response = test_client.patch(
            f"/api/budget/items/{item['guid']}", json={"category_guid": foreign["guid"]}
        )

        assert response.status_code == 400
        assert "category_guid" in response.json()["errors"]

    def test_mark_item_paid_requires_date_and_cost(self, test_client, api_event, api_category):
        event = api_event()
        category = api_category(event["guid"])
        item = test_client.post(
            f"/api/budget/categories/{category['guid']}/items",
            json={"description": "Catering", "estimated_cost": 100},
        ).json()["data"]

        response = test_client.post(
            f"/api/budget/items/{item['guid']}/status", json={"status": "paid"}
        )

        assert response.status_code == 400
        assert "payment_date" in response.json()["errors"]

        response = test_client.post(f"/api/budget/items/{item['guid']}/status", json={
            "status": "paid",
            "payment_date": "2026-05-20T00:00:00Z",
            "actual_cost": 95,
        })
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "paid"
        assert test_client.get(f"/api/budget/categories/{category['guid']}").json()["spent_amount"] == 95.0

    def test_delete_linked_item_unlinks_assignment(
        self, test_client, api_event, api_staff, api_category
    ):
        event = api_event()
        staff = api_staff()
        category = api_category(event["guid"])
        assignment = test_client.post("/api/staff-assignments", json={
            "event_guid": event["guid"],
            "staff_guid": staff["guid"],
            "start_time": "2026-05-12T08:00:00Z",
            "end_time": "2026-05-12T18:00:00Z",
            "payment_amount": 300,
            "budget_category_guid": category["guid"],
        }).json()["data"]

        response = test_client.delete(f"/api/budget/items/{assignment['budget_item_guid']}")

        assert response.status_code == 200
        refreshed = test_client.get(f"/api/staff-assignments/{assignment['guid']}").json()
        assert refreshed["budget_item_guid"] is None
        assert test_client.get(f"/api/budget/categories/{category['guid']}").json()["spent_amount"] == 0.0

    @pytest.mark.parametrize("field", ["description", "estimated_cost", "status"])
    def test_patch_null_required_field_is_validation_error(
        self, test_client, api_event, api_category, field
    ):
        event = api_event()
        category = api_category(event["guid"])
        item = test_client.post(
            f"/api/budget/categories/{category['guid']}/items",
            json={"description": "Catering", "estimated_cost": 100},
        ).json()["data"]

        response = test_client.patch(f"/api/budget/items/{item['guid']}", json={field: None})

        assert response.status_code == 422
        assert field in response.json()["errors"]
        unchanged = test_client.get(f"/api/budget/items/{item['guid']}").json()
        assert unchanged[field] == item[field]

    def test_get_item_malformed_guid(self, test_client):
        response = test_client.get("/api/budget/items/not-a-guid")
        assert response.status_code == 404
        assert response.json()["success"] is False

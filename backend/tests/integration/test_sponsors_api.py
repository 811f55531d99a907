"""
Integration tests for Sponsors API endpoints.

Tests end-to-end flows:
- Income items filed under the event's income category
- Received amount following the payment status
- Deleting a sponsor together with its item
"""

import pytest


class TestSponsorsAPI:
    """Integration tests for Sponsors API endpoints"""

    def test_create_sponsor_creates_income_item(self, test_client, api_event):
        event = api_event()

        response = test_client.post("/api/sponsors", json={
            "event_guid": event["guid"],
            "company_name": "Acme Corp",
            "sponsorship_amount": 1000,
            "payment_status": "partial",
        })

        assert response.status_code == 201
        result = response.json()
        sponsor = result["data"]
        assert sponsor["guid"].startswith("spn_")
        assert sponsor["budget_item_guid"].startswith("bgi_")
        assert f"/events/{event['guid']}/sponsors" in result["revalidate"]

        categories = test_client.get(f"/api/events/{event['guid']}/budget/categories").json()
        assert [c["name"] for c in categories] == ["Income"]
        assert categories[0]["spent_amount"] == 500.0

        item = test_client.get(f"/api/budget/items/{sponsor['budget_item_guid']}").json()
        assert item["description"] == "Sponsor: Acme Corp"
        assert item["estimated_cost"] == 1000.0
        assert item["actual_cost"] == 500.0

    def test_income_category_reused(self, test_client, api_event):
        event = api_event()
        for name in ("Acme Corp", "Globex"):
            test_client.post("/api/sponsors", json={
                "event_guid": event["guid"],
                "company_name": name,
                "sponsorship_amount": 1000,
            })

        categories = test_client.get(f"/api/events/{event['guid']}/budget/categories").json()
        assert len(categories) == 1

    def test_sponsor_without_amount_has_no_item(self, test_client, api_event):
        event = api_event()

        response = test_client.post("/api/sponsors", json={
            "event_guid": event["guid"],
            "company_name": "Acme Corp",
        })

        assert response.status_code == 201
        assert response.json()["data"]["budget_item_guid"] is None
        assert test_client.get(f"/api/events/{event['guid']}/budget/categories").json() == []

    def test_explicit_category(self, test_client, api_event, api_category):
        event = api_event()
        category = api_category(event["guid"], name="Partnerships")

        sponsor = test_client.post("/api/sponsors", json={
            "event_guid": event["guid"],
            "company_name": "Acme Corp",
            "sponsorship_amount": 400,
            "payment_status": "paid",
            "budget_category_guid": category["guid"],
        }).json()["data"]

        item = test_client.get(f"/api/budget/items/{sponsor['budget_item_guid']}").json()
        assert item["category_guid"] == category["guid"]
        assert item["status"] == "paid"
        assert test_client.get(f"/api/budget/categories/{category['guid']}").json()["spent_amount"] == 400.0

    def test_update_payment_status_resyncs_item(self, test_client, api_event):
        event = api_event()
        sponsor = test_client.post("/api/sponsors", json={
            "event_guid": event["guid"],
            "company_name": "Acme Corp",
            "sponsorship_amount": 1000,
        }).json()["data"]

        response = test_client.patch(
            f"/api/sponsors/{sponsor['guid']}", json={"payment_status": "paid"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["budget_item_guid"] == sponsor["budget_item_guid"]
        assert data["company_name"] == "Acme Corp"
        item = test_client.get(f"/api/budget/items/{sponsor['budget_item_guid']}").json()
        assert item["actual_cost"] == 1000.0

    def test_website_url_gets_scheme(self, test_client, api_event):
        event = api_event()

        response = test_client.post("/api/sponsors", json={
            "event_guid": event["guid"],
            "company_name": "Acme Corp",
            "website_url": "acme.example",
        })

        assert response.status_code == 201
        assert response.json()["data"]["website_url"] == "https://acme.example"

    def test_list_requires_event(self, test_client):
        response = test_client.get("/api/sponsors")
        assert response.status_code == 422

    def test_delete_sponsor_removes_item(self, test_client, api_event):
        event = api_event()
        sponsor = test_client.post("/api/sponsors", json={
            "event_guid": event["guid"],
            "company_name": "Acme Corp",
            "sponsorship_amount": 1000,
            "payment_status": "paid",
        }).json()["data"]

        response = test_client.delete(f"/api/sponsors/{sponsor['guid']}")

        assert response.status_code == 200
        assert test_client.get(f"/api/sponsors/{sponsor['guid']}").status_code == 404
        assert test_client.get(f"/api/budget/items/{sponsor['budget_item_guid']}").status_code == 404
        categories = test_client.get(f"/api/events/{event['guid']}/budget/categories").json()
        assert categories[0]["spent_amount"] == 0.0

    @pytest.mark.parametrize(
        "field", ["company_name", "sponsorship_level", "payment_status", "contract_signed"]
    )
    def test_patch_null_required_field_is_validation_error(self, test_client, api_event, field):
        event = api_event()
        sponsor = test_client.post("/api/sponsors", json={
            "event_guid": event["guid"],
            "company_name": "Acme Corp",
        }).json()["data"]

        response = test_client.patch(f"/api/sponsors/{sponsor['guid']}", json={field: None})

        assert response.status_code == 422
        assert field in response.json()["errors"]
        unchanged = test_client.get(f"/api/sponsors/{sponsor['guid']}").json()
        assert unchanged[field] == sponsor[field]

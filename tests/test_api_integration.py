"""
End-to-end API tests: a customer orders services, staff move the order through
production, and the customer sees each change on the next read.
"""

from unittest.mock import AsyncMock, patch

from portal.config import settings
from tests.conftest import auth_headers

API = settings.api_v1_prefix
PHOTO = "Real Estate Photography"
DRONE = "Drone Photos & Films"


async def create_order(async_client, user, property_id, card_id, **extra):
    payload = {
        "property_id": str(property_id),
        "services": [PHOTO, DRONE],
        "shoot_date": "2024-06-10",
        "shoot_time": "Morning (8am - 12pm)",
        "payment_method_id": str(card_id),
    }
    payload.update(extra)
    return await async_client.post(f"{API}/orders", json=payload, headers=auth_headers(user))


class TestAuthentication:

    async def test_register_login_and_me(self, async_client):
        response = await async_client.post(f"{API}/auth/register", json={
            "email": "Jordan.Reyes@Example.com",
            "password": "password123",
            "confirm_password": "password123",
            "full_name": "Jordan Reyes",
            "brokerage": "Harbour Realty"
        })
        assert response.status_code == 201
        assert response.json()["user"]["email"] == "jordan.reyes@example.com"

        response = await async_client.post(f"{API}/auth/login", json={
            "email": "jordan.reyes@example.com",
            "password": "password123"
        })
        assert response.status_code == 200
        token = response.json()["access_token"]

        response = await async_client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["full_name"] == "Jordan Reyes"

    async def test_missing_token(self, async_client):
        response = await async_client.get(f"{API}/orders")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_customer_cannot_use_admin_routes(self, async_client, test_agent):
        response = await async_client.get(f"{API}/admin/dashboard", headers=auth_headers(test_agent))
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    async def test_staff_cannot_use_customer_billing(self, async_client, test_admin):
        response = await async_client.get(f"{API}/billing", headers=auth_headers(test_admin))
        assert response.status_code == 403


class TestOrderingFlow:

    async def test_order_lifecycle(self, async_client, test_agent, test_admin, test_property, test_card, stripe):
        response = await create_order(async_client, test_agent, test_property.id, test_card.id)
        assert response.status_code == 201
        order = response.json()
        assert order["status"] == "Scheduled"
        assert order["payment_status"] == "paid"
        assert order["total_amount"] == 550.0
        assert order["total_with_tax"] == 621.5
        assert stripe.last_form["amount"] == "62150"

        order_url = f"{API}/orders/{order['id']}"
        admin_order_url = f"{API}/admin/orders/{order['id']}"

        response = await async_client.put(
            f"{admin_order_url}/status",
            json={"status": "In Progress"},
            headers=auth_headers(test_admin)
        )
        assert response.status_code == 200

        seen = (await async_client.get(order_url, headers=auth_headers(test_agent))).json()
        assert seen["status"] == "In Progress"
        assert seen["client_status"] == "On Site"

        timeline = (await async_client.get(f"{order_url}/timeline", headers=auth_headers(test_agent))).json()
        assert timeline["step_index"] == 1
        assert timeline["admin_timeline"][1]["completed"] is True

        response = await async_client.post(
            f"{admin_order_url}/assets",
            json={"service_name": DRONE, "url": "https://media.example.com/aerials.zip", "type": "drone"},
            headers=auth_headers(test_admin)
        )
        assert response.status_code == 201
        asset_id = response.json()["deliverables"][0]["id"]

        await async_client.put(f"{admin_order_url}/status", json={"status": "Delivered"}, headers=auth_headers(test_admin))

        deliverables = (await async_client.get(f"{API}/deliverables", headers=auth_headers(test_agent))).json()
        assert deliverables[0]["status"] == "Delivered"
        assert deliverables[0]["deliverables"][0]["url"] == "https://media.example.com/aerials.zip"

        drone_only = await async_client.get(f"{API}/deliverables?type=photo", headers=auth_headers(test_agent))
        assert drone_only.json() == []

        response = await async_client.delete(f"{admin_order_url}/assets/{asset_id}", headers=auth_headers(test_admin))
        assert response.status_code == 200
        assert response.json()["deliverables"] == []

    async def test_declined_payment(self, async_client, test_agent, test_property, test_card, stripe):
        stripe.decline("Your card was declined.")

        response = await create_order(async_client, test_agent, test_property.id, test_card.id)

        assert response.status_code == 402
        assert response.json()["error"]["code"] == "PAYMENT_FAILED"
        listed = (await async_client.get(f"{API}/orders", headers=auth_headers(test_agent))).json()
        assert listed["total"] == 0

    async def test_draft_order(self, async_client, test_agent, test_property):
        response = await async_client.post(f"{API}/orders", json={
            "property_id": str(test_property.id),
            "services": [PHOTO],
            "save_as_draft": True
        }, headers=auth_headers(test_agent))

        assert response.status_code == 201
        assert response.json()["status"] == "Draft"

    async def test_order_requires_payment_or_draft(self, async_client, test_agent, test_property):
        response = await async_client.post(f"{API}/orders", json={
            "property_id": str(test_property.id),
            "services": [PHOTO]
        }, headers=auth_headers(test_agent))

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_status_filter_uses_latest_status(self, async_client, test_agent, test_admin, test_property, test_card):
        order = (await create_order(async_client, test_agent, test_property.id, test_card.id)).json()
        await async_client.put(
            f"{API}/admin/orders/{order['id']}/status",
            json={"status": "Editing"},
            headers=auth_headers(test_admin)
        )

        editing = await async_client.get(f"{API}/orders?status=Editing", headers=auth_headers(test_agent))
        scheduled = await async_client.get(f"{API}/orders?status=Scheduled", headers=auth_headers(test_agent))

        assert editing.json()["total"] == 1
        assert scheduled.json()["total"] == 0

    async def test_other_customers_order_is_forbidden(
        self, async_client, test_agent, other_agent, test_property, test_card
    ):
        order = (await create_order(async_client, test_agent, test_property.id, test_card.id)).json()
        response = await async_client.get(f"{API}/orders/{order['id']}", headers=auth_headers(other_agent))
        assert response.status_code == 403

    async def test_quote(self, async_client, test_agent):
        response = await async_client.post(
            f"{API}/services/quote",
            json={"services": [PHOTO, DRONE]},
            headers=auth_headers(test_agent)
        )
        assert response.status_code == 200
        assert response.json()["total"] == 621.5


class TestCustomerPages:

    async def test_dashboard_and_calendar(self, async_client, test_agent, test_property, test_card):
        await create_order(async_client, test_agent, test_property.id, test_card.id)

        dashboard = (await async_client.get(f"{API}/dashboard", headers=auth_headers(test_agent))).json()
        assert dashboard["upcoming_shoots"] == 1
        assert dashboard["total_properties"] == 1

        response = await async_client.get(
            f"{API}/calendar?year=2024&month=6&date=2024-06-10",
            headers=auth_headers(test_agent)
        )
        calendar = response.json()
        assert calendar["first_weekday"] == 6
        assert len(calendar["selected_orders"]) == 1

    async def test_billing(self, async_client, test_agent, test_property):
        headers = auth_headers(test_agent)
        card = {"gateway_reference": "pm_card_visa", "brand": "visa", "last4": "4242", "exp_month": 4, "exp_year": 2031}

        first = (await async_client.post(f"{API}/billing/payment-methods", json=card, headers=headers)).json()
        second = (await async_client.post(
            f"{API}/billing/payment-methods",
            json={**card, "last4": "5555", "brand": "mastercard"},
            headers=headers
        )).json()
        assert first["is_default"] is True
        assert second["is_default"] is False

        response = await async_client.delete(f"{API}/billing/payment-methods/{first['id']}", headers=headers)
        assert response.status_code == 400

        response = await async_client.post(f"{API}/billing/payment-methods/{second['id']}/default", headers=headers)
        assert response.json()["is_default"] is True

        response = await async_client.delete(f"{API}/billing/payment-methods/{first['id']}", headers=headers)
        assert response.status_code == 204

        await create_order(async_client, test_agent, test_property.id, second["id"])
        summary = (await async_client.get(f"{API}/billing", headers=headers)).json()
        assert summary["paid_count"] == 1
        assert summary["total_spent"] == 621.5
        assert summary["invoices"][0]["tax"] == 71.5

    async def test_support_messages(self, async_client, test_agent, test_admin):
        response = await async_client.post(
            f"{API}/messages",
            json={"content": "Is the drone shoot weather dependent?"},
            headers=auth_headers(test_agent)
        )
        assert response.status_code == 201

        inbox = (await async_client.get(f"{API}/admin/conversations", headers=auth_headers(test_admin))).json()
        assert inbox[0]["unread_count"] == 1
        customer_id = inbox[0]["customer_id"]

        response = await async_client.post(
            f"{API}/admin/conversations/{customer_id}/messages",
            json={"content": "Yes, we reschedule for rain."},
            headers=auth_headers(test_admin)
        )
        assert response.status_code == 201

        messages = (await async_client.get(f"{API}/messages", headers=auth_headers(test_agent))).json()
        assert [m["is_admin"] for m in messages] == [False, True]


class TestStaffConsole:

    async def test_bookings(self, async_client, test_agent, test_admin, test_property, test_card):
        await create_order(async_client, test_agent, test_property.id, test_card.id)
        await create_order(async_client, test_agent, test_property.id, test_card.id, shoot_date="2024-06-02")

        response = await async_client.get(f"{API}/admin/bookings?filter=scheduled", headers=auth_headers(test_admin))
        bookings = response.json()
        assert bookings["scheduled_count"] == 2
        assert [g["date"] for g in bookings["groups"]] == ["2024-06-02", "2024-06-10"]

        response = await async_client.get(f"{API}/admin/bookings?filter=cancelled", headers=auth_headers(test_admin))
        assert response.status_code == 422

    async def test_service_pricing(self, async_client, test_agent, test_admin):
        response = await async_client.post(f"{API}/admin/services", json={
            "name": "Twilight Photography",
            "base_price": 275,
            "description": "Dusk exterior shots"
        }, headers=auth_headers(test_admin))
        assert response.status_code == 201
        service_id = response.json()["id"]

        response = await async_client.post(f"{API}/admin/services/{service_id}/toggle", headers=auth_headers(test_admin))
        assert response.json()["is_active"] is False

        names = [s["name"] for s in (await async_client.get(f"{API}/services", headers=auth_headers(test_agent))).json()]
        assert "Twilight Photography" not in names

    async def test_admin_dashboard(self, async_client, test_agent, test_admin, test_property, test_card):
        await create_order(async_client, test_agent, test_property.id, test_card.id)
        dashboard = (await async_client.get(f"{API}/admin/dashboard", headers=auth_headers(test_admin))).json()
        assert dashboard["pending_orders"] == 1
        assert dashboard["total_revenue"] == 550.0

    async def test_override_stats(self, async_client, test_agent, test_admin, test_property, test_card):
        order = (await create_order(async_client, test_agent, test_property.id, test_card.id)).json()
        await async_client.put(
            f"{API}/admin/orders/{order['id']}/payment-status",
            json={"payment_status": "confirmed"},
            headers=auth_headers(test_admin)
        )

        stats = (await async_client.get(f"{API}/monitoring/overrides", headers=auth_headers(test_admin))).json()
        assert stats["policy"] == "override_wins"
        assert stats["entries"]["payment_status"] == 1


class TestErrorResponses:

    async def test_not_found_envelope(self, async_client, test_agent):
        response = await async_client.get(
            f"{API}/orders/00000000-0000-0000-0000-000000000000",
            headers=auth_headers(test_agent)
        )
        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "NOT_FOUND"
        assert error["request_id"] == response.headers["X-Request-ID"]

    async def test_path_validation(self, async_client, test_agent):
        response = await async_client.get(f"{API}/orders/not-a-uuid", headers=auth_headers(test_agent))
        assert response.status_code == 422
        assert response.json()["error"]["details"]

    async def test_json_content_type_required(self, async_client, test_agent):
        response = await async_client.post(
            f"{API}/messages",
            content="content=hello",
            headers={**auth_headers(test_agent), "Content-Type": "application/x-www-form-urlencoded"}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BAD_REQUEST"

    async def test_health(self, async_client):
        response = await async_client.get(f"{API}/monitoring/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Processing-Time" in response.headers

    async def test_health_reports_database_outage(self, async_client):
        with patch("portal.routers.monitoring.test_database_connection", AsyncMock(return_value=False)):
            response = await async_client.get(f"{API}/monitoring/health")

        assert response.status_code == 503
        error = response.json()["error"]
        assert error["code"] == "SERVICE_UNAVAILABLE"
        assert error["message"] == "Database is unreachable"

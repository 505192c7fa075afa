from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from app.services.email_service import EmailService
from tests.fixtures import bearer


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    mock = AsyncMock(return_value=True)
    monkeypatch.setattr(EmailService, "send_email", mock)
    return mock


class TestCheckoutEndpoints:
    """Integration tests for checkout, order processing and subscription endpoints."""

    async def test_requires_authentication(self, client: AsyncClient, scholar_plan):
        response = await client.get(f"/checkout/{scholar_plan.id}?option=1%20Month")
        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "UNAUTHORIZED"

    async def test_invalid_token(self, client: AsyncClient, scholar_plan):
        response = await client.get(
            f"/checkout/{scholar_plan.id}?option=1%20Month", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == 401

    async def test_missing_option_redirects_to_pricing(self, client: AsyncClient, free_plan, scholar_plan):
        response = await client.get(f"/checkout/{scholar_plan.id}", headers=bearer("buyer-1"))
        assert response.status_code == 400
        assert response.json()["error"]["details"] == {"redirectTo": "/pricing"}

    @pytest.mark.parametrize("plan_id", ["not-a-plan", "00000000-0000-0000-0000-000000000000"])
    async def test_malformed_or_unknown_plan_redirects_to_pricing(self, client: AsyncClient, free_plan, plan_id):
        for response in (
            await client.get(f"/checkout/{plan_id}?option=1%20Month", headers=bearer("buyer-1")),
            await client.post(
                f"/checkout/{plan_id}/discount", json={"option": "1 Month", "code": "SAVE200"}, headers=bearer("buyer-1")
            ),
        ):
            assert response.status_code == 404
            assert response.json()["error"]["details"] == {"redirectTo": "/pricing"}

    async def test_unpublished_plan_redirects_to_pricing(self, client: AsyncClient, test_db, free_plan, scholar_plan):
        plan_id = scholar_plan.id
        scholar_plan.published = False
        await test_db.commit()

        response = await client.get(f"/checkout/{plan_id}?option=1%20Month", headers=bearer("buyer-1"))
        assert response.status_code == 404
        assert response.json()["error"]["details"] == {"redirectTo": "/pricing"}

    async def test_unknown_option_redirects_to_pricing(self, client: AsyncClient, free_plan, scholar_plan):
        response = await client.get(f"/checkout/{scholar_plan.id}?option=2%20Years", headers=bearer("buyer-1"))
        assert response.status_code == 404
        assert response.json()["error"]["details"] == {"redirectTo": "/pricing"}

    async def test_current_plan_cannot_be_bought_again(self, client: AsyncClient, free_plan):
        response = await client.get(f"/checkout/{free_plan.id}?option=Lifetime", headers=bearer("buyer-1"))
        assert response.status_code == 409
        assert response.json()["error"]["details"] == {"redirectTo": "/account/subscription"}

    async def test_summary(self, client: AsyncClient, free_plan, scholar_plan, bank_method):
        response = await client.get(f"/checkout/{scholar_plan.id}?option=1%20Month", headers=bearer("buyer-1"))
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["option"]["label"] == "1 Month"
        assert data["breakdown"] == {"original_price": 1200.0, "discount_amount": 0.0, "final_amount": 1200.0}
        assert [m["name"] for m in data["payment_methods"]] == ["Bank Transfer"]

    async def test_discount_check_reports_rejections_inline(self, client: AsyncClient, free_plan, scholar_plan):
        response = await client.post(
            f"/checkout/{scholar_plan.id}/discount",
            json={"option": "1 Month", "code": "BOGUS"},
            headers=bearer("buyer-1"),
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["success"] is False
        assert data["message"] == "This coupon code is not valid."
        assert data["breakdown"]["final_amount"] == 1200.0

    async def test_purchase_with_coupon_then_activation(
        self, client: AsyncClient, free_plan, scholar_plan, bank_method, save200, admin, sent_emails
    ):
        buyer = bearer("buyer-1", email="buyer@example.com")

        check = await client.post(
            f"/checkout/{scholar_plan.id}/discount",
            json={"option": "1 Month", "code": "save200"},
            headers=buyer,
        )
        assert check.json()["data"]["breakdown"] == {
            "original_price": 1200.0,
            "discount_amount": 200.0,
            "final_amount": 1000.0,
        }

        confirm = await client.post(
            f"/checkout/{scholar_plan.id}/confirm",
            json={"option": "1 Month", "payment_method_id": str(bank_method.id), "code": "SAVE200"},
            headers=buyer,
        )
        assert confirm.status_code == 201
        order = confirm.json()["data"]["order"]
        assert order["status"] == "pending"
        assert order["final_amount"] == 1000.0
        assert order["discount_code"] == "SAVE200"
        assert sent_emails.await_args.args[1:3] == ("order-confirmation", "buyer@example.com")

        # Buyers cannot process their own orders
        forbidden = await client.post(
            f"/admin/orders/{order['id']}/process", json={"status": "completed"}, headers=buyer
        )
        assert forbidden.status_code == 403

        processed = await client.post(
            f"/admin/orders/{order['id']}/process", json={"status": "completed"}, headers=bearer(admin.id)
        )
        assert processed.status_code == 200
        assert processed.json()["data"]["status"] == "completed"

        me = await client.get("/subscriptions/me", headers=buyer)
        data = me.json()["data"]
        assert data["plan"]["name"] == "Scholar"
        assert data["current"]["order_id"] == order["id"]
        assert data["is_expired"] is False

        history = await client.get("/subscriptions/history", headers=buyer)
        assert [r["status"] for r in history.json()["data"]] == ["current", "expired"]

    async def test_confirm_rejects_an_invalid_coupon(self, client: AsyncClient, free_plan, scholar_plan, bank_method):
        response = await client.post(
            f"/checkout/{scholar_plan.id}/confirm",
            json={"option": "1 Month", "payment_method_id": str(bank_method.id), "code": "BOGUS"},
            headers=bearer("buyer-1"),
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "This coupon code is not valid."

    async def test_request_validation_envelope(self, client: AsyncClient, free_plan, scholar_plan):
        response = await client.post(
            f"/checkout/{scholar_plan.id}/confirm",
            json={"option": "1 Month", "payment_method_id": "not-a-uuid"},
            headers=bearer("buyer-1"),
        )
        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["field"] == "payment_method_id"

    async def test_admin_plan_change_rejects_current_as_superseded_status(
        self, client: AsyncClient, free_plan, scholar_plan, admin
    ):
        buyer = bearer("buyer-2")
        assert (await client.get("/subscriptions/me", headers=buyer)).status_code == 200

        response = await client.post(
            "/admin/users/buyer-2/subscription",
            json={"plan_id": str(scholar_plan.id), "superseded_status": "current"},
            headers=bearer(admin.id),
        )
        assert response.status_code == 422
        assert response.json()["error"]["details"][0]["field"] == "superseded_status"

        history = await client.get("/subscriptions/history", headers=buyer)
        assert [r["status"] for r in history.json()["data"]] == ["current"]

        cancelled = await client.post(
            "/admin/users/buyer-2/subscription",
            json={"plan_id": str(scholar_plan.id), "superseded_status": "cancelled"},
            headers=bearer(admin.id),
        )
        assert cancelled.status_code == 200
        history = await client.get("/subscriptions/history", headers=buyer)
        assert [r["status"] for r in history.json()["data"]] == ["current", "cancelled"]

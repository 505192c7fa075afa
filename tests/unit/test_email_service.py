from unittest.mock import AsyncMock

import pytest

from app.core.config import settings
from app.services.email_service import EmailService, render_template


class TestRenderTemplate:
    def test_placeholders(self):
        text = render_template("Hi {{ userName }}, order {{orderId}} {{missing}}", {"userName": "Ali", "orderId": 7})
        assert text == "Hi Ali, order 7 {{missing}}"

    def test_values_are_escaped_for_html(self):
        body = render_template("<p>Hi {{userName}}</p>", {"userName": '<script>alert("x")</script>'}, escape_html=True)
        assert body == "<p>Hi &lt;script&gt;alert(&quot;x&quot;)&lt;/script&gt;</p>"

    def test_subjects_are_left_as_text(self):
        assert render_template("Order for {{userName}}", {"userName": "Tom & Jerry"}) == "Order for Tom & Jerry"


class TestSendEmail:
    @pytest.fixture
    def delivered(self, monkeypatch):
        monkeypatch.setattr(settings, "EMAIL_API_KEY", "test-key")
        mock = AsyncMock(return_value=True)
        monkeypatch.setattr(EmailService, "_deliver", mock)
        return mock

    async def test_body_escapes_user_values(self, test_db, delivered):
        sent = await EmailService.send_email(
            test_db, "order-activated", "buyer@example.com", {"userName": "<b>Eve</b>", "planName": "Scholar"}
        )

        assert sent
        _, to, subject, body = delivered.await_args.args
        assert to == "buyer@example.com"
        assert subject == "Your Scholar plan is now active"
        assert "Hi &lt;b&gt;Eve&lt;/b&gt;," in body
        assert "<b>Eve</b>" not in body

    async def test_disabled_template_is_skipped(self, test_db, delivered):
        template = await EmailService.get_template(test_db, "order-activated")
        template.is_enabled = False
        await test_db.commit()

        assert not await EmailService.send_email(test_db, "order-activated", "buyer@example.com", {})
        delivered.assert_not_awaited()

    async def test_unconfigured_provider_is_skipped(self, test_db, delivered, monkeypatch):
        monkeypatch.setattr(settings, "EMAIL_API_KEY", "")
        assert not await EmailService.send_email(test_db, "order-activated", "buyer@example.com", {})
        delivered.assert_not_awaited()

from httpx import AsyncClient

from tests.fixtures import SAMPLE_CONTACT, bearer


class TestSupportEndpoints:
    """Integration tests for the contact form and ticket threads."""

    async def test_anonymous_contact(self, client: AsyncClient):
        response = await client.post("/support/contact", json=SAMPLE_CONTACT)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "open"
        assert data["user_id"] is None

    async def test_topic_selects_the_required_fields(self, client: AsyncClient):
        response = await client.post("/support/contact", json={**SAMPLE_CONTACT, "topic": "Request a Paper"})
        assert response.status_code == 422

        response = await client.post(
            "/support/contact",
            json={**SAMPLE_CONTACT, "topic": "Request a Paper", "paper_title": "Chemistry 2019", "year": 2019},
        )
        assert response.status_code == 201
        assert response.json()["data"]["details"] == {"paper_title": "Chemistry 2019", "year": 2019}

    async def test_unknown_topic(self, client: AsyncClient):
        response = await client.post("/support/contact", json={**SAMPLE_CONTACT, "topic": "Billing"})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_ticket_thread(self, client: AsyncClient, free_plan, admin):
        student = bearer("student-9", name="Student Nine")
        created = await client.post("/support/contact", json=SAMPLE_CONTACT, headers=student)
        ticket_id = created.json()["data"]["id"]
        assert created.json()["data"]["user_id"] == "student-9"

        mine = await client.get("/support/tickets", headers=student)
        assert [t["id"] for t in mine.json()["data"]] == [ticket_id]

        reply = await client.post(
            f"/admin/support/{ticket_id}/replies",
            json={"message": "Looking into it", "client_ref": "r-1"},
            headers=bearer(admin.id),
        )
        assert reply.status_code == 201
        assert reply.json()["data"]["client_ref"] == "r-1"
        assert reply.json()["data"]["status"] == "replied"

        answer = await client.post(
            f"/support/tickets/{ticket_id}/replies", json={"message": "Thank you"}, headers=student
        )
        assert answer.json()["data"]["status"] == "open"
        assert answer.json()["data"]["reply"]["author_name"] == "Student Nine"

        closed = await client.patch(
            f"/admin/support/{ticket_id}/status", json={"status": "closed"}, headers=bearer(admin.id)
        )
        assert closed.json()["data"]["status"] == "closed"

        late = await client.post(f"/support/tickets/{ticket_id}/replies", json={"message": "One more"}, headers=student)
        assert late.status_code == 409

    async def test_other_users_cannot_read_a_ticket(self, client: AsyncClient, free_plan):
        created = await client.post("/support/contact", json=SAMPLE_CONTACT, headers=bearer("student-9"))
        ticket_id = created.json()["data"]["id"]

        response = await client.get(f"/support/tickets/{ticket_id}", headers=bearer("student-10"))
        assert response.status_code == 403

    async def test_admin_inbox_requires_admin(self, client: AsyncClient, free_plan):
        response = await client.get("/admin/support", headers=bearer("student-9"))
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

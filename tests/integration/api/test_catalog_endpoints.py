from httpx import AsyncClient

from tests.fixtures import bearer


class TestCatalogEndpoints:
    """Integration tests for categories, papers, questions and plans."""

    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["data"]["database"] == "healthy"

    async def test_paper_publishing_flow(self, client: AsyncClient, admin):
        admin_headers = bearer(admin.id)

        root = await client.post("/admin/categories", json={"name": "Matric", "slug": "matric"}, headers=admin_headers)
        assert root.status_code == 201
        root_id = root.json()["data"]["id"]
        child = await client.post(
            "/admin/categories",
            json={"name": "Physics", "slug": "physics", "parent_id": root_id},
            headers=admin_headers,
        )
        child_id = child.json()["data"]["id"]

        by_slug = await client.get("/categories/by-slug/matric/physics")
        assert by_slug.json()["data"]["id"] == child_id

        paper = await client.post(
            "/admin/papers",
            json={"title": "Physics 2023", "category_id": child_id},
            headers=admin_headers,
        )
        assert paper.status_code == 201
        paper_data = paper.json()["data"]
        assert paper_data["slug"] == "physics-2023"
        assert paper_data["published"] is False

        # Drafts are hidden from the public
        assert (await client.get(f"/papers/{paper_data['id']}")).status_code == 404
        assert (await client.get(f"/papers?category_id={root_id}")).json()["data"] == []
        assert (await client.get(f"/papers/{paper_data['id']}", headers=admin_headers)).status_code == 200

        await client.patch(f"/admin/papers/{paper_data['id']}", json={"published": True}, headers=admin_headers)
        listed = await client.get(f"/papers?category_id={root_id}")
        assert [p["slug"] for p in listed.json()["data"]] == ["physics-2023"]
        assert (await client.get("/papers/by-slug/physics-2023")).status_code == 200

    async def test_question_links(self, client: AsyncClient, admin):
        admin_headers = bearer(admin.id)
        category = await client.post("/admin/categories", json={"name": "Matric", "slug": "matric"}, headers=admin_headers)
        paper = await client.post(
            "/admin/papers",
            json={"title": "Maths", "category_id": category.json()["data"]["id"]},
            headers=admin_headers,
        )
        paper_id = paper.json()["data"]["id"]

        question = await client.post(
            "/admin/questions",
            json={"question_text": "2 + 2?", "type": "mcq", "options": ["3", "4"], "correct_answer": "4"},
            headers=admin_headers,
        )
        assert question.status_code == 201
        question_id = question.json()["data"]["id"]

        linked = await client.post(f"/admin/papers/{paper_id}/questions/{question_id}", headers=admin_headers)
        assert linked.status_code == 200
        link_id = linked.json()["data"][0]["link_id"]

        removed = await client.post(
            f"/admin/papers/{paper_id}/questions/remove", json={"link_ids": [link_id]}, headers=admin_headers
        )
        assert removed.json()["data"] == {"removed": 1}

    async def test_invalid_mcq_answer(self, client: AsyncClient, admin):
        response = await client.post(
            "/admin/questions",
            json={"question_text": "2 + 2?", "type": "mcq", "options": ["3", "5"], "correct_answer": "4"},
            headers=bearer(admin.id),
        )
        assert response.status_code == 422

    async def test_public_plans_hide_drafts(self, client: AsyncClient, free_plan, scholar_plan, admin):
        draft = await client.post(
            "/admin/plans",
            json={
                "name": "Draft",
                "pricing_options": [{"label": "1 Month", "price": 1, "months": 1}],
                "published": False,
            },
            headers=bearer(admin.id),
        )
        assert draft.status_code == 201

        public = await client.get("/plans")
        assert [p["name"] for p in public.json()["data"]] == [free_plan.name, "Scholar"]
        assert (await client.get(f"/plans/{draft.json()['data']['id']}")).status_code == 404

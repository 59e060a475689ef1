"""API tests for workflow documents."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

WORKFLOWS_URL = "/api/v1/workflows"


class TestWorkflowsApi:
    """Test workflow document create, get and list."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, async_client: AsyncClient, linear_document, office_id):
        response = await async_client.post(
            WORKFLOWS_URL,
            json={
                "officeId": str(office_id),
                "name": "  Weekly report  ",
                **linear_document,
            },
        )

        assert response.status_code == 201
        created = response.json()
        assert created["name"] == "Weekly report"
        assert created["office_id"] == str(office_id)
        assert created["is_active"] is True
        assert created["version"] == 1
        assert [node["id"] for node in created["nodes"]] == ["start", "task-1", "end"]

        fetched = await async_client.get(f"{WORKFLOWS_URL}/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["edges"] == linear_document["edges"]

    @pytest.mark.asyncio
    async def test_create_requires_name(self, async_client: AsyncClient, office_id):
        response = await async_client.post(
            WORKFLOWS_URL,
            json={"officeId": str(office_id), "name": ""},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_get_unknown(self, async_client: AsyncClient):
        response = await async_client.get(f"{WORKFLOWS_URL}/{uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"detail": "Workflow not found"}

    @pytest.mark.asyncio
    async def test_list_filters_by_office(
        self, async_client: AsyncClient, workflow_factory, linear_document, office_id
    ):
        await workflow_factory(**linear_document, name="One")
        await workflow_factory(**linear_document, name="Two")
        await async_client.post(
            WORKFLOWS_URL,
            json={"officeId": str(uuid4()), "name": "Elsewhere", "is_active": False},
        )

        mine = (
            await async_client.get(WORKFLOWS_URL, params={"office_id": str(office_id)})
        ).json()
        assert mine["total"] == 2
        assert {item["name"] for item in mine["items"]} == {"One", "Two"}

        inactive = (await async_client.get(WORKFLOWS_URL, params={"is_active": False})).json()
        assert inactive["total"] == 1
        assert inactive["items"][0]["name"] == "Elsewhere"

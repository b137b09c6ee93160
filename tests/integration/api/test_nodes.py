"""
Integration tests for node endpoints.
"""

import pytest
import pytest_asyncio


@pytest_asyncio.fixture
async def version_path(async_client, document_id, version_payload):
    await async_client.post(f"/api/{document_id}/versions", json=version_payload)
    return f"/api/{document_id}/versions/1700000000"


@pytest_asyncio.fixture
async def node_path(async_client, version_path):
    path = f"{version_path}/nodes/n1"
    await async_client.post(
        f"{path}/create", json={"x": 1, "y": 2, "rotation": 0, "width": 10, "height": 20}
    )
    return path


class TestCreateNode:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_node(self, async_client, version_path):
        response = await async_client.post(f"{version_path}/nodes/n1/create", json={"x": 3, "y": 4})

        assert response.status_code == 201
        assert response.json()["node"] == {"x": 3, "y": 4}

        response = await async_client.get(f"{version_path}/nodes")
        assert response.json()["nodes"] == {"n1": {"x": 3, "y": 4}}

    @pytest.mark.api
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{"x": 1}, {"x": "1", "y": 2}, {"x": 1.5, "y": 2}, {"x": True, "y": 2}],
    )
    async def test_create_node_rejects_bad_coordinates(self, async_client, version_path, body):
        response = await async_client.post(f"{version_path}/nodes/n1/create", json=body)

        assert response.status_code == 400

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_node_missing_version(self, async_client, document_id, version_path):
        response = await async_client.post(
            f"/api/{document_id}/versions/1/nodes/n1/create", json={"x": 1, "y": 2}
        )

        assert response.status_code == 404


class TestUpdateNode:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_update_x_only(self, async_client, node_path):
        response = await async_client.post(f"{node_path}/x", json={"x": 50})

        assert response.status_code == 200
        data = response.json()
        assert data["x"] == 50
        assert data["node"] == {"x": 50, "y": 2, "rotation": 0, "width": 10, "height": 20}

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_update_position(self, async_client, node_path):
        response = await async_client.post(f"{node_path}/xy", json={"x": 7, "y": 8})

        node = response.json()["node"]
        assert (node["x"], node["y"], node["width"]) == (7, 8, 10)

    @pytest.mark.api
    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["y", "rotation", "width", "height"])
    async def test_single_field_routes(self, async_client, node_path, field):
        response = await async_client.post(f"{node_path}/{field}", json={field: 99})

        assert response.status_code == 200
        assert response.json()["node"][field] == 99

        fetched = (await async_client.get(node_path)).json()["node"]
        assert fetched[field] == 99
        assert fetched["x"] == 1

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_partial_update(self, async_client, node_path):
        response = await async_client.post(node_path, json={"width": 11, "height": 12})

        assert response.status_code == 200
        assert response.json()["node"]["width"] == 11
        assert response.json()["node"]["x"] == 1

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, async_client, node_path):
        response = await async_client.post(node_path, json={})

        assert response.status_code == 400

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_update_missing_node(self, async_client, version_path):
        response = await async_client.post(f"{version_path}/nodes/ghost/x", json={"x": 1})

        assert response.status_code == 404
        assert response.json()["message"] == "Node not found"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_update_keeps_version_metadata(self, async_client, node_path, version_path, version_payload):
        await async_client.post(f"{node_path}/y", json={"y": 5})

        version = (await async_client.get(version_path)).json()["version"]
        assert version["title"] == version_payload["title"]

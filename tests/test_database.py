"""Tests for asset database implementations."""
import json

import httpx
import pytest

from asset_uploader.models import Asset
from asset_uploader.services.api_client import AssetAPIError, HTTPAPIClient
from asset_uploader.services.database import HTTPAssetDatabase, InMemoryAssetDatabase


def _asset(**overrides) -> Asset:
    values = dict(
        id="asset-1",
        url="https://cdn.test/assets/folder1/example.txt",
        path="folder1/example.txt",
        encoded_path="assets%2Ffolder1%2Fexample.txt",
        total_size=13,
    )
    values.update(overrides)
    return Asset(**values)


class TestInMemoryAssetDatabase:
    @pytest.mark.asyncio
    async def test_existence_keyed_on_full_path(self):
        db = InMemoryAssetDatabase()
        await db.save_to_database([_asset()])

        assert await db.does_asset_path_already_exist("assets/folder1/example.txt") is True
        assert await db.does_asset_path_already_exist("folder1/example.txt") is False
        assert db.get_assets() == [_asset()]

    @pytest.mark.asyncio
    async def test_preloaded_paths(self):
        db = InMemoryAssetDatabase(existing_paths=["assets/a.txt"])
        assert await db.does_asset_path_already_exist("assets/a.txt") is True
        assert db.get_assets() == []


class TestHTTPAssetDatabase:
    @pytest.mark.asyncio
    async def test_save_posts_batch(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(201, json={"saved": 1})

        async with HTTPAPIClient("http://datastore.test", transport=httpx.MockTransport(handler)) as api:
            await HTTPAssetDatabase(api).save_to_database([_asset()])

        [request] = requests
        assert request.method == "POST"
        assert request.url.path == "/assets/batch"
        body = json.loads(request.content)
        assert body == {"assets": [_asset().to_dict()]}

    @pytest.mark.asyncio
    async def test_exists_queries_path(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.params["path"])
            return httpx.Response(200, json={"exists": True})

        async with HTTPAPIClient("http://datastore.test", transport=httpx.MockTransport(handler)) as api:
            exists = await HTTPAssetDatabase(api).does_asset_path_already_exist("assets/a b.txt")

        assert exists is True
        assert seen == ["assets/a b.txt"]

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, json={"error": "unavailable"})

        async with HTTPAPIClient("http://datastore.test", transport=httpx.MockTransport(handler)) as api:
            with pytest.raises(AssetAPIError) as exc_info:
                await HTTPAssetDatabase(api).does_asset_path_already_exist("assets/a.txt")

        assert exc_info.value.status_code == 503
        assert exc_info.value.detail == {"error": "unavailable"}
        assert "GET /assets/exists" in str(exc_info.value)


@pytest.mark.asyncio
async def test_api_client_requires_context():
    client = HTTPAPIClient("http://datastore.test")
    with pytest.raises(RuntimeError, match="async with"):
        await client.get("/assets/exists")


@pytest.mark.asyncio
async def test_api_client_text_error_detail():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text="bad request")

    async with HTTPAPIClient("http://datastore.test", transport=httpx.MockTransport(handler)) as api:
        with pytest.raises(AssetAPIError) as exc_info:
            await api.post("/assets/batch", json={"assets": []})

    assert exc_info.value.detail == "bad request"
    assert exc_info.value.method == "POST"

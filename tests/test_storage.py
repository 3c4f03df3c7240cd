"""Tests for storage backends."""
import json
from pathlib import Path

import httpx
import pytest
from blake3 import blake3

from asset_uploader.models import StorageFile
from asset_uploader.protocols import IMediaStorage
from asset_uploader.services.api_client import AssetAPIError, HTTPAPIClient
from asset_uploader.services.hashing import blake3_bytes, integrity_token
from asset_uploader.services.storage import HTTPMediaStorage, LocalMediaStorage


def _file(**overrides) -> StorageFile:
    values = dict(
        name="folder1/example.txt",
        mimetype="text/plain",
        data=b"Hello, World!",
        uri="assets/folder1/example.txt",
    )
    values.update(overrides)
    return StorageFile(**values)


@pytest.mark.asyncio
async def test_hashing_helpers():
    digest = blake3(b"abc").hexdigest()
    assert await blake3_bytes(b"abc") == digest
    assert await integrity_token(b"abc") == f"blake3-{digest}"


class TestLocalMediaStorage:
    def test_implements_protocol(self, tmp_path):
        assert isinstance(LocalMediaStorage(tmp_path), IMediaStorage)

    @pytest.mark.asyncio
    async def test_writes_object_under_uri(self, tmp_path):
        storage = LocalMediaStorage(tmp_path / "store")

        result = await storage.upload_file(_file(), upload_path="assets", parent_path_ids=[])

        target = tmp_path / "store" / "assets" / "folder1" / "example.txt"
        assert target.read_bytes() == b"Hello, World!"
        assert result.url == target.resolve().as_uri()
        assert result.download_url == result.url
        assert result.key is None
        assert result.integrity == f"blake3-{blake3(b'Hello, World!').hexdigest()}"

    @pytest.mark.asyncio
    async def test_public_url(self, tmp_path):
        storage = LocalMediaStorage(tmp_path, public_url="https://cdn.test/")

        result = await storage.upload_file(
            _file(uri="assets/my file.txt"), upload_path="assets", parent_path_ids=["ignored"]
        )

        assert result.url == "https://cdn.test/assets/my%20file.txt"
        assert (tmp_path / "assets" / "my file.txt").exists()

    @pytest.mark.asyncio
    async def test_rejects_keys_escaping_root(self, tmp_path):
        storage = LocalMediaStorage(tmp_path / "store")

        with pytest.raises(ValueError, match="escapes storage root"):
            await storage.upload_file(_file(uri="../outside.txt"), upload_path="", parent_path_ids=[])

        assert not (tmp_path / "outside.txt").exists()


class TestHTTPMediaStorage:
    @pytest.mark.asyncio
    async def test_posts_multipart_and_parses_result(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            request.read()
            requests.append(request)
            return httpx.Response(
                200,
                json={
                    "url": "https://cdn.test/assets/folder1/example.txt",
                    "key": "obj-1",
                    "downloadUrl": "https://cdn.test/dl/obj-1",
                    "integrity": "md5-xyz",
                },
            )

        async with HTTPAPIClient(
            "http://storage.test",
            headers={"Authorization": "Bearer secret"},
            transport=httpx.MockTransport(handler),
        ) as api:
            storage = HTTPMediaStorage(api, "media")
            result = await storage.upload_file(
                _file(), upload_path="assets", parent_path_ids=["p1", "p2"]
            )

        assert result.key == "obj-1"
        assert result.download_url == "https://cdn.test/dl/obj-1"
        assert result.integrity == "md5-xyz"

        [request] = requests
        assert request.url.path == "/buckets/media/objects"
        assert request.headers["Authorization"] == "Bearer secret"
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        body = request.content
        assert b"Hello, World!" in body
        assert b"assets/folder1/example.txt" in body
        assert json.dumps(["p1", "p2"]).encode() in body

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"error": "forbidden"})

        async with HTTPAPIClient("http://storage.test", transport=httpx.MockTransport(handler)) as api:
            with pytest.raises(AssetAPIError) as exc_info:
                await HTTPMediaStorage(api, "bucket").upload_file(
                    _file(), upload_path="assets", parent_path_ids=[]
                )

        assert exc_info.value.status_code == 403

"""
Storage Service - Single Responsibility: write asset bytes to object storage.

Two backends implement the storage capability:
- LocalMediaStorage: objects written under a root directory
- HTTPMediaStorage: bucket-based object storage REST API
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import quote

from ..models import StorageFile, StorageResult
from .api_client import HTTPAPIClient
from .hashing import integrity_token

logger = logging.getLogger(__name__)


class LocalMediaStorage:
    """
    Storage backend writing objects to the local filesystem.

    The object key (uri) becomes the path under the root directory. No
    backend key is returned, so the uploader generates asset ids.
    """

    def __init__(self, root_dir: Union[str, Path], public_url: Optional[str] = None):
        """
        Initialize local storage.

        Args:
            root_dir: Directory holding stored objects (created on demand)
            public_url: URL prefix objects are served from; file URIs otherwise
        """
        self._root = Path(root_dir).expanduser().resolve()
        self._public_url = public_url.rstrip("/") if public_url else None

    @property
    def root(self) -> Path:
        return self._root

    def _target_path(self, uri: str) -> Path:
        target = (self._root / uri.lstrip("/")).resolve()
        if target != self._root and self._root not in target.parents:
            raise ValueError(f"Object key escapes storage root: {uri}")
        return target

    def _url_for(self, uri: str, target: Path) -> str:
        if self._public_url:
            return f"{self._public_url}/{quote(uri.lstrip('/'))}"
        return target.as_uri()

    async def upload_file(
        self,
        file: StorageFile,
        upload_path: str,
        parent_path_ids: List[str],
    ) -> StorageResult:
        target = self._target_path(file.uri or file.name)
        if parent_path_ids:
            logger.debug("Local storage ignores parent ids %s", parent_path_ids)

        def _write():
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(file.data)

        await asyncio.to_thread(_write)
        integrity = await integrity_token(file.data)
        url = self._url_for(file.uri or file.name, target)

        logger.info("[storage] Stored %s (%d bytes) in %s", file.name, len(file.data), upload_path or "/")
        return StorageResult(url=url, download_url=url, integrity=integrity)


class HTTPMediaStorage:
    """
    Storage backend for a bucket-based object storage API.

    Sends a multipart POST to /buckets/{bucket}/objects and expects
    {"url", "key"?, "downloadUrl"?, "integrity"?} back.
    """

    def __init__(self, api_client: HTTPAPIClient, bucket: str):
        """
        Initialize HTTP storage.

        Args:
            api_client: Entered HTTP client pointing at the storage API
            bucket: Target bucket name
        """
        self._api = api_client
        self._bucket = bucket

    @property
    def objects_endpoint(self) -> str:
        return f"/buckets/{quote(self._bucket, safe='')}/objects"

    async def upload_file(
        self,
        file: StorageFile,
        upload_path: str,
        parent_path_ids: List[str],
    ) -> StorageResult:
        response = await self._api.post_multipart(
            self.objects_endpoint,
            data={
                "uri": file.uri,
                "upload_path": upload_path,
                "parent_path_ids": json.dumps(list(parent_path_ids)),
            },
            files={"file": (file.name, file.data, file.mimetype)},
        )
        result = StorageResult.from_dict(response.json())
        logger.info("[storage] Uploaded %s to %s", file.name, result.url)
        return result

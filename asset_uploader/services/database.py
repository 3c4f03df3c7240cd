"""
Asset databases - implementations of the persistence capability.

InMemoryAssetDatabase keeps records in process (examples, tests, dry runs).
HTTPAssetDatabase persists records through a datastore REST API.
"""
from typing import Dict, List, Sequence
from urllib.parse import unquote
import logging

from ..models import Asset
from ..protocols import IAPIClient, IAssetDatabase

logger = logging.getLogger(__name__)


class InMemoryAssetDatabase(IAssetDatabase):
    """
    Append-only in-process asset store.

    Existence is keyed on the full asset path (folder + relative path),
    recovered from each record's encoded path.
    """

    def __init__(self, existing_paths: Sequence[str] = ()):
        self._assets: List[Asset] = []
        self._paths = set(existing_paths)
        self.saved_batches: List[List[Asset]] = []

    async def save_to_database(self, assets: Sequence[Asset]) -> None:
        batch = list(assets)
        self.saved_batches.append(batch)
        self._assets.extend(batch)
        self._paths.update(unquote(asset.encoded_path) for asset in batch)

    async def does_asset_path_already_exist(self, path: str) -> bool:
        return path in self._paths

    def get_assets(self) -> List[Asset]:
        return list(self._assets)


class HTTPAssetDatabase(IAssetDatabase):
    """
    Asset repository backed by the datastore API.

    Endpoints:
        POST /assets/batch            {"assets": [...]}
        GET  /assets/exists?path=...  -> {"exists": bool}
    """

    def __init__(self, api_client: IAPIClient):
        """
        Initialize repository.

        Args:
            api_client: HTTP client for API calls (already entered)
        """
        self._api = api_client

    async def save_to_database(self, assets: Sequence[Asset]) -> None:
        payload: Dict[str, list] = {"assets": [asset.to_dict() for asset in assets]}
        await self._api.post("/assets/batch", json=payload)
        logger.debug("Saved %d asset(s) to datastore", len(payload["assets"]))

    async def does_asset_path_already_exist(self, path: str) -> bool:
        response = await self._api.get("/assets/exists", params={"path": path})
        return bool(response.json().get("exists", False))

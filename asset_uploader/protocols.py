"""
Protocols (Interfaces) for Dependency Inversion.

The uploader only talks to its collaborators through these small interfaces,
so any database or storage backend (or an in-memory test double) can be injected.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Protocol, Sequence, runtime_checkable

from .models import Asset, StorageFile, StorageResult


@runtime_checkable
class IMediaStorage(Protocol):
    """Interface for object storage backends."""

    async def upload_file(
        self,
        file: StorageFile,
        upload_path: str,
        parent_path_ids: List[str],
    ) -> StorageResult:
        """Upload raw bytes and return the stored object's location."""
        ...


@runtime_checkable
class IAPIClient(Protocol):
    """Interface for API operations."""

    async def post(self, endpoint: str, json: Dict) -> Any:
        """POST request to API."""
        ...

    async def get(self, endpoint: str, params: Dict = None) -> Any:
        """GET request to API."""
        ...


class IAssetDatabase(ABC):
    """Interface for asset metadata persistence (Repository Pattern)."""

    @abstractmethod
    async def save_to_database(self, assets: Sequence[Asset]) -> None:
        """Append a batch of asset records."""
        pass

    @abstractmethod
    async def does_asset_path_already_exist(self, path: str) -> bool:
        """Check whether an asset is already recorded at this full path."""
        pass

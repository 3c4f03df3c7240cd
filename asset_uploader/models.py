"""
Models for asset_uploader module.

Immutable dataclasses describing payloads, storage results and persisted assets.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TypedDict


class SummaryEntry(TypedDict):
    """Per-file entry of a result summary."""
    url: str
    size: int


ResultSummary = Dict[str, SummaryEntry]


@dataclass(frozen=True)
class FileWithPath:
    """A file payload supplied by the caller."""
    name: str
    data: bytes
    mimetype: Optional[str] = None
    relative_path: Optional[str] = None  # relative to the base folder

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class UploadObject:
    """Normalized unit of work for a single asset upload."""
    asset_folder_name: str
    relative_path: str
    file_data: bytes
    mimetype: str
    parent_path_ids: Optional[List[str]] = None
    result_summary: Optional[ResultSummary] = None

    @property
    def asset_path(self) -> str:
        return f"{self.asset_folder_name}/{self.relative_path}"


@dataclass(frozen=True)
class FolderStats:
    """Count of files and cumulative byte size for one folder."""
    count: int = 0
    size: int = 0

    def add(self, size: int) -> "FolderStats":
        return FolderStats(count=self.count + 1, size=self.size + size)


@dataclass(frozen=True)
class StorageFile:
    """File description handed to the storage backend."""
    name: str
    mimetype: str
    data: bytes = field(repr=False)
    uri: str = ""


@dataclass(frozen=True)
class StorageResult:
    """Result returned by a storage backend after an upload."""
    url: str
    key: Optional[str] = None
    download_url: Optional[str] = None
    integrity: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StorageResult":
        if "url" not in data:
            raise ValueError(f"Storage response has no url: {data}")
        return cls(
            url=data["url"],
            key=data.get("key"),
            download_url=data.get("downloadUrl", data.get("download_url")),
            integrity=data.get("integrity"),
        )


@dataclass(frozen=True)
class Asset:
    """Persisted metadata record of one uploaded file."""
    id: str
    url: str
    path: str
    encoded_path: str
    download_url: Optional[str] = None
    expected_hash: Optional[str] = None
    total_size: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the datastore JSON payload."""
        return {
            "id": self.id,
            "path": self.path,
            "encodedPath": self.encoded_path,
            "url": self.url,
            "downloadUrl": self.download_url,
            "expectedHash": self.expected_hash,
            "totalSize": self.total_size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Asset":
        return cls(
            id=data["id"],
            url=data["url"],
            path=data["path"],
            encoded_path=data["encodedPath"],
            download_url=data.get("downloadUrl"),
            expected_hash=data.get("expectedHash"),
            total_size=data.get("totalSize"),
        )

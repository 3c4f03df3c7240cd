"""
Asset Uploader - uploads files to media storage and records them in a database.

Follows SOLID principles:
- Single Responsibility: uploader coordinates, collaborators do the I/O
- Dependency Injection: database and storage injected into the uploader
- Interface Segregation: small persistence and storage interfaces

Usage:
    from asset_uploader import AssetUploader, FileWithPath
    from asset_uploader.services import InMemoryAssetDatabase, LocalMediaStorage

    uploader = AssetUploader(InMemoryAssetDatabase(), LocalMediaStorage("./storage"))

    # Upload + record (skips paths already in the database)
    summary = await uploader.upload_multiple_assets_to_media_storage_and_db(
        [FileWithPath(name="example.txt", data=b"Hello, World!", relative_path="folder1/example.txt")],
        base_path="assets",
    )

    # Storage only (no dedup, no database)
    summary = await uploader.upload_multiple_files_to_media_storage_only(files, base_path="public")

    uploader.get_folder_summary()  # {"assets/folder1": FolderStats(count=1, size=13)}
"""
from .models import (
    Asset,
    FileWithPath,
    FolderStats,
    ResultSummary,
    StorageFile,
    StorageResult,
    SummaryEntry,
    UploadObject,
)
from .protocols import IAssetDatabase, IMediaStorage
from .uploader import AssetUploader

__version__ = "0.1.0"
__all__ = [
    # Main
    "AssetUploader",
    # Models
    "Asset",
    "FileWithPath",
    "FolderStats",
    "ResultSummary",
    "StorageFile",
    "StorageResult",
    "SummaryEntry",
    "UploadObject",
    # Interfaces
    "IAssetDatabase",
    "IMediaStorage",
]

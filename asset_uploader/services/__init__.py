"""Collaborator implementations for asset_uploader."""
from .api_client import AssetAPIError, HTTPAPIClient
from .database import HTTPAssetDatabase, InMemoryAssetDatabase
from .storage import HTTPMediaStorage, LocalMediaStorage

__all__ = [
    "AssetAPIError",
    "HTTPAPIClient",
    "HTTPAssetDatabase",
    "InMemoryAssetDatabase",
    "HTTPMediaStorage",
    "LocalMediaStorage",
]

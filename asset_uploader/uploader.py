"""
Asset Uploader - coordinates storage upload, metadata persistence and bookkeeping.

Flow for each asset:
1. Check the database for the full asset path → skip if already recorded
2. Upload raw bytes to the storage backend
3. Save one Asset record to the database
4. Update result summary and per-folder statistics

The existence check and the save are not atomic: concurrent callers (or a row
appearing after the check) can still produce duplicate uploads. A failed save
leaves the stored object in place; re-running the same batch skips every file
that was already recorded.
"""
import logging
from typing import Dict, List, Optional, Sequence, Union

from .models import (
    Asset,
    FileWithPath,
    FolderStats,
    ResultSummary,
    StorageFile,
    UploadObject,
)
from .protocols import IAssetDatabase, IMediaStorage
from .utils.paths import (
    encode_uri_component,
    folder_key,
    generate_asset_id,
    join_posix,
    resolve_mimetype,
    strip_leading_slash,
)

logger = logging.getLogger(__name__)

Files = Union[FileWithPath, Sequence[FileWithPath]]


def _as_list(files: Files) -> List[FileWithPath]:
    if isinstance(files, FileWithPath):
        return [files]
    return list(files)


class AssetUploader:
    """
    Uploads files to a media storage backend and records them in a database.

    Collaborators are injected, so tests can pass in-memory doubles.

    Usage:
        uploader = AssetUploader(InMemoryAssetDatabase(), LocalMediaStorage("./storage"))
        summary = await uploader.upload_multiple_assets_to_media_storage_and_db(
            files, base_path="assets"
        )
        stats = uploader.get_folder_summary()

    Not safe for concurrent use: callers must serialize operations on one instance.
    """

    def __init__(self, database: IAssetDatabase, storage: IMediaStorage):
        """
        Initialize uploader.

        Args:
            database: Persistence capability (existence check + batch save)
            storage: Storage capability (upload_file)
        """
        self._database = database
        self._storage = storage
        self._folder_summary: Dict[str, FolderStats] = {}

    async def upload_single_asset_to_media_storage_and_db(
        self,
        upload_object: UploadObject,
    ) -> ResultSummary:
        """
        Upload one asset unless its full path is already recorded.

        Args:
            upload_object: Unit of work

        Returns:
            New summary: the incoming one plus an entry for this file
            (unchanged copy when the asset was skipped)
        """
        summary: ResultSummary = dict(upload_object.result_summary or {})
        asset_path = upload_object.asset_path

        if await self._database.does_asset_path_already_exist(asset_path):
            logger.info("Asset at path %s already exists. Skipping upload.", asset_path)
            return summary

        relative_path = upload_object.relative_path
        file_data = upload_object.file_data

        result = await self._storage.upload_file(
            file=StorageFile(
                name=relative_path,
                mimetype=upload_object.mimetype,
                data=file_data,
                uri=asset_path,
            ),
            upload_path=upload_object.asset_folder_name,
            parent_path_ids=list(upload_object.parent_path_ids or []),
        )

        asset = Asset(
            id=result.key or generate_asset_id(),
            url=result.url,
            download_url=result.download_url,
            expected_hash=result.integrity,
            total_size=len(file_data),
            encoded_path=encode_uri_component(asset_path),
            path=relative_path,
        )
        await self._database.save_to_database(assets=[asset])
        logger.debug("Saved asset %s (%d bytes) -> %s", asset.id, len(file_data), result.url)

        summary[relative_path] = {"url": result.url, "size": len(file_data)}

        key = folder_key(relative_path)
        self._folder_summary[key] = self._folder_summary.get(key, FolderStats()).add(len(file_data))

        return summary

    async def upload_multiple_assets_to_media_storage_and_db(
        self,
        uploaded_files: Files,
        base_path: str = "",
        result_summary: Optional[ResultSummary] = None,
    ) -> ResultSummary:
        """
        Upload files sequentially, in input order, through the single-asset flow.

        The first failure aborts the batch; files already processed keep
        their storage objects and database rows.

        Args:
            uploaded_files: One file or a sequence of files
            base_path: Target folder, also prefixed to every relative path
            result_summary: Summary to extend (not modified)

        Returns:
            Summary of every uploaded file
        """
        summary: ResultSummary = dict(result_summary or {})
        prefix = strip_leading_slash(base_path)

        for file in _as_list(uploaded_files):
            relative_path = join_posix(prefix, file.relative_path or file.name)
            mimetype = resolve_mimetype(file.name, file.mimetype)
            logger.debug("Uploading %s as %s [%s]", relative_path, mimetype, base_path)

            summary = await self.upload_single_asset_to_media_storage_and_db(
                UploadObject(
                    asset_folder_name=base_path,
                    relative_path=relative_path,
                    file_data=file.data,
                    mimetype=mimetype,
                    result_summary=summary,
                )
            )

        return summary

    async def upload_multiple_files_to_media_storage_only(
        self,
        files: Files,
        base_path: str = "",
        remote_parent_paths: Optional[Sequence[str]] = None,
    ) -> ResultSummary:
        """
        Upload files to storage without dedup checks or database records.

        Folder statistics are not updated.

        Args:
            files: One file or a sequence of files
            base_path: Target folder, also prefixed to every relative path
            remote_parent_paths: Backend-specific parent identifiers

        Returns:
            Summary of every uploaded file
        """
        summary: ResultSummary = {}
        parent_path_ids = list(remote_parent_paths or [])
        prefix = strip_leading_slash(base_path)

        for file in _as_list(files):
            relative_path = join_posix(prefix, file.relative_path or file.name)
            mimetype = resolve_mimetype(file.name, file.mimetype)

            result = await self._storage.upload_file(
                file=StorageFile(
                    name=relative_path,
                    mimetype=mimetype,
                    data=file.data,
                    uri=relative_path,
                ),
                upload_path=base_path,
                parent_path_ids=parent_path_ids,
            )
            logger.debug("Uploaded %s to %s", relative_path, result.url)
            summary[relative_path] = {"url": result.url, "size": len(file.data)}

        return summary

    def get_folder_summary(self) -> Dict[str, FolderStats]:
        """Snapshot of per-folder statistics (values are immutable)."""
        return dict(self._folder_summary)

    def add_folder_stats(self, folder_path: str, stats: FolderStats) -> None:
        """Set (replace) the statistics for one folder."""
        self._folder_summary[folder_path] = stats

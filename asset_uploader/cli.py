"""Command line interface for asset_uploader package."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from contextlib import AsyncExitStack
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from rich.logging import RichHandler

from . import __version__
from .collector import FileCollector
from .config import ConfigError, UploaderSettings, load_env_file
from .console import (
    render_configuration_summary,
    render_folder_summary,
    render_result_summary,
)
from .protocols import IAssetDatabase, IMediaStorage
from .services.api_client import HTTPAPIClient
from .services.database import HTTPAssetDatabase, InMemoryAssetDatabase
from .services.storage import HTTPMediaStorage, LocalMediaStorage
from .uploader import AssetUploader

logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Default behavior is silent unless --debug, --log-level or LOG_LEVEL is provided.
    Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    env_level = os.getenv("LOG_LEVEL")
    if silent or (not debug and not log_level and not env_level):
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, (log_level or env_level).upper(), logging.INFO)

    handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return logging.getLevelName(level)


def _normalize_base_path(base_path: Optional[str]) -> str:
    if base_path is None:
        return ""
    value = base_path.strip()
    if value in {"", "/"}:
        return ""
    return value.rstrip("/")


def _resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.exists() and default_env.is_file() else None


async def _open_collaborators(
    settings: UploaderSettings,
    stack: AsyncExitStack,
) -> Tuple[IAssetDatabase, IMediaStorage]:
    """Build database and storage from settings; HTTP clients are closed by the stack."""
    if settings.database_url:
        api = await stack.enter_async_context(
            HTTPAPIClient(settings.database_url, timeout=settings.http_timeout)
        )
        database: IAssetDatabase = HTTPAssetDatabase(api)
    else:
        database = InMemoryAssetDatabase()

    if settings.storage_backend == "http":
        storage_api = await stack.enter_async_context(
            HTTPAPIClient(
                settings.storage_url,
                timeout=settings.http_timeout,
                headers=settings.storage_headers,
            )
        )
        storage: IMediaStorage = HTTPMediaStorage(storage_api, settings.storage_bucket)
    else:
        storage = LocalMediaStorage(settings.storage_dir, public_url=settings.public_url)

    return database, storage


async def _run_upload(
    source: Path,
    base_path: str,
    storage_only: bool,
    parent_ids: List[str],
    settings: UploaderSettings,
) -> int:
    files = FileCollector.collect(source)
    if not files:
        raise CLIError(f"no files found in {source}")
    logger.info("Collected %d file(s) from %s", len(files), source)

    async with AsyncExitStack() as stack:
        database, storage = await _open_collaborators(settings, stack)
        uploader = AssetUploader(database, storage)

        if storage_only:
            summary = await uploader.upload_multiple_files_to_media_storage_only(
                files,
                base_path=base_path,
                remote_parent_paths=parent_ids,
            )
        else:
            summary = await uploader.upload_multiple_assets_to_media_storage_and_db(
                files,
                base_path=base_path,
            )

    render_result_summary(summary)
    render_folder_summary(uploader.get_folder_summary())
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="asset-up",
        description="Upload a file or folder to media storage and record assets.",
    )
    parser.add_argument("source", nargs="?", type=Path, help="Source file or folder path")
    parser.add_argument(
        "-b",
        "--base-path",
        default=None,
        help="Target folder in storage, prefixed to every relative path (example: assets)",
    )
    parser.add_argument(
        "--storage-only",
        action="store_true",
        help="Upload to storage only: no dedup check, no database records",
    )
    parser.add_argument(
        "-p",
        "--parent-id",
        action="append",
        default=[],
        dest="parent_ids",
        help="Remote parent path id for storage-only uploads (repeatable)",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"asset-up {__version__}",
    )
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file or _resolve_default_env_file()
    if used_env_file is not None:
        try:
            load_env_file(Path(used_env_file))
        except ConfigError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    if args.source is None:
        parser.print_help()
        return 0

    source = Path(args.source).expanduser()
    if not source.exists():
        print(f"ERROR: source does not exist: {source}", file=sys.stderr)
        return 1

    try:
        settings = UploaderSettings.from_env().validate()
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.parent_ids and not args.storage_only:
        print("WARNING: --parent-id only applies with --storage-only.", file=sys.stderr)

    base_path = _normalize_base_path(args.base_path)
    render_configuration_summary(
        {
            "Source": str(source),
            "Source Type": "file" if source.is_file() else "folder",
            "Base Path": base_path or "(root)",
            "Mode": "storage only" if args.storage_only else "storage + database",
            "Database": settings.database_url or "(in-memory)",
            "Storage": (
                f"{settings.storage_url} [{settings.storage_bucket}]"
                if settings.storage_backend == "http"
                else str(settings.storage_dir)
            ),
            "Env File": str(used_env_file) if used_env_file else "-",
            "Logging": effective_log_mode,
        }
    )

    try:
        return asyncio.run(
            _run_upload(
                source=source,
                base_path=base_path,
                storage_only=args.storage_only,
                parent_ids=args.parent_ids,
                settings=settings,
            )
        )
    except CLIError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130
    except Exception as exc:
        logger.debug("Upload failed", exc_info=True)
        print(f"ERROR: upload failed: {exc}", file=sys.stderr)
        return 1


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()

"""Environment-driven configuration for asset_uploader."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

ENV_PREFIX = "ASSET_UPLOADER_"
STORAGE_BACKENDS = ("local", "http")


class ConfigError(ValueError):
    """Raised when settings or env files are invalid."""


def _strip_optional_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def load_env_file(path: Path, override: bool = False) -> None:
    """Load KEY=VALUE lines into os.environ (existing keys kept unless override)."""
    if not path.exists():
        raise ConfigError(f"env file not found: {path}")
    if not path.is_file():
        raise ConfigError(f"env path is not a file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"could not read env file {path}: {exc}") from exc

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].strip()
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        value = _strip_optional_quotes(value.strip())
        if override or key not in os.environ:
            os.environ[key] = value


@dataclass(frozen=True)
class UploaderSettings:
    """Immutable configuration for collaborators built by the CLI."""
    database_url: Optional[str] = None  # None = in-memory database
    storage_backend: str = "local"
    storage_dir: Path = Path("storage")
    public_url: Optional[str] = None
    storage_url: Optional[str] = None
    storage_bucket: Optional[str] = None
    service_account_token: Optional[str] = None
    http_timeout: float = 60.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "UploaderSettings":
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            value = env.get(f"{ENV_PREFIX}{name}")
            return value.strip() if value and value.strip() else None

        timeout = get("HTTP_TIMEOUT")
        try:
            http_timeout = float(timeout) if timeout else cls.http_timeout
        except ValueError as exc:
            raise ConfigError(f"{ENV_PREFIX}HTTP_TIMEOUT must be a number: {timeout}") from exc

        return cls(
            database_url=get("DATABASE_URL"),
            storage_backend=(get("STORAGE_BACKEND") or cls.storage_backend).lower(),
            storage_dir=Path(get("STORAGE_DIR") or cls.storage_dir),
            public_url=get("PUBLIC_URL"),
            storage_url=get("STORAGE_URL"),
            storage_bucket=get("STORAGE_BUCKET"),
            service_account_token=get("SERVICE_ACCOUNT_TOKEN"),
            http_timeout=http_timeout,
        )

    def validate(self) -> "UploaderSettings":
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ConfigError(
                f"unknown storage backend {self.storage_backend!r} "
                f"(expected one of: {', '.join(STORAGE_BACKENDS)})"
            )
        if self.storage_backend == "http":
            if not self.storage_url:
                raise ConfigError(f"{ENV_PREFIX}STORAGE_URL is required for the http backend")
            if not self.storage_bucket:
                raise ConfigError(f"{ENV_PREFIX}STORAGE_BUCKET is required for the http backend")
        return self

    @property
    def storage_headers(self) -> dict:
        if not self.service_account_token:
            return {}
        return {"Authorization": f"Bearer {self.service_account_token}"}

"""File collection utilities for folder uploads."""
from pathlib import Path
from typing import List

from .models import FileWithPath


class FileCollector:
    """Turns files on disk into in-memory upload payloads."""

    @staticmethod
    def collect_paths(source: Path) -> List[Path]:
        """
        Collect all regular files recursively (or the file itself).

        Args:
            source: File or root folder to scan

        Returns:
            Sorted list of file paths
        """
        if source.is_file():
            return [source]
        return sorted(item for item in source.rglob("*") if item.is_file())

    @classmethod
    def collect(cls, source: Path) -> List[FileWithPath]:
        """
        Read files into payloads.

        Files found under a folder carry their posix path relative to it;
        a single file carries only its name. Mimetype is left for inference.
        """
        source = Path(source)
        payloads = []
        for path in cls.collect_paths(source):
            relative = None if path == source else path.relative_to(source).as_posix()
            payloads.append(
                FileWithPath(name=path.name, data=path.read_bytes(), relative_path=relative)
            )
        return payloads

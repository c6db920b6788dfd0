"""
File Discovery Utilities

Recursive listing of source roots in a deterministic order: depth-first,
entries sorted by name within each directory.
"""

import asyncio
import os
from pathlib import Path

from app_compiler.infra.observability import get_logger

logger = get_logger(__name__)


def list_files(root: Path) -> list[Path]:
    """
    List every file under ``root`` recursively.

    Raises:
        FileNotFoundError: If ``root`` does not exist
    """
    if not root.is_dir():
        raise FileNotFoundError(str(root))

    discovered: list[Path] = []

    def _walk(directory: Path) -> None:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
        for entry in entries:
            if entry.is_dir():
                _walk(Path(entry.path))
            else:
                discovered.append(Path(entry.path))

    _walk(root)
    logger.debug("file_discovery_complete", root=str(root), discovered_count=len(discovered))
    return discovered


async def list_files_async(root: Path) -> list[Path]:
    """``list_files`` off the event loop."""
    return await asyncio.to_thread(list_files, root)

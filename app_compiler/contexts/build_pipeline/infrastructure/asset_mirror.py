"""
Asset Mirror

Copies every ASSET-domain file into the output tree, keeping its path
relative to the asset root. Copies overwrite unconditionally. Removing an
entry that is already gone is a no-op, since watch mode routinely sees
delete-then-recreate races.
"""

import asyncio
import shutil
import time
from pathlib import Path

from app_compiler.contexts.build_pipeline.domain.classifier import PathClassifier
from app_compiler.contexts.build_pipeline.domain.models import (
    BuildConfig,
    BuildDomain,
    BuildOutcome,
    Pipeline,
)
from app_compiler.contexts.build_pipeline.infrastructure.file_discovery import list_files_async
from app_compiler.contexts.build_pipeline.infrastructure.outcomes import failure_outcome
from app_compiler.infra.exceptions import AssetMirrorError, BuildException, SourceRootMissingError
from app_compiler.infra.observability import LogPerformance, get_logger

logger = get_logger(__name__)


class AssetMirror:
    def __init__(self, config: BuildConfig, classifier: PathClassifier | None = None):
        self.config = config
        self.classifier = classifier or PathClassifier(config)

    def destination_for(self, path: str | Path, directory: bool = False) -> Path:
        """
        Mirrored path of ``path`` under the output root.

        Raises:
            AssetMirrorError: If ``path`` is not in the asset domain
        """
        classified = self.classifier.classify_dir(path) if directory else self.classifier.classify(path)
        destination = classified.destination(self.config.roots.output_root)
        if classified.domain is not BuildDomain.ASSET or destination is None:
            raise AssetMirrorError(str(path), f"not an asset ({classified.domain.value})")
        return destination

    # ========================================================================
    # Whole tree
    # ========================================================================

    async def mirror_all(self) -> int:
        """Copy every asset under the asset root. Returns the number of files copied."""
        asset_root = self.config.roots.asset_root
        try:
            files = await list_files_async(asset_root)
        except FileNotFoundError as e:
            raise SourceRootMissingError(str(asset_root), component=Pipeline.ASSETS.value) from e
        return await self._mirror_files(files)

    async def build(self) -> BuildOutcome:
        """``mirror_all`` reported as a BuildOutcome."""
        started = time.monotonic()
        try:
            with LogPerformance(logger, "assets_build"):
                copied = await self.mirror_all()
        except (BuildException, OSError) as e:
            return failure_outcome(Pipeline.ASSETS, e, started)
        logger.debug("assets_mirrored", count=copied)
        return BuildOutcome.success(Pipeline.ASSETS, elapsed_s=round(time.monotonic() - started, 3))

    # ========================================================================
    # Single entries
    # ========================================================================

    async def mirror_one(self, path: str | Path) -> Path:
        source = Path(path)
        destination = self.destination_for(source)

        def _copy() -> None:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)

        try:
            await asyncio.to_thread(_copy)
        except OSError as e:
            raise AssetMirrorError(str(source), str(e)) from e
        return destination

    async def remove_one(self, path: str | Path) -> bool:
        """Delete the mirrored file. Returns False when it was already absent."""
        destination = self.destination_for(path)
        if destination.is_dir():
            # some platforms report directory deletions as file deletions
            return await self.remove_dir(path)
        try:
            await asyncio.to_thread(destination.unlink)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise AssetMirrorError(str(path), str(e)) from e
        return True

    async def mirror_dir(self, path: str | Path) -> Path:
        destination = self.destination_for(path, directory=True)
        try:
            await asyncio.to_thread(destination.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise AssetMirrorError(str(path), str(e)) from e
        return destination

    async def remove_dir(self, path: str | Path) -> bool:
        """Recursively delete the mirrored directory. Returns False when it was already absent."""
        destination = self.destination_for(path, directory=True)
        try:
            await asyncio.to_thread(shutil.rmtree, destination)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise AssetMirrorError(str(path), str(e)) from e
        return True

    async def _mirror_files(self, files: list[Path]) -> int:
        copied = 0
        for file in files:
            if self.classifier.classify(file).domain is not BuildDomain.ASSET:
                continue
            await self.mirror_one(file)
            copied += 1
        return copied

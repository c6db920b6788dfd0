"""Path classification into build domains."""

import os
from pathlib import Path

from app_compiler.contexts.build_pipeline.domain.models import (
    BuildConfig,
    BuildDomain,
    ClassifiedPath,
)


def lexical_path(path: str | Path) -> Path:
    """Absolute, normalized path with symlinks left in place.

    A symlink inside a root belongs to that root wherever it points.
    """
    return Path(os.path.abspath(path))


def _is_under(path: Path, root: Path) -> bool:
    return path == root or path.is_relative_to(root)


class PathClassifier:
    """
    Maps filesystem paths to build domains.

    Priority order for files:
        1. script extension under the script root -> SCRIPT
        2. style extension under the style root   -> STYLE
        3. script/style extension anywhere else   -> IGNORED (never mirrored)
        4. anything else under the asset root     -> ASSET
        5. otherwise                              -> IGNORED

    Directories are classified structurally, not by extension: a directory
    under the asset root is ASSET, everything else is IGNORED.
    """

    def __init__(self, config: BuildConfig):
        self.roots = config.roots
        self.script_extensions = config.script_extensions
        self.style_extensions = config.style_extensions

    def classify(self, path: str | Path) -> ClassifiedPath:
        path = lexical_path(path)
        ext = path.suffix.lower()

        if ext in self.script_extensions:
            if _is_under(path, self.roots.script_root):
                return ClassifiedPath(path, BuildDomain.SCRIPT, self.roots.script_root)
            return ClassifiedPath(path, BuildDomain.IGNORED)

        if ext in self.style_extensions:
            if _is_under(path, self.roots.style_root):
                return ClassifiedPath(path, BuildDomain.STYLE, self.roots.style_root)
            return ClassifiedPath(path, BuildDomain.IGNORED)

        if _is_under(path, self.roots.asset_root):
            return ClassifiedPath(path, BuildDomain.ASSET, self.roots.asset_root)

        return ClassifiedPath(path, BuildDomain.IGNORED)

    def classify_dir(self, path: str | Path) -> ClassifiedPath:
        path = lexical_path(path)
        if _is_under(path, self.roots.asset_root) and path != self.roots.asset_root:
            return ClassifiedPath(path, BuildDomain.ASSET, self.roots.asset_root)
        return ClassifiedPath(path, BuildDomain.IGNORED)

    def is_in_style_root(self, path: str | Path) -> bool:
        return _is_under(lexical_path(path), self.roots.style_root)

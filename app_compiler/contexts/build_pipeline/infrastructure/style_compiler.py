"""
Style Compiler Adapter

Wraps libsass behind a small port so the aggregator can be exercised with a
fake compiler.

Note:
    libsass is synchronous. The aggregator calls ``compile`` through
    ``asyncio.to_thread()`` so the event loop never blocks on it.
"""

from pathlib import Path
from typing import Protocol

import sass

from app_compiler.infra.exceptions import StyleCompileError


class StyleCompilerPort(Protocol):
    def compile(self, source: Path, *, include_paths: tuple[Path, ...], compressed: bool) -> str:
        """Compile one style source to CSS text, raising StyleCompileError on rejection."""
        ...


class LibSassCompiler:
    """StyleCompilerPort backed by libsass."""

    def compile(self, source: Path, *, include_paths: tuple[Path, ...], compressed: bool) -> str:
        try:
            return sass.compile(
                filename=str(source),
                include_paths=[str(path) for path in include_paths],
                output_style="compressed" if compressed else "expanded",
            )
        except sass.CompileError as e:
            raise StyleCompileError(str(source), str(e)) from e

"""
Style Aggregator

Compiles every style source under the style root and concatenates the results
into one stylesheet under the output root.

Pipeline:
    list style root (discovery order)
        ↓
    filter style extensions
        ↓
    import-path set (every distinct containing directory)
        ↓
    compile each source (fail fast)
        ↓
    render with provenance comments
        ↓
    single write to <output>/<stylesheet_name>

Every run rescans and recompiles everything. Cross-file imports make
per-file incrementality unsound without a dependency graph.
"""

import asyncio
import time
from pathlib import Path

from app_compiler.contexts.build_pipeline.domain.models import (
    BuildConfig,
    BuildOutcome,
    CompileUnit,
    Pipeline,
    Stylesheet,
    StylesheetEntry,
)
from app_compiler.contexts.build_pipeline.infrastructure.file_discovery import list_files_async
from app_compiler.contexts.build_pipeline.infrastructure.outcomes import failure_outcome
from app_compiler.contexts.build_pipeline.infrastructure.single_flight import SingleFlight
from app_compiler.contexts.build_pipeline.infrastructure.style_compiler import (
    LibSassCompiler,
    StyleCompilerPort,
)
from app_compiler.infra.exceptions import BuildException, SourceRootMissingError
from app_compiler.infra.observability import LogPerformance, get_logger

logger = get_logger(__name__)


class StyleAggregator:
    """
    Style pipeline.

    Usage:
        aggregator = StyleAggregator(config)
        outcome = await aggregator.build()          # one run
        outcome = await aggregator.request_rebuild()  # coalesced (watch mode)
    """

    def __init__(self, config: BuildConfig, compiler: StyleCompilerPort | None = None):
        self.config = config
        self.compiler = compiler or LibSassCompiler()
        self._rebuilds = SingleFlight(Pipeline.STYLES.value, self.build)

    async def collect_units(self) -> list[CompileUnit]:
        """Discover style sources and pair each with the current import-path set."""
        style_root = self.config.roots.style_root
        try:
            files = await list_files_async(style_root)
        except FileNotFoundError as e:
            raise SourceRootMissingError(str(style_root), component=Pipeline.STYLES.value) from e

        sources = [path for path in files if path.suffix.lower() in self.config.style_extensions]

        include_paths: list[Path] = []
        for source in sources:
            if source.parent not in include_paths:
                include_paths.append(source.parent)
        shared = tuple(include_paths)

        return [CompileUnit(source=source, include_paths=shared) for source in sources]

    async def aggregate(self) -> Stylesheet:
        """Compile every unit in discovery order. Any compile error aborts the whole run."""
        units = await self.collect_units()
        stylesheet = Stylesheet(compressed=self.config.compress)
        for unit in units:
            css = await asyncio.to_thread(
                self.compiler.compile,
                unit.source,
                include_paths=unit.include_paths,
                compressed=self.config.compress,
            )
            stylesheet.entries.append(StylesheetEntry(relative_path=self._provenance(unit.source), css=css))
        return stylesheet

    async def write(self, stylesheet: Stylesheet) -> Path:
        target = self.config.stylesheet_path
        content = stylesheet.render()

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")

        await asyncio.to_thread(_write)
        logger.debug("stylesheet_written", path=str(target), bytes=len(content))
        return target

    async def build(self) -> BuildOutcome:
        """One full aggregation run, reported as a BuildOutcome."""
        started = time.monotonic()
        try:
            with LogPerformance(logger, "styles_build"):
                stylesheet = await self.aggregate()
                await self.write(stylesheet)
        except (BuildException, OSError) as e:
            return failure_outcome(Pipeline.STYLES, e, started)
        return BuildOutcome.success(Pipeline.STYLES, elapsed_s=round(time.monotonic() - started, 3))

    def request_rebuild(self) -> "asyncio.Task[BuildOutcome]":
        """Coalesced rebuild for watch mode."""
        return self._rebuilds.request()

    def _provenance(self, source: Path) -> str:
        return "/" + source.relative_to(self.config.roots.style_root).as_posix()

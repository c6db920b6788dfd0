"""
Watch Dispatcher

Turns classified filesystem events into the minimal pipeline action. Each
event is handled as an independent task; style rebuilds are coalesced by the
aggregator's single-flight runner. A failing handler is logged and never
ends the watch session.
"""

import asyncio
import time
from pathlib import Path

from app_compiler.contexts.build_pipeline.domain.classifier import PathClassifier, lexical_path
from app_compiler.contexts.build_pipeline.domain.models import BuildConfig, BuildOutcome, Pipeline
from app_compiler.contexts.build_pipeline.domain.policy import FailurePolicy
from app_compiler.contexts.build_pipeline.domain.watch import (
    WatchAction,
    WatchEvent,
    WatchState,
    plan_actions,
)
from app_compiler.contexts.build_pipeline.infrastructure.asset_mirror import AssetMirror
from app_compiler.contexts.build_pipeline.infrastructure.outcomes import failure_outcome
from app_compiler.contexts.build_pipeline.infrastructure.style_aggregator import StyleAggregator
from app_compiler.infra.exceptions import BuildException
from app_compiler.infra.observability import get_logger

logger = get_logger(__name__)


class WatchDispatcher:
    def __init__(
        self,
        config: BuildConfig,
        styles: StyleAggregator,
        assets: AssetMirror,
        classifier: PathClassifier | None = None,
        policy: FailurePolicy | None = None,
    ):
        self.config = config
        self.styles = styles
        self.assets = assets
        self.classifier = classifier or PathClassifier(config)
        self.policy = policy or FailurePolicy.log_and_continue()
        self._roots = config.roots.watched_roots()
        self._active: dict[Path, int] = {}
        self._tasks: set[asyncio.Task] = set()

    def dispatch(self, event: WatchEvent) -> asyncio.Task:
        """Handle ``event`` as an independent task."""
        task = asyncio.create_task(self.handle(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def handle(self, event: WatchEvent) -> list[BuildOutcome]:
        logger.info("watch_event", kind=event.kind.value, path=str(event.path))
        root = self._root_of(event.path)
        self._enter(root)
        try:
            outcomes = []
            for action in plan_actions(event, self.classifier):
                outcomes.append(await self._run(action, event.path))
            self.policy.resolve(outcomes)
            return outcomes
        except Exception as e:
            logger.error(
                "watch_handler_failed",
                kind=event.kind.value,
                path=str(event.path),
                error=str(e),
                exc_info=True,
            )
            return []
        finally:
            self._leave(root)

    async def drain(self) -> None:
        """Wait for every handler dispatched so far."""
        while pending := [task for task in self._tasks if not task.done()]:
            await asyncio.gather(*pending, return_exceptions=True)

    def state_of(self, root: Path) -> WatchState:
        return WatchState.HANDLING if self._active.get(root, 0) > 0 else WatchState.IDLE

    async def _run(self, action: WatchAction, path: Path) -> BuildOutcome:
        if action is WatchAction.REBUILD_STYLES:
            return await self.styles.request_rebuild()

        started = time.monotonic()
        try:
            if action is WatchAction.MIRROR_FILE:
                await self.assets.mirror_one(path)
            elif action is WatchAction.REMOVE_FILE:
                await self.assets.remove_one(path)
            elif action is WatchAction.MIRROR_DIR:
                await self.assets.mirror_dir(path)
            elif action is WatchAction.REMOVE_DIR:
                await self.assets.remove_dir(path)
        except (BuildException, OSError) as e:
            return failure_outcome(Pipeline.ASSETS, e, started)
        logger.debug("asset_action_done", action=action.value, path=str(path))
        return BuildOutcome.success(Pipeline.ASSETS, elapsed_s=round(time.monotonic() - started, 3))

    def _root_of(self, path: Path) -> Path | None:
        absolute = lexical_path(path)
        for root in self._roots:
            if absolute == root or absolute.is_relative_to(root):
                return root
        return None

    def _enter(self, root: Path | None) -> None:
        if root is not None:
            self._active[root] = self._active.get(root, 0) + 1

    def _leave(self, root: Path | None) -> None:
        if root is not None:
            self._active[root] -= 1

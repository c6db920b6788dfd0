"""
Watch session - process-wide state of continuous mode.

Flow:
    pre-step batch (styles + assets, log-and-continue)
        ↓
    script compiler in its own watch mode (one process, held until exit)
        ↓
    FileWatcher (watchdog) → WatchDispatcher
"""

import asyncio
import signal
from collections.abc import Iterable
from dataclasses import dataclass, field

from app_compiler.contexts.build_pipeline.domain.models import BuildConfig
from app_compiler.contexts.build_pipeline.domain.policy import FailurePolicy
from app_compiler.contexts.build_pipeline.infrastructure.asset_mirror import AssetMirror
from app_compiler.contexts.build_pipeline.infrastructure.batch_runner import BatchRunner
from app_compiler.contexts.build_pipeline.infrastructure.file_watcher import FileWatcher
from app_compiler.contexts.build_pipeline.infrastructure.script_proxy import (
    ScriptBuildProxy,
    ScriptCompilerHandle,
)
from app_compiler.contexts.build_pipeline.infrastructure.style_aggregator import StyleAggregator
from app_compiler.contexts.build_pipeline.infrastructure.watch_dispatcher import WatchDispatcher
from app_compiler.infra.observability import get_logger

logger = get_logger(__name__)


@dataclass
class WatchSession:
    """
    Owns the filesystem subscription and the long-lived compiler process.

    Usage:
        session = await WatchSession.start(config, scripts, styles, assets)
        try:
            await session.run_forever()
        finally:
            await session.close()
    """

    config: BuildConfig
    scripts: ScriptBuildProxy
    dispatcher: WatchDispatcher
    watcher: FileWatcher
    compiler: ScriptCompilerHandle | None = None
    _stopped: asyncio.Event = field(default_factory=asyncio.Event)
    _signals: list[int] = field(default_factory=list)

    @classmethod
    async def start(
        cls,
        config: BuildConfig,
        scripts: ScriptBuildProxy,
        styles: StyleAggregator,
        assets: AssetMirror,
        pre_build: bool = True,
    ) -> "WatchSession":
        policy = FailurePolicy.log_and_continue()

        if pre_build:
            runner = BatchRunner(config, scripts, styles, assets)
            await runner.run_once(policy, include_scripts=False)

        outcome = await scripts.build(continuous=True)
        policy.resolve([outcome])

        dispatcher = WatchDispatcher(config, styles, assets, policy=policy)
        watcher = FileWatcher(
            roots=config.roots.watched_roots(),
            on_event=dispatcher.dispatch,
            exclude_patterns=config.watch_exclude_patterns,
        )
        await watcher.start()

        logger.info("watch_session_started")
        return cls(
            config=config,
            scripts=scripts,
            dispatcher=dispatcher,
            watcher=watcher,
            compiler=scripts.handle,
        )

    async def run_forever(self) -> None:
        await self._stopped.wait()

    def request_stop(self) -> None:
        self._stopped.set()

    def stop_on_signals(self, signals: Iterable[int] = (signal.SIGINT, signal.SIGTERM)) -> list[int]:
        """
        Make ``run_forever`` return when one of ``signals`` arrives.

        Returns the signals actually installed. Event loops without signal
        support (Windows) install none and rely on KeyboardInterrupt.
        """
        loop = asyncio.get_running_loop()
        for sig in signals:
            try:
                loop.add_signal_handler(sig, self.request_stop)
            except NotImplementedError:
                logger.debug("signal_handler_unsupported", signal=int(sig))
                continue
            self._signals.append(sig)
        return list(self._signals)

    async def close(self) -> None:
        """Release the subscription and the compiler process at process exit."""
        loop = asyncio.get_running_loop()
        for sig in self._signals:
            loop.remove_signal_handler(sig)
        self._signals.clear()
        await self.watcher.stop()
        await self.dispatcher.drain()
        await self.scripts.shutdown()
        logger.info("watch_session_closed")

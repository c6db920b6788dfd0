"""
Single-flight coalescing for rebuild requests.

A request arriving while a run is in flight does not start an overlapping
run. It sets a pending flag, and the in-flight task runs the action exactly
once more after the current run finishes, however many requests arrived in
between. The last write to the shared output therefore always comes from a
run that started after the latest request.
"""

import asyncio
from collections.abc import Awaitable, Callable

from app_compiler.contexts.build_pipeline.domain.models import BuildOutcome
from app_compiler.infra.observability import get_logger

logger = get_logger(__name__)


class SingleFlight:
    def __init__(self, name: str, action: Callable[[], Awaitable[BuildOutcome]]):
        self.name = name
        self._action = action
        self._task: asyncio.Task[BuildOutcome] | None = None
        self._pending = False
        self.runs = 0

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def request(self) -> "asyncio.Task[BuildOutcome]":
        """Schedule a run (or coalesce into the in-flight one) and return the task to await."""
        if self.in_flight:
            assert self._task is not None
            if not self._pending:
                logger.debug("rebuild_coalesced", pipeline=self.name)
            self._pending = True
            return self._task

        self._task = asyncio.create_task(self._drain(), name=f"{self.name}-rebuild")
        return self._task

    async def _drain(self) -> BuildOutcome:
        outcome = await self._run()
        while self._pending:
            self._pending = False
            outcome = await self._run()
        return outcome

    async def _run(self) -> BuildOutcome:
        self.runs += 1
        return await self._action()

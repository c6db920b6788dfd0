"""Single-flight coalescing tests."""

import asyncio

import pytest

from app_compiler.contexts.build_pipeline.domain.models import BuildOutcome, Pipeline
from app_compiler.contexts.build_pipeline.infrastructure.single_flight import SingleFlight


class RecordingAction:
    def __init__(self):
        self.release = asyncio.Event()
        self.started = 0
        self.running = 0
        self.max_running = 0

    async def __call__(self) -> BuildOutcome:
        self.started += 1
        self.running += 1
        self.max_running = max(self.max_running, self.running)
        try:
            await self.release.wait()
        finally:
            self.running -= 1
        return BuildOutcome.success(Pipeline.STYLES)


@pytest.mark.asyncio
async def test_single_request_runs_once():
    action = RecordingAction()
    action.release.set()
    flight = SingleFlight("styles", action)

    outcome = await flight.request()

    assert outcome.ok
    assert flight.runs == 1
    assert not flight.in_flight


@pytest.mark.asyncio
async def test_burst_during_run_adds_exactly_one_rerun():
    action = RecordingAction()
    flight = SingleFlight("styles", action)

    task = flight.request()
    await asyncio.sleep(0)
    for _ in range(5):
        assert flight.request() is task

    action.release.set()
    await task

    assert action.started == 2
    assert action.max_running == 1


@pytest.mark.asyncio
async def test_request_after_completion_starts_new_run():
    action = RecordingAction()
    action.release.set()
    flight = SingleFlight("styles", action)

    first = flight.request()
    await first
    second = flight.request()
    await second

    assert second is not first
    assert flight.runs == 2

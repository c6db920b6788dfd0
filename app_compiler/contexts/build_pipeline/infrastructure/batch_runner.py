"""
Batch Runner

One-shot build: scripts, styles and assets run concurrently and every one of
them completes before a verdict is reached. The FailurePolicy passed by the
caller decides whether failures end the process.
"""

import asyncio
from dataclasses import dataclass, field

from app_compiler.contexts.build_pipeline.domain.models import BuildConfig, BuildOutcome, Pipeline
from app_compiler.contexts.build_pipeline.domain.policy import FailurePolicy
from app_compiler.contexts.build_pipeline.infrastructure.asset_mirror import AssetMirror
from app_compiler.contexts.build_pipeline.infrastructure.script_proxy import ScriptBuildProxy
from app_compiler.contexts.build_pipeline.infrastructure.style_aggregator import StyleAggregator
from app_compiler.infra.observability import LogPerformance, get_logger

logger = get_logger(__name__)


@dataclass
class BatchReport:
    outcomes: list[BuildOutcome] = field(default_factory=list)
    exit_code: int | None = None

    @property
    def ok(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    def outcome_for(self, pipeline: Pipeline) -> BuildOutcome | None:
        for outcome in self.outcomes:
            if outcome.pipeline is pipeline:
                return outcome
        return None


class BatchRunner:
    """
    Composes the three pipelines for a full build.

    Usage:
        runner = BatchRunner(config, scripts, styles, assets)
        report = await runner.run_once(FailurePolicy.terminate())
        if report.exit_code is not None:
            raise SystemExit(report.exit_code)
    """

    def __init__(
        self,
        config: BuildConfig,
        scripts: ScriptBuildProxy,
        styles: StyleAggregator,
        assets: AssetMirror,
    ):
        self.config = config
        self.scripts = scripts
        self.styles = styles
        self.assets = assets

    async def run_once(
        self,
        policy: FailurePolicy | None = None,
        include_scripts: bool = True,
    ) -> BatchReport:
        """
        Run the pipelines concurrently and resolve their outcomes under ``policy``.

        Args:
            policy: Defaults to ``FailurePolicy.terminate()``
            include_scripts: False for the pre-watch step, where the compiler's
                own watch mode performs the initial script build

        Returns:
            BatchReport whose ``exit_code`` is None unless the policy is fatal
            and something failed
        """
        policy = policy or FailurePolicy.terminate()

        pending = []
        if include_scripts:
            pending.append(self.scripts.build(continuous=False))
        pending.append(self.styles.build())
        pending.append(self.assets.build())

        with LogPerformance(logger, "batch_build", pipelines=len(pending)):
            outcomes = list(await asyncio.gather(*pending))

        return BatchReport(outcomes=outcomes, exit_code=policy.resolve(outcomes))

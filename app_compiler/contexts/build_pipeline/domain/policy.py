"""Failure policy: decides whether failed outcomes are fatal or only logged."""

from collections.abc import Iterable
from dataclasses import dataclass

from app_compiler.contexts.build_pipeline.domain.models import BuildOutcome, Pipeline
from app_compiler.infra.observability import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FailurePolicy:
    """
    Per-call-site failure policy.

    ``terminate`` (one-shot mode): any failure yields a process exit code.
    The script pipeline's own exit code wins when it is positive; every
    other failure maps to 1.

    ``log_and_continue`` (watch mode, pre-watch batch step): failures are
    logged and no exit code is ever produced.
    """

    fatal: bool

    @classmethod
    def terminate(cls) -> "FailurePolicy":
        return cls(fatal=True)

    @classmethod
    def log_and_continue(cls) -> "FailurePolicy":
        return cls(fatal=False)

    def resolve(self, outcomes: Iterable[BuildOutcome]) -> int | None:
        """Log every failure and return the process exit code, or None to keep running."""
        failures = [outcome for outcome in outcomes if not outcome.ok]
        for outcome in failures:
            assert outcome.failure is not None
            logger.error(
                "pipeline_failed",
                pipeline=outcome.pipeline.value,
                kind=outcome.failure.kind.value,
                detail=outcome.failure.detail,
                exit_code=outcome.failure.exit_code,
                fatal=self.fatal,
            )

        if not self.fatal or not failures:
            return None

        for outcome in failures:
            if outcome.pipeline is Pipeline.SCRIPTS:
                return outcome.exit_code
        return 1

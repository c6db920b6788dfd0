"""Conversion of pipeline exceptions into BuildOutcome values."""

import time

from app_compiler.contexts.build_pipeline.domain.models import BuildOutcome, FailureKind, Pipeline
from app_compiler.infra.exceptions import BuildException

_KINDS = {kind.value: kind for kind in FailureKind}


def failure_outcome(pipeline: Pipeline, error: Exception, started: float) -> BuildOutcome:
    """Tag ``error`` with its failure kind. Plain OSErrors are filesystem failures."""
    if isinstance(error, BuildException):
        kind = _KINDS.get(error.kind, FailureKind.COMPILE)
        exit_code = getattr(error, "exit_code", None)
    else:
        kind = FailureKind.FILESYSTEM
        exit_code = None
    return BuildOutcome.failed(
        pipeline,
        kind,
        str(error),
        exit_code=exit_code,
        elapsed_s=round(time.monotonic() - started, 3),
    )

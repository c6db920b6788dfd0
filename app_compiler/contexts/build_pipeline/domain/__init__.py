from app_compiler.contexts.build_pipeline.domain.classifier import PathClassifier
from app_compiler.contexts.build_pipeline.domain.models import (
    BuildConfig,
    BuildDomain,
    BuildFailure,
    BuildOutcome,
    ClassifiedPath,
    CompileUnit,
    FailureKind,
    Pipeline,
    SourceRoots,
    Stylesheet,
    StylesheetEntry,
)
from app_compiler.contexts.build_pipeline.domain.policy import FailurePolicy
from app_compiler.contexts.build_pipeline.domain.watch import (
    WatchAction,
    WatchEvent,
    WatchEventKind,
    WatchState,
    plan_actions,
)

__all__ = [
    "BuildConfig",
    "BuildDomain",
    "BuildFailure",
    "BuildOutcome",
    "ClassifiedPath",
    "CompileUnit",
    "FailureKind",
    "FailurePolicy",
    "PathClassifier",
    "Pipeline",
    "SourceRoots",
    "Stylesheet",
    "StylesheetEntry",
    "WatchAction",
    "WatchEvent",
    "WatchEventKind",
    "WatchState",
    "plan_actions",
]

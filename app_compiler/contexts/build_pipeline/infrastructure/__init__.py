from app_compiler.contexts.build_pipeline.infrastructure.asset_mirror import AssetMirror
from app_compiler.contexts.build_pipeline.infrastructure.batch_runner import BatchReport, BatchRunner
from app_compiler.contexts.build_pipeline.infrastructure.file_watcher import FileWatcher, translate_event
from app_compiler.contexts.build_pipeline.infrastructure.script_proxy import (
    ScriptBuildProxy,
    ScriptCompilerHandle,
    filter_diagnostics,
)
from app_compiler.contexts.build_pipeline.infrastructure.single_flight import SingleFlight
from app_compiler.contexts.build_pipeline.infrastructure.style_aggregator import StyleAggregator
from app_compiler.contexts.build_pipeline.infrastructure.style_compiler import (
    LibSassCompiler,
    StyleCompilerPort,
)
from app_compiler.contexts.build_pipeline.infrastructure.watch_dispatcher import WatchDispatcher
from app_compiler.contexts.build_pipeline.infrastructure.watch_session import WatchSession

__all__ = [
    "AssetMirror",
    "BatchReport",
    "BatchRunner",
    "FileWatcher",
    "LibSassCompiler",
    "ScriptBuildProxy",
    "ScriptCompilerHandle",
    "SingleFlight",
    "StyleAggregator",
    "StyleCompilerPort",
    "WatchDispatcher",
    "WatchSession",
    "filter_diagnostics",
    "translate_event",
]

"""
app-compiler CLI

Builds scripts, styles and static assets into the output tree, once or
continuously.
"""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from app_compiler.contexts.build_pipeline.domain.models import BuildConfig
from app_compiler.contexts.build_pipeline.domain.policy import FailurePolicy
from app_compiler.contexts.build_pipeline.infrastructure.asset_mirror import AssetMirror
from app_compiler.contexts.build_pipeline.infrastructure.batch_runner import BatchReport, BatchRunner
from app_compiler.contexts.build_pipeline.infrastructure.script_proxy import ScriptBuildProxy
from app_compiler.contexts.build_pipeline.infrastructure.style_aggregator import StyleAggregator
from app_compiler.contexts.build_pipeline.infrastructure.watch_session import WatchSession
from app_compiler.infra.config.settings import Settings
from app_compiler.infra.observability import get_logger, setup_logging

app = typer.Typer(
    name="app-compiler",
    help="Build TypeScript, SCSS and static assets into the app output tree",
    add_completion=False,
)

console = Console(stderr=True)
logger = get_logger(__name__)


@app.command()
def build(
    watch: bool = typer.Option(False, "--watch", "-w", help="Keep watching and rebuild incrementally"),
    compress: bool = typer.Option(False, "--compress", "-c", help="Minify styles and emitted JavaScript"),
    project_dir: str | None = typer.Option(None, "--project-dir", help="Project directory (default: cwd)"),
):
    """
    Build the output tree.

    One-shot mode exits non-zero when any pipeline fails. Watch mode logs
    failures and keeps running until interrupted.
    """
    settings = Settings(project_dir=project_dir) if project_dir else Settings()
    setup_logging(level=settings.app.log_level, format=settings.app.log_format)
    config = settings.to_build_config(watch=watch, compress=compress)

    if watch:
        console.print("[bold cyan]App Compiler is watching...[/bold cyan]")
        try:
            asyncio.run(_watch(config))
        except KeyboardInterrupt:
            logger.debug("watch_interrupted")
        console.print("[dim]Stopped.[/dim]")
        return

    report = asyncio.run(_run_once(config))
    _display_report(report)
    if report.exit_code is not None:
        raise typer.Exit(code=report.exit_code)


async def _run_once(config: BuildConfig) -> BatchReport:
    runner = BatchRunner(
        config,
        scripts=ScriptBuildProxy(config),
        styles=StyleAggregator(config),
        assets=AssetMirror(config),
    )
    return await runner.run_once(FailurePolicy.terminate())


async def _watch(config: BuildConfig) -> None:
    session = await WatchSession.start(
        config,
        scripts=ScriptBuildProxy(config),
        styles=StyleAggregator(config),
        assets=AssetMirror(config),
    )
    session.stop_on_signals()
    try:
        await session.run_forever()
    finally:
        await session.close()


def _display_report(report: BatchReport) -> None:
    table = Table(title="Build Results", show_header=True)
    table.add_column("Pipeline", style="cyan")
    table.add_column("Status")
    table.add_column("Time", justify="right")

    for outcome in report.outcomes:
        status = "[green]ok[/green]" if outcome.ok else f"[red]{outcome.failure.kind.value}[/red]"
        table.add_row(outcome.pipeline.value, status, f"{outcome.elapsed_s:.2f}s")

    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()

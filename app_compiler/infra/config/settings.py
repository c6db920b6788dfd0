import shlex
from functools import cached_property
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from app_compiler.contexts.build_pipeline.domain.models import BuildConfig, SourceRoots
from app_compiler.infra.config.groups import (
    ApplicationConfig,
    RootsConfig,
    ScriptConfig,
    StyleConfig,
    WatchConfig,
    split_csv,
)


class Settings(BaseSettings):
    """
    app-compiler settings.

    Environment variables use the APP_COMPILER_ prefix.
    Example: APP_COMPILER_OUTPUT_DIR, APP_COMPILER_SCRIPT_COMMAND

    Grouped access:
        settings.roots   # RootsConfig
        settings.script  # ScriptConfig
        settings.style   # StyleConfig
        settings.watch   # WatchConfig
        settings.app     # ApplicationConfig

    Components never read Settings directly. The CLI builds one immutable
    ``BuildConfig`` via ``to_build_config`` and hands it down.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="APP_COMPILER_",
        extra="ignore",
    )

    # ========================================================================
    # Grouped Config Accessors
    # ========================================================================

    @cached_property
    def roots(self) -> RootsConfig:
        return RootsConfig(
            project_dir=self.project_dir,
            output_dir=self.output_dir,
            script_dir=self.script_dir,
            style_dir=self.style_dir,
            asset_dir=self.asset_dir,
        )

    @cached_property
    def script(self) -> ScriptConfig:
        return ScriptConfig(
            extensions=self.script_extensions,
            command=self.script_command,
            watch_flag=self.script_watch_flag,
            js_compressor_command=self.js_compressor_command,
        )

    @cached_property
    def style(self) -> StyleConfig:
        return StyleConfig(
            extensions=self.style_extensions,
            stylesheet_name=self.stylesheet_name,
        )

    @cached_property
    def watch(self) -> WatchConfig:
        return WatchConfig(exclude_patterns=self.watch_exclude_patterns)

    @cached_property
    def app(self) -> ApplicationConfig:
        return ApplicationConfig(log_level=self.log_level, log_format=self.log_format)

    # ========================================================================
    # Directory layout
    # ========================================================================
    project_dir: str = "."
    output_dir: str = "app"
    script_dir: str = "src"
    style_dir: str = "scss"
    asset_dir: str | None = None  # static-HTML root in the later layout

    # ========================================================================
    # Script compiler
    # ========================================================================
    script_extensions: str = ".ts,.tsx,.jsx"
    script_command: str = "tsc"
    script_watch_flag: str = "--watch"
    js_compressor_command: str = "uglifyjs"

    # ========================================================================
    # Styles
    # ========================================================================
    style_extensions: str = ".scss,.sass"
    stylesheet_name: str = "styles.css"

    # ========================================================================
    # Watcher
    # ========================================================================
    watch_exclude_patterns: str = ".DS_Store,*.swp,*.swo,*~,*.tmp"

    # ========================================================================
    # Application
    # ========================================================================
    log_level: str = "INFO"
    log_format: str = "console"

    def to_build_config(self, *, watch: bool = False, compress: bool = False) -> BuildConfig:
        """Resolve roots and command lines into the immutable config passed to every component."""
        base = Path(self.roots.project_dir).resolve()

        def _resolve(relative: str) -> Path:
            return (base / relative).resolve()

        script_root = _resolve(self.roots.script_dir)
        asset_dir = self.roots.asset_dir
        roots = SourceRoots(
            output_root=_resolve(self.roots.output_dir),
            script_root=script_root,
            style_root=_resolve(self.roots.style_dir),
            asset_root=_resolve(asset_dir) if asset_dir else script_root,
        )

        compressor = self.script.js_compressor_command.strip()
        return BuildConfig(
            roots=roots,
            project_dir=base,
            script_extensions=frozenset(ext.lower() for ext in split_csv(self.script.extensions)),
            style_extensions=frozenset(ext.lower() for ext in split_csv(self.style.extensions)),
            stylesheet_name=self.style.stylesheet_name,
            script_command=tuple(shlex.split(self.script.command)),
            script_watch_flag=self.script.watch_flag,
            js_compressor_command=tuple(shlex.split(compressor)) if compressor else (),
            watch_exclude_patterns=tuple(split_csv(self.watch.exclude_patterns)),
            watch=watch,
            compress=compress,
        )

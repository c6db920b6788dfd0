"""
Configuration groups.

Settings are split into logical groups. Each group is usable on its own and
is assembled by ``Settings``.
"""

from pydantic import BaseModel, Field


def split_csv(value: str) -> list[str]:
    """Turn a comma separated string into a list of stripped, non-empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


class RootsConfig(BaseModel):
    """Source and output directory layout."""

    project_dir: str = Field(default=".", description="Base directory for relative roots")
    output_dir: str = Field(default="app", description="Output root")
    script_dir: str = Field(default="src", description="Script source root")
    style_dir: str = Field(default="scss", description="Style source root")
    asset_dir: str | None = Field(default=None, description="Asset root (defaults to the script root)")


class ScriptConfig(BaseModel):
    """External script compiler settings."""

    extensions: str = Field(default=".ts,.tsx,.jsx", description="Script extensions")
    command: str = Field(default="tsc", description="Compiler command line")
    watch_flag: str = Field(default="--watch", description="Flag enabling the compiler's own watch mode")
    js_compressor_command: str = Field(default="uglifyjs", description="Minifier for emitted JS (empty disables)")


class StyleConfig(BaseModel):
    """Style aggregation settings."""

    extensions: str = Field(default=".scss,.sass", description="Style extensions")
    stylesheet_name: str = Field(default="styles.css", description="Aggregated stylesheet filename")


class WatchConfig(BaseModel):
    """File watcher settings."""

    exclude_patterns: str = Field(
        default=".DS_Store,*.swp,*.swo,*~,*.tmp",
        description="Glob patterns ignored by the watcher",
    )


class ApplicationConfig(BaseModel):
    """Application-level settings."""

    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="console", description="console or json")

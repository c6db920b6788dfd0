from app_compiler.infra.config.groups import (
    ApplicationConfig,
    RootsConfig,
    ScriptConfig,
    StyleConfig,
    WatchConfig,
)
from app_compiler.infra.config.settings import Settings

__all__ = [
    # Settings
    "Settings",
    # Config Groups
    "ApplicationConfig",
    "RootsConfig",
    "ScriptConfig",
    "StyleConfig",
    "WatchConfig",
]

"""
app-compiler configuration

Centralized configuration management using pydantic-settings.
All environment variables use the APP_COMPILER_ prefix.

Usage:
    from app_compiler.config import Settings

    config = Settings().to_build_config(watch=False, compress=True)
"""

from app_compiler.contexts.build_pipeline.domain.models import BuildConfig
from app_compiler.infra.config.settings import Settings

__all__ = ["BuildConfig", "Settings"]

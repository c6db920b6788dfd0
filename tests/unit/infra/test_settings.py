"""Settings and BuildConfig construction tests."""

import os

import pytest

from app_compiler.infra.config import Settings
from app_compiler.infra.config.groups import split_csv


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("APP_COMPILER_"):
            monkeypatch.delenv(key)


def test_split_csv():
    assert split_csv(" .ts, .tsx ,,.jsx ") == [".ts", ".tsx", ".jsx"]
    assert split_csv("") == []


def test_defaults(tmp_path):
    settings = Settings(_env_file=None, project_dir=str(tmp_path))
    config = settings.to_build_config()
    base = tmp_path.resolve()

    assert config.project_dir == base
    assert config.roots.output_root == base / "app"
    assert config.roots.script_root == base / "src"
    assert config.roots.style_root == base / "scss"
    assert config.roots.asset_root == base / "src"
    assert config.stylesheet_path == base / "app" / "styles.css"
    assert config.script_extensions == frozenset({".ts", ".tsx", ".jsx"})
    assert config.style_extensions == frozenset({".scss", ".sass"})
    assert config.script_command == ("tsc",)
    assert config.js_compressor_command == ("uglifyjs",)
    assert "*.swp" in config.watch_exclude_patterns
    assert not config.watch and not config.compress


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("APP_COMPILER_PROJECT_DIR", str(tmp_path))
    monkeypatch.setenv("APP_COMPILER_STYLE_DIR", "src/scss")
    monkeypatch.setenv("APP_COMPILER_ASSET_DIR", "src/html")
    monkeypatch.setenv("APP_COMPILER_SCRIPT_COMMAND", "npx tsc -p tsconfig.json")
    monkeypatch.setenv("APP_COMPILER_JS_COMPRESSOR_COMMAND", "")
    monkeypatch.setenv("APP_COMPILER_STYLE_EXTENSIONS", ".SCSS")

    config = Settings(_env_file=None).to_build_config(watch=True, compress=True)
    base = tmp_path.resolve()

    assert config.roots.style_root == base / "src" / "scss"
    assert config.roots.asset_root == base / "src" / "html"
    assert config.script_command == ("npx", "tsc", "-p", "tsconfig.json")
    assert config.js_compressor_command == ()
    assert config.style_extensions == frozenset({".scss"})
    assert config.watch and config.compress


def test_grouped_access():
    settings = Settings(_env_file=None, log_level="DEBUG", stylesheet_name="bundle.css")

    assert settings.app.log_level == "DEBUG"
    assert settings.style.stylesheet_name == "bundle.css"
    assert settings.roots.output_dir == "app"
    assert settings.script.watch_flag == "--watch"

"""
Global test configuration and fixtures
"""

import time
from pathlib import Path

import pytest

from app_compiler.contexts.build_pipeline.domain.models import BuildConfig, SourceRoots
from tests.fakes.fake_processes import python_command

# Slow test thresholds (seconds)
SLOW_TEST_THRESHOLD = 5.0
WARNING_TEST_THRESHOLD = 2.0


@pytest.fixture(autouse=True)
def track_test_duration(request):
    """Track every test's duration and warn about slow ones."""
    start_time = time.time()

    yield

    duration = time.time() - start_time
    test_name = request.node.nodeid

    if duration > SLOW_TEST_THRESHOLD:
        print(f"\nSLOW TEST ({duration:.2f}s): {test_name}")
        print("   Consider marking with @pytest.mark.slow or optimizing")
    elif duration > WARNING_TEST_THRESHOLD:
        print(f"\nSlow ({duration:.2f}s): {test_name}")


@pytest.fixture
def project_tree(tmp_path) -> Path:
    """Project directory with empty src/, scss/ roots (app/ is created by the build)."""
    project = tmp_path / "project"
    (project / "src").mkdir(parents=True)
    (project / "scss").mkdir(parents=True)
    return project.resolve()


@pytest.fixture
def make_config(project_tree):
    """Factory building a BuildConfig over ``project_tree``."""

    def _make(
        style_dir: str = "scss",
        asset_dir: str | None = None,
        **overrides,
    ) -> BuildConfig:
        script_root = project_tree / "src"
        roots = SourceRoots(
            output_root=project_tree / "app",
            script_root=script_root,
            style_root=project_tree / style_dir,
            asset_root=project_tree / asset_dir if asset_dir else script_root,
        )
        overrides.setdefault("script_command", python_command("pass"))
        overrides.setdefault("project_dir", project_tree)
        return BuildConfig(roots=roots, **overrides)

    return _make


@pytest.fixture
def build_config(make_config) -> BuildConfig:
    return make_config()


# Pytest hooks
def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (real subprocesses, libsass, watchdog)")
    config.addinivalue_line("markers", "slow: Slow tests (>5s)")


def pytest_collection_modifyitems(config, items):
    """Add markers based on the test path."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)

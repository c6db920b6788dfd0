"""
Test Fakes Module

Provides fake/stub implementations for testing.
"""

from tests.fakes.fake_processes import python_command
from tests.fakes.fake_style_compiler import FakeStyleCompiler

__all__ = ["FakeStyleCompiler", "python_command"]

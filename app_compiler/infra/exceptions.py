"""
Build Exceptions

Exception hierarchy raised inside the pipelines. Public pipeline operations
convert these into ``BuildOutcome`` values; nothing here is retried.
"""

from typing import Any

# ============================================================================
# Base Build Exception
# ============================================================================


class BuildException(Exception):
    """
    Base exception for all build errors.

    Attributes:
        message: Human-readable error message
        details: Additional context (dict)
        component: Which pipeline failed
    """

    kind = "unknown"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        component: str = "unknown",
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.component = component

    def __str__(self) -> str:
        base = f"[{self.component}] {self.message}"
        if self.details:
            base += f" | details={self.details}"
        return base


# ============================================================================
# External Process Exceptions
# ============================================================================


class ScriptCompilerError(BuildException):
    """External compiler (or JS compressor) exited with a non-zero code."""

    kind = "process"

    def __init__(self, exit_code: int | None, command: list[str] | tuple[str, ...]):
        super().__init__(
            f"{command[0] if command else 'compiler'} exited with code {exit_code}",
            details={"exit_code": exit_code, "command": " ".join(command)},
            component="scripts",
        )
        self.exit_code = exit_code


class CompilerNotFoundError(ScriptCompilerError):
    """The configured compiler executable is not on PATH."""

    def __init__(self, command: list[str] | tuple[str, ...]):
        super().__init__(None, command)
        self.message = f"compiler executable not found: {command[0] if command else '<empty>'}"


# ============================================================================
# Compile Exceptions
# ============================================================================


class StyleCompileError(BuildException):
    """The style compiler rejected a source file."""

    kind = "compile"

    def __init__(self, source: str, reason: str):
        super().__init__(
            f"failed to compile {source}",
            details={"source": source, "reason": reason},
            component="styles",
        )
        self.source = source
        self.reason = reason


# ============================================================================
# Filesystem Exceptions
# ============================================================================


class AssetMirrorError(BuildException):
    """Copying or removing a mirrored entry failed."""

    kind = "filesystem"

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"failed to mirror {path}",
            details={"path": path, "reason": reason},
            component="assets",
        )
        self.path = path


class SourceRootMissingError(BuildException):
    """A configured source root does not exist."""

    kind = "filesystem"

    def __init__(self, root: str, component: str):
        super().__init__(
            f"source root does not exist: {root}",
            details={"root": root},
            component=component,
        )
        self.root = root

"""Build pipeline domain models."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class BuildDomain(str, Enum):
    """Build category a source path belongs to."""

    SCRIPT = "script"
    STYLE = "style"
    ASSET = "asset"
    IGNORED = "ignored"  # outside every owning root


class Pipeline(str, Enum):
    """Build logic owning one domain end-to-end."""

    SCRIPTS = "scripts"
    STYLES = "styles"
    ASSETS = "assets"


class FailureKind(str, Enum):
    PROCESS = "process"  # external compiler exited non-zero
    COMPILE = "compile"  # style compiler rejected a source
    FILESYSTEM = "filesystem"  # missing root, copy/remove failure


@dataclass(frozen=True)
class SourceRoots:
    """Directory layout. All paths are absolute and resolved."""

    output_root: Path
    script_root: Path
    style_root: Path
    asset_root: Path

    def watched_roots(self) -> list[Path]:
        """Roots needing a filesystem subscription, with nested roots folded into their parent."""
        candidates = []
        for root in (self.script_root, self.style_root, self.asset_root):
            if root not in candidates:
                candidates.append(root)
        return [
            root
            for root in candidates
            if not any(other != root and root.is_relative_to(other) for other in candidates)
        ]


@dataclass(frozen=True)
class BuildConfig:
    """
    Immutable build configuration.

    Constructed once at process entry (see ``Settings.to_build_config``) and
    passed by reference to every component.
    """

    roots: SourceRoots
    project_dir: Path | None = None  # working directory of the external compiler
    script_extensions: frozenset[str] = frozenset({".ts", ".tsx", ".jsx"})
    style_extensions: frozenset[str] = frozenset({".scss", ".sass"})
    stylesheet_name: str = "styles.css"
    script_command: tuple[str, ...] = ("tsc",)
    script_watch_flag: str = "--watch"
    js_compressor_command: tuple[str, ...] = ()
    watch_exclude_patterns: tuple[str, ...] = ()
    watch: bool = False
    compress: bool = False

    @property
    def stylesheet_path(self) -> Path:
        return self.roots.output_root / self.stylesheet_name


@dataclass(frozen=True)
class ClassifiedPath:
    """An absolute path tagged with its domain and its path relative to the owning root."""

    path: Path
    domain: BuildDomain
    root: Path | None = None

    @property
    def relative(self) -> Path | None:
        if self.root is None:
            return None
        return self.path.relative_to(self.root)

    def destination(self, output_root: Path) -> Path | None:
        """Mirrored location under the output root (None when the path has no owning root)."""
        relative = self.relative
        if relative is None:
            return None
        return output_root / relative


@dataclass(frozen=True)
class CompileUnit:
    """One style source plus the ordered import-path set shared by the whole run."""

    source: Path
    include_paths: tuple[Path, ...]


@dataclass(frozen=True)
class StylesheetEntry:
    relative_path: str  # "/" + posix path relative to the style root
    css: str


@dataclass
class Stylesheet:
    """
    The single concatenated build artifact.

    Entries keep discovery order. An entry with empty compiled text contributes
    nothing. Provenance comments are omitted in compressed mode.
    """

    entries: list[StylesheetEntry] = field(default_factory=list)
    compressed: bool = False

    def render(self) -> str:
        parts: list[str] = []
        for entry in self.entries:
            if not entry.css.strip():
                continue
            if self.compressed:
                parts.append(entry.css)
            else:
                parts.append(f"/* File: {entry.relative_path} */\n{entry.css}\n")
        return "".join(parts)


@dataclass(frozen=True)
class BuildFailure:
    kind: FailureKind
    detail: str
    exit_code: int | None = None


@dataclass(frozen=True)
class BuildOutcome:
    """Result of one pipeline operation: success, or a tagged failure."""

    pipeline: Pipeline
    failure: BuildFailure | None = None
    elapsed_s: float = 0.0

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def exit_code(self) -> int:
        """Process exit code this outcome maps to: 0, the reported code, or 1."""
        if self.failure is None:
            return 0
        code = self.failure.exit_code
        return code if code is not None and code > 0 else 1

    @classmethod
    def success(cls, pipeline: Pipeline, elapsed_s: float = 0.0) -> "BuildOutcome":
        return cls(pipeline=pipeline, elapsed_s=elapsed_s)

    @classmethod
    def failed(
        cls,
        pipeline: Pipeline,
        kind: FailureKind,
        detail: str,
        exit_code: int | None = None,
        elapsed_s: float = 0.0,
    ) -> "BuildOutcome":
        return cls(
            pipeline=pipeline,
            failure=BuildFailure(kind=kind, detail=detail, exit_code=exit_code),
            elapsed_s=elapsed_s,
        )

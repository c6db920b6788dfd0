"""app-compiler: front-end build orchestrator for scripts, styles and static assets."""

__version__ = "1.0.0"

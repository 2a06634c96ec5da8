"""markdown rendering core."""

from safemark.core.config import DEFAULT_CONFIG, EngineConfig
from safemark.core.engine import MarkdownEngine, create_engine, render_markdown

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "MarkdownEngine",
    "create_engine",
    "render_markdown",
]

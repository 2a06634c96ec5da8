"""engine configuration."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    """options fixed when an engine is built."""

    html: bool = True  # raw HTML passes through to the sanitizer
    fuzzy_link: bool = False  # autolink only URLs with an explicit scheme
    tables: bool = True
    strikethrough: bool = True
    forbid_tags: tuple[str, ...] = ("textarea", "style", "script")


DEFAULT_CONFIG = EngineConfig()

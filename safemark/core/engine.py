"""markdown engine composition: extensions, math, autolinks and sanitization."""

import logging
from typing import Any, Optional

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from mdit_py_plugins.dollarmath import dollarmath_plugin

# imported for their side effect of registering the built-in extensions
from safemark.extensions import (  # noqa: F401  # pylint: disable=unused-import
    ExtensionRegistry,
    RenderContext,
    anchor,
    emoji,
    footnotes,
    registry,
)
from safemark.core.config import DEFAULT_CONFIG, EngineConfig
from safemark.core.resolution import (
    is_parsable_url,
    render_heading_open,
    render_link_open,
)
from safemark.core.sanitize import sanitize_html
from safemark.extensions.rules import CONTEXT_KEY, install_extensions

logger = logging.getLogger(__name__)


def render_tex(content: str, options: dict[str, Any]) -> str:
    """
    emits TeX as escaped text between MathJax delimiters.

    TeX is never interpreted here, so malformed math cannot fail and reaches
    the page as literal text.

    Args:
        content: TeX source without the dollar delimiters
        options: dollarmath render options ("display_mode")

    Returns:
        escaped TeX wrapped in \\( \\) or \\[ \\]
    """
    if options.get("display_mode"):
        return f"\\[{escapeHtml(content)}\\]"
    return f"\\({escapeHtml(content)}\\)"


def build_parser(config: EngineConfig, extensions: ExtensionRegistry) -> MarkdownIt:
    """
    builds the configured markdown-it parser.

    Args:
        config: engine options
        extensions: syntax extensions to install

    Returns:
        parser with math, autolinks, extensions and renderer overrides
    """
    md = MarkdownIt("commonmark", {"html": config.html, "linkify": True})
    if config.tables:
        md.enable("table")
    if config.strikethrough:
        md.enable("strikethrough")

    # only scheme-prefixed URLs are autolinked unless fuzzy_link is set
    md.enable("linkify")
    linkify: Any = md.linkify
    linkify.set({"fuzzy_link": config.fuzzy_link})

    md.use(dollarmath_plugin, allow_digits=False, renderer=render_tex)
    install_extensions(md, extensions)

    # mdurl would rewrite unparsable destinations; they must reach the
    # link renderer as written
    normalize_link = md.normalizeLink

    def keep_unparsable(url: str) -> str:
        return normalize_link(url) if is_parsable_url(url) else url

    md.normalizeLink = keep_unparsable  # type: ignore[method-assign]

    md.add_render_rule("link_open", render_link_open)
    md.add_render_rule("heading_open", render_heading_open)
    return md


class MarkdownEngine:
    """reusable markdown to safe HTML renderer."""

    def __init__(
        self,
        config: EngineConfig = DEFAULT_CONFIG,
        extensions: Optional[ExtensionRegistry] = None,
    ) -> None:
        self.config = config
        self.extensions = extensions if extensions is not None else registry
        self._md = build_parser(config, self.extensions)

    def render(self, text: Optional[str], base_url: Optional[str] = None) -> str:
        """
        renders markdown to sanitized HTML.

        Args:
            text: markdown source
            base_url: base for relative link destinations

        Returns:
            sanitized HTML
        """
        ctx = RenderContext(base_url=base_url, inline_renderer=self.render_inline)
        html: str = self._md.render(text or "", {CONTEXT_KEY: ctx})
        return sanitize_html(html, self.config)

    def render_inline(self, text: str, ctx: RenderContext) -> str:
        """
        renders inline markdown without block structure or sanitization.

        re-entrant: extension renderers call this while an outer render is in
        progress.

        Args:
            text: inline markdown source
            ctx: context of the enclosing render call

        Returns:
            unsanitized inline HTML
        """
        html: str = self._md.renderInline(text, {CONTEXT_KEY: ctx})
        return html


def create_engine(
    config: Optional[EngineConfig] = None,
    extensions: Optional[ExtensionRegistry] = None,
) -> MarkdownEngine:
    """
    creates an engine; build once and reuse it across render calls.

    Args:
        config: engine options (defaults to DEFAULT_CONFIG)
        extensions: extension registry (defaults to the built-in extensions)

    Returns:
        configured engine
    """
    engine = MarkdownEngine(config or DEFAULT_CONFIG, extensions)
    logger.debug(
        "Created markdown engine with %d extension(s)", len(engine.extensions)
    )
    return engine


def render_markdown(
    text: Optional[str],
    base_url: Optional[str] = None,
    engine: Optional[MarkdownEngine] = None,
) -> str:
    """
    renders markdown to sanitized HTML.

    Args:
        text: markdown source
        base_url: base for relative link destinations
        engine: engine to use; a new one is built when omitted

    Returns:
        sanitized HTML
    """
    return (engine or create_engine()).render(text, base_url)

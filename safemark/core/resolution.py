"""link target and heading id resolution."""

import logging
import re
from collections.abc import MutableMapping, Sequence
from typing import Any, Optional
from urllib.parse import urljoin, urlsplit

from markdown_it.common.utils import escapeHtml
from markdown_it.token import Token
from markdown_it.utils import OptionsDict

from safemark.extensions.rules import context_from_env

logger = logging.getLogger(__name__)

NON_WORD_PATTERN = re.compile(r"[^\w]+", re.ASCII)


def slugify(text: str) -> str:
    """
    derives a heading id from heading text.

    lowercasing keeps ids and hand-written fragment links in agreement.
    repeated headings get repeated ids; nothing is numbered.

    Args:
        text: heading text

    Returns:
        lowercase id with runs of non-word characters collapsed to "-"
    """
    slug = NON_WORD_PATTERN.sub("-", text.lower())
    return re.sub(r"^-|-$", "", slug)


def is_parsable_url(url: str) -> bool:
    """returns False for destinations urllib cannot split, such as "http://[::1"."""
    try:
        urlsplit(url)
    except ValueError:
        return False
    return True


def resolve_href(href: str, base_url: Optional[str] = None) -> str:
    """
    resolves a link destination for rendering.

    Args:
        href: destination as written (after markdown-it normalization)
        base_url: optional base for relative destinations

    Returns:
        lowercased fragment for "#..." targets, otherwise the destination
        joined to base_url, or the destination unchanged when it cannot be
        resolved
    """
    if href.startswith("#"):
        return href.lower()
    if not base_url:
        return href
    try:
        return urljoin(base_url, href)
    except ValueError as e:
        logger.debug("Keeping unresolvable link %r: %s", href, e)
        return href


def render_link_open(
    _self: Any,
    tokens: Sequence[Token],
    idx: int,
    _options: OptionsDict,
    env: MutableMapping[str, Any],
) -> str:
    """renders <a> with a resolved href; the title attribute is dropped."""
    href = tokens[idx].attrGet("href")
    ctx = context_from_env(env)
    resolved = resolve_href(str(href or ""), ctx.base_url)
    return f'<a href="{escapeHtml(resolved)}">'


def render_heading_open(
    _self: Any,
    tokens: Sequence[Token],
    idx: int,
    _options: OptionsDict,
    _env: MutableMapping[str, Any],
) -> str:
    """renders <hN> with an id slugified from the heading's inline text."""
    token = tokens[idx]
    inline = tokens[idx + 1] if idx + 1 < len(tokens) else None
    text = inline.content if inline is not None else ""
    return f'<{token.tag} id="{slugify(text)}">'

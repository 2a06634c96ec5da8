"""HTML sanitization for rendered markdown."""

import re
from collections.abc import Iterable
from functools import lru_cache
from typing import Any, Optional

import bleach
from bleach.css_sanitizer import CSSSanitizer
from bleach.sanitizer import BleachSanitizerFilter, Cleaner
from bs4 import BeautifulSoup

from safemark.core.config import DEFAULT_CONFIG, EngineConfig
from safemark.core.resolution import is_parsable_url

ALLOWED_TAGS = frozenset(bleach.sanitizer.ALLOWED_TAGS) | {
    "p",
    "br",
    "hr",
    "div",
    "span",
    "sup",
    "sub",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "pre",
    "code",
    "kbd",
    "del",
    "s",
    "ins",
    "img",
    "table",
    "thead",
    "tbody",
    "tr",
    "th",
    "td",
    "dl",
    "dt",
    "dd",
    "details",
    "summary",
}

ALLOWED_ATTRIBUTES = {
    "*": ["class", "id", "title"],
    "a": ["href", "name", "title", "rel"],
    "img": ["src", "alt", "title", "width", "height"],
    "ol": ["start"],
    "th": ["style", "colspan", "rowspan"],
    "td": ["style", "colspan", "rowspan"],
}

ALLOWED_PROTOCOLS = ["http", "https", "mailto"]

SCHEME_PATTERN = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.-]*):")


class LinkSanitizerFilter(BleachSanitizerFilter):
    """sanitizer filter that keeps unparsable links with an allowed scheme."""

    def sanitize_uri_value(
        self, value: str, allowed_protocols: Iterable[str]
    ) -> Optional[str]:
        sanitized: Optional[str] = super().sanitize_uri_value(value, allowed_protocols)
        if sanitized is not None or is_parsable_url(value):
            return sanitized
        # bleach rejects whatever urlparse cannot split
        match = SCHEME_PATTERN.match(value)
        if match and match.group(1).lower() in allowed_protocols:
            return value
        return None


class MarkdownCleaner(Cleaner):
    """bleach cleaner running LinkSanitizerFilter."""

    def clean(self, text: str) -> str:
        if not text:
            return ""

        dom = self.parser.parseFragment(text)
        filtered: Any = LinkSanitizerFilter(
            source=self.walker(dom),
            allowed_tags=self.tags,
            attributes=self.attributes,
            strip_disallowed_tags=self.strip,
            strip_html_comments=self.strip_comments,
            css_sanitizer=self.css_sanitizer,
            allowed_protocols=self.protocols,
        )
        for filter_class in self.filters:
            filtered = filter_class(source=filtered)
        html: str = self.serializer.render(filtered)
        return html


@lru_cache
def _cleaner(forbid_tags: tuple[str, ...]) -> Cleaner:
    """returns a reusable cleaner that never admits forbid_tags."""
    return MarkdownCleaner(
        tags=sorted(ALLOWED_TAGS - set(forbid_tags)),
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        css_sanitizer=CSSSanitizer(allowed_css_properties=["text-align"]),
        strip=True,
        strip_comments=True,
    )


def drop_forbidden(html: str, forbid_tags: tuple[str, ...]) -> str:
    """
    removes forbidden elements together with everything inside them.

    works on the markup string alone, no document object is involved.

    Args:
        html: rendered HTML
        forbid_tags: tag names to remove

    Returns:
        HTML without the forbidden elements
    """
    soup = BeautifulSoup(html, "html.parser")
    found = soup.find_all(list(forbid_tags))
    if not found:
        return html
    for element in found:
        element.extract()
    return str(soup)


def sanitize_html(html: str, config: EngineConfig = DEFAULT_CONFIG) -> str:
    """
    strips unsafe markup from rendered HTML.

    forbidden elements are dropped with their content, then everything
    outside the allowlist is stripped. removal is silent.

    Args:
        html: rendered HTML
        config: engine config providing the forbidden tags

    Returns:
        sanitized HTML
    """
    html = drop_forbidden(html, config.forbid_tags)
    return _cleaner(config.forbid_tags).clean(html)

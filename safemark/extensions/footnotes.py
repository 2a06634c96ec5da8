"""footnote reference and footnote definition extensions."""

import html
import re
from typing import Optional

from safemark.extensions import ExtensionToken, RenderContext, extension

FOOTNOTE_PREFIX = "marked-fn"
REFERENCE_PREFIX = "marked-fnref"

# a trailing "(" means a regular link whose text starts with a caret
REFERENCE_PATTERN = re.compile(r"^\[\^([^\]]+)\](?!\()")
# the body is a single non-whitespace run; multi-word bodies are unsupported
DEFINITION_PATTERN = re.compile(r"^\[\^([^\]]+)\]:\s(\S*)")


def footnote_id(label: str) -> str:
    """returns the id of the definition paragraph for label."""
    return f"{FOOTNOTE_PREFIX}:{label}"


def reference_id(label: str) -> str:
    """returns the id of the reference marker for label."""
    return f"{REFERENCE_PREFIX}:{label}"


@extension("footnote", level="block")
class FootnoteExtension:
    """renders [^label]: body definitions as back-linked paragraphs."""

    def recognize(self, src: str) -> bool:
        """checks for a definition at the start of src."""
        return DEFINITION_PATTERN.match(src) is not None

    def tokenize(self, src: str) -> Optional[ExtensionToken]:
        """consumes the label, separator and single-run body."""
        match = DEFINITION_PATTERN.match(src)
        if not match:
            return None
        return ExtensionToken(
            kind="footnote",
            raw=match.group(0),
            text=match.group(1).strip(),
            body=match.group(2).strip(),
        )

    def render(self, token: ExtensionToken, ctx: RenderContext) -> str:
        """
        renders the definition paragraph with its body re-rendered inline.

        Args:
            token: footnote definition token
            ctx: render context providing the inline render path

        Returns:
            footnote paragraph HTML
        """
        label = html.escape(token.text)
        body = ctx.render_inline(token.body)
        return (
            f'<p class="txt-small footnote" id="{footnote_id(label)}">'
            f'<span class="marker">{label}.</span> {body} '
            f'<a class="txt-tiny ref-arrow no-underline" href="#{reference_id(label)}">'
            "↩</a></p>\n"
        )


@extension("footnote-ref", level="inline")
class FootnoteReferenceExtension:
    """renders [^label] as a superscript link to its definition."""

    def recognize(self, src: str) -> bool:
        """checks for a reference at the start of src."""
        return REFERENCE_PATTERN.match(src) is not None

    def tokenize(self, src: str) -> Optional[ExtensionToken]:
        """consumes the bracketed, caret-prefixed label."""
        match = REFERENCE_PATTERN.match(src)
        if not match:
            return None
        return ExtensionToken(
            kind="footnote-ref", raw=match.group(0), text=match.group(1).strip()
        )

    def render(self, token: ExtensionToken, _ctx: RenderContext) -> str:
        """renders the superscript marker linking to the definition."""
        label = html.escape(token.text)
        return (
            f'<sup class="txt-tiny footnote-ref" id="{reference_id(label)}">'
            f'<a href="#{footnote_id(label)}">[{label}]</a></sup>'
        )

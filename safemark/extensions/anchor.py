"""self-closing anchor fixup extension."""

import re
from typing import Optional

from safemark.extensions import ExtensionToken, RenderContext, extension

ANCHOR_PATTERN = re.compile(r'<a name="([\w]+)"/>', re.ASCII)


@extension("sanitized-anchor", level="block")
class AnchorExtension:
    """
    rewrites <a name="x"/> into <a name="x"></a>.

    HTML parsers ignore the self-closing slash on <a>, so the short form
    would wrap everything that follows it in the link.
    """

    def recognize(self, src: str) -> bool:
        """checks for an anchor anywhere in src."""
        return ANCHOR_PATTERN.search(src) is not None

    def tokenize(self, src: str) -> Optional[ExtensionToken]:
        """consumes an anchor at the start of src."""
        match = ANCHOR_PATTERN.match(src)
        if not match:
            return None
        return ExtensionToken(
            kind="sanitized-anchor", raw=match.group(0), text=match.group(1).strip()
        )

    def render(self, token: ExtensionToken, _ctx: RenderContext) -> str:
        """renders the explicit open/close pair."""
        return f'<a name="{token.text}"></a>'

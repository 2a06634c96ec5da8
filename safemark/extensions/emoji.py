"""emoji shortcode extension."""

import json
import logging
import re
from functools import lru_cache
from importlib import resources
from typing import Optional

from safemark.extensions import ExtensionToken, RenderContext, extension

logger = logging.getLogger(__name__)

EMOJI_PATTERN = re.compile(r"^:([\w+-]+):", re.ASCII)


@lru_cache(maxsize=1)
def load_emojis() -> dict[str, str]:
    """
    loads the shortcode to glyph table shipped with the package.

    Returns:
        mapping of shortcode names (without colons) to glyphs
    """
    source = resources.files("safemark.extensions").joinpath("emojis.json")
    emojis: dict[str, str] = json.loads(source.read_text(encoding="utf-8"))
    logger.debug("Loaded %d emoji shortcodes", len(emojis))
    return emojis


@extension("emoji", level="inline")
class EmojiExtension:
    """renders :name: shortcodes as glyphs."""

    def __init__(self) -> None:
        self.emojis = load_emojis()

    def recognize(self, src: str) -> bool:
        """weak hint: a colon somewhere ahead."""
        return ":" in src

    def tokenize(self, src: str) -> Optional[ExtensionToken]:
        """matches a shortcode anchored at the start of src."""
        match = EMOJI_PATTERN.match(src)
        if not match:
            return None
        return ExtensionToken(kind="emoji", raw=match.group(0), text=match.group(1).strip())

    def render(self, token: ExtensionToken, _ctx: RenderContext) -> str:
        """
        renders the glyph, falling back to the bare name when unknown.

        Args:
            token: emoji token
            _ctx: render context (unused)

        Returns:
            span wrapping the glyph or the literal name
        """
        glyph = self.emojis.get(token.text)
        if glyph is None:
            logger.debug("Unknown emoji shortcode: %s", token.text)
            return f"<span>{token.text}</span>"
        return f"<span>{glyph}</span>"

"""adapters turning syntax extensions into markdown-it rules."""

import logging
from collections.abc import MutableMapping, Sequence
from typing import Any, Callable, Optional

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token
from markdown_it.utils import OptionsDict

from safemark.extensions import Extension, ExtensionRegistry, ExtensionToken, RenderContext

logger = logging.getLogger(__name__)

# key under which the per-call RenderContext travels in markdown-it's env
CONTEXT_KEY = "safemark_context"


def context_from_env(env: MutableMapping[str, Any]) -> RenderContext:
    """returns the render context stored in env, or an empty one."""
    ctx = env.get(CONTEXT_KEY)
    return ctx if isinstance(ctx, RenderContext) else RenderContext()


def checked_tokenize(ext: Extension, src: str) -> Optional[ExtensionToken]:
    """
    runs ext.tokenize and rejects tokens that would stall or misplace the cursor.

    Args:
        ext: extension to run
        src: remaining input

    Returns:
        the token if its raw text is a non-empty prefix of src, else None
    """
    token = ext.tokenize(src)
    if token is None:
        return None
    if not token.raw or not src.startswith(token.raw):
        logger.warning("Extension %s produced an invalid match: %r", ext.name, token.raw)
        return None
    return token


def make_inline_rule(ext: Extension) -> Callable[[StateInline, bool], bool]:
    """builds an inline rule for ext."""

    def rule(state: StateInline, silent: bool) -> bool:
        src = state.src[state.pos : state.posMax]
        if not ext.recognize(src):
            return False
        token = checked_tokenize(ext, src)
        if token is None:
            return False

        if not silent:
            md_token = state.push(ext.name, "", 0)
            md_token.markup = token.raw
            md_token.meta = {"token": token}

        state.pos += len(token.raw)
        return True

    return rule


def make_block_rule(ext: Extension) -> Callable[[StateBlock, int, int, bool], bool]:
    """
    builds a block rule for ext.

    the extension sees the current line joined with the next non-blank line
    of the same block, so a match may end on either. text left on the last
    consumed line is emitted as a paragraph of its own.
    """

    def rule(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
        if state.is_code_block(startLine):
            return False

        src = _block_source(state, startLine, endLine)
        if not ext.recognize(src):
            return False
        token = checked_tokenize(ext, src)
        if token is None:
            return False

        if silent:
            return True

        consumed = token.raw.count("\n") + 1
        md_token = state.push(ext.name, "", 0)
        md_token.markup = token.raw
        md_token.map = [startLine, startLine + consumed]
        md_token.meta = {"token": token}

        rest = src[len(token.raw) :].split("\n", 1)[0].strip()
        if rest:
            _push_paragraph(state, rest, startLine + consumed - 1)

        state.line = startLine + consumed
        return True

    return rule


def _line_text(state: StateBlock, line: int) -> str:
    """returns a line without its indentation and container markers."""
    return state.src[state.bMarks[line] + state.tShift[line] : state.eMarks[line]]


def _block_source(state: StateBlock, startLine: int, endLine: int) -> str:
    """returns startLine, plus the following line when it continues the block."""
    text = _line_text(state, startLine)
    next_line = startLine + 1
    if (
        next_line < endLine
        and not state.isEmpty(next_line)
        and state.sCount[next_line] >= state.blkIndent
    ):
        text += "\n" + _line_text(state, next_line)
    return text


def _push_paragraph(state: StateBlock, content: str, line: int) -> None:
    """pushes a one-line paragraph whose inline content is parsed later."""
    token = state.push("paragraph_open", "p", 1)
    token.map = [line, line + 1]

    token = state.push("inline", "", 0)
    token.content = content
    token.map = [line, line + 1]
    token.children = []

    state.push("paragraph_close", "p", -1)


def make_render_rule(
    ext: Extension,
) -> Callable[[Any, Sequence[Token], int, OptionsDict, MutableMapping[str, Any]], str]:
    """builds the markdown-it render rule for tokens produced by ext."""

    def render(
        _self: Any,
        tokens: Sequence[Token],
        idx: int,
        _options: OptionsDict,
        env: MutableMapping[str, Any],
    ) -> str:
        return ext.render(tokens[idx].meta["token"], context_from_env(env))

    return render


def install_extensions(md: MarkdownIt, registry: ExtensionRegistry) -> None:
    """
    wires every extension of registry into md.

    inline extensions run right after the plain-text rule, block extensions
    right before link reference definitions (which would otherwise swallow
    footnote definitions) and may interrupt paragraphs. within a level the
    registry order is the dispatch order.

    Args:
        md: parser to extend
        registry: extensions to install
    """
    previous = "text"
    for ext in registry.by_level("inline"):
        md.inline.ruler.after(previous, ext.name, make_inline_rule(ext))
        md.add_render_rule(ext.name, make_render_rule(ext))
        previous = ext.name

    for ext in registry.by_level("block"):
        md.block.ruler.before(
            "reference", ext.name, make_block_rule(ext), {"alt": ["paragraph"]}
        )
        md.add_render_rule(ext.name, make_render_rule(ext))

    logger.debug("Installed extensions: %s", ", ".join(e.name for e in registry))

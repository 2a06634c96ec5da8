"""tests for markdown-it rule adapters."""

import logging
from typing import Optional

import pytest

from safemark.core import create_engine
from safemark.extensions import (
    ExtensionRegistry,
    ExtensionToken,
    RenderContext,
    extension,
)
from safemark.extensions.rules import CONTEXT_KEY, checked_tokenize, context_from_env


class FixedExtension:  # pylint: disable=too-few-public-methods
    """extension that always returns the same raw text."""

    name = "fixed"
    level = "inline"

    def __init__(self, raw: str) -> None:
        self.raw = raw

    def recognize(self, _src: str) -> bool:
        """always recognizes."""
        return True

    def tokenize(self, _src: str) -> Optional[ExtensionToken]:
        """returns a token with the configured raw text."""
        return ExtensionToken(kind="fixed", raw=self.raw, text=self.raw)

    def render(self, token: ExtensionToken, _ctx: RenderContext) -> str:
        """renders the raw text."""
        return token.raw


def test_checked_tokenize_accepts_prefix() -> None:
    """tokens whose raw text is a prefix of the input pass."""
    token = checked_tokenize(FixedExtension("ab"), "abc")
    assert token is not None
    assert token.raw == "ab"


def test_checked_tokenize_rejects_empty_raw(caplog: pytest.LogCaptureFixture) -> None:
    """empty matches are rejected so the cursor always advances."""
    with caplog.at_level(logging.WARNING):
        assert checked_tokenize(FixedExtension(""), "abc") is None
    assert "invalid match" in caplog.text


def test_checked_tokenize_rejects_non_prefix() -> None:
    """raw text that is not at the start of the input is rejected."""
    assert checked_tokenize(FixedExtension("bc"), "abc") is None


def test_context_from_env_defaults_to_empty_context() -> None:
    """missing context yields an empty one."""
    ctx = context_from_env({})
    assert ctx.base_url is None


def test_context_from_env_returns_stored_context() -> None:
    """stored context is returned as is."""
    ctx = RenderContext(base_url="https://example.test/")
    assert context_from_env({CONTEXT_KEY: ctx}) is ctx


def test_custom_registry_drives_engine() -> None:
    """engine built from a custom registry uses only its extensions."""
    target = ExtensionRegistry()

    @extension("shout", level="inline", target_registry=target)
    class ShoutExtension:  # pylint: disable=unused-variable
        """renders !! as bold."""

        def recognize(self, src: str) -> bool:
            """checks for !! at the start of src."""
            return src.startswith("!!")

        def tokenize(self, src: str) -> Optional[ExtensionToken]:
            """consumes !!."""
            if not src.startswith("!!"):
                return None
            return ExtensionToken(kind="shout", raw="!!", text="!!")

        def render(self, _token: ExtensionToken, _ctx: RenderContext) -> str:
            """renders bold bang."""
            return "<b>!</b>"

    engine = create_engine(extensions=target)

    assert engine.render("hi!! :smile:") == "<p>hi<b>!</b> :smile:</p>\n"


def test_block_extension_interrupts_paragraph() -> None:
    """block extensions start on any line, even inside a paragraph."""
    engine = create_engine()
    html = engine.render("intro\n[^a]: note")
    assert html.startswith("<p>intro</p>\n")
    assert 'id="marked-fn:a"' in html


def test_block_extension_ignored_in_code_block() -> None:
    """indented code is never handed to block extensions."""
    engine = create_engine()
    html = engine.render('    <a name="top"/>')
    assert "<pre><code>" in html
    assert "&lt;a name=" in html


def test_block_extension_sees_next_line_inside_container() -> None:
    """the joined next line is read without its blockquote marker."""
    engine = create_engine()
    html = engine.render("> [^a]:\n> foo")
    assert html.startswith("<blockquote>\n")
    assert '<span class="marker">a.</span> foo ' in html


def test_block_extension_match_on_first_line_leaves_next_line() -> None:
    """a match ending on the first line does not consume the second."""
    engine = create_engine()
    html = engine.render("[^a]: one\ntwo")
    assert '<span class="marker">a.</span> one ' in html
    assert html.endswith("<p>two</p>\n")

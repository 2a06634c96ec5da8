"""tests for anchor fixup extension."""

from safemark.extensions import RenderContext
from safemark.extensions.anchor import AnchorExtension


def test_recognize_finds_anchor_anywhere() -> None:
    """recognize searches the whole input."""
    ext = AnchorExtension()
    assert ext.recognize('text <a name="top"/>')
    assert not ext.recognize('<a name="top">')


def test_tokenize_requires_anchor_at_start() -> None:
    """tokenize only matches at offset 0."""
    ext = AnchorExtension()
    assert ext.tokenize('text <a name="top"/>') is None


def test_tokenize_and_render() -> None:
    """self-closing anchor becomes an explicit open/close pair."""
    ext = AnchorExtension()
    token = ext.tokenize('<a name="section_1"/> rest')
    assert token is not None
    assert token.raw == '<a name="section_1"/>'
    assert token.text == "section_1"
    assert ext.render(token, RenderContext()) == '<a name="section_1"></a>'


def test_tokenize_rejects_non_word_names() -> None:
    """names outside [A-Za-z0-9_] do not match."""
    ext = AnchorExtension()
    assert ext.tokenize('<a name="a-b"/>') is None
    assert ext.tokenize('<a name=""/>') is None
    assert ext.tokenize('<a name="é"/>') is None

"""tests for extension registry."""

from typing import Optional

from safemark.extensions import (
    ExtensionRegistry,
    ExtensionToken,
    RenderContext,
    extension,
    registry,
)


def test_render_context_defaults() -> None:
    """RenderContext has no base URL and no inline renderer by default."""
    ctx = RenderContext()
    assert ctx.base_url is None
    assert ctx.inline_renderer is None


def test_render_context_escapes_without_inline_renderer() -> None:
    """render_inline escapes text when no renderer is attached."""
    ctx = RenderContext()
    assert ctx.render_inline("<b>") == "&lt;b&gt;"


def test_render_context_passes_itself_to_inline_renderer() -> None:
    """render_inline hands the same context to the inline renderer."""
    seen: list[RenderContext] = []

    def inline(text: str, ctx: RenderContext) -> str:
        seen.append(ctx)
        return text.upper()

    ctx = RenderContext(base_url="https://example.test/", inline_renderer=inline)
    assert ctx.render_inline("body") == "BODY"
    assert seen == [ctx]


def test_extension_decorator_registers_class() -> None:
    """@extension decorator registers an instance under its name."""
    target = ExtensionRegistry()

    @extension("shout", level="inline", target_registry=target)
    class ShoutExtension:  # pylint: disable=unused-variable
        """test extension for registration."""

        def recognize(self, src: str) -> bool:
            """recognizes a bang."""
            return src.startswith("!")

        def tokenize(self, src: str) -> Optional[ExtensionToken]:
            """consumes a bang."""
            return ExtensionToken(kind="shout", raw="!", text="!")

        def render(self, _token: ExtensionToken, _ctx: RenderContext) -> str:
            """renders a bang."""
            return "<b>!</b>"

    assert "shout" in target
    assert len(target) == 1
    registered = target.get("shout")
    assert registered is not None
    assert registered.level == "inline"


def test_by_level_keeps_registration_order() -> None:
    """by_level returns extensions of one level in registration order."""
    target = ExtensionRegistry()

    for name, level in [("a", "inline"), ("b", "block"), ("c", "inline")]:

        @extension(name, level=level, target_registry=target)  # type: ignore[arg-type]
        class _Extension:  # pylint: disable=unused-variable
            """placeholder extension."""

    assert [e.name for e in target.by_level("inline")] == ["a", "c"]
    assert [e.name for e in target.by_level("block")] == ["b"]


def test_get_returns_none_for_unknown_name() -> None:
    """get returns None for an unregistered name."""
    assert ExtensionRegistry().get("missing") is None


def test_default_registry_holds_builtin_extensions() -> None:
    """default registry contains the four built-in extensions."""
    # pylint: disable=import-outside-toplevel,unused-import
    from safemark.extensions import anchor, emoji, footnotes  # noqa: F401

    assert {"emoji", "footnote", "footnote-ref", "sanitized-anchor"} <= {
        e.name for e in registry
    }
    assert {e.name for e in registry.by_level("block")} == {
        "footnote",
        "sanitized-anchor",
    }

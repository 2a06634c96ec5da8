"""extension registry and base types for markdown syntax extensions."""

import html
from dataclasses import dataclass
from typing import Callable, Iterator, Literal, Optional, Protocol, TypeVar

Level = Literal["inline", "block"]


@dataclass(frozen=True)
class ExtensionToken:
    """structured result of a successful tokenize call."""

    kind: str
    raw: str  # exact consumed prefix of the remaining input
    text: str
    body: str = ""


@dataclass(frozen=True)
class RenderContext:
    """per-call context threaded through extension and link rendering."""

    base_url: Optional[str] = None
    inline_renderer: Optional[Callable[[str, "RenderContext"], str]] = None

    def render_inline(self, text: str) -> str:
        """
        renders text through the engine's inline path.

        Args:
            text: inline markdown source

        Returns:
            rendered HTML, or escaped text when no inline renderer is attached
        """
        if self.inline_renderer is None:
            return html.escape(text)
        return self.inline_renderer(text, self)


class Extension(Protocol):
    """protocol for syntax extensions."""

    name: str
    level: Level

    def recognize(self, src: str) -> bool:
        """reports whether tokenization is worth attempting on src."""

    def tokenize(self, src: str) -> Optional[ExtensionToken]:
        """consumes a prefix of src into a token, or returns None."""

    def render(self, token: ExtensionToken, ctx: RenderContext) -> str:
        """renders a token to HTML."""


class ExtensionRegistry:
    """ordered registry of syntax extensions."""

    def __init__(self) -> None:
        self._extensions: dict[str, Extension] = {}

    def register(self, extension_instance: Extension) -> None:
        """registers an extension under its name, keeping registration order."""
        self._extensions[extension_instance.name] = extension_instance

    def get(self, name: str) -> Optional[Extension]:
        """returns the extension registered under name, if any."""
        return self._extensions.get(name)

    def by_level(self, level: Level) -> list[Extension]:
        """
        returns extensions of one level in dispatch order.

        Args:
            level: "inline" or "block"

        Returns:
            extensions in the order they were registered
        """
        return [e for e in self._extensions.values() if e.level == level]

    def __contains__(self, name: object) -> bool:
        return name in self._extensions

    def __iter__(self) -> Iterator[Extension]:
        return iter(self._extensions.values())

    def __len__(self) -> int:
        return len(self._extensions)


# default registry holding the built-in extensions
registry = ExtensionRegistry()

T = TypeVar("T")


def extension(
    name: str,
    level: Level,
    target_registry: ExtensionRegistry = registry,
) -> Callable[[type[T]], type[T]]:
    """
    decorator to register a syntax extension.

    Args:
        name: extension name, also used as the markdown-it token type
        level: "inline" (anywhere in running text) or "block" (line start)
        target_registry: registry to register with (defaults to global)

    Returns:
        decorator function
    """

    def decorator(cls: type[T]) -> type[T]:
        cls.name = name  # type: ignore[attr-defined]
        cls.level = level  # type: ignore[attr-defined]
        target_registry.register(cls())  # type: ignore[arg-type]
        return cls

    return decorator

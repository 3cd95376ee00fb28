"""sqlscope - schema-aware SQL completion."""

from typing import TYPE_CHECKING, Any

__all__ = [
    "__version__",
    "main",
    "CompletionEngine",
    "SchemaCompletionProvider",
    "get_completions",
    "load_schema",
]

__version__ = "0.1.0"

if TYPE_CHECKING:
    from .cli import main
    from sqlscope.domains.query.completion import (
        CompletionEngine,
        SchemaCompletionProvider,
        get_completions,
        load_schema,
    )


def __getattr__(name: str) -> Any:
    """Lazy import to keep package import side-effect free."""
    if name == "main":
        from .cli import main

        return main
    if name in {"CompletionEngine", "SchemaCompletionProvider", "get_completions", "load_schema"}:
        from sqlscope.domains.query import completion

        return getattr(completion, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

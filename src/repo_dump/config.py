from __future__ import annotations

from enum import StrEnum, auto
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, computed_field

if TYPE_CHECKING:
    from collections.abc import Callable

    RendererFn = Callable[..., "RenderSummary"]


class RenderMode(StrEnum):
    """Output strategy applied to the accepted files.

    LISTING prints one line per file (with a word count when enabled),
    DUMP prints a header per file followed by its full content.
    """

    LISTING = auto()
    DUMP = auto()


EXCLUDE_SEPARATOR = ","
INCLUDE_GROUP_SEPARATOR = ";"
INCLUDE_PATTERN_SEPARATOR = ","

DUMP_HEADER = "\n=== {path} ===\n\n"
LISTING_LINE = "{path} ({words} words)"
LISTING_ERROR_LINE = "{path} (word count error)"
LISTING_TOTAL = "\nTotal: {total} words"

GIT_IS_INSIDE_WORK_TREE = ["git", "rev-parse", "--is-inside-work-tree"]
GIT_LS_FILES = ["git", "ls-files", "-z"]


class WordCount(BaseModel):
    """Word count of one accepted file in listing mode.

    Attributes:
        rel: Path relative to the operating directory.
        words: Number of whitespace separated tokens, None when the file could not be read.
    """

    model_config = ConfigDict(frozen=True)

    rel: str = Field(..., description="File path relative to the operating directory")
    words: int | None = Field(default=None, ge=0, description="Word count, None on read error")

    @computed_field
    @property
    def ok(self) -> bool:
        """Whether the count succeeded."""
        return self.words is not None


class RenderSummary(BaseModel):
    """What a renderer produced, for the closing log line."""

    model_config = ConfigDict(frozen=True)

    mode: RenderMode
    files: int = Field(default=0, ge=0, description="Files rendered")
    errors: int = Field(default=0, ge=0, description="Files that failed to read")
    total_words: int = Field(default=0, ge=0, description="Sum of successful word counts")


RENDERERS: dict[RenderMode, Callable[..., RenderSummary]] = {}


def register_renderer(mode: RenderMode) -> Callable[[RendererFn], RendererFn]:
    """Decorator to register the output strategy for a render mode.

    A renderer is called as ``renderer(rels, root=..., out=..., **options)`` where
    ``rels`` is the lazily filtered sequence of relative paths, ``root`` the
    operating directory they are relative to and ``out`` the stream to write to.

    Args:
        mode (RenderMode): the mode the decorated function renders.

    Returns:
        Callable[[RendererFn], RendererFn]: A decorator that registers the given function
        in the RENDERERS mapping and returns it unchanged.
    """

    def decorator(func: RendererFn) -> RendererFn:
        RENDERERS[mode] = func
        return func

    return decorator


def get_renderer(mode: RenderMode) -> Callable[..., RenderSummary]:
    """Return the renderer registered for ``mode``.

    Raises:
        KeyError: if no renderer is registered for the mode.
    """
    return RENDERERS[mode]

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from repo_dump.config import RenderMode


class Settings(BaseModel):
    """Configuration settings for one repo_dump invocation."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    dir: Path = Field(default=Path("."), description="Directory to operate in.")
    dry: bool = Field(default=False, description="Only list files without showing contents.")
    exclude: str = Field(default="", description="Comma-separated patterns to exclude.")
    include: str = Field(
        default="",
        description="Patterns to include: ',' for OR, ';' between AND groups.",
    )
    grep: str = Field(default="", description="Only include files matching this regex.")
    literal: bool = Field(default=False, description="Match grep as a plain substring.")
    no_word_count: bool = Field(default=False, description="List bare paths in dry mode.")
    log_file: str = Field(default="", description="Log file path.")

    @property
    def render_mode(self) -> RenderMode:
        """Listing when ``dry`` is set, full dump otherwise."""
        return RenderMode.LISTING if self.dry else RenderMode.DUMP

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RepoDumpError(Exception):
    """Base exception for errors in the repo_dump module."""


@dataclass(frozen=True)
class GitCommandError(RepoDumpError):
    """Raised when a git command fails."""

    command: str
    returncode: int
    stdout: str
    stderr: str


@dataclass(frozen=True)
class FileProcessingError(RepoDumpError):
    """Raised when a tracked file cannot be read."""

    path: Path
    reason: str


@dataclass(frozen=True)
class NotAGitRepositoryError(RepoDumpError):
    """Raised when the specified directory is not inside a Git work tree."""

    folder: Path
    message: str = "The specified directory is not in a Git repository."

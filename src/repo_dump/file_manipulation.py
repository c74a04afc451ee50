from __future__ import annotations

import stat
import subprocess  # noqa: S404
from typing import TYPE_CHECKING

from repo_dump.config import GIT_IS_INSIDE_WORK_TREE, GIT_LS_FILES
from repo_dump.exceptions import FileProcessingError, GitCommandError, NotAGitRepositoryError

if TYPE_CHECKING:
    from pathlib import Path


def is_git_repo(directory: Path) -> bool:
    """Check whether `directory` lies inside a git work tree.

    The query runs with `directory` as the subprocess working directory; the
    process-wide current directory is never changed.

    Args:
        directory (Path): the directory to check

    Returns:
        bool: True if git reports the directory as inside a work tree, False otherwise
            (including when git itself cannot be started).
    """
    if not directory.is_dir():
        return False
    try:
        out = subprocess.run(
            GIT_IS_INSIDE_WORK_TREE,
            cwd=str(directory),
            text=True,
            capture_output=True,
            check=False,
        )
    except OSError:
        return False
    return out.returncode == 0 and out.stdout.strip() == "true"


def git_ls_files(directory: Path) -> list[str]:
    """Use `git ls-files` to retrieve the tracked files under `directory`.

    Paths come back relative to `directory`, with forward slashes, in the order
    git reports them.

    Args:
        directory (Path): a directory inside a git work tree

    Raises:
        NotAGitRepositoryError: if `directory` is not inside a git work tree.
        GitCommandError: if `git ls-files` cannot be run or exits non-zero.

    Returns:
        list[str]: the tracked files relative to `directory`
    """
    if not is_git_repo(directory):
        raise NotAGitRepositoryError(folder=directory)
    command = " ".join(GIT_LS_FILES)
    try:
        out = subprocess.run(
            GIT_LS_FILES,
            cwd=str(directory),
            text=True,
            capture_output=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        raise GitCommandError(
            command=command,
            returncode=e.returncode,
            stdout=e.stdout or "",
            stderr=e.stderr or "",
        ) from e
    except OSError as e:
        raise GitCommandError(command=command, returncode=-1, stdout="", stderr=str(e)) from e
    return [line for line in out.stdout.split("\0") if line]


def read_text(path: Path) -> str:
    """Read a whole file as text.

    Bytes that are not valid UTF-8 are replaced rather than rejected, so binary
    files still produce a (lossy) string.

    Args:
        path (Path): the file to read

    Raises:
        OSError: if the file cannot be read.

    Returns:
        str: the decoded content
    """
    return path.read_bytes().decode("utf-8", errors="replace")


def load_file(path: Path) -> str | None:
    """Read a tracked file for content matching.

    A file that vanished since `git ls-files` ran, or a path that turns out to
    be a directory, is not an error: both give None.

    Args:
        path (Path): the file to read

    Raises:
        FileProcessingError: if the file exists but cannot be read.

    Returns:
        str | None: the decoded content, or None when there is no file to read
    """
    try:
        st = path.stat()
        if stat.S_ISDIR(st.st_mode):
            return None
        return read_text(path)
    except FileNotFoundError:
        return None
    except OSError as e:
        raise FileProcessingError(path=path, reason=str(e)) from e


def count_words(text: str) -> int:
    """Count whitespace separated tokens in `text`."""
    return len(text.split())


def count_words_in_file(path: Path) -> int:
    """Count the words of a file.

    Raises:
        OSError: if the file cannot be read.
    """
    return count_words(read_text(path))

"""
repo_dump: print the tracked files of a git repository.

Overview
--------
Lists the files tracked by git under a directory, or dumps their contents,
after three filters applied in this order:

1) ``-exclude``: comma-separated patterns; a file matching any is dropped.
2) ``-include``: comma-separated patterns for OR, ``;``-separated groups for
   AND. ``src/;.py,.pyi`` keeps files under ``src/`` that end in ``.py`` or ``.pyi``.
3) ``-grep``: a regular expression (or a substring with ``--literal``) the
   file content must contain.

A pattern matches a path when the path starts with it, ends with it, or
equals it.

Usage
-----
    - Dump every tracked Go and Markdown file:
        repo-dump -include ".go,.md"

    - List files under src/ mentioning TODO, with word counts:
        repo-dump -dry -include "src/" -grep "TODO"

    - Dump another checkout, skipping assets and images:
        repo-dump -dir ../other -exclude "assets/,.png,.bin"
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any

from repo_dump import __version__
# imported for its renderer registrations
from repo_dump import output_construction as _renderers  # noqa: F401
from repo_dump.config import RenderMode, get_renderer
from repo_dump.exceptions import GitCommandError, NotAGitRepositoryError
from repo_dump.file_manipulation import git_ls_files
from repo_dump.filters import ContentPredicate, ExcludePatternSet, IncludeExpression, accepted
from repo_dump.logging import logger, setup_logging
from repo_dump.settings import Settings

if TYPE_CHECKING:
    from collections.abc import Sequence


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    """Parse command line arguments into Settings.

    Options keep their single-dash spelling (``-dir``, ``-dry``...) and also
    accept the double-dash form.
    """
    p = argparse.ArgumentParser(
        prog="repo-dump",
        description="Print the files tracked by git, or their contents, after filtering.",
    )
    p.add_argument("-dir", "--dir", type=Path, default=Path("."), help="Directory to operate in.")
    p.add_argument(
        "-dry",
        "--dry",
        action="store_true",
        help="Only list files without showing contents.",
    )
    p.add_argument(
        "-exclude",
        "--exclude",
        type=str,
        default="",
        help="Comma-separated list of patterns to exclude (e.g. 'assets/,.png,.bin').",
    )
    p.add_argument(
        "-include",
        "--include",
        type=str,
        default="",
        help=(
            "Patterns to include: comma-separated for OR logic, semicolon-separated groups "
            "for AND logic (e.g. '.go,.md' or 'src;.go,.cpp')."
        ),
    )
    p.add_argument(
        "-grep",
        "--grep",
        type=str,
        default="",
        help=(
            "Only include files matching this regex pattern (e.g. '(foo|bar).*'). "
            "A pattern starting with '-' must be attached: -grep=-foo."
        ),
    )
    p.add_argument(
        "--literal",
        action="store_true",
        help="Match -grep as a plain substring instead of a regex.",
    )
    p.add_argument(
        "--no-word-count",
        action="store_true",
        help="With -dry, list bare paths without counting words.",
    )
    p.add_argument("--log-file", type=str, default="", help="Log file path.")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = p.parse_args(argv)
    return Settings(**vars(args))


def renderer_options(settings: Settings) -> dict[str, Any]:
    """Extra keyword arguments for the selected renderer."""
    if settings.render_mode is RenderMode.LISTING:
        return {"word_counts": not settings.no_word_count}
    return {}


def output_stream(settings: Settings) -> IO[Any]:
    """Standard output for the selected renderer: binary for dump, text for listing."""
    if settings.render_mode is RenderMode.DUMP:
        sys.stdout.flush()
        return sys.stdout.buffer
    return sys.stdout


def main(argv: Sequence[str] | None = None) -> int:
    settings = parse_args(argv)
    if settings.log_file:
        setup_logging(settings.log_file)

    directory = settings.dir
    try:
        files = git_ls_files(directory)
    except NotAGitRepositoryError as e:
        logger.error("Error: %s is not in a git repository", e.folder)
        return 1
    except GitCommandError as e:
        logger.error("Error: %s failed with exit code %s: %s", e.command, e.returncode, e.stderr.strip())
        return 1

    selected = accepted(
        files,
        root=directory,
        excludes=ExcludePatternSet.parse(settings.exclude),
        include=IncludeExpression.parse(settings.include),
        content=ContentPredicate.build(settings.grep, literal=settings.literal),
    )
    render = get_renderer(settings.render_mode)
    out = output_stream(settings)
    summary = render(selected, root=directory, out=out, **renderer_options(settings))
    out.flush()

    logger.info(
        "Rendered %s files (mode=%s, errors=%s, words=%s) out of %s tracked",
        summary.files,
        summary.mode,
        summary.errors,
        summary.total_words,
        len(files),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

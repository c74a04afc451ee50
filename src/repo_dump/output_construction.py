from __future__ import annotations

import stat
from typing import TYPE_CHECKING

from repo_dump.config import (
    DUMP_HEADER,
    LISTING_ERROR_LINE,
    LISTING_LINE,
    LISTING_TOTAL,
    RenderMode,
    RenderSummary,
    WordCount,
    register_renderer,
)
from repo_dump.file_manipulation import count_words_in_file
from repo_dump.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path
    from typing import BinaryIO, TextIO


def word_count(root: Path, rel: str) -> WordCount:
    """Count the words of one accepted file, logging read errors.

    Args:
        root (Path): the operating directory
        rel (str): the path relative to `root`

    Returns:
        WordCount: the count, with ``words=None`` when the file could not be read
    """
    try:
        return WordCount(rel=rel, words=count_words_in_file(root / rel))
    except OSError as e:
        logger.warning("Error counting words in %s: %s", rel, e)
        return WordCount(rel=rel)


@register_renderer(RenderMode.LISTING)
def render_listing(
    rels: Iterable[str],
    *,
    root: Path,
    out: TextIO,
    word_counts: bool = True,
) -> RenderSummary:
    """Write one line per accepted file, then the word total.

    Each line reads ``path (N words)``, or ``path (word count error)`` when the
    file could not be read; failed files do not contribute to the total. The
    ``Total`` line is only written when the total is above zero. With
    `word_counts` disabled, bare paths are written and nothing is read.

    Args:
        rels (Iterable[str]): accepted paths relative to `root`
        root (Path): the operating directory
        out (TextIO): where to write
        word_counts (bool): whether to count words

    Returns:
        RenderSummary: files listed, read errors and total words
    """
    files = errors = total = 0
    for rel in rels:
        files += 1
        if not word_counts:
            out.write(f"{rel}\n")
            continue
        wc = word_count(root, rel)
        if wc.words is None:
            errors += 1
            out.write(LISTING_ERROR_LINE.format(path=rel) + "\n")
            continue
        total += wc.words
        out.write(LISTING_LINE.format(path=rel, words=wc.words) + "\n")

    if total > 0:
        out.write(LISTING_TOTAL.format(total=total) + "\n")
    return RenderSummary(mode=RenderMode.LISTING, files=files, errors=errors, total_words=total)


@register_renderer(RenderMode.DUMP)
def render_dump(rels: Iterable[str], *, root: Path, out: BinaryIO) -> RenderSummary:
    """Write a header and the full content of every accepted file.

    Content is copied byte for byte, so the stream must be binary; headers are
    UTF-8 encoded.

    Files that vanished or are directories are skipped without a header. A
    file that fails to read after its header was written keeps the header; the
    error is logged and the dump continues with the next file.

    Args:
        rels (Iterable[str]): accepted paths relative to `root`
        root (Path): the operating directory
        out (BinaryIO): where to write

    Returns:
        RenderSummary: files dumped and read errors
    """
    files = errors = 0
    for rel in rels:
        full = root / rel
        try:
            if stat.S_ISDIR(full.stat().st_mode):
                continue
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.warning("Error accessing file %s: %s", full, e)
            errors += 1
            continue

        out.write(DUMP_HEADER.format(path=rel).encode("utf-8"))
        try:
            content = full.read_bytes()
        except OSError as e:
            logger.warning("Error reading file %s: %s", full, e)
            errors += 1
            continue
        out.write(content + b"\n")
        files += 1
    return RenderSummary(mode=RenderMode.DUMP, files=files, errors=errors)

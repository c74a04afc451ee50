"""Filtering engine: exclude patterns, include groups and content matching.

A tracked path goes through three stages, always in this order:

1. exclude: any matching pattern rejects the path outright;
2. include: the path must match one pattern of every AND-group;
3. content: the file must contain the grep pattern.

Later stages never see a path an earlier stage rejected, and only the content
stage touches the filesystem.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from repo_dump.config import EXCLUDE_SEPARATOR, INCLUDE_GROUP_SEPARATOR, INCLUDE_PATTERN_SEPARATOR
from repo_dump.exceptions import FileProcessingError
from repo_dump.file_manipulation import load_file
from repo_dump.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path


def matches(path: str, pattern: str) -> bool:
    """Check a path against a single pattern.

    A pattern matches when the path starts with it (directory style, e.g. ``assets/``),
    ends with it (extension style, e.g. ``.png``) or equals it. There is no glob
    expansion and no case folding. The empty pattern never matches.

    Args:
        path (str): the repository-relative path
        pattern (str): the pattern to test

    Returns:
        bool: True if the pattern matches the path
    """
    if not pattern:
        return False
    return path.startswith(pattern) or path.endswith(pattern) or path == pattern


class ExcludePatternSet(BaseModel):
    """Flat set of exclude patterns; a path matching any of them is dropped."""

    model_config = ConfigDict(frozen=True)

    patterns: tuple[str, ...] = Field(default=(), description="Non-empty exclude patterns")

    @classmethod
    def parse(cls, raw: str) -> ExcludePatternSet:
        """Build the set from a comma-separated flag value, dropping empty patterns."""
        return cls(patterns=tuple(p for p in raw.split(EXCLUDE_SEPARATOR) if p))

    def __bool__(self) -> bool:
        return bool(self.patterns)


class IncludeExpression(BaseModel):
    """AND of OR-groups of include patterns.

    ``"src/;.py,.pyi"`` parses to ``(("src/",), (".py", ".pyi"))``: a path must
    match ``src/`` AND one of ``.py`` / ``.pyi``. Empty patterns are skipped, and a
    group that ends up with no pattern (``"a;;b"``, a trailing ``;``) is dropped,
    which means it constrains nothing.
    """

    model_config = ConfigDict(frozen=True)

    groups: tuple[tuple[str, ...], ...] = Field(default=(), description="AND-groups of OR-patterns")

    @classmethod
    def parse(cls, raw: str) -> IncludeExpression:
        """Parse the ``;`` / ``,`` include syntax."""
        groups: list[tuple[str, ...]] = []
        for group in raw.split(INCLUDE_GROUP_SEPARATOR):
            patterns = tuple(p for p in group.split(INCLUDE_PATTERN_SEPARATOR) if p)
            if patterns:
                groups.append(patterns)
        return cls(groups=tuple(groups))

    def __bool__(self) -> bool:
        return bool(self.groups)


class ContentPredicate(BaseModel):
    """Optional requirement on file contents.

    An empty source means no requirement. Otherwise the source is either a
    regular expression (default) or, with ``literal``, a plain substring. A
    regular expression that does not compile leaves the predicate ``invalid``:
    it then rejects every file instead of aborting the run.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    source: str = Field(default="", description="Pattern as given on the command line")
    literal: bool = Field(default=False, description="Substring match instead of regex")
    regex: re.Pattern[str] | None = Field(default=None, description="Compiled regex")
    invalid: bool = Field(default=False, description="Regex failed to compile")

    @classmethod
    def build(cls, source: str, *, literal: bool = False) -> ContentPredicate:
        """Compile `source` once for the whole run.

        Args:
            source (str): the grep flag value; empty means no content filter
            literal (bool): treat `source` as a plain substring

        Returns:
            ContentPredicate: the predicate; ``invalid`` is set when the regex does not compile
        """
        if not source or literal:
            return cls(source=source, literal=literal)
        try:
            regex = re.compile(source)
        except re.error as e:
            logger.error("Invalid grep pattern %r: %s; no file will match", source, e)
            return cls(source=source, invalid=True)
        return cls(source=source, regex=regex)

    @property
    def absent(self) -> bool:
        """True when no content filtering was requested."""
        return not self.source

    def search(self, content: str) -> bool:
        """Check whether `content` contains the pattern anywhere."""
        if self.absent:
            return True
        if self.invalid:
            return False
        if self.regex is None:
            return self.source in content
        return self.regex.search(content) is not None


def should_exclude(path: str, patterns: ExcludePatternSet) -> bool:
    """Check whether any exclude pattern matches `path`."""
    return any(matches(path, p) for p in patterns.patterns)


def should_include(path: str, expression: IncludeExpression) -> bool:
    """Check `path` against every AND-group of the include expression.

    Args:
        path (str): the repository-relative path
        expression (IncludeExpression): the parsed include expression

    Returns:
        bool: True if each group has at least one matching pattern; an empty
            expression accepts everything
    """
    return all(any(matches(path, p) for p in group) for group in expression.groups)


def matches_content(path: Path, predicate: ContentPredicate | None) -> bool:
    """Check the content of a file against the predicate.

    The file is only read when a pattern was given. A file that no longer
    exists, or a directory, simply does not match. Other read errors are
    logged and the file does not match.

    Args:
        path (Path): the file on disk
        predicate (ContentPredicate | None): the content requirement, if any

    Returns:
        bool: True if the file passes the content stage
    """
    if predicate is None or predicate.absent:
        return True
    if predicate.invalid:
        return False
    try:
        content = load_file(path)
    except FileProcessingError as e:
        logger.warning("Error reading file %s: %s", e.path, e.reason)
        return False
    if content is None:
        return False
    return predicate.search(content)


def accepted(
    paths: Iterable[str],
    root: Path,
    excludes: ExcludePatternSet,
    include: IncludeExpression,
    content: ContentPredicate | None = None,
) -> Iterator[str]:
    """Lazily yield the paths that pass all three stages, in input order.

    Args:
        paths (Iterable[str]): candidate paths relative to `root`
        root (Path): the operating directory the paths are relative to
        excludes (ExcludePatternSet): exclude patterns, checked first
        include (IncludeExpression): include groups, checked second
        content (ContentPredicate | None): content requirement, checked last

    Yields:
        str: each accepted relative path
    """
    for rel in paths:
        if should_exclude(rel, excludes):
            continue
        if not should_include(rel, include):
            continue
        if not matches_content(root / rel, content):
            continue
        yield rel

# src/codectx/core/matchers.py
"""
Path matchers used for include/exclude decisions.

Every matcher answers a single question, ``matches(path)``, for a
forward-slash path. ``select(paths)`` is the batch form, used once per
directory listing; for most matchers it simply loops over ``matches``.
Matchers are immutable once built, so one instance can be shared by any
number of gathers.
"""
import logging
import os
import re
import shutil
import subprocess
from typing import Iterable, List, Optional, Protocol, Set, Union

import pathspec

from codectx.errors import ExternalToolError, InvalidPatternError, ToolNotAvailableError

logger = logging.getLogger(__name__)

# `git check-ignore` reports these on exit status 128 when nothing can ignore the path
_GIT_NOT_APPLICABLE = ("not a git repository", "outside repository")


class PathMatcher(Protocol):
    def matches(self, path: str) -> bool:
        ...


def select_matching(matcher: PathMatcher, paths: Iterable[str]) -> Set[str]:
    """The subset of `paths` the matcher matches, batched when it supports `select`."""
    select = getattr(matcher, "select", None)
    if select is not None:
        return select(paths)
    return {p for p in paths if matcher.matches(p)}


class RegexMatcher:
    """Matches when the pattern is found anywhere in the path."""

    def __init__(self, pattern: str):
        try:
            self._regex = re.compile(pattern)
        except re.error as e:
            raise InvalidPatternError(pattern, str(e)) from e
        self.pattern = pattern

    def matches(self, path: str) -> bool:
        return self._regex.search(path) is not None

    def select(self, paths: Iterable[str]) -> Set[str]:
        return {p for p in paths if self.matches(p)}

    def __repr__(self) -> str:
        return f"RegexMatcher({self.pattern!r})"


class CompoundMatcher:
    """OR of its child matchers. An empty compound never matches."""

    def __init__(self, *matchers: PathMatcher):
        self.matchers = tuple(matchers)

    def matches(self, path: str) -> bool:
        return any(m.matches(path) for m in self.matchers)

    def select(self, paths: Iterable[str]) -> Set[str]:
        # Paths already matched are not offered to later matchers
        remaining = list(paths)
        selected: Set[str] = set()
        for m in self.matchers:
            if not remaining:
                break
            hits = select_matching(m, remaining)
            selected |= hits
            remaining = [p for p in remaining if p not in hits]
        return selected

    def __len__(self) -> int:
        return len(self.matchers)

    def __repr__(self) -> str:
        return f"CompoundMatcher({', '.join(repr(m) for m in self.matchers)})"


class PathSpecMatcher:
    """
    Gitwildmatch patterns (the .gitignore syntax) evaluated in-process.
    Directory-only patterns such as ``vendor/`` match a directory when it
    is given with a trailing slash, and everything below it.
    """

    def __init__(self, lines: Iterable[str]):
        lines = list(lines)
        try:
            self._spec = pathspec.PathSpec.from_lines("gitwildmatch", lines)
        except ValueError as e:
            # GitWildMatchPatternError is a ValueError
            patterns = ", ".join(l.strip() for l in lines if l.strip())
            raise InvalidPatternError(patterns, str(e)) from e

    def matches(self, path: str) -> bool:
        if not path:
            return False
        return self._spec.match_file(path)

    def select(self, paths: Iterable[str]) -> Set[str]:
        return {p for p in paths if self.matches(p)}

    def __len__(self) -> int:
        return len(self._spec.patterns)


class GitignoreMatcher:
    """
    Asks git itself whether a path is ignored, so nested .gitignore files,
    .git/info/exclude and the global excludes file are all honoured.

    Raises ToolNotAvailableError at construction when git is not on PATH.
    """

    def __init__(self, cwd: Optional[Union[str, os.PathLike]] = None):
        self.git = shutil.which("git")
        if self.git is None:
            raise ToolNotAvailableError("git")
        self.cwd = os.fspath(cwd) if cwd is not None else None

    def matches(self, path: str) -> bool:
        result = self._check_ignore(["-q", "--", path], path)
        return result is not None and result.returncode == 0

    def select(self, paths: Iterable[str]) -> Set[str]:
        """Batch form of matches(): one `git check-ignore --stdin` for all paths."""
        paths = [p for p in paths if p]
        if not paths:
            return set()
        stdin = "\0".join(paths) + "\0"
        result = self._check_ignore(["--stdin", "-z"], paths[0], stdin=stdin)
        if result is None or result.returncode != 0:
            return set()
        wanted = set(paths)
        return {p for p in result.stdout.split("\0") if p in wanted}

    def _check_ignore(
        self, args: List[str], path: str, stdin: Optional[str] = None
    ) -> Optional[subprocess.CompletedProcess]:
        """
        Runs `git check-ignore`. Exit 0 means ignored, 1 means not ignored.
        Returns None when git cannot apply ignore rules to the path at all.
        """
        try:
            result = subprocess.run(
                [self.git, "check-ignore", *args],
                cwd=self.cwd,
                env={**os.environ, "LC_ALL": "C"},  # English messages for the 128 check
                input=stdin,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise ExternalToolError(path, None, str(e)) from e

        if result.returncode in (0, 1):
            return result

        if result.returncode == 128 and any(s in result.stderr for s in _GIT_NOT_APPLICABLE):
            logger.debug("git check-ignore not applicable to %s: %s", path, result.stderr.strip())
            return None

        raise ExternalToolError(path, result.returncode, result.stderr)

    def __repr__(self) -> str:
        return f"GitignoreMatcher(cwd={self.cwd!r})"

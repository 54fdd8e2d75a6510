# src/codectx/core/ignore.py
import logging
from pathlib import Path
from typing import List, Optional, Union

from codectx.config import DEFAULT_INCLUDE_PATTERN, GIT_DIR_PATTERN
from codectx.core.matchers import (
    CompoundMatcher,
    GitignoreMatcher,
    PathMatcher,
    PathSpecMatcher,
    RegexMatcher,
)
from codectx.errors import FilesystemError, ToolNotAvailableError

logger = logging.getLogger(__name__)


def load_ignore_spec(
    ignore_file: Optional[Union[str, Path]] = None, extra_patterns: Optional[List[str]] = None
) -> PathSpecMatcher:
    """
    Loads gitignore-style rules from `ignore_file` and creates a PathSpecMatcher.
    Includes any extra patterns (like the output filename) for runtime safety.
    """
    lines: List[str] = []

    if ignore_file is not None:
        try:
            with open(ignore_file, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()
        except OSError as e:
            raise FilesystemError(str(ignore_file), f"cannot read ignore file: {e.strerror or e}") from e

    if extra_patterns:
        lines.extend(extra_patterns)

    return PathSpecMatcher(lines)


def build_include_matcher(pattern: str = DEFAULT_INCLUDE_PATTERN) -> RegexMatcher:
    return RegexMatcher(pattern)


def build_exclude_matcher(
    exclude_pattern: str = "",
    exclude_from_gitignore: bool = True,
    exclude_git_dir: bool = True,
    ignore_file: Optional[Union[str, Path]] = None,
    extra_patterns: Optional[List[str]] = None,
    cwd: Optional[Union[str, Path]] = None,
) -> CompoundMatcher:
    """
    Combines every configured exclusion source into one CompoundMatcher.

    An invalid pattern raises InvalidPatternError. A missing git binary only
    drops the .gitignore matcher with a warning; the remaining sources still apply.
    """
    matchers: List[PathMatcher] = []

    if exclude_pattern:
        matchers.append(RegexMatcher(exclude_pattern))

    # In-process matchers go before git so they can short-circuit the subprocess
    if exclude_git_dir:
        matchers.append(RegexMatcher(GIT_DIR_PATTERN))

    if ignore_file is not None or extra_patterns:
        matchers.append(load_ignore_spec(ignore_file, extra_patterns))

    if exclude_from_gitignore:
        try:
            matchers.append(GitignoreMatcher(cwd=cwd))
        except ToolNotAvailableError:
            logger.warning("git not found in PATH, skipping .gitignore")

    return CompoundMatcher(*matchers)

# src/codectx/core/scanner.py
import logging
import posixpath
from pathlib import PurePosixPath
from typing import Callable, List, Optional, Set, Tuple

from codectx.config import ROOT_NODE_NAME
from codectx.core.matchers import select_matching
from codectx.errors import FilesystemError
from codectx.models import File, FileGatherOptions, FileNode

logger = logging.getLogger(__name__)


def file_type(name: str) -> str:
    """Extension label used to tag content fences: 'main.go' -> 'go', 'Makefile' -> ''."""
    _, dot, ext = name.rpartition(".")
    return ext if dot else ""


def scope_path(scope: str) -> str:
    """Normalises a scan root to the prefix used for every path below it ('./cmd' -> 'cmd', '.' -> '')."""
    path = posixpath.normpath(scope.replace("\\", "/"))
    return "" if path == "." else path


class FileGatherer:
    """
    Walks every scope in the options, pruning excluded directories before
    they are listed, and builds the tree alongside the flat selection.
    """

    def __init__(self, options: Optional[FileGatherOptions] = None):
        self.options = options or FileGatherOptions()
        self.fs = self.options.fs
        self.include = self.options.include_matcher
        self.exclude = self.options.exclude_matcher

    def gather(self) -> Tuple[List[File], FileNode]:
        files: List[File] = []
        root = FileNode(ROOT_NODE_NAME, is_dir=True)
        for scope in self.options.path_scopes:
            self._gather_scope(scope, root, files)
        return files, root

    def _gather_scope(self, scope: str, root: FileNode, files: List[File]) -> None:
        rel = scope_path(scope)
        location = rel or "."
        is_dir = self._stat(self.fs.is_dir, location)

        if not is_dir and not self._stat(self.fs.is_file, location):
            if self._stat(self.fs.exists, location):
                raise FilesystemError(
                    scope, "not a regular file or directory (symlinked directories are not followed)"
                )
            raise FilesystemError(scope, "no such file or directory")

        if rel and self._excluded(rel, is_dir):
            logger.debug("Scope %s is excluded", scope)
            return

        # Hang the scope below the root one segment at a time, so overlapping scopes share nodes
        parts = PurePosixPath(rel).parts if rel else ()
        parent = root
        for part in parts[:-1]:
            parent = _get_or_add(parent, part, is_dir=True)

        if is_dir:
            node = _get_or_add(parent, parts[-1], is_dir=True) if parts else root
            self._walk(rel, node, files)
        else:
            self._add_file(rel, parts[-1], parent, files)

    def _walk(self, dir_path: str, node: FileNode, files: List[File]) -> None:
        try:
            names = self.fs.list_dir(dir_path or ".")
        except OSError as e:
            raise FilesystemError(dir_path or ".", f"cannot list directory: {e.strerror or e}") from e

        entries = []
        for name in names:
            path = posixpath.join(dir_path, name) if dir_path else name
            entries.append((name, path, self._stat(self.fs.is_dir, path)))

        # Exclusion is decided for the whole listing before anything is entered
        excluded = self._excluded_among(entries)

        for name, path, is_dir in entries:
            if path in excluded:
                logger.debug("Pruning %s", path)
                continue

            if is_dir:
                child = _get_or_add(node, name, is_dir=True)
                self._walk(path, child, files)
            elif self._stat(self.fs.is_file, path):
                self._add_file(path, name, node, files)
            else:
                logger.debug("Skipping %s (not a regular file or directory)", path)

    def _excluded(self, path: str, is_dir: bool) -> bool:
        # Directories are also offered as "dir/" so patterns like `vendor/` prune them
        if self.exclude.matches(path):
            return True
        return is_dir and self.exclude.matches(path + "/")

    def _excluded_among(self, entries: List[Tuple[str, str, bool]]) -> Set[str]:
        """Batch form of _excluded for one directory listing."""
        candidates = []
        for _, path, is_dir in entries:
            candidates.append(path)
            if is_dir:
                candidates.append(path + "/")
        hits = select_matching(self.exclude, candidates)
        return {
            path for _, path, is_dir in entries
            if path in hits or (is_dir and path + "/" in hits)
        }

    def _stat(self, check: Callable[[str], bool], path: str) -> bool:
        try:
            return check(path)
        except OSError as e:
            raise FilesystemError(path, f"cannot stat: {e.strerror or e}") from e

    def _add_file(self, path: str, name: str, parent: FileNode, files: List[File]) -> None:
        _get_or_add(parent, name, is_dir=False)
        if not self.include.matches(path):
            return

        try:
            data = self.fs.read_bytes(path)
        except OSError as e:
            raise FilesystemError(path, f"cannot read file: {e.strerror or e}") from e

        files.append(File(path=path, type=file_type(name), data=data))


def _get_or_add(parent: FileNode, name: str, is_dir: bool) -> FileNode:
    existing = parent.child(name)
    if existing is not None:
        return existing
    return parent.add_child(FileNode(name, is_dir=is_dir))


def gather_files(options: Optional[FileGatherOptions] = None) -> Tuple[List[File], FileNode]:
    """
    Returns the selected files and the root of the gathered tree.
    Raises FilesystemError on the first unreadable scope, directory or file;
    errors from matchers (e.g. ExternalToolError) propagate unchanged.
    """
    return FileGatherer(options).gather()

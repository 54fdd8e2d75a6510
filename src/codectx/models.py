# src/codectx/models.py
import bisect
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from codectx.config import DEFAULT_INCLUDE_PATTERN, DEFAULT_PATH_SCOPES
from codectx.core.fs import FileSystem, LocalFileSystem
from codectx.core.matchers import CompoundMatcher, PathMatcher, RegexMatcher


@dataclass
class FileNode:
    """One entry of the gathered tree. Children are kept sorted by name."""
    name: str
    is_dir: bool = False
    children: List["FileNode"] = field(default_factory=list)
    _index: Dict[str, "FileNode"] = field(default_factory=dict, init=False, repr=False, compare=False)

    def child(self, name: str) -> Optional["FileNode"]:
        # Rebuilt when children were assigned directly instead of through add_child
        if len(self._index) != len(self.children):
            self._index = {c.name: c for c in self.children}
        return self._index.get(name)

    def add_child(self, node: "FileNode") -> "FileNode":
        if not self.is_dir:
            raise ValueError(f"cannot add children to file node {self.name!r}")
        if not self.children or self.children[-1].name < node.name:
            # Walks list directories in sorted order, so this is the common case
            self.children.append(node)
        else:
            names = [c.name for c in self.children]
            self.children.insert(bisect.bisect_left(names, node.name), node)
        self._index[node.name] = node
        return node

    def leaves(self, prefix: str = "") -> Iterator[str]:
        """Yields the slash-joined path of every file below this node."""
        for c in self.children:
            path = f"{prefix}{c.name}"
            if c.is_dir:
                yield from c.leaves(path + "/")
            else:
                yield path


@dataclass(frozen=True)
class File:
    """Immutable record of a selected file."""
    path: str
    type: str
    data: bytes

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


@dataclass
class FileGatherOptions:
    include_matcher: PathMatcher = field(default_factory=lambda: RegexMatcher(DEFAULT_INCLUDE_PATTERN))
    exclude_matcher: PathMatcher = field(default_factory=CompoundMatcher)
    path_scopes: List[str] = field(default_factory=lambda: list(DEFAULT_PATH_SCOPES))
    fs: FileSystem = field(default_factory=LocalFileSystem)

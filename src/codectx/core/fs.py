# src/codectx/core/fs.py
"""
Filesystem access for the gatherer.

The gatherer only ever needs five questions answered, so they are collected
behind a small protocol. LocalFileSystem talks to the disk; MemoryFileSystem
serves a dict of paths and is what the tests walk.
"""
import errno
import os
import posixpath
import stat
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Set, Union

# Answered as "not there"; any other stat failure is raised to the caller
_MISSING_ERRNOS = (errno.ENOENT, errno.ENOTDIR, errno.ELOOP)


class FileSystem(Protocol):
    def exists(self, path: str) -> bool:
        ...

    def is_dir(self, path: str) -> bool:
        ...

    def is_file(self, path: str) -> bool:
        ...

    def list_dir(self, path: str) -> List[str]:
        ...

    def read_bytes(self, path: str) -> bytes:
        ...


class LocalFileSystem:
    """
    The real disk. Relative paths are resolved against base_dir (the process
    working directory when omitted). Symlinked directories report False from
    is_dir() so the walk never follows them. Stat failures other than a
    missing path (e.g. EACCES) raise OSError.
    """

    def __init__(self, base_dir: Optional[Union[str, Path]] = None):
        self.base_dir = Path(base_dir) if base_dir is not None else None

    def _resolve(self, path: str) -> Path:
        p = Path(path)
        if self.base_dir is not None and not p.is_absolute():
            return self.base_dir / p
        return p

    def _stat(self, path: str, follow: bool) -> Optional[os.stat_result]:
        try:
            return os.stat(self._resolve(path), follow_symlinks=follow)
        except OSError as e:
            if e.errno in _MISSING_ERRNOS:
                return None
            raise

    def exists(self, path: str) -> bool:
        return self._stat(path, follow=False) is not None

    def is_dir(self, path: str) -> bool:
        st = self._stat(path, follow=False)
        return st is not None and stat.S_ISDIR(st.st_mode)

    def is_file(self, path: str) -> bool:
        st = self._stat(path, follow=True)
        return st is not None and stat.S_ISREG(st.st_mode)

    def list_dir(self, path: str) -> List[str]:
        with os.scandir(self._resolve(path)) as it:
            return sorted(entry.name for entry in it)

    def read_bytes(self, path: str) -> bytes:
        return self._resolve(path).read_bytes()


class MemoryFileSystem:
    """
    An in-memory tree built from ``{"dir/file.txt": b"content"}``.
    Keys ending in "/" declare empty directories. Paths listed in
    `unreadable` raise PermissionError when listed or read; paths in
    `unstattable` raise it as soon as their type is asked for.
    """

    def __init__(
        self,
        files: Dict[str, Union[str, bytes, None]],
        unreadable: Iterable[str] = (),
        unstattable: Iterable[str] = (),
    ):
        self._files: Dict[str, bytes] = {}
        self._dirs: Set[str] = {"."}
        for raw, content in files.items():
            path = _normalize(raw)
            if raw.endswith("/"):
                self._add_dir(path)
                continue
            self._files[path] = content.encode("utf-8") if isinstance(content, str) else content
            self._add_dir(posixpath.dirname(path) or ".")
        self._unreadable = {_normalize(p) for p in unreadable}
        self._unstattable = {_normalize(p) for p in unstattable}

    def _add_dir(self, path: str) -> None:
        while path not in self._dirs:
            self._dirs.add(path)
            path = posixpath.dirname(path) or "."

    def _check_readable(self, path: str) -> None:
        if path in self._unreadable:
            raise PermissionError(errno.EACCES, "Permission denied", path)

    def _check_stattable(self, path: str) -> str:
        path = _normalize(path)
        if path in self._unstattable:
            raise PermissionError(errno.EACCES, "Permission denied", path)
        return path

    def exists(self, path: str) -> bool:
        path = self._check_stattable(path)
        return path in self._dirs or path in self._files

    def is_dir(self, path: str) -> bool:
        return self._check_stattable(path) in self._dirs

    def is_file(self, path: str) -> bool:
        return self._check_stattable(path) in self._files

    def list_dir(self, path: str) -> List[str]:
        path = _normalize(path)
        if path not in self._dirs:
            if path in self._files:
                raise NotADirectoryError(errno.ENOTDIR, "Not a directory", path)
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
        self._check_readable(path)
        names = set()
        for entry in list(self._dirs) + list(self._files):
            if entry != "." and (posixpath.dirname(entry) or ".") == path:
                names.add(posixpath.basename(entry))
        return sorted(names)

    def read_bytes(self, path: str) -> bytes:
        path = _normalize(path)
        if path not in self._files:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
        self._check_readable(path)
        return self._files[path]


def _normalize(path: str) -> str:
    return posixpath.normpath(path.replace(os.sep, "/"))

# src/codectx/errors.py
from typing import Optional


class CodeCtxError(Exception):
    """Base class for every error raised by codectx."""


class InvalidPatternError(CodeCtxError, ValueError):
    """A regex or wildcard pattern failed to compile."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern


class ToolNotAvailableError(CodeCtxError):
    """An external executable a matcher relies on is not on PATH."""

    def __init__(self, tool: str):
        super().__init__(f"{tool} not found in PATH")
        self.tool = tool


class FilesystemError(CodeCtxError, OSError):
    """Listing a directory or reading a file failed during a gather."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path



class ExternalToolError(CodeCtxError):
    """An external tool ran but failed for a reason other than a clean 'no'."""

    def __init__(self, path: str, returncode: Optional[int], stderr: str = ""):
        detail = stderr.strip() or "no output"
        status = "could not start" if returncode is None else f"exit status {returncode}"
        super().__init__(f"git check-ignore failed for {path!r} ({status}): {detail}")
        self.path = path
        self.returncode = returncode
        self.stderr = stderr

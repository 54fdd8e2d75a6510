# src/codectx/core/context.py
from typing import List

from codectx.config import WARN_FILE_SIZE_THRESHOLD
from codectx.models import File


def build_context(files: List[File], file_tree: str) -> str:
    """Assembles the tree and the fenced contents of every file into one document."""
    parts = [
        "Context:\n\n",
        "## File tree\n\n",
        f"```\n{file_tree}```\n\n",
        "## File contents\n\n",
    ]
    for f in files:
        parts.append(f"./{f.path}\n```{f.type}\n{f.text}\n```\n\n")
    return "".join(parts)


def large_files(files: List[File], threshold: int = WARN_FILE_SIZE_THRESHOLD) -> List[File]:
    """Files whose content exceeds `threshold` bytes. Advisory only."""
    return [f for f in files if len(f.data) > threshold]

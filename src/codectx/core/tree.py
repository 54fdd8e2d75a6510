# src/codectx/core/tree.py
from codectx.models import FileNode


def generate_file_tree(node: FileNode, prefix: str = "", is_last: bool = True, _is_root: bool = True) -> str:
    """
    Renders `node` and everything below it as a box-drawing tree.
    The node itself is printed bare; descendants are drawn with connectors
    in the order they are stored.
    """
    if _is_root:
        lines = [f"{node.name}\n"]
        child_prefix = prefix
    else:
        connector = "└── " if is_last else "├── "
        lines = [f"{prefix}{connector}{node.name}\n"]
        child_prefix = prefix + ("    " if is_last else "│   ")

    for i, child in enumerate(node.children):
        last = i == len(node.children) - 1
        lines.append(generate_file_tree(child, child_prefix, last, _is_root=False))

    return "".join(lines)

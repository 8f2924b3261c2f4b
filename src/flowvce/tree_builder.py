"""File browser tree built from a flat list of file paths."""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence

from flowvce.models import FileNode, FileRecord, FolderNode, TreeNode

SEPARATOR = "/"


class ValidationError(Exception):
    """Raised when a file path cannot be placed in the tree."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path '{path}': {reason}")


def validate_path(path: str) -> list[str]:
    """Split *path* into segments, rejecting malformed paths.

    Raises:
        ValidationError: on an empty path, a leading or trailing separator,
            or an empty segment (``a//b``).
    """
    if not path:
        raise ValidationError(path, "path is empty")
    if path.startswith(SEPARATOR):
        raise ValidationError(path, "leading separator")
    if path.endswith(SEPARATOR):
        raise ValidationError(path, "trailing separator")
    parts = path.split(SEPARATOR)
    if any(part == "" for part in parts):
        raise ValidationError(path, "empty path segment")
    return parts


def folder_prefixes(parts: Sequence[str]) -> list[str]:
    """Return the ancestor folder paths of a split path, outermost first."""
    prefixes: list[str] = []
    current = ""
    for part in parts[:-1]:
        current = f"{current}{SEPARATOR}{part}" if current else part
        prefixes.append(current)
    return prefixes


def check_records(records: Iterable[FileRecord]) -> None:
    """Validate every record path and reject file/folder collisions.

    The whole collection is checked before any node is built so that a
    file browser is never handed a partial tree.
    """
    file_paths: list[str] = []
    folders: set[str] = set()
    for record in records:
        parts = validate_path(record.path)
        folders.update(folder_prefixes(parts))
        file_paths.append(record.path)

    for path in file_paths:
        if path in folders:
            raise ValidationError(path, "path cannot be both a file and a folder")


def build_file_tree(records: Sequence[FileRecord]) -> list[TreeNode]:
    """Build the folder/file hierarchy for *records*.

    The first pass validates every path; the second builds the tree. Each
    level lists its nodes in the order the records first reach them, and a
    folder is created once per distinct prefix. When two records share a
    path the leaf keeps the position of the first and the attributes of
    the last.

    Example:
        ``index.html``, ``css/style.css``, ``css/theme/dark.css`` give the
        roots ``index.html`` and ``css/`` (``style.css``, ``theme/dark.css``).
    """
    check_records(records)

    roots: list[TreeNode] = []
    folders: dict[str, FolderNode] = {}
    leaves: dict[str, FileNode] = {}

    for record in records:
        parts = record.path.split(SEPARATOR)
        parent_path = ""
        for name, prefix in zip(parts, folder_prefixes(parts)):
            if prefix not in folders:
                folder = FolderNode(name=name, path=prefix)
                folders[prefix] = folder
                if parent_path:
                    folders[parent_path].children.append(folder)
                else:
                    roots.append(folder)
            parent_path = prefix

        existing = leaves.get(record.path)
        if existing is not None:
            existing.size = record.size
            existing.language = record.language
            continue

        parent_path, _, name = record.path.rpartition(SEPARATOR)
        leaf = FileNode(
            name=name,
            path=record.path,
            size=record.size,
            language=record.language,
        )
        leaves[record.path] = leaf
        if parent_path:
            folders[parent_path].children.append(leaf)
        else:
            roots.append(leaf)

    return roots


def iter_nodes(
    roots: Sequence[TreeNode],
    ancestors: tuple[FolderNode, ...] = (),
) -> Iterator[tuple[tuple[FolderNode, ...], TreeNode]]:
    """Yield ``(ancestors, node)`` for every node, depth first."""
    for node in roots:
        yield ancestors, node
        if isinstance(node, FolderNode):
            yield from iter_nodes(node.children, ancestors + (node,))


def find_node(roots: Sequence[TreeNode], path: str) -> TreeNode | None:
    """Return the node at *path*, or None."""
    for _, node in iter_nodes(roots):
        if node.path == path:
            return node
    return None


def render_tree(roots: Sequence[TreeNode]) -> str:
    """Render the tree as ASCII lines.

    Example output:
        ├── index.html
        └── css/
            └── style.css
    """
    lines: list[str] = []
    _render_nodes(roots, lines, prefix="")
    return "\n".join(lines)


def _render_nodes(
    nodes: Sequence[TreeNode],
    lines: list[str],
    prefix: str,
) -> None:
    """Recursively render the nodes into lines."""
    for i, node in enumerate(nodes):
        is_last = i == len(nodes) - 1
        connector = "└── " if is_last else "├── "

        if isinstance(node, FolderNode):
            lines.append(f"{prefix}{connector}{node.name}/")
            extension = "    " if is_last else "│   "
            _render_nodes(node.children, lines, prefix + extension)
        else:
            lines.append(f"{prefix}{connector}{node.name}")

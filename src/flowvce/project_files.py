"""Create, rename, delete, and edit operations on a project's file records.

Every operation returns a new list and leaves its input untouched. Folders
exist only as path prefixes, so folder operations rewrite the paths of the
files beneath them. Callers rebuild the tree with
:func:`flowvce.tree_builder.build_file_tree` afterwards.
"""

from __future__ import annotations

import uuid
from dataclasses import replace

from flowvce.file_filter import get_language_hint
from flowvce.models import FileRecord, FolderNode, TreeNode
from flowvce.tree_builder import SEPARATOR, ValidationError, check_records, validate_path


def _validate_name(name: str) -> str:
    name = name.strip()
    if not name or SEPARATOR in name:
        raise ValidationError(name, "a name must be a single non-empty path segment")
    return name


def _sibling_path(path: str, new_name: str) -> str:
    parent, _, _ = path.rpartition(SEPARATOR)
    return f"{parent}{SEPARATOR}{new_name}" if parent else new_name


def _byte_size(content: str) -> int:
    return len(content.encode("utf-8"))


def _index_of(records: list[FileRecord], path: str) -> int:
    for i, record in enumerate(records):
        if record.path == path:
            return i
    raise KeyError(path)


def _apply_moves(records: list[FileRecord], moves: dict[str, str]) -> list[FileRecord]:
    """Rename the paths in *moves* and verify the resulting collection."""
    untouched = {r.path for r in records if r.path not in moves}
    for new_path in moves.values():
        validate_path(new_path)
        if new_path in untouched:
            raise ValidationError(new_path, "a file with this path already exists")

    updated = [
        replace(r, path=moves[r.path]) if r.path in moves else r
        for r in records
    ]
    check_records(updated)
    return updated


def rename_file(records: list[FileRecord], old_path: str, new_name: str) -> list[FileRecord]:
    """Replace the final segment of *old_path* with *new_name*."""
    _index_of(records, old_path)
    new_path = _sibling_path(old_path, _validate_name(new_name))
    if new_path == old_path:
        return list(records)
    return _apply_moves(records, {old_path: new_path})


def rename_folder(records: list[FileRecord], folder_path: str, new_name: str) -> list[FileRecord]:
    """Rename the folder at *folder_path*.

    Only the leading segment chain equal to *folder_path* is rewritten, so
    a folder named ``src`` inside ``my-src-data/src`` does not touch the
    ``my-src-data`` segment.
    """
    validate_path(folder_path)
    new_folder = _sibling_path(folder_path, _validate_name(new_name))
    old_prefix = folder_path + SEPARATOR

    moves = {
        r.path: new_folder + SEPARATOR + r.path[len(old_prefix):]
        for r in records
        if r.path.startswith(old_prefix)
    }
    if not moves:
        raise KeyError(folder_path)
    if new_folder == folder_path:
        return list(records)
    return _apply_moves(records, moves)


def rename_node(records: list[FileRecord], node: TreeNode, new_name: str) -> list[FileRecord]:
    if isinstance(node, FolderNode):
        return rename_folder(records, node.path, new_name)
    return rename_file(records, node.path, new_name)


def move_file(records: list[FileRecord], old_path: str, new_path: str) -> list[FileRecord]:
    """Give the file at *old_path* a new full path."""
    _index_of(records, old_path)
    if new_path == old_path:
        return list(records)
    return _apply_moves(records, {old_path: new_path})


def delete_file(records: list[FileRecord], path: str) -> list[FileRecord]:
    _index_of(records, path)
    return [r for r in records if r.path != path]


def delete_folder(records: list[FileRecord], folder_path: str) -> list[FileRecord]:
    """Remove every file below *folder_path*."""
    prefix = folder_path + SEPARATOR
    remaining = [r for r in records if not r.path.startswith(prefix)]
    if len(remaining) == len(records):
        raise KeyError(folder_path)
    return remaining


def delete_node(records: list[FileRecord], node: TreeNode) -> list[FileRecord]:
    if isinstance(node, FolderNode):
        return delete_folder(records, node.path)
    return delete_file(records, node.path)


def create_file(records: list[FileRecord], path: str, content: str = "") -> list[FileRecord]:
    """Append a new editable file at *path*.

    Raises:
        ValidationError: if the path is malformed, already taken, or
            collides with an existing folder.
    """
    validate_path(path)
    if any(r.path == path for r in records):
        raise ValidationError(path, "a file with this path already exists")

    record = FileRecord(
        id=uuid.uuid4().hex,
        path=path,
        content=content,
        language=get_language_hint(path),
        size=_byte_size(content),
    )
    updated = [*records, record]
    check_records(updated)
    return updated


def update_content(records: list[FileRecord], path: str, content: str) -> list[FileRecord]:
    """Replace the content of the file at *path* and recompute its size."""
    index = _index_of(records, path)
    updated = list(records)
    updated[index] = replace(records[index], content=content, size=_byte_size(content))
    return updated

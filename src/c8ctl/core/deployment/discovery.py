"""Resource discovery and group classification.

Walks the input paths for deployable files and works out, for every file,
whether it belongs to a building block (a directory whose name contains
``_bb-``) or a process application (a directory holding a
``.process-application`` marker file).
"""

import logging
import os
from typing import Iterable, List, Optional, Set, Tuple

from c8ctl.core.models import GroupType, ResourceFile

logger = logging.getLogger(__name__)

RESOURCE_EXTENSIONS = (".bpmn", ".dmn", ".form")
BUILDING_BLOCK_MARKER = "_bb-"
PROCESS_APPLICATION_MARKER = ".process-application"


def is_building_block_dir(path: str) -> bool:
    """Check whether a directory's own name marks it as a building block."""
    return BUILDING_BLOCK_MARKER in os.path.basename(os.path.normpath(path))


def is_resource_file(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in RESOURCE_EXTENSIONS


def _outside_base(directory: str, base_path: str) -> bool:
    """True once the upward walk has reached or left the base path."""
    try:
        rel = os.path.relpath(directory, base_path)
    except ValueError:
        # Different drives on Windows.
        return True
    return rel in ("", os.curdir) or rel == os.pardir or rel.startswith(os.pardir + os.sep)


def classify_group(directory: str, base_path: str) -> Tuple[GroupType, Optional[str]]:
    """Determine the group a directory belongs to.

    Walks upward from ``directory`` one level at a time. The building-block
    name check wins over the process-application marker at the same level.
    The walk never classifies the base path itself or anything above it.

    Args:
        directory: Absolute directory containing the resource file
        base_path: Absolute directory bounding the walk

    Returns:
        Group type and the group root directory (None when ungrouped)
    """
    current = os.path.abspath(directory)
    base = os.path.abspath(base_path)

    while not _outside_base(current, base):
        if is_building_block_dir(current):
            return GroupType.BUILDING_BLOCK, current
        if os.path.isfile(os.path.join(current, PROCESS_APPLICATION_MARKER)):
            return GroupType.PROCESS_APPLICATION, current

        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent

    return GroupType.NONE, None


def _display_path(path: str, base_path: str) -> str:
    try:
        return os.path.relpath(path, base_path)
    except ValueError:
        return path


def classification_boundary(root: str, base_path: str) -> str:
    """Directory bounding the group walk for files found below ``root``.

    A root strictly inside the base path keeps the base path as boundary,
    so groups between the two are still found. Any other root (the base
    path itself, or a path outside it) is bounded by the parent of its
    directory, so the root directory itself is always classified.
    """
    root_dir = os.path.abspath(root)
    if not os.path.isdir(root_dir):
        root_dir = os.path.dirname(root_dir)
    base = os.path.abspath(base_path)
    if not _outside_base(root_dir, base):
        return base
    return os.path.dirname(root_dir)


def load_resource(path: str, base_path: str, boundary: Optional[str] = None) -> ResourceFile:
    """Read a resource file and classify it.

    Args:
        path: Resource file to read
        base_path: Directory display paths are relative to
        boundary: Directory bounding the group walk (defaults to ``base_path``)

    Raises:
        OSError: If the file cannot be read
    """
    path = os.path.abspath(path)
    with open(path, "rb") as f:
        content = f.read()

    group_type, group_path = classify_group(os.path.dirname(path), boundary or base_path)
    return ResourceFile(
        path=path,
        name=os.path.basename(path),
        content=content,
        is_building_block=group_type is GroupType.BUILDING_BLOCK,
        is_process_application=group_type is GroupType.PROCESS_APPLICATION,
        group_path=group_path,
        relative_path=_display_path(path, base_path),
    )


def collect_resource_files(
    root: str,
    base_path: str,
    collected: Optional[List[ResourceFile]] = None,
    boundary: Optional[str] = None,
    visited: Optional[Set[str]] = None,
) -> List[ResourceFile]:
    """Recursively collect resource files below ``root``.

    Files of a directory are collected before its subdirectories, and
    building-block subdirectories are visited before the other ones.
    Directory entries are visited in sorted order so the result is stable
    across runs. A root that does not exist contributes nothing. Symlinked
    directories are followed, but a directory already walked is skipped.

    Args:
        root: File or directory to search
        base_path: Directory display paths are relative to
        collected: List to append to (a new one when omitted)
        boundary: Directory bounding the group walk (derived from ``root``
            when omitted)
        visited: Real paths of directories already walked

    Returns:
        The list of collected resource files
    """
    if collected is None:
        collected = []
    if visited is None:
        visited = set()

    root = os.path.abspath(root)
    if not os.path.exists(root):
        logger.debug(f"Skipping missing path: {root}")
        return collected
    if boundary is None:
        boundary = classification_boundary(root, base_path)

    if os.path.isfile(root):
        if is_resource_file(root):
            collected.append(load_resource(root, base_path, boundary))
        return collected

    real_root = os.path.realpath(root)
    if real_root in visited:
        logger.debug(f"Skipping already walked directory: {root}")
        return collected
    visited.add(real_root)

    bb_dirs: List[str] = []
    regular_dirs: List[str] = []
    files: List[str] = []

    for entry in sorted(os.listdir(root)):
        full_path = os.path.join(root, entry)
        if os.path.isdir(full_path):
            if BUILDING_BLOCK_MARKER in entry:
                bb_dirs.append(full_path)
            else:
                regular_dirs.append(full_path)
        elif os.path.isfile(full_path):
            files.append(full_path)

    for file_path in files:
        if is_resource_file(file_path):
            collected.append(load_resource(file_path, base_path, boundary))

    for directory in bb_dirs + regular_dirs:
        collect_resource_files(directory, base_path, collected, boundary, visited)

    return collected


def walk_paths(paths: Iterable[str], base_path: str) -> List[ResourceFile]:
    """Collect resource files from every input path, in input order.

    Each path gets its own group walk boundary, see
    :func:`classification_boundary`.
    """
    collected: List[ResourceFile] = []
    for path in paths:
        collect_resource_files(path, base_path, collected)
    return collected

"""Definition id extraction and duplicate detection."""

import re
from typing import Dict, Iterable, List, Optional

from c8ctl.core.models import ResourceFile

# First <process ...> / <decision ...> element with an id attribute, any namespace prefix.
_PROCESS_ID_PATTERN = re.compile(r"<(?:[\w.-]+:)?process\b[^>]*?\sid\s*=\s*[\"']([^\"']+)[\"']")
_DECISION_ID_PATTERN = re.compile(r"<(?:[\w.-]+:)?decision\b[^>]*?\sid\s*=\s*[\"']([^\"']+)[\"']")


def _decode(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")


def extract_process_id(content: bytes) -> Optional[str]:
    """Extract the id of the first process element in BPMN content."""
    match = _PROCESS_ID_PATTERN.search(_decode(content))
    return match.group(1) if match else None


def extract_decision_id(content: bytes) -> Optional[str]:
    """Extract the id of the first decision element in DMN content."""
    match = _DECISION_ID_PATTERN.search(_decode(content))
    return match.group(1) if match else None


def extract_definition_id(resource: ResourceFile) -> Optional[str]:
    """Return the definition id of a resource.

    BPMN and DMN files are scanned for their process/decision id. Forms are
    identified by their file name stem instead. This is a text scan, not an
    XML parse.

    Returns:
        The id, or None when none could be found
    """
    if resource.extension == ".bpmn":
        return extract_process_id(resource.content)
    if resource.extension == ".dmn":
        return extract_decision_id(resource.content)
    if resource.extension == ".form":
        return resource.stem
    return None


def find_duplicate_ids(resources: Iterable[ResourceFile]) -> Dict[str, List[str]]:
    """Find process/decision ids contributed by more than one file.

    Forms are ignored. Paths are listed in the order the files were given.

    Returns:
        Mapping of duplicated id to every contributing path; empty when
        all ids are unique
    """
    by_id: Dict[str, List[str]] = {}
    for resource in resources:
        if resource.extension not in (".bpmn", ".dmn"):
            continue
        definition_id = extract_definition_id(resource)
        if definition_id is None:
            continue
        by_id.setdefault(definition_id, []).append(resource.path)

    return {definition_id: paths for definition_id, paths in by_id.items() if len(paths) > 1}

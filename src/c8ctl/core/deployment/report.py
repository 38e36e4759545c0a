"""Reconcile the deployment result with the files that were deployed."""

import logging
import os
from typing import Dict, List, Optional, Sequence, Tuple, Union

from c8ctl.core.deployment.definitions import extract_definition_id
from c8ctl.core.deployment.ordering import TIER_RANK
from c8ctl.core.models import (
    DecisionDefinitionEntry,
    DeploymentReportRow,
    DeploymentResult,
    FormDefinitionEntry,
    GroupType,
    ProcessDefinitionEntry,
    ResourceFile,
)

logger = logging.getLogger(__name__)

DefinitionEntry = Union[ProcessDefinitionEntry, DecisionDefinitionEntry, FormDefinitionEntry]

UNMATCHED_FILE = "-"


def build_lookup_tables(
    resources: Sequence[ResourceFile],
) -> Tuple[Dict[str, ResourceFile], Dict[str, ResourceFile]]:
    """Index resources by definition id (BPMN/DMN) and by file stem (forms)."""
    by_definition_id: Dict[str, ResourceFile] = {}
    by_form_stem: Dict[str, ResourceFile] = {}
    for resource in resources:
        if resource.extension == ".form":
            by_form_stem.setdefault(resource.stem, resource)
            continue
        definition_id = extract_definition_id(resource)
        if definition_id is not None:
            by_definition_id.setdefault(definition_id, resource)
    return by_definition_id, by_form_stem


def index_by_file_name(resources: Sequence[ResourceFile]) -> Dict[str, ResourceFile]:
    """Index resources by file name, keeping the first file of each name."""
    by_name: Dict[str, ResourceFile] = {}
    for resource in resources:
        by_name.setdefault(resource.name, resource)
    return by_name


def _by_resource_name(
    by_name: Dict[str, ResourceFile], resource_name: Optional[str]
) -> Optional[ResourceFile]:
    if not resource_name:
        return None
    return by_name.get(os.path.basename(resource_name))


def _row(entry: DefinitionEntry, resource: Optional[ResourceFile]) -> DeploymentReportRow:
    if resource is None:
        logger.debug(f"No local file matches deployed {entry.kind} '{entry.id}'")
        return DeploymentReportRow(
            file=entry.resource_name or UNMATCHED_FILE,
            type=entry.kind,
            id=entry.id,
            version=entry.version,
            key=entry.key,
        )
    return DeploymentReportRow(
        file=resource.relative_path,
        type=entry.kind,
        id=entry.id,
        version=entry.version,
        key=entry.key,
        badge=resource.badge,
        group_type=resource.group_type,
        group_path=resource.group_path,
        file_name=resource.name,
    )


def _row_sort_key(row: DeploymentReportRow) -> Tuple[int, int, str, str]:
    unmatched = 1 if row.file_name == "" else 0
    return (unmatched, TIER_RANK[row.group_type], row.group_path or "", row.file_name or row.file)


def reconcile_results(
    result: DeploymentResult, resources: Sequence[ResourceFile]
) -> List[DeploymentReportRow]:
    """Produce one report row per deployed entity.

    Processes and decisions are matched to their file by definition id,
    then by the resource name the cluster reports, since only the first
    id of a file is indexed. Forms are matched by file name stem. Entities
    without a matching file still get a row. Rows follow the grouping of
    the submitted files, then the file name, rather than the order
    returned by the cluster.

    Args:
        result: Deployment result returned by the cluster
        resources: Resources that were submitted

    Returns:
        Sorted report rows
    """
    by_definition_id, by_form_stem = build_lookup_tables(resources)
    by_name = index_by_file_name(resources)

    rows: List[DeploymentReportRow] = []
    for process in result.processes:
        rows.append(
            _row(
                process,
                by_definition_id.get(process.id)
                or _by_resource_name(by_name, process.resource_name),
            )
        )
    for decision in result.decisions:
        rows.append(
            _row(
                decision,
                by_definition_id.get(decision.id)
                or _by_resource_name(by_name, decision.resource_name),
            )
        )
    for form in result.forms:
        resource = by_form_stem.get(form.id)
        if resource is None and form.resource_name:
            resource = by_form_stem.get(os.path.splitext(os.path.basename(form.resource_name))[0])
        rows.append(_row(form, resource))

    return sorted(rows, key=_row_sort_key)


def process_application_roots(resources: Sequence[ResourceFile]) -> List[str]:
    """Distinct process application roots among the resources, sorted."""
    return sorted(
        {
            r.group_path
            for r in resources
            if r.group_type is GroupType.PROCESS_APPLICATION and r.group_path is not None
        }
    )

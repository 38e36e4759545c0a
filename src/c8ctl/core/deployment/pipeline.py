"""Deployment pipeline: resolve resources, submit them, report the result."""

import logging
from typing import List, Sequence

from pydantic import BaseModel, Field

from c8ctl.core.client import ClusterClient
from c8ctl.core.deployment.definitions import find_duplicate_ids
from c8ctl.core.deployment.discovery import walk_paths
from c8ctl.core.deployment.ordering import sort_resources
from c8ctl.core.deployment.report import process_application_roots, reconcile_results
from c8ctl.core.deployment.submit import submit_deployment
from c8ctl.core.exceptions import DuplicateDefinitionError, PreconditionError
from c8ctl.core.models import DeploymentReportRow, DeploymentResult, ResourceFile

logger = logging.getLogger(__name__)


class DeploymentOutcome(BaseModel):
    """Result of a successful deployment together with its report rows."""

    result: DeploymentResult
    rows: List[DeploymentReportRow] = Field(default_factory=list)


def resolve_resources(paths: Sequence[str], base_path: str) -> List[ResourceFile]:
    """Discover, validate and order the resources to deploy.

    Nothing is sent to the cluster here; every failure is detected locally.

    Args:
        paths: Files or directories given on the command line
        base_path: Directory used as classification boundary and for display paths

    Returns:
        Resources in deployment order

    Raises:
        PreconditionError: If no paths were given or no resource file was found
        DuplicateDefinitionError: If two files share a process/decision id
        OSError: If a resource file cannot be read
    """
    if not paths:
        raise PreconditionError("No paths provided. Use: c8ctl deploy <path>")

    resources = walk_paths(paths, base_path)
    if not resources:
        raise PreconditionError("No BPMN/DMN/Form files found in the specified paths")

    duplicates = find_duplicate_ids(resources)
    if duplicates:
        raise DuplicateDefinitionError(duplicates)

    ordered = sort_resources(resources)
    logger.debug(f"Resolved {len(ordered)} resource(s): {[r.relative_path for r in ordered]}")
    return ordered


def deploy_resolved(
    client: ClusterClient, tenant_id: str, resources: Sequence[ResourceFile]
) -> DeploymentOutcome:
    """Submit resolved resources in one deployment and reconcile the response.

    Raises:
        PreconditionError: If ``resources`` is empty
        TransportError, ApiError, UnknownError: If the submission fails
    """
    for root in process_application_roots(resources):
        logger.info(f"Note: batch deployment from process application {root}")

    result = submit_deployment(client, tenant_id, resources)
    logger.info(f"Deployment successful [Key: {result.deployment_key}]")

    return DeploymentOutcome(result=result, rows=reconcile_results(result, resources))

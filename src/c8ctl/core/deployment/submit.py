"""Building and sending the deployment request."""

import logging
from typing import List, Sequence

from c8ctl.core.client import ClusterClient, ResourceBlob
from c8ctl.core.exceptions import DeploymentError, PreconditionError, UnknownError
from c8ctl.core.models import DeploymentResult, ResourceFile

logger = logging.getLogger(__name__)

MIME_TYPES = {
    ".bpmn": "application/xml",
    ".dmn": "application/xml",
    ".form": "application/json",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


def mime_type_for(name: str) -> str:
    """MIME type of a resource, derived from its extension."""
    for extension, mime_type in MIME_TYPES.items():
        if name.lower().endswith(extension):
            return mime_type
    return DEFAULT_MIME_TYPE


def build_deployment_request(resources: Sequence[ResourceFile]) -> List[ResourceBlob]:
    """Turn resolved resources into (name, content, MIME type) blobs, keeping their order."""
    return [(r.name, r.content, mime_type_for(r.name)) for r in resources]


def submit_deployment(
    client: ClusterClient, tenant_id: str, resources: Sequence[ResourceFile]
) -> DeploymentResult:
    """Deploy every resolved resource in one call.

    Args:
        client: Deployment collaborator
        tenant_id: Tenant to deploy into
        resources: Resolved and ordered resources

    Returns:
        The cluster's deployment result

    Raises:
        PreconditionError: If there is nothing to deploy
        TransportError: If the cluster could not be reached
        ApiError: If the cluster rejected the deployment
        UnknownError: For any other failure
    """
    if not resources:
        raise PreconditionError("No BPMN/DMN/Form files found in the specified paths")

    request = build_deployment_request(resources)
    logger.info(f"Deploying {len(request)} resource(s)...")

    try:
        return client.deploy_resources(tenant_id, request)
    except DeploymentError:
        raise
    except Exception as e:
        raise UnknownError(str(e) or type(e).__name__) from e

"""Deployment of BPMN, DMN and form resources.

Main components:
- discovery: Resource file discovery and building-block / process-application grouping
- definitions: Process/decision id extraction and duplicate detection
- ordering: Deterministic deployment order
- submit: Deployment request building and submission
- report: Reconciliation of the deployment result with local files
- errors: Diagnosis of failed deployments
- pipeline: resolve_resources / deploy_resolved orchestration
"""

from c8ctl.core.deployment.errors import (
    ErrorReport,
    classify_error,
    format_duplicate_error,
    format_error_report,
)
from c8ctl.core.deployment.pipeline import DeploymentOutcome, deploy_resolved, resolve_resources

__all__ = [
    "DeploymentOutcome",
    "ErrorReport",
    "classify_error",
    "deploy_resolved",
    "format_duplicate_error",
    "format_error_report",
    "resolve_resources",
]

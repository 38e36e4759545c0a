"""Turn deployment failures into an actionable diagnosis.

The classifier derives a title from the failure, reformats the cluster's
validation output, adds hints for the kind of failure, and lists the
files that were part of the attempt.
"""

import re
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from c8ctl.core.exceptions import ApiError, DuplicateDefinitionError, TransportError
from c8ctl.core.models import ResourceFile

MAX_LISTED_FILES = 5

GENERIC_TITLE = "Deployment failed for an unknown reason"

DEPLOY_HEADING = "Failed to deploy resources"
INSTANCE_HEADING = "Failed to create process instance"

TRANSPORT_TITLES = {
    "refused": "Connection refused: the cluster is not accepting connections. "
    "Is it running and reachable at the configured address?",
    "host-unreachable": "Host unreachable: the cluster address could not be reached from this machine.",
    "reset": "Connection reset: the cluster closed the connection before answering.",
    "timed-out": "Request timed out: the cluster did not answer in time.",
    "aborted": "Request aborted: the connection was dropped before the deployment completed.",
}

CATEGORY_HINTS = {
    "invalid-argument": [
        "A message event may reference a message that is not defined (missing message reference).",
        "Two resources may share the same process or decision ID.",
        "A resource may fail to parse; open it in the Modeler to check it.",
    ],
    "resource-exhausted": [
        "The cluster is applying backpressure and rejected the request.",
        "Wait a moment and retry the deployment later.",
    ],
    "access": [
        "Check that CAMUNDA_BASE_URL points at the cluster REST API (for example http://localhost:8080/v2).",
        "Check your credentials (CAMUNDA_CLIENT_ID/CAMUNDA_CLIENT_SECRET or CAMUNDA_USERNAME/CAMUNDA_PASSWORD).",
        "Make sure the client is authorized for the target tenant.",
    ],
    "default": [
        "Review the error details and the resources listed below.",
        "Set C8CTL_LOG_LEVEL=DEBUG for more detail.",
    ],
}

_TITLE_CATEGORIES = [
    ("INVALID_ARGUMENT", "invalid-argument"),
    ("RESOURCE_EXHAUSTED", "resource-exhausted"),
    ("NOT_FOUND", "access"),
    ("UNAUTHENTICATED", "access"),
    ("UNAUTHORIZED", "access"),
    ("PERMISSION_DENIED", "access"),
    ("FORBIDDEN", "access"),
]

_STATUS_CATEGORIES = {
    400: "invalid-argument",
    401: "access",
    403: "access",
    404: "access",
    429: "resource-exhausted",
    503: "resource-exhausted",
}

_RESOURCE_NAME = re.compile(r"'?([^\s':]+\.(?:bpmn|dmn|form))\b'?\s*:?\s*(.*)$", re.IGNORECASE)
_MARKER = re.compile(r"^-?\s*(ERROR|WARNING)\s*:\s*(.*)$", re.IGNORECASE)


class ErrorReport(BaseModel):
    """Structured diagnosis of a failed deployment."""

    title: str
    category: str = "default"
    detail_lines: List[str] = Field(default_factory=list)
    hints: List[str] = Field(default_factory=list)
    attempted_files: List[str] = Field(default_factory=list)


def derive_title(error: BaseException) -> str:
    """Pick the most specific title available for a failure.

    Priority: problem-detail title, transport failure sentence, the
    error's own message, then a generic sentence.
    """
    if isinstance(error, ApiError) and error.problem.title:
        return error.problem.title
    if isinstance(error, TransportError) and error.code in TRANSPORT_TITLES:
        return TRANSPORT_TITLES[error.code]
    message = str(error).strip()
    if message:
        return message
    return GENERIC_TITLE


def categorize(title: str, error: Optional[BaseException] = None) -> str:
    """Map a derived title (or, failing that, an HTTP status) to a hint category."""
    normalized = re.sub(r"[\s-]+", "_", title.upper())
    for marker, category in _TITLE_CATEGORIES:
        if marker in normalized:
            return category
    if isinstance(error, ApiError):
        return _STATUS_CATEGORIES.get(error.status_code, "default")
    return "default"


def _marker_line(text: str, indent: str) -> Optional[str]:
    match = _MARKER.match(text)
    if not match:
        return None
    level, message = match.group(1).upper(), match.group(2).strip()
    symbol = "✗" if level == "ERROR" else "⚠"
    return f"{indent}{symbol} {level}: {message}"


def format_detail(detail: Optional[str]) -> List[str]:
    """Reformat a problem detail into indented lines.

    Lines naming a resource file start a new entry; ERROR and WARNING
    markers below it are indented under that file.
    """
    if not detail:
        return []

    lines: List[str] = []
    for raw in detail.splitlines():
        text = raw.strip()
        if not text:
            continue

        resource = _RESOURCE_NAME.search(text)
        if resource and not _MARKER.match(text):
            prefix = text[: resource.start()].strip()
            if prefix:
                lines.append(f"  {prefix}")
            lines.append(f"  • {resource.group(1)}")
            rest = resource.group(2).strip()
            if rest:
                lines.append(_marker_line(rest, "      ") or f"      {rest.lstrip('- ')}")
            continue

        marked = _marker_line(text, "      ")
        if marked:
            lines.append(marked)
        else:
            lines.append(f"    {text}")
    return lines


def list_attempted_files(
    resources: Sequence[ResourceFile], limit: int = MAX_LISTED_FILES
) -> List[str]:
    """First ``limit`` file paths of the attempt, plus a "+N more" line."""
    listed = [r.relative_path for r in resources[:limit]]
    if len(resources) > limit:
        listed.append(f"+{len(resources) - limit} more")
    return listed


def classify_error(error: BaseException, resources: Sequence[ResourceFile]) -> ErrorReport:
    """Build the diagnosis for a failed submission.

    Args:
        error: The failure raised while submitting
        resources: Resources that were part of the attempt

    Returns:
        ErrorReport with title, detail, hints and attempted files
    """
    title = derive_title(error)
    category = categorize(title, error)
    detail = error.problem.detail if isinstance(error, ApiError) else None

    return ErrorReport(
        title=title,
        category=category,
        detail_lines=format_detail(detail),
        hints=list(CATEGORY_HINTS[category]),
        attempted_files=list_attempted_files(resources),
    )


def format_error_report(report: ErrorReport, heading: str = DEPLOY_HEADING) -> List[str]:
    """Render an ErrorReport as printable lines under the given heading."""
    lines = [f"✗ {heading}: {report.title}"]
    if report.detail_lines:
        lines.append("")
        lines.append("Details:")
        lines.extend(report.detail_lines)
    if report.hints:
        lines.append("")
        lines.append("Hints:")
        lines.extend(f"  - {hint}" for hint in report.hints)
    if report.attempted_files:
        lines.append("")
        lines.append("Resources in this deployment:")
        lines.extend(f"  {path}" for path in report.attempted_files)
    return lines


def format_duplicate_error(error: DuplicateDefinitionError) -> List[str]:
    """Render every duplicated id with all of its files."""
    lines = ["✗ Cannot deploy: Multiple files with the same process/decision ID found:"]
    for definition_id in sorted(error.duplicates):
        lines.append(f"  {definition_id}:")
        lines.extend(f"    - {path}" for path in error.duplicates[definition_id])
    lines.append("")
    lines.append("Each process/decision ID must be unique within one deployment.")
    return lines

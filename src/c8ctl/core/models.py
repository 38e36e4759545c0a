"""Data types for c8ctl deployment components."""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

ResourceKind = Literal["process", "decision", "form"]


class GroupType(str, Enum):
    """Logical group a resource file belongs to."""

    BUILDING_BLOCK = "building-block"
    PROCESS_APPLICATION = "process-application"
    NONE = "none"


class ResourceFile(BaseModel):
    """A deployable resource discovered on disk.

    Content is read fully into memory at discovery time and kept until the
    deployment report has been produced.
    """

    path: str
    name: str
    content: bytes
    is_building_block: bool = False
    is_process_application: bool = False
    group_path: Optional[str] = None
    relative_path: str = ""

    @model_validator(mode="after")
    def check_grouping(self) -> "ResourceFile":
        """Reject inconsistent group flags and group roots."""
        if self.is_building_block and self.is_process_application:
            raise ValueError(
                f"{self.path} cannot be both a building block and a process application"
            )
        if self.group_path is not None and Path(self.group_path) not in Path(self.path).parents:
            raise ValueError(f"group_path {self.group_path} is not an ancestor of {self.path}")
        if not self.relative_path:
            self.relative_path = self.name
        return self

    @property
    def extension(self) -> str:
        return Path(self.name).suffix.lower()

    @property
    def stem(self) -> str:
        return Path(self.name).stem

    @property
    def group_type(self) -> GroupType:
        if self.is_building_block:
            return GroupType.BUILDING_BLOCK
        if self.is_process_application:
            return GroupType.PROCESS_APPLICATION
        return GroupType.NONE

    @property
    def badge(self) -> str:
        """Short label shown next to the file in reports."""
        if self.is_building_block:
            return "BB"
        if self.is_process_application:
            return "PA"
        return ""


class ProcessDefinitionEntry(BaseModel):
    """Process definition created by a deployment."""

    kind: Literal["process"] = "process"
    id: str
    version: int
    key: str
    resource_name: Optional[str] = None


class DecisionDefinitionEntry(BaseModel):
    """Decision definition created by a deployment."""

    kind: Literal["decision"] = "decision"
    id: str
    version: int
    key: str
    resource_name: Optional[str] = None


class FormDefinitionEntry(BaseModel):
    """Form created by a deployment."""

    kind: Literal["form"] = "form"
    id: str
    version: int
    key: str
    resource_name: Optional[str] = None


class DeploymentResult(BaseModel):
    """Response of a single deployment call."""

    deployment_key: str
    tenant_id: Optional[str] = None
    processes: List[ProcessDefinitionEntry] = Field(default_factory=list)
    decisions: List[DecisionDefinitionEntry] = Field(default_factory=list)
    forms: List[FormDefinitionEntry] = Field(default_factory=list)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "DeploymentResult":
        """Create a DeploymentResult from the REST deployment response.

        The REST API returns ``deployments`` as a list of single-key objects
        tagged ``processDefinition``, ``decisionDefinition``, ``form`` or
        ``decisionRequirements``. Decision requirements graphs have no row of
        their own in reports and are skipped, but their resource name is
        carried over to decisions that do not name their resource.
        """
        processes: List[ProcessDefinitionEntry] = []
        decisions: List[DecisionDefinitionEntry] = []
        forms: List[FormDefinitionEntry] = []

        items = payload.get("deployments") or []
        requirements_resources: Dict[str, str] = {}
        for item in items:
            requirements = item.get("decisionRequirements")
            if requirements and requirements.get("resourceName"):
                requirements_resources[requirements.get("decisionRequirementsId", "")] = (
                    requirements["resourceName"]
                )

        for item in items:
            process = item.get("processDefinition")
            if process:
                processes.append(
                    ProcessDefinitionEntry(
                        id=process["processDefinitionId"],
                        version=process.get("processDefinitionVersion", 0),
                        key=str(process.get("processDefinitionKey", "")),
                        resource_name=process.get("resourceName"),
                    )
                )
                continue
            decision = item.get("decisionDefinition")
            if decision:
                decisions.append(
                    DecisionDefinitionEntry(
                        id=decision["decisionDefinitionId"],
                        version=decision.get("version", 0),
                        key=str(decision.get("decisionDefinitionKey", "")),
                        resource_name=decision.get("resourceName")
                        or requirements_resources.get(decision.get("decisionRequirementsId", "")),
                    )
                )
                continue
            form = item.get("form")
            if form:
                forms.append(
                    FormDefinitionEntry(
                        id=form["formId"],
                        version=form.get("version", 0),
                        key=str(form.get("formKey", "")),
                        resource_name=form.get("resourceName"),
                    )
                )

        return cls(
            deployment_key=str(payload.get("deploymentKey", "")),
            tenant_id=payload.get("tenantId"),
            processes=processes,
            decisions=decisions,
            forms=forms,
        )


class ProblemDetail(BaseModel):
    """RFC 7807 problem document returned by the cluster on rejection."""

    type: Optional[str] = None
    title: Optional[str] = None
    status: Optional[int] = None
    detail: Optional[str] = None
    instance: Optional[str] = None


class DeploymentReportRow(BaseModel):
    """One row of the deployment report."""

    file: str
    type: ResourceKind
    id: str
    version: int
    key: str
    badge: str = ""
    group_type: GroupType = GroupType.NONE
    group_path: Optional[str] = None
    file_name: str = ""

    def as_columns(self) -> Dict[str, str]:
        """Return the printable columns (File, Type, ID, Version, Key)."""
        file_label = f"{self.file} [{self.badge}]" if self.badge else self.file
        return {
            "File": file_label,
            "Type": self.type,
            "ID": self.id,
            "Version": str(self.version),
            "Key": self.key,
        }

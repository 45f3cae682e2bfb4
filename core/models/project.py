# =============================================================================
# core/models/project.py - Project & Milestone Schemas
# =============================================================================
# A project belongs to a customer; milestones belong to a project and may
# depend on other milestones.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import ClassVar

from pydantic import Field, field_validator

from .base import CamelModel


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProjectPhase(str, Enum):
    """Delivery phases, in order."""
    DISCOVERY = "discovery"
    DESIGN = "design"
    IMPLEMENTATION = "implementation"
    TESTING = "testing"
    DEPLOYMENT = "deployment"
    MAINTENANCE = "maintenance"


class MilestoneStatus(str, Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    DELAYED = "delayed"
    AT_RISK = "at-risk"


class MilestonePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# -----------------------------------------------------------------------------
# Projects
# -----------------------------------------------------------------------------

class KeyResult(CamelModel):
    description: str
    target: float | None = None
    current: float | None = None
    unit: str | None = None
    is_complete: bool = False


class Stakeholder(CamelModel):
    user: str | None = None
    name: str | None = None
    role: str | None = None
    is_external: bool = False


class ProjectCreate(CamelModel):
    """
    Schema for creating a project.

    Required: name, customer, accountManager, startDate, objectives.
    """
    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    customer: str | None = None
    account_manager: str | None = None
    status: ProjectStatus = ProjectStatus.PLANNING
    phase: ProjectPhase = ProjectPhase.DISCOVERY
    start_date: datetime | None = None
    target_completion_date: datetime | None = None
    budget: float | None = Field(default=None, ge=0)
    cost_to_date: float = Field(default=0, ge=0)
    objectives: list[str] = Field(default_factory=list)
    key_results: list[KeyResult] = Field(default_factory=list)
    business_value: str = ""
    stakeholders: list[Stakeholder] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class ProjectUpdate(CamelModel):
    clearable_fields: ClassVar[frozenset[str]] = frozenset({"description", "account_manager"})

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    customer: str | None = None
    account_manager: str | None = None
    status: ProjectStatus | None = None
    phase: ProjectPhase | None = None
    start_date: datetime | None = None
    target_completion_date: datetime | None = None
    budget: float | None = Field(default=None, ge=0)
    cost_to_date: float | None = Field(default=None, ge=0)
    objectives: list[str] | None = None
    key_results: list[KeyResult] | None = None
    business_value: str | None = None
    stakeholders: list[Stakeholder] | None = None
    tags: list[str] | None = None


# -----------------------------------------------------------------------------
# Milestones
# -----------------------------------------------------------------------------

def _as_list(value):
    """Accept a single deliverable string where a list is expected."""
    if isinstance(value, str):
        return [value]
    return value


class MilestoneCreate(CamelModel):
    """
    Schema for creating a milestone.

    Required: title, project, startDate, targetCompletionDate, owner.
    """
    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    project: str | None = None
    status: MilestoneStatus = MilestoneStatus.NOT_STARTED
    start_date: datetime | None = None
    target_completion_date: datetime | None = None
    deliverables: list[str] = Field(default_factory=list)
    owner: str | None = None
    reviewers: list[str] = Field(default_factory=list)
    approval_required: bool = False
    priority: MilestonePriority = MilestonePriority.MEDIUM
    dependencies: list[str] = Field(default_factory=list)
    progress: int = Field(default=0, ge=0, le=100)
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("deliverables", mode="before")
    @classmethod
    def deliverables_as_list(cls, value):
        return _as_list(value)


class MilestoneUpdate(CamelModel):
    clearable_fields: ClassVar[frozenset[str]] = frozenset({"description", "notes"})

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    status: MilestoneStatus | None = None
    start_date: datetime | None = None
    target_completion_date: datetime | None = None
    deliverables: list[str] | None = None
    owner: str | None = None
    reviewers: list[str] | None = None
    approval_required: bool | None = None
    priority: MilestonePriority | None = None
    dependencies: list[str] | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    notes: str | None = None
    tags: list[str] | None = None

    @field_validator("deliverables", mode="before")
    @classmethod
    def deliverables_as_list(cls, value):
        return _as_list(value)


class ProgressUpdate(CamelModel):
    progress: float | None = None

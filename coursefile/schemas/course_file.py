from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, computed_field

from coursefile.models.enums import EffectiveStatus, ReviewStatus, TaskStatus
from coursefile.schemas.base import CamelModel
from coursefile.services.approval import effective_status as derive_effective_status


# -------------------------------------------------------------------
# TASKS
# -------------------------------------------------------------------
class TaskRead(CamelModel):
    id: UUID
    assignment_id: UUID
    template_id: int

    status: TaskStatus
    completed_at: Optional[datetime] = None

    cc_status: ReviewStatus
    cc_remarks: Optional[str] = None
    cc_review_date: Optional[datetime] = None

    hod_status: ReviewStatus
    hod_remarks: Optional[str] = None
    hod_review_date: Optional[datetime] = None

    deadline: Optional[date] = None
    updated_at: Optional[datetime] = None

    @computed_field(alias="effectiveStatus")
    @property
    def effective_status(self) -> EffectiveStatus:
        return derive_effective_status(self)


class ReviewableTaskRead(TaskRead):
    is_reviewable: bool = False


class ReviewRequest(CamelModel):
    status: ReviewStatus
    remarks: Optional[str] = None


class RemarksRequest(CamelModel):
    remarks: Optional[str] = None


class DeadlineRequest(CamelModel):
    # required, null clears; the date itself is parsed by the workflow
    deadline: Optional[str]


class BatchReviewRequest(CamelModel):
    status: ReviewStatus
    remarks: Optional[str] = None


class BatchFailure(CamelModel):
    task_id: UUID
    message: str


class BatchReviewResponse(CamelModel):
    message: str
    count: int
    failed: List[BatchFailure] = Field(default_factory=list)


# -------------------------------------------------------------------
# ASSIGNMENTS
# -------------------------------------------------------------------
class TaskDeadline(CamelModel):
    template_id: int
    deadline: Optional[str] = None


class AssignmentCreate(CamelModel):
    subject_id: int
    faculty_id: UUID
    class_id: int
    task_deadlines: List[TaskDeadline] = Field(default_factory=list)


class AssignmentRead(CamelModel):
    id: UUID
    faculty_id: UUID
    subject_id: int
    class_id: int
    created_at: datetime


class AssignmentSummary(AssignmentRead):
    subject_name: str
    faculty_name: str
    completed_tasks: int


class AssignmentCreated(CamelModel):
    message: str
    assignment: AssignmentRead


# -------------------------------------------------------------------
# TEMPLATES
# -------------------------------------------------------------------
class TemplateCreate(CamelModel):
    title: str
    description: Optional[str] = None
    order: int = 0


class TemplateUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None


class TemplateRead(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    order: int
    is_active: bool


# -------------------------------------------------------------------
# COMPLIANCE
# -------------------------------------------------------------------
class CountPercent(CamelModel):
    count: int
    percent: int


class ComplianceSummary(CamelModel):
    department_id: int
    department_name: str
    total_assignments: int
    total_tasks: int
    completed_tasks: CountPercent
    cc_reviewed_tasks: CountPercent
    hod_reviewed_tasks: CountPercent


class HodAssignmentRow(CamelModel):
    assignment_id: UUID
    faculty_id: UUID
    faculty_name: str
    class_id: int
    class_name: str
    total_tasks: int
    completed_tasks: int


class HodSubjectAssignments(CamelModel):
    subject_id: int
    subject_name: str
    assignments: List[HodAssignmentRow]

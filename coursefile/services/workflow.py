# coursefile/services/workflow.py
"""
Course-file task transitions.

Each function takes the current task record and the actor's capabilities
and returns a Transition describing the field patch and the log action.
Nothing here touches the database or mutates the task: callers apply the
patch only after the function returned without raising.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import TypeAdapter, ValidationError

from coursefile.core.exceptions import Forbidden, InvalidInput, InvalidState, Locked
from coursefile.models.course_file import CourseFileTask
from coursefile.models.enums import LogAction, ReviewStatus, TaskStatus
from coursefile.services.approval import is_returned
from coursefile.services.capabilities import Capabilities


@dataclass
class Transition:
    action: LogAction
    patch: Dict[str, Any] = field(default_factory=dict)
    remarks: Optional[str] = None


# Applied whenever a task leaves or re-enters the review pipeline
REVIEW_RESET: Dict[str, Any] = {
    "cc_status": ReviewStatus.PENDING,
    "cc_remarks": None,
    "cc_review_date": None,
    "hod_status": ReviewStatus.PENDING,
    "hod_remarks": None,
    "hod_review_date": None,
}


def _clean(remarks: Optional[str]) -> Optional[str]:
    if remarks is None:
        return None
    remarks = remarks.strip()
    return remarks or None


# ------------------------------------------------------------
# FACULTY
# ------------------------------------------------------------
def complete(task: CourseFileTask, caps: Capabilities, now: datetime) -> Transition:
    if not caps.is_task_owner:
        raise Forbidden("Only the assigned faculty can complete this task")

    returned = is_returned(task)
    if task.status == TaskStatus.COMPLETED and not returned:
        raise InvalidState("Task is already completed")

    patch = {"status": TaskStatus.COMPLETED, "completed_at": now, **REVIEW_RESET}
    action = LogAction.TASK_RESUBMITTED if returned else LogAction.TASK_COMPLETED
    return Transition(action=action, patch=patch)


def revert(task: CourseFileTask, caps: Capabilities) -> Transition:
    if not (caps.is_task_owner or caps.is_reviewer):
        raise Forbidden("You are not allowed to revert this task")

    if task.status != TaskStatus.COMPLETED:
        raise InvalidState("Only completed tasks can be reverted")

    if is_returned(task):
        raise InvalidState("Task was returned for changes; resubmit it instead")

    if task.hod_status != ReviewStatus.PENDING and not caps.holds_override_role:
        raise Locked("Task has already been reviewed by the HOD and cannot be reverted")

    patch = {"status": TaskStatus.PENDING, "completed_at": None, **REVIEW_RESET}
    return Transition(action=LogAction.TASK_REVERTED, patch=patch)


# ------------------------------------------------------------
# REVIEWERS
# ------------------------------------------------------------
def review_as_cc(
    task: CourseFileTask,
    caps: Capabilities,
    status: ReviewStatus,
    remarks: Optional[str],
    now: datetime,
) -> Transition:
    if not caps.can_review_as_cc:
        raise Forbidden("You are not the CC for this class")

    remarks = _clean(remarks)

    # Same status as stored: remarks-only save, review date untouched
    if status == task.cc_status:
        return Transition(
            action=LogAction.CC_REMARKS_UPDATED,
            patch={"cc_remarks": remarks},
            remarks=remarks,
        )

    if status != ReviewStatus.PENDING and task.status != TaskStatus.COMPLETED:
        raise InvalidState("Task has not been completed by the faculty yet")

    if task.hod_status != ReviewStatus.PENDING:
        raise InvalidState("HOD has already reviewed this task")

    if status == ReviewStatus.PENDING:
        action = LogAction.CC_RESET
        review_date = None
    else:
        action = LogAction.CC_APPROVED if status == ReviewStatus.YES else LogAction.CC_REJECTED
        review_date = now

    return Transition(
        action=action,
        patch={"cc_status": status, "cc_remarks": remarks, "cc_review_date": review_date},
        remarks=remarks,
    )


def review_as_hod(
    task: CourseFileTask,
    caps: Capabilities,
    status: ReviewStatus,
    remarks: Optional[str],
    now: datetime,
) -> Transition:
    if not caps.can_review_as_hod:
        raise Forbidden("You are not the HOD for this department")

    remarks = _clean(remarks)

    if status == task.hod_status:
        return Transition(
            action=LogAction.HOD_REMARKS_UPDATED,
            patch={"hod_remarks": remarks},
            remarks=remarks,
        )

    if status == ReviewStatus.PENDING:
        return Transition(
            action=LogAction.HOD_RESET,
            patch={"hod_status": status, "hod_remarks": remarks, "hod_review_date": None},
            remarks=remarks,
        )

    if task.status != TaskStatus.COMPLETED:
        raise InvalidState("Task has not been completed by the faculty yet")

    if task.cc_status != ReviewStatus.YES and not caps.self_review:
        raise InvalidState("CC must approve this task first")

    action = LogAction.HOD_APPROVED if status == ReviewStatus.YES else LogAction.HOD_REJECTED
    return Transition(
        action=action,
        patch={"hod_status": status, "hod_remarks": remarks, "hod_review_date": now},
        remarks=remarks,
    )


def review(
    task: CourseFileTask,
    caps: Capabilities,
    status: ReviewStatus,
    remarks: Optional[str],
    now: datetime,
) -> Transition:
    """Review as HOD when the actor heads the department, otherwise as CC."""
    if caps.can_review_as_hod:
        return review_as_hod(task, caps, status, remarks, now)
    if caps.can_review_as_cc:
        return review_as_cc(task, caps, status, remarks, now)
    raise Forbidden("Unauthorized role for review")


def update_remarks(task: CourseFileTask, caps: Capabilities, remarks: Optional[str]) -> Transition:
    remarks = _clean(remarks)
    if caps.can_review_as_hod:
        return Transition(LogAction.HOD_REMARKS_UPDATED, {"hod_remarks": remarks}, remarks)
    if caps.can_review_as_cc:
        return Transition(LogAction.CC_REMARKS_UPDATED, {"cc_remarks": remarks}, remarks)
    raise Forbidden("Only the CC or HOD can add remarks")


# ------------------------------------------------------------
# DEADLINE
# ------------------------------------------------------------
_DATE = TypeAdapter(date)
_DATETIME = TypeAdapter(datetime)


def parse_deadline(raw: Optional[str]) -> Optional[date]:
    """Accept YYYY-MM-DD or a full ISO timestamp (date part kept)."""
    if raw is None:
        return None
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidInput("Invalid deadline date format")

    raw = raw.strip()
    try:
        if len(raw) == 10:
            return _DATE.validate_python(raw)
        return _DATETIME.validate_python(raw).date()
    except ValidationError:
        raise InvalidInput("Invalid deadline date format")


def set_deadline(task: CourseFileTask, caps: Capabilities, raw: Optional[str]) -> Transition:
    if not caps.is_reviewer:
        raise Forbidden("Only the CC or HOD can change deadlines")

    deadline = parse_deadline(raw)
    return Transition(
        action=LogAction.DEADLINE_UPDATED,
        patch={"deadline": deadline},
        remarks=f"Deadline set to {deadline.isoformat()}" if deadline else "Deadline cleared",
    )

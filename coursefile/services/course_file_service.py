# coursefile/services/course_file_service.py

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import UUID

from loguru import logger
from sqlmodel import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from coursefile.core.exceptions import CourseFileError, Forbidden, InvalidInput
from coursefile.models.academic import ClassSection, Department
from coursefile.models.course_file import CourseFileAssignment, CourseFileTask
from coursefile.models.enums import ReviewStatus, TaskStatus
from coursefile.models.user import User, UserRole
from coursefile.services import workflow
from coursefile.services.audit_service import append_log, log_context
from coursefile.services.capabilities import Capabilities, resolve_capabilities
from coursefile.services.task_store import get_task, get_tasks_by_assignment, update_task


Decision = Callable[[CourseFileTask, Capabilities, datetime], workflow.Transition]


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _diff(task: CourseFileTask, patch: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "from": {key: _jsonable(getattr(task, key)) for key in patch},
        "to": {key: _jsonable(value) for key, value in patch.items()},
    }


async def _apply(
    session: AsyncSession,
    task: CourseFileTask,
    caps: Capabilities,
    decide: Decision,
    extra_details: Optional[Dict[str, Any]] = None,
) -> CourseFileTask:
    """Validate, patch and log one task inside the current transaction, then commit."""
    now = datetime.now(timezone.utc)
    transition = decide(task, caps, now)

    details = _diff(task, transition.patch)
    if extra_details:
        details.update(extra_details)

    context = await log_context(session, task)

    update_task(session, task, transition.patch)
    append_log(
        session,
        assignment_id=task.assignment_id,
        action=transition.action,
        actor=caps,
        remarks=transition.remarks,
        task_id=task.id,
        details=details,
        context=context,
    )
    await session.commit()

    logger.info(f"{transition.action.value}: task={task.id} by {caps.actor_name} ({caps.role.value})")
    return task


async def _transition(session: AsyncSession, user: User, task_id: UUID, decide: Decision) -> CourseFileTask:
    try:
        task = await get_task(session, task_id, for_update=True)
        caps = await resolve_capabilities(session, user, task.assignment_id)
        return await _apply(session, task, caps, decide)
    except CourseFileError:
        # release the row lock, nothing was written
        await session.rollback()
        raise


# ===================================================================
# READS
# ===================================================================
async def get_tasks_for_assignment(session: AsyncSession, user: User, assignment_id: UUID) -> List[CourseFileTask]:
    caps = await resolve_capabilities(session, user, assignment_id)
    if not (caps.is_task_owner or caps.is_reviewer or user.role == UserRole.ADMIN):
        raise Forbidden("You are not allowed to view this assignment")
    return await get_tasks_by_assignment(session, assignment_id)


async def get_faculty_tasks(session: AsyncSession, user: User) -> List[CourseFileTask]:
    result = await session.execute(
        select(CourseFileTask)
        .join(CourseFileAssignment, CourseFileAssignment.id == CourseFileTask.assignment_id)
        .where(CourseFileAssignment.faculty_id == user.id)
        .order_by(CourseFileTask.deadline.asc())
    )
    return list(result.scalars().all())


def is_reviewable_by(task: CourseFileTask, caps: Capabilities) -> bool:
    if task.status != TaskStatus.COMPLETED:
        return False
    if caps.can_review_as_hod:
        return task.hod_status == ReviewStatus.PENDING and (
            task.cc_status == ReviewStatus.YES or caps.self_review
        )
    if caps.can_review_as_cc:
        return task.cc_status == ReviewStatus.PENDING
    return False


async def get_reviewable_tasks(
    session: AsyncSession, user: User, assignment_id: UUID
) -> List[Tuple[CourseFileTask, bool]]:
    """Completed tasks of an assignment, flagged with whether the caller can act on them now."""
    caps = await resolve_capabilities(session, user, assignment_id)
    if not caps.is_reviewer:
        raise Forbidden("Not authorized to review this assignment")

    tasks = await get_tasks_by_assignment(session, assignment_id)
    return [(t, is_reviewable_by(t, caps)) for t in tasks if t.status == TaskStatus.COMPLETED]


async def get_compliance_alerts(session: AsyncSession, user: User) -> List[CourseFileTask]:
    """PENDING tasks past their deadline, limited to the caller's classes or departments."""
    query = (
        select(CourseFileTask)
        .join(CourseFileAssignment, CourseFileAssignment.id == CourseFileTask.assignment_id)
        .join(ClassSection, ClassSection.id == CourseFileAssignment.class_id)
        .join(Department, Department.id == ClassSection.department_id)
        .where(CourseFileTask.status == TaskStatus.PENDING)
        .where(CourseFileTask.deadline < date.today())
        .order_by(CourseFileTask.deadline.asc())
    )

    if user.role == UserRole.HOD:
        query = query.where(Department.hod_id == user.id)
    elif user.role != UserRole.ADMIN:
        query = query.where(ClassSection.cc_id == user.id)

    result = await session.execute(query)
    return list(result.scalars().all())


def _percent(part: int, total: int) -> int:
    return round(part * 100 / total) if total else 0


async def get_compliance_summary(session: AsyncSession, user: User) -> List[Dict[str, Any]]:
    """Completion and review counts for every department the caller heads."""
    dept_res = await session.execute(select(Department).where(Department.hod_id == user.id))
    departments = dept_res.scalars().all()

    summaries = []
    for dept in departments:
        task_res = await session.execute(
            select(CourseFileTask)
            .join(CourseFileAssignment, CourseFileAssignment.id == CourseFileTask.assignment_id)
            .join(ClassSection, ClassSection.id == CourseFileAssignment.class_id)
            .where(ClassSection.department_id == dept.id)
        )
        tasks = task_res.scalars().all()

        assignment_res = await session.execute(
            select(CourseFileAssignment.id)
            .join(ClassSection, ClassSection.id == CourseFileAssignment.class_id)
            .where(ClassSection.department_id == dept.id)
        )

        total = len(tasks)
        completed = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)
        cc_reviewed = sum(1 for t in tasks if t.cc_status != ReviewStatus.PENDING)
        hod_reviewed = sum(1 for t in tasks if t.hod_status != ReviewStatus.PENDING)

        summaries.append({
            "department_id": dept.id,
            "department_name": dept.name,
            "total_assignments": len(assignment_res.all()),
            "total_tasks": total,
            "completed_tasks": {"count": completed, "percent": _percent(completed, total)},
            "cc_reviewed_tasks": {"count": cc_reviewed, "percent": _percent(cc_reviewed, total)},
            "hod_reviewed_tasks": {"count": hod_reviewed, "percent": _percent(hod_reviewed, total)},
        })

    return summaries


# ===================================================================
# TRANSITIONS
# ===================================================================
async def complete_task(session: AsyncSession, user: User, task_id: UUID) -> CourseFileTask:
    return await _transition(
        session, user, task_id,
        lambda task, caps, now: workflow.complete(task, caps, now),
    )


async def revert_task(session: AsyncSession, user: User, task_id: UUID) -> CourseFileTask:
    return await _transition(
        session, user, task_id,
        lambda task, caps, now: workflow.revert(task, caps),
    )


async def review_task(
    session: AsyncSession, user: User, task_id: UUID, status: ReviewStatus, remarks: Optional[str]
) -> CourseFileTask:
    return await _transition(
        session, user, task_id,
        lambda task, caps, now: workflow.review(task, caps, status, remarks, now),
    )


async def update_task_remarks(session: AsyncSession, user: User, task_id: UUID, remarks: Optional[str]) -> CourseFileTask:
    return await _transition(
        session, user, task_id,
        lambda task, caps, now: workflow.update_remarks(task, caps, remarks),
    )


async def update_task_deadline(session: AsyncSession, user: User, task_id: UUID, deadline: Optional[str]) -> CourseFileTask:
    return await _transition(
        session, user, task_id,
        lambda task, caps, now: workflow.set_deadline(task, caps, deadline),
    )


# ===================================================================
# BATCH REVIEW (HOD)
# ===================================================================
@dataclass
class BatchResult:
    count: int = 0
    failed: List[Dict[str, Any]] = field(default_factory=list)


def _batch_eligible(task: CourseFileTask) -> bool:
    return (
        task.status == TaskStatus.COMPLETED
        and task.cc_status == ReviewStatus.YES
        and task.hod_status == ReviewStatus.PENDING
    )


async def batch_review_tasks(
    session: AsyncSession,
    user: User,
    assignment_id: UUID,
    status: ReviewStatus,
    remarks: Optional[str],
) -> BatchResult:
    """
    Apply one HOD decision to every CC-approved task still waiting for the HOD.
    Each task commits on its own together with its log entry; a failing task is
    rolled back and reported while the rest still apply.
    """
    if status == ReviewStatus.PENDING:
        raise InvalidInput("Batch review status must be YES or NO")

    caps = await resolve_capabilities(session, user, assignment_id)
    if not caps.can_review_as_hod:
        raise Forbidden("Only the HOD of this department can batch review")

    candidates = [t.id for t in await get_tasks_by_assignment(session, assignment_id) if _batch_eligible(t)]
    result = BatchResult()

    for task_id in candidates:
        try:
            task = await get_task(session, task_id, for_update=True)
            if not _batch_eligible(task):
                # changed by someone else since the candidate list was read
                await session.rollback()
                continue

            await _apply(
                session, task, caps,
                lambda t, c, now: workflow.review_as_hod(t, c, status, remarks, now),
                extra_details={"batch": True},
            )
            result.count += 1
        except CourseFileError as e:
            await session.rollback()
            logger.warning(f"Batch review skipped task {task_id}: {e.message}")
            result.failed.append({"task_id": task_id, "message": e.message})
        except SQLAlchemyError:
            await session.rollback()
            logger.exception(f"Batch review failed on task {task_id}")
            result.failed.append({"task_id": task_id, "message": "Failed to update task"})

    logger.info(
        f"Batch review on assignment {assignment_id}: {result.count} applied, {len(result.failed)} failed"
    )
    return result

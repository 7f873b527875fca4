# coursefile/services/audit_service.py

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlmodel import select
from sqlalchemy import delete, func
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from coursefile.core.exceptions import Forbidden
from coursefile.models.academic import ClassSection, Department, Subject
from coursefile.models.audit import CourseFileLog
from coursefile.models.course_file import CourseFileAssignment, CourseFileTask, CourseFileTemplate
from coursefile.models.enums import LogAction
from coursefile.models.user import User
from coursefile.services.capabilities import Capabilities, resolve_capabilities


# Past-tense phrase per action, completed with the task title
ACTION_PHRASES: Dict[LogAction, str] = {
    LogAction.TASK_COMPLETED: "marked '{task}' as completed",
    LogAction.TASK_RESUBMITTED: "resubmitted '{task}'",
    LogAction.TASK_REVERTED: "reverted '{task}' to pending",
    LogAction.CC_APPROVED: "approved '{task}' as CC",
    LogAction.CC_REJECTED: "returned '{task}' as CC",
    LogAction.CC_RESET: "reset the CC review of '{task}'",
    LogAction.HOD_APPROVED: "approved '{task}' as HOD",
    LogAction.HOD_REJECTED: "returned '{task}' as HOD",
    LogAction.HOD_RESET: "reset the HOD review of '{task}'",
    LogAction.CC_REMARKS_UPDATED: "updated CC remarks on '{task}'",
    LogAction.HOD_REMARKS_UPDATED: "updated HOD remarks on '{task}'",
    LogAction.DEADLINE_UPDATED: "changed the deadline of '{task}'",
}


async def log_context(session: AsyncSession, task: CourseFileTask) -> Dict[str, Optional[str]]:
    """Task, subject and class names as they are now, frozen into the entry."""
    template = await session.get(CourseFileTemplate, task.template_id)
    assignment = await session.get(CourseFileAssignment, task.assignment_id)
    subject = await session.get(Subject, assignment.subject_id) if assignment else None
    class_section = await session.get(ClassSection, assignment.class_id) if assignment else None

    return {
        "task_title": template.title if template else None,
        "subject_name": subject.name if subject else None,
        "class_name": class_section.name if class_section else None,
    }


def describe(action: LogAction, actor_name: str, context: Dict[str, Optional[str]]) -> str:
    phrase = ACTION_PHRASES.get(action, action.value.lower().replace("_", " "))
    message = f"{actor_name} " + phrase.format(task=context.get("task_title") or "a task")

    subject, class_name = context.get("subject_name"), context.get("class_name")
    if subject and class_name:
        message += f" for {subject} ({class_name})"
    elif subject:
        message += f" for {subject}"
    return message


def append_log(
    session: AsyncSession,
    assignment_id: UUID,
    action: LogAction | str,
    actor: Capabilities,
    remarks: Optional[str] = None,
    task_id: Optional[UUID] = None,
    details: Optional[Dict[str, Any]] = None,
    context: Optional[Dict[str, Optional[str]]] = None,
) -> CourseFileLog:
    """
    Adds a log entry to the caller's session.
    The entry commits (or rolls back) together with the task change it records.
    """
    action = LogAction(action)
    context = context or {}

    entry = CourseFileLog(
        assignment_id=assignment_id,
        task_id=task_id,
        action=action.value,
        message=describe(action, actor.actor_name, context),
        created_by=actor.actor_id,
        actor_name=actor.actor_name,
        actor_role=actor.role.value,
        task_title=context.get("task_title"),
        subject_name=context.get("subject_name"),
        class_name=context.get("class_name"),
        remarks=remarks,
        details=details or {},
    )
    session.add(entry)
    return entry


async def list_logs(session: AsyncSession, assignment_id: UUID) -> List[CourseFileLog]:
    """Entries of one assignment, newest first."""
    result = await session.execute(
        select(CourseFileLog)
        .where(CourseFileLog.assignment_id == assignment_id)
        .order_by(CourseFileLog.created_at.desc(), CourseFileLog.id.desc())
    )
    return list(result.scalars().all())


async def list_recent_logs(session: AsyncSession, hod_id: UUID, limit: int = 100) -> List[CourseFileLog]:
    """Newest entries across every assignment of the departments an HOD heads."""
    result = await session.execute(
        select(CourseFileLog)
        .join(CourseFileAssignment, CourseFileAssignment.id == CourseFileLog.assignment_id)
        .join(ClassSection, ClassSection.id == CourseFileAssignment.class_id)
        .join(Department, Department.id == ClassSection.department_id)
        .where(Department.hod_id == hod_id)
        .order_by(CourseFileLog.created_at.desc(), CourseFileLog.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def clear_logs(session: AsyncSession, assignment_id: UUID) -> int:
    """Deletes every entry of one assignment. Irreversible."""
    count_res = await session.execute(
        select(func.count()).select_from(CourseFileLog).where(CourseFileLog.assignment_id == assignment_id)
    )
    count = count_res.scalar_one()

    await session.execute(delete(CourseFileLog).where(CourseFileLog.assignment_id == assignment_id))
    await session.commit()
    return count


# ------------------------------------------------------------
# Scoped entry points used by the API
# ------------------------------------------------------------
async def get_assignment_log(session: AsyncSession, user: User, assignment_id: UUID) -> List[CourseFileLog]:
    caps = await resolve_capabilities(session, user, assignment_id)
    if not (caps.is_reviewer or caps.is_task_owner):
        raise Forbidden("Not authorized to view logs for this assignment")
    return await list_logs(session, assignment_id)


async def clear_assignment_log(session: AsyncSession, user: User, assignment_id: UUID) -> int:
    caps = await resolve_capabilities(session, user, assignment_id)
    if not caps.can_review_as_hod:
        raise Forbidden("Only the HOD of this department can clear logs")

    count = await clear_logs(session, assignment_id)
    logger.warning(f"{count} log entries of assignment {assignment_id} cleared by {user.name}")
    return count

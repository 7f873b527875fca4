# coursefile/services/assignment_service.py

from datetime import date, timedelta
from typing import Dict, List, Optional
from uuid import UUID

from loguru import logger
from sqlmodel import select
from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coursefile.core.config import settings
from coursefile.core.exceptions import Conflict, Forbidden, InvalidInput, NotFound
from coursefile.models.academic import ClassSection, Department, Subject
from coursefile.models.audit import CourseFileLog
from coursefile.models.course_file import CourseFileAssignment, CourseFileTask, CourseFileTemplate
from coursefile.models.enums import TaskStatus
from coursefile.models.user import User, UserRole
from coursefile.services.workflow import parse_deadline


async def _can_manage_class(session: AsyncSession, user: User, class_section: ClassSection) -> bool:
    if user.role == UserRole.ADMIN or class_section.cc_id == user.id:
        return True
    department = await session.get(Department, class_section.department_id)
    return bool(department and department.hod_id == user.id)


async def create_assignment(
    session: AsyncSession,
    user: User,
    subject_id: int,
    faculty_id: UUID,
    class_id: int,
    task_deadlines: Optional[Dict[int, Optional[str]]] = None,
) -> CourseFileAssignment:
    """
    Assign a faculty member to a subject of a class and create one
    PENDING task for every active template.
    task_deadlines maps template id -> ISO date; the rest get the default.
    """
    class_section = await session.get(ClassSection, class_id)
    if not class_section:
        raise NotFound("Class not found")

    if not await _can_manage_class(session, user, class_section):
        raise Forbidden("You are not the Class Coordinator for this class")

    subject = await session.get(Subject, subject_id)
    if not subject:
        raise NotFound("Subject not found")
    if subject.class_id != class_id:
        raise InvalidInput("Subject does not belong to this class")

    faculty = await session.get(User, faculty_id)
    if not faculty or faculty.role == UserRole.ADMIN:
        raise NotFound("Faculty not found")

    # parse everything before writing anything
    custom = {tid: parse_deadline(raw) for tid, raw in (task_deadlines or {}).items()}
    default_deadline = date.today() + timedelta(days=settings.DEFAULT_TASK_DEADLINE_DAYS)

    templates_res = await session.execute(
        select(CourseFileTemplate)
        .where(CourseFileTemplate.is_active == True)  # noqa: E712
        .order_by(CourseFileTemplate.order.asc())
    )
    templates = templates_res.scalars().all()

    assignment = CourseFileAssignment(subject_id=subject_id, faculty_id=faculty_id, class_id=class_id)
    session.add(assignment)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise Conflict("Faculty already assigned to this subject in this class")

    for template in templates:
        session.add(CourseFileTask(
            assignment_id=assignment.id,
            template_id=template.id,
            deadline=custom.get(template.id) or default_deadline,
        ))

    await session.commit()
    await session.refresh(assignment)

    logger.info(f"Assignment {assignment.id} created with {len(templates)} tasks")
    return assignment


async def list_class_assignments(session: AsyncSession, class_id: int) -> List[Dict]:
    """Assignments of a class with their completed-task counts."""
    completed = (
        select(func.count(CourseFileTask.id))
        .where(CourseFileTask.assignment_id == CourseFileAssignment.id)
        .where(CourseFileTask.status == TaskStatus.COMPLETED)
        .correlate(CourseFileAssignment)
        .scalar_subquery()
    )
    result = await session.execute(
        select(CourseFileAssignment, Subject.name, User.name, completed)
        .join(Subject, Subject.id == CourseFileAssignment.subject_id)
        .join(User, User.id == CourseFileAssignment.faculty_id)
        .where(CourseFileAssignment.class_id == class_id)
        .order_by(CourseFileAssignment.created_at.asc())
    )

    return [
        {
            "id": assignment.id,
            "subject_id": assignment.subject_id,
            "subject_name": subject_name,
            "faculty_id": assignment.faculty_id,
            "faculty_name": faculty_name,
            "class_id": assignment.class_id,
            "completed_tasks": completed_count,
            "created_at": assignment.created_at,
        }
        for assignment, subject_name, faculty_name, completed_count in result.all()
    ]


async def delete_assignment(session: AsyncSession, user: User, assignment_id: UUID) -> None:
    """Removes the assignment together with its tasks and log entries."""
    assignment = await session.get(CourseFileAssignment, assignment_id)
    if not assignment:
        raise NotFound("Assignment not found")

    class_section = await session.get(ClassSection, assignment.class_id)
    if not class_section or not await _can_manage_class(session, user, class_section):
        raise Forbidden("You are not allowed to delete this assignment")

    await session.execute(delete(CourseFileLog).where(CourseFileLog.assignment_id == assignment_id))
    await session.execute(delete(CourseFileTask).where(CourseFileTask.assignment_id == assignment_id))
    await session.delete(assignment)
    await session.commit()

    logger.info(f"Assignment {assignment_id} deleted by {user.name}")


async def list_department_assignments(session: AsyncSession, hod: User) -> List[Dict]:
    """
    Every assignment in the departments an HOD heads, grouped by subject,
    with task totals so the HOD can pick what to review.
    """
    def task_count(*conditions):
        return (
            select(func.count(CourseFileTask.id))
            .where(CourseFileTask.assignment_id == CourseFileAssignment.id, *conditions)
            .correlate(CourseFileAssignment)
            .scalar_subquery()
        )

    result = await session.execute(
        select(
            CourseFileAssignment,
            Subject,
            ClassSection.name,
            User.name,
            task_count(),
            task_count(CourseFileTask.status == TaskStatus.COMPLETED),
        )
        .join(Subject, Subject.id == CourseFileAssignment.subject_id)
        .join(ClassSection, ClassSection.id == CourseFileAssignment.class_id)
        .join(Department, Department.id == ClassSection.department_id)
        .join(User, User.id == CourseFileAssignment.faculty_id)
        .where(Department.hod_id == hod.id)
        .order_by(Subject.name.asc(), ClassSection.name.asc(), User.name.asc())
    )

    subjects: Dict[int, Dict] = {}
    for assignment, subject, class_name, faculty_name, total, completed in result.all():
        group = subjects.setdefault(subject.id, {
            "subject_id": subject.id,
            "subject_name": subject.name,
            "assignments": [],
        })
        group["assignments"].append({
            "assignment_id": assignment.id,
            "faculty_id": assignment.faculty_id,
            "faculty_name": faculty_name,
            "class_id": assignment.class_id,
            "class_name": class_name,
            "total_tasks": total,
            "completed_tasks": completed,
        })

    return list(subjects.values())

# coursefile/services/task_store.py

from typing import Any, Dict, List
from uuid import UUID

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from coursefile.core.exceptions import NotFound
from coursefile.models.course_file import CourseFileTask, utcnow


async def get_task(session: AsyncSession, task_id: UUID, for_update: bool = False) -> CourseFileTask:
    """
    Fetch one task. With for_update the row stays locked until the
    surrounding transaction commits or rolls back.
    """
    query = select(CourseFileTask).where(CourseFileTask.id == task_id)
    if for_update:
        query = query.with_for_update()
        # bypass the identity map so the locked read returns fresh values
        query = query.execution_options(populate_existing=True)

    result = await session.execute(query)
    task = result.scalar_one_or_none()
    if not task:
        raise NotFound("Task not found")
    return task


async def get_tasks_by_assignment(session: AsyncSession, assignment_id: UUID) -> List[CourseFileTask]:
    result = await session.execute(
        select(CourseFileTask)
        .where(CourseFileTask.assignment_id == assignment_id)
        .order_by(CourseFileTask.deadline.asc(), CourseFileTask.template_id.asc())
    )
    return list(result.scalars().all())


def update_task(session: AsyncSession, task: CourseFileTask, patch: Dict[str, Any]) -> CourseFileTask:
    for key, value in patch.items():
        setattr(task, key, value)
    task.updated_at = utcnow()
    session.add(task)
    # Note: No commit here, the caller commits together with the log entry
    return task

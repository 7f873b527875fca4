# coursefile/services/template_service.py

from typing import Any, Dict, List

from sqlmodel import select
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from coursefile.core.exceptions import Conflict, NotFound
from coursefile.models.course_file import CourseFileTask, CourseFileTemplate


async def create_template(session: AsyncSession, title: str, description: str | None, order: int) -> CourseFileTemplate:
    template = CourseFileTemplate(title=title, description=description, order=order)
    session.add(template)
    await session.commit()
    await session.refresh(template)
    return template


async def list_active_templates(session: AsyncSession) -> List[CourseFileTemplate]:
    result = await session.execute(
        select(CourseFileTemplate)
        .where(CourseFileTemplate.is_active == True)  # noqa: E712
        .order_by(CourseFileTemplate.order.asc())
    )
    return list(result.scalars().all())


async def update_template(session: AsyncSession, template_id: int, changes: Dict[str, Any]) -> CourseFileTemplate:
    template = await session.get(CourseFileTemplate, template_id)
    if not template:
        raise NotFound("Task template not found")

    for key, value in changes.items():
        setattr(template, key, value)

    session.add(template)
    await session.commit()
    await session.refresh(template)
    return template


async def delete_template(session: AsyncSession, template_id: int) -> None:
    template = await session.get(CourseFileTemplate, template_id)
    if not template:
        raise NotFound("Task template not found")

    in_use = await session.execute(
        select(func.count(CourseFileTask.id)).where(CourseFileTask.template_id == template_id)
    )
    if in_use.scalar_one():
        raise Conflict("Template is used by existing tasks; deactivate it instead")

    await session.delete(template)
    await session.commit()

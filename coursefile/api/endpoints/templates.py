# coursefile/api/endpoints/templates.py

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from coursefile.api.deps import get_db_session, get_current_user
from coursefile.core.rbac import require_hod
from coursefile.models.user import User
from coursefile.schemas.course_file import TemplateCreate, TemplateRead, TemplateUpdate
from coursefile.services import template_service

router = APIRouter(prefix="/api/course-file", tags=["Course File Templates"])


@router.post("/create", response_model=TemplateRead, status_code=status.HTTP_201_CREATED)
async def create_template_task(
    data: TemplateCreate,
    _: User = Depends(require_hod),
    session: AsyncSession = Depends(get_db_session),
):
    return await template_service.create_template(session, data.title, data.description, data.order)


@router.get("/list", response_model=List[TemplateRead])
async def get_template_tasks(
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await template_service.list_active_templates(session)


@router.patch("/{template_id}", response_model=TemplateRead)
async def update_template_task(
    template_id: int,
    data: TemplateUpdate,
    _: User = Depends(require_hod),
    session: AsyncSession = Depends(get_db_session),
):
    return await template_service.update_template(session, template_id, data.model_dump(exclude_unset=True))


@router.delete("/{template_id}")
async def delete_template_task(
    template_id: int,
    _: User = Depends(require_hod),
    session: AsyncSession = Depends(get_db_session),
):
    await template_service.delete_template(session, template_id)
    return {"message": "Task template deleted successfully"}

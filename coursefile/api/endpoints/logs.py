# coursefile/api/endpoints/logs.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from coursefile.api.deps import get_db_session
from coursefile.core.config import settings
from coursefile.core.rbac import require_hod, require_staff
from coursefile.models.user import User
from coursefile.schemas.audit import CourseFileLogRead
from coursefile.services.audit_service import (
    clear_assignment_log,
    get_assignment_log,
    list_recent_logs,
)

router = APIRouter(prefix="/api/course-file-log", tags=["Course File Activity Log"])


# -------------------------------------------------------------------
# DEPARTMENT ACTIVITY FEED (newest first)
# -------------------------------------------------------------------
@router.get("/list", response_model=List[CourseFileLogRead])
async def get_activity_logs(
    limit: int = Query(settings.ACTIVITY_LOG_LIMIT, ge=1, le=500),
    current_user: User = Depends(require_hod),
    session: AsyncSession = Depends(get_db_session),
):
    return await list_recent_logs(session, current_user.id, limit)


# -------------------------------------------------------------------
# ONE ASSIGNMENT (newest first)
# -------------------------------------------------------------------
@router.get("/assignment/{assignment_id}", response_model=List[CourseFileLogRead])
async def get_assignment_logs(
    assignment_id: UUID,
    current_user: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    return await get_assignment_log(session, current_user, assignment_id)


@router.delete("/assignment/{assignment_id}")
async def clear_assignment_logs(
    assignment_id: UUID,
    current_user: User = Depends(require_hod),
    session: AsyncSession = Depends(get_db_session),
):
    count = await clear_assignment_log(session, current_user, assignment_id)
    return {"message": "Activity logs cleared successfully", "count": count}

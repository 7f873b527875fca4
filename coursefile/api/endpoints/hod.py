# coursefile/api/endpoints/hod.py

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from coursefile.api.deps import get_db_session
from coursefile.core.rbac import require_hod
from coursefile.models.user import User
from coursefile.schemas.course_file import ComplianceSummary, HodSubjectAssignments
from coursefile.services.assignment_service import list_department_assignments
from coursefile.services.course_file_service import get_compliance_summary

router = APIRouter(prefix="/api/hod-course-file", tags=["HOD Course File"])


@router.get("/compliance-summary", response_model=List[ComplianceSummary])
async def compliance_summary(
    current_user: User = Depends(require_hod),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Completion, CC review and HOD review percentages for each
    department the caller heads.
    """
    return await get_compliance_summary(session, current_user)


@router.get("/assignments", response_model=List[HodSubjectAssignments])
async def department_assignments(
    current_user: User = Depends(require_hod),
    session: AsyncSession = Depends(get_db_session),
):
    return await list_department_assignments(session, current_user)

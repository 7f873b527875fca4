from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from coursefile.schemas.base import CamelModel


class CourseFileLogRead(CamelModel):
    id: int
    assignment_id: UUID
    task_id: Optional[UUID] = None
    action: str
    message: Optional[str] = None
    created_by: Optional[UUID] = None
    actor_name: Optional[str] = None
    actor_role: Optional[str] = None
    task_title: Optional[str] = None
    subject_name: Optional[str] = None
    class_name: Optional[str] = None
    remarks: Optional[str] = None
    details: Dict[str, Any] = {}
    created_at: datetime

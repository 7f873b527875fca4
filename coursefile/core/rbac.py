# coursefile/core/rbac.py

from fastapi import Depends, HTTPException, status
from coursefile.api.deps import get_current_user
from coursefile.models.user import User, UserRole


def AllowRoles(*allowed_roles: UserRole | str):
    """
    Route-level role gate. Accepts UserRole members or their names
    (any case); ADMIN passes every gate.

    Coarse check only: whether the caller owns the class, department or
    assignment is decided per request by the course-file capabilities.
    """
    allowed = {UserRole(str(getattr(r, "value", r)).upper()) for r in allowed_roles}

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role == UserRole.ADMIN or current_user.role in allowed:
            return current_user

        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access denied for role '{current_user.role.value}'",
        )

    return role_checker


require_admin = AllowRoles(UserRole.ADMIN)
require_hod = AllowRoles(UserRole.HOD)
# CC or HOD: assigning, deadlines, reviews
require_reviewer = AllowRoles(UserRole.CC, UserRole.HOD)
# anyone who can be on either side of a course file
require_staff = AllowRoles(UserRole.FACULTY, UserRole.CC, UserRole.HOD)

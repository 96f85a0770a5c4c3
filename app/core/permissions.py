"""Access policy shared by every router.

Row-level authorization is also enforced server side by the routers that call
these helpers; the functions themselves are pure so they can be unit tested
without a database.
"""
from typing import Optional, Union
from app.models.department import Department
from app.models.user_roles import AppRole

RoleLike = Union[AppRole, str, None]
DepartmentLike = Union[Department, str, None]


def _role_value(role: RoleLike) -> Optional[str]:
    if role is None:
        return None
    return role.value if isinstance(role, AppRole) else str(role)


def _department_value(department: DepartmentLike) -> Optional[str]:
    if department is None:
        return None
    return department.value if isinstance(department, Department) else str(department)


def is_admin(role: RoleLike) -> bool:
    return _role_value(role) == AppRole.ADMIN.value


def can_manage(role: RoleLike, user_department: DepartmentLike, target_department: DepartmentLike) -> bool:
    """Whether a user may add/edit/delete records owned by target_department.

    admin: any department. hod: only their own. staff: never.
    """
    role_value = _role_value(role)
    if role_value == AppRole.ADMIN.value:
        return True
    if role_value == AppRole.HOD.value:
        user_dept = _department_value(user_department)
        return user_dept is not None and user_dept == _department_value(target_department)
    return False


def can_add_items(role: RoleLike) -> bool:
    """Admins and HODs may open the add-item flows at all."""
    return _role_value(role) in (AppRole.ADMIN.value, AppRole.HOD.value)


def can_login(role: RoleLike, approved: bool) -> bool:
    # The bootstrap admin cannot approve itself
    return bool(approved) or is_admin(role)

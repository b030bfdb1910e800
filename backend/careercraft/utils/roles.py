from fastapi import Depends

from .dependencies import Principal, get_current_user
from .error_handlers import ForbiddenError, get_error_message


def require_roles(*allowed_roles: str):
    allowed = frozenset(allowed_roles)

    def check_role(user: Principal = Depends(get_current_user)) -> Principal:
        if user.role not in allowed:
            raise ForbiddenError(get_error_message("forbidden"))
        return user
    return check_role


student_only = require_roles("student")
employer_only = require_roles("employer")
admin_only = require_roles("admin")
account_only = require_roles("student", "employer")

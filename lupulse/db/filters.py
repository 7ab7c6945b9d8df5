from __future__ import annotations

from sqlalchemy import ColumnElement, or_, true

from lupulse.models.campus import Notice
from lupulse.security.context import IdentityContext

AUDIENCE_ALL = "All"


def notice_visibility_criteria(identity: IdentityContext) -> ColumnElement[bool]:
    """
    Which notices the caller may list.

    Admins and superadmins see everything. Everyone else sees a notice when
    either clause matches:
        targetAudience IN ("All", caller.userType)
        department     IN (caller.department)
    A caller without a department only ever matches on audience.
    """

    if identity.is_admin:
        return true()

    audiences = [AUDIENCE_ALL]
    if identity.user_type:
        audiences.append(identity.user_type)

    clauses = [Notice.target_audience.in_(audiences)]
    if identity.department:
        clauses.append(Notice.department.in_([identity.department]))

    return or_(*clauses)

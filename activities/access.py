"""
Access scope policy for faculty and admin actions.

Faculty may browse every student but may only see and review activities of
students in their own program category ("view all, approve own"). Admins
are unrestricted. The policy is state-free: every call derives the scope
from the acting user alone.
"""

import logging
from enum import Enum

from django.contrib.auth import get_user_model
from django.db.models import Q

from backend.exceptions import OutOfScope

logger = logging.getLogger(__name__)

User = get_user_model()


class Operation(str, Enum):
    VIEW_STUDENTS = 'view-students'
    VIEW_ACTIVITIES = 'view-activities'
    APPROVE_ACTIVITY = 'approve-activity'


# Matches no row. Used instead of dropping the filter so an empty scope stays empty.
NOTHING = Q(pk__in=[])
EVERYTHING = Q()


def _is_admin(user):
    return user.role == 'admin' or user.is_superuser


def scoped_students(category):
    return User.objects.filter(role='student', program_category=category)


def activity_filter(user, operation):
    """
    Build the Activity queryset filter for ``user`` performing ``operation``.

    Faculty without a program category keep unrestricted access; this is a
    backward-compatibility rule for accounts created before categories existed.
    """
    operation = Operation(operation)

    if _is_admin(user):
        return EVERYTHING

    if user.role == 'student':
        if operation == Operation.VIEW_ACTIVITIES:
            return Q(student_id=user.pk)
        return NOTHING

    if user.role != 'faculty':
        return NOTHING

    if operation == Operation.VIEW_STUDENTS:
        return EVERYTHING

    if not user.program_category:
        logger.debug(f"Faculty {user.pk} has no program category; activity scope is unrestricted")
        return EVERYTHING

    return Q(student__in=scoped_students(user.program_category).values('pk'))


def student_filter(user, operation=Operation.VIEW_STUDENTS):
    """Build the User queryset filter for the students ``user`` may see"""
    operation = Operation(operation)

    if _is_admin(user):
        return EVERYTHING

    if user.role == 'faculty':
        if operation == Operation.VIEW_STUDENTS or not user.program_category:
            return EVERYTHING
        return Q(program_category=user.program_category)

    if user.role == 'student' and operation == Operation.VIEW_STUDENTS:
        return EVERYTHING

    return NOTHING


def is_in_scope(user, operation, student):
    """Check a single owning student against the scope of ``user``"""
    operation = Operation(operation)

    if _is_admin(user):
        return True

    if user.role == 'student':
        return operation != Operation.APPROVE_ACTIVITY and (
            operation == Operation.VIEW_STUDENTS or student.pk == user.pk
        )

    if user.role != 'faculty':
        return False

    if operation == Operation.VIEW_STUDENTS or not user.program_category:
        return True

    return (
        student.role == 'student'
        and student.program_category == user.program_category
    )


def ensure_in_scope(user, operation, student):
    if not is_in_scope(user, operation, student):
        logger.warning(
            f"User {user.pk} ({user.role}) denied {Operation(operation).value} on student {student.pk}"
        )
        raise OutOfScope(
            'This activity belongs to a student outside your program category',
            operation=Operation(operation).value,
        )

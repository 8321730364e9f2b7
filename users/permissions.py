"""Role gates for the student, faculty and admin API surfaces"""

from rest_framework.permissions import BasePermission


class RolePermission(BasePermission):
    allowed_roles = ()
    message = 'You do not have permission to access this resource'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated or not user.is_active:
            return False
        if user.is_superuser:
            return True
        return user.role in self.allowed_roles


class IsStudent(RolePermission):
    allowed_roles = ('student',)
    message = 'Student access required'


class IsStudentOrAdmin(RolePermission):
    allowed_roles = ('student', 'admin')
    message = 'Student access required'


class IsFaculty(RolePermission):
    allowed_roles = ('faculty',)
    message = 'Faculty access required'


class IsFacultyOrAdmin(RolePermission):
    allowed_roles = ('faculty', 'admin')
    message = 'Faculty access required'


class IsAdmin(RolePermission):
    allowed_roles = ('admin',)
    message = 'Admin access required'

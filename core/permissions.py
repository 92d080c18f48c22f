# core/permissions.py

"""
CUSTOM PERMISSIONS

Reusable permission classes for API views.
Role values come from users.models.User.Role.
"""

from rest_framework.permissions import BasePermission


class IsCoach(BasePermission):
    """
    Permission check for coach users.
    """

    message = "Only coaches can access this resource."

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.role == "COACH"
        )


class IsMember(BasePermission):
    """
    Permission check for regular (member) users.
    """

    message = "Only members can access this resource."

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.role == "USER"
        )


class IsAdmin(BasePermission):
    message = "Only administrators can access this resource."

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            (request.user.role == "ADMIN" or request.user.is_staff)
        )


class IsOwnerOrAdmin(BasePermission):
    """
    Object owner or admin.

    Requires the view to call check_object_permissions().
    """

    message = "You do not have permission."

    def has_object_permission(self, request, view, obj):
        if request.user.role == "ADMIN":
            return True

        for attr in ("user", "coach", "buyer"):
            if hasattr(obj, attr):
                return getattr(obj, attr) == request.user

        return False


class IsProgramOwner(BasePermission):
    """
    Check if user owns the program (or the program the object hangs off).
    """

    message = "You do not have permission."

    def has_object_permission(self, request, view, obj):
        program = getattr(obj, "program", obj)
        return program.coach_id == request.user.id

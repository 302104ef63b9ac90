from rest_framework import permissions

from portal.exceptions import Forbidden


def caller_from(request):
    """Identity id and role of the authenticated caller, taken from the token."""
    if not request.user or not request.user.is_authenticated:
        return None
    role = request.auth.get('role') if request.auth is not None else None
    return {'id': str(request.user.id), 'role': role or 'student'}


class IsAdminRole(permissions.BasePermission):
    """
    Only callers whose token carries the admin role.
    Unauthenticated callers are left to the authentication classes.
    """
    message = 'Access denied. Admin only.'

    def has_permission(self, request, view):
        caller = caller_from(request)
        if caller is None:
            return False
        if caller['role'] != 'admin':
            raise Forbidden(self.message)
        return True

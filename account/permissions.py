# account/permissions.py
from rest_framework.permissions import BasePermission

from .models import Role


class HasRole(BasePermission):
    """
    DRF counterpart of a role gate. Usage::

        permission_classes = [IsAuthenticated, HasRole.of("driver")]
    """

    roles: tuple = ()
    message = "Forbidden"

    @classmethod
    def of(cls, *roles):
        return type(f"HasRole_{'_'.join(roles)}", (cls,), {"roles": roles})

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if Role.ADMIN in self.roles and user.is_superuser:
            return True
        prof = getattr(user, "userprofile", None)
        if prof is None:
            return False
        return not self.roles or prof.role in self.roles


IsAdmin = HasRole.of(Role.ADMIN)
IsDriver = HasRole.of(Role.DRIVER)
IsPumpStaff = HasRole.of(Role.PUMP_STAFF)

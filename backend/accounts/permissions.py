from rest_framework.permissions import BasePermission


class HasRole(BasePermission):
    """
    Allow access only to users whose role is listed in ``allowed_roles``.
    Superusers automatically pass.
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_superuser:
            return True
        return user.role in self.allowed_roles


class IsHostOrAdmin(HasRole):
    allowed_roles = {"HOST", "ADMIN"}

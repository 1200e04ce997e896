from rest_framework.permissions import BasePermission


class IsSuperAdmin(BasePermission):
    """Allows access only to users with the superadmin role (or Django superusers)"""
    message = 'Only super admins can perform this action.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_superadmin)


class IsDashboardUser(BasePermission):
    """Staff roles (super admin, admin, guest) may use the admin dashboard; customers may not"""
    message = 'You do not have access to the admin dashboard.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_staff or user.is_dashboard_user


class IsSuperAdminOrReadOnly(BasePermission):
    """Read access for dashboard users, writes for super admins"""
    message = 'Only super admins can modify this resource.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if request.method in ('GET', 'HEAD', 'OPTIONS'):
            return user.is_staff or user.is_dashboard_user
        return user.is_superadmin

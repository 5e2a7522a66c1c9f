"""
Role guards for the three account tables.

Each guard checks the role claim of the credential.  The doctor and patient
guards also confirm the account still exists, so a credential issued before
the account was deleted stops working immediately.  For admins the existence
check only logs unless ``STRICT_ADMIN_EXISTENCE_CHECK`` is enabled.
"""
import logging

from django.conf import settings
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission

from .models import Admin, Doctor, Patient

logger = logging.getLogger(__name__)


def _identity(request):
    user = getattr(request, "user", None)
    if user and user.is_authenticated:
        return user
    return None


class _RoleGuard(BasePermission):
    role = ''
    model = None
    message = 'Access denied'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = _identity(request)
        if user is None:
            return False
        if getattr(user, "role", None) != self.role:
            return False
        if not self.model.objects.filter(pk=user.id).exists():
            return self.on_missing_account(user)
        return True

    def on_missing_account(self, user) -> bool:
        raise PermissionDenied(f'{self.role.capitalize()} account no longer exists')


class IsAdminRole(_RoleGuard):
    """Allow access only to admins."""
    role = 'admin'
    model = Admin
    message = 'Access denied. Admin privileges required.'

    def on_missing_account(self, user) -> bool:
        if settings.STRICT_ADMIN_EXISTENCE_CHECK:
            return super().on_missing_account(user)
        logger.warning('admin credential for missing account id=%s accepted', user.id)
        return True


class IsDoctorRole(_RoleGuard):
    """Allow access only to doctors whose account still exists."""
    role = 'doctor'
    model = Doctor
    message = 'Access denied. Doctor privileges required.'


class IsPatientRole(_RoleGuard):
    """Allow access only to patients whose account still exists."""
    role = 'patient'
    model = Patient
    message = 'Access denied. Patient privileges required.'


class IsAdminOrDoctor(BasePermission):
    """Admins or doctors, with the same existence rules as the single-role guards."""
    message = 'Not authorized to access this data'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = _identity(request)
        if user is None:
            return False
        if user.role == 'admin':
            return IsAdminRole().has_permission(request, view)
        if user.role == 'doctor':
            return IsDoctorRole().has_permission(request, view)
        return False


def enforce(request, *guards) -> None:
    """Run guards inside a view that serves several methods with different rules."""
    for guard in guards:
        if not guard().has_permission(request, None):
            raise PermissionDenied(guard.message)

from .visitors import VisitorService
from .tenants import TenantService
from .security import SecurityService
from .notifications import NotificationService
from .roles import RoleService
from .identity_providers import IdentityProviderService
from .qr_code import QrCodeService
from .invitations import InvitationService
from .profile import ProfileService

visitor_service = VisitorService()
tenant_service = TenantService()
security_service = SecurityService()
notification_service = NotificationService()
role_service = RoleService()
identity_provider_service = IdentityProviderService()
qr_code_service = QrCodeService()
invitation_service = InvitationService()
profile_service = ProfileService()

__all__ = [
    "VisitorService",
    "TenantService",
    "SecurityService",
    "NotificationService",
    "RoleService",
    "IdentityProviderService",
    "QrCodeService",
    "InvitationService",
    "ProfileService",
    "visitor_service",
    "tenant_service",
    "security_service",
    "notification_service",
    "role_service",
    "identity_provider_service",
    "qr_code_service",
    "invitation_service",
    "profile_service",
]

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from enum import Enum


# ==================== Enums ====================

class UserRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    SECURITY = "security"
    RECEPTION = "reception"
    HOST = "host"
    APPROVER = "approver"


class VisitStatus(str, Enum):
    PRE_REGISTERED = "pre_registered"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"
    DENIED = "denied"


class BadgeType(str, Enum):
    PRINTED = "printed"
    CIV_PIV_I = "civ_piv_i"


class RecurrenceType(str, Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class InvitationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class ThreatLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertType(str, Enum):
    WATCHLIST_MATCH = "watchlist_match"
    SECURITY_BREACH = "security_breach"
    ACCESS_DENIED = "access_denied"
    EMERGENCY = "emergency"


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    LOGIN = "login"
    LOGOUT = "logout"
    ACCESS = "access"
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class ComplianceFlag(str, Enum):
    FICAM = "FICAM"
    FIPS_140 = "FIPS_140"
    HIPAA = "HIPAA"
    FERPA = "FERPA"


class NotificationType(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"


class NotificationStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    PENDING = "pending"


class IdentityProviderType(str, Enum):
    TRADITIONAL = "traditional"
    AZURE_AD = "azure_ad"
    AWS_COGNITO = "aws_cognito"
    OKTA = "okta"
    AUTH0 = "auth0"


# ==================== Base ====================

class APIModel(BaseModel):
    """REST payload; unknown backend fields are kept as-is"""

    class Config:
        from_attributes = True
        extra = "allow"
        populate_by_name = True


class Pagination(APIModel):
    page: int = 1
    limit: int = 20
    total: int = 0
    pages: int = 0


# ==================== Users & Tenants ====================

class User(APIModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    tenant_id: Optional[str] = None
    department: Optional[str] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class Tenant(APIModel):
    id: str
    name: str
    corporate_email_domain: Optional[str] = None
    tenant_prefix: Optional[str] = None
    is_active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    user_count: Optional[int] = None
    facility_count: Optional[int] = None
    email_provider: Optional[str] = None
    sms_provider: Optional[str] = None
    push_provider: Optional[str] = None
    custom_departments: List[str] = Field(default_factory=list)
    early_checkin_minutes: Optional[int] = None
    auto_checkout_time: Optional[str] = None
    auto_checkout_enabled: Optional[bool] = None
    grace_period_hours: Optional[int] = None
    civ_piv_i_issuance_enabled: Optional[bool] = None
    default_badge_type: Optional[BadgeType] = None


class TenantStats(APIModel):
    """Per-tenant counters; values are kept raw since the backend sends numeric strings"""
    tenant_id: Optional[str] = None
    user_stats: Dict[str, Any] = Field(default_factory=dict)
    facility_stats: Dict[str, Any] = Field(default_factory=dict)
    visitor_stats: Dict[str, Any] = Field(default_factory=dict)
    visit_stats: Dict[str, Any] = Field(default_factory=dict)
    audit_stats: Optional[Dict[str, Any]] = None
    daily_activity: Optional[List[Dict[str, Any]]] = None


class IdentityProvider(APIModel):
    id: Optional[str] = None
    tenant_id: str
    provider_type: IdentityProviderType
    config: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ==================== Visitors & Visits ====================

class Visitor(APIModel):
    id: str
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    id_number: Optional[str] = None
    id_type: Optional[str] = None
    photo_url: Optional[str] = None
    nationality: Optional[str] = None
    is_frequent_visitor: bool = False
    background_check_status: Optional[str] = None
    is_blacklisted: bool = False
    notes: Optional[str] = None
    tenant_id: Optional[str] = None
    created_at: Optional[str] = None


class Visit(APIModel):
    id: str
    visitor_id: Optional[str] = None
    host_id: Optional[str] = None
    facility_id: Optional[str] = None
    purpose: Optional[str] = None
    scheduled_date: str
    scheduled_start_time: Optional[str] = None
    scheduled_end_time: Optional[str] = None
    actual_check_in: Optional[str] = None
    actual_check_out: Optional[str] = None
    status: VisitStatus = VisitStatus.PRE_REGISTERED
    badge_id: Optional[str] = None
    visitor_count: int = 1
    escort_required: bool = False
    security_approval_required: bool = False
    check_in_location: Optional[str] = None
    check_out_location: Optional[str] = None
    tenant_id: Optional[str] = None

    # Joined columns returned by list endpoints
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    host_name: Optional[str] = None
    host_profile_id: Optional[str] = None
    facility_name: Optional[str] = None

    # Recurrence
    recurrence_type: Optional[RecurrenceType] = None
    recurrence_interval: Optional[int] = None
    recurrence_days_of_week: Optional[List[int]] = None
    recurrence_end_date: Optional[str] = None
    is_recurring_instance: bool = False
    original_visit_id: Optional[str] = None

    @property
    def visitor_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class Host(APIModel):
    id: str
    profile_id: Optional[str] = None
    facility_id: Optional[str] = None
    notification_preferences: Dict[str, Any] = Field(default_factory=dict)
    max_concurrent_visitors: Optional[int] = None
    is_available: bool = True
    tenant_id: Optional[str] = None
    profile: Optional[Dict[str, Any]] = None


class Facility(APIModel):
    id: str
    name: str
    address: Optional[str] = None
    security_level: Optional[str] = None
    max_visitors: Optional[int] = None
    operating_hours: Optional[Any] = None
    emergency_procedures: Optional[str] = None
    is_active: bool = True
    tenant_id: Optional[str] = None


class Badge(APIModel):
    id: str
    visit_id: Optional[str] = None
    badge_number: Optional[str] = None
    badge_type: Optional[BadgeType] = None
    issued_at: Optional[str] = None
    expires_at: Optional[str] = None
    access_zones: List[str] = Field(default_factory=list)
    qr_code_data: Optional[str] = None
    is_temporary: bool = True
    is_active: bool = True
    returned_at: Optional[str] = None
    reported_lost_at: Optional[str] = None


class Invitation(APIModel):
    id: str
    tenant_id: Optional[str] = None
    visitor_id: Optional[str] = None
    host_id: Optional[str] = None
    facility_id: Optional[str] = None
    purpose: Optional[str] = None
    scheduled_date: Optional[str] = None
    scheduled_start_time: Optional[str] = None
    scheduled_end_time: Optional[str] = None
    status: InvitationStatus = InvitationStatus.PENDING
    rejection_reason: Optional[str] = None
    visitor_count: int = 1
    escort_required: bool = False
    security_approval_required: bool = False
    recurrence_type: Optional[RecurrenceType] = None
    recurrence_interval: Optional[int] = None
    recurrence_days_of_week: Optional[List[int]] = None
    recurrence_end_date: Optional[str] = None

    visitor_first_name: Optional[str] = None
    visitor_last_name: Optional[str] = None
    visitor_email: Optional[str] = None
    visitor_company: Optional[str] = None
    host_name: Optional[str] = None
    facility_name: Optional[str] = None


# ==================== Security ====================

class WatchlistEntry(APIModel):
    id: str
    first_name: str
    last_name: str
    aliases: List[str] = Field(default_factory=list)
    id_numbers: List[str] = Field(default_factory=list)
    reason: Optional[str] = None
    threat_level: ThreatLevel = ThreatLevel.LOW
    source_agency: Optional[str] = None
    date_added: Optional[str] = None
    expiry_date: Optional[str] = None
    is_active: bool = True
    notes: Optional[str] = None


class AuditLog(APIModel):
    id: str
    user_id: Optional[str] = None
    action: str
    table_name: Optional[str] = None
    record_id: Optional[str] = None
    old_values: Optional[Any] = None
    new_values: Optional[Any] = None
    ip_address: Optional[str] = None
    facility_id: Optional[str] = None
    tenant_id: Optional[str] = None
    timestamp: str
    compliance_flags: List[str] = Field(default_factory=list)
    user: Optional[Dict[str, Any]] = None


class SecurityAlert(APIModel):
    id: str
    type: AlertType
    severity: ThreatLevel
    message: str
    visitor_id: Optional[str] = None
    visit_id: Optional[str] = None
    facility_id: Optional[str] = None
    resolved: bool = False
    resolved_by: Optional[str] = None
    resolved_at: Optional[str] = None
    created_at: Optional[str] = None


class EmergencyContact(APIModel):
    id: str
    facility_id: Optional[str] = None
    name: str
    title: Optional[str] = None
    phone_primary: str
    phone_secondary: Optional[str] = None
    email: Optional[str] = None
    contact_type: Optional[str] = None
    is_active: bool = True


# ==================== Notifications ====================

class NotificationTemplate(APIModel):
    id: str
    name: str
    type: NotificationType = NotificationType.EMAIL
    event: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    is_active: bool = True
    tenant_id: Optional[str] = None


class NotificationLog(APIModel):
    id: str
    type: Optional[NotificationType] = None
    recipient: Optional[str] = None
    status: NotificationStatus = NotificationStatus.PENDING
    event: Optional[str] = None
    error_message: Optional[str] = None
    sent_at: Optional[str] = None
    created_at: Optional[str] = None


# ==================== Roles ====================

class Permission(APIModel):
    id: str
    name: str
    description: Optional[str] = None
    resource: Optional[str] = None
    action: Optional[str] = None


class Role(APIModel):
    id: str
    tenant_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    is_system: bool = False
    permission_count: Optional[int] = None


class RoleWithPermissions(Role):
    permissions: List[Permission] = Field(default_factory=list)

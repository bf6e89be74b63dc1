"""
Per-feature UI state.

Each store wraps a service with the `loading` / `error` / `success`
bookkeeping a page needs, plus whatever data and pagination the page
renders. Pages keep one store per feature in `st.session_state`.
"""

import time
import logging
from typing import Optional, Dict, Any, List, Callable

from .config import settings
from .exceptions import ConsoleError
from .schemas import (
    Visit, Visitor, Facility, Host, Tenant, TenantStats, WatchlistEntry,
    SecurityAlert, AuditLog, NotificationTemplate, NotificationLog, Role,
    Permission, IdentityProvider, Invitation, Pagination
)
from .services import (
    VisitorService, TenantService, SecurityService, NotificationService,
    RoleService, IdentityProviderService, InvitationService,
    visitor_service, tenant_service, security_service, notification_service,
    role_service, identity_provider_service, invitation_service
)

logger = logging.getLogger(__name__)


class Store:
    """Shared loading/error/success state"""

    def __init__(self, message_timeout: float = settings.MESSAGE_TIMEOUT_SECONDS):
        self.loading = False
        self.error: Optional[str] = None
        self.success: Optional[str] = None
        self.error_set_at: Optional[float] = None
        self.success_set_at: Optional[float] = None
        self.message_timeout = message_timeout

    def set_error(self, message: Optional[str]) -> None:
        self.error = message
        self.error_set_at = time.monotonic() if message else None

    def set_success(self, message: Optional[str]) -> None:
        self.success = message
        self.success_set_at = time.monotonic() if message else None

    def clear_error(self) -> None:
        self.set_error(None)

    def clear_success(self) -> None:
        self.set_success(None)

    def expire_messages(self, now: Optional[float] = None) -> None:
        """Drop banners older than the message timeout"""
        now = time.monotonic() if now is None else now
        if self.error_set_at is not None and now - self.error_set_at >= self.message_timeout:
            self.clear_error()
        if self.success_set_at is not None and now - self.success_set_at >= self.message_timeout:
            self.clear_success()

    def run(self, fn: Callable, *args, **kwargs):
        """Call `fn` with loading set; record and re-raise any failure"""
        self.loading = True
        self.clear_error()
        try:
            return fn(*args, **kwargs)
        except ConsoleError as e:
            logger.warning(f"{type(self).__name__}.{getattr(fn, '__name__', fn)}: {e}")
            self.set_error(str(e))
            raise
        finally:
            self.loading = False


# ==================== Visits ====================

class VisitsStore(Store):

    def __init__(self, service: Optional[VisitorService] = None, **kwargs):
        super().__init__(**kwargs)
        self.service = service or visitor_service
        self.visits: List[Visit] = []
        self.visitors: List[Visitor] = []
        self.todays_visits: List[Visit] = []
        self.facilities: List[Facility] = []
        self.hosts: List[Host] = []
        self.pagination = Pagination()
        # facility the cached host list was loaded for; a 1-tuple once loaded
        self._hosts_key: Optional[tuple] = None

    def get_visits(
        self,
        facility_id: Optional[str] = None,
        date: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None
    ) -> List[Visit]:
        visits, pagination = self.run(
            self.service.get_visits, facility_id, date, page, limit, start_date, end_date
        )
        self.visits = visits
        self.pagination = pagination
        return visits

    def get_visitors(self, limit: int = 20, offset: int = 0) -> List[Visitor]:
        visitors, pagination = self.run(self.service.get_visitors, limit, offset)
        self.visitors = visitors
        self.pagination = pagination
        return visitors

    def load_todays_visits(self, facility_id: Optional[str] = None) -> List[Visit]:
        self.todays_visits = self.run(self.service.get_todays_visits, facility_id)
        return self.todays_visits

    def create_visit(self, visit_data: Dict[str, Any]) -> Visit:
        visit = self.run(self.service.create_visit, visit_data)
        self.set_success("Visit created")
        return visit

    def update_visit(self, visit_id: str, updates: Dict[str, Any]) -> Visit:
        visit = self.run(self.service.update_visit, visit_id, updates)
        self._replace_visit(visit)
        return visit

    def check_in(self, visit_id: str, location: Optional[str] = None) -> Visit:
        visit = self.run(self.service.check_in_visitor, visit_id, location)
        self._replace_visit(visit)
        self.set_success(f"{visit.visitor_name or 'Visitor'} checked in successfully")
        return visit

    def check_out(self, visit_id: str, location: Optional[str] = None) -> Visit:
        visit = self.run(self.service.check_out_visitor, visit_id, location)
        self._replace_visit(visit)
        self.set_success(f"{visit.visitor_name or 'Visitor'} checked out successfully")
        return visit

    def get_facilities(self) -> List[Facility]:
        self.facilities = self.run(self.service.get_facilities)
        return self.facilities

    def get_hosts(self, facility_id: Optional[str] = None) -> List[Host]:
        self.hosts = self.run(self.service.get_hosts, facility_id)
        self._hosts_key = (facility_id,)
        return self.hosts

    def hosts_for(self, facility_id: Optional[str] = None) -> List[Host]:
        """Cached host list, reloaded when the facility filter changes"""
        if self._hosts_key != (facility_id,):
            return self.get_hosts(facility_id)
        return self.hosts

    def export_calendar(self, filters: Optional[Dict[str, Any]] = None) -> bytes:
        return self.run(self.service.export_calendar, "ics", filters)

    def _replace_visit(self, updated: Visit) -> None:
        # keep joined columns (names, facility) the check-in response omits
        for collection in (self.visits, self.todays_visits):
            for i, visit in enumerate(collection):
                if visit.id == updated.id:
                    merged = visit.model_dump()
                    merged.update(updated.model_dump(exclude_unset=True))
                    collection[i] = Visit.model_validate(merged)


# ==================== Tenants ====================

class TenantStore(Store):

    def __init__(self, service: Optional[TenantService] = None, **kwargs):
        super().__init__(**kwargs)
        self.service = service or tenant_service
        self.tenants: List[Tenant] = []
        self.stats: Dict[str, TenantStats] = {}

    def get_tenants(self) -> List[Tenant]:
        self.tenants = self.run(self.service.get_tenants)
        return self.tenants

    def get_tenant(self, tenant_id: str) -> Tenant:
        return self.run(self.service.get_tenant, tenant_id)

    def create_tenant(self, tenant_data: Dict[str, Any]) -> Tenant:
        tenant = self.run(self.service.create_tenant, tenant_data)
        self.tenants.append(tenant)
        self.set_success(f"Tenant {tenant.name} created")
        return tenant

    def update_tenant(self, tenant_id: str, updates: Dict[str, Any]) -> Tenant:
        tenant = self.run(self.service.update_tenant, tenant_id, updates)
        self.tenants = [tenant if t.id == tenant_id else t for t in self.tenants]
        self.set_success(f"Tenant {tenant.name} updated")
        return tenant

    def deactivate_tenant(self, tenant_id: str) -> None:
        self.run(self.service.deactivate_tenant, tenant_id)
        for tenant in self.tenants:
            if tenant.id == tenant_id:
                tenant.is_active = False

    def get_tenant_stats(self, tenant_id: str) -> TenantStats:
        stats = self.run(self.service.get_tenant_stats, tenant_id)
        self.stats[tenant_id] = stats
        return stats


# ==================== Security ====================

class SecurityStore(Store):

    def __init__(self, service: Optional[SecurityService] = None, **kwargs):
        super().__init__(**kwargs)
        self.service = service or security_service
        self.watchlist: List[WatchlistEntry] = []
        self.alerts: List[SecurityAlert] = []
        self.audit_logs: List[AuditLog] = []
        self.screening_matches: List[WatchlistEntry] = []
        self.pagination = Pagination(limit=50)

    def get_watchlist(self) -> List[WatchlistEntry]:
        self.watchlist = self.run(self.service.get_watchlist)
        return self.watchlist

    def create_watchlist_entry(self, entry_data: Dict[str, Any]) -> WatchlistEntry:
        entry = self.run(self.service.create_watchlist_entry, entry_data)
        self.watchlist.append(entry)
        self.set_success("Watchlist entry added")
        return entry

    def update_watchlist_entry(self, entry_id: str, updates: Dict[str, Any]) -> WatchlistEntry:
        entry = self.run(self.service.update_watchlist_entry, entry_id, updates)
        self.watchlist = [entry if e.id == entry_id else e for e in self.watchlist]
        return entry

    def screen_visitor(self, visitor: Visitor) -> List[WatchlistEntry]:
        self.screening_matches = self.run(self.service.screen_visitor, visitor)
        return self.screening_matches

    def get_alerts(self, facility_id: Optional[str] = None) -> List[SecurityAlert]:
        self.alerts = self.run(self.service.get_active_security_alerts, facility_id)
        return self.alerts

    def resolve_alert(self, alert_id: str, notes: Optional[str] = None) -> SecurityAlert:
        alert = self.run(self.service.resolve_security_alert, alert_id, notes)
        self.alerts = [a for a in self.alerts if a.id != alert_id]
        self.set_success("Alert resolved")
        return alert

    def get_audit_logs(
        self,
        page: int = 1,
        limit: int = 50,
        filters: Optional[Dict[str, Any]] = None
    ) -> List[AuditLog]:
        logs, pagination = self.run(self.service.get_audit_logs_page, page, limit, filters)
        self.audit_logs = logs
        self.pagination = pagination
        return logs

    def export_audit_logs(self, filters: Optional[Dict[str, Any]] = None) -> bytes:
        return self.run(self.service.export_audit_logs, filters)


# ==================== Notifications ====================

class NotificationStore(Store):

    def __init__(self, service: Optional[NotificationService] = None, **kwargs):
        super().__init__(**kwargs)
        self.service = service or notification_service
        self.templates: List[NotificationTemplate] = []
        self.logs: List[NotificationLog] = []
        self.pagination = Pagination()

    def get_templates(self) -> List[NotificationTemplate]:
        self.templates = self.run(self.service.get_templates)
        return self.templates

    def create_template(self, template_data: Dict[str, Any]) -> NotificationTemplate:
        template = self.run(self.service.create_template, template_data)
        self.templates.append(template)
        return template

    def update_template(self, template_id: str, updates: Dict[str, Any]) -> NotificationTemplate:
        template = self.run(self.service.update_template, template_id, updates)
        self.templates = [template if t.id == template_id else t for t in self.templates]
        return template

    def delete_template(self, template_id: str) -> None:
        self.run(self.service.delete_template, template_id)
        self.templates = [t for t in self.templates if t.id != template_id]

    def get_logs(
        self,
        page: int = 1,
        limit: int = 20,
        filters: Optional[Dict[str, Any]] = None
    ) -> List[NotificationLog]:
        logs, pagination = self.run(self.service.get_notification_logs, page, limit, filters)
        self.logs = logs
        self.pagination = pagination
        return logs


# ==================== Roles ====================

class RoleStore(Store):

    def __init__(self, service: Optional[RoleService] = None, **kwargs):
        super().__init__(**kwargs)
        self.service = service or role_service
        self.roles: List[Role] = []
        self.permissions: List[Permission] = []

    def get_roles(self) -> List[Role]:
        self.roles = self.run(self.service.get_roles)
        return self.roles

    def get_permissions(self) -> List[Permission]:
        self.permissions = self.run(self.service.get_all_permissions)
        return self.permissions

    def create_role(self, role_data: Dict[str, Any]) -> Role:
        role = self.run(self.service.create_role, role_data)
        self.roles.append(role)
        return role

    def delete_role(self, role_id: str) -> None:
        self.run(self.service.delete_role, role_id)
        self.roles = [r for r in self.roles if r.id != role_id]

    def assign_permissions(self, role_id: str, permission_ids: List[str]):
        role = self.run(self.service.assign_permissions, role_id, permission_ids)
        self.set_success(f"Permissions updated for {role.name}")
        return role


# ==================== Identity providers ====================

class IdentityProviderStore(Store):

    def __init__(self, service: Optional[IdentityProviderService] = None, **kwargs):
        super().__init__(**kwargs)
        self.service = service or identity_provider_service
        self.providers: List[IdentityProvider] = []

    def get_providers(self, tenant_id: Optional[str] = None) -> List[IdentityProvider]:
        self.providers = self.run(self.service.get_identity_providers, tenant_id)
        return self.providers

    def create_provider(self, provider_data: Dict[str, Any]) -> IdentityProvider:
        provider = self.run(self.service.create_identity_provider, provider_data)
        self.providers.append(provider)
        return provider

    def update_provider(self, provider_id: str, updates: Dict[str, Any]) -> IdentityProvider:
        provider = self.run(self.service.update_identity_provider, provider_id, updates)
        self.providers = [provider if p.id == provider_id else p for p in self.providers]
        return provider

    def delete_provider(self, provider_id: str) -> None:
        self.run(self.service.delete_identity_provider, provider_id)
        self.providers = [p for p in self.providers if p.id != provider_id]

    def deactivate_provider(self, provider_id: str) -> IdentityProvider:
        provider = self.run(self.service.deactivate_identity_provider, provider_id)
        self.providers = [provider if p.id == provider_id else p for p in self.providers]
        return provider


# ==================== Invitations ====================

class InvitationStore(Store):

    def __init__(self, service: Optional[InvitationService] = None, **kwargs):
        super().__init__(**kwargs)
        self.service = service or invitation_service
        self.invitations: List[Invitation] = []

    def get_invitations(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> List[Invitation]:
        self.invitations = self.run(self.service.get_invitations, status, search, page, limit)
        return self.invitations

    def approve(self, invitation_id: str) -> Invitation:
        invitation = self.run(self.service.approve_invitation, invitation_id)
        self._replace(invitation)
        self.set_success("Invitation approved")
        return invitation

    def reject(self, invitation_id: str, reason: str) -> Invitation:
        invitation = self.run(self.service.reject_invitation, invitation_id, reason)
        self._replace(invitation)
        self.set_success("Invitation rejected")
        return invitation

    def cancel(self, invitation_id: str) -> Invitation:
        invitation = self.run(self.service.cancel_invitation, invitation_id)
        self._replace(invitation)
        return invitation

    def _replace(self, updated: Invitation) -> None:
        self.invitations = [updated if i.id == updated.id else i for i in self.invitations]

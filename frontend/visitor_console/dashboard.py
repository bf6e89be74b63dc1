"""
Dashboard data loading.

Dashboards fan out over independent backend calls and keep whatever
succeeds. Partial failures are logged; when the backend is unreachable
the super admin view is backfilled with mock data so the page still
renders.
"""

import re
import random
import logging
from dataclasses import dataclass
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any, Callable, Sequence

from .config import settings
from .exceptions import ConsoleError
from .mock_data import mock_tenants, mock_super_admin_stats, mock_activity, mock_system_alerts
from .permissions import SECURITY_VIEW_ROLES, has_any_role
from .schemas import Tenant, TenantStats, AuditLog, SecurityAlert, Visit, User, ComplianceFlag
from .services import (
    TenantService, SecurityService, VisitorService,
    tenant_service, security_service, visitor_service
)

logger = logging.getLogger(__name__)

FULFILLED = "fulfilled"
REJECTED = "rejected"

COMPLIANCE_DESCRIPTIONS = {
    ComplianceFlag.FICAM.value: ("FICAM", "Federal Identity, Credential, and Access Management"),
    ComplianceFlag.FIPS_140.value: ("FIPS 140", "Federal Information Processing Standards"),
    ComplianceFlag.HIPAA.value: ("HIPAA", "Health Insurance Portability and Accountability Act"),
    ComplianceFlag.FERPA.value: ("FERPA", "Family Educational Rights and Privacy Act"),
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass
class Settled:
    status: str
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.status == FULFILLED


def settle_all(calls: Sequence[Callable[[], Any]], max_workers: int = settings.MAX_PARALLEL_REQUESTS) -> List[Settled]:
    """
    Run every call concurrently and report each outcome in input order.
    A failing call never cancels the others.
    """
    if not calls:
        return []

    results: List[Settled] = []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(calls)))) as executor:
        futures = [executor.submit(call) for call in calls]
        for future in futures:
            try:
                results.append(Settled(FULFILLED, value=future.result()))
            except Exception as e:
                logger.warning(f"Parallel call failed: {e}")
                results.append(Settled(REJECTED, error=e))
    return results


def to_int(value: Any) -> int:
    """Lenient integer parse; anything unparseable counts as 0"""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ==================== Super admin ====================

def aggregate_tenant_stats(tenants: Sequence[Tenant], results: Sequence[Settled]) -> Dict[str, int]:
    """Totals across tenants, counting only stats calls that succeeded"""
    totals = {
        "total_tenants": len(tenants),
        "active_tenants": sum(1 for t in tenants if t.is_active),
        "total_users": 0,
        "total_facilities": 0,
        "total_visits": 0,
        "active_visits": 0,
        "total_visitors": 0,
    }

    seen = set()
    for tenant, result in zip(tenants, results):
        if not result.ok or tenant.id in seen:
            continue
        seen.add(tenant.id)
        stats: TenantStats = result.value
        totals["total_users"] += to_int(stats.user_stats.get("total_users"))
        totals["total_facilities"] += to_int(stats.facility_stats.get("total_facilities"))
        totals["total_visits"] += to_int(stats.visit_stats.get("total_visits"))
        totals["active_visits"] += to_int(stats.visit_stats.get("checked_in_visits"))
        totals["total_visitors"] += to_int(stats.visitor_stats.get("total_visitors"))

    return totals


def audit_log_to_activity(log: AuditLog, tenant_names: Dict[str, str]) -> Dict[str, Any]:
    user = log.user or {}
    return {
        "id": log.id,
        "action": log.action,
        "entity": log.table_name,
        "tenant": tenant_names.get(log.tenant_id) or log.tenant_id,
        "timestamp": log.timestamp,
        "user": user.get("full_name") or "System",
    }


def alert_to_row(alert: SecurityAlert) -> Dict[str, Any]:
    return {
        "id": alert.id,
        "type": getattr(alert.type, "value", alert.type),
        "message": alert.message,
        "severity": getattr(alert.severity, "value", alert.severity),
        "timestamp": alert.created_at,
    }


class SuperAdminDashboard:
    """Cross-tenant overview for super admins"""

    def __init__(
        self,
        tenants: Optional[TenantService] = None,
        security: Optional[SecurityService] = None,
        mock_fallback: bool = settings.MOCK_DATA_FALLBACK,
        rng: Optional[random.Random] = None
    ):
        self.tenant_service = tenants or tenant_service
        self.security_service = security or security_service
        self.mock_fallback = mock_fallback
        self.rng = rng
        self.loading = False
        self.error: Optional[str] = None
        self.tenants: List[Tenant] = []
        self.stats: Dict[str, int] = aggregate_tenant_stats([], [])
        self.recent_activity: List[Dict[str, Any]] = []
        self.system_alerts: List[Dict[str, Any]] = []
        self.using_mock_data = False

    def load(self) -> "SuperAdminDashboard":
        self.loading = True
        self.error = None
        self.using_mock_data = False
        try:
            tenants = self._unique(self.tenant_service.get_tenants())
            self.tenants = tenants

            results = settle_all([
                (lambda tid=t.id: self.tenant_service.get_tenant_stats(tid)) for t in tenants
            ])
            failed = sum(1 for r in results if not r.ok)
            if failed:
                logger.warning(f"Stats unavailable for {failed} of {len(tenants)} tenants")
            self.stats = aggregate_tenant_stats(tenants, results)

            self._load_activity_and_alerts()
        except ConsoleError as e:
            self.error = str(e) or "Failed to load dashboard data"
            logger.error(f"Failed to load dashboard data: {self.error}")
            if self.mock_fallback:
                self._use_mock_data()
        finally:
            self.loading = False
        return self

    def _load_activity_and_alerts(self) -> None:
        tenant_names = {t.id: t.name for t in self.tenants}
        try:
            logs = self.security_service.get_audit_logs(10, 0)
            self.recent_activity = [audit_log_to_activity(log, tenant_names) for log in logs]
            alerts = self.security_service.get_active_security_alerts()
            self.system_alerts = [alert_to_row(a) for a in alerts]
        except ConsoleError as e:
            logger.warning(f"Failed to load activity or alerts: {e}")
            if self.mock_fallback:
                self.recent_activity = mock_activity(self.tenants, rng=self.rng)
                self.system_alerts = mock_system_alerts(rng=self.rng)
                self.using_mock_data = True

    def _use_mock_data(self) -> None:
        if not self.tenants:
            self.tenants = mock_tenants(rng=self.rng)
        self.stats = mock_super_admin_stats(self.tenants, rng=self.rng)
        self.recent_activity = mock_activity(self.tenants, rng=self.rng)
        self.system_alerts = mock_system_alerts(rng=self.rng)
        self.using_mock_data = True

    @staticmethod
    def _unique(tenants: List[Tenant]) -> List[Tenant]:
        seen = set()
        unique = []
        for tenant in tenants:
            if tenant.id not in seen:
                seen.add(tenant.id)
                unique.append(tenant)
        return unique


# ==================== Tenant ====================

def summarize_audit_logs(logs: Sequence[AuditLog], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Counters the dashboard shows for a page of audit logs"""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    week_ago = now - timedelta(days=7)

    entries_today = 0
    entries_week = 0
    actions: Dict[str, int] = {}
    compliance: Dict[str, int] = {}
    users: Dict[str, Dict[str, Any]] = {}

    for log in logs:
        ts = _parse_timestamp(log.timestamp)
        if ts is not None:
            if ts.astimezone(now.tzinfo).date() == now.date():
                entries_today += 1
            if ts > week_ago:
                entries_week += 1

        actions[log.action] = actions.get(log.action, 0) + 1
        for flag in log.compliance_flags or []:
            compliance[flag] = compliance.get(flag, 0) + 1

        full_name = (log.user or {}).get("full_name")
        if full_name:
            entry = users.setdefault(full_name, {
                "full_name": full_name,
                "role": "user",
                "activity_count": 0,
                "last_activity": log.timestamp,
            })
            entry["activity_count"] += 1
            last = _parse_timestamp(entry["last_activity"])
            if ts is not None and (last is None or ts > last):
                entry["last_activity"] = log.timestamp

    return {
        "total_entries": len(logs),
        "entries_today": entries_today,
        "entries_week": entries_week,
        "unique_users": len({log.user_id for log in logs}),
        "actions": [{"action": a, "count": c} for a, c in actions.items()],
        "compliance": [{"flag": f, "count": c} for f, c in compliance.items()],
        "user_activity": list(users.values()),
    }


def compliance_metrics(audit_stats: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Per-standard compliance score: 100 when the flag appears in the audit trail"""
    compliance = (audit_stats or {}).get("compliance")
    metrics = []

    if isinstance(compliance, list):
        counts = {item.get("flag"): to_int(item.get("count")) for item in compliance}
        for flag, (name, description) in COMPLIANCE_DESCRIPTIONS.items():
            metrics.append({
                "name": name,
                "value": 100 if flag in counts else 0,
                "count": counts.get(flag, 0),
                "description": description,
            })
    else:
        # no audit data yet: show the baseline
        for name, description in COMPLIANCE_DESCRIPTIONS.values():
            metrics.append({"name": name, "value": 100, "count": 0, "description": description})

    return metrics


class TenantDashboard:
    """Per-tenant overview: visit stats, today's visits and, for security roles, alerts and audit data"""

    def __init__(
        self,
        user: Optional[User] = None,
        visitors: Optional[VisitorService] = None,
        security: Optional[SecurityService] = None
    ):
        self.user = user
        self.visitors = visitors or visitor_service
        self.security = security or security_service
        self.loading = False
        self.error: Optional[str] = None
        self.visit_stats: Dict[str, Any] = {}
        self.todays_visits: List[Visit] = []
        self.security_stats: Dict[str, Any] = {}
        self.security_alerts: List[SecurityAlert] = []
        self.audit_stats: Optional[Dict[str, Any]] = None

    @property
    def shows_security(self) -> bool:
        return has_any_role(self.user, SECURITY_VIEW_ROLES)

    def load(self, now: Optional[datetime] = None) -> "TenantDashboard":
        self.loading = True
        self.error = None
        try:
            stats, visits = settle_all([
                self.visitors.get_visit_stats,
                self.visitors.get_todays_visits,
            ])
            failure = next((r.error for r in (stats, visits) if not r.ok), None)
            if failure is not None:
                self.error = str(failure) or "Failed to load dashboard data"
                logger.error(f"Failed to load dashboard data: {self.error}")
                return self

            self.visit_stats = stats.value
            self.todays_visits = visits.value

            if self.shows_security:
                self._load_security(now)
        finally:
            self.loading = False
        return self

    def _load_security(self, now: Optional[datetime]) -> None:
        sec_stats, alerts, logs = settle_all([
            self.security.get_security_stats,
            self.security.get_active_security_alerts,
            lambda: self.security.get_audit_logs(50, 0),
        ])
        failure = next((r.error for r in (sec_stats, alerts, logs) if not r.ok), None)
        if failure is not None:
            logger.warning(f"Failed to load security/audit data: {failure}")
            return

        self.security_stats = sec_stats.value
        self.security_alerts = alerts.value
        self.audit_stats = summarize_audit_logs(logs.value, now)

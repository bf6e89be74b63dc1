"""Validate dashboard fan-out, aggregation and mock fallback."""

import random
import threading
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from visitor_console.dashboard import (
    FULFILLED, REJECTED, Settled, SuperAdminDashboard, TenantDashboard,
    aggregate_tenant_stats, compliance_metrics, settle_all, summarize_audit_logs, to_int
)
from visitor_console.exceptions import ServiceError
from visitor_console.schemas import AuditLog, Tenant, TenantStats

from tests.factories import make_visit, make_user


def stats(users=0, facilities=0, visits=0, checked_in=0, visitors=0):
    return TenantStats(
        user_stats={"total_users": users},
        facility_stats={"total_facilities": facilities},
        visit_stats={"total_visits": visits, "checked_in_visits": checked_in},
        visitor_stats={"total_visitors": visitors},
    )


def audit_log(log_id, action, timestamp, user_id=None, full_name=None, flags=()):
    return AuditLog(
        id=log_id,
        action=action,
        timestamp=timestamp,
        user_id=user_id,
        user={"full_name": full_name} if full_name else None,
        compliance_flags=list(flags),
    )


class TestSettleAll:
    """Validate the concurrent all-settled helper."""

    def test_results_keep_input_order(self):
        results = settle_all([lambda: 1, lambda: 2, lambda: 3])

        assert [r.value for r in results] == [1, 2, 3]
        assert all(r.status == FULFILLED for r in results)

    def test_failure_does_not_cancel_others(self):
        def boom():
            raise ServiceError("Failed to fetch tenant statistics")

        results = settle_all([lambda: "a", boom, lambda: "c"])

        assert [r.status for r in results] == [FULFILLED, REJECTED, FULFILLED]
        assert str(results[1].error) == "Failed to fetch tenant statistics"
        assert results[2].value == "c"

    def test_calls_run_concurrently(self):
        barrier = threading.Barrier(3, timeout=5)

        results = settle_all([barrier.wait] * 3, max_workers=3)

        assert all(r.ok for r in results)

    def test_empty(self):
        assert settle_all([]) == []


class TestToInt:
    """Validate lenient integer parsing."""

    @pytest.mark.parametrize("value,expected", [
        (5, 5), ("12", 12), ("7 visits", 7), (" -3", -3), (2.9, 2),
        (None, 0), ("", 0), ("n/a", 0), (True, 0),
    ])
    def test_values(self, value, expected):
        assert to_int(value) == expected


class TestAggregate:
    """Validate cross-tenant totals."""

    def test_sums_fulfilled_only(self):
        tenants = [Tenant(id="t1", name="A"), Tenant(id="t2", name="B", is_active=False), Tenant(id="t3", name="C")]
        results = [
            Settled(FULFILLED, value=stats(users="4", facilities=2, visits=10, checked_in=1, visitors=8)),
            Settled(REJECTED, error=ServiceError("down")),
            Settled(FULFILLED, value=stats(users=6, facilities="1", visits="5", checked_in="2", visitors=2)),
        ]

        totals = aggregate_tenant_stats(tenants, results)

        assert totals == {
            "total_tenants": 3,
            "active_tenants": 2,
            "total_users": 10,
            "total_facilities": 3,
            "total_visits": 15,
            "active_visits": 3,
            "total_visitors": 10,
        }

    def test_duplicate_tenant_counted_once(self):
        tenant = Tenant(id="t1", name="A")
        result = Settled(FULFILLED, value=stats(users=5))

        totals = aggregate_tenant_stats([tenant, tenant], [result, result])

        assert totals["total_users"] == 5

    def test_missing_stat_fields_count_as_zero(self):
        totals = aggregate_tenant_stats([Tenant(id="t1", name="A")], [Settled(FULFILLED, value=TenantStats())])

        assert totals["total_users"] == 0
        assert totals["active_visits"] == 0


class TestSuperAdminDashboard:
    """Validate loading and mock fallback."""

    def setup_method(self):
        self.tenants = Mock()
        self.security = Mock()
        self.security.get_audit_logs.return_value = []
        self.security.get_active_security_alerts.return_value = []

    def dashboard(self, mock_fallback=True):
        return SuperAdminDashboard(
            tenants=self.tenants, security=self.security,
            mock_fallback=mock_fallback, rng=random.Random(7)
        )

    def test_partial_stats_failure(self):
        self.tenants.get_tenants.return_value = [Tenant(id="t1", name="A"), Tenant(id="t2", name="B")]

        def tenant_stats(tenant_id):
            if tenant_id == "t2":
                raise ServiceError("Failed to fetch tenant statistics")
            return stats(users=3, visits=4)

        self.tenants.get_tenant_stats.side_effect = tenant_stats

        dashboard = self.dashboard().load()

        assert dashboard.error is None
        assert dashboard.using_mock_data is False
        assert dashboard.stats["total_tenants"] == 2
        assert dashboard.stats["total_users"] == 3
        assert dashboard.stats["total_visits"] == 4
        assert dashboard.loading is False

    def test_activity_from_audit_logs(self):
        self.tenants.get_tenants.return_value = [Tenant(id="t1", name="Acme")]
        self.tenants.get_tenant_stats.return_value = stats()
        self.security.get_audit_logs.return_value = [
            AuditLog(id="l1", action="update", table_name="tenants", tenant_id="t1",
                     timestamp="2024-01-01T10:00:00Z", user={"full_name": "Root"})
        ]

        dashboard = self.dashboard().load()

        assert dashboard.recent_activity == [{
            "id": "l1", "action": "update", "entity": "tenants", "tenant": "Acme",
            "timestamp": "2024-01-01T10:00:00Z", "user": "Root",
        }]

    def test_activity_failure_uses_mock(self):
        self.tenants.get_tenants.return_value = [Tenant(id="t1", name="Acme")]
        self.tenants.get_tenant_stats.return_value = stats(users=1)
        self.security.get_audit_logs.side_effect = ServiceError("Failed to fetch audit logs")

        dashboard = self.dashboard().load()

        assert dashboard.stats["total_users"] == 1
        assert dashboard.using_mock_data is True
        assert len(dashboard.recent_activity) == 10
        assert len(dashboard.system_alerts) == 3

    def test_tenant_list_failure_uses_mock(self):
        self.tenants.get_tenants.side_effect = ServiceError("Failed to fetch tenants")

        dashboard = self.dashboard().load()

        assert dashboard.error == "Failed to fetch tenants"
        assert dashboard.using_mock_data is True
        assert len(dashboard.tenants) == 5
        assert dashboard.stats["total_tenants"] == 5

    def test_mock_fallback_disabled(self):
        self.tenants.get_tenants.side_effect = ServiceError("Failed to fetch tenants")

        dashboard = self.dashboard(mock_fallback=False).load()

        assert dashboard.error == "Failed to fetch tenants"
        assert dashboard.using_mock_data is False
        assert dashboard.tenants == []


class TestSummarizeAuditLogs:
    """Validate audit counters."""

    def test_counters(self):
        now = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)
        logs = [
            audit_log("1", "login", "2024-01-10T08:00:00Z", "u1", "Ann", ["HIPAA"]),
            audit_log("2", "login", "2024-01-09T08:00:00Z", "u1", "Ann"),
            audit_log("3", "update", "2024-01-01T08:00:00Z", "u2", "Bob", ["HIPAA", "FICAM"]),
            audit_log("4", "check_in", "not a timestamp"),
        ]

        summary = summarize_audit_logs(logs, now)

        assert summary["total_entries"] == 4
        assert summary["entries_today"] == 1
        assert summary["entries_week"] == 2
        assert summary["unique_users"] == 3
        assert {"action": "login", "count": 2} in summary["actions"]
        assert {"flag": "HIPAA", "count": 2} in summary["compliance"]
        ann = next(u for u in summary["user_activity"] if u["full_name"] == "Ann")
        assert ann["activity_count"] == 2
        assert ann["last_activity"] == "2024-01-10T08:00:00Z"

    def test_empty(self):
        summary = summarize_audit_logs([])

        assert summary["total_entries"] == 0
        assert summary["actions"] == []


class TestComplianceMetrics:
    """Validate compliance scores."""

    def test_baseline_without_data(self):
        metrics = compliance_metrics(None)

        assert [m["name"] for m in metrics] == ["FICAM", "FIPS 140", "HIPAA", "FERPA"]
        assert all(m["value"] == 100 for m in metrics)

    def test_present_flags_score_full(self):
        metrics = compliance_metrics({"compliance": [{"flag": "HIPAA", "count": "3"}]})
        by_name = {m["name"]: m for m in metrics}

        assert by_name["HIPAA"]["value"] == 100
        assert by_name["HIPAA"]["count"] == 3
        assert by_name["FICAM"]["value"] == 0


class TestTenantDashboard:
    """Validate per-tenant loading by role."""

    def setup_method(self):
        self.visitors = Mock()
        self.visitors.get_visit_stats.return_value = {"total_visits": 4}
        self.visitors.get_todays_visits.return_value = [make_visit()]
        self.security = Mock()
        self.security.get_security_stats.return_value = {"active_alerts": 1}
        self.security.get_active_security_alerts.return_value = []
        self.security.get_audit_logs.return_value = [audit_log("1", "login", "2024-01-10T08:00:00Z", "u1")]

    def dashboard(self, role):
        return TenantDashboard(user=make_user(role=role), visitors=self.visitors, security=self.security)

    def test_reception_skips_security_data(self):
        dashboard = self.dashboard("reception").load()

        assert dashboard.visit_stats == {"total_visits": 4}
        assert len(dashboard.todays_visits) == 1
        assert dashboard.audit_stats is None
        self.security.get_security_stats.assert_not_called()

    def test_security_role_loads_audit_summary(self):
        dashboard = self.dashboard("security").load(now=datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc))

        assert dashboard.security_stats == {"active_alerts": 1}
        assert dashboard.audit_stats["entries_today"] == 1
        self.security.get_audit_logs.assert_called_once_with(50, 0)

    def test_primary_failure_sets_error(self):
        self.visitors.get_visit_stats.side_effect = ServiceError("Failed to fetch visit statistics")

        dashboard = self.dashboard("admin").load()

        assert dashboard.error == "Failed to fetch visit statistics"
        assert dashboard.todays_visits == []
        assert dashboard.loading is False

    def test_security_failure_is_not_fatal(self):
        self.security.get_security_stats.side_effect = ServiceError("Failed to fetch security statistics")

        dashboard = self.dashboard("admin").load()

        assert dashboard.error is None
        assert dashboard.visit_stats == {"total_visits": 4}
        assert dashboard.audit_stats is None

"""Validate placeholder dashboard data."""

import random

from visitor_console.mock_data import (
    DEFAULT_TOTAL_FACILITIES, DEFAULT_TOTAL_USERS, mock_activity,
    mock_super_admin_stats, mock_system_alerts, mock_tenants
)
from visitor_console.schemas import Tenant


class TestMockData:

    def test_seeded_output_is_repeatable(self):
        first = mock_tenants(rng=random.Random(1))
        second = mock_tenants(rng=random.Random(1))

        assert [t.user_count for t in first] == [t.user_count for t in second]
        assert len(first) == 5

    def test_stats_sum_tenant_counts(self):
        tenants = mock_tenants(3, rng=random.Random(2))

        stats = mock_super_admin_stats(tenants, rng=random.Random(2))

        assert stats["total_tenants"] == 3
        assert stats["total_users"] == sum(t.user_count for t in tenants)

    def test_stats_floors_without_counts(self):
        stats = mock_super_admin_stats([Tenant(id="t1", name="A")], rng=random.Random(3))

        assert stats["total_users"] == DEFAULT_TOTAL_USERS
        assert stats["total_facilities"] == DEFAULT_TOTAL_FACILITIES

    def test_activity_and_alerts(self):
        activity = mock_activity([], n=4, rng=random.Random(4))
        alerts = mock_system_alerts(rng=random.Random(4))

        assert len(activity) == 4
        assert {a["tenant"] for a in activity} == {"Default Tenant"}
        assert len(alerts) == 3
        assert all(a["severity"] in ("low", "medium", "high") for a in alerts)

"""
Placeholder data for dashboards when the backend cannot be reached.

Every generator takes an optional `random.Random` so callers (and tests)
can seed the output.
"""

import random
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any

from .schemas import Tenant

ACTIVITY_ACTIONS = ["created", "updated", "deactivated", "accessed"]
ACTIVITY_ENTITIES = ["tenant", "user", "facility", "system setting"]
ALERT_TYPES = ["Database performance", "Storage capacity", "API rate limit", "Security alert"]
ALERT_SEVERITIES = ["low", "medium", "high"]

# Floors used when mock tenants carry no counts
DEFAULT_TOTAL_USERS = 150
DEFAULT_TOTAL_FACILITIES = 25


def _rng(rng: Optional[random.Random]) -> random.Random:
    return rng or random.Random()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def mock_tenants(n: int = 5, rng: Optional[random.Random] = None) -> List[Tenant]:
    rng = _rng(rng)
    now = _now().isoformat()
    return [
        Tenant(
            id=f"mock-{i}",
            name=f"Mock Tenant {i + 1}",
            is_active=True,
            created_at=now,
            updated_at=now,
            user_count=rng.randint(10, 59),
            facility_count=rng.randint(1, 10),
        )
        for i in range(n)
    ]


def mock_super_admin_stats(tenants: List[Tenant], rng: Optional[random.Random] = None) -> Dict[str, int]:
    rng = _rng(rng)
    return {
        "total_tenants": len(tenants),
        "active_tenants": sum(1 for t in tenants if t.is_active),
        "total_users": sum(t.user_count or 0 for t in tenants) or DEFAULT_TOTAL_USERS,
        "total_facilities": sum(t.facility_count or 0 for t in tenants) or DEFAULT_TOTAL_FACILITIES,
        "total_visits": rng.randint(1000, 10999),
        "active_visits": rng.randint(10, 109),
        "total_visitors": rng.randint(500, 5499),
    }


def mock_activity(tenants: List[Tenant], n: int = 10, rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    rng = _rng(rng)
    names = [t.name for t in tenants] or ["Default Tenant"]
    now = _now()
    return [
        {
            "id": str(i),
            "action": rng.choice(ACTIVITY_ACTIONS),
            "entity": rng.choice(ACTIVITY_ENTITIES),
            "tenant": rng.choice(names),
            "timestamp": (now - timedelta(seconds=rng.randint(0, 7 * 24 * 3600))).isoformat(),
            "user": "Super Admin",
        }
        for i in range(n)
    ]


def mock_system_alerts(n: int = 3, rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    rng = _rng(rng)
    now = _now()
    alerts = []
    for i in range(n):
        alert_type = rng.choice(ALERT_TYPES)
        alerts.append({
            "id": str(i),
            "type": alert_type,
            "message": f"System {rng.choice(ALERT_TYPES).lower()} alert for monitoring",
            "severity": rng.choice(ALERT_SEVERITIES),
            "timestamp": (now - timedelta(seconds=rng.randint(0, 3 * 24 * 3600))).isoformat(),
        })
    return alerts

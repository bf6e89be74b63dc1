import logging
from typing import Optional, Dict, Any, List

from ..schemas import Tenant, TenantStats, BadgeType
from .base import BaseService, service_call, parse_list

logger = logging.getLogger(__name__)

_BADGE_TYPES = {b.value for b in BadgeType}


def normalize_checkout_time(value: str) -> str:
    """
    Strip any timezone suffix and pad to HH:MM:SS.

    "18" -> "18:00:00", "18:30" -> "18:30:00", "18:30:00+02" -> "18:30:00"
    """
    time_part = value.replace("+", "-").split("-")[0].strip()
    if ":" not in time_part:
        return f"{time_part}:00:00"
    if len(time_part.split(":")) == 2:
        return f"{time_part}:00"
    return time_part


def prepare_tenant_updates(updates: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce a tenant update payload into the shape the backend accepts"""
    payload = dict(updates)

    if payload.get("auto_checkout_enabled") and payload.get("auto_checkout_time"):
        payload["auto_checkout_time"] = normalize_checkout_time(payload["auto_checkout_time"])

    if payload.get("auto_checkout_enabled") is False:
        payload.pop("auto_checkout_time", None)

    if payload.get("early_checkin_minutes") is not None:
        payload["early_checkin_minutes"] = int(payload["early_checkin_minutes"])

    if payload.get("civ_piv_i_issuance_enabled") is not None:
        payload["civ_piv_i_issuance_enabled"] = bool(payload["civ_piv_i_issuance_enabled"])

    badge_type = payload.get("default_badge_type")
    if badge_type is not None:
        badge_type = getattr(badge_type, "value", badge_type)
        if badge_type not in _BADGE_TYPES:
            logger.warning(f"Invalid default_badge_type {badge_type!r}, using 'printed'")
            badge_type = BadgeType.PRINTED.value
        payload["default_badge_type"] = badge_type

    return payload


class TenantService(BaseService):
    """Tenant administration (super admin)"""

    @service_call("Failed to fetch tenants")
    def get_tenants(self) -> List[Tenant]:
        response = self.client.get("/api/tenants")
        return parse_list(Tenant, response.get("tenants"))

    @service_call("Failed to fetch tenant")
    def get_tenant(self, tenant_id: str) -> Tenant:
        response = self.client.get(f"/api/tenants/{tenant_id}")
        return Tenant.model_validate(response["tenant"])

    @service_call("Failed to create tenant")
    def create_tenant(self, tenant_data: Dict[str, Any]) -> Tenant:
        response = self.client.post("/api/tenants", data=tenant_data)
        return Tenant.model_validate(response["tenant"])

    @service_call("Failed to update tenant")
    def update_tenant(self, tenant_id: str, updates: Dict[str, Any]) -> Tenant:
        payload = prepare_tenant_updates(updates)
        logger.info(f"Updating tenant {tenant_id}: {sorted(payload)}")
        response = self.client.put(f"/api/tenants/{tenant_id}", data=payload)
        return Tenant.model_validate(response["tenant"])

    @service_call("Failed to update notification providers")
    def update_notification_providers(self, tenant_id: str, updates: Dict[str, Any]) -> Tenant:
        response = self.client.put(f"/api/tenants/{tenant_id}/notification-providers", data=updates)
        return Tenant.model_validate(response["tenant"])

    @service_call("Failed to update custom departments")
    def update_custom_departments(self, tenant_id: str, departments: List[str]) -> Tenant:
        response = self.client.put(
            f"/api/tenants/{tenant_id}/departments",
            data={"custom_departments": departments}
        )
        return Tenant.model_validate(response["tenant"])

    @service_call("Failed to deactivate tenant")
    def deactivate_tenant(self, tenant_id: str) -> None:
        self.client.put(f"/api/tenants/{tenant_id}/deactivate", data={})

    @service_call("Failed to fetch tenant statistics")
    def get_tenant_stats(self, tenant_id: str) -> TenantStats:
        response = self.client.get(f"/api/tenants/{tenant_id}/stats")
        stats = TenantStats.model_validate(response)
        if stats.tenant_id is None:
            stats.tenant_id = tenant_id
        return stats

    @service_call("Failed to fetch tenants statistics")
    def get_all_tenants_stats(self) -> List[Dict[str, Any]]:
        response = self.client.get("/api/tenants/stats/all")
        return response.get("stats") or []

    # ==================== System ====================

    @service_call("Failed to fetch system statistics")
    def get_system_stats(self) -> Dict[str, Any]:
        response = self.client.get("/api/system/stats")
        return response.get("stats") or {}

    @service_call("Failed to fetch system activity")
    def get_system_activity(self, limit: int = 10) -> List[Dict[str, Any]]:
        response = self.client.get("/api/system/activity", params={"limit": limit})
        return response.get("activities") or []

    @service_call("Failed to fetch system alerts")
    def get_system_alerts(self) -> List[Dict[str, Any]]:
        response = self.client.get("/api/system/alerts")
        return response.get("alerts") or []

from typing import Optional, Dict, Any, List, Tuple

from ..schemas import (
    WatchlistEntry, AuditLog, SecurityAlert, EmergencyContact, Visitor, Pagination
)
from .base import BaseService, service_call, clean_params, parse_list, parse_pagination


class SecurityService(BaseService):
    """Watchlist screening, audit trail, alerts and emergency contacts"""

    # ==================== Watchlist ====================

    @service_call("Failed to create watchlist entry")
    def create_watchlist_entry(self, entry_data: Dict[str, Any]) -> WatchlistEntry:
        response = self.client.post("/api/security/watchlist", data=entry_data)
        return WatchlistEntry.model_validate(response["entry"])

    @service_call("Failed to update watchlist entry")
    def update_watchlist_entry(self, entry_id: str, updates: Dict[str, Any]) -> WatchlistEntry:
        response = self.client.put(f"/api/security/watchlist/{entry_id}", data=updates)
        return WatchlistEntry.model_validate(response["entry"])

    @service_call("Failed to fetch watchlist")
    def get_watchlist(self) -> List[WatchlistEntry]:
        response = self.client.get("/api/security/watchlist")
        return parse_list(WatchlistEntry, response.get("watchlist"))

    @service_call("Failed to screen visitor")
    def screen_visitor(self, visitor: Visitor) -> List[WatchlistEntry]:
        response = self.client.post("/api/security/screen", data={
            "first_name": visitor.first_name,
            "last_name": visitor.last_name,
            "id_number": visitor.id_number,
        })
        return parse_list(WatchlistEntry, response.get("matches"))

    # ==================== Audit ====================

    def _audit_params(self, page: int, limit: int, filters: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        params = {"limit": limit, "page": page}
        params.update(clean_params(filters or {}))
        return params

    @service_call("Failed to fetch audit logs")
    def get_audit_logs(
        self,
        limit: int = 100,
        offset: int = 0,
        filters: Optional[Dict[str, Any]] = None
    ) -> List[AuditLog]:
        limit = max(limit, 1)
        params = self._audit_params(offset // limit + 1, limit, filters)
        response = self.client.get("/api/audit/logs", params=params)
        return parse_list(AuditLog, response.get("logs"))

    @service_call("Failed to fetch audit logs")
    def get_audit_logs_page(
        self,
        page: int = 1,
        limit: int = 50,
        filters: Optional[Dict[str, Any]] = None
    ) -> Tuple[List[AuditLog], Pagination]:
        response = self.client.get("/api/audit/logs", params=self._audit_params(page, limit, filters))
        return parse_list(AuditLog, response.get("logs")), parse_pagination(response)

    @service_call("Failed to fetch audit statistics")
    def get_audit_stats(self) -> Dict[str, Any]:
        return self.client.get("/api/audit/stats")

    @service_call("Failed to export audit logs")
    def export_audit_logs(self, filters: Optional[Dict[str, Any]] = None) -> bytes:
        return self.client.download("/api/audit/export", params=clean_params(filters or {}))

    @service_call("Failed to generate compliance report")
    def generate_compliance_report(self, facility_id: str, start_date: str, end_date: str) -> Dict[str, Any]:
        response = self.client.post("/api/audit/compliance-report", data={
            "facility_id": facility_id,
            "start_date": start_date,
            "end_date": end_date,
        })
        return response.get("report") or response

    # ==================== Emergency ====================

    @service_call("Failed to fetch emergency contacts")
    def get_emergency_contacts(self, facility_id: str) -> List[EmergencyContact]:
        response = self.client.get("/api/emergency/contacts", params={"facility_id": facility_id})
        return parse_list(EmergencyContact, response.get("contacts"))

    @service_call("Failed to create emergency contact")
    def create_emergency_contact(self, contact_data: Dict[str, Any]) -> EmergencyContact:
        response = self.client.post("/api/emergency/contacts", data=contact_data)
        return EmergencyContact.model_validate(response["contact"])

    # ==================== Alerts ====================

    @service_call("Failed to create security alert")
    def create_security_alert(self, alert_data: Dict[str, Any]) -> SecurityAlert:
        response = self.client.post("/api/security/alerts", data=alert_data)
        return SecurityAlert.model_validate(response["alert"])

    @service_call("Failed to fetch security alerts")
    def get_active_security_alerts(self, facility_id: Optional[str] = None) -> List[SecurityAlert]:
        response = self.client.get(
            "/api/security/alerts", params=clean_params({"facility_id": facility_id})
        )
        return parse_list(SecurityAlert, response.get("alerts"))

    @service_call("Failed to resolve security alert")
    def resolve_security_alert(self, alert_id: str, resolution_notes: Optional[str] = None) -> SecurityAlert:
        response = self.client.put(
            f"/api/security/alerts/{alert_id}/resolve",
            data={"resolution_notes": resolution_notes}
        )
        return SecurityAlert.model_validate(response["alert"])

    @service_call("Failed to fetch security statistics")
    def get_security_stats(self) -> Dict[str, Any]:
        return self.client.get("/api/security/stats")

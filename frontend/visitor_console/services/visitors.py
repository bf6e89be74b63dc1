import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Tuple

from ..schemas import (
    Visitor, Visit, Host, Facility, Badge, Invitation, Pagination, BadgeType
)
from .base import BaseService, service_call, clean_params, parse_list, parse_pagination

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class VisitorService(BaseService):
    """Visitors, visits, hosts, facilities and badges"""

    # ==================== Visitors ====================

    @service_call("Failed to create visitor")
    def create_visitor(self, visitor_data: Dict[str, Any]) -> Visitor:
        response = self.client.post("/api/visitors", data=visitor_data)
        return Visitor.model_validate(response["visitor"])

    @service_call("Failed to update visitor")
    def update_visitor(self, visitor_id: str, updates: Dict[str, Any]) -> Visitor:
        response = self.client.put(f"/api/visitors/{visitor_id}", data=updates)
        return Visitor.model_validate(response["visitor"])

    @service_call("Failed to fetch visitors")
    def get_visitors(self, limit: int = 20, offset: int = 0) -> Tuple[List[Visitor], Pagination]:
        limit = max(limit, 1)
        page = offset // limit + 1
        response = self.client.get("/api/visitors", params={"limit": limit, "page": page})
        return parse_list(Visitor, response.get("visitors")), parse_pagination(response)

    @service_call("Failed to search visitors")
    def search_visitors(self, query: str) -> List[Visitor]:
        response = self.client.get("/api/visitors/search/quick", params={"q": query})
        return parse_list(Visitor, response.get("visitors"))

    # ==================== Visits ====================

    @service_call("Failed to create visit")
    def create_visit(self, visit_data: Dict[str, Any]) -> Visit:
        response = self.client.post("/api/visits", data=visit_data)
        return Visit.model_validate(response["visit"])

    @service_call("Failed to update visit")
    def update_visit(self, visit_id: str, updates: Dict[str, Any]) -> Visit:
        response = self.client.put(f"/api/visits/{visit_id}", data=updates)
        return Visit.model_validate(response["visit"])

    @service_call("Failed to fetch visits")
    def get_visits(
        self,
        facility_id: Optional[str] = None,
        date: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None
    ) -> Tuple[List[Visit], Pagination]:
        params = clean_params({
            "facility_id": facility_id,
            "date": date,
            "start_date": start_date,
            "end_date": end_date,
        })
        params["page"] = page
        params["limit"] = limit

        response = self.client.get("/api/visits", params=params)
        visits = parse_list(Visit, response.get("visits"))
        logger.debug(
            f"Fetched {len(visits)} visits "
            f"(recurring: {any(v.recurrence_type and v.recurrence_type != 'none' for v in visits)})"
        )
        return visits, parse_pagination(response)

    def get_todays_visits(self, facility_id: Optional[str] = None) -> List[Visit]:
        """Best-effort; an unavailable endpoint yields an empty list"""
        try:
            response = self.client.get(
                "/api/visits/today", params=clean_params({"facility_id": facility_id})
            )
            visits = response.get("visits")
            if not isinstance(visits, list):
                return []
            return parse_list(Visit, visits)
        except Exception as e:
            logger.warning(f"Failed to fetch today's visits: {e}")
            return []

    @service_call("Failed to check in visitor")
    def check_in_visitor(self, visit_id: str, location: Optional[str] = None) -> Visit:
        response = self.client.post(
            f"/api/visits/{visit_id}/check-in", data={"location": location}
        )
        return Visit.model_validate(response["visit"])

    @service_call("Failed to check out visitor")
    def check_out_visitor(self, visit_id: str, location: Optional[str] = None) -> Visit:
        response = self.client.post(
            f"/api/visits/{visit_id}/check-out", data={"location": location}
        )
        return Visit.model_validate(response["visit"])

    @service_call("Failed to validate QR code token")
    def get_visit_details_by_qr_token(self, qr_token: str) -> Optional[Invitation]:
        response = self.client.get("/api/qr-check-in", params={"token": qr_token})
        invitation = response.get("invitation")
        return Invitation.model_validate(invitation) if invitation else None

    @service_call("Failed to check in visitor using QR code")
    def qr_check_in_visitor(
        self,
        qr_token: str,
        location: Optional[str] = None,
        badge_type: str = BadgeType.PRINTED.value
    ) -> Tuple[Optional[Visit], Optional[Badge]]:
        response = self.client.post("/api/visits/qr-check-in", data={
            "qr_token": qr_token,
            "location": location,
            "badge_type": badge_type,
        })
        visit = response.get("visit")
        badge = response.get("badge")
        return (
            Visit.model_validate(visit) if visit else None,
            Badge.model_validate(badge) if badge else None,
        )

    # ==================== Hosts ====================

    @service_call("Failed to fetch hosts")
    def get_hosts(self, facility_id: Optional[str] = None) -> List[Host]:
        endpoint = f"/api/hosts/facility/{facility_id}" if facility_id else "/api/hosts"
        response = self.client.get(endpoint)
        return parse_list(Host, response.get("hosts"))

    @service_call("Failed to fetch hosts for profile")
    def get_hosts_by_profile(self, profile_id: str) -> List[Host]:
        response = self.client.get(f"/api/hosts/profile/{profile_id}")
        return parse_list(Host, response.get("hosts"))

    @service_call("Failed to create host")
    def create_host(self, host_data: Dict[str, Any]) -> Host:
        response = self.client.post("/api/hosts", data=host_data)
        return Host.model_validate(response["host"])

    @service_call("Failed to update host")
    def update_host(self, host_id: str, updates: Dict[str, Any]) -> Host:
        response = self.client.put(f"/api/hosts/{host_id}", data=updates)
        return Host.model_validate(response["host"])

    @service_call("Failed to deactivate host")
    def deactivate_host(self, host_id: str) -> None:
        self.client.delete(f"/api/hosts/{host_id}")

    # ==================== Facilities ====================

    @service_call("Failed to fetch facilities")
    def get_facilities(self) -> List[Facility]:
        response = self.client.get("/api/facilities")
        return parse_list(Facility, response.get("facilities"))

    @service_call("Failed to create facility")
    def create_facility(self, facility_data: Dict[str, Any]) -> Facility:
        response = self.client.post("/api/facilities", data=facility_data)
        return Facility.model_validate(response["facility"])

    @service_call("Failed to update facility")
    def update_facility(self, facility_id: str, updates: Dict[str, Any]) -> Facility:
        response = self.client.put(f"/api/facilities/{facility_id}", data=updates)
        return Facility.model_validate(response["facility"])

    # ==================== Badges ====================

    @service_call("Failed to create badge")
    def create_badge(
        self,
        visit_id: str,
        access_zones: Optional[List[str]] = None,
        badge_type: str = BadgeType.PRINTED.value
    ) -> Badge:
        response = self.client.post("/api/enhanced-badges", data={
            "visit_id": visit_id,
            "access_zones": access_zones or [],
            "badge_type": badge_type,
        })
        return Badge.model_validate(response["badge"])

    @service_call("Failed to deactivate badge")
    def deactivate_badge(self, badge_id: str) -> None:
        self.client.put(f"/api/enhanced-badges/{badge_id}", data={
            "is_active": False,
            "returned_at": _now_iso(),
        })

    @service_call("Failed to report badge as lost")
    def report_badge_lost(self, badge_id: str) -> None:
        self.client.put(f"/api/enhanced-badges/{badge_id}/lost", data={
            "reported_lost_at": _now_iso(),
        })

    # ==================== Stats & Export ====================

    @service_call("Failed to fetch visit statistics")
    def get_visit_stats(self, facility_id: Optional[str] = None, days: int = 30) -> Dict[str, Any]:
        params = clean_params({"facility_id": facility_id})
        params["days"] = days
        response = self.client.get("/api/visits/stats/overview", params=params)
        return response.get("stats") or {}

    @service_call("Failed to export calendar")
    def export_calendar(self, format: str = "ics", filters: Optional[Dict[str, Any]] = None) -> bytes:
        params = {"format": format}
        params.update(clean_params(filters or {}))
        return self.client.download("/api/visits/export-calendar", params=params)

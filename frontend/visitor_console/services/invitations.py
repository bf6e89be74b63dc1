from typing import Optional, Dict, Any, List

from ..schemas import Invitation
from .base import BaseService, service_call, clean_params, parse_list


class InvitationService(BaseService):
    """Visit invitations and their approval workflow"""

    @service_call("Failed to create invitation")
    def create_invitation(self, invitation_data: Dict[str, Any]) -> Invitation:
        response = self.client.post("/api/invitations", data=invitation_data)
        return Invitation.model_validate(response["invitation"])

    @service_call("Failed to update invitation")
    def update_invitation(self, invitation_id: str, updates: Dict[str, Any]) -> Invitation:
        response = self.client.put(f"/api/invitations/{invitation_id}", data=updates)
        return Invitation.model_validate(response["invitation"])

    @service_call("Failed to fetch invitations")
    def get_invitations(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> List[Invitation]:
        params = clean_params({"status": status, "search": search})
        params.update({"page": page, "limit": limit})
        response = self.client.get("/api/invitations", params=params)
        return parse_list(Invitation, response.get("invitations"))

    @service_call("Failed to fetch invitation")
    def get_invitation(self, invitation_id: str) -> Invitation:
        response = self.client.get(f"/api/invitations/{invitation_id}")
        return Invitation.model_validate(response["invitation"])

    @service_call("Failed to approve invitation")
    def approve_invitation(self, invitation_id: str) -> Invitation:
        response = self.client.post(f"/api/invitations/{invitation_id}/approve", data={})
        return Invitation.model_validate(response["invitation"])

    @service_call("Failed to reject invitation")
    def reject_invitation(self, invitation_id: str, reason: str) -> Invitation:
        response = self.client.post(f"/api/invitations/{invitation_id}/reject", data={"reason": reason})
        return Invitation.model_validate(response["invitation"])

    @service_call("Failed to cancel invitation")
    def cancel_invitation(self, invitation_id: str) -> Invitation:
        response = self.client.post(f"/api/invitations/{invitation_id}/cancel", data={})
        return Invitation.model_validate(response["invitation"])

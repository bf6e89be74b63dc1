from typing import Optional, Dict, Any, List

from ..schemas import IdentityProvider
from .base import BaseService, service_call, clean_params, parse_list


class IdentityProviderService(BaseService):

    @service_call("Failed to fetch identity providers")
    def get_identity_providers(self, tenant_id: Optional[str] = None) -> List[IdentityProvider]:
        response = self.client.get(
            "/api/identity-providers", params=clean_params({"tenant_id": tenant_id})
        )
        return parse_list(IdentityProvider, response.get("identity_providers"))

    @service_call("Failed to create identity provider")
    def create_identity_provider(self, provider_data: Dict[str, Any]) -> IdentityProvider:
        response = self.client.post("/api/identity-providers", data=provider_data)
        return IdentityProvider.model_validate(response["identity_provider"])

    @service_call("Failed to update identity provider")
    def update_identity_provider(self, provider_id: str, updates: Dict[str, Any]) -> IdentityProvider:
        response = self.client.put(f"/api/identity-providers/{provider_id}", data=updates)
        return IdentityProvider.model_validate(response["identity_provider"])

    @service_call("Failed to delete identity provider")
    def delete_identity_provider(self, provider_id: str) -> None:
        self.client.delete(f"/api/identity-providers/{provider_id}")

    @service_call("Failed to deactivate identity provider")
    def deactivate_identity_provider(self, provider_id: str) -> IdentityProvider:
        response = self.client.post(f"/api/identity-providers/{provider_id}/deactivate", data={})
        return IdentityProvider.model_validate(response["identity_provider"])

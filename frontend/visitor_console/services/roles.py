import re
from typing import Dict, Any, List

from ..exceptions import ServiceError
from ..schemas import Role, RoleWithPermissions, Permission
from .base import BaseService, service_call, parse_list

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def is_uuid(value: str) -> bool:
    return bool(value and UUID_PATTERN.match(value))


def _require_uuid(role_id: str) -> None:
    if not is_uuid(role_id):
        raise ServiceError(f"Invalid role ID format: {role_id}")


class RoleService(BaseService):
    """Tenant roles and their permission sets"""

    @service_call("Failed to fetch roles")
    def get_roles(self) -> List[Role]:
        response = self.client.get("/api/roles")
        return parse_list(Role, response.get("roles"))

    @service_call("Failed to fetch role")
    def get_role(self, role_id: str) -> RoleWithPermissions:
        response = self.client.get(f"/api/roles/{role_id}")
        return RoleWithPermissions.model_validate(response["role"])

    @service_call("Failed to create role")
    def create_role(self, role_data: Dict[str, Any]) -> Role:
        response = self.client.post("/api/roles", data=role_data)
        return Role.model_validate(response["role"])

    @service_call("Failed to update role")
    def update_role(self, role_id: str, updates: Dict[str, Any]) -> Role:
        response = self.client.put(f"/api/roles/{role_id}", data=updates)
        return Role.model_validate(response["role"])

    @service_call("Failed to delete role")
    def delete_role(self, role_id: str) -> None:
        _require_uuid(role_id)
        self.client.delete(f"/api/roles/{role_id}")

    @service_call("Failed to fetch permissions")
    def get_all_permissions(self) -> List[Permission]:
        response = self.client.get("/api/roles/permissions/all")
        return parse_list(Permission, response.get("permissions"))

    @service_call("Failed to fetch role permissions")
    def get_role_permissions(self, role: str) -> List[str]:
        """Permission names for a role, looked up by ID or by role name"""
        if is_uuid(role):
            response = self.client.get(f"/api/roles/{role}/permissions")
        else:
            response = self.client.get(f"/api/roles/permissions/role/{role}")
        return response.get("permissions") or []

    @service_call("Failed to assign permissions")
    def assign_permissions(self, role_id: str, permission_ids: List[str]) -> RoleWithPermissions:
        _require_uuid(role_id)
        response = self.client.post(
            f"/api/roles/{role_id}/permissions", data={"permissions": permission_ids}
        )
        if not response.get("role"):
            raise ServiceError("Failed to assign permissions: No role data returned from server")
        return RoleWithPermissions.model_validate(response["role"])

from typing import Optional, Dict, Any, List, Tuple

from ..schemas import NotificationTemplate, NotificationLog, Pagination
from .base import BaseService, service_call, clean_params, parse_list, parse_pagination


class NotificationService(BaseService):
    """Notification templates and delivery logs"""

    @service_call("Failed to fetch notification templates")
    def get_templates(self) -> List[NotificationTemplate]:
        response = self.client.get("/api/notifications/templates")
        return parse_list(NotificationTemplate, response.get("templates"))

    @service_call("Failed to fetch notification template")
    def get_template(self, template_id: str) -> NotificationTemplate:
        response = self.client.get(f"/api/notifications/templates/{template_id}")
        return NotificationTemplate.model_validate(response["template"])

    @service_call("Failed to create notification template")
    def create_template(self, template_data: Dict[str, Any]) -> NotificationTemplate:
        response = self.client.post("/api/notifications/templates", data=template_data)
        return NotificationTemplate.model_validate(response["template"])

    @service_call("Failed to update notification template")
    def update_template(self, template_id: str, updates: Dict[str, Any]) -> NotificationTemplate:
        response = self.client.put(f"/api/notifications/templates/{template_id}", data=updates)
        return NotificationTemplate.model_validate(response["template"])

    @service_call("Failed to delete notification template")
    def delete_template(self, template_id: str) -> None:
        self.client.delete(f"/api/notifications/templates/{template_id}")

    @service_call("Failed to fetch notification logs")
    def get_notification_logs(
        self,
        page: int = 1,
        limit: int = 20,
        filters: Optional[Dict[str, Any]] = None
    ) -> Tuple[List[NotificationLog], Pagination]:
        params = {"page": page, "limit": limit}
        params.update(clean_params(filters or {}))
        response = self.client.get("/api/notifications/logs", params=params)
        return parse_list(NotificationLog, response.get("logs")), parse_pagination(response)

    @service_call("Failed to send test notification")
    def send_test_notification(
        self,
        template_id: str,
        recipient_email: Optional[str] = None,
        recipient_phone: Optional[str] = None,
        variables: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        data = clean_params({
            "template_id": template_id,
            "recipient_email": recipient_email,
            "recipient_phone": recipient_phone,
        })
        if variables:
            data["variables"] = variables
        response = self.client.post("/api/notifications/send-test", data=data)
        return response.get("notification") or {}

    @service_call("Failed to fetch template variables")
    def get_template_variables(self) -> Dict[str, List[Dict[str, Any]]]:
        response = self.client.get("/api/notifications/template-variables")
        return response.get("variables") or {}

from typing import Dict, Any, Optional

from .base import BaseService, service_call


class QrCodeService(BaseService):

    @service_call("Failed to fetch QR code image")
    def get_qr_code_image(self, invitation_id: str) -> Optional[str]:
        """Data-URL of the invitation's QR code; served without auth"""
        response = self.client.get(f"/api/qr-code/image/{invitation_id}", skip_auth=True)
        return response.get("qr_code_image")

    @service_call("Failed to generate QR code")
    def generate_qr_code(self, invitation_id: str) -> Dict[str, Any]:
        return self.client.post(f"/api/qr-code/generate/{invitation_id}", data={})

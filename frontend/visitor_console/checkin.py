import base64
import binascii
import logging
from enum import Enum
from typing import Optional, List, Iterable
from urllib.parse import urlparse, parse_qs

import cv2
import numpy as np

from .exceptions import ConsoleError, CameraError
from .permissions import STAFF_ROLES, has_any_role
from .schemas import Visit, Badge, Invitation, User, Tenant, VisitStatus, BadgeType
from .services import VisitorService, visitor_service

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "Reception Desk"


# ==================== QR decoding ====================

def extract_qr_token(raw: str) -> str:
    """
    Token carried by a scanned QR code.

    Codes encode either a check-in URL with a `token` query parameter or
    the bare token; anything that is not such a URL is used verbatim.
    """
    raw = raw or ""
    parsed = urlparse(raw.strip())
    if parsed.scheme and parsed.netloc:
        token = parse_qs(parsed.query).get("token")
        if token and token[0]:
            return token[0]
    return raw


def decode_qr_image(image_bytes: bytes) -> Optional[str]:
    """Decode the first QR code in an encoded image (PNG/JPEG bytes)"""
    buffer = np.frombuffer(image_bytes or b"", dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR) if buffer.size else None
    if image is None:
        raise CameraError("Could not decode image from camera")

    detector = cv2.QRCodeDetector()
    data, points, _ = detector.detectAndDecode(image)
    if not data:
        logger.debug("No QR code found in frame")
        return None
    return data


def decode_qr_base64(image_base64: str) -> Optional[str]:
    """Same as decode_qr_image for base64 or data-URL input"""
    if "," in image_base64:
        image_base64 = image_base64.split(",")[-1]
    try:
        image_bytes = base64.b64decode(image_base64)
    except (binascii.Error, ValueError) as e:
        raise CameraError(f"Invalid image data: {e}") from e
    return decode_qr_image(image_bytes)


# ==================== Manual check-in ====================

def _status(visit: Visit) -> str:
    return getattr(visit.status, "value", visit.status)


def can_check_in(visit: Visit, user: Optional[User]) -> bool:
    return _status(visit) == VisitStatus.PRE_REGISTERED.value and has_any_role(user, STAFF_ROLES)


def can_check_out(visit: Visit, user: Optional[User]) -> bool:
    return _status(visit) == VisitStatus.CHECKED_IN.value and has_any_role(user, STAFF_ROLES)


def search_visits(visits: Iterable[Visit], term: Optional[str]) -> List[Visit]:
    """Case-insensitive match on visitor name, company or purpose"""
    visits = list(visits)
    if not term:
        return visits
    needle = term.lower()
    return [
        v for v in visits
        if any(needle in (field or "").lower()
               for field in (v.first_name, v.last_name, v.company, v.purpose))
    ]


# ==================== QR check-in flow ====================

class FlowState(str, Enum):
    READY = "ready"
    VALIDATED = "validated"
    CHECKED_IN = "checked_in"
    FAILED = "failed"


class QrCheckInFlow:
    """
    Scan -> validate -> confirm sequence for QR check-in.

    `scan` resolves the token to its invitation; `confirm` performs the
    check-in and issues the badge. The token is single use: it is cleared
    after every confirmation attempt.
    """

    def __init__(
        self,
        service: Optional[VisitorService] = None,
        tenant: Optional[Tenant] = None
    ):
        self.service = service or visitor_service
        self.tenant = tenant
        self.reset()

    def reset(self) -> None:
        self.state = FlowState.READY
        self.token: Optional[str] = None
        self.invitation: Optional[Invitation] = None
        self.visit: Optional[Visit] = None
        self.badge: Optional[Badge] = None
        self.scan_error: Optional[str] = None
        self.error: Optional[str] = None
        self.success: Optional[str] = None
        self.status_message = "Ready to scan"

    cancel = reset

    @property
    def default_badge_type(self) -> str:
        badge_type = self.tenant.default_badge_type if self.tenant else None
        return getattr(badge_type, "value", badge_type) or BadgeType.PRINTED.value

    def scan(self, raw: str) -> Optional[Invitation]:
        """Validate a decoded QR payload against the backend"""
        self.reset()
        self.token = extract_qr_token(raw)

        try:
            invitation = self.service.get_visit_details_by_qr_token(self.token)
        except ConsoleError as e:
            self._fail_scan(str(e) or "Invalid QR code or validation failed.")
            return None

        if not invitation:
            self._fail_scan("QR code validation returned no visit data.")
            return None

        self.invitation = invitation
        self.state = FlowState.VALIDATED
        self.status_message = "QR code validated successfully! Confirm check-in."
        return invitation

    def confirm(self, location: str = DEFAULT_LOCATION, badge_type: Optional[str] = None) -> Optional[Visit]:
        """Check the scanned visitor in; returns the visit or None on failure"""
        if not self.token:
            self._fail("Original QR token not found. Please scan again.")
            return None

        badge_type = badge_type or self.default_badge_type
        self.error = None
        self.success = None

        try:
            visit, badge = self.service.qr_check_in_visitor(self.token, location, badge_type)
            if visit is None:
                self._fail("QR check-in returned no visit data after processing.")
                return None

            self.visit = visit
            self.badge = badge
            self.state = FlowState.CHECKED_IN
            self.success = f"{visit.visitor_name} checked in successfully via QR code."
            logger.info(f"QR check-in completed for visit {visit.id}")
            return visit
        except ConsoleError as e:
            self._fail(str(e) or "Failed to check in visitor via QR code.")
            return None
        finally:
            self.token = None
            self.scan_error = None
            self.status_message = "Ready to scan"

    def _fail_scan(self, message: str) -> None:
        logger.warning(f"QR validation failed: {message}")
        self.scan_error = message
        self.state = FlowState.FAILED
        self.status_message = "QR code validation failed."

    def _fail(self, message: str) -> None:
        logger.warning(f"QR check-in failed: {message}")
        self.error = message
        self.state = FlowState.FAILED

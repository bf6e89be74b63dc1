import re
import logging
import requests
from typing import Optional, Dict, Any

from .config import settings
from .exceptions import APIError, AuthError

logger = logging.getLogger(__name__)

# Legacy paths still used by a few callers, mapped onto the current routes
_IDENTITY_PROVIDERS_PATH = re.compile(r"^/api/tenants/([^/?]+)/identity-providers$")
_ACS_TEST_PATH = re.compile(r"^/api/acs/configurations/([^/?]+)/test$")


class APIClient:
    """Shared HTTP client for the visitor management REST API"""

    def __init__(
        self,
        base_url: str = settings.API_BASE_URL,
        token: Optional[str] = settings.API_TOKEN,
        timeout: int = settings.REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self._base_url

    def get_base_url(self) -> str:
        return self._base_url

    def set_token(self, token: Optional[str]) -> None:
        self._token = token

    def get_token(self) -> Optional[str]:
        return self._token

    def _get_headers(
        self,
        skip_auth: bool = False,
        extra: Optional[Dict[str, str]] = None
    ) -> Dict[str, str]:
        """Get headers including auth token if available"""
        headers = {"Content-Type": "application/json"}

        if self._token and not skip_auth:
            headers["Authorization"] = f"Bearer {self._token}"

        if extra:
            headers.update(extra)

        return headers

    @staticmethod
    def _normalize_endpoint(endpoint: str) -> str:
        match = _IDENTITY_PROVIDERS_PATH.match(endpoint)
        if match:
            return f"/api/identity-providers?tenantId={match.group(1)}"

        match = _ACS_TEST_PATH.match(endpoint)
        if match:
            return f"/api/acs/test-connection?configId={match.group(1)}"

        return endpoint

    def _log_request(self, method: str, endpoint: str, skip_auth: bool) -> None:
        if self._token and not skip_auth:
            logger.debug(f"{method} {endpoint} (token {self._token[:10]}...)")
        else:
            logger.debug(f"{method} {endpoint} (no auth)")

    def _raise_for_response(self, response: requests.Response, endpoint: str) -> None:
        """Translate a non-2xx response into APIError/AuthError"""
        status = response.status_code
        reason = response.reason or ""

        try:
            body = response.json()
        except ValueError:
            raise APIError(
                f"HTTP {status}: {reason}",
                status_code=status,
                path=endpoint
            )

        if not isinstance(body, dict):
            body = {}

        message = body.get("message") or body.get("error") or "Something went wrong"
        code = body.get("code") or status
        path = body.get("path") or endpoint

        if code == "TOKEN_MISSING" or status == 401:
            logger.warning(f"Authentication failed for {path}: {message}")
            raise AuthError(
                f"{message} (Path: {path})",
                status_code=status,
                code=code,
                path=path,
                details=body
            )

        raise APIError(
            f"API Error: {code} ({reason}) - {message} (Path: {path})",
            status_code=status,
            code=code,
            path=path,
            details=body
        )

    def _send(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None,
        params: Optional[Dict] = None,
        skip_auth: bool = False,
        headers: Optional[Dict[str, str]] = None
    ) -> requests.Response:
        endpoint = self._normalize_endpoint(endpoint)
        url = f"{self._base_url}{endpoint}"
        self._log_request(method, endpoint, skip_auth)

        try:
            response = self.session.request(
                method=method,
                url=url,
                json=data,
                params=params,
                headers=self._get_headers(skip_auth, headers),
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {endpoint} failed: {e}")
            raise APIError(str(e) or f"Request to {endpoint} failed", path=endpoint) from e

        if not response.ok:
            self._raise_for_response(response, endpoint)

        return response

    def _request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None,
        params: Optional[Dict] = None,
        skip_auth: bool = False,
        headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """Make HTTP request to API and decode the JSON body"""
        response = self._send(method, endpoint, data, params, skip_auth, headers)

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise APIError(
                f"Invalid JSON response (status {response.status_code})",
                status_code=response.status_code,
                path=endpoint
            ) from e

    # ==================== Verbs ====================

    def get(
        self,
        endpoint: str,
        params: Optional[Dict] = None,
        skip_auth: bool = False,
        headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        return self._request("GET", endpoint, params=params, skip_auth=skip_auth, headers=headers)

    def post(
        self,
        endpoint: str,
        data: Optional[Dict] = None,
        skip_auth: bool = False,
        headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        return self._request("POST", endpoint, data=data, skip_auth=skip_auth, headers=headers)

    def put(
        self,
        endpoint: str,
        data: Optional[Dict] = None,
        skip_auth: bool = False,
        headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        return self._request("PUT", endpoint, data=data, skip_auth=skip_auth, headers=headers)

    def delete(
        self,
        endpoint: str,
        skip_auth: bool = False,
        headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        return self._request("DELETE", endpoint, skip_auth=skip_auth, headers=headers)

    def download(self, endpoint: str, params: Optional[Dict] = None) -> bytes:
        """Fetch a binary body (calendar or audit export)"""
        response = self._send("GET", endpoint, params=params)
        return response.content


def get_api_client() -> APIClient:
    """Get API client instance"""
    return APIClient()


api_client = get_api_client()

"""Validate the shared HTTP client: headers, routing and error envelope."""

import logging

import pytest
import requests

from visitor_console.api_client import APIClient
from visitor_console.exceptions import APIError, AuthError

from tests.factories import make_response


class TestRequests:
    """Validate request construction."""

    def test_get_sends_bearer_token_and_params(self, client, session):
        session.request.return_value = make_response(body={"visits": []})

        result = client.get("/api/visits", params={"page": 2})

        assert result == {"visits": []}
        kwargs = session.request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == "http://api.test/api/visits"
        assert kwargs["params"] == {"page": 2}
        assert kwargs["timeout"] == 5
        assert kwargs["headers"]["Authorization"] == "Bearer test-token-1234567890"
        assert kwargs["headers"]["Content-Type"] == "application/json"

    def test_skip_auth_omits_authorization(self, client, session):
        session.request.return_value = make_response(body={"qr_code_image": "data:"})

        client.get("/api/qr-code/image/inv-1", skip_auth=True)

        assert "Authorization" not in session.request.call_args.kwargs["headers"]

    def test_no_token_means_no_authorization(self, session):
        client = APIClient(base_url="http://api.test", token=None, session=session)
        session.request.return_value = make_response(body={})

        client.get("/api/facilities")

        assert "Authorization" not in session.request.call_args.kwargs["headers"]

    def test_extra_headers_are_merged(self, client, session):
        session.request.return_value = make_response(body={})

        client.post("/api/visits", data={"a": 1}, headers={"X-Tenant": "t1"})

        kwargs = session.request.call_args.kwargs
        assert kwargs["headers"]["X-Tenant"] == "t1"
        assert kwargs["json"] == {"a": 1}

    def test_set_token(self, client, session):
        session.request.return_value = make_response(body={})

        client.set_token("other")
        client.delete("/api/hosts/1")

        assert client.get_token() == "other"
        assert session.request.call_args.kwargs["headers"]["Authorization"] == "Bearer other"

    def test_base_url_trailing_slash_is_stripped(self, session):
        client = APIClient(base_url="http://api.test/", session=session)
        assert client.base_url == "http://api.test"
        assert client.get_base_url() == "http://api.test"

    def test_no_content_returns_empty_dict(self, client, session):
        session.request.return_value = make_response(status_code=204, reason="No Content")

        assert client.put("/api/tenants/1/deactivate", data={}) == {}

    def test_token_is_not_logged_in_full(self, client, session, caplog):
        session.request.return_value = make_response(body={})

        with caplog.at_level(logging.DEBUG, logger="visitor_console.api_client"):
            client.get("/api/visits")

        assert "test-token-1234567890" not in caplog.text
        assert "GET /api/visits" in caplog.text


class TestEndpointNormalization:
    """Validate rewriting of legacy paths."""

    def test_tenant_identity_providers(self):
        assert (
            APIClient._normalize_endpoint("/api/tenants/t-9/identity-providers")
            == "/api/identity-providers?tenantId=t-9"
        )

    def test_acs_connection_test(self):
        assert (
            APIClient._normalize_endpoint("/api/acs/configurations/c-3/test")
            == "/api/acs/test-connection?configId=c-3"
        )

    def test_other_paths_unchanged(self):
        assert APIClient._normalize_endpoint("/api/tenants/t-9") == "/api/tenants/t-9"

    def test_request_uses_rewritten_url(self, client, session):
        session.request.return_value = make_response(body={"identity_providers": []})

        client.get("/api/tenants/t-9/identity-providers")

        assert session.request.call_args.kwargs["url"] == "http://api.test/api/identity-providers?tenantId=t-9"


class TestErrors:
    """Validate translation of non-2xx responses."""

    def test_json_error_body(self, client, session):
        session.request.return_value = make_response(
            status_code=404,
            reason="Not Found",
            body={"message": "Visit not found", "code": "NOT_FOUND", "path": "/api/visits/9"},
        )

        with pytest.raises(APIError) as exc_info:
            client.get("/api/visits/9")

        error = exc_info.value
        assert str(error) == "API Error: NOT_FOUND (Not Found) - Visit not found (Path: /api/visits/9)"
        assert error.status_code == 404
        assert error.code == "NOT_FOUND"
        assert not isinstance(error, AuthError)

    def test_error_field_and_status_code_fallbacks(self, client, session):
        session.request.return_value = make_response(
            status_code=500, reason="Internal Server Error", body={"error": "boom"}
        )

        with pytest.raises(APIError) as exc_info:
            client.get("/api/audit/stats")

        assert str(exc_info.value) == "API Error: 500 (Internal Server Error) - boom (Path: /api/audit/stats)"

    def test_empty_json_body_uses_generic_message(self, client, session):
        session.request.return_value = make_response(status_code=400, reason="Bad Request", body={})

        with pytest.raises(APIError) as exc_info:
            client.post("/api/visits", data={})

        assert "Something went wrong" in str(exc_info.value)

    def test_non_json_body(self, client, session):
        session.request.return_value = make_response(
            status_code=502, reason="Bad Gateway", content=b"<html>bad gateway</html>"
        )

        with pytest.raises(APIError) as exc_info:
            client.get("/api/visits")

        assert str(exc_info.value) == "HTTP 502: Bad Gateway"

    def test_401_raises_auth_error(self, client, session):
        session.request.return_value = make_response(
            status_code=401, reason="Unauthorized", body={"message": "Invalid token"}
        )

        with pytest.raises(AuthError) as exc_info:
            client.get("/api/visits")

        assert str(exc_info.value) == "Invalid token (Path: /api/visits)"

    def test_token_missing_code_raises_auth_error(self, client, session):
        session.request.return_value = make_response(
            status_code=403, reason="Forbidden", body={"message": "Token required", "code": "TOKEN_MISSING"}
        )

        with pytest.raises(AuthError):
            client.get("/api/visits")

    @pytest.mark.parametrize("status", [400, 403, 404, 409, 422, 500, 503])
    def test_every_failure_has_a_message(self, client, session, status):
        session.request.return_value = make_response(status_code=status, reason="", body={})

        with pytest.raises(APIError) as exc_info:
            client.get("/api/anything")

        assert str(exc_info.value)

    def test_transport_failure(self, client, session):
        session.request.side_effect = requests.exceptions.ConnectionError("connection refused")

        with pytest.raises(APIError) as exc_info:
            client.get("/api/visits")

        assert "connection refused" in str(exc_info.value)

    def test_download_returns_bytes(self, client, session):
        session.request.return_value = make_response(content=b"BEGIN:VCALENDAR")

        data = client.download("/api/visits/export-calendar", params={"format": "ics"})

        assert data == b"BEGIN:VCALENDAR"
        assert session.request.call_args.kwargs["params"] == {"format": "ics"}

    def test_download_failure(self, client, session):
        session.request.return_value = make_response(status_code=403, reason="Forbidden", body={"message": "nope"})

        with pytest.raises(APIError):
            client.download("/api/audit/export")

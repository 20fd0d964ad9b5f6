"""
Tests for the limit-info client and its fail-open policy.
"""
import httpx
import pytest

from app.core.errors import UnknownResourceType
from app.services.limit_info_client import (
    LIMIT_INFO_FAIL_OPEN,
    FailOpenPolicy,
    LimitInfoClient,
    parse_limit_info,
)

BASE_URL = "http://api.test"
FAIL_OPEN = {"count": 0, "limit": -1}


def client_for(handler):
    return LimitInfoClient(base_url=BASE_URL, timeout=1.0, transport=httpx.MockTransport(handler))


def test_success_returns_body():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"count": 1, "limit": 2})

    info = client_for(handler).get_limit_info("establishments", 7, headers={"Authorization": "Bearer abc"})

    assert info == {"count": 1, "limit": 2}
    assert seen["url"] == "http://api.test/establishments/company/7/limit-info"
    assert seen["auth"] == "Bearer abc"


def test_url_uses_hyphenated_segment():
    client = LimitInfoClient(base_url=BASE_URL + "/")
    assert client.url_for("emission_points", 3) == "http://api.test/emission-points/company/3/limit-info"


def test_unknown_resource_type_raises():
    with pytest.raises(UnknownResourceType):
        LimitInfoClient(base_url=BASE_URL).url_for("invoices", 1)


def test_timeout_fails_open():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    assert client_for(handler).get_limit_info("warehouses", 1) == FAIL_OPEN


def test_connection_error_fails_open():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    assert client_for(handler).get_limit_info("contacts", 1) == FAIL_OPEN


@pytest.mark.parametrize("status_code", [401, 404, 500, 503])
def test_error_status_fails_open(status_code):
    def handler(request):
        return httpx.Response(status_code, json={"detail": "nope"})

    assert client_for(handler).get_limit_info("establishments", 1) == FAIL_OPEN


def test_non_json_body_fails_open():
    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>")

    assert client_for(handler).get_limit_info("establishments", 1) == FAIL_OPEN


@pytest.mark.parametrize("body", [
    {"count": 1},
    {"count": "1", "limit": 2},
    {"count": -1, "limit": 2},
    {"count": 1, "limit": -4},
    [1, 2],
])
def test_malformed_body_fails_open(body):
    def handler(request):
        return httpx.Response(200, json=body)

    assert client_for(handler).get_limit_info("establishments", 1) == FAIL_OPEN


def test_fail_open_is_logged(caplog):
    def handler(request):
        return httpx.Response(500)

    with caplog.at_level("WARNING", logger="app.services.limit_info_client"):
        client_for(handler).get_limit_info("establishments", 9)
    assert "company_id=9" in caplog.text


def test_custom_policy():
    """Test the fallback comes from the policy object."""
    def handler(request):
        return httpx.Response(502)

    client = LimitInfoClient(
        base_url=BASE_URL,
        policy=FailOpenPolicy(count=0, limit=0),
        transport=httpx.MockTransport(handler),
    )
    assert client.get_limit_info("establishments", 1) == {"count": 0, "limit": 0}


def test_default_policy():
    assert LIMIT_INFO_FAIL_OPEN.default == FAIL_OPEN


def test_parse_limit_info():
    assert parse_limit_info({"count": 0, "limit": -1, "extra": True}) == FAIL_OPEN
    assert parse_limit_info({"count": True, "limit": 1}) is None
    assert parse_limit_info(None) is None


def test_forwarded_credentials_are_not_logged(caplog):
    def handler(request):
        return httpx.Response(200, json={"count": 0, "limit": 5})

    with caplog.at_level("DEBUG", logger="app.services.limit_info_client"):
        client_for(handler).get_limit_info("establishments", 1, headers={"Authorization": "Bearer secret-token"})

    assert "secret-token" not in caplog.text
    assert "***REDACTED***" in caplog.text


def test_user_summary_success():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"total_count": 2, "total_limit": 5, "sellers_count": 1, "sellers_limit": 3})

    info = client_for(handler).get_user_limit_info(4)

    assert info == {"total_count": 2, "total_limit": 5, "sellers_count": 1, "sellers_limit": 3}
    assert seen["url"] == "http://api.test/company-users/company/4/limit-info"


def test_user_summary_fails_open_with_summary_shape():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    assert client_for(handler).get_user_limit_info(4) == {
        "total_count": 0,
        "total_limit": -1,
        "sellers_count": 0,
        "sellers_limit": -1,
    }


def test_user_summary_rejects_count_limit_body():
    """Test a {count, limit} body is malformed for the users summary."""
    def handler(request):
        return httpx.Response(200, json={"count": 1, "limit": 3})

    assert client_for(handler).get_user_limit_info(4)["total_limit"] == -1

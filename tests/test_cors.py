"""CORS policy tests."""

import pytest
from slb_core.gateway.request import Request, Response
from slb_core.middleware.cors import CORSPolicy, is_preflight
from slb_core.utils.config import CORSSettings


def make_policy(**kwargs) -> CORSPolicy:
    kwargs.setdefault("enabled", True)
    return CORSPolicy(CORSSettings(**kwargs))


def preflight(origin="https://x", **headers) -> Request:
    return Request(
        method="OPTIONS",
        path="/api/items",
        headers={
            "Origin": origin,
            "Access-Control-Request-Method": "POST",
            **headers,
        },
    )


class TestPreflightDetection:
    """Test preflight predicate."""

    def test_options_with_both_headers(self):
        """Test OPTIONS with Origin and request method is preflight."""
        assert is_preflight(preflight()) is True

    def test_header_names_case_insensitive(self):
        """Test header lookup ignores case."""
        request = Request(
            method="OPTIONS",
            path="/",
            headers={"origin": "https://x", "access-control-request-method": "GET"},
        )
        assert is_preflight(request) is True

    def test_missing_request_method(self):
        """Test OPTIONS without Access-Control-Request-Method."""
        request = Request(method="OPTIONS", path="/", headers={"Origin": "https://x"})
        assert is_preflight(request) is False

    def test_non_options(self):
        """Test non-OPTIONS methods are never preflight."""
        request = Request(
            method="GET",
            path="/",
            headers={"Origin": "https://x", "Access-Control-Request-Method": "GET"},
        )
        assert is_preflight(request) is False

    def test_empty_origin_is_not_preflight(self):
        """Test an empty Origin header counts as absent."""
        request = Request(
            method="OPTIONS",
            path="/",
            headers={"Origin": "", "Access-Control-Request-Method": "GET"},
        )
        assert is_preflight(request) is False


class TestOriginMatching:
    """Test allow-list matching."""

    def test_disabled_denies_everything(self):
        """Test CORS disabled never allows."""
        policy = make_policy(enabled=False, allow_all_origins=True)
        assert policy.is_origin_allowed("https://x") is False

    def test_wildcard_allows_any(self):
        """Test wildcard allows any origin."""
        policy = make_policy(allow_all_origins=True)
        assert policy.is_origin_allowed("https://anything.example") is True

    def test_empty_origin_never_allowed(self):
        """Test wildcard still rejects an empty or missing origin."""
        policy = make_policy(allow_all_origins=True, allow_credentials=True)
        assert policy.is_origin_allowed("") is False
        assert policy.is_origin_allowed(None) is False
        assert policy.resolve_allow_origin("") is None

    def test_exact_match_only(self):
        """Test exact, case-sensitive matching without normalization."""
        policy = make_policy(allow_origins=("https://x",))
        assert policy.is_origin_allowed("https://x") is True
        assert policy.is_origin_allowed("https://X") is False
        assert policy.is_origin_allowed("https://x:443") is False
        assert policy.is_origin_allowed("https://x/") is False


class TestAllowOriginResolution:
    """Test Access-Control-Allow-Origin value."""

    def test_wildcard_without_credentials(self):
        """Test wildcard without credentials yields "*"."""
        policy = make_policy(allow_all_origins=True)
        assert policy.resolve_allow_origin("https://x") == "*"

    def test_wildcard_with_credentials_echoes(self):
        """Test wildcard with credentials echoes the request origin."""
        policy = make_policy(allow_all_origins=True, allow_credentials=True)
        assert policy.resolve_allow_origin("https://x") == "https://x"

    def test_exact_list_echoes(self):
        """Test exact allow-list echoes the request origin."""
        policy = make_policy(allow_origins=("https://x", "https://y"))
        assert policy.resolve_allow_origin("https://y") == "https://y"

    def test_denied_is_none(self):
        """Test denied origins resolve to None."""
        policy = make_policy(allow_origins=("https://x",))
        assert policy.resolve_allow_origin("https://evil") is None


class TestPreflightResponse:
    """Test preflight responses."""

    def test_denied_preflight(self):
        """Test denied preflight is 403 with no CORS headers."""
        policy = make_policy(allow_origins=("https://y",))
        response = policy.build_preflight_response(preflight("https://x"))

        assert response.status == 403
        assert response.json_body() == {"error": "cors_denied"}
        assert response.get_header("Access-Control-Allow-Origin") is None

    def test_allowed_preflight_echoes_request_headers(self):
        """Test requested headers are echoed verbatim."""
        policy = make_policy(allow_origins=("https://x", "https://y"))
        response = policy.build_preflight_response(
            preflight("https://x", **{"Access-Control-Request-Headers": "Content-Type"})
        )

        assert response.status == 204
        assert response.body == b""
        assert response.get_header("Access-Control-Allow-Origin") == "https://x"
        assert response.get_header("Access-Control-Allow-Headers") == "Content-Type"
        assert response.get_header("Access-Control-Allow-Methods") == (
            "GET, POST, PUT, PATCH, DELETE, OPTIONS"
        )
        assert response.get_header("Access-Control-Max-Age") == "600"
        assert response.get_header("Access-Control-Allow-Credentials") is None

    def test_allowed_preflight_default_headers(self):
        """Test configured headers are used when none are requested."""
        policy = make_policy(allow_all_origins=True, max_age_sec=30)
        response = policy.build_preflight_response(preflight())

        assert response.get_header("Access-Control-Allow-Origin") == "*"
        assert response.get_header("Access-Control-Allow-Headers") == (
            "Content-Type, Authorization"
        )
        assert response.get_header("Access-Control-Max-Age") == "30"

    def test_credentials_header(self):
        """Test credentials header only when configured."""
        policy = make_policy(allow_all_origins=True, allow_credentials=True)
        response = policy.build_preflight_response(preflight("https://z"))

        assert response.get_header("Access-Control-Allow-Origin") == "https://z"
        assert response.get_header("Access-Control-Allow-Credentials") == "true"


class TestApplyToResponse:
    """Test CORS headers on actual responses."""

    def test_adds_headers(self):
        """Test allowed origin gets allow-origin, credentials and expose."""
        policy = make_policy(
            allow_origins=("https://x",),
            allow_credentials=True,
            expose_headers=("X-LB-Origin", "X-LB-Attempt"),
        )
        original = Response(status=200, body=b"ok", headers={"X-Test": "1"})
        response = policy.apply_to_response(original, "https://x")

        assert response.get_header("Access-Control-Allow-Origin") == "https://x"
        assert response.get_header("Access-Control-Allow-Credentials") == "true"
        assert response.get_header("Access-Control-Expose-Headers") == (
            "X-LB-Origin, X-LB-Attempt"
        )
        assert response.get_header("X-Test") == "1"

    def test_original_response_untouched(self):
        """Test the input response is not modified."""
        policy = make_policy(allow_all_origins=True)
        original = Response(status=200, headers={"X-Test": "1"})
        policy.apply_to_response(original, "https://x")

        assert original.headers == {"X-Test": "1"}

    @pytest.mark.parametrize("origin", [None, "", "https://evil"])
    def test_no_change_when_absent_or_denied(self, origin):
        """Test absent or denied origins leave headers unchanged."""
        policy = make_policy(allow_origins=("https://x",))
        original = Response(status=200, headers={"X-Test": "1"})
        response = policy.apply_to_response(original, origin)

        assert response.headers == {"X-Test": "1"}

    def test_no_credentials_header_when_disabled(self):
        """Test Allow-Credentials is omitted rather than "false"."""
        policy = make_policy(allow_all_origins=True)
        response = policy.apply_to_response(Response(), "https://x")

        assert response.get_header("Access-Control-Allow-Origin") == "*"
        assert response.get_header("Access-Control-Allow-Credentials") is None
        assert response.get_header("Access-Control-Expose-Headers") is None

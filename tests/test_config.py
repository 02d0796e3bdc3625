"""Configuration tests."""

import pytest
from slb_core.utils.config import (
    ConfigurationError,
    DEFAULT_FAIL_STATUSES,
    LoadBalancerConfig,
)
from slb_core.utils.helpers import parse_int, split_list


class TestOrigins:
    """Test ORIGINS parsing."""

    def test_origins_split_and_trimmed(self):
        """Test comma splitting drops blanks and whitespace."""
        config = LoadBalancerConfig.from_env(
            {"ORIGINS": " http://a:9001 , ,http://b:9002,"}
        )
        assert config.origins == ("http://a:9001", "http://b:9002")

    def test_missing_origins_is_fatal(self):
        """Test absent ORIGINS raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            LoadBalancerConfig.from_env({})
        assert exc_info.value.field_name == "ORIGINS"
        assert "ORIGINS" in str(exc_info.value)

    def test_blank_origins_is_fatal(self):
        """Test ORIGINS of only separators raises."""
        with pytest.raises(ConfigurationError):
            LoadBalancerConfig.from_env({"ORIGINS": " , ,"})


class TestDefaults:
    """Test default values."""

    def test_defaults(self):
        """Test defaults for every optional key."""
        config = LoadBalancerConfig.from_env({"ORIGINS": "http://a"})
        assert config.origin_timeout_ms == 8000
        assert config.retries == 1
        assert config.fail_statuses == frozenset({500, 504, 521, 522, 523})
        assert config.diag_path == "/__lb/health"
        assert config.cors.enabled is False
        assert config.cors.allow_origins == ()
        assert config.cors.allow_all_origins is False
        assert config.cors.allow_methods == (
            "GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS",
        )
        assert config.cors.allow_headers == ("Content-Type", "Authorization")
        assert config.cors.expose_headers == ()
        assert config.cors.allow_credentials is False
        assert config.cors.max_age_sec == 600

    def test_config_is_immutable(self):
        """Test resolved config cannot be modified."""
        config = LoadBalancerConfig.from_env({"ORIGINS": "http://a"})
        with pytest.raises(AttributeError):
            config.retries = 3


class TestClamping:
    """Test numeric clamping and fallback."""

    @pytest.mark.parametrize("raw,expected", [
        ("500", 1000),
        ("120000", 90000),
        ("2500", 2500),
        ("abc", 8000),
        ("", 8000),
    ])
    def test_timeout(self, raw, expected):
        """Test ORIGIN_TIMEOUT_MS clamps to [1000, 90000]."""
        config = LoadBalancerConfig.from_env(
            {"ORIGINS": "http://a", "ORIGIN_TIMEOUT_MS": raw}
        )
        assert config.origin_timeout_ms == expected

    @pytest.mark.parametrize("raw,expected", [
        ("-1", 0),
        ("9", 5),
        ("3", 3),
        ("three", 1),
    ])
    def test_retries(self, raw, expected):
        """Test RETRIES clamps to [0, 5]."""
        config = LoadBalancerConfig.from_env({"ORIGINS": "http://a", "RETRIES": raw})
        assert config.retries == expected

    def test_negative_max_age(self):
        """Test CORS_MAX_AGE_SEC never goes negative."""
        config = LoadBalancerConfig.from_env(
            {"ORIGINS": "http://a", "CORS_MAX_AGE_SEC": "-30"}
        )
        assert config.cors.max_age_sec == 0

    def test_origin_timeout_seconds(self):
        """Test timeout is exposed in seconds."""
        config = LoadBalancerConfig.from_env(
            {"ORIGINS": "http://a", "ORIGIN_TIMEOUT_MS": "1500"}
        )
        assert config.origin_timeout == 1.5


class TestFailStatuses:
    """Test FAIL_STATUSES parsing."""

    def test_custom_statuses(self):
        """Test custom list replaces the defaults."""
        config = LoadBalancerConfig.from_env(
            {"ORIGINS": "http://a", "FAIL_STATUSES": "500, 502,503"}
        )
        assert config.fail_statuses == frozenset({500, 502, 503})

    def test_non_numeric_tokens_dropped(self):
        """Test non-numeric tokens are ignored."""
        config = LoadBalancerConfig.from_env(
            {"ORIGINS": "http://a", "FAIL_STATUSES": "oops,503"}
        )
        assert config.fail_statuses == frozenset({503})

    def test_empty_falls_back_to_defaults(self):
        """Test a list with no numbers falls back to defaults."""
        config = LoadBalancerConfig.from_env(
            {"ORIGINS": "http://a", "FAIL_STATUSES": "x,y"}
        )
        assert config.fail_statuses == DEFAULT_FAIL_STATUSES


class TestCORSSettings:
    """Test CORS key parsing."""

    def test_wildcard_sentinel(self):
        """Test "*" selects the wildcard."""
        config = LoadBalancerConfig.from_env(
            {"ORIGINS": "http://a", "CORS_ALLOW_ORIGINS": " * "}
        )
        assert config.cors.allow_all_origins is True
        assert config.cors.allow_origins == ()

    def test_star_inside_list_is_not_wildcard(self):
        """Test "*" only counts when it is the whole value."""
        config = LoadBalancerConfig.from_env(
            {"ORIGINS": "http://a", "CORS_ALLOW_ORIGINS": "https://x,*"}
        )
        assert config.cors.allow_all_origins is False
        assert config.cors.allow_origins == ("https://x", "*")

    @pytest.mark.parametrize("raw,expected", [
        ("true", True),
        ("TRUE", True),
        ("yes", False),
        ("1", False),
        ("", False),
    ])
    def test_booleans(self, raw, expected):
        """Test booleans are true only for "true"."""
        config = LoadBalancerConfig.from_env({
            "ORIGINS": "http://a",
            "CORS_ENABLED": raw,
            "CORS_ALLOW_CREDENTIALS": raw,
        })
        assert config.cors.enabled is expected
        assert config.cors.allow_credentials is expected

    def test_lists(self):
        """Test method/header lists are split and trimmed."""
        config = LoadBalancerConfig.from_env({
            "ORIGINS": "http://a",
            "CORS_ALLOW_METHODS": "GET, POST",
            "CORS_ALLOW_HEADERS": "X-Token",
            "CORS_EXPOSE_HEADERS": "X-LB-Origin, X-LB-Attempt",
        })
        assert config.cors.allow_methods == ("GET", "POST")
        assert config.cors.allow_headers == ("X-Token",)
        assert config.cors.expose_headers == ("X-LB-Origin", "X-LB-Attempt")


class TestHelpers:
    """Test parsing helpers."""

    def test_parse_int_leading_digits(self):
        """Test leading-integer parsing."""
        assert parse_int("12ms", 0) == 12
        assert parse_int("  42", 0) == 42
        assert parse_int("ms12", 7) == 7
        assert parse_int(None, 7) == 7

    def test_split_list(self):
        """Test list splitting."""
        assert split_list("a, b,,c ") == ["a", "b", "c"]
        assert split_list("") == []

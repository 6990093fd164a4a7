# pyright: reportUnknownMemberType=false
import pytest

from courier.networking.config import CacheConfig, ClientConfig
from courier.networking.errors import ApiErrorResponse, ConfigurationError


def test_config_defaults_are_stable():
    config = ClientConfig(base_url="https://api.example.com")

    assert dict(config.default_headers) == {}
    assert config.timeout_seconds == 60.0
    assert config.cache is None
    assert config.enable_logging is False
    assert config.error_model is ApiErrorResponse
    assert config.user_agent is None
    assert config.verify_tls is True
    assert config.allow_redirects is True


def test_config_default_headers_are_independent():
    first = ClientConfig(base_url="https://api.example.com")
    second = ClientConfig(base_url="https://api.example.com")

    assert first.default_headers is not second.default_headers


def test_config_default_headers_are_immutable():
    config = ClientConfig(
        base_url="https://api.example.com", default_headers={"X-Test": "1"}
    )

    with pytest.raises(TypeError):
        config.default_headers["X-Test"] = "2"  # type: ignore[index]


def test_config_copies_external_headers_input():
    headers = {"X-Test": "1"}
    config = ClientConfig(
        base_url="https://api.example.com", default_headers=headers
    )
    headers["X-Test"] = "2"

    assert config.default_headers["X-Test"] == "1"


@pytest.mark.parametrize(
    "base_url",
    ["", "api.example.com", "/v1/users", "ftp://example.com", "https://"],
)
def test_config_rejects_invalid_base_url(base_url):
    with pytest.raises(ConfigurationError):
        ClientConfig(base_url=base_url)


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        ClientConfig(base_url="not a url")


def test_config_rejects_non_positive_timeouts():
    with pytest.raises(ConfigurationError):
        ClientConfig(base_url="https://api.example.com", timeout_seconds=0)
    with pytest.raises(ConfigurationError):
        ClientConfig(base_url="https://api.example.com", timeout_seconds=-1)


def test_cache_config_defaults_and_capacity_selection(tmp_path):
    memory = CacheConfig()
    disk = CacheConfig(disk_path=str(tmp_path))

    assert memory.memory_capacity_bytes == 10_000_000
    assert memory.disk_capacity_bytes == 50_000_000
    assert memory.capacity_bytes == 10_000_000
    assert disk.capacity_bytes == 50_000_000


def test_cache_config_rejects_negative_capacity():
    with pytest.raises(ConfigurationError):
        CacheConfig(memory_capacity_bytes=-1)
    with pytest.raises(ConfigurationError):
        CacheConfig(disk_capacity_bytes=-1)


def test_transport_settings_ignore_per_request_fields():
    base = ClientConfig(base_url="https://api.example.com")
    other = ClientConfig(
        base_url="https://other.example.com",
        default_headers={"X-Test": "1"},
        timeout_seconds=3.0,
        enable_logging=True,
    )

    assert base.transport_settings() == other.transport_settings()


def test_transport_settings_track_session_fields():
    base = ClientConfig(base_url="https://api.example.com")

    assert (
        base.transport_settings()
        != ClientConfig(
            base_url="https://api.example.com", verify_tls=False
        ).transport_settings()
    )
    assert (
        base.transport_settings()
        != ClientConfig(
            base_url="https://api.example.com", cache=CacheConfig()
        ).transport_settings()
    )

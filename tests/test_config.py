from __future__ import annotations

import pytest

from pyhubsync.config import HubSyncConfig
from pyhubsync.exceptions import HubSyncConfigError

_ENV_KEYS = (
    "HUBSYNC_URL",
    "HUBSYNC_HOST",
    "HUBSYNC_LOCAL_PORT",
    "HUBSYNC_DEVICE_COUNT",
    "HUBSYNC_DEBOUNCE_DELAY",
    "HUBSYNC_REQUEST_TIMEOUT",
    "HUBSYNC_MARK_SENT_ON_FAILURE",
    "HUBSYNC_PULL_ON_START",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = HubSyncConfig(url="http://hub/")

    assert config.local_port == 8080
    assert config.device_count == 16
    assert config.debounce_delay == 0.02
    assert config.request_timeout is None
    assert config.mark_sent_on_failure is False
    config.validate()


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HUBSYNC_URL", "http://10.0.0.5/")
    monkeypatch.setenv("HUBSYNC_LOCAL_PORT", "9000")
    monkeypatch.setenv("HUBSYNC_DEVICE_COUNT", "4")
    monkeypatch.setenv("HUBSYNC_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("HUBSYNC_MARK_SENT_ON_FAILURE", "yes")
    monkeypatch.setenv("HUBSYNC_PULL_ON_START", "off")

    config = HubSyncConfig.from_env()

    assert config.url == "http://10.0.0.5/"
    assert config.local_port == 9000
    assert config.device_count == 4
    assert config.request_timeout == 2.5
    assert config.mark_sent_on_failure is True
    assert config.pull_on_start is False


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HUBSYNC_URL", "http://10.0.0.5/")
    monkeypatch.setenv("HUBSYNC_DEVICE_COUNT", "4")

    config = HubSyncConfig.from_env(url="http://other/", device_count=8)

    assert config.url == "http://other/"
    assert config.device_count == 8


def test_from_env_requires_url() -> None:
    with pytest.raises(HubSyncConfigError, match="HUBSYNC_URL"):
        HubSyncConfig.from_env()


def test_from_env_rejects_bad_integer(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HUBSYNC_URL", "http://hub/")
    monkeypatch.setenv("HUBSYNC_LOCAL_PORT", "eighty")

    with pytest.raises(HubSyncConfigError):
        HubSyncConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"url": ""},
        {"url": "http://hub/", "device_count": 0},
        {"url": "http://hub/", "local_port": 70000},
        {"url": "http://hub/", "debounce_delay": -1.0},
        {"url": "http://hub/", "request_timeout": 0.0},
    ],
)
def test_validate_rejects_bad_values(kwargs: dict[str, object]) -> None:
    with pytest.raises(HubSyncConfigError):
        HubSyncConfig(**kwargs).validate()  # type: ignore[arg-type]


def test_endpoint_url_joins_cleanly() -> None:
    assert HubSyncConfig(url="http://hub/").endpoint_url("set_status") == "http://hub/set_status"
    assert HubSyncConfig(url="http://hub").endpoint_url("/get_status") == "http://hub/get_status"

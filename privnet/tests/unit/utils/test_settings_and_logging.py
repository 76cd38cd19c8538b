from __future__ import annotations

import logging

import pytest

from privnet.adapters.http_client import DEFAULT_BASE_URL
from privnet.utils import logging as logging_utils
from privnet.utils.settings import ClientSettings


@pytest.fixture
def urllib3_logger():
    logger = logging.getLogger("urllib3")
    previous = logger.level
    logger.setLevel(logging.WARNING)
    yield logger
    logger.setLevel(previous)


def test_settings_from_env_reads_prefixed_variables() -> None:
    settings = ClientSettings.from_env(
        {
            "PRIVNET_API_KEY": " abc123 ",
            "PRIVNET_BASE_URL": "https://api.staging.test",
            "PRIVNET_TIMEOUT_S": "2.5",
        }
    )

    assert settings.api_key == "abc123"
    assert settings.base_url == "https://api.staging.test"
    assert settings.request_timeout_s == 2.5
    cfg = settings.http_config()
    assert cfg.base_url == "https://api.staging.test"
    assert cfg.request_timeout_s == 2.5


@pytest.mark.parametrize("timeout", ["", "soon", "-1", "0"])
def test_settings_fall_back_on_blank_or_invalid_values(timeout: str) -> None:
    settings = ClientSettings.from_env({"PRIVNET_BASE_URL": "  ", "PRIVNET_TIMEOUT_S": timeout})

    assert settings.api_key == ""
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.request_timeout_s == 10


def test_configure_root_honours_level_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PRIVNET_LOG_LEVEL", "error")
    monkeypatch.delenv("PRIVNET_DEBUG", raising=False)

    level = logging_utils.configure_root(logging.INFO)

    assert level == logging.ERROR
    assert logging.getLogger().level == logging.ERROR
    assert logging_utils.level_name(level) == "ERROR"
    assert not logging_utils.env_requests_debug()


def test_debug_flag_forces_debug(
    monkeypatch: pytest.MonkeyPatch, urllib3_logger: logging.Logger
) -> None:
    monkeypatch.delenv("PRIVNET_LOG_LEVEL", raising=False)
    monkeypatch.setenv("PRIVNET_DEBUG", "yes")

    assert logging_utils.env_requests_debug()
    assert logging_utils.configure_root("WARNING") == logging.DEBUG
    assert urllib3_logger.level == logging.DEBUG


def test_explicit_default_level_leaves_urllib3_alone(
    monkeypatch: pytest.MonkeyPatch, urllib3_logger: logging.Logger
) -> None:
    monkeypatch.delenv("PRIVNET_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PRIVNET_DEBUG", raising=False)

    assert logging_utils.configure_root(logging.DEBUG) == logging.DEBUG
    assert urllib3_logger.level == logging.WARNING

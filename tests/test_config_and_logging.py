"""Tests for configuration models, the logging plumbing and the retry adapter."""

import logging

import pytest
from pydantic import ValidationError

from personalia.adapters.logging_adapter import LoggingAdapter
from personalia.adapters.retry_tenacity import TenacityRetryAdapter
from personalia.core.config import PollingConfig
from personalia.core.exceptions import TransientPersonaliaError
from personalia.core.logging_config import configure_logging, request_id_var
from personalia.core.models.classified_error import ClassifiedError, Disposition
from personalia.core.settings import NoOpLogger, PersonaliaSettings, logger, set_logger


# --- Configuration ---

def test_polling_config_defaults():
    config = PollingConfig()

    assert config.max_attempts == 30
    assert config.interval_ms == 2000


@pytest.mark.parametrize("field", ["max_attempts", "interval_ms"])
def test_polling_config_rejects_non_positive(field):
    with pytest.raises(ValidationError):
        PollingConfig(**{field: 0})


def test_polling_config_is_frozen():
    config = PollingConfig()
    with pytest.raises(ValidationError):
        config.max_attempts = 3


def test_polling_config_from_settings():
    settings = PersonaliaSettings(PERSONALIA_POLL_MAX_ATTEMPTS=4, PERSONALIA_POLL_INTERVAL_MS=100)

    config = PollingConfig.from_app_settings(settings)

    assert config.max_attempts == 4
    assert config.interval_ms == 100


def test_settings_reject_non_positive_interval():
    with pytest.raises(ValidationError):
        PersonaliaSettings(PERSONALIA_POLL_INTERVAL_MS=0)


def test_settings_hide_api_key():
    settings = PersonaliaSettings(PERSONALIA_API_KEY="top-secret")

    assert "top-secret" not in repr(settings)
    assert settings.PERSONALIA_API_KEY.get_secret_value() == "top-secret"


# --- Logging ---

def test_logging_adapter_accepts_level_names():
    adapter = LoggingAdapter("personalia.test", "debug")

    assert adapter.logger.level == logging.DEBUG


def test_configure_logging_injects_request_id(capsys):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    configure_logging("INFO", fmt="%(request_id)s %(message)s")
    token = request_id_var.set("req-77")
    try:
        logging.getLogger("personalia.test").info("hello")
    finally:
        request_id_var.reset(token)
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)

    assert "req-77 hello" in capsys.readouterr().out


def test_set_logger_swaps_backend():
    original = logger.target
    try:
        set_logger(NoOpLogger())
        logger.info("discarded")
        assert isinstance(logger.target, NoOpLogger)
    finally:
        set_logger(original)


# --- Retry adapter ---

def _transient():
    return TransientPersonaliaError(
        ClassifiedError(message="No response received from the server", disposition=Disposition.retryable)
    )


@pytest.mark.asyncio
async def test_retry_adapter_retries_transient_errors():
    calls = []

    async def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise _transient()
        return "ok"

    retry = TenacityRetryAdapter(attempts=3, wait_initial=0.001, wait_max=0.01)

    assert await retry.execute(flaky) == "ok"
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_retry_adapter_reraises_after_exhaustion():
    async def always_failing():
        raise _transient()

    retry = TenacityRetryAdapter(attempts=2, wait_initial=0.001, wait_max=0.01)

    with pytest.raises(TransientPersonaliaError):
        await retry.execute(always_failing)


@pytest.mark.asyncio
async def test_retry_adapter_does_not_retry_other_errors():
    calls = []

    async def broken():
        calls.append(1)
        raise KeyError("nope")

    retry = TenacityRetryAdapter(attempts=5, wait_initial=0.001, wait_max=0.01)

    with pytest.raises(KeyError):
        await retry.execute(broken)
    assert len(calls) == 1

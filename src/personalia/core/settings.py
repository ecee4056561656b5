# Logging adapter for library-wide logging
from personalia.adapters.logging_adapter import LoggingAdapter

from pydantic import HttpUrl, SecretStr, field_validator
from pydantic_settings import BaseSettings
from rich import print

from personalia.core.interfaces.logging import LoggingPort

# using pydantic_settings to manage environment variables
# and do automatic type casting in a central place
class PersonaliaSettings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore"
    }
    PERSONALIA_API_KEY: SecretStr | None = None
    PERSONALIA_BASE_URL: HttpUrl = HttpUrl("https://api.personalia.io")
    PERSONALIA_LOG_LEVEL: str = "INFO"
    PERSONALIA_POLL_MAX_ATTEMPTS: int = 30
    PERSONALIA_POLL_INTERVAL_MS: int = 2000
    PERSONALIA_REQUEST_TIMEOUT: float = 10.0  # seconds
    PERSONALIA_READ_RETRY_ATTEMPTS: int = 3
    # used by the examples only
    PERSONALIA_TEMPLATE_ID: str | None = None

    @property
    def base_url(self) -> str:
        """Base URL without trailing slash, ready for path concatenation"""
        return str(self.PERSONALIA_BASE_URL).rstrip("/")

    def print_settings(self, logger: LoggingPort):
        """Prints the settings for debugging purposes"""
        logger.info("Personalia Settings:")
        print(self)

    @field_validator("PERSONALIA_POLL_MAX_ATTEMPTS", "PERSONALIA_POLL_INTERVAL_MS", "PERSONALIA_READ_RETRY_ATTEMPTS")
    @classmethod
    def ensure_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value


class NoOpLogger(LoggingPort):
    """Logger that discards everything; handy for embedding and tests."""

    def info(self, msg: str, *args):
        pass

    def warning(self, msg: str, *args):
        pass

    def error(self, msg: str, *args):
        pass

    def debug(self, msg: str, *args):
        pass


class _LoggerProxy(LoggingPort):
    """Stable module-level handle so `from ... import logger` sees set_logger() swaps."""

    def __init__(self, target: LoggingPort):
        self.target = target

    def info(self, msg: str, *args):
        self.target.info(msg, *args)

    def warning(self, msg: str, *args):
        self.target.warning(msg, *args)

    def error(self, msg: str, *args):
        self.target.error(msg, *args)

    def debug(self, msg: str, *args):
        self.target.debug(msg, *args)


app_settings = PersonaliaSettings()

logger = _LoggerProxy(LoggingAdapter("personalia", app_settings.PERSONALIA_LOG_LEVEL))


def set_logger(new_logger: LoggingPort) -> None:
    """Swap the logging backend used by the core."""
    logger.target = new_logger

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from .errors import ConfigurationError

load_dotenv()  # loads .env into environment

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    currency_places: int = 0
    max_tenure_months: int = 600  # 50 years
    scenario_increase_percent: float = 0.25
    scenario_decrease_percent: float = 0.1
    log_level: str = "WARNING"


def _env(name, cast, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name}={raw!r} is not a valid {cast.__name__}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    settings = Settings(
        currency_places=_env("EMI_CURRENCY_PLACES", int, Settings.currency_places),
        max_tenure_months=_env("EMI_MAX_TENURE_MONTHS", int, Settings.max_tenure_months),
        scenario_increase_percent=_env(
            "EMI_SCENARIO_INCREASE_PERCENT", float, Settings.scenario_increase_percent
        ),
        scenario_decrease_percent=_env(
            "EMI_SCENARIO_DECREASE_PERCENT", float, Settings.scenario_decrease_percent
        ),
        log_level=_env("EMI_LOG_LEVEL", str, Settings.log_level).upper(),
    )

    if settings.currency_places < 0:
        raise ConfigurationError("EMI_CURRENCY_PLACES must be >= 0")
    if settings.max_tenure_months < 1:
        raise ConfigurationError("EMI_MAX_TENURE_MONTHS must be >= 1")

    return settings


def configure_logging(level=None):
    level = (level or get_settings().log_level).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"Unknown log level {level!r}")
    logging.basicConfig(level=level, format=LOG_FORMAT)

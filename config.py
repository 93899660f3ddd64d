"""
Konfiguracja suite — wszystko z env / .env.

Kazda wartosc ma sensowny default, wiec lokalnie wystarczy:
    python main.py --headless
"""
import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

DEFAULT_BASE_URL = "https://magento.softwaretestingboard.com"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    return int(value)


@dataclass(frozen=True)
class Timeouts:
    """Limity czasu (ms) dla wszystkich oczekiwan — zadne czekanie nie jest bez limitu."""
    action_ms: int = 10_000
    navigation_ms: int = 30_000
    spinner_ms: int = 10_000
    consent_probe_ms: int = 1_500
    consent_hide_ms: int = 10_000
    minicart_ms: int = 5_000
    settle_ms: int = 5_000
    region_ms: int = 5_000
    confirmation_ms: int = 30_000


@dataclass(frozen=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    headless: bool = True
    browser: str = "chromium"
    slow_mo_ms: int = 0
    workers: int = 2
    locale: str = "en_US"
    consent_strategy: str = "accept"   # accept / manage / block
    screenshot_dir: str = "screenshots"
    database_url: str = "sqlite:///./storefront_runs.db"
    timeouts: Timeouts = field(default_factory=Timeouts)


def load_settings() -> Settings:
    timeouts = Timeouts(
        action_ms=_env_int("TIMEOUT_ACTION_MS", Timeouts.action_ms),
        navigation_ms=_env_int("TIMEOUT_NAVIGATION_MS", Timeouts.navigation_ms),
        minicart_ms=_env_int("TIMEOUT_MINICART_MS", Timeouts.minicart_ms),
        settle_ms=_env_int("TIMEOUT_SETTLE_MS", Timeouts.settle_ms),
    )
    return Settings(
        base_url=os.getenv("STOREFRONT_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        headless=_env_bool("HEADLESS", True),
        browser=os.getenv("BROWSER", "chromium"),
        slow_mo_ms=_env_int("SLOW_MO_MS", 0),
        workers=_env_int("WORKERS", 2),
        locale=os.getenv("LOCALE", "en_US"),
        consent_strategy=os.getenv("CONSENT_STRATEGY", "accept"),
        screenshot_dir=os.getenv("SCREENSHOT_DIR", "screenshots"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./storefront_runs.db"),
        timeouts=timeouts,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from playwright.async_api import Error as PlaywrightError

from core.errors import TransientUIError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 3
DEFAULT_BACKOFF_MS = 1000

# FieldNotFoundError / InvalidOptionError celowo poza lista — zmiany struktury nie ponawiamy
RETRYABLE = (PlaywrightError, TransientUIError)


async def retry_action(
    action: Callable[[], Awaitable[T]],
    attempts: int = DEFAULT_ATTEMPTS,
    backoff_ms: int = DEFAULT_BACKOFF_MS,
    retry_on: tuple[type[BaseException], ...] = RETRYABLE,
) -> T:
    """
    Ponawia niestabilna akcje maksymalnie `attempts` razy ze stalym odstepem.
    Po ostatniej porazce rzuca oryginalny wyjatek.
    """
    if attempts < 1:
        raise ValueError("attempts musi byc >= 1")

    for attempt in range(1, attempts + 1):
        try:
            return await action()
        except retry_on as e:
            if attempt == attempts:
                raise
            logger.info(f"Proba {attempt}/{attempts} nieudana ({e.__class__.__name__}: {e}) — ponawiam")
            await asyncio.sleep(backoff_ms / 1000)

"""
StabilityWaiter — czeka az element przestanie sie ruszac.

Co 100 ms pobiera bounding box elementu. Stabilny = 3 kolejne identyczne
probki. Kazda roznica zeruje licznik. Brak boxa (element ukryty / odpiety)
to zawsze "rozne" — brak elementu to nie to samo co brak ruchu.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable

from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from core.errors import WaitTimeoutError

logger = logging.getLogger(__name__)

SAMPLE_INTERVAL_MS = 100
REQUIRED_STABLE_SAMPLES = 3


@dataclass(frozen=True)
class ElementSample:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_box(cls, box: dict | None) -> "ElementSample | None":
        if not box:
            return None
        return cls(x=box["x"], y=box["y"], width=box["width"], height=box["height"])


def same_geometry(a: ElementSample | None, b: ElementSample | None) -> bool:
    # Dwa brakujace boxy NIE sa rowne
    if a is None or b is None:
        return False
    return a == b


class StabilityWaiter:
    def __init__(
        self,
        page: Page,
        interval_ms: int = SAMPLE_INTERVAL_MS,
        required_samples: int = REQUIRED_STABLE_SAMPLES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.page = page
        self.interval_ms = interval_ms
        self.required_samples = required_samples
        self._clock = clock

    async def wait_until_stable(self, target: str | Locator, timeout_ms: int = 10_000) -> ElementSample:
        """
        Zwraca ostatnia probke gdy element jest stabilny.
        Rzuca WaitTimeoutError dokladnie po uplywie timeout_ms.
        """
        locator = self.page.locator(target).first if isinstance(target, str) else target
        deadline = self._clock() + timeout_ms / 1000

        previous = await self._sample(locator, min(self.interval_ms, timeout_ms))
        stable_count = 0

        while stable_count < self.required_samples:
            remaining_ms = (deadline - self._clock()) * 1000
            if remaining_ms <= 0:
                raise WaitTimeoutError(f"Element {target!s} niestabilny", timeout_ms)

            await self.page.wait_for_timeout(min(self.interval_ms, remaining_ms))
            # probka nie moze wyjsc poza deadline; timeout=0 w Playwright to brak limitu
            sample_ms = max(1, min(self.interval_ms, (deadline - self._clock()) * 1000))
            current = await self._sample(locator, sample_ms)

            if same_geometry(previous, current):
                stable_count += 1
            else:
                stable_count = 0
                previous = current

        logger.debug(f"Element {target!s} stabilny: {previous}")
        return previous

    async def _sample(self, locator: Locator, timeout_ms: float) -> ElementSample | None:
        try:
            box = await locator.bounding_box(timeout=timeout_ms)
        except PlaywrightTimeoutError:
            return None
        return ElementSample.from_box(box)

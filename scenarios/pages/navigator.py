"""
PageNavigator — wspolne mozliwosci wszystkich page objects.

Page objects NIE dziedzicza po klasie bazowej — dostaja navigator w
konstruktorze i korzystaja tylko z kontraktu `Navigation`. Selektory
kazdej strony zmieniaja sie niezaleznie, wiec nie ma czego dziedziczyc.
"""
import logging
import re
import time
from dataclasses import replace
from pathlib import Path
from typing import Callable, Protocol, runtime_checkable

from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from core.consent import (
    DEFAULT_STRATEGY, MANAGE_OPTIONS_STRATEGY, ConsentDismisser,
)
from core.errors import FieldNotFoundError
from core.stability import StabilityWaiter
from scenarios.context import ScenarioContext

default_logger = logging.getLogger(__name__)

Selector = tuple


@runtime_checkable
class Navigation(Protocol):
    async def navigate(self, path: str = "") -> None: ...
    async def await_load_complete(self) -> None: ...
    async def await_spinner_hidden(self, timeout_ms: int | None = None) -> None: ...
    async def scroll_into_view(self, locator: Locator) -> None: ...


class PageNavigator:
    SPINNER = ('locator', '.loading-mask')

    def __init__(
        self,
        page: Page,
        context: ScenarioContext,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.page = page
        self.context = context
        self.logger = logger or default_logger
        self.timeouts = context.timeouts
        self.stability = StabilityWaiter(page, clock=clock)
        if context.consent_strategy == 'manage':
            strategy = MANAGE_OPTIONS_STRATEGY
        else:
            strategy = replace(
                DEFAULT_STRATEGY,
                modal_probe_ms=self.timeouts.consent_probe_ms,
                hide_timeout_ms=self.timeouts.consent_hide_ms,
            )
        self.consent = ConsentDismisser(page, strategy, clock=clock)

    # ── Lokator ───────────────────────────────────────────────────────────────

    def loc(self, selector: Selector) -> Locator:
        """
        Interpretuje tuple selektora i zwraca Playwright Locator.

        Formaty:
          ('locator',      'css_or_xpath')
          ('role',         'button',       {'name': 'Add to Cart'})
          ('text',         'Proceed',      {'exact': True})
          ('test_id',      'add-to-cart')
          ('label',        'Zip/Postal Code')
          ('placeholder',  'Search entire store here...')
        """
        kind = selector[0]

        if kind == 'locator':
            return self.page.locator(selector[1])
        elif kind == 'role':
            kwargs = selector[2] if len(selector) > 2 else {}
            return self.page.get_by_role(selector[1], **kwargs)
        elif kind == 'text':
            kwargs = selector[2] if len(selector) > 2 else {}
            return self.page.get_by_text(selector[1], **kwargs)
        elif kind == 'test_id':
            return self.page.get_by_test_id(selector[1])
        elif kind == 'label':
            return self.page.get_by_label(selector[1])
        elif kind == 'placeholder':
            return self.page.get_by_placeholder(selector[1])
        else:
            raise ValueError(f"Nieznany typ selektora: {kind}")

    async def first_visible(self, candidates: tuple[Selector, ...], timeout_ms: int | None = None) -> Locator | None:
        """
        Kaskada selektorow — DOM sklepu sie zmienia, wiec jeden element
        moze miec kilka wariantow. Zwraca pierwszy widoczny albo None.
        """
        timeout_ms = self.timeouts.action_ms if timeout_ms is None else timeout_ms
        window = 100
        waited = 0
        while True:
            for selector in candidates:
                locator = self.loc(selector).first
                if await locator.is_visible():
                    return locator
            if waited >= timeout_ms:
                return None
            step = min(window, timeout_ms - waited)
            await self.page.wait_for_timeout(step)
            waited += step

    async def actionable(self, selector: Selector, name: str, timeout_ms: int | None = None) -> Locator:
        """Element widoczny w limicie albo FieldNotFoundError."""
        timeout_ms = self.timeouts.action_ms if timeout_ms is None else timeout_ms
        locator = self.loc(selector).first
        try:
            await locator.wait_for(state='visible', timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise FieldNotFoundError(name, f"{selector[1]} ({timeout_ms} ms)") from e
        return locator

    # ── Desktop / mobile ──────────────────────────────────────────────────────

    @property
    def is_mobile(self) -> bool:
        return self.context.is_mobile

    @property
    def is_desktop(self) -> bool:
        return self.context.is_desktop

    # ── Nawigacja ─────────────────────────────────────────────────────────────

    async def navigate(self, path: str = "") -> None:
        url = self.context.url(path)
        self.log(f"Nawiguję do: {url}")
        await self.page.goto(url, wait_until='domcontentloaded', timeout=self.timeouts.navigation_ms)
        await self.await_load_complete()

    async def await_load_complete(self) -> None:
        """
        networkidle na sklepach z trackerami potrafi nie nastapic nigdy —
        wtedy schodzimy do domcontentloaded zamiast wywalac nawigacje.
        """
        try:
            await self.page.wait_for_load_state('networkidle', timeout=self.timeouts.navigation_ms)
        except PlaywrightTimeoutError:
            self.log("networkidle nie nastapil — czekam tylko na domcontentloaded")
            await self.page.wait_for_load_state('domcontentloaded', timeout=self.timeouts.navigation_ms)

    async def await_spinner_hidden(self, timeout_ms: int | None = None) -> None:
        timeout_ms = self.timeouts.spinner_ms if timeout_ms is None else timeout_ms
        for mask in await self.loc(self.SPINNER).all():
            await mask.wait_for(state='hidden', timeout=timeout_ms)

    async def scroll_into_view(self, locator: Locator) -> None:
        await locator.scroll_into_view_if_needed()

    async def wait_for_url(self, pattern: str | re.Pattern, timeout_ms: int | None = None) -> None:
        timeout_ms = self.timeouts.navigation_ms if timeout_ms is None else timeout_ms
        await self.page.wait_for_url(pattern, timeout=timeout_ms)

    async def wait_until_stable(self, selector: Selector, timeout_ms: int | None = None):
        timeout_ms = self.timeouts.action_ms if timeout_ms is None else timeout_ms
        return await self.stability.wait_until_stable(self.loc(selector).first, timeout_ms)

    async def dismiss_consent(self) -> bool:
        if self.context.consent_strategy == 'block':
            # blokada zakladana raz, przed pierwsza nawigacja (ScenarioExecutor / fixture)
            return False
        if self.context.consent_strategy == 'manage':
            return await self.consent.dismiss_with_manage_options()
        return await self.consent.dismiss()

    # ── Helpers ───────────────────────────────────────────────────────────────

    async def safe_click(self, selector: Selector):
        el = self.loc(selector).first
        await el.scroll_into_view_if_needed()
        await el.click()

    async def safe_fill(self, selector: Selector, value: str):
        el = self.loc(selector).first
        await el.clear()
        await el.fill(value)

    async def get_text(self, selector: Selector) -> str | None:
        try:
            return ((await self.loc(selector).first.text_content(timeout=self.timeouts.action_ms)) or "").strip()
        except PlaywrightTimeoutError:
            return None

    async def get_decimal(self, selector: Selector) -> float | None:
        return parse_price(await self.get_text(selector))

    async def is_visible(self, selector: Selector) -> bool:
        return await self.loc(selector).first.is_visible()

    async def screenshot(self, name: str) -> str | None:
        if not self.context.screenshot_dir:
            return None
        Path(self.context.screenshot_dir).mkdir(parents=True, exist_ok=True)
        path = f"{self.context.screenshot_dir}/{name}.png"
        await self.page.screenshot(path=path, full_page=True)
        return path

    def log(self, msg: str):
        self.logger.info(msg)


def parse_price(text: str | None) -> float | None:
    if not text:
        return None
    cleaned = re.sub(r'[^\d,.]', '', text)
    if ',' in cleaned and '.' in cleaned:
        cleaned = cleaned.replace(',', '')      # 1,299.00
    else:
        cleaned = cleaned.replace(',', '.')     # 12,50
    try:
        return float(cleaned)
    except ValueError:
        return None

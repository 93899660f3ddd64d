"""
ConsentDismisser — zamyka overlaye cookie / GDPR.

Kaskada:
  1. szukaj modala (selektory w kolejnosci priorytetu, krotkie okno)
  2. brak modala → False, bez efektow ubocznych (wolane przed prawie kazda nawigacja)
  3. modal → kliknij pierwszy widoczny przycisk zgody
  4. klik → czekaj az modal zniknie (limit), timeout tylko logujemy
  5. brak przycisku → Escape + ikonki zamykania

Alternatywa: block_requests() — ubija requesty consent/gdpr zanim overlay powstanie.
W jednym scenariuszu albo klikamy, albo blokujemy.
"""
import logging
import re
import time
from dataclasses import dataclass
from typing import Callable

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page, Route
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 100

CONSENT_URL_PATTERN = re.compile(r"consent|cookie-banner|gdpr|cookielaw", re.IGNORECASE)


@dataclass(frozen=True)
class ConsentStrategy:
    modal_selectors: tuple[str, ...]
    button_selectors: tuple[str, ...]
    close_selectors: tuple[str, ...] = ()
    secondary_selectors: tuple[str, ...] = ()
    modal_probe_ms: int = 1_500
    button_probe_ms: int = 1_000
    hide_timeout_ms: int = 10_000


DEFAULT_STRATEGY = ConsentStrategy(
    modal_selectors=(
        ".fc-consent-root",
        "[role='dialog']",
        ".cookie-consent",
        ".consent-banner",
        ".gdpr-modal",
        ".privacy-modal",
        "div[class*='consent']",
        "div[class*='cookie']",
    ),
    button_selectors=(
        "button:has-text('Consent')",
        "button:has-text('Accept All')",
        "button:has-text('Accept')",
        "button:has-text('I Agree')",
        "button:has-text('OK')",
        "button:has-text('Got it')",
        ".fc-button.fc-cta-consent",
        "[data-testid='uc-accept-all-button']",
        "[data-testid='consent-accept']",
        "button[class*='consent']",
        "button[class*='accept']",
        ".consent-accept",
        ".accept-all",
        ".btn-consent",
    ),
    close_selectors=(
        ".fc-close",
        "[aria-label='Close']",
        "button:has-text('×')",
        ".close",
        ".modal-close",
    ),
)

MANAGE_OPTIONS_STRATEGY = ConsentStrategy(
    modal_selectors=(".fc-consent-root", "[role='dialog']"),
    button_selectors=("button:has-text('Consent')", ".fc-button.fc-cta-consent"),
    secondary_selectors=("button:has-text('Manage options')", ".fc-button.fc-secondary-button"),
    modal_probe_ms=3_000,
    button_probe_ms=2_000,
)


class ConsentDismisser:
    def __init__(
        self,
        page: Page,
        strategy: ConsentStrategy = DEFAULT_STRATEGY,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.page = page
        self.strategy = strategy
        self._clock = clock
        self._blocking = False
        self._clicked_before = False

    @property
    def is_blocking(self) -> bool:
        return self._blocking

    # ── Publiczne API ─────────────────────────────────────────────────────────

    async def dismiss(self) -> bool:
        """
        Zwraca True jesli modal zostal zamkniety, False jesli go nie bylo
        (albo nie dalo sie go ruszyc). Nigdy nie rzuca.
        """
        if self._blocking:
            logger.debug("Consent blokowany na poziomie sieci — pomijam klikanie")
            return False

        try:
            return await self._dismiss()
        except PlaywrightError as e:
            logger.warning(f"Blad obslugi consent: {e}")
            return False

    async def dismiss_with_manage_options(self) -> bool:
        """Wariant 'Manage options' → 'Consent' (np. Funding Choices)."""
        if self._blocking:
            return False

        try:
            modal = await self._first_visible(self.strategy.modal_selectors, self.strategy.modal_probe_ms)
            if modal is None:
                logger.info("Brak modala consent")
                return False

            manage = await self._first_visible(self.strategy.secondary_selectors, self.strategy.button_probe_ms)
            if manage is not None:
                await manage.click()
                await self.page.wait_for_timeout(1000)

            button = await self._first_visible(self.strategy.button_selectors, self.strategy.button_probe_ms)
            if button is None:
                logger.info("Brak przycisku zgody po 'Manage options'")
                return False

            await button.click()
            self._clicked_before = True
            await self._wait_hidden(modal)
            logger.info("Preferencje cookie ustawione, zgoda udzielona")
            return True
        except PlaywrightError as e:
            logger.warning(f"Blad obslugi consent (manage): {e}")
            return False

    async def block_requests(self) -> None:
        """Przechwytuje i ubija requesty consent/cookie-banner/gdpr/cookielaw."""
        if self._clicked_before:
            raise RuntimeError("Consent juz obsluzony klikaniem — blokowanie w tym samym scenariuszu niedozwolone")
        if self._blocking:
            return

        async def _abort(route: Route) -> None:
            logger.debug(f"Blokuje request consent: {route.request.url}")
            await route.abort()

        await self.page.route(CONSENT_URL_PATTERN, _abort)
        self._blocking = True
        logger.info("Requesty consent blokowane")

    # ── Kaskada ───────────────────────────────────────────────────────────────

    async def _dismiss(self) -> bool:
        found = await self._first_visible_selector(self.strategy.modal_selectors, self.strategy.modal_probe_ms)
        if found is None:
            logger.debug("Brak modala consent")
            return False

        modal_selector, modal = found
        logger.info(f"Wykryto modal consent: {modal_selector}")

        button_found = await self._first_visible_selector(self.strategy.button_selectors, self.strategy.button_probe_ms)
        if button_found is not None:
            button_selector, button = button_found
            await button.click()
            self._clicked_before = True
            logger.info(f"Kliknieto przycisk zgody: {button_selector}")
            await self._wait_hidden(modal)
            return True

        logger.info("Brak przycisku zgody — probuje Escape i ikonke zamkniecia")
        await self.page.keyboard.press("Escape")
        self._clicked_before = True

        close_found = await self._first_visible_selector(self.strategy.close_selectors, self.strategy.button_probe_ms)
        if close_found is not None:
            close_selector, close = close_found
            await close.click()
            logger.info(f"Modal zamkniety przez: {close_selector}")

        return not await modal.is_visible()

    async def _wait_hidden(self, modal: Locator) -> None:
        try:
            await modal.wait_for(state="hidden", timeout=self.strategy.hide_timeout_ms)
        except PlaywrightTimeoutError:
            # Modal wisi dalej — nie przerywamy flow, kolejne akcje maja wlasne czekania
            logger.warning(f"Modal consent nadal widoczny po {self.strategy.hide_timeout_ms} ms")

    async def _first_visible(self, selectors: tuple[str, ...], window_ms: int) -> Locator | None:
        found = await self._first_visible_selector(selectors, window_ms)
        return found[1] if found else None

    async def _first_visible_selector(
        self, selectors: tuple[str, ...], window_ms: int
    ) -> tuple[str, Locator] | None:
        """
        Przeglada selektory w kolejnosci priorytetu, powtarzajac co 100 ms
        az do konca okna. Pierwszy widoczny wygrywa.
        """
        if not selectors:
            return None

        deadline = self._clock() + window_ms / 1000
        while True:
            for selector in selectors:
                candidate = self.page.locator(selector).first
                if await candidate.is_visible():
                    return selector, candidate

            remaining_ms = (deadline - self._clock()) * 1000
            if remaining_ms <= 0:
                return None
            await self.page.wait_for_timeout(min(POLL_INTERVAL_MS, remaining_ms))


async def dismiss_cookie_consent(page: Page, strategy: str = "accept") -> bool:
    """Skrot: accept / manage / block."""
    if strategy == "accept":
        return await ConsentDismisser(page).dismiss()
    if strategy == "manage":
        return await ConsentDismisser(page, MANAGE_OPTIONS_STRATEGY).dismiss_with_manage_options()
    if strategy == "block":
        await ConsentDismisser(page).block_requests()
        return False
    raise ValueError(f"Nieznana strategia consent: {strategy}")

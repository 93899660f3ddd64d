"""
Scenario Executor — uruchamia pojedynczy flow w osobnej sesji przegladarki.
Uzywa ScenarioContext + Storefront zamiast bezposrednich wywolan Playwright.
"""

import logging

from playwright.async_api import async_playwright
from sqlalchemy.orm import Session

from core.recorder import RunRecorder
from models.base import now_utc
from models.run import ScenarioRun, RunStatus
from scenarios.context import ScenarioContext
from scenarios.flows import FLOWS
from scenarios.pages.storefront import Storefront
from scenarios.run_data import OrderData

logger = logging.getLogger(__name__)

BROWSERS = ("chromium", "firefox", "webkit")


class ScenarioExecutor:
    """Wykonuje pojedynczy flow przez Playwright i zapisuje wynik w bazie."""

    def __init__(
        self,
        flow_name: str,
        context: ScenarioContext,
        db: Session,
        suite_run_id: int | None = None,
        headless: bool = True,
        browser_name: str = "chromium",
        slow_mo_ms: int = 0,
    ):
        if flow_name not in FLOWS:
            raise ValueError(f"Nieznany flow: {flow_name} (dostepne: {', '.join(FLOWS)})")
        if browser_name not in BROWSERS:
            raise ValueError(f"Nieznana przegladarka: {browser_name}")
        self.flow_name = flow_name
        self.context = context
        self.db = db
        self.suite_run_id = suite_run_id
        self.headless = headless
        self.browser_name = browser_name
        self.slow_mo_ms = slow_mo_ms
        self.scenario_run = None

    async def run(self) -> ScenarioRun:
        """Uruchamia flow i zwraca ScenarioRun z wynikami. Blad flow nie wychodzi dalej."""

        self.scenario_run = ScenarioRun(
            suite_run_id=self.suite_run_id,
            flow_name=self.flow_name,
            status=RunStatus.RUNNING,
            started_at=now_utc(),
        )
        self.db.add(self.scenario_run)
        self.db.commit()
        self.db.refresh(self.scenario_run)

        recorder = RunRecorder(
            scenario_name=f"{self.flow_name}#{self.scenario_run.id}",
            screenshot_dir=f"{self.context.screenshot_dir}/{self.suite_run_id or 'single'}/{self.scenario_run.id}"
            if self.context.screenshot_dir else None,
        )

        logger.info(f"[RUN #{self.scenario_run.id}] Start: {self.flow_name}")

        try:
            order = await self._execute(recorder)
            self._save_order(order)
            self.scenario_run.status = RunStatus.SUCCESS

        except Exception as e:
            logger.error(f"[RUN #{self.scenario_run.id}] Nieoczekiwany błąd: {e}", exc_info=True)
            self.scenario_run.status = RunStatus.FAILED
            self.scenario_run.error = f"{e.__class__.__name__}: {e}"

        finally:
            recorder.save(self.db, self.scenario_run)
            self.scenario_run.finished_at = now_utc()
            self.db.commit()

            logger.info(
                f"[RUN #{self.scenario_run.id}] Finished: {self.scenario_run.status.value} | "
                f"Duration: {self.scenario_run.duration_seconds}s | "
                f"Steps: {len(recorder.steps)} | API errors: {len(recorder.api_errors)}"
            )

        return self.scenario_run

    async def _execute(self, recorder: RunRecorder) -> OrderData:
        """Uruchamia Playwright i przekazuje sterowanie do flow."""

        async with async_playwright() as p:
            browser_type = getattr(p, self.browser_name)
            browser = await browser_type.launch(headless=self.headless, slow_mo=self.slow_mo_ms)
            browser_context = await browser.new_context(
                viewport={'width': 390, 'height': 844} if self.context.is_mobile else {'width': 1280, 'height': 720},
                locale=self.context.locale.replace('_', '-'),
            )
            page = await browser_context.new_page()
            page.set_default_timeout(self.context.timeouts.action_ms)

            try:
                recorder.attach(page)
                shop = Storefront(page, self.context, recorder)
                if self.context.consent_strategy == 'block':
                    await shop.nav.consent.block_requests()

                try:
                    return await FLOWS[self.flow_name](shop)
                except Exception:
                    await recorder.screenshot("failure")
                    raise

            finally:
                await browser_context.close()
                await browser.close()

    def _save_order(self, order: OrderData) -> None:
        self.scenario_run.order_number = order.order_number
        self.scenario_run.item_count = order.item_count
        if order.cart_route:
            self.scenario_run.cart_route = order.cart_route.value

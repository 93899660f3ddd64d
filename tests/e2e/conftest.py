import pytest
import pytest_asyncio
from playwright.async_api import async_playwright

from config import get_settings
from core.recorder import RunRecorder
from scenarios.context import ScenarioContext
from scenarios.pages.storefront import Storefront


@pytest.fixture
def settings():
    return get_settings()


@pytest_asyncio.fixture
async def page(settings):
    async with async_playwright() as p:
        browser = await getattr(p, settings.browser).launch(headless=settings.headless, slow_mo=settings.slow_mo_ms)
        context = await browser.new_context(viewport={'width': 1280, 'height': 720})
        page = await context.new_page()
        page.set_default_timeout(settings.timeouts.action_ms)
        try:
            yield page
        finally:
            await context.close()
            await browser.close()


@pytest_asyncio.fixture
async def shop(page, settings, request, tmp_path):
    context = ScenarioContext.from_settings(settings, scenario_name=request.node.name, screenshot_dir=str(tmp_path))
    recorder = RunRecorder(context.scenario_name, screenshot_dir=str(tmp_path))
    recorder.attach(page)
    storefront = Storefront(page, context, recorder)
    if context.consent_strategy == 'block':
        await storefront.nav.consent.block_requests()
    return storefront

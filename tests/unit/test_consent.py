import pytest
from playwright.async_api import Error as PlaywrightError

from core.consent import (
    CONSENT_URL_PATTERN, DEFAULT_STRATEGY, MANAGE_OPTIONS_STRATEGY,
    ConsentDismisser, dismiss_cookie_consent,
)

MODAL = ".fc-consent-root"
ACCEPT = "button:has-text('Consent')"


def dismisser_for(page, strategy=DEFAULT_STRATEGY):
    return ConsentDismisser(page, strategy, clock=page.clock.monotonic)


def show_modal(page, button=ACCEPT):
    modal = page.locator(MODAL)
    modal.visible = True
    accept = page.locator(button)
    accept.visible = True

    def hide():
        modal.visible = False
        accept.visible = False

    accept.on_click = hide
    return modal, accept


class TestDismiss:
    @pytest.mark.asyncio
    async def test_no_modal_returns_false_within_probe_window(self, fake_page):
        result = await dismisser_for(fake_page).dismiss()

        assert result is False
        assert fake_page.clock.ms == pytest.approx(DEFAULT_STRATEGY.modal_probe_ms)
        assert fake_page.keyboard.pressed == []

    @pytest.mark.asyncio
    async def test_clicks_accept_and_waits_for_modal_to_hide(self, fake_page):
        modal, accept = show_modal(fake_page)

        assert await dismisser_for(fake_page).dismiss() is True
        assert accept.clicks == 1
        assert modal.visible is False

    @pytest.mark.asyncio
    async def test_second_call_is_a_no_op(self, fake_page):
        _, accept = show_modal(fake_page)
        dismisser = dismisser_for(fake_page)

        assert await dismisser.dismiss() is True
        assert await dismisser.dismiss() is False
        assert accept.clicks == 1

    @pytest.mark.asyncio
    async def test_modal_appearing_late_is_still_found(self, fake_page):
        modal = fake_page.locator(MODAL)
        accept = fake_page.locator(ACCEPT)
        accept.on_click = lambda: setattr(modal, "visible", False)

        def appear():
            modal.visible = True
            accept.visible = True

        fake_page.at(500, appear)

        assert await dismisser_for(fake_page).dismiss() is True
        assert accept.clicks == 1

    @pytest.mark.asyncio
    async def test_higher_priority_button_wins(self, fake_page):
        _, consent = show_modal(fake_page)
        accept_all = fake_page.locator("button:has-text('Accept All')")
        accept_all.visible = True

        await dismisser_for(fake_page).dismiss()

        assert consent.clicks == 1
        assert accept_all.clicks == 0

    @pytest.mark.asyncio
    async def test_without_button_falls_back_to_escape_and_close_icon(self, fake_page):
        modal = fake_page.locator(MODAL)
        modal.visible = True
        close = fake_page.locator(".fc-close")
        close.visible = True
        close.on_click = lambda: setattr(modal, "visible", False)

        assert await dismisser_for(fake_page).dismiss() is True
        assert fake_page.keyboard.pressed == ["Escape"]
        assert close.clicks == 1

    @pytest.mark.asyncio
    async def test_modal_that_will_not_close_reports_false(self, fake_page):
        fake_page.locator(MODAL).visible = True

        assert await dismisser_for(fake_page).dismiss() is False

    @pytest.mark.asyncio
    async def test_modal_still_visible_after_click_is_not_an_error(self, fake_page):
        modal, accept = show_modal(fake_page)
        accept.on_click = None

        assert await dismisser_for(fake_page).dismiss() is True
        assert fake_page.clock.ms >= DEFAULT_STRATEGY.hide_timeout_ms

    @pytest.mark.asyncio
    async def test_playwright_error_is_swallowed(self, fake_page):
        _, accept = show_modal(fake_page)
        accept.click_error = PlaywrightError("Element is detached")

        assert await dismisser_for(fake_page).dismiss() is False


class TestManageOptions:
    @pytest.mark.asyncio
    async def test_manage_then_consent(self, fake_page):
        modal, accept = show_modal(fake_page)
        manage = fake_page.locator("button:has-text('Manage options')")
        manage.visible = True

        result = await dismisser_for(fake_page, MANAGE_OPTIONS_STRATEGY).dismiss_with_manage_options()

        assert result is True
        assert manage.clicks == 1
        assert accept.clicks == 1


class TestBlockRequests:
    @pytest.mark.asyncio
    async def test_registers_route_and_skips_clicking(self, fake_page):
        _, accept = show_modal(fake_page)
        dismisser = dismisser_for(fake_page)

        await dismisser.block_requests()

        assert fake_page.routes[0][0] is CONSENT_URL_PATTERN
        assert dismisser.is_blocking
        assert await dismisser.dismiss() is False
        assert accept.clicks == 0

    @pytest.mark.asyncio
    async def test_blocking_after_click_is_rejected(self, fake_page):
        show_modal(fake_page)
        dismisser = dismisser_for(fake_page)
        await dismisser.dismiss()

        with pytest.raises(RuntimeError):
            await dismisser.block_requests()

    def test_url_pattern(self):
        assert CONSENT_URL_PATTERN.search("https://cdn.example/gdpr/v2.js")
        assert CONSENT_URL_PATTERN.search("https://fundingchoicesmessages.google.com/i/consent")
        assert not CONSENT_URL_PATTERN.search("https://shop.test/checkout/cart/")

    @pytest.mark.asyncio
    async def test_helper_rejects_unknown_strategy(self, fake_page):
        with pytest.raises(ValueError):
            await dismiss_cookie_consent(fake_page, "ignore")

import re

from core.errors import FieldNotFoundError
from scenarios.pages.navigator import PageNavigator

SUCCESS_URL = re.compile(r"/checkout/onepage/success")

# ── ConfirmationPage ──────────────────────────────────────────────────────────

class ConfirmationPage:
    ORDER_NUMBER = (
        ('locator', '.checkout-success .order-number strong'),
        ('locator', '.checkout-success .order-number'),
        ('locator', '.checkout-success p span'),
    )
    THANK_YOU = (
        ('locator', 'h1.page-title'),
        ('text', 'Thank you for your purchase!'),
    )
    CONFIRMATION_MESSAGE = (
        ('locator', '.checkout-success h1'),
        ('locator', '.checkout-success p'),
    )
    CONTINUE_SHOPPING = ('locator', '.checkout-success .action.continue')

    def __init__(self, nav: PageNavigator):
        self.nav = nav
        self.page = nav.page
        self.timeouts = nav.timeouts

    async def wait_for_confirmation_page(self):
        await self.nav.wait_for_url(SUCCESS_URL, self.timeouts.confirmation_ms)
        await self.nav.await_load_complete()
        if await self.nav.first_visible(self.THANK_YOU, self.timeouts.confirmation_ms) is None:
            raise FieldNotFoundError('thank_you_message', "brak naglowka po zlozeniu zamowienia")

    async def get_order_number(self) -> str:
        """Same cyfry — sklep owija numer w link / tekst 'Your order # is:'."""
        element = await self.nav.first_visible(self.ORDER_NUMBER)
        if element is None:
            raise FieldNotFoundError('order_number')
        return re.sub(r'\D', '', (await element.text_content()) or "")

    async def get_confirmation_message(self) -> str:
        return await self._text_of(self.CONFIRMATION_MESSAGE)

    async def get_thank_you_message(self) -> str:
        return await self._text_of(self.THANK_YOU)

    async def is_order_confirmed(self) -> bool:
        for candidates in (self.THANK_YOU, self.ORDER_NUMBER):
            if await self.nav.first_visible(candidates, timeout_ms=0) is None:
                return False
        return True

    async def continue_shopping(self):
        await self.nav.safe_click(self.CONTINUE_SHOPPING)
        await self.nav.await_load_complete()

    async def _text_of(self, candidates: tuple) -> str:
        element = await self.nav.first_visible(candidates)
        if element is None:
            return ""
        return ((await element.text_content()) or "").strip()

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from core.errors import WaitTimeoutError
from scenarios.pages.checkout_page import CHECKOUT_URL
from scenarios.pages.navigator import PageNavigator
from scenarios.run_data import CartAccessRoute

CART_PATH = "/checkout/cart/"

# ── CartPage — minikoszyk + pelny koszyk ─────────────────────────────────────

class CartPage:
    # Pelny koszyk
    CART_ITEM         = ('locator', '#shopping-cart-table tbody.cart.item')
    ITEM_NAME         = ('locator', '#shopping-cart-table .product-item-name a')
    ITEM_QTY          = ('locator', '#shopping-cart-table input.qty')
    ITEM_REMOVE       = ('locator', '#shopping-cart-table .action-delete')
    BTN_UPDATE_CART   = ('locator', 'button[name="update_cart_action"]')
    SUBTOTAL          = ('locator', '#cart-totals .totals.sub .price')
    GRAND_TOTAL       = ('locator', '#cart-totals .grand.totals .price')
    BTN_CHECKOUT      = ('locator', '.checkout-methods-items .action.primary.checkout')
    CONTINUE_SHOPPING = (
        ('locator', '.cart-container .action.continue'),
        ('locator', '.cart-empty a'),
    )
    EMPTY_CART        = ('locator', '.cart-empty')
    COUPON_CODE       = ('locator', '#coupon_code')
    BTN_APPLY_COUPON  = ('locator', '#discount-coupon-form button.action.apply')

    # Minikoszyk
    MINICART_TOGGLE   = ('locator', '.minicart-wrapper .action.showcart')
    MINICART_DIALOG   = ('locator', '.block-minicart')
    MINICART_CHECKOUT = ('locator', '#top-cart-btn-checkout')
    MINICART_COUNTER  = ('locator', '.minicart-wrapper .counter-number')
    MINICART_LOADING  = ('locator', '.minicart-wrapper .counter._block-content-loading')
    MINICART_SUBTOTAL = ('locator', '.block-minicart .subtotal .price')
    MINICART_VIEWCART = ('locator', '.block-minicart .action.viewcart')

    def __init__(self, nav: PageNavigator):
        self.nav = nav
        self.page = nav.page
        self.timeouts = nav.timeouts

    # ── Przejscie do checkoutu ────────────────────────────────────────────────

    async def proceed_to_checkout(self) -> CartAccessRoute:
        """
        Najpierw minikoszyk (szybciej, bez przeladowania). Jesli jego przycisk
        nie pojawi sie w `minicart_ms` — raz przez pelny koszyk. Blad pelnego
        koszyka leci dalej bez kolejnych prob.
        """
        try:
            await self._checkout_via_minicart()
            self.nav.log("Checkout przez minikoszyk")
            return CartAccessRoute.MINICART
        except PlaywrightTimeoutError as e:
            reason = e.message.partition("\n")[0]
            self.nav.log(f"Minikoszyk niedostepny ({reason}), przechodze przez pelny koszyk")

        await self.navigate_to_cart()
        await self._checkout_via_full_cart()
        self.nav.log("Checkout przez pelny koszyk")
        return CartAccessRoute.FULL_CART_PAGE

    async def _checkout_via_minicart(self):
        await self.open_minicart()
        button = self.nav.loc(self.MINICART_CHECKOUT).first
        await button.wait_for(state='visible', timeout=self.timeouts.minicart_ms)
        await button.click(timeout=self.timeouts.minicart_ms)
        await self.nav.wait_for_url(CHECKOUT_URL)

    async def _checkout_via_full_cart(self):
        button = self.nav.loc(self.BTN_CHECKOUT).first
        await button.wait_for(state='visible', timeout=self.timeouts.action_ms)
        await self.nav.scroll_into_view(button)
        await button.click()
        await self.nav.wait_for_url(CHECKOUT_URL)

    # ── Pelny koszyk ──────────────────────────────────────────────────────────

    async def navigate_to_cart(self):
        await self.nav.navigate(CART_PATH)
        await self.nav.dismiss_consent()
        await self.nav.await_spinner_hidden()

    async def get_cart_item_count(self) -> int:
        return await self.nav.loc(self.CART_ITEM).count()

    async def get_item_name(self, index: int) -> str:
        return ((await self.nav.loc(self.ITEM_NAME).nth(index).text_content()) or "").strip()

    async def update_quantity(self, index: int, quantity: int):
        qty = self.nav.loc(self.ITEM_QTY).nth(index)
        await qty.fill(str(quantity))
        await self.nav.safe_click(self.BTN_UPDATE_CART)
        await self.nav.await_load_complete()
        await self.nav.await_spinner_hidden()

    async def remove_item(self, index: int):
        before = await self.get_cart_item_count()
        await self.nav.loc(self.ITEM_REMOVE).nth(index).click()

        # Usuniecie przeladowuje strone — czekamy az liczba pozycji spadnie
        waited = 0
        while waited < self.timeouts.action_ms:
            if await self.is_cart_empty() or await self.get_cart_item_count() < before:
                self.nav.log(f"Usunieto pozycje #{index}")
                return
            await self.page.wait_for_timeout(100)
            waited += 100
        raise WaitTimeoutError(f"usuniecie pozycji #{index} z koszyka", self.timeouts.action_ms)

    async def get_subtotal(self) -> str:
        return await self.nav.get_text(self.SUBTOTAL) or ""

    async def get_grand_total(self) -> str:
        return await self.nav.get_text(self.GRAND_TOTAL) or ""

    async def apply_coupon_code(self, code: str):
        await self.nav.safe_fill(self.COUPON_CODE, code)
        await self.nav.safe_click(self.BTN_APPLY_COUPON)
        await self.nav.await_load_complete()

    async def is_cart_empty(self) -> bool:
        return await self.nav.is_visible(self.EMPTY_CART)

    async def continue_shopping(self):
        link = await self.nav.first_visible(self.CONTINUE_SHOPPING)
        if link is None:
            self.nav.log("Brak linku 'Continue Shopping' — wracam na strone glowna")
            await self.nav.navigate("/")
            return
        await link.click()
        await self.nav.await_load_complete()

    # ── Minikoszyk ────────────────────────────────────────────────────────────

    async def is_minicart_open(self) -> bool:
        return await self.nav.is_visible(self.MINICART_DIALOG)

    async def open_minicart(self):
        if await self.is_minicart_open():
            return
        await self.nav.safe_click(self.MINICART_TOGGLE)

    async def wait_for_minicart_update(self, timeout_ms: int | None = None):
        timeout_ms = self.timeouts.minicart_ms if timeout_ms is None else timeout_ms
        await self.nav.loc(self.MINICART_LOADING).first.wait_for(state='hidden', timeout=timeout_ms)
        await self.nav.loc(self.MINICART_COUNTER).first.wait_for(state='visible', timeout=timeout_ms)

    async def get_minicart_item_count(self) -> int:
        text = await self.nav.get_text(self.MINICART_COUNTER)
        return int(text) if text and text.isdigit() else 0

    async def get_minicart_subtotal(self) -> str:
        await self.open_minicart()
        return await self.nav.get_text(self.MINICART_SUBTOTAL) or ""

    async def view_cart_from_minicart(self):
        await self.open_minicart()
        await self.nav.safe_click(self.MINICART_VIEWCART)
        await self.nav.wait_for_url(f"**{CART_PATH}")
        await self.nav.await_load_complete()

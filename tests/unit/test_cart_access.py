import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from core.errors import WaitTimeoutError
from scenarios.pages.cart_page import CartPage
from scenarios.run_data import CartAccessRoute

CHECKOUT = "https://shop.test/checkout/#shipping"


@pytest.fixture
def cart(nav):
    return CartPage(nav)


@pytest.fixture
def minicart(fake_page):
    """Minikoszyk otwierany ikonka, przycisk checkoutu przenosi na /checkout/."""
    dialog = fake_page.locator('.block-minicart')
    toggle = fake_page.locator('.minicart-wrapper .action.showcart')
    toggle.visible = True
    toggle.on_click = lambda: setattr(dialog, "visible", True)

    button = fake_page.locator('#top-cart-btn-checkout')
    button.visible = True
    button.on_click = lambda: setattr(fake_page, "url", CHECKOUT)
    return toggle, button


@pytest.fixture
def full_cart_button(fake_page):
    button = fake_page.locator('.checkout-methods-items .action.primary.checkout')
    button.visible = True
    button.on_click = lambda: setattr(fake_page, "url", CHECKOUT)
    return button


class TestProceedToCheckout:
    @pytest.mark.asyncio
    async def test_minicart_route(self, fake_page, cart, minicart, full_cart_button):
        toggle, button = minicart

        route = await cart.proceed_to_checkout()

        assert route is CartAccessRoute.MINICART
        assert toggle.clicks == 1
        assert button.clicks == 1
        assert fake_page.visits == []
        assert full_cart_button.clicks == 0

    @pytest.mark.asyncio
    async def test_open_minicart_is_not_toggled_again(self, fake_page, cart, minicart):
        toggle, _ = minicart
        fake_page.locator('.block-minicart').visible = True

        assert await cart.proceed_to_checkout() is CartAccessRoute.MINICART
        assert toggle.clicks == 0

    @pytest.mark.asyncio
    async def test_falls_back_to_full_cart_exactly_once(self, fake_page, cart, minicart, full_cart_button):
        _, button = minicart
        button.visible = False

        route = await cart.proceed_to_checkout()

        assert route is CartAccessRoute.FULL_CART_PAGE
        assert fake_page.visits == ["https://shop.test/checkout/cart/"]
        assert full_cart_button.clicks == 1
        assert button.clicks == 0
        assert fake_page.url == CHECKOUT

    @pytest.mark.asyncio
    async def test_minicart_click_without_navigation_falls_back(self, fake_page, cart, minicart, full_cart_button):
        _, button = minicart
        button.on_click = None

        assert await cart.proceed_to_checkout() is CartAccessRoute.FULL_CART_PAGE
        assert button.clicks == 1
        assert full_cart_button.clicks == 1

    @pytest.mark.asyncio
    async def test_full_cart_failure_propagates(self, fake_page, cart, minicart):
        _, button = minicart
        button.visible = False

        with pytest.raises(PlaywrightTimeoutError):
            await cart.proceed_to_checkout()

        assert fake_page.visits == ["https://shop.test/checkout/cart/"]

    @pytest.mark.asyncio
    async def test_minicart_wait_is_bounded(self, fake_page, cart, minicart, full_cart_button, scenario_context):
        _, button = minicart
        button.visible = False

        await cart.proceed_to_checkout()

        # minikoszyk + okno sprawdzania consent po wejsciu na /checkout/cart/
        timeouts = scenario_context.timeouts
        assert fake_page.clock.ms == pytest.approx(timeouts.minicart_ms + timeouts.consent_probe_ms)


class TestFullCart:
    @pytest.mark.asyncio
    async def test_remove_only_item_empties_cart(self, fake_page, cart):
        items = fake_page.locator('#shopping-cart-table tbody.cart.item')
        items.count_value = 1
        empty = fake_page.locator('.cart-empty')
        remove = fake_page.locator('#shopping-cart-table .action-delete')

        def removed():
            items.count_value = 0
            fake_page.at(fake_page.clock.ms + 200, lambda: setattr(empty, "visible", True))

        remove.on_click = removed

        await cart.remove_item(0)

        assert remove.clicks == 1
        assert await cart.get_cart_item_count() == 0

    @pytest.mark.asyncio
    async def test_remove_without_effect_times_out(self, fake_page, cart):
        fake_page.locator('#shopping-cart-table tbody.cart.item').count_value = 2

        with pytest.raises(WaitTimeoutError):
            await cart.remove_item(1)

    @pytest.mark.asyncio
    async def test_is_cart_empty(self, fake_page, cart):
        assert await cart.is_cart_empty() is False
        fake_page.locator('.cart-empty').visible = True
        assert await cart.is_cart_empty() is True

    @pytest.mark.asyncio
    async def test_minicart_item_count(self, fake_page, cart):
        counter = fake_page.locator('.minicart-wrapper .counter-number')
        assert await cart.get_minicart_item_count() == 0
        counter.text = " 3 "
        assert await cart.get_minicart_item_count() == 3

    @pytest.mark.asyncio
    async def test_continue_shopping_without_link_goes_home(self, fake_page, cart):
        await cart.continue_shopping()

        assert fake_page.visits == ["https://shop.test/"]

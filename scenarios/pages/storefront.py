from playwright.async_api import Page

from core.recorder import RunRecorder
from scenarios.context import ScenarioContext
from scenarios.pages.cart_page import CartPage
from scenarios.pages.checkout_page import CheckoutPage
from scenarios.pages.confirmation_page import ConfirmationPage
from scenarios.pages.home_page import HomePage
from scenarios.pages.listing_page import ListingPage
from scenarios.pages.navigator import PageNavigator
from scenarios.pages.product_page import ProductPage
from scenarios.test_data import TestDataGenerator


class Storefront:
    """Jeden navigator + wszystkie strony dla jednej karty przegladarki."""

    def __init__(
        self,
        page: Page,
        context: ScenarioContext,
        recorder: RunRecorder | None = None,
        data_generator: TestDataGenerator | None = None,
    ):
        self.page = page
        self.context = context
        self.recorder = recorder or RunRecorder(context.scenario_name, context.screenshot_dir)
        self.nav = PageNavigator(page, context, self.recorder.logger)

        self.home = HomePage(self.nav)
        self.listing = ListingPage(self.nav)
        self.product = ProductPage(self.nav)
        self.cart = CartPage(self.nav)
        self.checkout = CheckoutPage(self.nav, data_generator)
        self.confirmation = ConfirmationPage(self.nav)

    def step(self, name: str):
        return self.recorder.step(name)

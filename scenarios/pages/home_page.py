from scenarios.pages.navigator import PageNavigator

# ── HomePage ──────────────────────────────────────────────────────────────────

class HomePage:
    SEARCH_BOX      = ('locator', '#search')
    SEARCH_BUTTON   = ('locator', 'button.action.search')
    CART_ICON       = ('locator', '.minicart-wrapper .action.showcart')
    SIGN_IN         = ('locator', '.panel.header .authorization-link a')
    CREATE_ACCOUNT  = ('locator', '.panel.header a[href*="customer/account/create"]')

    # Strony kategorii z lista produktow (landing kategorii glownej nie ma gridu)
    CATEGORY_PATHS = {
        'men':   '/men/tops-men.html',
        'women': '/women/tops-women.html',
        'gear':  '/gear/bags.html',
    }

    def __init__(self, nav: PageNavigator):
        self.nav = nav
        self.page = nav.page

    async def navigate_to_home(self):
        await self.nav.navigate("/")
        await self.nav.dismiss_consent()

    async def search_for_product(self, name: str):
        await self.nav.safe_fill(self.SEARCH_BOX, name)
        await self.nav.loc(self.SEARCH_BOX).first.press('Enter')
        await self.nav.await_load_complete()

    async def navigate_to_category(self, name: str):
        try:
            path = self.CATEGORY_PATHS[name.lower()]
        except KeyError:
            raise ValueError(f"Nieznana kategoria: {name} (dostepne: {', '.join(self.CATEGORY_PATHS)})") from None
        await self.nav.navigate(path)
        await self.nav.dismiss_consent()

    async def navigate_to_men(self):
        await self.navigate_to_category('men')

    async def navigate_to_women(self):
        await self.navigate_to_category('women')

    async def navigate_to_gear(self):
        await self.navigate_to_category('gear')

    async def go_to_sign_in(self):
        await self.nav.safe_click(self.SIGN_IN)
        await self.nav.await_load_complete()

    async def go_to_create_account(self):
        await self.nav.safe_click(self.CREATE_ACCOUNT)
        await self.nav.await_load_complete()

    async def open_shopping_cart(self):
        await self.nav.safe_click(self.CART_ICON)

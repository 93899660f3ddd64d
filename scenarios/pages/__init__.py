from scenarios.pages.cart_page import CartPage
from scenarios.pages.checkout_page import CheckoutPage
from scenarios.pages.confirmation_page import ConfirmationPage
from scenarios.pages.home_page import HomePage
from scenarios.pages.listing_page import ListingPage
from scenarios.pages.navigator import Navigation, PageNavigator
from scenarios.pages.product_page import ProductPage
from scenarios.pages.storefront import Storefront

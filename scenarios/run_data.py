from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Optional


REQUIRED_SHIPPING_FIELDS = ('email', 'first_name', 'last_name', 'street', 'city', 'country')


@dataclass
class ShippingFormData:
    """
    Dane formularza adresu dostawy.
    None = pole nie jest ruszane (zostaje wartosc z DOM), nie "wyczysc".
    """
    email:        Optional[str] = None
    first_name:   Optional[str] = None
    last_name:    Optional[str] = None
    street:       Optional[str] = None
    city:         Optional[str] = None
    country:      Optional[str] = None
    # Opcjonalne
    company:      Optional[str] = None
    street_line2: Optional[str] = None
    state:        Optional[str] = None   # region / wojewodztwo / judet
    zip_code:     Optional[str] = None
    phone:        Optional[str] = None

    def missing_required(self) -> list[str]:
        return [name for name in REQUIRED_SHIPPING_FIELDS if not getattr(self, name)]

    def merged_over(self, defaults: "ShippingFormData") -> "ShippingFormData":
        """Pola ustawione tutaj wygrywaja, reszta z defaults."""
        overrides = {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}
        return replace(defaults, **overrides)


class CartAccessRoute(str, Enum):
    MINICART = "minicart"
    FULL_CART_PAGE = "full_cart_page"


@dataclass
class ProductData:
    name: Optional[str] = None
    price: Optional[float] = None
    url: Optional[str] = None


@dataclass
class OrderData:
    order_number: Optional[str] = None
    thank_you_message: Optional[str] = None
    cart_route: Optional[CartAccessRoute] = None
    item_count: int = 0
    customer_email: Optional[str] = None
    products: list[ProductData] = field(default_factory=list)

    @property
    def confirmed(self) -> bool:
        return bool(self.order_number) and self.order_number.isdigit()

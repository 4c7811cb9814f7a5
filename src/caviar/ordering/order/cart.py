"""Cart input accepted by the order workflow.

These are plain carriers: nothing here is validated. Validation happens in
the order constructor so that error messages follow a single, fixed order.
"""

from dataclasses import dataclass, field


@dataclass
class PriceInput:
    amount: int = 0
    currency: str = ""


@dataclass
class CartItem:
    product_id: str = ""
    variant_id: str = ""
    quantity: int = 0
    unit_price: PriceInput = field(default_factory=PriceInput)


@dataclass
class CustomerInput:
    phone: str = ""
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    email: str = ""


@dataclass
class DeliveryInput:
    type: str = ""
    country: str = ""
    city: str = ""
    address: str = ""
    post_office: str = ""
    instructions: str = ""


@dataclass
class Cart:
    customer: CustomerInput = field(default_factory=CustomerInput)
    delivery: DeliveryInput = field(default_factory=DeliveryInput)
    items: list[CartItem] = field(default_factory=list)
    notes: str = ""

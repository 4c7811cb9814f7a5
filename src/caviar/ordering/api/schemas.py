"""Pydantic request/response schemas for the Ordering API.

Request models are deliberately loose: missing fields default to empty values
and the order constructor reports what is wrong, one check at a time.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from caviar.ordering.order.cart import (
    Cart,
    CartItem,
    CustomerInput,
    DeliveryInput,
    PriceInput,
)


class PriceSchema(BaseModel):
    amount: int = 0
    currency: str = ""


class CustomerSchema(BaseModel):
    phone: str = ""
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    email: str = ""


class DeliverySchema(BaseModel):
    type: str = ""
    country: str = ""
    city: str = ""
    address: str = ""
    post_office: str = ""
    instructions: str = ""


class OrderItemSchema(BaseModel):
    product_id: str = ""
    variant_id: str = ""
    quantity: int = 0
    unit_price: PriceSchema = Field(default_factory=PriceSchema)


# --- Request Schemas ---


class CreateOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer": {"phone": "+380501234567", "full_name": "Olena Shevchenko"},
                    "delivery": {
                        "type": "post_office",
                        "country": "Ukraine",
                        "city": "Kyiv",
                        "post_office": "Branch 12",
                    },
                    "items": [
                        {
                            "product_id": "prod-001",
                            "variant_id": "var-001",
                            "quantity": 2,
                            "unit_price": {"amount": 12000, "currency": "UAH"},
                        }
                    ],
                    "notes": "Call before delivery",
                }
            ]
        }
    }

    customer: CustomerSchema = Field(default_factory=CustomerSchema)
    delivery: DeliverySchema = Field(default_factory=DeliverySchema)
    items: list[OrderItemSchema] = Field(default_factory=list)
    notes: str = ""

    def to_cart(self) -> Cart:
        return Cart(
            customer=CustomerInput(**self.customer.model_dump()),
            delivery=DeliveryInput(**self.delivery.model_dump()),
            items=[
                CartItem(
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    quantity=item.quantity,
                    unit_price=PriceInput(**item.unit_price.model_dump()),
                )
                for item in self.items
            ],
            notes=self.notes,
        )


class UpdateStatusRequest(BaseModel):
    status: str


# --- Response Schemas ---


class StatusResponse(BaseModel):
    status: str = "ok"


class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    variant_id: str
    quantity: int
    unit_price: PriceSchema
    total_price: PriceSchema


class OrderResponse(BaseModel):
    id: str
    order_number: str
    customer: CustomerSchema
    delivery: DeliverySchema
    items: list[OrderItemResponse]
    total_amount: PriceSchema
    status: str
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    total: int
    page: int
    limit: int


class OrderStatisticsResponse(BaseModel):
    total_orders: int
    status_counts: dict[str, int]
    country_counts: dict[str, int]

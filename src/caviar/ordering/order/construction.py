"""Order construction: turns a cart into an Order aggregate.

Pure: no repository access. The only non-determinism is identity and the
order number. Every check short-circuits with a message naming the field
or the 1-based item position that failed.
"""

import time
from datetime import UTC, datetime
from uuid import uuid4

from protean.exceptions import ValidationError

from caviar.ordering.order.cart import Cart, CustomerInput, DeliveryInput
from caviar.ordering.order.order import (
    CustomerInfo,
    DeliveryInfo,
    DeliveryType,
    Order,
    OrderItem,
    OrderStatus,
)
from caviar.shared.errors import AppError, format_validation_messages
from caviar.shared.money import Money

# Messages for delivery types that need a specific location field
_DELIVERY_REQUIREMENTS = {
    DeliveryType.POST_OFFICE: ("post_office", "post office is required for post office delivery"),
    DeliveryType.COURIER: ("address", "address is required for courier delivery"),
    DeliveryType.ADDRESS: ("address", "address is required for address delivery"),
}


def generate_order_number() -> str:
    """``ORD`` + 8 hex chars + ``-`` + 4 digits derived from the clock.

    Collisions are possible; the order store's unique constraint catches them.
    """
    return f"ORD{uuid4().hex[:8]}-{int(time.time()) % 10000:04d}"


def validate_customer(customer: CustomerInput) -> CustomerInfo:
    if not customer.phone:
        raise AppError.invalid_input("phone number is required")

    if customer.full_name:
        names = {"full_name": customer.full_name}
    elif customer.first_name and customer.last_name:
        names = {"first_name": customer.first_name, "last_name": customer.last_name}
    else:
        raise AppError.invalid_input("either full name or both first and last name are required")

    return CustomerInfo(phone=customer.phone, email=customer.email or None, **names)


def validate_delivery(delivery: DeliveryInput) -> DeliveryInfo:
    if not delivery.country:
        raise AppError.invalid_input("country is required")
    if not delivery.city:
        raise AppError.invalid_input("city is required")

    try:
        delivery_type = DeliveryType(delivery.type)
    except ValueError:
        raise AppError.invalid_input("invalid delivery type") from None

    required_field, message = _DELIVERY_REQUIREMENTS[delivery_type]
    if not getattr(delivery, required_field):
        raise AppError.invalid_input(message)

    return DeliveryInfo(
        delivery_type=delivery_type.value,
        country=delivery.country,
        city=delivery.city,
        address=delivery.address or None,
        post_office=delivery.post_office or None,
        instructions=delivery.instructions or None,
    )


def build_order(cart: Cart) -> Order:
    """Validate ``cart`` and assemble a pending Order.

    Raises:
        AppError: INVALID_INPUT on the first failed check.
    """
    if not cart.items:
        raise AppError.invalid_input("order must contain at least one item")

    try:
        customer_info = validate_customer(cart.customer)
        delivery_info = validate_delivery(cart.delivery)
    except ValidationError as exc:
        raise AppError.invalid_input(format_validation_messages(exc)) from exc

    now = datetime.now(UTC)
    currency = ""
    total = 0
    items = []

    for position, item in enumerate(cart.items, start=1):
        if not item.product_id:
            raise AppError.invalid_input(f"product ID is required for item {position}")
        if not item.variant_id:
            raise AppError.invalid_input(f"variant ID is required for item {position}")
        if item.quantity <= 0:
            raise AppError.invalid_input(f"quantity must be greater than 0 for item {position}")
        if item.unit_price.amount <= 0:
            raise AppError.invalid_input(f"unit price must be greater than 0 for item {position}")
        if not item.unit_price.currency:
            raise AppError.invalid_input(f"currency is required for item {position}")

        # The first item fixes the currency of the whole order
        if not currency:
            currency = item.unit_price.currency
        elif item.unit_price.currency != currency:
            raise AppError.invalid_input("all items must have the same currency")

        item_total = item.unit_price.amount * item.quantity
        total += item_total

        try:
            items.append(
                OrderItem(
                    id=str(uuid4()),
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    quantity=item.quantity,
                    unit_price=Money(amount=item.unit_price.amount, currency=item.unit_price.currency),
                    total_price=Money(amount=item_total, currency=currency),
                    created_at=now,
                )
            )
        except ValidationError as exc:
            raise AppError.invalid_input(f"item {position}: {format_validation_messages(exc)}") from exc

    try:
        return Order(
            id=str(uuid4()),
            order_number=generate_order_number(),
            customer_info=customer_info,
            delivery_info=delivery_info,
            items=items,
            total_amount=Money(amount=total, currency=currency),
            status=OrderStatus.PENDING.value,
            notes=cart.notes or None,
            created_at=now,
            updated_at=now,
        )
    except ValidationError as exc:
        raise AppError.invalid_input(format_validation_messages(exc)) from exc

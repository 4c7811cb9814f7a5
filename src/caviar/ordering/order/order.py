"""Order aggregate: an immutable snapshot of a purchase.

Once constructed an order only changes its status (and ``updated_at``).
Item prices are captured at order time and never re-read from the catalogue.

Status graph (documented, not enforced):
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    PENDING, CONFIRMED, PROCESSING → CANCELLED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import (
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from caviar.domain import caviar
from caviar.shared.errors import AppError
from caviar.shared.money import Money


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value) -> "OrderStatus":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise AppError.invalid_input(f"invalid order status: {value}") from None


class DeliveryType(Enum):
    POST_OFFICE = "post_office"
    COURIER = "courier"
    ADDRESS = "address"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@caviar.value_object(part_of="Order")
class CustomerInfo:
    """Who placed the order: either a full name or a first/last name pair."""

    first_name = String(max_length=100)
    last_name = String(max_length=100)
    full_name = String(max_length=255)
    phone = String(required=True, max_length=50)
    email = String(max_length=255)

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        return " ".join(part for part in (self.first_name, self.last_name) if part)


@caviar.value_object(part_of="Order")
class DeliveryInfo:
    """Where and how the order ships, captured at order time."""

    delivery_type = String(required=True, max_length=20, choices=DeliveryType)
    country = String(required=True, max_length=100)
    city = String(required=True, max_length=100)
    address = String(max_length=500)
    post_office = String(max_length=255)
    instructions = Text()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@caviar.entity(part_of="Order")
class OrderItem:
    """A line of the order with its unit price snapshotted from the cart."""

    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = ValueObject(Money, required=True)
    total_price = ValueObject(Money, required=True)
    created_at = DateTime()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@caviar.aggregate
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    customer_info = ValueObject(CustomerInfo, required=True)
    delivery_info = ValueObject(DeliveryInfo, required=True)
    items = HasMany(OrderItem)
    total_amount = ValueObject(Money, required=True)
    status = String(
        max_length=20,
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def is_cancelled(self) -> bool:
        return self.current_status == OrderStatus.CANCELLED

    def is_allowed_transition(self, target: OrderStatus) -> bool:
        return target in _VALID_TRANSITIONS.get(self.current_status, set())

    def change_status(self, target: OrderStatus):
        """Set a new status. Any status may follow any other."""
        self.status = target.value
        self.updated_at = datetime.now(UTC)

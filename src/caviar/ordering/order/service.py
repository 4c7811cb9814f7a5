"""Order workflow: validates a cart against the catalogue, reserves stock,
persists the order and hands the "order created" alert to the notifier.

Steps run sequentially in the caller's thread:

1. check every item against live catalogue data, in request order
2. build the Order aggregate
3. reserve stock (relative decrement per item)
4. persist; on failure, give every reservation back
5. queue the notification without waiting for it

A caller may pass a ``threading.Event``; once set, the workflow stops at the
next step boundary. Reservations already made are returned before stopping.
"""

import threading

import structlog
from protean.utils.globals import current_domain

from caviar.catalogue.product import Product
from caviar.catalogue.repository import ProductRepository
from caviar.notifications.background import BackgroundNotifier
from caviar.ordering.order.cart import Cart, CartItem
from caviar.ordering.order.construction import build_order
from caviar.ordering.order.filters import OrderFilter
from caviar.ordering.order.order import Order, OrderStatus
from caviar.ordering.order.repository import OrderRepository
from caviar.shared.errors import AppError, ErrorKind

logger = structlog.get_logger(__name__)


class OrderService:
    def __init__(
        self,
        products: ProductRepository | None = None,
        orders: OrderRepository | None = None,
        notifier: BackgroundNotifier | None = None,
    ):
        self._products = products
        self._orders = orders
        self.notifier = notifier

    @property
    def products(self) -> ProductRepository:
        if self._products is None:
            self._products = current_domain.repository_for(Product)
        return self._products

    @property
    def orders(self) -> OrderRepository:
        if self._orders is None:
            self._orders = current_domain.repository_for(Order)
        return self._orders

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def create_order(self, cart: Cart, cancelled: threading.Event | None = None) -> Order:
        logger.info("Creating new order", item_count=len(cart.items))

        self._validate_items(cart.items, cancelled)

        self._check_cancelled(cancelled)
        order = build_order(cart)

        self._check_cancelled(cancelled)
        self._reserve_stock(order)

        try:
            self._check_cancelled(cancelled)
            self.orders.create_order(order)
        except AppError:
            self._rollback_stock(order)
            logger.error("Failed to create order in storage", order_number=order.order_number)
            raise

        logger.info(
            "Order created successfully",
            order_id=str(order.id),
            order_number=order.order_number,
        )

        if self.notifier is not None:
            try:
                self.notifier.notify_order_created(order)
            except Exception as exc:
                logger.error(
                    "Failed to queue order notification",
                    order_id=str(order.id),
                    error=str(exc),
                )

        return order

    @staticmethod
    def _check_cancelled(cancelled):
        if cancelled is not None and cancelled.is_set():
            raise AppError.internal("order creation cancelled")

    def _validate_items(self, items: list[CartItem], cancelled=None) -> None:
        """Check each item against the catalogue. The first failure wins."""
        for position, item in enumerate(items, start=1):
            self._check_cancelled(cancelled)
            try:
                product = self.products.get_by_id(item.product_id)
            except AppError as exc:
                if not exc.is_kind(ErrorKind.NOT_FOUND):
                    raise
                raise AppError.not_found(
                    f"product not found for item {position} (product_id: {item.product_id})"
                ) from exc

            if not product.is_active:
                raise AppError.invalid_input(f"product is not active for item {position}")

            variant = product.find_variant(item.variant_id)
            if variant is None:
                raise AppError.not_found(
                    f"variant not found for item {position} (variant_id: {item.variant_id})"
                )

            if variant.stock < item.quantity:
                raise AppError.invalid_input(
                    f"insufficient stock for item {position}: "
                    f"requested {item.quantity}, available {variant.stock}"
                )

    def _reserve_stock(self, order: Order) -> None:
        # A failure part-way leaves earlier decrements in place
        for item in order.items:
            self.products.update_variant_stock(item.variant_id, -item.quantity)

    def _rollback_stock(self, order: Order) -> None:
        """Give back every item's quantity. Failures are logged, never raised."""
        for item in order.items:
            try:
                self.products.update_variant_stock(item.variant_id, item.quantity)
            except Exception as exc:
                logger.error(
                    "Failed to rollback stock for item",
                    variant_id=str(item.variant_id),
                    quantity=item.quantity,
                    error=str(exc),
                )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_order(self, order_id) -> Order:
        return self.orders.get_by_id(order_id)

    def get_order_by_number(self, order_number) -> Order:
        return self.orders.get_by_order_number(order_number)

    def list_orders(self, order_filter: OrderFilter) -> tuple[list[Order], int]:
        return self.orders.list_orders(order_filter)

    def get_statistics(self) -> dict:
        return self.orders.statistics()

    def products_for(self, order: Order) -> dict:
        """Catalogue products referenced by the order, keyed by product id.

        Products removed since the order was placed are left out.
        """
        found = {}
        for item in order.items:
            key = str(item.product_id)
            if key in found:
                continue
            try:
                found[key] = self.products.get_by_id(item.product_id)
            except AppError as exc:
                if not exc.is_kind(ErrorKind.NOT_FOUND):
                    raise
        return found

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def update_order_status(self, order_id, status) -> Order:
        status = OrderStatus.parse(status)
        logger.info("Updating order status", order_id=str(order_id), status=status.value)

        order = self.orders.get_by_id(order_id)
        if not order.is_allowed_transition(status) and order.current_status != status:
            logger.warning(
                "Unusual order status transition",
                order_id=str(order_id),
                from_status=order.status,
                to_status=status.value,
            )

        if status == OrderStatus.CANCELLED and not order.is_cancelled:
            self._rollback_stock(order)

        updated = self.orders.update_status(order_id, status)
        logger.info("Order status updated successfully", order_id=str(order_id), new_status=status.value)
        return updated

    def delete_order(self, order_id) -> None:
        logger.info("Deleting order", order_id=str(order_id))

        order = self.orders.get_by_id(order_id)
        # Cancelled orders already had their stock returned
        if not order.is_cancelled:
            self._rollback_stock(order)

        self.orders.delete_order(order_id)
        logger.info("Order deleted successfully", order_id=str(order_id))

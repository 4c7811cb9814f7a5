"""Order store: persistence, filtered listing, status writes and statistics."""

from collections import Counter

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from caviar.domain import caviar
from caviar.ordering.order.filters import OrderFilter
from caviar.ordering.order.order import Order, OrderItem, OrderStatus
from caviar.shared.errors import AppError

logger = structlog.get_logger(__name__)


@caviar.repository(part_of=Order)
class OrderRepository:
    def create_order(self, order: Order) -> None:
        """Persist the order together with its items."""
        try:
            self.add(order)
        except Exception as exc:
            raise AppError.internal("failed to create order", exc) from exc

    def get_by_id(self, order_id) -> Order:
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            raise AppError.not_found("order not found") from None
        except Exception as exc:
            raise AppError.from_storage(exc, "get order") from exc

    def get_by_order_number(self, order_number) -> Order:
        try:
            orders = self._dao.query.filter(order_number=order_number).all().items
        except Exception as exc:
            raise AppError.from_storage(exc, "get order") from exc
        if not orders:
            raise AppError.not_found("order not found")
        return orders[0]

    def _all(self, **criteria) -> list[Order]:
        query = self._dao.query
        if criteria:
            query = query.filter(**criteria)
        return query.order_by("-created_at").limit(None).all().items

    def list_orders(self, order_filter: OrderFilter) -> tuple[list[Order], int]:
        """Matching orders, newest first, and the total before paging."""
        criteria = {}
        if order_filter.status:
            criteria["status"] = order_filter.status
        if order_filter.created_from:
            criteria["created_at__gte"] = order_filter.created_from
        if order_filter.created_to:
            criteria["created_at__lte"] = order_filter.created_to

        try:
            orders = self._all(**criteria)
        except Exception as exc:
            raise AppError.from_storage(exc, "list orders") from exc

        # Customer and delivery details are embedded value objects; match them here
        if order_filter.customer_phone:
            needle = order_filter.customer_phone.lower()
            orders = [o for o in orders if needle in (o.customer_info.phone or "").lower()]
        if order_filter.country:
            orders = [o for o in orders if o.delivery_info.country == order_filter.country]

        total = len(orders)
        start = max(order_filter.offset, 0)
        if order_filter.limit > 0:
            orders = orders[start : start + order_filter.limit]
        else:
            orders = orders[start:]
        return orders, total

    def update_status(self, order_id, status: OrderStatus) -> Order:
        order = self.get_by_id(order_id)
        order.change_status(status)
        try:
            self.add(order)
        except Exception as exc:
            raise AppError.internal("failed to update order status", exc) from exc
        return order

    def delete_order(self, order_id) -> None:
        """Remove the order and its items."""
        order = self.get_by_id(order_id)
        try:
            item_dao = current_domain.repository_for(OrderItem)._dao
            for item in list(order.items):
                item_dao.delete(item)
            self._dao.delete(order)
        except Exception as exc:
            raise AppError.internal("failed to delete order", exc) from exc

    def statistics(self) -> dict:
        try:
            orders = self._all()
        except Exception as exc:
            raise AppError.from_storage(exc, "count orders") from exc

        status_counts = Counter(o.status for o in orders)
        country_counts = Counter(o.delivery_info.country for o in orders)
        return {
            "total_orders": len(orders),
            "status_counts": dict(status_counts),
            "country_counts": dict(country_counts),
        }

"""FastAPI endpoints for the Ordering context.

Thin adapters over ``OrderService``; errors surface as ``AppError`` and are
rendered by the application's exception handlers.
"""

from datetime import datetime

from fastapi import APIRouter, Query

from caviar.ordering.api.schemas import (
    CreateOrderRequest,
    CustomerSchema,
    DeliverySchema,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatisticsResponse,
    PriceSchema,
    StatusResponse,
    UpdateStatusRequest,
)
from caviar.ordering.order.filters import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, OrderFilter
from caviar.ordering.order.order import OrderStatus
from caviar.ordering.order.service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])

# Set at application startup so the workflow can queue notifications
_notifier = None


def set_notifier(notifier) -> None:
    global _notifier
    _notifier = notifier


def _service() -> OrderService:
    return OrderService(notifier=_notifier)


def _money(value) -> PriceSchema:
    return PriceSchema(amount=value.amount, currency=value.currency)


def _order_response(order) -> OrderResponse:
    customer = order.customer_info
    delivery = order.delivery_info
    return OrderResponse(
        id=str(order.id),
        order_number=order.order_number,
        customer=CustomerSchema(
            phone=customer.phone,
            first_name=customer.first_name or "",
            last_name=customer.last_name or "",
            full_name=customer.full_name or "",
            email=customer.email or "",
        ),
        delivery=DeliverySchema(
            type=delivery.delivery_type,
            country=delivery.country,
            city=delivery.city,
            address=delivery.address or "",
            post_office=delivery.post_office or "",
            instructions=delivery.instructions or "",
        ),
        items=[
            OrderItemResponse(
                id=str(item.id),
                product_id=str(item.product_id),
                variant_id=str(item.variant_id),
                quantity=item.quantity,
                unit_price=_money(item.unit_price),
                total_price=_money(item.total_price),
            )
            for item in order.items
        ],
        total_amount=_money(order.total_amount),
        status=order.status,
        notes=order.notes,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


@router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: CreateOrderRequest) -> OrderResponse:
    order = _service().create_order(body.to_cart())
    return _order_response(order)


@router.get("", response_model=OrderListResponse)
async def list_orders(
    status: str | None = None,
    phone: str | None = None,
    country: str | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> OrderListResponse:
    if status:
        status = OrderStatus.parse(status).value
    order_filter = OrderFilter.for_page(
        page=page,
        limit=limit,
        status=status,
        customer_phone=phone,
        country=country,
        created_from=created_from,
        created_to=created_to,
    )
    orders, total = _service().list_orders(order_filter)
    return OrderListResponse(
        orders=[_order_response(o) for o in orders],
        total=total,
        page=page,
        limit=order_filter.limit,
    )


# Declared before "/{order_id}" so the literal path wins
@router.get("/statistics", response_model=OrderStatisticsResponse)
async def order_statistics() -> OrderStatisticsResponse:
    return OrderStatisticsResponse(**_service().get_statistics())


@router.get("/number/{order_number}", response_model=OrderResponse)
async def get_order_by_number(order_number: str) -> OrderResponse:
    return _order_response(_service().get_order_by_number(order_number))


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return _order_response(_service().get_order(order_id))


@router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateStatusRequest) -> StatusResponse:
    _service().update_order_status(order_id, body.status)
    return StatusResponse()


@router.delete("/{order_id}", response_model=StatusResponse)
async def delete_order(order_id: str) -> StatusResponse:
    _service().delete_order(order_id)
    return StatusResponse()

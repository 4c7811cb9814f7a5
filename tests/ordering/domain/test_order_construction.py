"""Tests for building an Order from a cart."""

import re

import pytest

from caviar.ordering.order.cart import Cart, CartItem, CustomerInput, DeliveryInput, PriceInput
from caviar.ordering.order.construction import (
    build_order,
    generate_order_number,
    validate_customer,
    validate_delivery,
)
from caviar.ordering.order.order import OrderStatus
from caviar.shared.errors import AppError, ErrorKind
from caviar.shared.money import Money

ORDER_NUMBER = re.compile(r"^ORD[0-9a-f]{8}-\d{4}$")


def _item(amount=100, currency="USD", quantity=1, product_id="prod-1", variant_id="var-1"):
    return CartItem(
        product_id=product_id,
        variant_id=variant_id,
        quantity=quantity,
        unit_price=PriceInput(amount=amount, currency=currency),
    )


def _cart(items=None, **overrides):
    data = {
        "customer": CustomerInput(phone="+380501112233", full_name="Taras Bondarenko"),
        "delivery": DeliveryInput(type="post_office", country="Ukraine", city="Lviv", post_office="Branch 7"),
        "items": items if items is not None else [_item()],
    }
    data.update(overrides)
    return Cart(**data)


def _invalid(cart) -> str:
    with pytest.raises(AppError) as exc:
        build_order(cart)
    assert exc.value.kind == ErrorKind.INVALID_INPUT
    return exc.value.message


class TestOrderNumber:
    def test_format(self):
        assert ORDER_NUMBER.match(generate_order_number())

    def test_numbers_differ(self):
        assert generate_order_number() != generate_order_number()


class TestBuildOrder:
    def test_two_item_total(self):
        cart = _cart(items=[_item(amount=100, quantity=2), _item(amount=250, quantity=1, variant_id="var-2")])
        order = build_order(cart)

        assert order.total_amount == Money(amount=450, currency="USD")
        assert order.status == OrderStatus.PENDING.value
        assert ORDER_NUMBER.match(order.order_number)
        assert len(order.items) == 2

    def test_item_totals(self):
        order = build_order(_cart(items=[_item(amount=300, quantity=3)]))
        item = order.items[0]
        assert item.unit_price == Money(amount=300, currency="USD")
        assert item.total_price == Money(amount=900, currency="USD")

    @pytest.mark.parametrize(
        "quantities, amounts",
        [([1], [1]), ([5, 2, 1], [100, 33, 7]), ([10, 10], [99999, 1])],
    )
    def test_total_is_sum_of_lines(self, quantities, amounts):
        items = [
            _item(amount=a, quantity=q, variant_id=f"var-{i}")
            for i, (q, a) in enumerate(zip(quantities, amounts, strict=True))
        ]
        order = build_order(_cart(items=items))
        assert order.total_amount.amount == sum(q * a for q, a in zip(quantities, amounts, strict=True))
        assert order.total_amount.currency == "USD"

    def test_timestamps_set(self):
        order = build_order(_cart())
        assert order.created_at is not None
        assert order.created_at == order.updated_at
        assert order.items[0].created_at == order.created_at

    def test_notes_kept(self):
        assert build_order(_cart(notes="ring twice")).notes == "ring twice"

    def test_mixed_currencies_rejected(self):
        cart = _cart(items=[_item(currency="USD"), _item(currency="EUR", variant_id="var-2")])
        assert _invalid(cart) == "all items must have the same currency"

    def test_empty_cart(self):
        assert _invalid(_cart(items=[])) == "order must contain at least one item"

    @pytest.mark.parametrize(
        "item, message",
        [
            (_item(product_id=""), "product ID is required for item 2"),
            (_item(variant_id=""), "variant ID is required for item 2"),
            (_item(quantity=0), "quantity must be greater than 0 for item 2"),
            (_item(amount=0), "unit price must be greater than 0 for item 2"),
            (_item(currency=""), "currency is required for item 2"),
        ],
    )
    def test_item_checks_name_position(self, item, message):
        assert _invalid(_cart(items=[_item(), item])) == message


class TestCustomerValidation:
    def test_phone_required(self):
        with pytest.raises(AppError) as exc:
            validate_customer(CustomerInput(full_name="Ivan Franko"))
        assert exc.value.message == "phone number is required"

    def test_full_name_alone_is_enough(self):
        info = validate_customer(CustomerInput(phone="1", full_name="Ivan Franko"))
        assert info.display_name == "Ivan Franko"

    def test_first_and_last_name_is_enough(self):
        info = validate_customer(CustomerInput(phone="1", first_name="Ivan", last_name="Franko"))
        assert info.display_name == "Ivan Franko"

    @pytest.mark.parametrize(
        "names",
        [{}, {"first_name": "Ivan"}, {"last_name": "Franko"}],
    )
    def test_missing_names(self, names):
        with pytest.raises(AppError) as exc:
            validate_customer(CustomerInput(phone="1", **names))
        assert exc.value.message == "either full name or both first and last name are required"


class TestDeliveryValidation:
    def test_country_required(self):
        with pytest.raises(AppError) as exc:
            validate_delivery(DeliveryInput(type="courier", city="Kyiv", address="Khreshchatyk 1"))
        assert exc.value.message == "country is required"

    def test_city_required(self):
        with pytest.raises(AppError) as exc:
            validate_delivery(DeliveryInput(type="courier", country="Ukraine", address="Khreshchatyk 1"))
        assert exc.value.message == "city is required"

    def test_unknown_type(self):
        with pytest.raises(AppError) as exc:
            validate_delivery(DeliveryInput(type="drone", country="Ukraine", city="Kyiv"))
        assert exc.value.message == "invalid delivery type"

    @pytest.mark.parametrize(
        "delivery_type, message",
        [
            ("post_office", "post office is required for post office delivery"),
            ("courier", "address is required for courier delivery"),
            ("address", "address is required for address delivery"),
        ],
    )
    def test_location_required_per_type(self, delivery_type, message):
        with pytest.raises(AppError) as exc:
            validate_delivery(DeliveryInput(type=delivery_type, country="Ukraine", city="Kyiv"))
        assert exc.value.message == message

    def test_courier_delivery(self):
        info = validate_delivery(
            DeliveryInput(type="courier", country="Ukraine", city="Kyiv", address="Khreshchatyk 1")
        )
        assert info.delivery_type == "courier"
        assert info.post_office is None

"""Shared BDD fixtures and step definitions for the order workflow."""

import pytest
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then

from caviar.catalogue.product import Product
from caviar.ordering.order.order import Order
from caviar.ordering.order.service import OrderService
from caviar.shared.errors import AppError

class UnavailableOrderStore:
    def __init__(self):
        self._inner = current_domain.repository_for(Order)

    def create_order(self, order):
        raise AppError.internal("failed to create order", ConnectionError("database is down"))

    def __getattr__(self, name):
        return getattr(self._inner, name)

@pytest.fixture
def products():
    return {}

@pytest.fixture
def workflow():
    return {"service": OrderService(), "order": None, "error": None}

# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an active product "{name}" with {stock:d} in stock'))
def _(products, make_product, make_variant_data, name, stock):
    products[name] = make_product(slug=name, variants=[make_variant_data(stock=stock)])

@given("the order store refuses new orders")
def _(workflow):
    workflow["service"] = OrderService(orders=UnavailableOrderStore())

# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(products, name, stock):
    product = current_domain.repository_for(Product).get(products[name].id)
    assert product.variants[0].stock == stock

@then(parsers.cfparse('the order status is "{status}"'))
def _(workflow, status):
    order = workflow["service"].get_order(workflow["order"].id)
    assert order.status == status

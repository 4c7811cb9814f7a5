import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Fetch and activate the domain by pushing the associated domain_context. The activated domain can then be referred to elsewhere as `current_domain`
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from caviar.domain import caviar

    caviar.init()
    caviar.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    from caviar.notifications.channel import reset_channels

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()

    reset_channels()


# ---------------------------------------------------------------------------
# Catalogue fixtures shared by every context
# ---------------------------------------------------------------------------
DETAILS = {
    "fish_age": "12 years",
    "grain_size": "3mm",
    "color": "dark grey",
    "taste": "nutty",
    "texture": "firm",
    "shelf_life_duration": "6 weeks",
    "min_temp_c": -4.0,
    "max_temp_c": 2.0,
}


def variant_data(mass=50, stock=10, amount=100, currency="USD", region="US"):
    return {"mass": mass, "stock": stock, "prices": {region: {"amount": amount, "currency": currency}}}


@pytest.fixture
def details():
    return dict(DETAILS)


@pytest.fixture
def make_product():
    """Create a product through the catalogue commands.

    Returns the persisted Product; it is activated unless ``active=False``.
    """
    import json

    from protean import current_domain

    from caviar.catalogue.management import CreateProduct, UpdateProduct
    from caviar.catalogue.product import Product

    counter = {"n": 0}

    def _make(slug=None, variants=None, active=True, **overrides):
        counter["n"] += 1
        command = CreateProduct(
            slug=slug or f"caviar-{counter['n']}",
            name=overrides.pop("name", "Osetra Royal"),
            subtitle=overrides.pop("subtitle", "Acipenser gueldenstaedtii"),
            description=overrides.pop("description", None),
            variants=json.dumps(variants or [variant_data()]),
            details=json.dumps(overrides.pop("details", DETAILS)),
        )
        product_id = current_domain.process(command, asynchronous=False)
        if active:
            current_domain.process(UpdateProduct(product_id=product_id, is_active=True), asynchronous=False)
        return current_domain.repository_for(Product).get(product_id)

    return _make


@pytest.fixture
def make_variant_data():
    return variant_data

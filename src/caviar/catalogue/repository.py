"""Catalogue store: product lookups, search, and relative stock adjustment."""

import threading
from collections import defaultdict

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.query import Q

from caviar.catalogue.filters import ProductFilter
from caviar.catalogue.product import Product, Variant
from caviar.domain import caviar
from caviar.shared.errors import AppError
from caviar.utils.db import SQL_PROVIDERS

logger = structlog.get_logger(__name__)

# Serializes stock deltas on providers without row-level updates, one lock per provider
_stock_locks: dict[str, threading.Lock] = defaultdict(threading.Lock)


def _contains(value, needle) -> bool:
    return bool(value) and needle.lower() in value.lower()


@caviar.repository(part_of=Product)
class ProductRepository:
    def get_by_id(self, product_id) -> Product:
        try:
            return self.get(product_id)
        except ObjectNotFoundError:
            raise AppError.not_found(f"product {product_id} not found") from None
        except Exception as exc:
            raise AppError.from_storage(exc, "retrieve product by ID") from exc

    def get_by_slug(self, slug) -> Product:
        try:
            products = self._dao.query.filter(slug=slug).all().items
        except Exception as exc:
            raise AppError.from_storage(exc, "retrieve product by slug") from exc
        if not products:
            raise AppError.not_found(f"product with slug {slug!r} not found")
        return products[0]

    def slug_exists(self, slug) -> bool:
        return bool(self._dao.query.filter(slug=slug).all().items)

    def get_variant(self, product_id, variant_id) -> Variant:
        """Return the variant only when it belongs to ``product_id``."""
        product = self.get_by_id(product_id)
        variant = product.find_variant(variant_id)
        if variant is None:
            raise AppError.not_found(f"variant {variant_id} not found for product {product_id}")
        return variant

    def update_variant_stock(self, variant_id, delta: int) -> Variant:
        """Apply ``stock := stock + delta`` to a single variant row atomically.

        SQL providers run one ``UPDATE ... SET stock = stock + delta``. Other
        providers read and write the row while holding a per-provider lock.
        Negative results are not rejected here: callers check availability
        first, and rollbacks must always be able to add stock back.
        """
        variant_dao = current_domain.repository_for(Variant)._dao
        provider = variant_dao.provider
        try:
            if provider.conn_info["provider"] in SQL_PROVIDERS:
                updated = self._sql_stock_delta(variant_dao, variant_id, delta)
            else:
                with _stock_locks[provider.name]:
                    variant = variant_dao.get(variant_id)
                    updated = variant_dao.update(variant, stock=variant.stock + delta)
        except ObjectNotFoundError:
            raise AppError.not_found(f"variant {variant_id} not found") from None
        except Exception as exc:
            raise AppError.from_storage(exc, "update variant stock") from exc

        logger.debug(
            "Variant stock adjusted",
            variant_id=str(variant_id),
            delta=delta,
            stock=updated.stock,
        )
        return updated

    def search(self, product_filter: ProductFilter) -> list[Product]:
        product_filter.normalize()

        query = self._dao.query
        if not product_filter.show_all:
            query = query.filter(is_active=True)
        if product_filter.slug:
            query = query.filter(slug=product_filter.slug)
        if product_filter.created_after:
            query = query.filter(created_at__gte=product_filter.created_after)
        if product_filter.created_before:
            query = query.filter(created_at__lte=product_filter.created_before)
        if product_filter.updated_after:
            query = query.filter(updated_at__gte=product_filter.updated_after)
        if product_filter.updated_before:
            query = query.filter(updated_at__lte=product_filter.updated_before)

        prefix = "-" if product_filter.sort_order == "desc" else ""
        try:
            products = query.order_by(f"{prefix}{product_filter.sort_by}").limit(None).all().items
        except Exception as exc:
            raise AppError.from_storage(exc, "list products") from exc

        # Text matching runs here so that every provider behaves the same
        if product_filter.name:
            products = [p for p in products if _contains(p.name, product_filter.name)]
        if product_filter.subtitle:
            products = [p for p in products if _contains(p.subtitle, product_filter.subtitle)]
        if product_filter.description:
            products = [p for p in products if _contains(p.description, product_filter.description)]
        if product_filter.search:
            term = product_filter.search
            products = [
                p
                for p in products
                if _contains(p.name, term) or _contains(p.subtitle, term) or _contains(p.description, term)
            ]

        start = product_filter.offset
        return products[start : start + product_filter.limit]

    @staticmethod
    def _sql_stock_delta(variant_dao, variant_id, delta: int) -> Variant:
        stock_column = variant_dao.database_model_cls.__table__.c.stock
        if not variant_dao._update_all(Q(id=variant_id), stock=stock_column + delta):
            raise ObjectNotFoundError(f"variant {variant_id} does not exist")
        return variant_dao.get(variant_id)

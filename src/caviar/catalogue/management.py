"""Product management: commands and handler."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from caviar.catalogue.product import Product, Variant
from caviar.domain import caviar

logger = structlog.get_logger(__name__)


def _loads(value):
    return json.loads(value) if isinstance(value, str) else value


@caviar.command(part_of="Product")
class CreateProduct:
    slug = String(required=True, max_length=200)
    name = String(required=True, max_length=255)
    subtitle = String(required=True, max_length=255)
    description = Text()
    variants = Text(required=True)  # JSON: list of {mass, stock, prices}
    details = Text(required=True)  # JSON: CaviarDetails attributes


@caviar.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    slug = String(max_length=200)
    name = String(max_length=255)
    subtitle = String(max_length=255)
    description = Text()
    details = Text()  # JSON
    is_active = Boolean()
    variants = Text()  # JSON: list of {id?, mass?, stock?, prices?}


@caviar.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)


@caviar.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        if repo.slug_exists(command.slug):
            raise ValidationError({"slug": [f"product with slug {command.slug!r} already exists"]})

        product = Product.create(
            slug=command.slug,
            name=command.name,
            subtitle=command.subtitle,
            description=command.description,
            variants=_loads(command.variants),
            details=_loads(command.details),
        )
        repo.add(product)
        logger.info("Product created", product_id=str(product.id), slug=product.slug)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_by_id(command.product_id)

        if command.slug and command.slug != product.slug and repo.slug_exists(command.slug):
            raise ValidationError({"slug": [f"product with slug {command.slug!r} already exists"]})

        product.update(
            slug=command.slug,
            name=command.name,
            subtitle=command.subtitle,
            description=command.description,
            details=_loads(command.details) if command.details else None,
            is_active=command.is_active,
        )

        for data in _loads(command.variants) or []:
            if data.get("id"):
                product.update_variant(
                    data["id"],
                    mass=data.get("mass"),
                    stock=data.get("stock"),
                    prices=data.get("prices"),
                )
            else:
                product.add_variant(mass=data.get("mass") or 0, prices=data.get("prices"), stock=data.get("stock") or 0)

        repo.add(product)
        logger.info("Product updated", product_id=str(product.id), is_active=product.is_active)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_by_id(command.product_id)

        variant_dao = current_domain.repository_for(Variant)._dao
        for variant in list(product.variants):
            variant_dao.delete(variant)
        repo._dao.delete(product)
        logger.info("Product deleted", product_id=str(command.product_id))

"""FastAPI endpoints for the Catalogue context."""

import json
from datetime import datetime

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from caviar.catalogue.api.schemas import (
    CreateProductRequest,
    DetailsSchema,
    PriceSchema,
    ProductIdResponse,
    ProductListResponse,
    ProductResponse,
    StatusResponse,
    UpdateProductRequest,
    VariantResponse,
)
from caviar.catalogue.filters import ProductFilter
from caviar.catalogue.management import CreateProduct, DeleteProduct, UpdateProduct
from caviar.catalogue.product import Product
from caviar.config import get_settings

product_router = APIRouter(prefix="/products", tags=["products"])


def _product_response(product) -> ProductResponse:
    details = None
    if product.details is not None:
        details = DetailsSchema(**product.details.to_dict())
    return ProductResponse(
        id=str(product.id),
        slug=product.slug,
        name=product.name,
        subtitle=product.subtitle,
        description=product.description,
        variants=[
            VariantResponse(
                id=str(v.id),
                mass=v.mass,
                stock=v.stock,
                prices={
                    region: PriceSchema(amount=m.amount, currency=m.currency)
                    for region, m in v.price_map.items()
                },
            )
            for v in product.variants
        ],
        details=details,
        is_active=product.is_active,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        slug=body.slug,
        name=body.name,
        subtitle=body.subtitle,
        description=body.description,
        variants=json.dumps([v.model_dump() for v in body.variants]),
        details=body.details.model_dump_json(),
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("", response_model=ProductListResponse)
async def list_products(
    slug: str | None = None,
    name: str | None = None,
    subtitle: str | None = None,
    description: str | None = None,
    search: str | None = None,
    show_all: bool = False,
    created_after: datetime | None = None,
    created_before: datetime | None = None,
    updated_after: datetime | None = None,
    updated_before: datetime | None = None,
    limit: int | None = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> ProductListResponse:
    product_filter = ProductFilter(
        slug=slug,
        name=name,
        subtitle=subtitle,
        description=description,
        search=search,
        show_all=show_all,
        created_after=created_after,
        created_before=created_before,
        updated_after=updated_after,
        updated_before=updated_before,
        limit=limit or get_settings().product_page_limit,
        offset=offset,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    products = current_domain.repository_for(Product).search(product_filter)
    return ProductListResponse(
        products=[_product_response(p) for p in products],
        count=len(products),
    )


@product_router.get("/slug/{slug}", response_model=ProductResponse)
async def get_product_by_slug(slug: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get_by_slug(slug)
    return _product_response(product)


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get_by_id(product_id)
    return _product_response(product)


@product_router.patch("/{product_id}", response_model=StatusResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> StatusResponse:
    command = UpdateProduct(
        product_id=product_id,
        slug=body.slug,
        name=body.name,
        subtitle=body.subtitle,
        description=body.description,
        details=body.details.model_dump_json() if body.details else None,
        is_active=body.is_active,
        variants=(
            json.dumps([v.model_dump(exclude_none=True) for v in body.variants]) if body.variants else None
        ),
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()

"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PriceSchema(BaseModel):
    amount: int = Field(..., ge=0)
    currency: str = Field(..., max_length=3)


class VariantInput(BaseModel):
    mass: int
    stock: int = 0
    prices: dict[str, PriceSchema]


class VariantUpdate(BaseModel):
    id: str | None = None
    mass: int | None = None
    stock: int | None = None
    prices: dict[str, PriceSchema] | None = None


class DetailsSchema(BaseModel):
    fish_age: str | None = None
    grain_size: str | None = None
    color: str | None = None
    taste: str | None = None
    texture: str | None = None
    shelf_life_duration: str | None = None
    min_temp_c: float | None = None
    max_temp_c: float | None = None


# --- Request Schemas ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "slug": "beluga-classic",
                    "name": "Beluga Classic",
                    "subtitle": "Huso huso, 20 year old fish",
                    "description": "Large light-grey grains with a creamy finish.",
                    "variants": [
                        {"mass": 50, "stock": 10, "prices": {"EU": {"amount": 12000, "currency": "EUR"}}}
                    ],
                    "details": {
                        "fish_age": "20 years",
                        "grain_size": "3.5mm",
                        "color": "light grey",
                        "taste": "buttery, mild",
                        "texture": "soft, creamy",
                        "shelf_life_duration": "8 weeks",
                        "min_temp_c": -4,
                        "max_temp_c": 2,
                    },
                }
            ]
        }
    }

    slug: str = Field(..., max_length=200)
    name: str = Field(..., max_length=255)
    subtitle: str = Field(..., max_length=255)
    description: str | None = None
    variants: list[VariantInput]
    details: DetailsSchema


class UpdateProductRequest(BaseModel):
    slug: str | None = Field(None, max_length=200)
    name: str | None = Field(None, max_length=255)
    subtitle: str | None = Field(None, max_length=255)
    description: str | None = None
    details: DetailsSchema | None = None
    is_active: bool | None = None
    variants: list[VariantUpdate] | None = None


# --- Response Schemas ---


class ProductIdResponse(BaseModel):
    product_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class VariantResponse(BaseModel):
    id: str
    mass: int
    stock: int
    prices: dict[str, PriceSchema]


class ProductResponse(BaseModel):
    id: str
    slug: str
    name: str
    subtitle: str
    description: str | None = None
    variants: list[VariantResponse]
    details: DetailsSchema | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    count: int

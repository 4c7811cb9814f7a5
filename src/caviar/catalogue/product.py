"""Product aggregate root with Variant entity and CaviarDetails value object."""

import json
import re
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Integer,
    String,
    Text,
    ValueObject,
)

from caviar.domain import caviar
from caviar.shared.money import Money

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def _now():
    return datetime.now(UTC)


@caviar.value_object(part_of="Product")
class CaviarDetails:
    """Descriptive attributes of a caviar product and its storage conditions."""

    fish_age: String(max_length=50)
    grain_size: String(max_length=50)
    color: String(max_length=50)
    taste: String(max_length=255)
    texture: String(max_length=255)
    shelf_life_duration: String(max_length=50)
    min_temp_c: Float()
    max_temp_c: Float()

    @invariant.post
    def temperature_range_must_be_ordered(self):
        if self.min_temp_c is None or self.max_temp_c is None:
            return
        if self.min_temp_c > self.max_temp_c:
            raise ValidationError(
                {"details": [f"Minimum temperature ({self.min_temp_c}) is above maximum ({self.max_temp_c})"]}
            )

    @property
    def shelf_life(self) -> dict:
        return {
            "duration": self.shelf_life_duration,
            "temp_range": {"min_c": self.min_temp_c, "max_c": self.max_temp_c},
        }


@caviar.entity(part_of="Product")
class Variant:
    """A purchasable configuration of a product: a fixed mass with its own stock.

    ``prices`` holds a JSON object mapping region codes to
    ``{"amount": int, "currency": str}``.
    """

    mass: Integer(required=True, min_value=1)
    stock: Integer(default=0)
    prices: Text(required=True)
    created_at: DateTime(default=_now)
    updated_at: DateTime(default=_now)

    @property
    def price_map(self) -> dict[str, Money]:
        raw = json.loads(self.prices) if self.prices else {}
        return {region: Money(amount=p["amount"], currency=p["currency"]) for region, p in raw.items()}

    def price_for(self, region: str) -> Money | None:
        return self.price_map.get(region)


def _validate_prices(prices, index) -> str:
    if not prices:
        raise ValidationError({"variants": [f"variant must have at least one price (index {index})"]})

    normalized = {}
    for region, price in prices.items():
        amount = price.get("amount") if isinstance(price, dict) else None
        currency = price.get("currency") if isinstance(price, dict) else None
        if not isinstance(amount, int) or amount <= 0:
            raise ValidationError({"prices": [f"price amount must be > 0 for region {region}"]})
        if not currency:
            raise ValidationError({"prices": [f"currency is required for region {region}"]})
        normalized[region] = {"amount": amount, "currency": currency}
    return json.dumps(normalized, sort_keys=True)


def _build_variant(data: dict, index: int) -> Variant:
    mass = data.get("mass") or 0
    stock = data.get("stock") or 0
    if mass <= 0:
        raise ValidationError({"variants": [f"variant mass must be > 0 (index {index})"]})
    if stock < 0:
        raise ValidationError({"variants": [f"variant stock cannot be negative (index {index})"]})

    return Variant(mass=mass, stock=stock, prices=_validate_prices(data.get("prices"), index))


def _build_details(data: dict) -> CaviarDetails:
    required = (
        ("fish_age", "fish age is required in details"),
        ("grain_size", "grain size is required in details"),
        ("color", "color is required in details"),
        ("taste", "taste is required in details"),
        ("texture", "texture is required in details"),
        ("shelf_life_duration", "shelf life duration is required"),
    )
    for key, message in required:
        if not data.get(key):
            raise ValidationError({"details": [message]})

    return CaviarDetails(
        fish_age=data["fish_age"],
        grain_size=data["grain_size"],
        color=data["color"],
        taste=data["taste"],
        texture=data["texture"],
        shelf_life_duration=data["shelf_life_duration"],
        min_temp_c=data.get("min_temp_c"),
        max_temp_c=data.get("max_temp_c"),
    )


def _validate_slug(slug):
    if not slug:
        raise ValidationError({"slug": ["slug is required"]})
    if not _SLUG_PATTERN.match(slug):
        raise ValidationError({"slug": ["Slug must contain only lowercase alphanumeric characters and single hyphens"]})


@caviar.aggregate
class Product:
    """Product aggregate root. Owns its variants."""

    slug: String(required=True, max_length=200, unique=True)
    name: String(required=True, max_length=255)
    subtitle: String(required=True, max_length=255)
    description: Text()
    variants: HasMany(Variant)
    details: ValueObject(CaviarDetails)
    is_active: Boolean(default=False)
    created_at: DateTime(default=_now)
    updated_at: DateTime(default=_now)

    @classmethod
    def create(cls, slug, name, subtitle, variants, details, description=None):
        """Validate the input and build an inactive product.

        ``variants`` is a list of ``{"mass", "stock", "prices"}`` dicts and
        ``details`` a dict of CaviarDetails attributes.
        """
        _validate_slug(slug)
        if not name:
            raise ValidationError({"name": ["name is required"]})
        if not subtitle:
            raise ValidationError({"subtitle": ["subtitle is required"]})
        if not variants:
            raise ValidationError({"variants": ["at least one variant is required"]})

        built_variants = [_build_variant(data, index) for index, data in enumerate(variants)]
        built_details = _build_details(details or {})

        now = _now()
        return cls(
            slug=slug,
            name=name,
            subtitle=subtitle,
            description=description,
            variants=built_variants,
            details=built_details,
            is_active=False,
            created_at=now,
            updated_at=now,
        )

    def update(self, slug=None, name=None, subtitle=None, description=None, details=None, is_active=None):
        if slug is not None:
            _validate_slug(slug)
            self.slug = slug
        if name is not None:
            self.name = name
        if subtitle is not None:
            self.subtitle = subtitle
        if description is not None:
            self.description = description
        if details is not None:
            self.details = _build_details(details)
        if is_active is not None:
            self.is_active = is_active

        self.updated_at = _now()

    def find_variant(self, variant_id) -> Variant | None:
        return next((v for v in self.variants if str(v.id) == str(variant_id)), None)

    def add_variant(self, mass, prices, stock=0) -> Variant:
        variant = _build_variant({"mass": mass, "stock": stock, "prices": prices}, len(self.variants))
        self.add_variants(variant)
        self.updated_at = _now()
        return variant

    def update_variant(self, variant_id, mass=None, stock=None, prices=None):
        variant = self.find_variant(variant_id)
        if variant is None:
            raise ValidationError({"variants": [f"Variant {variant_id} not found"]})

        if mass is not None:
            if mass <= 0:
                raise ValidationError({"variants": [f"variant mass must be > 0 ({variant_id})"]})
            variant.mass = mass
        if stock is not None:
            if stock < 0:
                raise ValidationError({"variants": [f"variant stock cannot be negative ({variant_id})"]})
            variant.stock = stock
        if prices is not None:
            variant.prices = _validate_prices(prices, variant_id)

        now = _now()
        variant.updated_at = now
        self.updated_at = now

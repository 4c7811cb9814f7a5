"""Search criteria for catalogue listings."""

from dataclasses import dataclass
from datetime import datetime

DEFAULT_LIMIT = 20
MAX_LIMIT = 100
SORTABLE_FIELDS = ("created_at", "updated_at", "name")


@dataclass
class ProductFilter:
    slug: str | None = None
    name: str | None = None
    subtitle: str | None = None
    description: str | None = None
    search: str | None = None
    show_all: bool = False

    created_after: datetime | None = None
    created_before: datetime | None = None
    updated_after: datetime | None = None
    updated_before: datetime | None = None

    limit: int = DEFAULT_LIMIT
    offset: int = 0
    sort_by: str = "created_at"
    sort_order: str = "desc"

    def normalize(self) -> "ProductFilter":
        """Clamp paging and fall back to the default sort on unknown values."""
        if self.limit <= 0:
            self.limit = DEFAULT_LIMIT
        if self.limit > MAX_LIMIT:
            self.limit = MAX_LIMIT
        if self.offset < 0:
            self.offset = 0
        if self.sort_by not in SORTABLE_FIELDS:
            self.sort_by = "created_at"
        if self.sort_order not in ("asc", "desc"):
            self.sort_order = "desc"
        return self

    def is_empty(self) -> bool:
        return not any(
            (
                self.slug,
                self.name,
                self.subtitle,
                self.description,
                self.search,
                self.created_after,
                self.created_before,
                self.updated_after,
                self.updated_before,
            )
        )

"""Criteria for order listings."""

from dataclasses import dataclass
from datetime import datetime

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass
class OrderFilter:
    status: str | None = None
    customer_phone: str | None = None  # substring match
    country: str | None = None  # exact match
    created_from: datetime | None = None
    created_to: datetime | None = None
    limit: int = 0  # 0 means no limit
    offset: int = 0

    @classmethod
    def for_page(cls, page: int = 1, limit: int = DEFAULT_PAGE_SIZE, **criteria) -> "OrderFilter":
        """Translate 1-based page numbers into offset/limit."""
        if limit <= 0:
            limit = DEFAULT_PAGE_SIZE
        limit = min(limit, MAX_PAGE_SIZE)
        page = max(page, 1)
        return cls(limit=limit, offset=(page - 1) * limit, **criteria)

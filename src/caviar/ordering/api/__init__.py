"""Ordering API package."""

from caviar.ordering.api.routes import router

__all__ = ["router"]

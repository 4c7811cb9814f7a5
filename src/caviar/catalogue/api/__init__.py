"""Catalogue API package."""

from caviar.catalogue.api.routes import product_router

__all__ = ["product_router"]

"""Catalogue domain API package."""

from catalogue.api.routes import ingredient_router, product_router

__all__ = ["product_router", "ingredient_router"]

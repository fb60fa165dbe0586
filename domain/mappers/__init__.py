"""
Domain mappers package.
Handles transformation between MongoDB documents and catalog schemas.
"""

from domain.mappers.catalog_mapper import CatalogMapper

__all__ = ["CatalogMapper"]

"""
Domain layer - Catalog enums, schemas, and document mappers.
"""

from domain import enums, mappers, schemas

__all__ = ["enums", "mappers", "schemas"]

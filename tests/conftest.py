"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports and provides an
in-memory MongoDB (mongomock-motor) so no database server is needed.
"""

import sys
from pathlib import Path

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from repositories import IngredientRepository, ProductRepository
from services import CatalogService, IngredientReconciler


@pytest.fixture
def db():
    """Fresh in-memory database per test"""
    return AsyncMongoMockClient()["healthybites_test"]


@pytest.fixture
def ingredient_repository(db):
    return IngredientRepository(db)


@pytest.fixture
def reconciler(ingredient_repository):
    return IngredientReconciler(ingredient_repository)


@pytest.fixture
def product_repository(db, reconciler):
    return ProductRepository(db, reconciler=reconciler)


@pytest.fixture
def catalog_service(product_repository, ingredient_repository):
    return CatalogService(product_repository, ingredient_repository)


@pytest.fixture
def client(db):
    """TestClient whose routes talk to the in-memory database.

    Used without a ``with`` block so the lifespan (real MongoDB connect) does not run.
    """
    from main import app
    from api.dependencies import get_database

    app.dependency_overrides[get_database] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

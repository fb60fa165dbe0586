"""
Shared test data builders for the HealthyBites test suite.

Realistic catalog entries reused across repository, service and endpoint tests.
"""

from domain.enums import FoodType, LifeStage, Species, Unit
from domain.schemas.product_schemas import FeedingChartEntry, ProductCreate, SizeCreate


CHICKEN_RICE_INGREDIENTS = ["Chicken", "Brown Rice", "Chicken Fat", "Fish Oil"]


def make_size(packaging="bag", price=54.99, count=30, unit=Unit.LB, **overrides):
    """
    Create a size payload for a product.

    Defaults to a 30 lb bag, a common dry-food size.
    """
    return SizeCreate(
        packaging=packaging,
        price=price,
        count=count,
        unit=unit,
        links=overrides.pop("links", ["https://example.com/buy/30lb"]),
        **overrides,
    )


def make_feeding_row(min_weight=10, max_weight=20, min_serving=1.0, max_serving=1.5):
    return FeedingChartEntry(
        min_age=1,
        max_age=7,
        min_weight=min_weight,
        max_weight=max_weight,
        min_serving=min_serving,
        max_serving=max_serving,
    )


def make_product(
    brand="Hill's Science Diet",
    flavor="Chicken & Brown Rice",
    species=Species.DOG,
    life_stage=LifeStage.ADULT,
    food_type=FoodType.DRY,
    ingredients=None,
    sizes=None,
    feeding_chart=None,
):
    """
    Create a ProductCreate for testing with realistic data.

    Example:
        >>> product = make_product(life_stage=LifeStage.ALL)
        >>> product.life_stage
        <LifeStage.ALL: 'all'>
    """
    return ProductCreate(
        brand=brand,
        flavor=flavor,
        species=species,
        life_stage=life_stage,
        food_type=food_type,
        ingredients=list(CHICKEN_RICE_INGREDIENTS if ingredients is None else ingredients),
        sizes=[make_size()] if sizes is None else sizes,
        feeding_chart=[make_feeding_row()] if feeding_chart is None else feeding_chart,
    )


def product_payload(**overrides):
    """JSON body for POST /api/products, camelCase as a browser client sends it"""
    payload = {
        "brand": "Purina Pro Plan",
        "flavor": "Salmon & Rice",
        "species": "cat",
        "lifeStage": "adult",
        "foodType": "dry",
        "ingredients": ["Salmon", "Rice", "Poultry By-Product Meal"],
        "sizes": [
            {
                "type": "bag",
                "price": 32.48,
                "count": 7,
                "unit": "lb",
                "links": ["https://example.com/pro-plan-7lb"],
            }
        ],
        "feedingChart": [
            {
                "minAge": 1,
                "maxAge": 10,
                "minWeight": 5,
                "maxWeight": 10,
                "minServing": 0.5,
                "maxServing": 0.75,
            }
        ],
    }
    payload.update(overrides)
    return payload

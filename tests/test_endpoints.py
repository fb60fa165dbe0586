"""
HTTP-level tests for the HealthyBites API.

Routes run against the in-memory database through the ``client`` fixture;
data is seeded through the API itself.
"""

from bson import ObjectId

from test_fixtures import product_payload


def create_product(client, **overrides):
    response = client.post("/api/products", json=product_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


def create_ingredient(client, name, ratings=None):
    response = client.post("/api/ingredients", json={"name": name, "ratings": ratings or []})
    assert response.status_code == 201, response.text
    return response.json()


# =============================================================================
# WELCOME / HEALTH
# =============================================================================


def test_welcome_messages(client):
    root = client.get("/")
    api = client.get("/api")

    assert root.status_code == 200
    assert root.text == "Welcome to the HealthyBites Server."
    assert api.text == "Welcome to the HealthyBites API."


def test_health_check_reports_database_down_without_connection(client):
    response = client.get("/health-check")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["database"] == "down"


def test_responses_carry_request_id(client):
    response = client.get("/")

    assert response.headers.get("X-Request-ID")
    assert response.headers.get("X-Process-Time")


# =============================================================================
# PRODUCTS
# =============================================================================


def test_create_product_returns_camel_case_record(client):
    body = create_product(client)

    assert ObjectId.is_valid(body["id"])
    assert body["lifeStage"] == "adult"
    assert body["foodType"] == "dry"
    assert body["sizes"][0]["packaging"] == "bag"
    assert body["sizes"][0]["price"] == 32.48
    assert ObjectId.is_valid(body["sizes"][0]["id"])
    assert body["feedingChart"][0]["minServing"] == 0.5


def test_create_duplicate_product_returns_400(client):
    create_product(client)

    response = client.post("/api/products", json=product_payload())

    assert response.status_code == 400
    assert response.json() == {"error": "Product already exists", "code": "ALREADY_EXISTS"}


def test_create_product_with_bad_enum_returns_400(client):
    response = client.post("/api/products", json=product_payload(species="fish"))

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["error"].startswith("species:")
    assert client.get("/api/products").json() == []


def test_create_product_missing_fields_returns_400(client):
    response = client.post("/api/products", json={"brand": "Orijen"})

    assert response.status_code == 400
    assert response.json()["error"] == "flavor: Field required"


def test_create_product_registers_ingredients(client):
    create_product(client)

    response = client.get("/api/ingredients", params={"species": "cat", "rating": "null"})

    assert response.status_code == 200
    assert sorted(i["name"] for i in response.json()) == [
        "Poultry By-Product Meal",
        "Rice",
        "Salmon",
    ]


def test_list_products_filters(client):
    create_product(client)
    create_product(client, flavor="Kitten Chicken", lifeStage="young")
    create_product(client, flavor="Any Age Turkey", lifeStage="all")

    response = client.get("/api/products", params={"species": "cat", "lifeStage": "adult"})

    assert response.status_code == 200
    assert sorted(p["flavor"] for p in response.json()) == ["Any Age Turkey", "Salmon & Rice"]


def test_list_products_invalid_filter_returns_400(client):
    response = client.get("/api/products", params={"foodType": "frozen"})

    assert response.status_code == 400
    assert response.json()["code"] == "SERVICE_VALIDATION_ERROR"


def test_get_product_by_id(client):
    created = create_product(client)

    response = client.get("/api/products", params={"id": created["id"]})

    assert response.status_code == 200
    assert response.json()["id"] == created["id"]


def test_get_unknown_product_returns_404(client):
    response = client.get("/api/products", params={"id": str(ObjectId())})

    assert response.status_code == 404
    assert response.json()["error"] == "Product not found"


def test_update_and_delete_product(client):
    created = create_product(client)

    updated = client.patch(f"/api/products/{created['id']}", json={"flavor": "Turkey & Rice"})
    empty = client.patch(f"/api/products/{created['id']}", json={})
    deleted = client.delete(f"/api/products/{created['id']}")
    missing = client.delete(f"/api/products/{created['id']}")

    assert updated.status_code == 200
    assert updated.json()["flavor"] == "Turkey & Rice"
    assert empty.status_code == 400
    assert empty.json()["code"] == "NO_UPDATES_PROVIDED"
    assert deleted.status_code == 200
    assert missing.status_code == 400
    assert missing.json()["error"] == "Product not found"


def test_size_routes(client):
    created = create_product(client)
    product_id = created["id"]

    added = client.post(
        f"/api/products/{product_id}/sizes",
        json={"type": "bag", "price": 59.99, "count": 16, "unit": "lb"},
    )
    assert added.status_code == 201
    size_id = added.json()["sizes"][1]["id"]

    incomplete = client.post(
        f"/api/products/{product_id}/sizes", json={"type": "bag", "count": 3, "unit": "lb"}
    )
    assert incomplete.status_code == 400
    assert incomplete.json()["code"] == "INCOMPLETE_SIZE_DETAILS"

    updated = client.patch(f"/api/products/{product_id}/sizes/{size_id}", json={"price": 54.99})
    assert updated.status_code == 200
    assert updated.json()["sizes"][1]["price"] == 54.99

    removed = client.delete(f"/api/products/{product_id}/sizes/{size_id}")
    assert removed.status_code == 200
    assert len(removed.json()["sizes"]) == 1

    gone = client.delete(f"/api/products/{product_id}/sizes/{size_id}")
    assert gone.status_code == 400
    assert gone.json()["code"] == "SIZE_NOT_FOUND"


def test_product_ingredient_ratings(client):
    created = create_product(client)
    client.post(
        "/api/ingredients/push",
        json={"name": "Salmon", "species": "cat", "healthRating": 9},
    )

    response = client.get(f"/api/products/{created['id']}/ingredients")

    assert response.status_code == 200
    ratings = {r["name"]: r["healthRating"] for r in response.json()}
    assert ratings == {"Salmon": 9, "Rice": None, "Poultry By-Product Meal": None}


# =============================================================================
# INGREDIENTS
# =============================================================================


def test_create_ingredient_and_duplicate(client):
    body = create_ingredient(client, "Chicken", [{"species": "dog", "healthRating": 7}])

    duplicate = client.post("/api/ingredients", json={"name": "Chicken"})

    assert body["ratings"][0]["healthRating"] == 7
    assert duplicate.status_code == 400
    assert duplicate.json()["code"] == "ALREADY_EXISTS"


def test_rating_out_of_range_returns_400(client):
    response = client.post(
        "/api/ingredients", json={"name": "Corn", "ratings": [{"species": "dog", "healthRating": 11}]}
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert response.json()["error"].startswith("ratings.0.healthRating:")


def test_list_ingredients_rating_bounds(client):
    create_ingredient(client, "Corn", [{"species": "dog", "healthRating": -4}])
    create_ingredient(client, "Chicken", [{"species": "dog", "healthRating": 7}])

    response = client.get("/api/ingredients", params={"minRating": 0, "maxRating": 10})
    malformed = client.get("/api/ingredients", params={"rating": "great"})

    assert [i["name"] for i in response.json()] == ["Chicken"]
    assert malformed.status_code == 400


def test_get_unknown_ingredient_returns_404(client):
    response = client.get("/api/ingredients", params={"id": "not-an-id"})

    assert response.status_code == 404


def test_push_is_idempotent(client):
    first = client.post("/api/ingredients/push", json={"name": "Kelp", "species": "dog"})
    second = client.post(
        "/api/ingredients/push",
        json={"name": "Kelp", "species": "dog", "notes": "Source of iodine"},
    )

    assert first.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    rating = second.json()["ratings"][0]
    assert rating["healthRating"] is None
    assert rating["notes"] == "Source of iodine"


def test_push_many(client):
    response = client.post(
        "/api/ingredients/push-many",
        json=[
            {"name": "Peas", "species": "dog", "healthRating": 2},
            {"name": "Peas", "species": "cat"},
        ],
    )

    assert response.status_code == 200
    final = response.json()[-1]
    assert sorted(r["species"] for r in final["ratings"]) == ["cat", "dog"]


def test_species_ratings_view(client):
    create_ingredient(client, "Chicken", [{"species": "cat", "healthRating": 8}])
    create_ingredient(client, "Corn", [{"species": "dog", "healthRating": -4}])

    response = client.get(
        "/api/ingredients/ratings", params={"species": "cat", "names": ["Chicken", "Corn"]}
    )

    assert response.status_code == 200
    assert response.json() == [
        {
            "id": response.json()[0]["id"],
            "name": "Chicken",
            "species": "cat",
            "healthRating": 8,
            "notes": None,
        }
    ]


def test_rating_routes(client):
    chicken = create_ingredient(client, "Chicken", [{"species": "cat", "healthRating": 8}])
    base = f"/api/ingredients/{chicken['id']}/ratings"

    added = client.post(base, json={"species": "dog", "healthRating": 6})
    repeated = client.post(base, json={"species": "dog", "healthRating": 1})
    updated = client.patch(f"{base}/dog", json={"notes": "Good protein"})
    removed = client.delete(f"{base}/cat")
    missing = client.delete(f"{base}/cat")

    assert added.status_code == 201
    assert repeated.json()["code"] == "RATING_ALREADY_EXISTS"
    assert updated.json()["ratings"][1]["notes"] == "Good protein"
    assert [r["species"] for r in removed.json()["ratings"]] == ["dog"]
    assert missing.json()["code"] == "RATING_NOT_FOUND"


def test_update_and_delete_ingredient(client):
    chicken = create_ingredient(client, "Chiken")

    renamed = client.patch(f"/api/ingredients/{chicken['id']}", json={"name": "Chicken"})
    deleted = client.delete(f"/api/ingredients/{chicken['id']}")

    assert renamed.json()["name"] == "Chicken"
    assert deleted.status_code == 200
    assert client.get("/api/ingredients", params={"id": chicken["id"]}).status_code == 404


def test_merge_ingredients(client):
    primary = create_ingredient(client, "Chicken", [{"species": "dog", "healthRating": 6}])
    duplicate = create_ingredient(client, "chicken", [{"species": "cat", "healthRating": 8}])

    merged = client.post(f"/api/ingredients/{primary['id']}/merge/{duplicate['id']}")
    again = client.post(f"/api/ingredients/{primary['id']}/merge/{duplicate['id']}")
    itself = client.post(f"/api/ingredients/{primary['id']}/merge/{primary['id']}")

    assert merged.status_code == 200
    assert sorted(r["species"] for r in merged.json()["ratings"]) == ["cat", "dog"]
    assert again.status_code == 400
    assert again.json()["error"] == "One or both ingredients not found"
    assert itself.json()["code"] == "SERVICE_VALIDATION_ERROR"

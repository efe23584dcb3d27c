# tests/test_products_api.py

"""End-to-end tests for the single-product endpoints and the listing query."""

import uuid

import pytest

from tests.conftest import API


async def _create(client, payload):
    response = await client.post(f"{API}/CreateProduct", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateProduct:
    @pytest.mark.asyncio
    async def test_creates_and_shapes_product(self, client, make_product):
        response = await client.post(f"{API}/CreateProduct", json=make_product())
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Product created successfully"
        data = body["data"]
        assert uuid.UUID(data["_id"])
        assert data["name"] == "Galaxy Phone X"
        assert data["variants"] == ["128GB", "256GB"]
        assert data["colors"] == ["Black", "Silver"]
        assert data["size"] == []
        assert data["isActive"] is True
        assert data["isFeatured"] is False
        assert "createdAt" in data and "updatedAt" in data

    @pytest.mark.asyncio
    async def test_electronics_without_variants_is_rejected(self, client, make_product):
        payload = make_product()
        del payload["variants"]
        response = await client.post(f"{API}/CreateProduct", json=payload)
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        assert body["errors"]["category"] == ["Variants are required for electronics category"]

    @pytest.mark.asyncio
    async def test_clothing_without_size_is_rejected(self, client, make_clothing):
        payload = make_clothing()
        del payload["size"]
        response = await client.post(f"{API}/CreateProduct", json=payload)
        assert response.status_code == 400
        assert response.json()["errors"]["category"] == ["Size is required for clothing category"]

    @pytest.mark.asyncio
    async def test_clothing_with_size_is_created(self, client, make_clothing):
        data = await _create(client, make_clothing())
        assert data["size"] == ["M", "L"]
        assert data["variants"] == []

    @pytest.mark.asyncio
    async def test_duplicate_name_is_rejected(self, client, make_product):
        await _create(client, make_product())
        response = await client.post(f"{API}/CreateProduct", json=make_product(brand="Other Brand"))
        assert response.status_code == 400
        assert response.json()["errors"]["name"] == ['Product with name "Galaxy Phone X" already exists']

    @pytest.mark.asyncio
    async def test_errors_from_several_fields_are_reported_together(self, client, make_product):
        await _create(client, make_product())
        response = await client.post(
            f"{API}/CreateProduct", json=make_product(price=-5, variants=[], seller="x")
        )
        errors = response.json()["errors"]
        assert response.status_code == 400
        assert errors["price"] == ["Price cannot be negative"]
        assert errors["seller"] == ["Seller name must be at least 2 characters"]
        assert errors["category"] == ["Variants are required for electronics category"]
        assert errors["name"] == ['Product with name "Galaxy Phone X" already exists']

    @pytest.mark.asyncio
    async def test_list_category_is_a_validation_error(self, client, make_product):
        response = await client.post(f"{API}/CreateProduct", json=make_product(category=["electronics"]))
        assert response.status_code == 400
        assert response.json()["errors"]["category"] == [
            "Category must be one of: electronics, clothing, or others"
        ]

    @pytest.mark.asyncio
    async def test_non_object_body_is_rejected(self, client):
        response = await client.post(f"{API}/CreateProduct", json=[1, 2])
        assert response.status_code == 400
        assert response.json()["errors"] == {"general": ["Request body must be a product object"]}


class TestGetUpdateDelete:
    @pytest.mark.asyncio
    async def test_get_by_id(self, client, make_product):
        created = await _create(client, make_product())
        response = await client.get(f"{API}/GetProductById/{created['_id']}")
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Galaxy Phone X"

    @pytest.mark.asyncio
    async def test_get_missing_product_is_404(self, client):
        response = await client.get(f"{API}/GetProductById/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": {"message": "Product not found", "details": None, "statusCode": 404},
        }

    @pytest.mark.asyncio
    async def test_malformed_id_is_400(self, client):
        response = await client.get(f"{API}/GetProductById/not-a-uuid")
        assert response.status_code == 400
        assert "product_id" in response.json()["errors"]

    @pytest.mark.asyncio
    async def test_partial_update_changes_only_supplied_fields(self, client, make_product):
        created = await _create(client, make_product())
        response = await client.put(
            f"{API}/UpdateProductById/{created['_id']}", json={"price": 449.5, "isFeatured": True}
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["price"] == 449.5
        assert data["isFeatured"] is True
        assert data["name"] == created["name"]
        assert data["variants"] == created["variants"]
        assert response.json()["message"] == "Product updated successfully"

    @pytest.mark.asyncio
    async def test_update_replaces_list_fields(self, client, make_product):
        created = await _create(client, make_product())
        response = await client.put(f"{API}/UpdateProductById/{created['_id']}", json={"colors": ["Gold"]})
        assert response.status_code == 200
        assert response.json()["data"]["colors"] == ["Gold"]

        fetched = await client.get(f"{API}/GetProductById/{created['_id']}")
        assert fetched.json()["data"]["colors"] == ["Gold"]

    @pytest.mark.asyncio
    async def test_update_checks_the_merged_record(self, client, make_product):
        created = await _create(client, make_product())
        response = await client.put(f"{API}/UpdateProductById/{created['_id']}", json={"category": "clothing"})
        assert response.status_code == 400
        errors = response.json()["errors"]
        assert errors["category"] == ["Size is required for clothing category"]
        assert errors["variants"] == ["Variants are only allowed for electronics category"]

    @pytest.mark.asyncio
    async def test_update_with_object_category_is_400(self, client, make_product):
        created = await _create(client, make_product())
        response = await client.put(f"{API}/UpdateProductById/{created['_id']}", json={"category": {"a": 1}})
        assert response.status_code == 400
        assert "category" in response.json()["errors"]

    @pytest.mark.asyncio
    async def test_update_to_taken_name_is_rejected(self, client, make_product):
        await _create(client, make_product(name="First Phone"))
        second = await _create(client, make_product(name="Second Phone"))
        response = await client.put(f"{API}/UpdateProductById/{second['_id']}", json={"name": "First Phone"})
        assert response.status_code == 400
        assert response.json()["errors"]["name"] == ['Product with name "First Phone" already exists']

    @pytest.mark.asyncio
    async def test_update_keeping_own_name_is_allowed(self, client, make_product):
        created = await _create(client, make_product())
        response = await client.put(
            f"{API}/UpdateProductById/{created['_id']}", json={"name": created["name"], "ratings": 3.5}
        )
        assert response.status_code == 200
        assert response.json()["data"]["ratings"] == 3.5

    @pytest.mark.asyncio
    async def test_update_missing_product_is_404(self, client):
        response = await client.put(f"{API}/UpdateProductById/{uuid.uuid4()}", json={"price": 1})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_by_id(self, client, make_product):
        created = await _create(client, make_product())
        response = await client.delete(f"{API}/DeleteProductById/{created['_id']}")
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Product deleted successfully"}

        missing = await client.get(f"{API}/GetProductById/{created['_id']}")
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_product_is_404(self, client):
        response = await client.delete(f"{API}/DeleteProductById/{uuid.uuid4()}")
        assert response.status_code == 404


class TestGetAllProducts:
    @pytest.mark.asyncio
    async def test_price_range_filters_and_total_counts_whole_match(self, client, make_product):
        for index, price in enumerate([5, 10, 30, 50, 75]):
            await _create(client, make_product(name=f"Phone {index}", price=price))

        response = await client.get(f"{API}/GetAllProducts", params={"priceMin": 10, "priceMax": 50, "limit": 2})
        body = response.json()
        assert response.status_code == 200
        assert body["total"] == 3
        assert body["totalPages"] == 2
        assert len(body["data"]) == 2
        assert all(10 <= product["price"] <= 50 for product in body["data"])

    @pytest.mark.asyncio
    async def test_pagination_returns_requested_window(self, client, make_product):
        for index in range(1, 13):
            await _create(client, make_product(name=f"Item {index:02d}"))

        response = await client.get(f"{API}/GetAllProducts", params={"page": 2, "limit": 5, "sort": "name"})
        body = response.json()
        assert [product["name"] for product in body["data"]] == [f"Item {i:02d}" for i in range(6, 11)]
        assert body["total"] == 12
        assert body["page"] == 2
        assert body["limit"] == 5
        assert body["totalPages"] == 3

    @pytest.mark.asyncio
    async def test_default_sort_is_newest_first(self, client, make_product):
        for name in ["Alpha Phone", "Beta Phone", "Gamma Phone"]:
            await _create(client, make_product(name=name))

        response = await client.get(f"{API}/GetAllProducts")
        assert [product["name"] for product in response.json()["data"]] == ["Gamma Phone", "Beta Phone", "Alpha Phone"]

    @pytest.mark.asyncio
    async def test_unknown_sort_falls_back_to_default(self, client, make_product):
        for name in ["Alpha Phone", "Beta Phone"]:
            await _create(client, make_product(name=name))

        response = await client.get(f"{API}/GetAllProducts", params={"sort": "bogus"})
        assert [product["name"] for product in response.json()["data"]] == ["Beta Phone", "Alpha Phone"]

    @pytest.mark.asyncio
    async def test_sort_by_price_descending(self, client, make_product):
        for index, price in enumerate([20, 90, 45]):
            await _create(client, make_product(name=f"Phone {index}", price=price))

        response = await client.get(f"{API}/GetAllProducts", params={"sort": "priceDesc"})
        assert [product["price"] for product in response.json()["data"]] == [90, 45, 20]

    @pytest.mark.asyncio
    async def test_search_matches_name_brand_and_category(self, client, make_product, make_clothing):
        await _create(client, make_product(name="Galaxy Phone X", brand="Samsung"))
        await _create(client, make_product(name="Pixel Phone", brand="Google"))
        await _create(client, make_clothing(name="Summer Dress", brand="Zara"))

        async def names(search):
            response = await client.get(f"{API}/GetAllProducts", params={"search": search})
            return sorted(product["name"] for product in response.json()["data"])

        assert await names("galaxy") == ["Galaxy Phone X"]
        assert await names("GOOGLE") == ["Pixel Phone"]
        assert await names("cloth") == ["Summer Dress"]
        assert await names("%") == []

    @pytest.mark.asyncio
    async def test_ratings_and_category_filters(self, client, make_product, make_clothing):
        await _create(client, make_product(name="Low Rated Phone", ratings=2.0))
        await _create(client, make_product(name="High Rated Phone", ratings=4.8))
        await _create(client, make_clothing(name="High Rated Shirt", ratings=4.9))

        response = await client.get(f"{API}/GetAllProducts", params={"ratings": 4, "category": "electronics"})
        assert [product["name"] for product in response.json()["data"]] == ["High Rated Phone"]

    @pytest.mark.asyncio
    async def test_list_filters_use_any_of_matching_per_category(self, client, make_product, make_clothing):
        await _create(client, make_product(name="Red Phone", colors=["Red"], variants=["64GB"]))
        await _create(client, make_product(name="Blue Phone", colors=["Blue", "Green"], variants=["128GB"]))
        await _create(client, make_clothing(name="Red Shirt", colors=["Red"], size=["S"]))

        async def names(**params):
            response = await client.get(f"{API}/GetAllProducts", params=params)
            return sorted(product["name"] for product in response.json()["data"])

        assert await names(category="electronics", colors="Red,Green") == ["Blue Phone", "Red Phone"]
        assert await names(category="electronics", variants="128GB") == ["Blue Phone"]
        assert await names(category="clothing", size="S,XL") == ["Red Shirt"]
        assert await names(category="clothing", size="XL") == []
        # list filters only apply alongside a category that carries them
        assert await names(colors="Blue") == ["Blue Phone", "Red Phone", "Red Shirt"]

    @pytest.mark.asyncio
    async def test_bad_query_param_is_400(self, client):
        response = await client.get(f"{API}/GetAllProducts", params={"priceMin": "cheap"})
        assert response.status_code == 400
        assert "priceMin" in response.json()["errors"]

    @pytest.mark.asyncio
    async def test_page_and_limit_are_normalised(self, client, make_product):
        await _create(client, make_product())
        response = await client.get(f"{API}/GetAllProducts", params={"page": 0, "limit": 0})
        body = response.json()
        assert body["page"] == 1
        assert body["limit"] == 25
        assert body["total"] == 1


class TestAppSurface:
    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.text == "API is running..."

    @pytest.mark.asyncio
    async def test_unknown_route_points_to_documentation(self, client):
        response = await client.get("/api/unknown")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["message"].startswith("API not found")

    @pytest.mark.asyncio
    async def test_validation_rules_endpoint(self, client):
        response = await client.get(f"{API}/ValidationRules")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["categories"]["clothing"]["required"] == {"size": "Size is required for clothing category"}
        assert data["fields"]["product_description"]["minLength"] == 20

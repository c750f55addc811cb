"""Tests for error handling in the storefront API.

Tests that upstream failures surface as generic 500 responses carrying the
underlying error text, and that best-effort side effects never fail a request.
"""

import logging

from conftest import (
    BASE_URL,
    HOSTED_URL,
    BrokenCache,
    BrokenStore,
    CountingStore,
    FakeImageHost,
    make_product,
)
from storefront.catalog.cache import InMemoryCache
from storefront.catalog.service import CatalogService

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)


def broken_store_service() -> CatalogService:
    return CatalogService(store=BrokenStore(), cache=InMemoryCache(), base_url=BASE_URL)


def test_store_failure_returns_500(client_for):
    """Test that a store failure is a generic 500 with the error text."""
    client = client_for(broken_store_service())

    response = client.get("/api/products")

    assert response.status_code == 500
    assert response.json() == {"message": "server error", "error": "database unavailable"}


def test_store_failure_on_every_read_route(client_for):
    """Test that store failures map to 500 on all read routes."""
    client = client_for(broken_store_service())

    for path in [
        "/api/products",
        "/api/products/featured",
        "/api/products/recommendations",
        "/api/products/category/shoes",
    ]:
        response = client.get(path)
        assert response.status_code == 500, path
        assert response.json()["message"] == "server error"


def test_upload_failure_returns_500(client_for):
    """Test that an image host failure on create is a 500 and writes nothing."""
    store = CountingStore()
    service = CatalogService(
        store=store,
        cache=InMemoryCache(),
        image_host=FakeImageHost(fail_upload=True),
        base_url=BASE_URL,
    )
    client = client_for(service)

    response = client.post(
        "/api/products", json={"name": "Hat", "image": "data:image/png;base64,AAAA"}
    )

    assert response.status_code == 500
    assert response.json() == {"message": "server error", "error": "upload rejected"}
    assert len(store) == 0


def test_image_delete_failure_still_returns_200(client_for):
    """Test that a failed hosted image delete does not fail the delete."""
    store = CountingStore()
    service = CatalogService(
        store=store,
        cache=InMemoryCache(),
        image_host=FakeImageHost(fail_destroy=True),
        base_url=BASE_URL,
    )
    created = store.create(make_product(image=HOSTED_URL.format(name="x")))
    client = client_for(service)

    response = client.delete(f"/api/products/{created['_id']}")

    assert response.status_code == 200
    assert len(store) == 0


def test_cache_refresh_failure_still_returns_toggled_product(client_for):
    """Test that a failing cache write does not fail the toggle."""
    store = CountingStore()
    created = store.create(make_product())
    client = client_for(CatalogService(store=store, cache=BrokenCache(), base_url=BASE_URL))

    response = client.patch(f"/api/products/{created['_id']}")

    assert response.status_code == 200
    assert response.json()["isFeatured"] is True


def test_server_errors_are_counted(client_for):
    """Test that 500 responses are counted per operation."""
    client = client_for(broken_store_service())

    client.get("/api/products")

    data = client.get("/metrics").json()
    assert data["server_errors"] == {"list_all": 1}


def test_failure_is_logged_with_operation_name(client_for, caplog):
    """Test that upstream failures are logged with the operation name."""
    client = client_for(broken_store_service())

    with caplog.at_level(logging.ERROR, logger="storefront.api.routes.products"):
        client.get("/api/products/recommendations")

    assert any(
        "Error in recommend" in record.getMessage() for record in caplog.records
    )


def test_health_check_not_affected_by_store_errors(client_for):
    """Test that /ping works even if the store is failing."""
    client = client_for(broken_store_service())

    response = client.get("/ping")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_create_passes_field_values_through_uncoerced(client, store):
    """Test that create stores whatever JSON values it is given."""
    response = client.post("/api/products", json={"name": 123, "price": "cheap"})

    assert response.status_code == 201
    assert response.json()["name"] == 123
    assert response.json()["price"] == "cheap"
    stored = store.find_by_id(response.json()["_id"])
    assert stored["name"] == 123
    assert stored["price"] == "cheap"


def test_listing_tolerates_stored_text_price(client, store):
    """Test that a record with a non-numeric price still lists."""
    store.create(make_product(price="cheap"))

    response = client.get("/api/products")

    assert response.status_code == 200
    assert response.json()["products"][0]["price"] == "cheap"


def test_non_object_body_returns_500(client):
    """Test that a body that is not a JSON object is a generic 500."""
    response = client.post("/api/products", json=["not", "a", "product"])

    assert response.status_code == 500
    assert response.json()["message"] == "server error"
    assert "error" in response.json()

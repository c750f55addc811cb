"""Shared fixtures for the storefront test suite.

Collaborators are replaced with the in-memory store and cache plus a fake
image host that records every call, so tests can assert on side effects.
"""

import sys
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from storefront.api.dependencies import get_catalog_service
from storefront.api.main import app
from storefront.catalog.cache import InMemoryCache
from storefront.catalog.image_host import ImageHost
from storefront.catalog.service import CatalogService
from storefront.catalog.store import InMemoryProductStore
from storefront.exceptions import ImageHostError
from storefront.metrics import metrics_service

BASE_URL = "http://test.local"
HOSTED_URL = "https://res.cloudinary.com/demo/image/upload/v1700000000/products/{name}.jpg"


class CountingStore(InMemoryProductStore):
    """In-memory store that counts calls per method."""

    def __init__(self, products=None):
        self.calls: Dict[str, int] = defaultdict(int)
        super().__init__(products)
        self.calls.clear()

    def find_all(self, filter=None):
        self.calls["find_all"] += 1
        return super().find_all(filter)

    def find_by_id(self, product_id):
        self.calls["find_by_id"] += 1
        return super().find_by_id(product_id)

    def sample(self, size, fields):
        self.calls["sample"] += 1
        return super().sample(size, fields)

    def create(self, fields):
        self.calls["create"] += 1
        return super().create(fields)

    def update_by_id(self, product_id, fields):
        self.calls["update_by_id"] += 1
        return super().update_by_id(product_id, fields)

    def delete_by_id(self, product_id):
        self.calls["delete_by_id"] += 1
        return super().delete_by_id(product_id)


class BrokenStore(InMemoryProductStore):
    """Store whose queries fail, as if the database were unreachable."""

    def find_all(self, filter=None):
        raise RuntimeError("database unavailable")

    def sample(self, size, fields):
        raise RuntimeError("database unavailable")


class BrokenCache(InMemoryCache):
    """Cache that reads fine but rejects every write."""

    def set(self, key: str, value: str) -> None:
        raise ConnectionError("cache write refused")


class FakeImageHost(ImageHost):
    """Image host double recording uploads and deletes."""

    def __init__(self, fail_upload: bool = False, fail_destroy: bool = False) -> None:
        self.fail_upload = fail_upload
        self.fail_destroy = fail_destroy
        self.uploads = []
        self.destroyed = []

    def upload(self, payload: str, folder: str) -> str:
        if self.fail_upload:
            raise ImageHostError("upload rejected")
        self.uploads.append((payload, folder))
        return HOSTED_URL.format(name=f"img{len(self.uploads)}")

    def destroy(self, public_id: str) -> None:
        self.destroyed.append(public_id)
        if self.fail_destroy:
            raise ImageHostError("destroy rejected")


def make_product(**overrides: Any) -> Dict[str, Any]:
    """Build a stored product document."""
    product = {
        "name": "Classic Jeans",
        "description": "Straight-leg denim",
        "price": 59.5,
        "category": "jeans",
        "image": "/uploads/jeans.jpg",
        "isFeatured": False,
    }
    product.update(overrides)
    return product


@pytest.fixture(autouse=True)
def reset_metrics():
    """Start every test with empty counters."""
    metrics_service.reset()
    yield
    metrics_service.reset()


@pytest.fixture
def store() -> CountingStore:
    return CountingStore()


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def image_host() -> FakeImageHost:
    return FakeImageHost()


@pytest.fixture
def service(store, cache, image_host) -> CatalogService:
    return CatalogService(store=store, cache=cache, image_host=image_host, base_url=BASE_URL)


@pytest.fixture
def client_for():
    """Return a factory producing a TestClient bound to a given service."""

    def _client(service: Optional[CatalogService]) -> TestClient:
        app.dependency_overrides[get_catalog_service] = lambda: service
        return TestClient(app)

    yield _client
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_for, service) -> TestClient:
    return client_for(service)

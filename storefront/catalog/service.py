"""Catalog service.

Orchestrates product reads and writes across the product store, the lookaside
cache holding the featured products snapshot, and the external image host.

The store is the source of truth. The featured snapshot is populated lazily
on a cache miss and overwritten after every featured-flag toggle; failures to
write it, like failures to delete hosted images, are logged and never fail
the request that triggered them.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from storefront.catalog.cache import CacheBackend
from storefront.catalog.image_host import ImageHost
from storefront.catalog.images import (
    IMAGE_NAMESPACE,
    hosted_public_id,
    is_hosted_image,
    is_local_upload,
    normalize_image_url,
)
from storefront.catalog.models import RECOMMENDATION_FIELDS, Product, RecommendedProduct
from storefront.catalog.store import ProductStore
from storefront.config import DEFAULT_BASE_URL
from storefront.exceptions import (
    ImageHostError,
    NoFeaturedProductsError,
    ProductNotFoundError,
)
from storefront.metrics import MetricsService, metrics_service

# Configure module logger
logger = logging.getLogger(__name__)

FEATURED_CACHE_KEY = "featured_products"
RECOMMENDATION_SAMPLE_SIZE = 4


@dataclass(frozen=True)
class SideEffectResult:
    """Outcome of a best-effort side effect.

    Attributes:
        operation: Name of the side effect, e.g. "featured_cache_refresh".
        ok: Whether it succeeded.
        error: Underlying error text when it failed.
    """

    operation: str
    ok: bool
    error: Optional[str] = None


class CatalogService:
    """Product catalog operations.

    Args:
        store: Persistent product collection.
        cache: Key-value cache holding the featured snapshot.
        image_host: Image host client, or None when uploads are not configured.
        base_url: Prefix for relative image paths.
        metrics: Metrics sink; defaults to the process-wide singleton.
    """

    def __init__(
        self,
        store: ProductStore,
        cache: CacheBackend,
        image_host: Optional[ImageHost] = None,
        base_url: str = DEFAULT_BASE_URL,
        metrics: Optional[MetricsService] = None,
    ) -> None:
        self.store = store
        self.cache = cache
        self.image_host = image_host
        self.base_url = base_url
        self.metrics = metrics or metrics_service

    def _format(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Project a stored record onto the ``Product`` fields and normalize its image.

        The projection is intentional: stored fields outside the product
        schema, such as timestamps added by other writers, are not returned.
        """
        product = Product.model_validate(record)
        product.image = normalize_image_url(product.image, self.base_url)
        return product.to_record()

    def _format_recommendation(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Like ``_format`` but projected onto the recommendation fields."""
        product = RecommendedProduct.model_validate(record)
        product.image = normalize_image_url(product.image, self.base_url)
        return product.to_record()

    def _featured_from_store(self) -> List[Dict[str, Any]]:
        return [self._format(r) for r in self.store.find_all({"isFeatured": True})]

    def _write_featured_cache(self, products: List[Dict[str, Any]]) -> SideEffectResult:
        try:
            self.cache.set(FEATURED_CACHE_KEY, json.dumps(products))
            return SideEffectResult(operation="featured_cache_write", ok=True)
        except Exception as e:
            logger.error(f"Failed to write featured products cache: {e}")
            self.metrics.record_side_effect_failure("featured_cache_write")
            return SideEffectResult(operation="featured_cache_write", ok=False, error=str(e))

    def _delete_hosted_image(self, image: str) -> SideEffectResult:
        public_id = hosted_public_id(image)
        try:
            self.image_host.destroy(public_id)
            logger.info(f"Deleted hosted image {public_id}")
            return SideEffectResult(operation="hosted_image_delete", ok=True)
        except Exception as e:
            logger.error(f"Failed to delete hosted image {public_id}: {e}")
            self.metrics.record_side_effect_failure("hosted_image_delete")
            return SideEffectResult(operation="hosted_image_delete", ok=False, error=str(e))

    def list_all(self) -> List[Dict[str, Any]]:
        """Return every product with normalized images."""
        return [self._format(record) for record in self.store.find_all()]

    def list_featured(self) -> List[Dict[str, Any]]:
        """Return featured products, served from the cache when possible.

        A cached snapshot is returned exactly as stored. On a miss the store
        is queried once and the normalized result written back to the cache.

        Raises:
            NoFeaturedProductsError: If the cache is empty and the store has
                no featured products.
        """
        cached = self.cache.get(FEATURED_CACHE_KEY)
        if cached:
            logger.debug("Featured products served from cache")
            self.metrics.record_cache_lookup(hit=True)
            return json.loads(cached)

        self.metrics.record_cache_lookup(hit=False)
        featured = self._featured_from_store()
        if not featured:
            raise NoFeaturedProductsError()

        self._write_featured_cache(featured)
        return featured

    def create(self, fields: Dict[str, Any], image: Optional[str] = None) -> Dict[str, Any]:
        """Create a product, uploading its image to the image host first.

        Args:
            fields: Product fields (name, description, price, category).
            image: An image payload to upload, or a local ``/uploads/`` path
                to store as-is. Anything else stores an empty image.

        Returns:
            The created record with a normalized image.

        Raises:
            ImageHostError: If the upload fails or no image host is
                configured. Nothing is written in that case.
        """
        if is_local_upload(image):
            image_url = image
        elif image:
            if self.image_host is None:
                raise ImageHostError("image host is not configured")
            image_url = self.image_host.upload(image, folder=IMAGE_NAMESPACE)
        else:
            image_url = ""

        record = self.store.create({**fields, "image": image_url, "isFeatured": False})
        logger.info(f"Created product {record['_id']}")
        return self._format(record)

    def delete(self, product_id: str) -> Dict[str, str]:
        """Delete a product and, best-effort, its hosted image.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        product = self.store.find_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        image = product.get("image")
        if is_hosted_image(image):
            if self.image_host is None:
                logger.warning(f"No image host configured, leaving {image} in place")
            else:
                self._delete_hosted_image(image)

        self.store.delete_by_id(product_id)
        logger.info(f"Deleted product {product_id}")
        return {"message": "product deleted successfully"}

    def recommend(self) -> List[Dict[str, Any]]:
        """Return a random sample of products without category or featured flag."""
        records = self.store.sample(RECOMMENDATION_SAMPLE_SIZE, RECOMMENDATION_FIELDS)
        return [self._format_recommendation(record) for record in records]

    def list_by_category(self, category: str) -> List[Dict[str, Any]]:
        """Return products whose category equals ``category`` exactly."""
        return [self._format(r) for r in self.store.find_all({"category": category})]

    def toggle_featured(self, product_id: str) -> Dict[str, Any]:
        """Flip a product's featured flag and refresh the featured snapshot.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        product = self.store.find_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        is_featured = not product.get("isFeatured", False)
        updated = self.store.update_by_id(product_id, {"isFeatured": is_featured})
        if updated is None:
            raise ProductNotFoundError(product_id)
        logger.info(f"Product {product_id} isFeatured={is_featured}")

        self.refresh_featured_cache()
        return self._format(updated)

    def refresh_featured_cache(self) -> SideEffectResult:
        """Overwrite the featured snapshot from the store.

        Never raises; the outcome is returned for callers that care.
        """
        try:
            featured = self._featured_from_store()
        except Exception as e:
            logger.error(f"Failed to refresh featured products cache: {e}")
            self.metrics.record_side_effect_failure("featured_cache_refresh")
            return SideEffectResult(operation="featured_cache_refresh", ok=False, error=str(e))
        return self._write_featured_cache(featured)

    def health(self) -> Dict[str, bool]:
        """Report whether the store and cache are reachable."""
        return {"store": self.store.ping(), "cache": self.cache.ping()}

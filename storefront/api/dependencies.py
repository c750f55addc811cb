"""Dependency wiring for the API.

Builds the catalog service once per process from :class:`Settings`: real
MongoDB, Redis and Cloudinary clients when configured, in-memory backends
otherwise. Routes receive it through ``Depends(get_catalog_service)``, which
tests replace via ``app.dependency_overrides``.
"""

import logging
from functools import lru_cache

from storefront.catalog.cache import InMemoryCache, RedisCache
from storefront.catalog.image_host import CloudinaryImageHost
from storefront.catalog.service import CatalogService
from storefront.catalog.store import InMemoryProductStore, MongoProductStore
from storefront.config import Settings

# Configure module logger
logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def build_catalog_service(settings: Settings) -> CatalogService:
    """Assemble a catalog service from settings."""
    if settings.mongo_uri:
        store = MongoProductStore.from_uri(settings.mongo_uri, settings.mongo_db)
    else:
        logger.warning("MONGO_URI not set, using in-memory product store")
        store = InMemoryProductStore()

    if settings.redis_url:
        cache = RedisCache(settings.redis_url)
    else:
        logger.warning("REDIS_URL not set, using in-memory cache")
        cache = InMemoryCache()

    image_host = None
    if settings.image_host_configured:
        image_host = CloudinaryImageHost(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
        )
    else:
        logger.warning("Cloudinary credentials not set, image uploads disabled")

    return CatalogService(
        store=store,
        cache=cache,
        image_host=image_host,
        base_url=settings.base_url,
    )


@lru_cache(maxsize=1)
def get_catalog_service() -> CatalogService:
    """Return the process-wide catalog service."""
    return build_catalog_service(get_settings())

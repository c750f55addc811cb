"""Product catalog endpoints for the storefront API.

This module exposes the catalog service operations: listing, featured
products, creation, deletion, recommendations, category filtering and
featured-flag toggling.

Not-found conditions surface as 404s. Every other failure is logged with the
operation name and surfaces as a 500 carrying the underlying error text.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_catalog_service
from storefront.catalog.models import ProductCreate
from storefront.catalog.service import CatalogService
from storefront.exceptions import StorefrontException, UpstreamError

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/api/products",
    tags=["products"],
)


@router.get("", name="list_all")
def get_all_products(
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, List[Dict[str, Any]]]:
    """List every product.

    Returns:
        ``{"products": [...]}`` with absolute image URLs.
    """
    try:
        return {"products": service.list_all()}
    except Exception as e:
        logger.error(f"Error in list_all: {e}", exc_info=True)
        raise UpstreamError("list_all", e)


@router.get("/featured", name="list_featured")
def get_featured_products(
    service: CatalogService = Depends(get_catalog_service),
) -> List[Dict[str, Any]]:
    """List featured products, from the cache when it holds a snapshot.

    Raises:
        NoFeaturedProductsError: 404 when there are no featured products.
    """
    try:
        return service.list_featured()
    except StorefrontException:
        raise
    except Exception as e:
        logger.error(f"Error in list_featured: {e}", exc_info=True)
        raise UpstreamError("list_featured", e)


@router.post("", name="create", status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, Any]:
    """Create a product.

    An ``image`` that is not a local ``/uploads/`` path is uploaded to the
    image host before the record is written.

    Example:
        POST /api/products
        {"name": "Sneaker", "price": 89.9, "category": "shoes",
         "image": "data:image/png;base64,..."}
    """
    fields = payload.model_dump(exclude={"image"}, exclude_unset=True)
    try:
        return service.create(fields, image=payload.image)
    except Exception as e:
        logger.error(f"Error in create: {e}", exc_info=True)
        raise UpstreamError("create", e)


@router.get("/recommendations", name="recommend")
def get_recommended_products(
    service: CatalogService = Depends(get_catalog_service),
) -> List[Dict[str, Any]]:
    """Return four random products (id, name, description, image, price)."""
    try:
        return service.recommend()
    except Exception as e:
        logger.error(f"Error in recommend: {e}", exc_info=True)
        raise UpstreamError("recommend", e)


@router.get("/category/{category}", name="list_by_category")
def get_products_by_category(
    category: str,
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, List[Dict[str, Any]]]:
    """List products in a category. An unknown category yields an empty list."""
    try:
        return {"products": service.list_by_category(category)}
    except Exception as e:
        logger.error(f"Error in list_by_category: {e}", exc_info=True)
        raise UpstreamError("list_by_category", e)


@router.patch("/{product_id}", name="toggle_featured")
def toggle_featured_product(
    product_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, Any]:
    """Flip a product's featured flag and refresh the featured cache.

    Raises:
        ProductNotFoundError: 404 when the id does not exist.
    """
    try:
        return service.toggle_featured(product_id)
    except StorefrontException:
        raise
    except Exception as e:
        logger.error(f"Error in toggle_featured: {e}", exc_info=True)
        raise UpstreamError("toggle_featured", e)


@router.delete("/{product_id}", name="delete")
def delete_product(
    product_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, str]:
    """Delete a product and its hosted image.

    Raises:
        ProductNotFoundError: 404 when the id does not exist.
    """
    try:
        return service.delete(product_id)
    except StorefrontException:
        raise
    except Exception as e:
        logger.error(f"Error in delete: {e}", exc_info=True)
        raise UpstreamError("delete", e)

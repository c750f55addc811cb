"""Storefront: product catalog backend for an e-commerce site.

This package provides the HTTP handlers behind the product catalog: listing,
featured products with a lookaside cache, creation, deletion, random
recommendations, category filtering and featured-flag toggling.

Modules:
    api: FastAPI application and REST API endpoints
    catalog: Catalog service and its store, cache and image host clients
"""

__version__ = "0.1.0"

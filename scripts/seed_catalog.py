"""Seed the product catalog with fake products for development.

Generates synthetic products across a handful of categories, with a share of
them featured, and inserts them into the MongoDB collection configured by
``MONGO_URI`` / ``MONGO_DB``. The featured products cache is refreshed
afterwards so the featured listing reflects the new data.

Example:
    Seed 40 products, a quarter of them featured:
        $ python scripts/seed_catalog.py --count 40 --featured-ratio 0.25
"""

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from storefront.api.dependencies import build_catalog_service
from storefront.config import Settings

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Default configuration constants
DEFAULT_COUNT = 24
DEFAULT_FEATURED_RATIO = 0.2
CATEGORIES = ["jeans", "t-shirts", "shoes", "glasses", "jackets", "suits", "bags"]
ADJECTIVES = ["Classic", "Slim", "Vintage", "Urban", "Premium", "Everyday", "Retro"]


def generate_fake_products(
    count: int = DEFAULT_COUNT,
    featured_ratio: float = DEFAULT_FEATURED_RATIO,
    seed: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Generate synthetic product records.

    Args:
        count: Number of products to generate. Must be positive.
        featured_ratio: Share of products flagged as featured, in [0, 1].
        seed: Optional random seed for reproducible output.

    Returns:
        A list of product dicts ready for insertion, each with an image under
        ``/uploads/``.

    Raises:
        ValueError: If count is not positive or featured_ratio is out of range.
    """
    if count <= 0:
        raise ValueError("count must be positive")
    if not 0.0 <= featured_ratio <= 1.0:
        raise ValueError("featured_ratio must be between 0 and 1")

    rng = random.Random(seed)
    num_featured = round(count * featured_ratio)

    products = []
    for index in range(count):
        category = rng.choice(CATEGORIES)
        name = f"{rng.choice(ADJECTIVES)} {category.rstrip('s').title()} {index + 1}"
        products.append({
            "name": name,
            "description": f"{name} from the {category} collection.",
            "price": round(rng.uniform(9.99, 249.99), 2),
            "category": category,
            "image": f"/uploads/{category}-{index + 1}.jpg",
            "isFeatured": index < num_featured,
        })

    rng.shuffle(products)
    return products


def main() -> int:
    """Main entry point for the seeding script.

    Returns:
        Exit code: 0 on success, 1 otherwise
    """
    parser = argparse.ArgumentParser(description="Seed the product catalog")
    parser.add_argument("--count", type=int, default=DEFAULT_COUNT)
    parser.add_argument("--featured-ratio", type=float, default=DEFAULT_FEATURED_RATIO)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    settings = Settings.from_env()
    if not settings.mongo_uri:
        logger.error("MONGO_URI is not set; nothing to seed")
        return 1

    try:
        products = generate_fake_products(args.count, args.featured_ratio, args.seed)
    except ValueError as e:
        logger.error(f"Error generating products: {e}")
        return 1

    service = build_catalog_service(settings)
    for product in products:
        service.store.create(product)

    result = service.refresh_featured_cache()
    if not result.ok:
        logger.warning(f"Featured cache refresh failed: {result.error}")

    featured = sum(1 for p in products if p["isFeatured"])
    logger.info(f"Inserted {len(products)} products ({featured} featured)")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Helpers for product image URLs.

Relative image paths are stored as uploaded by the local upload handler
(``/uploads/...``). Callers must only ever see absolute URLs, so every record
leaving the catalog goes through :func:`normalize_image_url`.
"""

from typing import Optional

# Substring identifying URLs produced by the image host
HOSTED_IMAGE_MARKER = "cloudinary"

# Folder images are uploaded into on the image host
IMAGE_NAMESPACE = "products"

# Prefix of images served by the local upload handler
LOCAL_UPLOAD_PREFIX = "/uploads/"


def normalize_image_url(image: Optional[str], base_url: str) -> Optional[str]:
    """Turn a relative image path into an absolute URL.

    Empty values and values already starting with ``http`` are returned
    unchanged, so applying this twice is the same as applying it once.

    Args:
        image: Stored image value.
        base_url: Prefix for relative paths, e.g. ``http://localhost:5000``.

    Returns:
        The absolute image URL, or the original empty value.

    Example:
        >>> normalize_image_url("/uploads/a.png", "http://localhost:5000")
        'http://localhost:5000/uploads/a.png'
    """
    if image and not image.startswith("http"):
        return f"{base_url}{image}"
    return image


def is_hosted_image(image: Optional[str]) -> bool:
    """Check whether an image URL was produced by the image host."""
    return bool(image) and HOSTED_IMAGE_MARKER in image


def hosted_public_id(image: str, namespace: str = IMAGE_NAMESPACE) -> str:
    """Derive the image host identifier from a hosted image URL.

    The identifier is the last path segment without its extension, inside the
    upload namespace.

    Example:
        >>> hosted_public_id("https://res.cloudinary.com/x/image/upload/v1/products/abc.jpg")
        'products/abc'
    """
    filename = image.split("/")[-1]
    return f"{namespace}/{filename.split('.')[0]}"


def is_local_upload(image: Optional[str]) -> bool:
    """Check whether an image value is a path from the local upload handler."""
    return bool(image) and image.startswith(LOCAL_UPLOAD_PREFIX)

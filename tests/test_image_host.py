"""Tests for the Cloudinary image host client.

HTTP calls go through a mocked requests session.
"""

import hashlib
from unittest.mock import MagicMock, patch

import pytest
import requests

from storefront.catalog.image_host import CloudinaryImageHost
from storefront.exceptions import ImageHostError

TIMESTAMP = 1700000000


def make_host(json_body=None):
    session = MagicMock()
    session.post.return_value.json.return_value = json_body or {}
    host = CloudinaryImageHost("demo", "key123", "secret", session=session)
    return host, session


def test_upload_posts_signed_request_and_returns_secure_url():
    """Test that uploads are signed without the file and return secure_url."""
    url = "https://res.cloudinary.com/demo/image/upload/v1/products/abc.png"
    host, session = make_host({"secure_url": url, "public_id": "products/abc"})

    with patch("storefront.catalog.image_host.time.time", return_value=TIMESTAMP):
        result = host.upload("data:image/png;base64,AAAA", folder="products")

    assert result == url
    posted_url = session.post.call_args.args[0]
    data = session.post.call_args.kwargs["data"]
    assert posted_url == "https://api.cloudinary.com/v1_1/demo/image/upload"
    expected = hashlib.sha1(
        f"folder=products&timestamp={TIMESTAMP}secret".encode("utf-8")
    ).hexdigest()
    assert data == {
        "folder": "products",
        "timestamp": TIMESTAMP,
        "api_key": "key123",
        "signature": expected,
        "file": "data:image/png;base64,AAAA",
    }


def test_upload_without_secure_url_raises():
    """Test that a response without a URL is an upload failure."""
    host, _ = make_host({"error": {"message": "Invalid image file"}})

    with pytest.raises(ImageHostError):
        host.upload("garbage", folder="products")


def test_upload_http_error_raises_image_host_error():
    """Test that transport errors are wrapped."""
    host, session = make_host()
    session.post.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(ImageHostError, match="connection refused"):
        host.upload("data:image/png;base64,AAAA", folder="products")


def test_upload_bad_status_raises_image_host_error():
    """Test that non-2xx responses are wrapped."""
    host, session = make_host()
    session.post.return_value.raise_for_status.side_effect = requests.HTTPError("401")

    with pytest.raises(ImageHostError):
        host.upload("data:image/png;base64,AAAA", folder="products")


def test_destroy_posts_public_id():
    """Test that destroy signs and posts the public id."""
    host, session = make_host({"result": "ok"})

    with patch("storefront.catalog.image_host.time.time", return_value=TIMESTAMP):
        host.destroy("products/abc")

    assert session.post.call_args.args[0] == (
        "https://api.cloudinary.com/v1_1/demo/image/destroy"
    )
    data = session.post.call_args.kwargs["data"]
    assert data["public_id"] == "products/abc"
    assert data["signature"] == hashlib.sha1(
        f"public_id=products/abc&timestamp={TIMESTAMP}secret".encode("utf-8")
    ).hexdigest()


def test_destroy_failure_raises():
    """Test that destroy errors surface as ImageHostError."""
    host, session = make_host()
    session.post.side_effect = requests.Timeout("timed out")

    with pytest.raises(ImageHostError):
        host.destroy("products/abc")

"""Cloudinary image host client.

Talks to the Cloudinary upload API directly over HTTPS. Requests are signed
with the account's API secret: the signature is the SHA-1 hex digest of the
alphabetically sorted ``key=value`` parameters joined with ``&``, followed by
the secret.
"""

import hashlib
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from storefront.exceptions import ImageHostError

# Configure module logger
logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.cloudinary.com/v1_1"


class ImageHost(ABC):
    """Contract of the external image host."""

    @abstractmethod
    def upload(self, payload: str, folder: str) -> str:
        """Upload an image into ``folder`` and return its durable URL."""

    @abstractmethod
    def destroy(self, public_id: str) -> None:
        """Delete a hosted image by its identifier."""


class CloudinaryImageHost(ImageHost):
    """Uploads and deletes product images on Cloudinary.

    Args:
        cloud_name: Cloudinary cloud name.
        api_key: Cloudinary API key.
        api_secret: Cloudinary API secret used to sign requests.
        session: Optional requests session, mainly for tests.
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self._api_secret = api_secret
        self._session = session or requests.Session()

    def _sign(self, params: Dict[str, Any]) -> str:
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1((to_sign + self._api_secret).encode("utf-8")).hexdigest()

    def _post(
        self, action: str, params: Dict[str, Any], file: Optional[str] = None
    ) -> Dict[str, Any]:
        # The file itself is never part of the signature
        params = dict(params, timestamp=int(time.time()))
        data = dict(params, api_key=self.api_key, signature=self._sign(params))
        if file is not None:
            data["file"] = file
        url = f"{API_BASE_URL}/{self.cloud_name}/image/{action}"

        try:
            response = self._session.post(url, data=data)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise ImageHostError(f"Cloudinary {action} failed: {e}") from e
        except ValueError as e:
            raise ImageHostError(f"Cloudinary {action} returned invalid JSON: {e}") from e

    def upload(self, payload: str, folder: str) -> str:
        """Upload an image and return its HTTPS URL.

        Args:
            payload: Data URI, base64 payload or remote URL of the image.
            folder: Folder to upload into.

        Returns:
            The ``secure_url`` of the uploaded image.

        Raises:
            ImageHostError: If the request fails or no URL comes back.
        """
        body = self._post("upload", {"folder": folder}, file=payload)
        url = body.get("secure_url")
        if not url:
            raise ImageHostError("Cloudinary upload returned no secure_url")
        logger.info(f"Uploaded image to Cloudinary as {body.get('public_id')}")
        return url

    def destroy(self, public_id: str) -> None:
        """Delete an uploaded image by its public id.

        Raises:
            ImageHostError: If the request fails.
        """
        body = self._post("destroy", {"public_id": public_id})
        logger.info(f"Cloudinary destroy {public_id}: {body.get('result')}")

"""Environment-driven configuration for the storefront service."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_MONGO_DB = "storefront"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the catalog service.

    Attributes:
        base_url: Prefix used to turn relative image paths into absolute URLs.
        mongo_uri: MongoDB connection string. None selects the in-memory store.
        mongo_db: MongoDB database name.
        redis_url: Redis connection URL. None selects the in-memory cache.
        cloudinary_cloud_name: Cloudinary cloud name.
        cloudinary_api_key: Cloudinary API key.
        cloudinary_api_secret: Cloudinary API secret.
        log_level: Root logging level.
    """

    base_url: str = DEFAULT_BASE_URL
    mongo_uri: Optional[str] = None
    mongo_db: str = DEFAULT_MONGO_DB
    redis_url: Optional[str] = None
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def image_host_configured(self) -> bool:
        """Whether all three Cloudinary credentials are present."""
        return bool(
            self.cloudinary_cloud_name
            and self.cloudinary_api_key
            and self.cloudinary_api_secret
        )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (and a local .env file)."""
        return cls(
            base_url=os.getenv("BASE_URL", DEFAULT_BASE_URL),
            mongo_uri=os.getenv("MONGO_URI") or None,
            mongo_db=os.getenv("MONGO_DB", DEFAULT_MONGO_DB),
            redis_url=os.getenv("REDIS_URL") or None,
            cloudinary_cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME") or None,
            cloudinary_api_key=os.getenv("CLOUDINARY_API_KEY") or None,
            cloudinary_api_secret=os.getenv("CLOUDINARY_API_SECRET") or None,
            log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )

"""
Configuration management for the Ticketing Service.
Uses Zero Python SDK for secure configuration with environment overrides.
"""

import os
import asyncio
import concurrent.futures
from urllib.parse import quote_plus
from typing import Dict, Any, Optional
import logging
from zero_python_sdk import zero

logger = logging.getLogger(__name__)


class ZeroSecretsManager:
    """
    Zero secrets client using the official Zero Python SDK.
    Secrets are fetched once and cached for the process lifetime.
    """

    def __init__(self, zero_token: str, caller_name: str = "evently"):
        self.zero_token = zero_token
        self.caller_name = caller_name
        self._cache: Dict[str, Any] = {}
        self._secrets = None

    async def _fetch_secrets(self):
        """Fetch secrets from Zero if not already cached."""
        if self._secrets is None:
            try:
                loop = asyncio.get_running_loop()
                with concurrent.futures.ThreadPoolExecutor() as executor:
                    self._secrets = await loop.run_in_executor(
                        executor,
                        lambda: zero(
                            token=self.zero_token,
                            pick=["evently"],
                            caller_name=self.caller_name
                        ).fetch()
                    )
                logger.info("Successfully fetched secrets from Zero")
            except Exception as e:
                logger.error(f"Failed to fetch secrets from Zero: {e}")
                self._secrets = {}

    def _normalize_key(self, key: str) -> str:
        """Normalize a key to lowercase and replace underscores with hyphens."""
        return key.lower().replace("_", "-")

    async def get_secret(self, key: str) -> Optional[str]:
        """
        Get a secret value by key.

        Args:
            key: The secret key to retrieve

        Returns:
            Secret value or None if not found
        """
        normalized = self._normalize_key(key)
        if normalized in self._cache:
            return self._cache[normalized]

        await self._fetch_secrets()
        secret_value = (self._secrets or {}).get("evently", {}).get(normalized)

        if secret_value:
            self._cache[normalized] = secret_value

        return secret_value

    async def close(self):
        """Close method for compatibility."""
        self._cache.clear()


class TicketingConfig:
    """
    Ticketing Service configuration manager.

    Environment variables always win. When ZERO_TOKEN is present, missing
    values are looked up in Zero before falling back to defaults.
    """

    def __init__(self):
        self.zero_token = os.getenv("ZERO_TOKEN")
        self.secrets_manager: Optional[ZeroSecretsManager] = None
        if self.zero_token:
            self.secrets_manager = ZeroSecretsManager(self.zero_token)
        else:
            logger.info("ZERO_TOKEN not set, using environment configuration only")

    async def get_secret(self, key: str) -> Optional[str]:
        """Resolve a configuration value from the environment, then Zero."""
        value = os.getenv(key)
        if value:
            return value
        if self.secrets_manager is not None:
            return await self.secrets_manager.get_secret(key)
        return None

    async def get_database_url(self) -> str:
        """Get the database connection URL."""
        url = await self.get_secret("DATABASE_URL")
        if url:
            return url

        host = await self.get_secret("DB_HOST") or "localhost"
        port = await self.get_secret("DB_PORT") or "5432"
        name = await self.get_secret("DB_NAME") or "evently"
        user = await self.get_secret("DB_USER") or "evently"
        password = await self.get_secret("DB_PASSWORD") or "evently123"

        return f"postgresql://{user}:{quote_plus(password)}@{host}:{port}/{name}"

    async def get_database_config(self) -> Dict[str, int]:
        """Get connection pool settings."""
        return {
            "pool_size": int(await self.get_secret("DB_POOL_SIZE") or "10"),
            "max_overflow": int(await self.get_secret("DB_MAX_OVERFLOW") or "20"),
            "pool_recycle": int(await self.get_secret("DB_POOL_RECYCLE") or "3600"),
        }

    async def get_jwt_secret(self) -> str:
        """Get JWT secret key."""
        return await self.get_secret("JWT_SECRET") or "your-secret-key-change-in-production"

    async def get_jwt_algorithm(self) -> str:
        """Get JWT algorithm."""
        return await self.get_secret("JWT_ALGORITHM") or "HS256"

    async def get_jwt_expiry_days(self) -> int:
        """Get JWT expiry time in days."""
        expiry = await self.get_secret("JWT_EXPIRY_DAYS")
        return int(expiry) if expiry else 7

    async def get_payment_config(self) -> Dict[str, Any]:
        """Get payment gateway configuration."""
        return {
            "stripe_secret_key": await self.get_secret("STRIPE_SECRET_KEY"),
            "stripe_webhook_secret": await self.get_secret("STRIPE_WEBHOOK_SECRET"),
            "currency": (await self.get_secret("PAYMENT_CURRENCY") or "gbp").lower(),
            "client_url": (await self.get_secret("CLIENT_URL") or "http://localhost:5173").rstrip("/"),
        }

    async def get_environment(self) -> str:
        """Get the deployment environment name."""
        return await self.get_secret("ENVIRONMENT") or "development"

    async def close(self):
        """Close the secrets manager."""
        if self.secrets_manager is not None:
            await self.secrets_manager.close()


# Global config instance
config = TicketingConfig()

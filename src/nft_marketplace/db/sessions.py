"""Motor client and database handle management."""
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from nft_marketplace.config import Settings, get_settings

logger = logging.getLogger(__name__)


def create_client(settings: Settings | None = None) -> AsyncIOMotorClient:
    """Create a Motor client. Connection is lazy; nothing is sent until first use."""
    settings = settings or get_settings()
    return AsyncIOMotorClient(settings.mongodb_url, tz_aware=True)


def get_database(
    client: AsyncIOMotorClient, settings: Settings | None = None
) -> AsyncIOMotorDatabase:
    """Return the configured marketplace database from a client."""
    settings = settings or get_settings()
    return client[settings.mongodb_database]


def close_client(client: AsyncIOMotorClient | None) -> None:
    """Close the client if one was opened. Safe to call with None."""
    if client is None:
        return
    client.close()
    logger.info("MongoDB client closed")

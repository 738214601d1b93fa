"""Environment-driven settings for the marketplace service."""
import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Settings:
    """Runtime configuration read once from the environment."""

    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "nft_marketplace"
    moralis_api_key: str = ""
    moralis_ipfs_url: str = "https://deep-index.moralis.io/api/v2"
    ipfs_gateway_url: str = "https://ipfs.moralis.io:2053/ipfs"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            mongodb_url=os.getenv("MONGODB_URL", cls.mongodb_url),
            mongodb_database=os.getenv("MONGODB_DATABASE", cls.mongodb_database),
            moralis_api_key=os.getenv("MORALIS_API_KEY", cls.moralis_api_key),
            moralis_ipfs_url=os.getenv("MORALIS_IPFS_URL", cls.moralis_ipfs_url),
            ipfs_gateway_url=os.getenv("IPFS_GATEWAY_URL", cls.ipfs_gateway_url),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            host=os.getenv("HOST", cls.host),
            port=int(os.getenv("PORT", str(cls.port))),
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (cached)."""
    return Settings.from_env()

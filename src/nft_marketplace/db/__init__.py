"""Database package: collection names and Motor client lifecycle."""
from nft_marketplace.db.collections import ACTIVITY, NFT, NFT_COLLECTION, PERSON
from nft_marketplace.db.sessions import close_client, create_client, get_database

__all__ = [
    "ACTIVITY",
    "NFT",
    "NFT_COLLECTION",
    "PERSON",
    "close_client",
    "create_client",
    "get_database",
]

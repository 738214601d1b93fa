"""API routers.

- /owners - owner profiles, their NFTs, collections, history, offers, favourites
- /collections - collection listings, detail, owners, items, activity, creation
"""
from nft_marketplace.routers.collections import router as collections_router
from nft_marketplace.routers.owners import router as owners_router

__all__ = [
    "collections_router",
    "owners_router",
]

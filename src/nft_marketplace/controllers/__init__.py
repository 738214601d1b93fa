"""Controllers: document-store operations behind the HTTP routes."""
from nft_marketplace.controllers.base import BaseController, blank_person
from nft_marketplace.controllers.collection import (TOP_COLLECTIONS_LIMIT,
                                                    NFTCollectionController)
from nft_marketplace.controllers.owner import OwnerController

__all__ = [
    "TOP_COLLECTIONS_LIMIT",
    "BaseController",
    "NFTCollectionController",
    "OwnerController",
    "blank_person",
]

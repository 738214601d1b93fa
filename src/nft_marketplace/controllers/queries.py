"""Pure query builders: identifier in, MongoDB filter out."""
import re
from typing import Any

from bson import ObjectId

from nft_marketplace.core.exceptions import ValidationFailedError

HISTORY_TYPES = ("Sold", "Transfer")
OFFER_TYPE = "Offer"


def _index_match(nft_id: Any) -> Any:
    # Indexes arrive as path strings but may be stored as ints.
    if isinstance(nft_id, str) and nft_id.isdigit():
        return {"$in": [nft_id, int(nft_id)]}
    if isinstance(nft_id, int) and not isinstance(nft_id, bool):
        return {"$in": [nft_id, str(nft_id)]}
    return nft_id


def find_user_query(wallet: str) -> dict[str, Any]:
    return {"wallet": wallet}


def find_person_by_id_query(person_id: str) -> dict[str, Any]:
    if not person_id or not ObjectId.is_valid(person_id):
        raise ValidationFailedError("creator address is invalid or missing")
    return {"_id": ObjectId(person_id)}


def find_owner_nfts_query(owner: str) -> dict[str, Any]:
    return {"owner": owner}


def find_owner_history_query(owner: str) -> dict[str, Any]:
    return {"$or": [{"from": owner}, {"to": owner}]}


def find_owner_collection_query(owner: str) -> dict[str, Any]:
    return {"creator": owner}


def find_owner_offers_query(owner: str) -> dict[str, Any]:
    """Offers where the owner is either party, wallet compared case-insensitively."""
    wallet = {"$regex": f"^{re.escape(owner)}$", "$options": "i"}
    return {"type": OFFER_TYPE, "$or": [{"from": wallet}, {"to": wallet}]}


def find_collection_item_query(contract: str) -> dict[str, Any]:
    return {"contract": contract}


def find_collection_by_name_query(name: str) -> dict[str, Any]:
    return {"name": name}


def find_collection_nfts_query(contract: str) -> dict[str, Any]:
    return {"collection": contract}


def find_nft_item_query(contract: str, nft_id: Any) -> dict[str, Any]:
    """NFT by its collection contract and index within the collection."""
    return {"collection": contract, "index": _index_match(nft_id)}


def find_history_query(contract: str) -> dict[str, Any]:
    return {"collection": contract, "type": {"$in": list(HISTORY_TYPES)}}

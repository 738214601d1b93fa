"""Owner (Person) profiles and per-owner listings."""
import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from nft_marketplace.controllers.base import (BaseController, Document,
                                              blank_person)
from nft_marketplace.controllers.queries import (find_collection_item_query,
                                                 find_nft_item_query,
                                                 find_owner_collection_query,
                                                 find_owner_history_query,
                                                 find_owner_nfts_query,
                                                 find_owner_offers_query,
                                                 find_user_query)
from nft_marketplace.core import (HANDLED_EXCEPTIONS, ConflictError,
                                  NotFoundError, ValidationFailedError,
                                  build_pipeline, gather_enriched,
                                  nft_preview, parse_filters, respond)
from nft_marketplace.db import ACTIVITY, NFT, NFT_COLLECTION, PERSON
from nft_marketplace.providers import ObjectStorageABC
from nft_marketplace.schemas import ApiResponse, QueryFilters

logger = logging.getLogger(__name__)


def _profile(person: Document, nfts: int, collections: int) -> Document:
    return {
        "_id": person.get("_id"),
        "photoUrl": person.get("photoUrl", ""),
        "wallet": person.get("wallet"),
        "username": person.get("username", ""),
        "bio": person.get("bio", ""),
        "social": person.get("social", ""),
        "favourites": person.get("favourites", []),
        "nfts": nfts,
        "collections": collections,
    }


def _update_result(result: Any) -> Document:
    return {
        "acknowledged": result.acknowledged,
        "matchedCount": result.matched_count,
        "modifiedCount": result.modified_count,
    }


class OwnerController(BaseController):
    """Owner profiles, their NFTs, collections, history, offers and favourites.

    Every public method returns an ApiResponse; expected failures come back as
    error envelopes instead of exceptions.
    """

    resource_name = "Owner"

    def __init__(
        self,
        database: AsyncIOMotorDatabase | None,
        storage: ObjectStorageABC,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(database, clock=clock)
        self._storage = storage

    async def _counts(self, wallet: str) -> tuple[int, int]:
        """(NFTs owned, collections created) for a wallet."""
        nfts, collections = await asyncio.gather(
            self.count(NFT, find_owner_nfts_query(wallet)),
            self.count(NFT_COLLECTION, find_owner_collection_query(wallet)),
        )
        return nfts, collections

    async def _with_counts(self, person: Document) -> Document:
        nfts, collections = await self._counts(person["wallet"])
        return _profile(person, nfts, collections)

    async def _nft_for(self, activity: Document) -> Document | None:
        return await self.find_one(
            NFT, find_nft_item_query(activity.get("collection"), activity.get("nftId"))
        )

    async def find_all_owners(self, filters: QueryFilters | None = None) -> ApiResponse:
        """All owner profiles matching the filters, with NFT and collection counts."""
        try:
            people = await self.aggregate(PERSON, parse_filters(filters))
            return respond(await gather_enriched(people, self._with_counts))
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "find_all_owners")

    async def get_or_create_person(self, wallet: str) -> tuple[Document, bool]:
        """Return (person, created). Inserts a blank profile when none exists.

        Not atomic: two concurrent first calls for one wallet may both insert.
        """
        query = find_user_query(wallet)
        person = await self.find_one(PERSON, query)
        if person is not None:
            return person, False
        document = blank_person(wallet)
        await self.collection(PERSON).insert_one(document)
        logger.info("Created blank profile for wallet %s", wallet)
        return (await self.find_one(PERSON, query)) or document, True

    async def find_person(self, wallet: str) -> ApiResponse:
        """Profile for a wallet with live counts; created blank on first lookup."""
        try:
            if not wallet:
                raise ValidationFailedError("wallet is required")
            person, created = await self.get_or_create_person(wallet)
            if created:
                return respond(_profile(person, 0, 0))
            return respond(await self._with_counts(person))
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "find_person")

    async def create_owner(
        self, photo_url: str, wallet: str, bio: str, username: str, social: str
    ) -> ApiResponse:
        """Insert a new owner. Conflict if the wallet already has a profile."""
        try:
            if not wallet:
                raise ValidationFailedError("wallet is required")
            people = self.collection(PERSON)
            if await people.find_one(find_user_query(wallet)) is not None:
                raise ConflictError("Current user has been created")
            person = {
                **blank_person(wallet),
                "photoUrl": photo_url,
                "bio": bio,
                "username": username,
                "social": social,
            }
            result = await people.insert_one(person)
            return respond(
                {
                    "id": result.inserted_id,
                    "message": f"Successfully created a new owner with id {result.inserted_id}",
                },
                status_code=201,
            )
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "create_owner")

    async def update_owner(self, wallet: str, fields: dict[str, Any]) -> ApiResponse:
        """Merge fields into the owner's profile and return the update result."""
        try:
            changes = {k: v for k, v in fields.items() if k != "_id"}
            if not changes:
                raise ValidationFailedError("No fields to update")
            result = await self.collection(PERSON).update_one(
                find_user_query(wallet), {"$set": changes}
            )
            return respond(_update_result(result))
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "update_owner")

    async def update_owner_photo(self, wallet: str, image_base64: str) -> ApiResponse:
        """Upload a new profile photo and return the refreshed profile."""
        try:
            people = self.collection(PERSON)
            if await people.find_one(find_user_query(wallet)) is None:
                raise NotFoundError("Current user not exists")
            url = await self._storage.upload_image_base64(image_base64, wallet)
            await people.update_one(find_user_query(wallet), {"$set": {"photoUrl": url}})
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "update_owner_photo")
        return await self.find_person(wallet)

    async def get_owner_nfts(self, owner: str, filters: QueryFilters | None = None) -> ApiResponse:
        """NFTs currently owned by the wallet."""
        try:
            pipeline = build_pipeline(filters, find_owner_nfts_query(owner))
            return respond(await self.aggregate(NFT, pipeline))
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "get_owner_nfts")

    async def get_owner_history(self, owner: str, filters: QueryFilters | None = None) -> ApiResponse:
        """Activities sent or received by the wallet, with NFT preview and collection."""

        async def enrich(activity: Document) -> Document:
            nft, collection = await asyncio.gather(
                self._nft_for(activity),
                self.find_one(NFT_COLLECTION, find_collection_item_query(activity.get("collection"))),
            )
            return {**activity, "nft": nft_preview(nft), "collection": collection}

        try:
            pipeline = build_pipeline(filters, find_owner_history_query(owner))
            activities = await self.aggregate(ACTIVITY, pipeline)
            return respond(await gather_enriched(activities, enrich))
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "get_owner_history")

    async def get_owner_collection(
        self, owner: str, filters: QueryFilters | None = None
    ) -> ApiResponse:
        """Collections created by the wallet with volume, floor, owners, items and 24h values."""
        try:
            pipeline = build_pipeline(filters, find_owner_collection_query(owner))
            collections = await self.aggregate(NFT_COLLECTION, pipeline)
            return respond(await gather_enriched(collections, self.collection_summary))
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "get_owner_collection")

    async def get_owner_offers(self, owner: str, filters: QueryFilters | None = None) -> ApiResponse:
        """Offer activities the wallet takes part in, with NFT preview."""

        async def enrich(activity: Document) -> Document:
            return {**activity, "nft": nft_preview(await self._nft_for(activity))}

        try:
            pipeline = build_pipeline(filters, find_owner_offers_query(owner))
            offers = await self.aggregate(ACTIVITY, pipeline)
            return respond(await gather_enriched(offers, enrich))
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "get_owner_offers")

    async def _favourite_targets(
        self, owner: str, contract: str, nft_id: Any
    ) -> tuple[Document, Document]:
        """Resolve (person, nft) or raise NotFoundError for the first missing one."""
        collection = await self.find_one(NFT_COLLECTION, find_collection_item_query(contract))
        if collection is None:
            raise NotFoundError("collection not found")
        nft = await self.find_one(NFT, find_nft_item_query(contract, nft_id))
        if nft is None:
            raise NotFoundError("Nft not found")
        person = await self.find_one(PERSON, find_user_query(owner))
        if person is None:
            raise NotFoundError("owner not found")
        return person, nft

    async def insert_favourite(self, owner: str, contract: str, nft_id: Any) -> ApiResponse:
        """Add an NFT to the owner's favourites and bump its like counter."""
        try:
            person, nft = await self._favourite_targets(owner, contract, nft_id)
            ref = {"collection": contract, "index": nft.get("index")}
            if ref in person.get("favourites", []):
                return respond("This NFT already favourite")
            await self.collection(PERSON).update_one(
                find_user_query(owner), {"$addToSet": {"favourites": ref}}
            )
            await self.collection(NFT).update_one({"_id": nft["_id"]}, {"$inc": {"like": 1}})
            return respond("Favourite updated")
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "insert_favourite")

    async def remove_favourite(self, owner: str, contract: str, nft_id: Any) -> ApiResponse:
        """Remove an NFT from the owner's favourites and decrement its like counter."""
        try:
            person, nft = await self._favourite_targets(owner, contract, nft_id)
            ref = {"collection": contract, "index": nft.get("index")}
            if ref not in person.get("favourites", []):
                return respond("Nothing removed")
            await self.collection(PERSON).update_one(
                find_user_query(owner), {"$pull": {"favourites": ref}}
            )
            await self.collection(NFT).update_one({"_id": nft["_id"]}, {"$inc": {"like": -1}})
            return respond("Favourite removed")
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "remove_favourite")

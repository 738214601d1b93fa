"""NFT collection listings, detail views and creation."""
import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from motor.motor_asyncio import AsyncIOMotorDatabase

from nft_marketplace.controllers.base import (BaseController, Document,
                                              blank_person)
from nft_marketplace.controllers.queries import (
    find_collection_by_name_query, find_collection_item_query,
    find_collection_nfts_query, find_history_query, find_nft_item_query,
    find_person_by_id_query, find_user_query)
from nft_marketplace.core import (HANDLED_EXCEPTIONS, ConflictError,
                                  NotFoundError, ValidationFailedError,
                                  build_pipeline, compute_24h_values,
                                  compute_collection_stats, distinct_owners,
                                  gather_enriched, nft_preview, paginate,
                                  parse_filters, respond, trade_points,
                                  without_pagination)
from nft_marketplace.db import ACTIVITY, NFT, NFT_COLLECTION, PERSON
from nft_marketplace.providers import ContractRegistryABC, ObjectStorageABC
from nft_marketplace.schemas import (ApiResponse, CollectionCreate,
                                     QueryFilters)

logger = logging.getLogger(__name__)

TOP_COLLECTIONS_LIMIT = 10


def validate_collection_form(form: CollectionCreate) -> None:
    """Check required creation fields without touching the database."""
    if not form.logo_file:
        raise ValidationFailedError("logoUrl is invalid or missing")
    if not form.name.strip():
        raise ValidationFailedError("name is invalid or missing")
    if not form.blockchain.strip():
        raise ValidationFailedError("blockchain is invalid or missing")
    if not form.category.strip():
        raise ValidationFailedError("category is invalid or missing")


class NFTCollectionController(BaseController):
    """Collections: listings, owners, items, activity, history, detail, creation.

    Example:
        ctl = NFTCollectionController(database, storage, StaticContractRegistry())
        response = await ctl.get_owners("0xbb6a549b1cf4b2d033df831f72df8d7af4412a82")
    """

    resource_name = "NFTCollection"

    def __init__(
        self,
        database: AsyncIOMotorDatabase | None,
        storage: ObjectStorageABC,
        contracts: ContractRegistryABC,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(database, clock=clock)
        self._storage = storage
        self._contracts = contracts

    async def _resolve(self, contract: str) -> Document:
        collection = await self.find_one(NFT_COLLECTION, find_collection_item_query(contract))
        if collection is None:
            raise NotFoundError("collection not found")
        return collection

    async def _with_nft_object(self, activity: Document) -> Document:
        nft = await self.find_one(
            NFT, find_nft_item_query(activity.get("collection"), activity.get("nftId"))
        )
        return {**activity, "nftObject": nft_preview(nft)}

    async def _summaries(self, filters: QueryFilters | None) -> list[Document]:
        collections = await self.aggregate(NFT_COLLECTION, parse_filters(filters))
        return await gather_enriched(collections, self.collection_summary)

    async def get_collections(self, filters: QueryFilters | None = None) -> ApiResponse:
        """Collections with volume, floor price, owner/item counts, 24h values and creator."""
        try:
            return respond(await self._summaries(filters))
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "get_collections")

    async def get_top_collections(self, filters: QueryFilters | None = None) -> ApiResponse:
        """Top collections by volume; sorting and truncation happen after enrichment."""
        try:
            summaries = await self._summaries(filters)
            summaries.sort(key=lambda c: c.get("volume") or 0, reverse=True)
            return respond(summaries[:TOP_COLLECTIONS_LIMIT])
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "get_top_collections")

    async def get_owners(self, contract: str, filters: QueryFilters | None = None) -> ApiResponse:
        """Profiles of the distinct current owners of the collection's NFTs.

        Predicates and sort apply to the NFTs; startIndex and limit page the
        distinct owners.
        """

        async def profile(row: Document) -> Document:
            wallet = row["wallet"]
            return (await self.find_one(PERSON, find_user_query(wallet))) or blank_person(wallet)

        try:
            await self._resolve(contract)
            pipeline = build_pipeline(without_pagination(filters), find_collection_nfts_query(contract))
            nfts = await self.aggregate(NFT, pipeline)
            rows = [{"wallet": w} for w in paginate(distinct_owners(nfts), filters)]
            return respond(await gather_enriched(rows, profile))
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "get_owners")

    async def get_items(self, contract: str, filters: QueryFilters | None = None) -> ApiResponse:
        """The collection record with its (filtered) NFTs under `nfts`."""
        try:
            collection = await self._resolve(contract)
            pipeline = build_pipeline(filters, find_collection_nfts_query(contract))
            nfts = await self.aggregate(NFT, pipeline)
            return respond({**collection, "nfts": nfts})
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "get_items")

    async def get_activity(self, contract: str, filters: QueryFilters | None = None) -> ApiResponse:
        """All activities of the collection, each with an NFT preview."""
        try:
            await self._resolve(contract)
            pipeline = build_pipeline(filters, find_collection_nfts_query(contract))
            activities = await self.aggregate(ACTIVITY, pipeline)
            return respond(await gather_enriched(activities, self._with_nft_object))
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "get_activity")

    async def get_history(self, contract: str, filters: QueryFilters | None = None) -> ApiResponse:
        """Sold and Transfer activities of the collection, each with an NFT preview."""
        try:
            await self._resolve(contract)
            pipeline = build_pipeline(filters, find_history_query(contract))
            history = await self.aggregate(ACTIVITY, pipeline)
            return respond(await gather_enriched(history, self._with_nft_object))
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "get_history")

    async def _upload_images(self, form: CollectionCreate) -> tuple[str, str, str]:
        """Upload logo (required), featured and banner (optional) images."""

        async def upload(file: bytes | None) -> str:
            return await self._storage.upload_image(file) if file else ""

        logo_url, featured_url, banner_url = await asyncio.gather(
            upload(form.logo_file),
            upload(form.featured_img_file),
            upload(form.banner_img_file),
        )
        return logo_url, featured_url, banner_url

    async def create_collection(self, form: CollectionCreate) -> ApiResponse:
        """Validate, assign a contract, upload images and insert a new collection.

        The name check and the insert are separate calls; concurrent creations
        with one name can both pass the check.
        """
        try:
            validate_collection_form(form)
            table = self.collection(NFT_COLLECTION)
            creator = await self.find_one(PERSON, find_person_by_id_query(form.creator_id))
            if creator is None:
                raise NotFoundError("creator address is invalid or missing")
            if await table.find_one(find_collection_by_name_query(form.name)) is not None:
                raise ConflictError("Same collection name detected")

            contract = await self._contracts.assign_contract(form.blockchain)
            logo_url, featured_url, banner_url = await self._upload_images(form)
            collection: Document = {
                "name": form.name,
                "contract": contract,
                "creator": creator["wallet"],
                "creatorEarning": form.creator_earning,
                "blockchain": form.blockchain,
                "isVerified": False,
                "isExplicit": form.is_explicit,
                "logoUrl": logo_url,
                "featuredUrl": featured_url,
                "bannerUrl": banner_url,
                "description": form.description,
                "category": form.category,
                "links": form.links,
                "platform": "Unknown",
                "properties": {},
            }
            result = await table.insert_one(collection)
            collection["_id"] = result.inserted_id
            logger.info("Created collection %r under %s", form.name, contract)
            return respond({**collection, "creator": creator}, status_code=201)
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "create_collection")

    async def get_collection_detail(self, contract: str) -> ApiResponse:
        """Collection with its activities, NFTs, stats, 24h values and creator."""
        try:
            collection = await self._resolve(contract)
            activities, nfts, creator = await asyncio.gather(
                self.find_all(ACTIVITY, find_collection_nfts_query(contract)),
                self.find_all(NFT, find_collection_nfts_query(contract)),
                self.find_one(PERSON, find_user_query(collection.get("creator"))),
            )
            stats = compute_collection_stats(nfts)
            window = compute_24h_values(trade_points(activities), now=self._clock())
            return respond(
                {
                    **collection,
                    "activities": activities,
                    "nfts": nfts,
                    "owners": stats.owners,
                    "items": stats.items,
                    "floorPrice": stats.floor_price,
                    "totalVolume": stats.volume,
                    "_24h": window.today_trade,
                    "_24hPercent": window.percent,
                    "creatorDetail": creator,
                }
            )
        except HANDLED_EXCEPTIONS as e:
            return self._errors.to_response(e, "get_collection_detail")

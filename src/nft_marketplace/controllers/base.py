"""Base controller: store access, shared lookups and collection summaries."""
import asyncio
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

from nft_marketplace.controllers.queries import (find_collection_nfts_query,
                                                 find_user_query)
from nft_marketplace.core import (ErrorMapper, StoreUnavailableError,
                                  TradeWindow, compute_24h_values,
                                  compute_collection_stats, trade_points)
from nft_marketplace.db import ACTIVITY, NFT, PERSON

Document = dict[str, Any]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def blank_person(wallet: str) -> Document:
    """Profile document for a wallet that has never set one up."""
    return {
        "wallet": wallet,
        "photoUrl": "",
        "social": "",
        "bio": "",
        "username": "",
        "favourites": [],
    }


class BaseController:
    """Common plumbing for controllers over the marketplace database.

    The database handle is injected; when it is None every operation fails
    with StoreUnavailableError before any I/O.
    """

    resource_name = "Resource"

    def __init__(
        self,
        database: AsyncIOMotorDatabase | None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._database = database
        self._clock = clock or utcnow
        self._errors = ErrorMapper(resource_name=self.resource_name)

    def collection(self, name: str) -> AsyncIOMotorCollection:
        if self._database is None:
            raise StoreUnavailableError()
        return self._database[name]

    async def find_one(self, name: str, query: Mapping[str, Any]) -> Document | None:
        return await self.collection(name).find_one(query)

    async def find_all(self, name: str, query: Mapping[str, Any]) -> list[Document]:
        return await self.collection(name).find(query).to_list(length=None)

    async def aggregate(self, name: str, pipeline: list[dict[str, Any]]) -> list[Document]:
        return await self.collection(name).aggregate(pipeline).to_list(length=None)

    async def count(self, name: str, query: Mapping[str, Any]) -> int:
        return await self.collection(name).count_documents(query)

    async def get_24h_values(self, contract: str) -> TradeWindow:
        """Trade total of the last day and its percentage of the day before."""
        activities = await self.find_all(ACTIVITY, {"collection": contract})
        return compute_24h_values(trade_points(activities), now=self._clock())

    async def collection_summary(self, collection: Document) -> Document:
        """Collection enriched with stats, 24h values and its creator's profile."""
        contract = collection.get("contract")
        nfts, window, creator = await asyncio.gather(
            self.find_all(NFT, find_collection_nfts_query(contract)),
            self.get_24h_values(contract),
            self.find_one(PERSON, find_user_query(collection.get("creator"))),
        )
        return {
            **collection,
            **compute_collection_stats(nfts).as_fields(),
            "_24h": window.today_trade,
            "_24hPercent": window.percent,
            "creatorDetail": creator,
        }

"""
Test fixtures for nft_marketplace tests.

Provides an in-memory stand-in for the Motor database API (enough of the
query language for the controllers), a mocked object storage and seeded
marketplace data.
"""

import copy
import re
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest
from bson import ObjectId

from nft_marketplace.controllers import NFTCollectionController, OwnerController
from nft_marketplace.db import ACTIVITY, NFT, NFT_COLLECTION, PERSON
from nft_marketplace.providers import ObjectStorageABC, StaticContractRegistry

NOW = datetime(2026, 10, 16, 12, 0, tzinfo=timezone.utc)
ERC721 = StaticContractRegistry.DEFAULT_CONTRACTS["ERC721"]


def hours_ago(hours: float) -> float:
    """Unix timestamp `hours` before NOW."""
    return (NOW - timedelta(hours=hours)).timestamp()


def _compare(value: Any, op: str, arg: Any) -> bool:
    if op == "$in":
        return any(v in arg for v in value) if isinstance(value, list) else value in arg
    if op == "$nin":
        return not _compare(value, "$in", arg)
    if op == "$ne":
        return value != arg
    if value is None:
        return False
    return {
        "$gt": lambda: value > arg,
        "$gte": lambda: value >= arg,
        "$lt": lambda: value < arg,
        "$lte": lambda: value <= arg,
    }[op]()


def _match_value(value: Any, cond: Any) -> bool:
    if isinstance(cond, dict) and cond and all(k.startswith("$") for k in cond):
        options = cond.get("$options", "")
        for op, arg in cond.items():
            if op == "$options":
                continue
            if op == "$regex":
                flags = re.IGNORECASE if "i" in options else 0
                if not (isinstance(value, str) and re.search(arg, value, flags)):
                    return False
            elif not _compare(value, op, arg):
                return False
        return True
    if isinstance(value, list) and not isinstance(cond, list):
        return cond in value
    return value == cond


def matches(doc: dict, query: dict) -> bool:
    for key, cond in query.items():
        if key == "$or":
            if not any(matches(doc, q) for q in cond):
                return False
        elif key == "$and":
            if not all(matches(doc, q) for q in cond):
                return False
        elif not _match_value(doc.get(key), cond):
            return False
    return True


class FakeCursor:
    def __init__(self, docs: list[dict]) -> None:
        self._docs = docs

    async def to_list(self, length: int | None = None) -> list[dict]:
        docs = copy.deepcopy(self._docs)
        return docs if length is None else docs[:length]


class FakeCollection:
    """Subset of AsyncIOMotorCollection backed by a list of dicts."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: list[dict] = []
        self.inserts = 0

    def seed(self, *docs: dict) -> list[dict]:
        for doc in docs:
            doc.setdefault("_id", ObjectId())
            self.docs.append(doc)
        return list(docs)

    async def find_one(self, query: dict) -> dict | None:
        for doc in self.docs:
            if matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query: dict) -> FakeCursor:
        return FakeCursor([d for d in self.docs if matches(d, query)])

    def aggregate(self, pipeline: list[dict]) -> FakeCursor:
        docs = list(self.docs)
        for stage in pipeline:
            (op, arg), = stage.items()
            if op == "$match":
                docs = [d for d in docs if matches(d, arg)]
            elif op == "$sort":
                for field, direction in reversed(list(arg.items())):
                    docs.sort(
                        key=lambda d: (d.get(field) is None, d.get(field)),
                        reverse=direction < 0,
                    )
            elif op == "$skip":
                docs = docs[arg:]
            elif op == "$limit":
                docs = docs[:arg]
            else:
                raise NotImplementedError(op)
        return FakeCursor(docs)

    async def count_documents(self, query: dict) -> int:
        return sum(1 for d in self.docs if matches(d, query))

    async def insert_one(self, doc: dict) -> SimpleNamespace:
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        self.inserts += 1
        return SimpleNamespace(acknowledged=True, inserted_id=doc["_id"])

    async def update_one(self, query: dict, update: dict) -> SimpleNamespace:
        for doc in self.docs:
            if not matches(doc, query):
                continue
            before = copy.deepcopy(doc)
            for op, fields in update.items():
                for key, value in fields.items():
                    if op == "$set":
                        doc[key] = value
                    elif op == "$inc":
                        doc[key] = doc.get(key, 0) + value
                    elif op == "$addToSet":
                        doc.setdefault(key, [])
                        if value not in doc[key]:
                            doc[key].append(value)
                    elif op == "$pull":
                        doc[key] = [v for v in doc.get(key, []) if v != value]
                    else:
                        raise NotImplementedError(op)
            return SimpleNamespace(
                acknowledged=True, matched_count=1, modified_count=int(doc != before)
            )
        return SimpleNamespace(acknowledged=True, matched_count=0, modified_count=0)


class FakeDatabase:
    """Subset of AsyncIOMotorDatabase: item access by collection name."""

    def __init__(self) -> None:
        self._collections: dict[str, FakeCollection] = {}
        self.accessed: list[str] = []

    def __getitem__(self, name: str) -> FakeCollection:
        self.accessed.append(name)
        return self._collections.setdefault(name, FakeCollection(name))

    def table(self, name: str) -> FakeCollection:
        """Access a collection from test code without recording it."""
        return self._collections.setdefault(name, FakeCollection(name))


@pytest.fixture
def db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def storage() -> AsyncMock:
    mock = AsyncMock(spec=ObjectStorageABC)
    mock.upload_image_base64.return_value = "https://ipfs.test/ipfs/photo.png"
    mock.upload_image.side_effect = lambda data: f"https://ipfs.test/ipfs/{len(data)}"
    return mock


@pytest.fixture
def owner_controller(db, storage) -> OwnerController:
    return OwnerController(db, storage, clock=lambda: NOW)


@pytest.fixture
def collection_controller(db, storage) -> NFTCollectionController:
    return NFTCollectionController(db, storage, StaticContractRegistry(), clock=lambda: NOW)


@pytest.fixture
def marketplace(db) -> dict[str, Any]:
    """Two creators, two collections, NFTs with prices and recent activity."""
    alice, bob = db.table(PERSON).seed(
        {"wallet": "0xA", "username": "alice", "bio": "", "social": "", "photoUrl": "", "favourites": []},
        {"wallet": "0xB", "username": "bob", "bio": "", "social": "", "photoUrl": "", "favourites": []},
    )
    apes, cats = db.table(NFT_COLLECTION).seed(
        {"name": "Apes", "contract": "0xC1", "creator": "0xA", "category": "art"},
        {"name": "Cats", "contract": "0xC2", "creator": "0xB", "category": "pfp"},
    )
    nfts = db.table(NFT).seed(
        {"collection": "0xC1", "index": 1, "owner": "0xA", "creator": "0xA", "price": 3.0,
         "artURI": "ipfs://ape1", "name": "Ape #1", "like": 0},
        {"collection": "0xC1", "index": 2, "owner": "0xB", "creator": "0xA", "price": 1.5,
         "artURI": "ipfs://ape2", "name": "Ape #2", "like": 0},
        {"collection": "0xC1", "index": 3, "owner": "0xA", "creator": "0xA", "price": 5.5,
         "artURI": "ipfs://ape3", "name": "Ape #3", "like": 0},
        {"collection": "0xC2", "index": 1, "owner": "0xB", "creator": "0xB", "price": 20.0,
         "artURI": "ipfs://cat1", "name": "Cat #1", "like": 0},
    )
    activities = db.table(ACTIVITY).seed(
        {"type": "Sold", "from": "0xA", "to": "0xB", "collection": "0xC1", "nftId": 2,
         "price": 10.0, "date": hours_ago(1)},
        {"type": "Transfer", "from": "0xB", "to": "0xA", "collection": "0xC1", "nftId": 1,
         "price": 5.0, "date": hours_ago(30)},
        {"type": "Offer", "from": "0xb", "to": "0xA", "collection": "0xC1", "nftId": 3,
         "price": 4.0, "date": hours_ago(2)},
        {"type": "Sold", "from": "0xB", "to": "0xC", "collection": "0xC2", "nftId": 1,
         "price": 7.0, "date": hours_ago(60)},
    )
    return {
        "alice": alice,
        "bob": bob,
        "apes": apes,
        "cats": cats,
        "nfts": nfts,
        "activities": activities,
    }

"""Tests for NFTCollectionController against the in-memory store."""

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from nft_marketplace.controllers import NFTCollectionController
from nft_marketplace.core import NO_FLOOR_PRICE
from nft_marketplace.db import NFT, NFT_COLLECTION, PERSON
from nft_marketplace.providers import StaticContractRegistry
from nft_marketplace.schemas import CollectionCreate, QueryFilters

from conftest import ERC721


def _form(creator_id: str, **overrides) -> CollectionCreate:
    fields = {
        "logo_file": b"logo",
        "name": "Birds",
        "description": "flying things",
        "category": "art",
        "blockchain": "ERC721",
        "creator_id": creator_id,
        "site_url": "https://birds.example",
    }
    fields.update(overrides)
    return CollectionCreate(**fields)


class TestListings:
    @pytest.mark.asyncio
    async def test_collections_with_stats(self, collection_controller, marketplace):
        response = await collection_controller.get_collections()

        by_name = {c["name"]: c for c in response.data}
        apes, cats = by_name["Apes"], by_name["Cats"]
        assert (apes["volume"], apes["floorPrice"], apes["owners"], apes["items"]) == (10, 1.5, 2, 3)
        assert apes["_24h"] == 14
        assert apes["_24hPercent"] == pytest.approx(280)
        assert apes["creatorDetail"]["wallet"] == "0xA"
        assert (cats["_24h"], cats["_24hPercent"]) == (0, 0)

    @pytest.mark.asyncio
    async def test_empty_collection_has_no_floor(self, collection_controller, db):
        db.table(NFT_COLLECTION).seed({"name": "Empty", "contract": "0xE", "creator": "0xNOBODY"})

        response = await collection_controller.get_collections()

        (empty,) = response.data
        assert empty["floorPrice"] is NO_FLOOR_PRICE
        assert empty["volume"] == 0
        assert empty["creatorDetail"] is None

    @pytest.mark.asyncio
    async def test_top_collections_by_volume(self, collection_controller, marketplace, db):
        for i in range(1, 12):
            db.table(NFT_COLLECTION).seed({"name": f"C{i}", "contract": f"0xT{i}", "creator": "0xA"})
            db.table(NFT).seed({"collection": f"0xT{i}", "index": 1, "owner": "0xA", "price": float(i)})

        response = await collection_controller.get_top_collections()

        volumes = [c["volume"] for c in response.data]
        assert len(volumes) == 10
        assert volumes == sorted(volumes, reverse=True)
        assert response.data[0]["name"] == "Cats"

    @pytest.mark.asyncio
    async def test_owners_are_distinct_profiles(self, collection_controller, marketplace, db):
        db.table(NFT).seed({"collection": "0xC1", "index": 4, "owner": "0xZ", "price": 1.0})

        response = await collection_controller.get_owners("0xC1")

        assert [p["wallet"] for p in response.data] == ["0xA", "0xB", "0xZ"]
        assert response.data[0]["username"] == "alice"
        assert response.data[2]["username"] == ""

    @pytest.mark.asyncio
    async def test_owners_page_counts_owners_not_nfts(self, collection_controller, marketplace):
        first = await collection_controller.get_owners("0xC1", QueryFilters(order_by="owner", limit=2))
        second = await collection_controller.get_owners(
            "0xC1", QueryFilters(order_by="owner", start_index=1, limit=1)
        )

        assert [p["wallet"] for p in first.data] == ["0xA", "0xB"]
        assert [p["wallet"] for p in second.data] == ["0xB"]

    @pytest.mark.asyncio
    async def test_owners_predicates_apply_to_nfts(self, collection_controller, marketplace):
        filters = QueryFilters.model_validate(
            {"filters": [{"fieldName": "price", "operator": "lt", "query": 2}]}
        )

        response = await collection_controller.get_owners("0xC1", filters)

        assert [p["wallet"] for p in response.data] == ["0xB"]

    @pytest.mark.asyncio
    async def test_failed_owner_lookup_keeps_other_rows(
        self, collection_controller, marketplace, db, monkeypatch
    ):
        people = db.table(PERSON)
        find_one = people.find_one

        async def failing_for_bob(query):
            if query.get("wallet") == "0xB":
                raise PyMongoError("boom")
            return await find_one(query)

        monkeypatch.setattr(people, "find_one", failing_for_bob)

        response = await collection_controller.get_owners("0xC1")

        assert response.status == 200
        assert response.data[0]["username"] == "alice"
        assert response.data[1] == {"wallet": "0xB", "enrichmentError": "boom"}

    @pytest.mark.asyncio
    async def test_items(self, collection_controller, marketplace):
        filters = QueryFilters.model_validate(
            {"filters": [{"fieldName": "price", "operator": "gte", "query": 3}]}
        )

        response = await collection_controller.get_items("0xC1", filters)

        assert response.data["name"] == "Apes"
        assert sorted(n["index"] for n in response.data["nfts"]) == [1, 3]

    @pytest.mark.asyncio
    async def test_activity_has_nft_preview(self, collection_controller, marketplace):
        response = await collection_controller.get_activity("0xC1")

        assert len(response.data) == 3
        assert all(a["nftObject"] is not None for a in response.data)

    @pytest.mark.asyncio
    async def test_history_is_sold_and_transfer_only(self, collection_controller, marketplace):
        response = await collection_controller.get_history("0xC1")

        assert sorted(a["type"] for a in response.data) == ["Sold", "Transfer"]
        transfer = next(a for a in response.data if a["type"] == "Transfer")
        assert transfer["nftObject"] == {"artUri": "ipfs://ape1", "name": "Ape #1"}

    @pytest.mark.asyncio
    async def test_detail(self, collection_controller, marketplace):
        response = await collection_controller.get_collection_detail("0xC1")

        detail = response.data
        assert len(detail["activities"]) == 3
        assert len(detail["nfts"]) == 3
        assert (detail["owners"], detail["items"]) == (2, 3)
        assert detail["floorPrice"] == 1.5
        assert detail["totalVolume"] == 10
        assert detail["_24h"] == 14
        assert detail["creatorDetail"]["username"] == "alice"

    @pytest.mark.parametrize(
        "operation", ["get_owners", "get_items", "get_activity", "get_history", "get_collection_detail"]
    )
    @pytest.mark.asyncio
    async def test_unknown_contract(self, collection_controller, marketplace, operation):
        response = await getattr(collection_controller, operation)("0xGONE")

        assert response.status == 422
        assert response.error == "collection not found"

    @pytest.mark.asyncio
    async def test_store_unavailable(self, storage):
        controller = NFTCollectionController(None, storage, StaticContractRegistry())

        response = await controller.get_collections()

        assert response.status == 500
        assert response.error == "Could not connect to the database."


class TestCreateCollection:
    @pytest.mark.asyncio
    async def test_creates_collection(self, collection_controller, marketplace, storage, db):
        response = await collection_controller.create_collection(_form(str(marketplace["alice"]["_id"])))

        assert response.status == 201
        created = response.data
        assert created["contract"] == ERC721
        assert created["logoUrl"] == "https://ipfs.test/ipfs/4"
        assert created["featuredUrl"] == ""
        assert created["links"][0] == "https://birds.example"
        assert created["creator"]["wallet"] == "0xA"
        storage.upload_image.assert_awaited_once_with(b"logo")
        stored = await db.table(NFT_COLLECTION).find_one({"name": "Birds"})
        assert stored["creator"] == "0xA"
        assert stored["platform"] == "Unknown"

    @pytest.mark.asyncio
    async def test_duplicate_name(self, collection_controller, marketplace, storage, db):
        form = _form(str(marketplace["alice"]["_id"]), name="Apes")

        response = await collection_controller.create_collection(form)

        assert response.status == 409
        assert response.error == "Same collection name detected"
        assert db.table(NFT_COLLECTION).inserts == 0
        storage.upload_image.assert_not_awaited()

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"logo_file": None}, "logoUrl is invalid or missing"),
            ({"name": " "}, "name is invalid or missing"),
            ({"blockchain": ""}, "blockchain is invalid or missing"),
            ({"category": ""}, "category is invalid or missing"),
        ],
    )
    @pytest.mark.asyncio
    async def test_missing_fields_never_reach_store(self, collection_controller, db, overrides, message):
        response = await collection_controller.create_collection(_form("", **overrides))

        assert response.status == 400
        assert response.error == message
        assert db.accessed == []

    @pytest.mark.asyncio
    async def test_invalid_creator_id(self, collection_controller, marketplace):
        response = await collection_controller.create_collection(_form("not-an-id"))

        assert response.status == 400
        assert response.error == "creator address is invalid or missing"

    @pytest.mark.asyncio
    async def test_unknown_creator(self, collection_controller, marketplace, db):
        response = await collection_controller.create_collection(_form(str(ObjectId())))

        assert response.status == 422
        assert db.table(NFT_COLLECTION).inserts == 0

    @pytest.mark.asyncio
    async def test_unsupported_blockchain(self, collection_controller, marketplace, storage):
        form = _form(str(marketplace["alice"]["_id"]), blockchain="Solana")

        response = await collection_controller.create_collection(form)

        assert response.status == 400
        assert "not supported" in response.error
        storage.upload_image.assert_not_awaited()

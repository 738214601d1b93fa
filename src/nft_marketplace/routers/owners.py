"""Owner profile routes. Handlers only call the controller and render the envelope."""
from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from nft_marketplace.core import as_json_response
from nft_marketplace.deps import FiltersDep, OwnerControllerDep
from nft_marketplace.schemas import OwnerCreate, PhotoUpdate

router = APIRouter(prefix="/owners", tags=["owners"])


@router.get("")
async def list_owners(controller: OwnerControllerDep, filters: FiltersDep) -> JSONResponse:
    """All owners with their NFT and collection counts."""
    return as_json_response(await controller.find_all_owners(filters))


@router.post("")
async def create_owner(body: OwnerCreate, controller: OwnerControllerDep) -> JSONResponse:
    """Create an owner profile; 409 if the wallet already has one."""
    return as_json_response(
        await controller.create_owner(body.photo_url, body.wallet, body.bio, body.username, body.social)
    )


@router.get("/{wallet}")
async def get_owner(wallet: str, controller: OwnerControllerDep) -> JSONResponse:
    """Owner profile; a blank one is created on first lookup."""
    return as_json_response(await controller.find_person(wallet))


@router.patch("/{wallet}")
async def update_owner(
    wallet: str,
    controller: OwnerControllerDep,
    fields: dict[str, Any] = Body(...),
) -> JSONResponse:
    """Merge the given fields into the owner's profile."""
    return as_json_response(await controller.update_owner(wallet, fields))


@router.put("/{wallet}/photo")
async def update_owner_photo(
    wallet: str, body: PhotoUpdate, controller: OwnerControllerDep
) -> JSONResponse:
    """Upload a base64 profile photo."""
    return as_json_response(await controller.update_owner_photo(wallet, body.image))


@router.get("/{wallet}/nfts")
async def get_owner_nfts(wallet: str, controller: OwnerControllerDep, filters: FiltersDep) -> JSONResponse:
    return as_json_response(await controller.get_owner_nfts(wallet, filters))


@router.get("/{wallet}/history")
async def get_owner_history(wallet: str, controller: OwnerControllerDep, filters: FiltersDep) -> JSONResponse:
    return as_json_response(await controller.get_owner_history(wallet, filters))


@router.get("/{wallet}/collections")
async def get_owner_collections(
    wallet: str, controller: OwnerControllerDep, filters: FiltersDep
) -> JSONResponse:
    return as_json_response(await controller.get_owner_collection(wallet, filters))


@router.get("/{wallet}/offers")
async def get_owner_offers(wallet: str, controller: OwnerControllerDep, filters: FiltersDep) -> JSONResponse:
    return as_json_response(await controller.get_owner_offers(wallet, filters))


@router.post("/{wallet}/favourites/{contract}/{nft_id}")
async def insert_favourite(
    wallet: str, contract: str, nft_id: str, controller: OwnerControllerDep
) -> JSONResponse:
    """Add an NFT to the owner's favourites."""
    return as_json_response(await controller.insert_favourite(wallet, contract, nft_id))


@router.delete("/{wallet}/favourites/{contract}/{nft_id}")
async def remove_favourite(
    wallet: str, contract: str, nft_id: str, controller: OwnerControllerDep
) -> JSONResponse:
    """Remove an NFT from the owner's favourites."""
    return as_json_response(await controller.remove_favourite(wallet, contract, nft_id))

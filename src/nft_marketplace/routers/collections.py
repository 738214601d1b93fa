"""NFT collection routes."""
from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse

from nft_marketplace.core import as_json_response
from nft_marketplace.deps import CollectionControllerDep, FiltersDep
from nft_marketplace.schemas import CollectionCreate

router = APIRouter(prefix="/collections", tags=["collections"])


async def _read(upload: UploadFile | None) -> bytes | None:
    if upload is None:
        return None
    return await upload.read() or None


@router.get("")
async def list_collections(controller: CollectionControllerDep, filters: FiltersDep) -> JSONResponse:
    """Collections with volume, floor price, owners, items and 24h values."""
    return as_json_response(await controller.get_collections(filters))


@router.get("/top")
async def top_collections(controller: CollectionControllerDep, filters: FiltersDep) -> JSONResponse:
    """The ten collections with the highest volume."""
    return as_json_response(await controller.get_top_collections(filters))


@router.post("")
async def create_collection(
    controller: CollectionControllerDep,
    logo: UploadFile | None = File(default=None),
    featured_img: UploadFile | None = File(default=None),
    banner_img: UploadFile | None = File(default=None),
    name: str = Form(default=""),
    description: str = Form(default=""),
    category: str = Form(default=""),
    site_url: str = Form(default=""),
    discord_url: str = Form(default=""),
    instagram_url: str = Form(default=""),
    medium_url: str = Form(default=""),
    telegram_url: str = Form(default=""),
    creator_earning: float = Form(default=0),
    blockchain: str = Form(default=""),
    is_explicit: bool = Form(default=False),
    creator_id: str = Form(default=""),
) -> JSONResponse:
    """Create a collection from a multipart form (images as files)."""
    form = CollectionCreate(
        logo_file=await _read(logo),
        featured_img_file=await _read(featured_img),
        banner_img_file=await _read(banner_img),
        name=name,
        description=description,
        category=category,
        site_url=site_url,
        discord_url=discord_url,
        instagram_url=instagram_url,
        medium_url=medium_url,
        telegram_url=telegram_url,
        creator_earning=creator_earning,
        blockchain=blockchain,
        is_explicit=is_explicit,
        creator_id=creator_id,
    )
    return as_json_response(await controller.create_collection(form))


@router.get("/{contract}")
async def get_collection_detail(contract: str, controller: CollectionControllerDep) -> JSONResponse:
    return as_json_response(await controller.get_collection_detail(contract))


@router.get("/{contract}/owners")
async def get_owners(contract: str, controller: CollectionControllerDep, filters: FiltersDep) -> JSONResponse:
    return as_json_response(await controller.get_owners(contract, filters))


@router.get("/{contract}/items")
async def get_items(contract: str, controller: CollectionControllerDep, filters: FiltersDep) -> JSONResponse:
    return as_json_response(await controller.get_items(contract, filters))


@router.get("/{contract}/activity")
async def get_activity(contract: str, controller: CollectionControllerDep, filters: FiltersDep) -> JSONResponse:
    return as_json_response(await controller.get_activity(contract, filters))


@router.get("/{contract}/history")
async def get_history(contract: str, controller: CollectionControllerDep, filters: FiltersDep) -> JSONResponse:
    return as_json_response(await controller.get_history(contract, filters))

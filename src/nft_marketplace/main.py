"""Main module for the NFT marketplace API."""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from nft_marketplace.config import get_settings
from nft_marketplace.controllers import NFTCollectionController, OwnerController
from nft_marketplace.db import close_client, create_client, get_database
from nft_marketplace.providers import MoralisIpfsStorage, StaticContractRegistry
from nft_marketplace.routers import collections_router, owners_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Open the database and collaborators at startup; close them on shutdown."""
    settings = get_settings()
    client = create_client(settings)
    database = get_database(client, settings)
    storage = MoralisIpfsStorage(settings)
    contracts = StaticContractRegistry()
    logger.info("Using MongoDB database %s", settings.mongodb_database)

    fastapi_app.state.owner_controller = OwnerController(database, storage)
    fastapi_app.state.collection_controller = NFTCollectionController(
        database, storage, contracts
    )

    yield

    try:
        await storage.close()
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Error closing object storage: %s", exc)
    close_client(client)


app = FastAPI(
    title="NFT Marketplace",
    description="Owner profiles, NFT collections, activity feeds and trading metrics",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(owners_router)
app.include_router(collections_router)


@app.get("/")
def health():
    """Return health check status."""
    return {"status": "ok"}


def run():
    """Run the server (uvicorn). Use for `poetry run start`."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run("nft_marketplace.main:app", host=settings.host, port=settings.port)

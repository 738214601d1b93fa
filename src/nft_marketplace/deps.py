"""FastAPI dependency injection: app.state holds singletons; Depends() resolves them.

The lifespan (main.py) creates the database handle, collaborators and
controllers once and attaches them to app.state.
"""
from typing import Annotated

from fastapi import Depends, HTTPException, Query, Request
from pydantic import ValidationError

from nft_marketplace.controllers import NFTCollectionController, OwnerController
from nft_marketplace.schemas import QueryFilters


def get_owner_controller(request: Request) -> OwnerController:
    """Resolve the OwnerController created at startup."""
    return request.app.state.owner_controller


def get_collection_controller(request: Request) -> NFTCollectionController:
    """Resolve the NFTCollectionController created at startup."""
    return request.app.state.collection_controller


def get_query_filters(
    filters: str | None = Query(
        default=None,
        description='JSON filter spec, e.g. {"filters":[{"fieldName":"price","operator":"gte","query":1}],'
        '"orderBy":"price","direction":"desc","limit":20}',
    ),
) -> QueryFilters | None:
    """Parse the optional `filters` query parameter."""
    if not filters:
        return None
    try:
        return QueryFilters.model_validate_json(filters)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid filters: {e}") from e


# Type aliases for route injection
OwnerControllerDep = Annotated[OwnerController, Depends(get_owner_controller)]
CollectionControllerDep = Annotated[NFTCollectionController, Depends(get_collection_controller)]
FiltersDep = Annotated[QueryFilters | None, Depends(get_query_filters)]

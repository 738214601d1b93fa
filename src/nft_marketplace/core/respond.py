"""Response envelope helpers."""
from typing import Any

from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from nft_marketplace.schemas import ApiResponse


def respond(payload: Any, is_error: bool = False, status_code: int = 200) -> ApiResponse:
    """Wrap a payload (or an error message when is_error) in the uniform envelope."""
    if is_error:
        return ApiResponse(success=False, status=status_code, error=str(payload))
    return ApiResponse(success=True, status=status_code, data=payload)


def as_json_response(response: ApiResponse) -> JSONResponse:
    """Render an envelope as a JSONResponse carrying its status code."""
    content = jsonable_encoder(response.model_dump(), custom_encoder={ObjectId: str})
    return JSONResponse(status_code=response.status, content=content)

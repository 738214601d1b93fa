"""Per-row enrichment fan-out with failure isolation."""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from nft_marketplace.core.error_mapper import HANDLED_EXCEPTIONS

logger = logging.getLogger(__name__)

Document = dict[str, Any]


async def gather_enriched(
    rows: list[Document],
    enrich: Callable[[Document], Awaitable[Document]],
) -> list[Document]:
    """Run enrich(row) for every row concurrently, preserving order.

    A row whose enrichment raises one of HANDLED_EXCEPTIONS is kept as-is
    with an `enrichmentError` message; the other rows are returned enriched.
    Any other exception propagates.
    """
    results = await asyncio.gather(*(enrich(row) for row in rows), return_exceptions=True)
    enriched: list[Document] = []
    for row, result in zip(rows, results):
        if isinstance(result, HANDLED_EXCEPTIONS):
            logger.warning("Enrichment failed for row %s: %s", row.get("_id"), result)
            enriched.append({**row, "enrichmentError": str(result)})
            continue
        if isinstance(result, BaseException):
            raise result
        enriched.append(result)
    return enriched


def nft_preview(nft: Document | None) -> Document | None:
    """Art URI and name of an NFT; None for a dangling reference."""
    if nft is None:
        return None
    return {"artUri": nft.get("artURI"), "name": nft.get("name")}

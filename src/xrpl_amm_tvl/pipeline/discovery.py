"""AMM pool discovery through paginated ``ledger_data`` requests."""

from __future__ import annotations

from typing import Any, AsyncIterator

from xrpl.core.binarycodec import decode

from ..clients import LedgerDataPage, XrplNodeClient
from ..clients.xrpl_node import LedgerSelector
from ..constants import VALIDATED_LEDGER
from ..diagnostics import MemorySampler, measure
from ..domain import Asset, PoolDescriptor
from ..logger import get_logger
from .context import PipelineContext

logger = get_logger(__name__)


def decode_ledger_entry(entry: dict[str, Any], binary: bool) -> dict[str, Any]:
    """Return the JSON form of a ledger state object."""
    if not binary:
        return entry
    try:
        blob = entry["data"]
    except (KeyError, TypeError) as e:
        raise ValueError(f"Binary ledger entry without data: {entry!r}") from e
    return decode(blob)


def pool_from_ledger_entry(entry: dict[str, Any]) -> PoolDescriptor:
    try:
        return PoolDescriptor(
            account=entry["Account"],
            asset1=Asset.from_ledger(entry["Asset"]),
            asset2=Asset.from_ledger(entry["Asset2"]),
        )
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed AMM ledger entry: {entry!r}") from e


async def iter_ledger_pages(
    client: XrplNodeClient,
    binary: bool = True,
    ledger_index: LedgerSelector = VALIDATED_LEDGER,
) -> AsyncIterator[LedgerDataPage]:
    """Yield ``ledger_data`` pages until the node stops returning a marker."""
    marker = None
    while True:
        page = await client.ledger_data(
            marker=marker, binary=binary, ledger_index=ledger_index
        )
        yield page
        if not page.marker:
            return
        marker = page.marker


async def discover_pools(
    client: XrplNodeClient,
    binary: bool = True,
    ledger_index: LedgerSelector = VALIDATED_LEDGER,
    sampler: MemorySampler | None = None,
) -> list[PoolDescriptor]:
    """Collect every AMM pool in the ledger, in the order the node returns them."""
    pools: list[PoolDescriptor] = []
    page_number = 0
    async for page in iter_ledger_pages(client, binary, ledger_index):
        page_number += 1
        if sampler is not None:
            sampler.record()
        pools.extend(
            pool_from_ledger_entry(decode_ledger_entry(entry, binary))
            for entry in page.state
        )
        logger.debug(
            "Page %d: %d entries (%d pools so far)",
            page_number,
            len(page.state),
            len(pools),
        )
    logger.debug("No more markers after %d pages", page_number)
    return pools


async def collect_pools(ctx: PipelineContext) -> None:
    """Discover all AMM pools and store them in the context."""
    s = ctx.state.settings
    log = ctx.state.logger

    log.info("Discovering AMM pools at ledger %s...", s.ledger_index_param)
    kwargs = {"binary": s.binary, "ledger_index": s.ledger_index_param}
    sampler = ctx.new_sampler()
    if sampler is not None:
        pools = await measure(
            "Pool Discovery", discover_pools, ctx.client, sampler=sampler, **kwargs
        )
    else:
        pools = await discover_pools(ctx.client, **kwargs)

    log.info("Discovered %d AMM pools", len(pools))
    ctx.pools = pools

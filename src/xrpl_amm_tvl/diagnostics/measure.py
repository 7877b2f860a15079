from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable, TypeVar

from .memory import MemorySampler

T = TypeVar("T")

logger = logging.getLogger(__name__)


async def measure(
    description: str,
    fn: Callable[..., Awaitable[T]],
    *args: Any,
    sampler: MemorySampler | None = None,
    **kwargs: Any,
) -> T:
    """Run ``fn`` and log its duration and the memory range seen by ``sampler``.

    ``fn`` receives the sampler as a ``sampler`` keyword argument so that it
    can record samples while it works.
    """
    sampler = sampler or MemorySampler()
    logger.info(">>> %s", description)
    sampler.record()
    start = time.perf_counter()

    result = await fn(*args, sampler=sampler, **kwargs)

    elapsed = time.perf_counter() - start
    sampler.record()
    summary = sampler.summary()
    logger.info("%s took %.3fs", description, elapsed)
    logger.info(
        "%s memory (MB): low rss=%.2f vms=%.2f, high rss=%.2f vms=%.2f (%d samples)",
        description,
        summary.low.rss,
        summary.low.vms,
        summary.high.rss,
        summary.high.vms,
        summary.samples,
    )
    return result

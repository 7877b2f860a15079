"""Report generation and publishing."""

from __future__ import annotations

from ..report import generate_report
from ..report.publisher import publish_to_stdout
from .context import PipelineContext


async def build_report(ctx: PipelineContext) -> None:
    s = ctx.state.settings
    ctx.report = generate_report(
        ledger_index=s.ledger_index_param,
        pools=ctx.pools_with_reserves_required,
        breakdown=ctx.breakdown_required,
        top_pools=s.top_pools,
    )


async def publish_report(ctx: PipelineContext) -> None:
    ctx.state.logger.info("Publishing report to stdout")
    publish_to_stdout(ctx.report_required, ctx.state.settings.output_format)

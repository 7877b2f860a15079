"""Rich console formatter for TVL reports."""

from __future__ import annotations

from decimal import Decimal

from rich.columns import Columns
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table

from .generator import TvlReport


def _format_xrp(value: Decimal) -> str:
    """Format an XRP amount with thousands separators and 6 decimals."""
    return f"{value:,.6f}"


def _truncate_address(address: str) -> str:
    """Truncate address for display."""
    if len(address) <= 16:
        return address
    return f"{address[:8]}...{address[-4:]}"


def _truncate_asset(asset: str) -> str:
    currency, _, issuer = asset.partition(".")
    if not issuer:
        return currency
    if len(currency) == 40:
        currency = f"{currency[:6]}..."
    return f"{currency} ({_truncate_address(issuer)})"


def format_report_table(report: TvlReport, console: Console | None = None) -> None:
    """Print a rich formatted dashboard to stdout."""
    console = console or Console()

    ledger_table = Table(show_header=False, box=None, padding=(0, 1))
    ledger_table.add_column("Key", style="dim")
    ledger_table.add_column("Value", style="cyan")
    ledger_table.add_row("Ledger", str(report.ledger_index))
    ledger_table.add_row("Pools", str(report.pool_count))
    ledger_table.add_row("XRP pairs", str(report.reference_pool_count))
    ledger_table.add_row(
        "Non-XRP pairs",
        f"{report.valued_pool_count} valued / {report.non_reference_pool_count}",
    )

    ledger_panel = Panel(ledger_table, title="[bold]Ledger[/]", border_style="blue")

    summary_table = Table(show_header=False, box=None, padding=(0, 1))
    summary_table.add_column("Key", style="dim")
    summary_table.add_column("Value", style="green")
    summary_table.add_row("TVL", f"{_format_xrp(report.total_tvl)} XRP")
    summary_table.add_row("XRP pairs", f"{_format_xrp(report.reference_pairs_tvl)} XRP")
    summary_table.add_row(
        "Non-XRP pairs", f"{_format_xrp(report.non_reference_pairs_tvl)} XRP"
    )

    summary_panel = Panel(summary_table, title="[bold]Summary[/]", border_style="green")

    top_row = Columns([ledger_panel, summary_panel], equal=True, expand=True)

    pool_table = Table(title=None, expand=True, show_lines=False)
    pool_table.add_column("Pool", style="cyan", no_wrap=True)
    pool_table.add_column("Asset 1")
    pool_table.add_column("Asset 2")
    pool_table.add_column("TVL (XRP)", justify="right", style="green")
    for pool in report.top_pools:
        pool_table.add_row(
            _truncate_address(pool.pool),
            _truncate_asset(pool.token0),
            _truncate_asset(pool.token1),
            _format_xrp(pool.tvl),
        )

    pool_panel = Panel(
        pool_table,
        title=f"[bold]Top {len(report.top_pools)} Pools[/]",
        border_style="cyan",
    )

    outer_panel = Panel(
        Group(top_row, "", pool_panel),
        title="[bold white]XRPL AMM TVL[/]",
        border_style="white",
        padding=(1, 2),
    )

    console.print()
    console.print(outer_panel)
    console.print()

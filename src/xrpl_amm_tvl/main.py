"""CLI entrypoint for xrpl-amm-tvl."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Annotated

import requests
import typer
from pydantic import ValidationError

from .clients import XrplNodeError
from .logger import setup_logging
from .settings import CONFIG_ENV_VAR, OutputFormat, TvlSettings
from .state import AppState

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    add_help_option=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Total value locked in XRPL AMM pools, denominated in XRP.",
)


def _build_logger() -> logging.Logger:
    """Build a logger instance."""
    return logging.getLogger("xrpl_amm_tvl")


@app.callback(invoke_without_command=True)
def report(
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [xrpl_amm_tvl] table).",
        ),
    ] = None,
    node_url: Annotated[
        str | None,
        typer.Option("--node-url", help="rippled JSON-RPC endpoint."),
    ] = None,
    ledger_index: Annotated[
        int | None,
        typer.Option(
            "--ledger-index",
            help="Ledger to value. If not provided, the latest validated ledger is used.",
        ),
    ] = None,
    binary: Annotated[
        bool | None,
        typer.Option(
            "--binary/--json-entries",
            help="Request ledger entries as binary blobs (decoded locally) or as JSON.",
        ),
    ] = None,
    threshold: Annotated[
        str | None,
        typer.Option(
            "--threshold",
            help="Minimum TVL (XRP) of an XRP pool used to price non-XRP pools.",
        ),
    ] = None,
    top_pools: Annotated[
        int | None,
        typer.Option("--top-pools", help="Number of largest pools to list."),
    ] = None,
    output_format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format (table or json)."),
    ] = None,
    measure: Annotated[
        bool | None,
        typer.Option(
            "--measure/--no-measure",
            help="Log duration and memory usage of each step.",
        ),
    ] = None,
    global_timeout_seconds: Annotated[
        float | None,
        typer.Option(
            "--global-timeout-seconds",
            help="Abort the run after this many seconds (0 disables).",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    show_config: Annotated[
        bool,
        typer.Option(
            "--show-config",
            help="Print effective config and exit.",
        ),
    ] = False,
):
    """Discover every AMM pool, fetch its reserves and report the total TVL in XRP."""
    if config_path:
        os.environ[CONFIG_ENV_VAR] = str(config_path)

    init_kwargs: dict[str, object] = {}
    if node_url is not None:
        init_kwargs["node_url"] = node_url
    if ledger_index is not None:
        init_kwargs["ledger_index"] = ledger_index
    if binary is not None:
        init_kwargs["binary"] = binary
    if threshold is not None:
        init_kwargs["reference_threshold"] = threshold
    if top_pools is not None:
        init_kwargs["top_pools"] = top_pools
    if output_format is not None:
        init_kwargs["output_format"] = output_format
    if measure is not None:
        init_kwargs["measure"] = measure
    if global_timeout_seconds is not None:
        init_kwargs["global_timeout_seconds"] = global_timeout_seconds
    if log_level is not None:
        init_kwargs["log_level"] = log_level.upper()

    try:
        settings = TvlSettings(**init_kwargs)
    except ValidationError as e:
        setup_logging()
        _build_logger().error("Failed to get TVL for XRPL: invalid configuration: %s", e)
        raise typer.Exit(code=1) from e

    if show_config:
        typer.echo(json.dumps(settings.as_dict(), indent=2))
        raise typer.Exit(code=0)

    setup_logging(settings.log_level)
    logger = _build_logger()
    state = AppState(settings=settings, logger=logger)

    from .pipeline.run import run_tvl

    try:
        asyncio.run(run_tvl(state))
    except (
        XrplNodeError,
        requests.exceptions.RequestException,
        ValueError,
        asyncio.TimeoutError,
    ) as e:
        logger.error("Failed to get TVL for XRPL: %s", e)
        raise typer.Exit(code=1) from e


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()

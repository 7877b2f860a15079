from __future__ import annotations

import json
import logging

from ..settings import OutputFormat
from .formatter import format_report_table
from .generator import TvlReport

logger = logging.getLogger(__name__)


def publish_to_stdout(
    report: TvlReport,
    output_format: OutputFormat = OutputFormat.TABLE,
) -> None:
    """Publish report to stdout.

    Args:
        report: The TVL report to publish
        output_format: TABLE for the rich dashboard, JSON for raw JSON
    """
    if output_format == OutputFormat.JSON:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        format_report_table(report)
    logger.debug("Report published to stdout")

# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Generate ARIA validation reports.

Reports are built from the pydantic SummaryReport model and written as JSON,
or as plain text for reading in a terminal.
"""

import json
import os
from typing import Any, Dict

from aria_validator.audit.summary import Summary
from aria_validator.utils.logging_helper import setup_logger
from aria_validator.utils.report_models import Level

logger = setup_logger(__name__)


def generate_report(
    summary: Summary,
    output_path: str,
    report_format: str = "json",
) -> Dict[str, Any]:
    """
    Generate a validation report in the specified format.

    Args:
        summary: The summary returned by the validator
        output_path: Path where the report should be saved
        report_format: Format of the report (json or text)

    Returns:
        The report data as a plain dictionary
    """
    report_data = summary.to_dict()

    # Make sure the output directory exists
    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    if report_format == "text":
        generate_text_report(summary, output_path)
    else:
        if report_format != "json":
            logger.warning(f"Unknown report format: {report_format}, using JSON")
        generate_json_report(report_data, output_path)
    return report_data


def generate_json_report(report_data: Dict[str, Any], output_path: str) -> None:
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(report_data, f, indent=2)
    logger.info(f"Generated JSON report: {output_path}")


def generate_text_report(summary: Summary, output_path: str) -> None:
    """Write repeated messages once, with a count, per severity level."""
    text = ["ARIA VALIDATION REPORT", "=" * 80, ""]
    text.append(f"URL: {summary.url or 'unknown'}")
    text.append(f"Frames checked: {summary.frames_checked} of {summary.frames_total}")
    text.append(f"Roles found: {', '.join(summary.roles) or 'none'}")
    text.append("")

    for level, title in ((Level.ERROR, "ERRORS"), (Level.WARN, "WARNINGS")):
        text.append(title)
        text.append("-" * 80)
        collapsed = summary.collapse(level)
        if not collapsed:
            text.append("None found.")
        for finding in collapsed:
            line = f"  {finding.message}"
            if finding.count > 1:
                line += f" (repeated {finding.count - 1} more times)"
            text.append(line)
        text.append("")

    with open(output_path, "w", encoding="utf-8") as f:
        f.write("\n".join(text))
    logger.info(f"Generated text report: {output_path}")

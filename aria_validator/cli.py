# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Command-line interface for the aria_validator package.

Checks a local HTML file (and its local frames) for ARIA conformance problems.
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from aria_validator import __version__
from aria_validator.api import check_file
from aria_validator.utils.config import config_manager, load_config_file, save_config
from aria_validator.utils.logging_helper import ConfigurationError, setup_logger
from aria_validator.utils.report_models import Level

# Set up module-level logger
logger = setup_logger(__name__)

CONFIG_SECTIONS = ["validator", "taxonomy", "diagnostics"]


def configure_logging(debug: bool = False, quiet: bool = False) -> None:
    """Configure logging based on debug and quiet flags."""
    if quiet:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level)
    logging.getLogger().setLevel(level)
    # Loggers created at import time keep their own level
    for name in list(logging.Logger.manager.loggerDict):
        if name.startswith("aria_validator"):
            logging.getLogger(name).setLevel(level)


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="aria-validator",
        description="Check HTML documents for WAI-ARIA conformance problems.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--version", action="store_true", help="Show version information")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")
    check_parser = subparsers.add_parser(
        "check",
        help="Check an HTML file",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    check_parser.add_argument("--input", "-i", required=True, help="Input HTML file")
    check_parser.add_argument("--output", "-o", help="Path to save the report")
    check_parser.add_argument(
        "--format",
        choices=["json", "text"],
        default="json",
        help="Report format",
    )
    check_parser.add_argument("--url", help="URL the document is served from")
    check_parser.add_argument("--rdf", help="Path to an ARIA role taxonomy (RDF)")
    check_parser.add_argument("--html-rules", help="Path to HTML implicit semantics rules (XML)")
    check_parser.add_argument(
        "--no-attributes",
        action="store_true",
        help="Do not check elements that have ARIA attributes but no role",
    )
    check_parser.add_argument(
        "--no-experimental",
        action="store_true",
        help="Do not run experimental checks",
    )
    check_parser.add_argument("--no-ids", action="store_true", help="Do not check ids")
    check_parser.add_argument(
        "--static",
        action="store_true",
        help="Read raw attribute values instead of normalized DOM properties",
    )
    check_parser.add_argument("--config", "-c", help="Path to configuration file")
    check_parser.add_argument(
        "--save-config",
        metavar="CONFIG_PATH",
        help="Save the resolved configuration to the specified file path",
    )
    check_parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    check_parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only output errors, suppress other output",
    )
    return parser


def apply_config_file(config_path: str) -> None:
    """Load a configuration file into the user configuration."""
    logger.info(f"Loading configuration from {config_path}")
    config_data = load_config_file(config_path)
    for section in CONFIG_SECTIONS:
        if section in config_data:
            config_manager.set_user_config(config_data[section], section)
            logger.debug(f"Applied configuration for section: {section}")


def build_options(args: Dict[str, Any]) -> Dict[str, Any]:
    """Validator options from the command line; unset flags keep configured values."""
    options = config_manager.get_config(section="validator")
    if args.get("no_attributes"):
        options["attributes"] = False
    if args.get("no_experimental"):
        options["experimental"] = False
    if args.get("no_ids"):
        options["ids"] = False
    return options


def build_config(args: Dict[str, Any]) -> Dict[str, Any]:
    taxonomy = {"rdf_path": args.get("rdf"), "html_path": args.get("html_rules")}
    if args.get("static"):
        taxonomy["use_dom_properties"] = False
    return {"taxonomy": taxonomy}


def save_configuration(args: Dict[str, Any]) -> None:
    """Save the configuration resolved from defaults, the config file and the flags."""
    config = config_manager.get_config()
    config["validator"] = build_options(args)
    config["taxonomy"].update(
        {key: value for key, value in build_config(args)["taxonomy"].items() if value is not None}
    )
    path = args["save_config"]
    file_format = "json" if path.lower().endswith(".json") else "yaml"
    save_config(config, path, file_format)


def run_check_command(args: Dict[str, Any]) -> int:
    """Run the check command; 0 when no errors were found, 1 otherwise."""
    try:
        input_path = args["input"]
        if not args.get("quiet"):
            logger.info(f"Checking ARIA usage in: {input_path}")

        summary = check_file(
            input_path,
            url=args.get("url"),
            options=build_options(args),
            output_path=args.get("output"),
            config=build_config(args),
            report_format=args.get("format", "json"),
        )

        if not args.get("quiet"):
            print_summary(summary)
        return 0 if summary.passed else 1

    except Exception as e:
        logger.error(f"Error checking {args.get('input')}: {e}")
        if not args.get("quiet"):
            print(f"Error: {e}")
        return 1


def print_summary(summary) -> None:
    print(f"\nARIA Validation Results: {summary.url}")
    print(
        f"  Errors: {len(summary.errors)}  Warnings: {len(summary.warnings)}  "
        f"Frames checked: {summary.frames_checked}/{summary.frames_total}"
    )
    for level in (Level.ERROR, Level.WARN):
        for finding in summary.collapse(level):
            repeated = f" (x{finding.count})" if finding.count > 1 else ""
            print(f"  [{finding.level}] {finding.message}{repeated}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"ARIA Validator v{__version__}")
        return 0
    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(debug=args.debug, quiet=args.quiet)
    args_dict = vars(args)

    if args_dict.get("config"):
        try:
            apply_config_file(args_dict["config"])
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            print(f"Error: {e}")
            return 1

    if args_dict.get("save_config"):
        try:
            save_configuration(args_dict)
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            print(f"Error: {e}")
            return 1

    if args_dict.get("output"):
        output_dir = os.path.dirname(args_dict["output"])
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)

    if args.command == "check":
        return run_check_command(args_dict)
    print("No command specified")
    return 1


if __name__ == "__main__":
    sys.exit(main())

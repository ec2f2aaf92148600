# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
ARIA Validator API.

This module provides the primary entry points of the package: building a
validator from configuration and checking HTML strings or files.
"""

import os
import threading
from typing import Any, Dict, Optional, Tuple

from bs4 import BeautifulSoup

from aria_validator.audit.report_generator import generate_report
from aria_validator.audit.summary import Summary
from aria_validator.audit.validator import AriaValidator
from aria_validator.dom.locator import QueryEngine
from aria_validator.dom.properties import get_reader
from aria_validator.dom.window import Window, load_window
from aria_validator.taxonomy.html_semantics import HtmlSemantics
from aria_validator.taxonomy.roles import RoleModel
from aria_validator.utils.config import config_manager, validate_options
from aria_validator.utils.diagnostics import DiagnosticsChannel, diagnostics
from aria_validator.utils.logging_helper import (
    AriaValidatorError,
    ValidationRunError,
    handle_exception,
    setup_logger,
)

logger = setup_logger(__name__)

# Taxonomies shared by every validator built here, keyed by their configuration
_taxonomies: Dict[Tuple[Optional[str], Optional[str], bool], Tuple[RoleModel, HtmlSemantics]] = {}
_taxonomy_lock = threading.Lock()


def get_taxonomy(
    rdf_path: Optional[str] = None,
    html_path: Optional[str] = None,
    use_dom_properties: bool = True,
) -> Tuple[RoleModel, HtmlSemantics]:
    """
    Get the shared role model and HTML semantics for one taxonomy configuration.

    The instances are created on first request and reused afterwards, so the
    taxonomy documents are queried and the role descriptors built once.
    """
    key = (rdf_path, html_path, bool(use_dom_properties))
    with _taxonomy_lock:
        taxonomy = _taxonomies.get(key)
        if taxonomy is None:
            taxonomy = (
                RoleModel(rdf_path),
                HtmlSemantics(html_path, reader=get_reader(use_dom_properties)),
            )
            _taxonomies[key] = taxonomy
    return taxonomy


def _section(config: Optional[Dict[str, Any]], section: str) -> Dict[str, Any]:
    overrides = (config or {}).get(section)
    return config_manager.get_config(overrides, section=section)


def create_validator(
    options: Any = None,
    config: Optional[Dict[str, Any]] = None,
    engine: Optional[QueryEngine] = None,
) -> AriaValidator:
    """
    Build a validator from configuration.

    Args:
        options: Which optional checks to run (``attributes``, ``experimental``,
            ``ids``); configured defaults when not given
        config: Overrides keyed by section, e.g.
            ``{"taxonomy": {"rdf_path": "..."}, "diagnostics": {"strict": True}}``
        engine: Query engine used to locate elements

    Returns:
        A ready to use AriaValidator

    Raises:
        ConfigurationError: If options or configuration are invalid
    """
    taxonomy = _section(config, "taxonomy")
    validate_options(
        taxonomy,
        optional_fields={
            "rdf_path": str,
            "html_path": str,
            "use_dom_properties": bool,
            "parser": str,
        },
    )
    strict = _section(config, "diagnostics").get("strict", False)
    logger.debug("Taxonomy configuration: %s", taxonomy)

    role_model, html_semantics = get_taxonomy(
        taxonomy.get("rdf_path"),
        taxonomy.get("html_path"),
        taxonomy.get("use_dom_properties", True),
    )
    channel = DiagnosticsChannel(strict=True) if strict else diagnostics
    return AriaValidator(
        role_model,
        html_semantics,
        options=options,
        engine=engine,
        diagnostics_channel=channel,
    )


def check_html(
    html: str,
    url: Optional[str] = None,
    options: Any = None,
    config: Optional[Dict[str, Any]] = None,
) -> Summary:
    """
    Check an HTML string.

    Args:
        html: The markup to check
        url: The URL reported for the document
        options: Which optional checks to run
        config: Configuration overrides keyed by section

    Returns:
        The Summary of the document
    """
    validator = create_validator(options, config)
    parser = _section(config, "taxonomy").get("parser", "html.parser")
    return validator.check(Window(BeautifulSoup(html, parser), url))


def check_file(
    path: str,
    url: Optional[str] = None,
    options: Any = None,
    output_path: Optional[str] = None,
    config: Optional[Dict[str, Any]] = None,
    report_format: str = "json",
) -> Summary:
    """
    Check a local HTML file and the local frames it references.

    Args:
        path: Path to the HTML file
        url: The URL the file is served from; decides which frames are same-origin
        options: Which optional checks to run
        output_path: Where to save the report, if anywhere
        config: Configuration overrides keyed by section
        report_format: Format of the saved report (json or text)

    Returns:
        The Summary of the document, with frame summaries merged in

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationRunError: If the document could not be validated
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"HTML file not found: {path}")

    try:
        validator = create_validator(options, config)
        parser = _section(config, "taxonomy").get("parser", "html.parser")
        summary = validator.check(load_window(path, url, parser))

        if output_path:
            generate_report(summary, output_path, report_format)
        return summary

    except (FileNotFoundError, AriaValidatorError):
        raise
    except Exception as e:
        handle_exception(
            e,
            logger,
            custom_message=f"Error validating ARIA in {path}",
            custom_exception=ValidationRunError,
        )

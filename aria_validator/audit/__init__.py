# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
ARIA validation module for HTML documents.

This module provides the validation rules, the validator that runs them over a
window and its frames, and report generation.
"""

from aria_validator.audit.validator import AriaValidator
from aria_validator.audit.report_generator import generate_report

__all__ = ["AriaValidator", "generate_report"]

# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
ARIA Validator Package.

This package checks HTML documents for conformance with WAI-ARIA: role
taxonomy rules, required and supported states and properties, required
context and owned elements, aria-owns relationships, id hygiene and
conflicts with native HTML semantics.

Main Components:
- ARIA role taxonomy and implicit HTML semantics
- Validation rules and the frame-recursive validator
- Reports, configuration and command-line interface
"""

__version__ = "0.1.0"

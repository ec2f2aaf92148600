# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
ARIA role taxonomy and HTML implicit semantics.
"""

from aria_validator.taxonomy.html_semantics import HtmlSemantics, Semantic
from aria_validator.taxonomy.roles import REQUIRED, SUPPORTED, RoleModel

__all__ = ["HtmlSemantics", "Semantic", "RoleModel", "SUPPORTED", "REQUIRED"]

# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
ARIA validation rules package.

This package contains all the specific rules that can be run against an element.
"""

from aria_validator.audit.checks.role_checks import (
    KnownRoleCheck,
    AbstractRoleCheck,
    SecondRuleCheck,
)
from aria_validator.audit.checks.attribute_checks import (
    RequiredAttributesCheck,
    SupportsAllAttributesCheck,
)
from aria_validator.audit.checks.scope_checks import (
    InRequiredScopeCheck,
    ContainsRequiredElementsCheck,
)
from aria_validator.audit.checks.ownership_checks import AriaOwnsCheck
from aria_validator.audit.checks.id_checks import IdsCheck

__all__ = [
    "KnownRoleCheck",
    "AbstractRoleCheck",
    "SecondRuleCheck",
    "RequiredAttributesCheck",
    "SupportsAllAttributesCheck",
    "InRequiredScopeCheck",
    "ContainsRequiredElementsCheck",
    "AriaOwnsCheck",
    "IdsCheck",
]

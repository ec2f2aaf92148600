# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Checks on the value of the role attribute itself.
"""

from bs4 import Tag

from aria_validator.audit.base_check import UNSET, ValidationRule, safe_check
from aria_validator.audit.summary import Summary
from aria_validator.taxonomy.html_semantics import Semantic


class KnownRoleCheck(ValidationRule):
    """The role must be defined by the ARIA taxonomy."""

    name = "check_known_role"

    @safe_check
    def check(self, element: Tag, role=UNSET) -> Summary:
        result = Summary()
        role = self.resolve_role(element, role)
        if role and not self.role_model.has_role(role):
            result.add(self.finding("UNKNOWN_ROLE", element, role=role))
        return result


class AbstractRoleCheck(ValidationRule):
    """Abstract roles exist for the taxonomy only and must not be used in content."""

    name = "check_abstract_role"

    @safe_check
    def check(self, element: Tag, role=UNSET) -> Summary:
        result = Summary()
        role = self.resolve_role(element, role)
        if self.locator.is_abstract_role(role):
            result.add(self.finding("ABSTRACT_ROLE_USED", element, role=role))
        return result


class SecondRuleCheck(ValidationRule):
    """
    Explicit roles that conflict with native HTML semantics.

    Findings:
        - SPECIAL_ELEMENT_WITH_ROLE: any role on an element that must not have one
        - REDUNDANT_ROLE: the explicit role equals the implicit role
        - STRONG_ELEMENT_DIFFERENT_ROLE: a different role on an element with strong semantics
    """

    name = "check_second_rule"

    @safe_check
    def check(self, element: Tag, role=UNSET) -> Summary:
        result = Summary()
        role = self.resolve_role(element, role)
        tag = element.name
        if not (tag and role):
            return result

        strength = self.html_semantics.get_semantic_strength(element)
        if strength == Semantic.NONE:
            return result
        if strength == Semantic.SACRED:
            result.add(self.finding("SPECIAL_ELEMENT_WITH_ROLE", element, role=role, tag=tag))
            return result

        implicit_role = self.html_semantics.get_implicit_role(element)
        if not implicit_role:
            return result
        if implicit_role == role:
            result.add(self.finding("REDUNDANT_ROLE", element, role=role, tag=tag))
        elif strength == Semantic.STRONG:
            result.add(
                self.finding("STRONG_ELEMENT_DIFFERENT_ROLE", element, role=role, tag=tag)
            )
        return result

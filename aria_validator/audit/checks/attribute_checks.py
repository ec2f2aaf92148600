# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Checks on the aria-* states and properties of an element.
"""

from bs4 import Tag

from aria_validator.audit.base_check import UNSET, ValidationRule, safe_check
from aria_validator.audit.summary import Summary
from aria_validator.dom.locator import ARIA_ATTR_RE
from aria_validator.taxonomy.roles import REQUIRED

# Elements where aria-required duplicates the native required attribute
FORM_ELEMENTS = frozenset({"input", "select", "textarea"})


class RequiredAttributesCheck(ValidationRule):
    """Every state the role requires must be present or provided natively."""

    name = "check_required_attributes"

    @safe_check
    def check(self, element: Tag, role=UNSET) -> Summary:
        """
        Check that the element has all states and properties required by its role.

        Args:
            element: The element to check
            role: The role to check against; the explicit or implicit role of the
                element when not given or empty

        Returns:
            A Summary with one REQUIRED_ATTR_MISSING error per missing state
        """
        result = Summary()
        if role is UNSET or not role:
            role = self.locator.get_role(element, implicit=True)
        supported = self.role_model.get_supported(role)
        native = self.html_semantics.get_natively_supported(element)
        for attr, level in supported.items():
            if level != REQUIRED:
                continue
            if element.has_attr(attr) or attr in native:
                continue
            result.add(self.finding("REQUIRED_ATTR_MISSING", element, role=role, attr=attr))
        return result


class SupportsAllAttributesCheck(ValidationRule):
    """
    Every aria-* attribute present must be supported by the role.

    Findings:
        - UNSUPPORTED_ATTR_FOR_ROLE / UNSUPPORTED_ATTR_FOR_ELEMENT: not supported
        - ARIA_REQUIRED_ON_FORM_ELEMENT: aria-required where native required exists
        - REDUNDANT_ATTR: supported, but a native equivalent is available
    """

    name = "check_supports_all_attributes"

    @safe_check
    def check(self, element: Tag, role=UNSET) -> Summary:
        result = Summary()
        if role is UNSET or not role:
            role = self.locator.get_role(element, implicit=True)
        supported = self.role_model.get_supported(role)
        native = self.html_semantics.get_natively_supported(element)

        for attr in element.attrs:
            if not ARIA_ATTR_RE.match(attr):
                continue
            if attr not in supported:
                if role:
                    result.add(
                        self.finding("UNSUPPORTED_ATTR_FOR_ROLE", element, role=role, attr=attr)
                    )
                else:
                    result.add(self.finding("UNSUPPORTED_ATTR_FOR_ELEMENT", element, attr=attr))
            elif attr in native:
                if attr == "aria-required" and element.name in FORM_ELEMENTS:
                    result.add(
                        self.finding("ARIA_REQUIRED_ON_FORM_ELEMENT", element, role=role, attr=attr)
                    )
                else:
                    result.add(self.finding("REDUNDANT_ATTR", element, role=role, attr=attr))
        return result

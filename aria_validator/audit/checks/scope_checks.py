# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Required context and required owned element checks.

A role may require a context role (a "tab" must live in a "tablist") and may
require owned elements (a "list" must contain "listitem"s). Both relationships
can be expressed by the DOM hierarchy or by aria-owns.
"""

from bs4 import Tag

from aria_validator.audit.base_check import UNSET, ValidationRule, safe_check
from aria_validator.audit.summary import Summary
from aria_validator.dom.properties import is_element


class InRequiredScopeCheck(ValidationRule):
    """The element must be inside, or owned by, one of its required context roles."""

    name = "check_in_required_scope"

    @safe_check
    def check(self, element: Tag, role=UNSET) -> Summary:
        result = Summary()
        role = self.resolve_role(element, role)
        if not role:
            return result
        required = self.role_model.get_scope(role)
        if not required or self._in_scope(element, required):
            return result
        result.add(self.finding("NOT_IN_REQUIRED_SCOPE", element, role=role, roles=required))
        return result

    def _in_scope(self, element: Tag, required) -> bool:
        for parent in element.parents:
            if not is_element(parent):
                continue
            if self.locator.get_role(parent, implicit=True) in required:
                return True
        owner = self.locator.get_owner(element)
        if owner is not None:
            return self.locator.get_role(owner, implicit=True) in required
        return False


class ContainsRequiredElementsCheck(ValidationRule):
    """
    The element must contain, or own, at least one of its required owned roles.

    A busy element (``aria-busy="true"``) may still be loading its content, which
    changes the wording of the finding but not its severity.
    """

    name = "check_contains_required_elements"

    @safe_check
    def check(self, element: Tag, role=UNSET) -> Summary:
        result = Summary()
        role = self.resolve_role(element, role)
        if not role:
            return result
        required = self.role_model.get_must_contain(role)
        if not required or self._contains(element, required):
            return result
        key = "MISSING_REQUIRED_ROLES"
        if element.get("aria-busy") == "true":
            key = "MISSING_REQUIRED_ROLES_BUSY"
        result.add(self.finding(key, element, role=role, roles=required))
        return result

    def _contains(self, element: Tag, required) -> bool:
        for required_role in required:
            if self.html_semantics.find_descendants(element, required_role):
                return True
        return any(
            self.locator.get_role(owned) in required for owned in self.locator.get_owned(element)
        )

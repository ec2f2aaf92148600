# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
aria-owns relationship checks.
"""

from bs4 import Tag

from aria_validator.audit.base_check import UNSET, ValidationRule, safe_check
from aria_validator.audit.summary import Summary
from aria_validator.dom.locator import get_element_by_id, owner_document, split_aria_id_list
from aria_validator.dom.properties import attribute_value


class AriaOwnsCheck(ValidationRule):
    """
    Check the ids listed in the aria-owns attribute of an element.

    Findings:
        - ARIA_OWNS_NONEXISTENT_ELEMENT: the id is not in the document
        - ARIA_OWNS_DESCENDANT: the owned element is already a DOM descendant of an owner
        - ARIA_OWNS_ALREADY_OWNED: more than one element owns the id
    """

    name = "check_aria_owns"
    attr = "aria-owns"

    @safe_check
    def check(self, element: Tag, role=UNSET) -> Summary:
        result = Summary()
        document = owner_document(element)
        for owned_id in split_aria_id_list(attribute_value(element, self.attr)):
            owners = self.locator.find_owners(document, owned_id)
            if not owners:
                # the element itself lists the id, so it must be found as an owner
                self.context.diagnostics.report(
                    "aria-owns id resolves to no owner", id=owned_id, element=str(element)
                )
                continue

            owned = get_element_by_id(document, owned_id)
            if owned is None:
                result.add(
                    self.finding(
                        "ARIA_OWNS_NONEXISTENT_ELEMENT", element, attr=self.attr, id=owned_id
                    )
                )
            else:
                for owner in owners:
                    if _is_ancestor(owner, owned):
                        result.add(
                            self.finding("ARIA_OWNS_DESCENDANT", element, attr=self.attr, id=owned_id)
                        )

            if len(owners) > 1:
                result.add(
                    self.finding("ARIA_OWNS_ALREADY_OWNED", owners, attr=self.attr, id=owned_id)
                )
        return result


def _is_ancestor(ancestor: Tag, node: Tag) -> bool:
    return any(parent is ancestor for parent in node.parents)

# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Id hygiene checks.

aria-owns, aria-labelledby and friends resolve ids, so ids must be unique and
must not contain whitespace.
"""

import re

from bs4 import Tag

from aria_validator.audit.base_check import UNSET, ValidationRule, safe_check
from aria_validator.audit.summary import Summary
from aria_validator.dom.properties import attribute_value

WHITESPACE_RE = re.compile(r"\s")


class IdsCheck(ValidationRule):
    """Check every id under a document or element (the element itself excluded)."""

    name = "check_ids"

    @safe_check
    def check(self, element: Tag, role=UNSET) -> Summary:
        result = Summary()
        found = set()
        for node in element.find_all(attrs={"id": True}):
            element_id = attribute_value(node, "id")
            if element_id in found:
                result.add(self.finding("DUPLICATE_ID", node, id=element_id))
            elif WHITESPACE_RE.search(element_id):
                result.add(self.finding("INVALID_ID", node, id=element_id))
            found.add(element_id)
        return result

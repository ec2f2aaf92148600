# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Locates elements of interest in a DOM subtree.

Queries are expressed as predicate objects and run by a QueryEngine. Two
engines are provided: one delegating to BeautifulSoup's own search and a
document-order tree walk. Both return identical results for the same query.
"""

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Union

from bs4 import Tag

from aria_validator.dom.properties import attribute_value, is_element
from aria_validator.taxonomy.html_semantics import HtmlSemantics, css_string
from aria_validator.taxonomy.roles import RoleModel
from aria_validator.utils.logging_helper import setup_logger

logger = setup_logger(__name__)

ARIA_ATTR_RE = re.compile(r"^aria-")

ABSTRACT_ROLES = frozenset(
    {
        "command",
        "composite",
        "input",
        "landmark",
        "range",
        "roletype",
        "section",
        "sectionhead",
        "select",
        "structure",
        "widget",
        "window",
    }
)


def owner_document(element: Tag) -> Tag:
    """The root of the tree the element belongs to."""
    root = element
    for parent in element.parents:
        root = parent
    return root


def split_aria_id_list(value: Optional[str]) -> List[str]:
    """Convert a whitespace separated ARIA id list to a list of ids."""
    if not value:
        return []
    return value.split()


def is_abstract_role(role: Optional[str]) -> bool:
    return bool(role) and role in ABSTRACT_ROLES


@dataclass(frozen=True)
class HasRoleQuery:
    """Elements carrying an explicit role attribute."""

    def __call__(self, node) -> bool:
        return is_element(node) and node.has_attr("role")


@dataclass(frozen=True)
class AriaAttributeQuery:
    """
    Elements with at least one ``aria-*`` attribute that is not a global state,
    optionally excluding elements that carry an explicit role.
    """

    global_attributes: FrozenSet[str]
    include_role: bool = False

    def __call__(self, node) -> bool:
        if not is_element(node):
            return False
        if not self.include_role and node.has_attr("role"):
            return False
        return any(
            ARIA_ATTR_RE.match(name) and name not in self.global_attributes
            for name in node.attrs
        )


class QueryEngine:
    """Runs element predicates over a subtree."""

    name = "base"

    def select(self, root: Tag, predicate, include_self: bool = False) -> List[Tag]:
        raise NotImplementedError("Subclasses must implement select()")


class SoupQueryEngine(QueryEngine):
    """Uses BeautifulSoup's native search."""

    name = "soup"

    def select(self, root: Tag, predicate, include_self: bool = False) -> List[Tag]:
        result = [root] if include_self and predicate(root) else []
        result.extend(root.find_all(predicate))
        return result


class TreeWalkQueryEngine(QueryEngine):
    """Walks the subtree in document order, for trees without native search."""

    name = "treewalk"

    def select(self, root: Tag, predicate, include_self: bool = False) -> List[Tag]:
        result = []
        if include_self and predicate(root):
            result.append(root)
        stack = list(reversed(_child_elements(root)))
        while stack:
            node = stack.pop()
            if predicate(node):
                result.append(node)
            stack.extend(reversed(_child_elements(node)))
        return result


def _child_elements(node: Tag) -> List[Tag]:
    return [child for child in getattr(node, "contents", ()) if isinstance(child, Tag)]


QUERY_ENGINES: Dict[str, type] = {
    SoupQueryEngine.name: SoupQueryEngine,
    TreeWalkQueryEngine.name: TreeWalkQueryEngine,
}


class ElementLocator:
    """Finds elements with roles, with ARIA attributes, and aria-owns relationships."""

    def __init__(
        self,
        role_model: RoleModel,
        html_semantics: HtmlSemantics,
        engine: Optional[QueryEngine] = None,
    ):
        self.role_model = role_model
        self.html_semantics = html_semantics
        self.engine = engine or SoupQueryEngine()
        self._attribute_queries: Dict[bool, AriaAttributeQuery] = {}

    def get_elements_with_role(self, element: Tag) -> List[Tag]:
        """All descendants with a ``role`` attribute (the element itself excluded)."""
        return self.engine.select(element, HasRoleQuery())

    def get_elements_with_aria_attr(self, element: Tag, include_role: bool = False) -> List[Tag]:
        """
        Get elements with non-global ``aria-*`` attributes.

        Args:
            element: The scope of the search; included if it matches itself
            include_role: Also include elements that have a ``role`` attribute

        Returns:
            Matching elements in document order
        """
        return self.engine.select(element, self.attribute_query(include_role), include_self=True)

    def attribute_query(self, include_role: bool = False) -> AriaAttributeQuery:
        """The cached query object for one include_role setting."""
        include_role = bool(include_role)
        query = self._attribute_queries.get(include_role)
        if query is None:
            global_attributes = frozenset(self.role_model.get_supported())
            query = AriaAttributeQuery(global_attributes, include_role)
            self._attribute_queries[include_role] = query
        return query

    def get_owner(self, element: Tag, show_all: bool = False) -> Union[Tag, List[Tag], None]:
        """
        Get the element that ``aria-owns`` this element.

        Args:
            element: A potentially owned element
            show_all: Return every owner found, even though more than one is invalid

        Returns:
            The owner (or None), or a list of owners when show_all is set
        """
        element_id = attribute_value(element, "id")
        if not element_id:
            return None
        owners = self.find_owners(owner_document(element), element_id)
        if show_all:
            return owners
        if len(owners) > 1:
            logger.info("Found more than one element which 'aria-owns' id %s", element_id)
        return owners[0] if owners else None

    def find_owners(self, document: Tag, element_id: str) -> List[Tag]:
        """All elements in ``document`` whose aria-owns list contains ``element_id``."""
        return list(document.select(f"[aria-owns~={css_string(element_id)}]"))

    def get_owned(self, element: Tag) -> List[Tag]:
        """Get the elements this element ``aria-owns``, skipping ids not in the document."""
        result = []
        document = owner_document(element)
        for owned_id in split_aria_id_list(attribute_value(element, "aria-owns")):
            owned = get_element_by_id(document, owned_id)
            if owned is not None:
                result.append(owned)
            else:
                logger.warning("Can not find element specified in 'aria-owns' with id %s", owned_id)
        return result

    def get_role(self, element: Tag, implicit: bool = False) -> Optional[str]:
        """
        Get the role of an element.

        Args:
            element: The element whose role we want
            implicit: Fall back to the implicit role when there is no role attribute

        Returns:
            The explicit role (possibly empty), the implicit role, or None
        """
        if isinstance(element, Tag) and element.has_attr("role"):
            return attribute_value(element, "role")
        if implicit:
            return self.html_semantics.get_implicit_role(element)
        return None

    @staticmethod
    def is_abstract_role(role: Optional[str]) -> bool:
        return is_abstract_role(role)

    @staticmethod
    def split_aria_id_list(value: Optional[str]) -> List[str]:
        return split_aria_id_list(value)


def get_element_by_id(document: Tag, element_id: str) -> Optional[Tag]:
    """First element in document order with this id."""
    return document.find(attrs={"id": element_id})

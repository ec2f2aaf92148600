# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Implicit ARIA semantics of HTML elements.

The rules are loaded from the HTML semantics document (aria-html.xml). An
element is looked up by its tag name plus the values of the "modifying"
attributes the document declares (e.g. ``type``), read through an
AttributeReader so that browser normalization can be applied or not.
"""

import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from bs4 import Tag

from aria_validator.dom.properties import (
    AttributeReader,
    DomPropertyReader,
    is_element,
    make_test_instance,
)
from aria_validator.taxonomy.query import (
    DEFAULT_HTML_PATH,
    OntologyQuery,
    resolve_document,
    xpath_literal,
)
from aria_validator.utils.logging_helper import setup_logger, ConfigurationError

logger = setup_logger(__name__)


class Semantic(IntEnum):
    """Native semantic strength of an HTML element."""

    NONE = 0
    WEAK = 1
    STRONG = 2
    SACRED = 3


def css_string(value: str) -> str:
    """Quote a value for use inside a CSS attribute selector."""
    return "'" + str(value).replace("\\", "\\\\").replace("'", "\\'") + "'"


@dataclass(frozen=True)
class HtmlConceptRule:
    """One entry of the HTML semantics document."""

    name: str
    role: str = ""
    scope: str = ""
    strong: bool = False
    special: bool = False
    attributes: Tuple[Tuple[str, Optional[str]], ...] = ()

    @classmethod
    def from_node(cls, node) -> "HtmlConceptRule":
        role = node.find("role")
        scope = node.find("scope")
        return cls(
            name=node.get("name", "").lower(),
            role=role.get("name", "") if role is not None else "",
            scope=scope.get("name", "").lower() if scope is not None else "",
            strong=node.get("strong") == "true",
            special=node.get("special") == "true",
            attributes=tuple(
                (attr.get("name"), attr.get("value")) for attr in node.iter("attribute")
            ),
        )

    @property
    def strength(self) -> Semantic:
        if self.special:
            return Semantic.SACRED
        if self.strong:
            return Semantic.STRONG
        return Semantic.WEAK

    def to_selector(self) -> str:
        """CSS selector matching elements described by this rule."""
        result = f"{self.scope} {self.name}" if self.scope else self.name
        for name, value in self.attributes:
            if value is None:
                result += f"[{name}]"
            else:
                result += f"[{name}={css_string(value)}]"
        return result


class HtmlSemantics:
    """Resolves implicit roles, semantic strength and native ARIA equivalents."""

    def __init__(self, xml=None, reader: Optional[AttributeReader] = None):
        """
        Args:
            xml: Path to the HTML semantics document, a parsed lxml document,
                or None for the copy shipped with the package
            reader: How modifying attributes are read; DomPropertyReader
                (browser normalization) by default
        """
        self._source = xml
        self.reader = reader or DomPropertyReader()
        self._document = None
        self._query: Optional[OntologyQuery] = None
        self._modifying_attributes: Optional[Tuple[str, ...]] = None
        self._native_map: Dict[str, str] = {}
        self._rules_by_xpath: Dict[str, Tuple[HtmlConceptRule, ...]] = {}
        self._rules_by_role: Dict[str, Tuple[HtmlConceptRule, ...]] = {}
        self._selectors: Dict[str, str] = {}
        self._init_lock = threading.Lock()

    def set_xml(self, xml) -> None:
        """Provide the HTML semantics document before first use."""
        if self._modifying_attributes is not None:
            raise ConfigurationError("HTML semantics can not be replaced after initialisation")
        self._source = xml

    def get_xml(self):
        self._initialise()
        return self._document

    @property
    def modifying_attributes(self) -> Tuple[str, ...]:
        """Attributes that can change the implicit role of an element."""
        self._initialise()
        return self._modifying_attributes

    @property
    def native_attribute_map(self) -> Dict[str, str]:
        """Native property name to ARIA attribute name."""
        self._initialise()
        return dict(self._native_map)

    def get_implicit_role(self, element: Tag) -> Optional[str]:
        """
        Determine the implicit role of an element.

        Returns:
            The role name, or None if it can not be determined
        """
        info = self._get_info_for(element)
        if info is not None and info.role:
            return info.role
        return None

    def get_semantic_strength(self, element: Tag) -> Semantic:
        info = self._get_info_for(element)
        if info is None:
            return Semantic.NONE
        return info.strength

    def get_natively_supported(self, element: Tag) -> Dict[str, str]:
        """
        List the ARIA attributes provided natively by this kind of element.

        The test runs on an attribute-less instance of the same tag, not on the
        element itself.

        Returns:
            An ordered mapping of ARIA attribute name to native property name,
            e.g. ``{"aria-checked": "checked", ...}`` for an input
        """
        self._initialise()
        result: Dict[str, str] = {}
        if not is_element(element):
            return result
        test_element = make_test_instance(element)
        for hname, aname in self._native_map.items():
            if self.reader.has_property(test_element, hname):
                result[aname] = hname
        return result

    def find_descendants(self, element: Tag, role: str) -> List[Tag]:
        """
        Find descendants implementing ``role`` implicitly or explicitly.

        Returns:
            Matching elements in document order
        """
        if element is None or not role:
            return []
        selector = self._selectors.get(role)
        if selector is None:
            selectors = [rule.to_selector() for rule in self._rules_for_role(role)]
            # explicit role as well as implicit
            selectors.append(f"[role={css_string(role)}]")
            selector = ", ".join(selectors)
            self._selectors[role] = selector
        return list(element.select(selector))

    def _rules_for_role(self, role: str) -> Tuple[HtmlConceptRule, ...]:
        rules = self._rules_by_role.get(role)
        if rules is None:
            self._initialise()
            nodes = self._query.query(
                f"/htmlconcepts/elements/element[role[@name={xpath_literal(role)}]]"
            )
            rules = tuple(HtmlConceptRule.from_node(node) for node in nodes)
            self._rules_by_role[role] = rules
        return rules

    def _element_to_xpath(self, element: Tag) -> Optional[str]:
        """Build the query that finds the rules for this element."""
        self._initialise()
        if not is_element(element):
            return None
        result = f"/htmlconcepts/elements/element[@name={xpath_literal(element.name.lower())}]"
        for name in self._modifying_attributes:
            attr = xpath_literal(name)
            if element.has_attr(name):
                value = self.reader.read(element, name)
                value = xpath_literal("" if value is None else value)
                result += f"[attributes/attribute[@name={attr}][not(@value) or @value={value}]]"
            else:
                result += f"[not(attributes/attribute[@name={attr}])]"
        return result

    def _get_info_for(self, element: Tag) -> Optional[HtmlConceptRule]:
        xpath = self._element_to_xpath(element)
        if xpath is None:
            return None
        rules = self._rules_by_xpath.get(xpath)
        if rules is None:
            rules = tuple(HtmlConceptRule.from_node(node) for node in self._query.query(xpath))
            self._rules_by_xpath[xpath] = rules
        if not rules:
            return None
        if len(rules) == 1:
            return rules[0]
        return _get_best_match(element, rules)

    def _initialise(self) -> None:
        if self._modifying_attributes is not None:
            return
        with self._init_lock:
            if self._modifying_attributes is not None:
                return
            self._document = resolve_document(self._source, DEFAULT_HTML_PATH)
            self._query = OntologyQuery(self._document)
            for attr in self._query.query("//attr"):
                hname, aname = attr.get("hname"), attr.get("aname")
                if hname and aname:
                    self._native_map[hname] = aname
            # dict keeps first-seen order while removing duplicates
            modifiers = dict.fromkeys(self._query.query("//attribute/@name"))
            logger.debug("HTML semantics modifying attributes: %s", list(modifiers))
            self._modifying_attributes = tuple(modifiers)


def get_ancestor_list(element: Tag) -> List[str]:
    """Tag names of the element's ancestors, nearest first."""
    return [parent.name.lower() for parent in element.parents if is_element(parent)]


def _get_best_match(element: Tag, rules: Tuple[HtmlConceptRule, ...]) -> Optional[HtmlConceptRule]:
    """Pick the rule whose scope tag is the nearest ancestor; unscoped rules never win."""
    tree = get_ancestor_list(element)
    result = None
    nearest = 0
    for rule in rules:
        if not rule.scope or rule.scope not in tree:
            continue
        distance = tree.index(rule.scope) + 1
        if not nearest or distance < nearest:
            nearest = distance
            result = rule
    return result

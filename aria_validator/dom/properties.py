# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Attribute and property access for BeautifulSoup elements.

A browser does not expose attributes verbatim: ``<input type="foo">`` has a
``type`` property of ``"text"``. Rules keyed on what the browser (and hence
assistive technology) understands need that normalization, while a static
check of the authored markup needs the raw attribute. Both readers are provided
here behind one interface.
"""

from typing import Dict, FrozenSet, Optional

from bs4 import BeautifulSoup, Tag

from aria_validator.utils.logging_helper import setup_logger

logger = setup_logger(__name__)

# Properties every HTMLElement exposes
GLOBAL_PROPERTIES = frozenset(
    {"accessKey", "className", "dir", "hidden", "id", "lang", "tabIndex", "title"}
)

# Emulated IDL interfaces for the elements the HTML semantics rules reference
ELEMENT_PROPERTIES: Dict[str, FrozenSet[str]] = {
    "a": frozenset({"download", "href", "hreflang", "rel", "target", "type"}),
    "area": frozenset({"alt", "coords", "download", "href", "rel", "shape", "target"}),
    "button": frozenset({"disabled", "form", "name", "type", "value"}),
    "details": frozenset({"open"}),
    "dialog": frozenset({"open", "returnValue"}),
    "fieldset": frozenset({"disabled", "form", "name", "type"}),
    "img": frozenset({"alt", "height", "src", "width"}),
    "input": frozenset(
        {
            "accept", "alt", "autocomplete", "checked", "defaultChecked", "disabled",
            "form", "height", "indeterminate", "list", "max", "maxLength", "min",
            "multiple", "name", "pattern", "placeholder", "readOnly", "required",
            "size", "src", "step", "type", "value", "width",
        }
    ),
    "li": frozenset({"value"}),
    "meter": frozenset({"high", "low", "max", "min", "optimum", "value"}),
    "ol": frozenset({"reversed", "start", "type"}),
    "optgroup": frozenset({"disabled", "label"}),
    "option": frozenset({"defaultSelected", "disabled", "form", "index", "label", "selected", "text", "value"}),
    "output": frozenset({"defaultValue", "form", "name", "type", "value"}),
    "progress": frozenset({"max", "position", "value"}),
    "select": frozenset({"disabled", "form", "length", "multiple", "name", "required", "selectedIndex", "size", "type", "value"}),
    "textarea": frozenset({"cols", "disabled", "form", "maxLength", "name", "placeholder", "readOnly", "required", "rows", "value", "wrap"}),
}

INPUT_TYPES = frozenset(
    {
        "button", "checkbox", "color", "date", "datetime-local", "email", "file",
        "hidden", "image", "month", "number", "password", "radio", "range",
        "reset", "search", "submit", "tel", "text", "time", "url", "week",
    }
)
BUTTON_TYPES = frozenset({"button", "reset", "submit"})

BOOLEAN_PROPERTIES = frozenset(
    {"checked", "disabled", "hidden", "multiple", "open", "readOnly", "required", "reversed", "selected"}
)

# Reflected integer properties and the value used when the attribute is invalid
INTEGER_PROPERTIES = {"cols": 20, "maxLength": -1, "rows": 2, "size": 20, "start": 1, "tabIndex": -1}

# Content attribute names whose property name differs
ATTRIBUTE_TO_PROPERTY = {
    "accesskey": "accessKey",
    "class": "className",
    "maxlength": "maxLength",
    "readonly": "readOnly",
    "tabindex": "tabIndex",
}
PROPERTY_TO_ATTRIBUTE = {prop: attr for attr, prop in ATTRIBUTE_TO_PROPERTY.items()}

_test_document = BeautifulSoup("", "html.parser")


def attribute_value(element: Tag, name: str) -> Optional[str]:
    """Raw attribute value as a string (multi-valued attributes are re-joined)."""
    value = element.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value


def is_element(node) -> bool:
    """True for element nodes; the BeautifulSoup object itself is named "[document]"."""
    return isinstance(node, Tag) and bool(node.name) and not node.name.startswith("[")


def make_test_instance(element: Tag) -> Tag:
    """
    Build an attribute-less element of the same tag.

    Property tests run against this instance rather than the live element so
    that attributes the author set cannot masquerade as native properties.
    """
    return _test_document.new_tag(element.name)


class AttributeReader:
    """Reads element values; subclasses decide between raw and normalized values."""

    dynamic = False

    def read(self, element: Tag, name: str) -> Optional[str]:
        raise NotImplementedError("Subclasses must implement read()")

    def has_property(self, element: Tag, name: str) -> bool:
        """
        Check if the element's interface exposes a native property.

        Args:
            element: Element to test, normally from make_test_instance
            name: IDL property name (e.g. "checked", "readOnly")
        """
        if not isinstance(element, Tag) or not element.name:
            return False
        if name in GLOBAL_PROPERTIES:
            return True
        return name in ELEMENT_PROPERTIES.get(element.name.lower(), frozenset())


class RawAttributeReader(AttributeReader):
    """Static analysis: validates exactly what the author wrote."""

    def read(self, element: Tag, name: str) -> Optional[str]:
        return attribute_value(element, name)


class DomPropertyReader(AttributeReader):
    """Dynamic analysis: validates what a browser would expose to assistive technology."""

    dynamic = True

    def read(self, element: Tag, name: str) -> Optional[str]:
        tag_name = (element.name or "").lower()
        prop = ATTRIBUTE_TO_PROPERTY.get(name, name)
        attr = PROPERTY_TO_ATTRIBUTE.get(prop, name)
        raw = attribute_value(element, attr)

        if not self.has_property(element, prop):
            return raw

        if prop == "type" and tag_name == "input":
            value = (raw or "").strip().lower()
            return value if value in INPUT_TYPES else "text"
        if prop == "type" and tag_name == "button":
            value = (raw or "").strip().lower()
            return value if value in BUTTON_TYPES else "submit"
        if prop in BOOLEAN_PROPERTIES:
            return "true" if element.has_attr(attr) else "false"
        if prop in INTEGER_PROPERTIES:
            return str(_parse_integer(raw, INTEGER_PROPERTIES[prop]))
        return raw


def _parse_integer(value: Optional[str], default: int) -> int:
    """Parse a reflected integer the lenient way HTML does (leading digits only)."""
    if value is None:
        return default
    value = value.strip()
    sign = 1
    if value[:1] in ("-", "+"):
        sign = -1 if value[0] == "-" else 1
        value = value[1:]
    digits = ""
    for char in value:
        if not char.isdigit():
            break
        digits += char
    if not digits:
        return default
    return sign * int(digits)


def get_reader(use_dom_properties: bool = True) -> AttributeReader:
    return DomPropertyReader() if use_dom_properties else RawAttributeReader()

# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Conformance findings and the table of messages they are created from.
"""

import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from bs4 import Tag
from pydantic import BaseModel, ConfigDict, Field

from aria_validator.utils.logging_helper import ConfigurationError
from aria_validator.utils.report_models import FindingReport, Level

ROLE_SPEC_URL = "http://www.w3.org/TR/wai-aria/roles#{name}"
STATE_SPEC_URL = "http://www.w3.org/TR/wai-aria/states_and_properties#{name}"
ROLE_NAME_RE = re.compile(r"^[a-z]+$")
TOKEN_RE = re.compile(r"\{(\w+)\}")

# A finding can only be created with a key from this table
MESSAGES: Dict[str, Dict[str, Any]] = {
    "ABSTRACT_ROLE_USED": {
        "template": "{role} found - authors MUST NOT use abstract roles in content.",
        "level": Level.ERROR,
    },
    "ARIA_OWNS_ALREADY_OWNED": {
        "template": "{attr} IDREF {id} must not be 'aria-owned' by more than one element",
        "level": Level.ERROR,
    },
    "ARIA_OWNS_DESCENDANT": {
        "template": "{attr} should not be used if the relationship is represented in the DOM hierarchy",
        "level": Level.WARN,
    },
    "ARIA_OWNS_NONEXISTENT_ELEMENT": {
        "template": "{attr} references element '{id}' that is not present in the DOM",
        "level": Level.WARN,
    },
    "ARIA_REQUIRED_ON_FORM_ELEMENT": {
        "template": "{attr} is not allowed when 'an exactly equivalent native attribute is available'.",
        "level": Level.ERROR,
    },
    "DUPLICATE_ID": {
        "template": "Found duplicate id '{id}'",
        "level": Level.ERROR,
    },
    "INVALID_ID": {
        "template": "Found id '{id}' but IDs are not allowed to have space characters",
        "level": Level.ERROR,
    },
    "MISSING_REQUIRED_ROLES": {
        "template": "{role} does not contain required roles {roles}.",
        "level": Level.ERROR,
    },
    "MISSING_REQUIRED_ROLES_BUSY": {
        "template": "{role} does not contain required roles {roles} (but it is busy, maybe you need to wait longer?).",
        "level": Level.ERROR,
    },
    "NOT_IN_REQUIRED_SCOPE": {
        "template": "{role} not in required scope {roles}.",
        "level": Level.ERROR,
    },
    "REDUNDANT_ATTR": {
        "template": "{attr} is unnecessary as an equivalent native attribute is available.",
        "level": Level.WARN,
    },
    "REDUNDANT_ROLE": {
        "template": "{role} on element: '{tag}' may be redundant because it implicitly has this role",
        "level": Level.WARN,
    },
    "REQUIRED_ATTR_MISSING": {
        "template": "{role} missing required attribute {attr}.",
        "level": Level.ERROR,
    },
    "SPECIAL_ELEMENT_WITH_ROLE": {
        "template": "{role} on 'special' element '{tag}'",
        "level": Level.WARN,
    },
    "STRONG_ELEMENT_DIFFERENT_ROLE": {
        "template": "{role} on element: '{tag}' is attempting to change strong native semantics (see the second rule of using ARIA in HTML)",
        "level": Level.WARN,
    },
    "UNKNOWN_ROLE": {
        "template": "{role} role does not exist in ARIA.",
        "level": Level.ERROR,
    },
    "UNSUPPORTED_ATTR_FOR_ELEMENT": {
        "template": "{attr} is not supported on this element.",
        "level": Level.ERROR,
    },
    "UNSUPPORTED_ATTR_FOR_ROLE": {
        "template": "{role} unsupported attribute {attr}.",
        "level": Level.ERROR,
    },
}


def replace(template: str, values: Dict[str, Any]) -> str:
    """Substitute ``{name}`` tokens; tokens without a value are left as they are."""

    def substitute(match):
        name = match.group(1)
        if name in values:
            return str(values[name])
        return match.group(0)

    return TOKEN_RE.sub(substitute, template)


def element_source(element) -> str:
    """HTML source of an element, or of each element in a list."""
    if isinstance(element, Tag):
        return str(element)
    if isinstance(element, (list, tuple)):
        return "".join(element_source(item) for item in element)
    return "" if element is None else str(element)


def build_spec_link(name: str) -> str:
    """Link to the WAI-ARIA definition of a role or of a state/property."""
    name = name.strip()
    template = ROLE_SPEC_URL if ROLE_NAME_RE.match(name) else STATE_SPEC_URL
    return template.format(name=name)


class Finding(BaseModel):
    """
    One conformance observation.

    Findings are immutable. The severity comes from the message table, so an
    unknown key is a configuration error rather than a finding.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: str
    level: Level
    role: Optional[str] = None
    roles: Tuple[str, ...] = ()
    attr: Optional[str] = None
    id: Optional[str] = None
    tag: Optional[str] = None
    element: Any = Field(default=None, exclude=True)

    def __init__(self, **data):
        key = data.get("key")
        if not key or key not in MESSAGES:
            raise ConfigurationError(f"Could not find validation message {key}")
        data["level"] = MESSAGES[key]["level"]
        if data.get("roles") is not None:
            data["roles"] = tuple(data["roles"])
        super().__init__(**data)

    @property
    def template(self) -> str:
        return MESSAGES[self.key]["template"]

    @property
    def elements(self) -> List[Tag]:
        """The offending element(s) as a list."""
        if self.element is None:
            return []
        if isinstance(self.element, (list, tuple)):
            return list(self.element)
        return [self.element]

    @property
    def spec_links(self) -> List[str]:
        names = []
        if self.role:
            names.append(self.role)
        names.extend(self.roles)
        if self.attr:
            names.append(self.attr)
        return [build_spec_link(name) for name in names if name and name.strip()]

    def context(self) -> Dict[str, Any]:
        """The values available to the message template (empty values omitted)."""
        values = {
            "role": self.role,
            "roles": ",".join(self.roles),
            "attr": self.attr,
            "id": self.id,
            "tag": self.tag,
            "element": self.element,
        }
        return {name: value for name, value in values.items() if value}

    def format(self, formatters: Optional[Dict[str, Callable[[Any], str]]] = None) -> str:
        """
        Render the message.

        Args:
            formatters: Optional callables keyed by context name (e.g. "role")
                used to format that value instead of str()

        Returns:
            The message with every known token replaced
        """
        values = self.context()
        if formatters:
            for name, formatter in formatters.items():
                if name in values:
                    values[name] = formatter(values[name])
        return replace(self.template, values)

    @property
    def message(self) -> str:
        return self.format()

    def to_report(self) -> FindingReport:
        return FindingReport(
            key=self.key,
            level=self.level,
            message=self.message,
            role=self.role,
            roles=list(self.roles),
            attr=self.attr,
            id=self.id,
            tag=self.tag,
            elements=[element_source(element) for element in self.elements],
            spec_links=self.spec_links,
        )

    def __str__(self) -> str:
        return self.message

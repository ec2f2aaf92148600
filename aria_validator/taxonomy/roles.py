# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
ARIA role model built from the role taxonomy (RDF).

Each role is resolved once into an immutable RoleDescriptor holding the closure
of the states it requires or supports, inherited through its superclasses.
"""

import threading
from collections import ChainMap
from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Set, Tuple, Union

from bs4 import Tag

from aria_validator.taxonomy.query import (
    DEFAULT_RDF_PATH,
    HTML_CONCEPT_RE,
    OntologyQuery,
    clean_resources,
    resolve_document,
    xpath_literal,
)
from aria_validator.utils.logging_helper import setup_logger, ConfigurationError

logger = setup_logger(__name__)

SCOPE = "role:scope"
MUST_CONTAIN = "role:mustContain"

# Listing form of get_scope / get_must_contain. A plain object so that no
# role name (not even "*") can collide with it in the caches.
ALL_ROLES = object()


class SupportLevel(IntEnum):
    """How a role relates to an ARIA state or property."""

    SUPPORTED = 1
    REQUIRED = 2


SUPPORTED = SupportLevel.SUPPORTED
REQUIRED = SupportLevel.REQUIRED


@dataclass(frozen=True, eq=False)
class RoleDescriptor:
    """One ARIA role with its inherited state support."""

    name: str
    support_state: Mapping[str, SupportLevel]
    super_roles: Tuple["RoleDescriptor", ...] = ()

    def is_a(self, role: str) -> bool:
        """True if this role is ``role`` or inherits from it."""
        if self.name == role:
            return True
        return any(parent.is_a(role) for parent in self.super_roles)


class RoleModel:
    """
    Answers questions about ARIA roles using the role taxonomy.

    The taxonomy is loaded and the descriptors are built on first use. The
    taxonomy is treated as immutable for the lifetime of the instance, so every
    memo table is write-once per key.
    """

    def __init__(self, rdf=None):
        """
        Args:
            rdf: Path to the role taxonomy, an already parsed lxml document, or
                None to use the taxonomy shipped with the package
        """
        self._source = rdf
        self._document = None
        self._query: Optional[OntologyQuery] = None
        self._descriptors: Dict[str, RoleDescriptor] = {}
        self._base_role: Optional[str] = None
        self._all_states: Optional[Dict[str, SupportLevel]] = None
        self._scope_cache: Dict[str, Dict[object, List[str]]] = {
            SCOPE: {},
            MUST_CONTAIN: {},
        }
        self._scoped_cache: Dict[str, Dict[str, List[str]]] = {
            SCOPE: {},
            MUST_CONTAIN: {},
        }
        self._concept_cache: Tuple[Dict[str, List[str]], Dict[str, List[str]]] = ({}, {})
        self._init_lock = threading.Lock()

    def set_rdf(self, rdf) -> None:
        """
        Provide the role taxonomy (path or parsed document) before first use.

        Raises:
            ConfigurationError: If the model has already been initialised
        """
        if self._base_role is not None:
            raise ConfigurationError("Role taxonomy can not be replaced after initialisation")
        self._source = rdf

    def get_rdf(self):
        """The parsed role taxonomy document (loads it if necessary)."""
        self._initialise()
        return self._document

    @property
    def base_role(self) -> str:
        """The implicit root role, used for unknown or absent roles."""
        self._initialise()
        return self._base_role

    def roles(self) -> List[str]:
        """Names of every role declared in the taxonomy."""
        self._initialise()
        return list(self._descriptors)

    def descriptor(self, role: str) -> Optional[RoleDescriptor]:
        self._initialise()
        return self._descriptors.get(role) if isinstance(role, str) else None

    def has_role(self, role) -> bool:
        """Determine if ``role`` is declared in the taxonomy."""
        if not role or not isinstance(role, str):
            return False
        self._initialise()
        return role in self._descriptors

    def get_supported(self, role: Union[str, Tag, None] = None) -> Mapping[str, SupportLevel]:
        """
        Find the ARIA states and properties a role supports or requires.

        Args:
            role: A role name, an element (its ``role`` attribute is used) or
                ``"*"`` for every state declared anywhere in the taxonomy.
                Unknown or absent roles resolve to the base role, i.e. the
                global states.

        Returns:
            A mapping of attribute name to SupportLevel. The mapping is backed
            by the role descriptor; writes land in a private front layer.
        """
        self._initialise()
        if isinstance(role, str) and role == "*":
            return dict(self._get_all_states())
        if isinstance(role, Tag):
            role = role.get("role")
        if not self.has_role(role):
            role = self._base_role
        return ChainMap({}, self._descriptors[role].support_state)

    def get_scope(self, role=ALL_ROLES) -> List[str]:
        """
        Find the required context roles of ``role``.

        Without an argument, lists every role that declares a required context.
        """
        return self._scope_lookup(SCOPE, role)

    def get_must_contain(self, role=ALL_ROLES) -> List[str]:
        """
        Find the required owned elements of ``role``.

        Without an argument, lists every role that declares required owned elements.
        """
        return self._scope_lookup(MUST_CONTAIN, role)

    def get_scoped_to(self, role: str) -> List[str]:
        """
        Find the roles whose required context includes ``role``.

        Scoping in ARIA is asymmetrical: "menubar" must not contain anything,
        yet "menuitem" is scoped to it.
        """
        return self._scoped_lookup(SCOPE, role)

    def get_scoped_by(self, role: str) -> List[str]:
        """Find the roles that must contain ``role``."""
        return self._scoped_lookup(MUST_CONTAIN, role)

    def get_concept(self, role: str, concept_only: bool = False) -> List[str]:
        """
        Get the HTML concepts related to a role.

        Args:
            role: An ARIA role
            concept_only: Ignore ``rdfs:seeAlso`` and use ``role:baseConcept`` only

        Returns:
            Element names such as "BUTTON"

        Raises:
            TypeError: If role is empty
        """
        if not role:
            raise TypeError("role can not be null")
        cache = self._concept_cache[1 if concept_only else 0]
        result = cache.get(role)
        if result is None:
            self._initialise()
            node = f"//owl:Class[@rdf:ID={xpath_literal(role)}]"
            expression = f"({node}/role:baseConcept"
            if not concept_only:
                expression += f"|{node}/rdfs:seeAlso"
            expression += ")/@rdf:resource[contains(., 'html')]"
            result = clean_resources(self._query.query(expression), HTML_CONCEPT_RE)
            cache[role] = result
        return list(result)

    def _scope_lookup(self, relation: str, role) -> List[str]:
        self._initialise()
        if role is ALL_ROLES:
            expression = f"//owl:Class[count({relation})>0]/@rdf:ID"
        elif not role:
            raise TypeError("role can not be null")
        else:
            expression = f"//owl:Class[@rdf:ID={xpath_literal(role)}]/{relation}/@rdf:resource"

        cache = self._scope_cache[relation]
        result = cache.get(role)
        if result is None:
            result = clean_resources(self._query.query(expression))
            cache[role] = result
        return list(result)

    def _scoped_lookup(self, relation: str, role: str) -> List[str]:
        if not role:
            raise TypeError("role can not be null")
        cache = self._scoped_cache[relation]
        result = cache.get(role)
        if result is None:
            self._initialise()
            target = xpath_literal("#" + role)
            expression = f"//owl:Class[child::{relation}[@rdf:resource={target}]]/@rdf:ID"
            result = clean_resources(self._query.query(expression))
            cache[role] = result
        return list(result)

    def _get_all_states(self) -> Dict[str, SupportLevel]:
        if self._all_states is None:
            states = clean_resources(
                self._query.query(
                    "//role:requiredState/@rdf:resource|//role:supportedState/@rdf:resource"
                )
            )
            # support level is meaningless without a role context
            self._all_states = {state: SUPPORTED for state in states}
        return self._all_states

    def _initialise(self) -> None:
        if self._base_role is not None:
            return
        with self._init_lock:
            if self._base_role is not None:
                return
            self._document = resolve_document(self._source, DEFAULT_RDF_PATH)
            self._query = OntologyQuery(self._document)
            completed = self._build_descriptors()
            if not completed:
                raise ConfigurationError("Role taxonomy does not declare any roles")
            # the first role completed is the root of the hierarchy (roletype)
            logger.debug("Setting base role to: %s", completed[0])
            self._base_role = completed[0]

    def _role_resources(self, role: str, child: str) -> List[str]:
        expression = f"//owl:Class[@rdf:ID={xpath_literal(role)}]/{child}/@rdf:resource"
        return clean_resources(self._query.query(expression))

    def _build_descriptors(self) -> List[str]:
        visiting: Set[str] = set()
        completed: List[str] = []
        for name in self._query.query("//owl:Class/@rdf:ID"):
            self._build_descriptor(name, visiting, completed)
        logger.debug("Built %d role descriptors", len(self._descriptors))
        return completed

    def _build_descriptor(
        self, name: str, visiting: Set[str], completed: List[str]
    ) -> Optional[RoleDescriptor]:
        descriptor = self._descriptors.get(name)
        if descriptor is not None:
            return descriptor
        if name in visiting:
            logger.warning("Cyclic superclass reference to role %s ignored", name)
            return None
        if self._query.query(f"//owl:Class[@rdf:ID={xpath_literal(name)}]", first_match=True) is None:
            logger.warning("Superclass %s is not declared in the role taxonomy", name)
            return None

        visiting.add(name)
        superclasses = self._role_resources(name, "rdfs:subClassOf")
        built = {}
        for superclass in reversed(superclasses):
            built[superclass] = self._build_descriptor(superclass, visiting, completed)
        visiting.discard(name)
        super_roles = tuple(built[s] for s in superclasses if built[s] is not None)

        support_state: Dict[str, SupportLevel] = {}
        for state in self._role_resources(name, "role:supportedState"):
            support_state[state] = SUPPORTED
        for state in self._role_resources(name, "role:requiredState"):
            support_state[state] = REQUIRED
        for parent in super_roles:
            for state, level in parent.support_state.items():
                support_state.setdefault(state, level)

        descriptor = RoleDescriptor(name, MappingProxyType(support_state), super_roles)
        self._descriptors[name] = descriptor
        completed.append(name)
        return descriptor

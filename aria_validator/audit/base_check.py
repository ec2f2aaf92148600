# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Base classes for ARIA validation rules.

A rule inspects one element (and optionally a role already resolved for it)
and returns a Summary holding zero or more findings. Conformance problems are
data, never exceptions.
"""

import functools
from dataclasses import dataclass, field
from typing import Optional

from bs4 import Tag

from aria_validator.audit.finding import Finding
from aria_validator.audit.summary import Summary
from aria_validator.dom.locator import ElementLocator
from aria_validator.taxonomy.html_semantics import HtmlSemantics
from aria_validator.taxonomy.roles import RoleModel
from aria_validator.utils.diagnostics import DiagnosticsChannel, diagnostics
from aria_validator.utils.logging_helper import (
    AriaValidatorError,
    log_exception,
    setup_logger,
)

logger = setup_logger(__name__)

# Marks a role argument that was not passed at all (None is a valid role value)
UNSET = object()


def safe_check(check_func):
    """
    Decorator for safely running validation rules.

    Unexpected exceptions are logged and the rule yields an empty Summary so one
    bad element does not stop the whole run. Errors of the package's own
    hierarchy (configuration errors, strict-mode invariant violations) propagate.
    """

    @functools.wraps(check_func)
    def wrapper(*args, **kwargs):
        try:
            return check_func(*args, **kwargs)
        except AriaValidatorError:
            raise
        except Exception as e:
            log_exception(logger, e, f"Error in {check_func.__qualname__}")
            return Summary()

    return wrapper


@dataclass
class RuleContext:
    """The collaborators every rule works with."""

    role_model: RoleModel
    html_semantics: HtmlSemantics
    locator: ElementLocator
    diagnostics: DiagnosticsChannel = field(default=diagnostics)


class ValidationRule:
    """
    Base class for all validation rules.

    Subclasses implement ``check(element, role=UNSET)``.
    """

    name = "rule"

    def __init__(self, context: RuleContext):
        """
        Initialize the rule.

        Args:
            context: Role model, HTML semantics, locator and diagnostics to use
        """
        self.context = context
        self.role_model = context.role_model
        self.html_semantics = context.html_semantics
        self.locator = context.locator

    @safe_check
    def check(self, element: Tag, role=UNSET) -> Summary:
        """
        Perform the rule on one element.

        This method must be implemented by all subclasses.
        """
        raise NotImplementedError("Subclasses must implement check()")

    def __call__(self, element: Tag, role=UNSET) -> Summary:
        return self.check(element, role)

    def resolve_role(self, element: Tag, role=UNSET, implicit: bool = False) -> Optional[str]:
        """The role to validate against: the one passed in, else the element's own."""
        if role is UNSET:
            return self.locator.get_role(element, implicit)
        return role

    @staticmethod
    def finding(key: str, element, **context) -> Finding:
        return Finding(key=key, element=element, **context)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

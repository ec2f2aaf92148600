# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
ARIA validator for HTML documents.

This module runs the validation rules over a document and, recursively, over
every frame of its window.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Type

from bs4 import Tag

from aria_validator.audit.base_check import UNSET, RuleContext, ValidationRule
from aria_validator.audit.checks import (
    AbstractRoleCheck,
    AriaOwnsCheck,
    ContainsRequiredElementsCheck,
    IdsCheck,
    InRequiredScopeCheck,
    KnownRoleCheck,
    RequiredAttributesCheck,
    SecondRuleCheck,
    SupportsAllAttributesCheck,
)
from aria_validator.audit.summary import Summary
from aria_validator.dom.locator import ElementLocator, QueryEngine
from aria_validator.dom.window import Window
from aria_validator.taxonomy.html_semantics import HtmlSemantics
from aria_validator.taxonomy.roles import RoleModel
from aria_validator.utils.config import ValidatorOptions
from aria_validator.utils.diagnostics import DiagnosticsChannel, diagnostics
from aria_validator.utils.logging_helper import FrameAccessError, log_exception, setup_logger

logger = setup_logger(__name__)


class AriaValidator:
    """
    Main class for validating ARIA usage in a document.

    The rules run against elements with an explicit role are listed in
    ROLE_CHECKS (plus ROLE_EXPERIMENTS when experimental checks are enabled);
    elements with ARIA attributes but no role get ATTRIBUTE_CHECKS.
    """

    ROLE_CHECKS: List[Type[ValidationRule]] = [
        InRequiredScopeCheck,
        ContainsRequiredElementsCheck,
        RequiredAttributesCheck,
        SupportsAllAttributesCheck,
        AriaOwnsCheck,
        AbstractRoleCheck,
        KnownRoleCheck,
    ]
    ROLE_EXPERIMENTS: List[Type[ValidationRule]] = [SecondRuleCheck]
    ATTRIBUTE_CHECKS: List[Type[ValidationRule]] = [
        SupportsAllAttributesCheck,
        RequiredAttributesCheck,
        AriaOwnsCheck,
    ]

    def __init__(
        self,
        role_model: Optional[RoleModel] = None,
        html_semantics: Optional[HtmlSemantics] = None,
        options: Any = None,
        engine: Optional[QueryEngine] = None,
        diagnostics_channel: Optional[DiagnosticsChannel] = None,
    ):
        """
        Initialize the validator.

        Args:
            role_model: The ARIA role taxonomy; the packaged one when not given
            html_semantics: Implicit HTML semantics; the packaged rules when not given
            options: ValidatorOptions, a mapping of options, or None for configured defaults
            engine: Query engine used to locate elements
            diagnostics_channel: Where invariant violations are reported

        Raises:
            ConfigurationError: If the options are invalid
        """
        self.options = ValidatorOptions.from_any(options)
        self.role_model = role_model or RoleModel()
        self.html_semantics = html_semantics or HtmlSemantics()
        self.locator = ElementLocator(self.role_model, self.html_semantics, engine)
        self.context = RuleContext(
            self.role_model,
            self.html_semantics,
            self.locator,
            diagnostics_channel or diagnostics,
        )
        self._rules: Dict[str, ValidationRule] = {}
        for rule_class in [*self.ROLE_CHECKS, *self.ROLE_EXPERIMENTS, *self.ATTRIBUTE_CHECKS, IdsCheck]:
            if rule_class.name not in self._rules:
                self._rules[rule_class.name] = rule_class(self.context)

    def rule(self, name: str) -> ValidationRule:
        return self._rules[name]

    def check(self, window: Window) -> Summary:
        """
        Check a window and, recursively, every frame it contains.

        Args:
            window: The window to check

        Returns:
            A Summary of the window's document with the findings of every
            checked frame merged in; per-frame summaries are kept in ``frames``
        """
        url = window.location.href
        document = window.document
        if document is None:
            logger.debug("No document to check for %s", url)
            return Summary(url)
        body = document.find("body") or document
        logger.info("Checking %s", url or "document")

        summary = self.check_by_role(body)
        summary.url = url
        summary.frames_total = len(window.frames)
        if self.options.ids:
            summary.add(self.check_ids(document))
        if self.options.attributes:
            summary.add(self.check_by_attribute(body))

        for frame in window.frames:
            try:
                frame_summary = self.check(frame)
            except FrameAccessError as e:
                log_exception(
                    logger,
                    e,
                    "Could not check frame",
                    level=logging.WARNING,
                    include_traceback=False,
                )
                continue
            summary.frames.append(frame_summary)
            summary.merge(frame_summary)
            summary.frames_checked += 1

        logger.debug(
            "Checked %s: %d error(s), %d warning(s), %d/%d frame(s)",
            url,
            len(summary.errors),
            len(summary.warnings),
            summary.frames_checked,
            summary.frames_total,
        )
        return summary

    def check_by_role(self, element: Tag) -> Summary:
        """Run the role checks on every descendant with an explicit role."""
        checks = list(self.ROLE_CHECKS)
        if self.options.experimental:
            checks.extend(self.ROLE_EXPERIMENTS)
        return self.run_checks(self.locator.get_elements_with_role(element), checks, uses_role=True)

    def check_by_attribute(self, element: Tag) -> Summary:
        """Run the attribute checks on elements with ARIA attributes but no role."""
        return self.run_checks(
            self.locator.get_elements_with_aria_attr(element), self.ATTRIBUTE_CHECKS, uses_role=False
        )

    def run_checks(
        self, elements: Iterable[Tag], checks: Iterable[Type[ValidationRule]], uses_role: bool
    ) -> Summary:
        """
        Run a set of rules on each element.

        Args:
            elements: The elements to check
            checks: Rule classes, run in order
            uses_role: Only check elements with a non-empty explicit role (and
                record it); otherwise check every element against its implicit role

        Returns:
            The findings of every rule on every element
        """
        summary = Summary()
        checks = [self._rules[check.name] for check in checks]
        for element in elements:
            if uses_role:
                role = self.locator.get_role(element)
                if not role:
                    continue
                summary.add_roles(role)
            else:
                role = self.html_semantics.get_implicit_role(element)
            for rule in checks:
                summary.add(rule(element, role))
        return summary

    def check_known_role(self, element: Tag, role=UNSET) -> Summary:
        return self._rules[KnownRoleCheck.name](element, role)

    def check_abstract_role(self, element: Tag, role=UNSET) -> Summary:
        return self._rules[AbstractRoleCheck.name](element, role)

    def check_required_attributes(self, element: Tag, role=UNSET) -> Summary:
        return self._rules[RequiredAttributesCheck.name](element, role)

    def check_supports_all_attributes(self, element: Tag, role=UNSET) -> Summary:
        return self._rules[SupportsAllAttributesCheck.name](element, role)

    def check_in_required_scope(self, element: Tag, role=UNSET) -> Summary:
        return self._rules[InRequiredScopeCheck.name](element, role)

    def check_contains_required_elements(self, element: Tag, role=UNSET) -> Summary:
        return self._rules[ContainsRequiredElementsCheck.name](element, role)

    def check_aria_owns(self, element: Tag, role=UNSET) -> Summary:
        return self._rules[AriaOwnsCheck.name](element, role)

    def check_second_rule(self, element: Tag, role=UNSET) -> Summary:
        return self._rules[SecondRuleCheck.name](element, role)

    def check_ids(self, element: Tag) -> Summary:
        """Check for duplicate ids and ids containing whitespace under ``element``."""
        return self._rules[IdsCheck.name](element)

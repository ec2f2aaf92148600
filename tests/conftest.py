# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Shared fixtures for the aria_validator tests.
"""

import pytest
from bs4 import BeautifulSoup

from aria_validator.audit.validator import AriaValidator
from aria_validator.dom.locator import ElementLocator
from aria_validator.taxonomy.html_semantics import HtmlSemantics
from aria_validator.taxonomy.roles import RoleModel
from aria_validator.utils.config import config_manager
from aria_validator.utils.diagnostics import DiagnosticsChannel

ALL_OPTIONS = {"attributes": True, "experimental": True, "ids": True}


@pytest.fixture(scope="session")
def role_model():
    return RoleModel()


@pytest.fixture(scope="session")
def html_semantics():
    return HtmlSemantics()


@pytest.fixture
def locator(role_model, html_semantics):
    return ElementLocator(role_model, html_semantics)


@pytest.fixture
def diagnostics_channel():
    return DiagnosticsChannel()


@pytest.fixture
def validator(role_model, html_semantics, diagnostics_channel):
    return AriaValidator(
        role_model,
        html_semantics,
        options=ALL_OPTIONS,
        diagnostics_channel=diagnostics_channel,
    )


@pytest.fixture
def make_dom():
    """Parse markup the way the validator does."""

    def _make_dom(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    return _make_dom


@pytest.fixture(autouse=True)
def reset_user_config():
    yield
    config_manager.reset_user_config()

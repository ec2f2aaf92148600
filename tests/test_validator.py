# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the orchestration of the rules over windows and frames.
"""

import logging

import pytest

from aria_validator.audit.validator import AriaValidator
from aria_validator.dom.window import CrossOriginFrame, Window
from aria_validator.utils.logging_helper import ConfigurationError

PAGE = """
<html><head><title>t</title></head>
<body>
  <span role="tab">tab</span>
  <span role="nonsense">x</span>
  <p id="dup">a</p><p id="dup">b</p>
  <span aria-sort="ascending">y</span>
</body></html>
"""


def _keys(summary):
    return sorted(finding.key for finding in summary.get())


def _validator(role_model, html_semantics, **options):
    values = {"attributes": True, "experimental": True, "ids": True}
    values.update(options)
    return AriaValidator(role_model, html_semantics, options=values)


def test_check_runs_every_category(validator, make_dom):
    summary = validator.check(Window(make_dom(PAGE), "http://example.com/"))

    assert summary.url == "http://example.com/"
    assert summary.roles == ["tab", "nonsense"]
    assert _keys(summary) == [
        "DUPLICATE_ID",
        "NOT_IN_REQUIRED_SCOPE",
        "UNKNOWN_ROLE",
        "UNSUPPORTED_ATTR_FOR_ELEMENT",
    ]
    assert not summary.passed
    assert summary.frames_total == 0
    assert summary.frames_checked == 0


def test_optional_categories_can_be_disabled(role_model, html_semantics, make_dom):
    no_ids = _validator(role_model, html_semantics, ids=False)
    no_attributes = _validator(role_model, html_semantics, attributes=False)

    assert "DUPLICATE_ID" not in _keys(no_ids.check(Window(make_dom(PAGE))))
    assert "UNSUPPORTED_ATTR_FOR_ELEMENT" not in _keys(no_attributes.check(Window(make_dom(PAGE))))


def test_experiments_only_run_when_enabled(role_model, html_semantics, make_dom):
    html = '<body><h1 role="heading">x</h1></body>'
    enabled = _validator(role_model, html_semantics)
    disabled = _validator(role_model, html_semantics, experimental=False)

    assert _keys(enabled.check(Window(make_dom(html)))) == ["REDUNDANT_ROLE"]
    assert _keys(disabled.check(Window(make_dom(html)))) == []


def test_check_without_body_uses_the_document(validator, make_dom):
    summary = validator.check(Window(make_dom('<span role="nonsense">x</span>')))
    assert _keys(summary) == ["UNKNOWN_ROLE"]


def test_empty_role_is_not_checked(validator, make_dom):
    summary = validator.check_by_role(make_dom('<div><span role="">x</span></div>'))
    assert summary.get() == []
    assert summary.roles == []


def test_check_by_attribute_uses_the_implicit_role(validator, make_dom):
    dom = make_dom('<div><input type="checkbox" aria-checked="true"><span aria-pressed="true">x</span></div>')
    summary = validator.check_by_attribute(dom.div)
    assert _keys(summary) == ["REDUNDANT_ATTR", "UNSUPPORTED_ATTR_FOR_ELEMENT"]
    assert summary.roles == []


def test_role_checks_run_in_declared_order(validator, make_dom):
    dom = make_dom('<div><span role="tab" aria-sort="none">x</span></div>')
    summary = validator.check_by_role(dom.div)
    assert [finding.key for finding in summary.get()] == [
        "NOT_IN_REQUIRED_SCOPE",
        "UNSUPPORTED_ATTR_FOR_ROLE",
    ]


def test_same_and_cross_origin_frames(validator, make_dom, caplog):
    child = Window(make_dom('<body><span role="nonsense">x</span></body>'), "http://example.com/frame")
    window = Window(
        make_dom("<body><p>top</p></body>"),
        "http://example.com/",
        frames=[child, CrossOriginFrame("http://other.example/")],
    )

    with caplog.at_level(logging.WARNING):
        summary = validator.check(window)

    assert summary.frames_total == 2
    assert summary.frames_checked == 1
    assert [frame.url for frame in summary.frames] == ["http://example.com/frame"]
    assert _keys(summary) == ["UNKNOWN_ROLE"]
    assert summary.roles == ["nonsense"]
    assert "other.example" in caplog.text


def test_nested_frames_are_merged(validator, make_dom):
    grandchild = Window(make_dom('<body><p id="x"></p><p id="x"></p></body>'), "http://a/2")
    child = Window(make_dom('<body><span role="tab">t</span></body>'), "http://a/1", [grandchild])
    top = Window(make_dom("<body></body>"), "http://a/", [child])

    summary = validator.check(top)

    assert summary.frames_total == 2
    assert summary.frames_checked == 2
    assert [item.url for item in summary.flatten()] == ["http://a/", "http://a/1", "http://a/2"]
    assert _keys(summary) == ["DUPLICATE_ID", "NOT_IN_REQUIRED_SCOPE"]
    assert _keys(summary.frames[0].frames[0]) == ["DUPLICATE_ID"]


def test_invalid_options_are_rejected(role_model, html_semantics):
    with pytest.raises(ConfigurationError):
        AriaValidator(role_model, html_semantics, options={"colour": True})
    with pytest.raises(ConfigurationError):
        AriaValidator(role_model, html_semantics, options={"ids": "sometimes"})


def test_default_options_come_from_configuration(role_model, html_semantics, monkeypatch):
    monkeypatch.setenv("ARIA_VALIDATOR_VALIDATOR_EXPERIMENTAL", "false")
    validator = AriaValidator(role_model, html_semantics)
    assert validator.options.experimental is False
    assert validator.options.ids is True


def test_rule_lookup(validator):
    assert validator.rule("check_ids").name == "check_ids"
    assert [check.name for check in validator.ATTRIBUTE_CHECKS] == [
        "check_supports_all_attributes",
        "check_required_attributes",
        "check_aria_owns",
    ]


def test_window_without_document(validator, make_dom):
    summary = validator.check(Window(None, "http://example.com/empty"))
    assert summary.url == "http://example.com/empty"
    assert summary.get() == []
    assert summary.frames_total == 0

    top = Window(make_dom("<body></body>"), "http://example.com/", [Window(None, "http://example.com/empty")])
    summary = validator.check(top)
    assert summary.frames_total == 1
    assert summary.frames_checked == 1

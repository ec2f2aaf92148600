# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

import threading
import time

import pytest
from bs4 import BeautifulSoup

from aria_validator.taxonomy import html_semantics as html_semantics_module

from aria_validator.dom.properties import (
    DomPropertyReader,
    RawAttributeReader,
    get_reader,
    make_test_instance,
)
from aria_validator.taxonomy.html_semantics import HtmlSemantics, Semantic
from aria_validator.utils.logging_helper import ConfigurationError

CUSTOM_RULES = """<?xml version="1.0" encoding="UTF-8"?>
<htmlconcepts>
  <elements>
    <element name="blink" strong="true" special="false">
      <role name="marquee"/>
    </element>
  </elements>
</htmlconcepts>
"""


def _first(make_dom, html, name):
    return make_dom(html).find(name)


@pytest.fixture(scope="module")
def static_semantics():
    return HtmlSemantics(reader=RawAttributeReader())


@pytest.mark.parametrize(
    "html, name, role",
    [
        ("<h1>Title</h1>", "h1", "heading"),
        ('<a href="#x">x</a>', "a", "link"),
        ("<a>x</a>", "a", None),
        ("<input>", "input", "textbox"),
        ('<input type="checkbox">', "input", "checkbox"),
        ('<input type="CheckBox">', "input", "checkbox"),
        ('<input type="range">', "input", "slider"),
        ('<input type="color">', "input", None),
        ("<button>Go</button>", "button", "button"),
        ("<ul><li>x</li></ul>", "li", "listitem"),
        ("<ol><li>x</li></ol>", "li", "listitem"),
        ("<select></select>", "select", "listbox"),
        ("<span>x</span>", "span", None),
    ],
)
def test_implicit_role(html_semantics, make_dom, html, name, role):
    assert html_semantics.get_implicit_role(_first(make_dom, html, name)) == role


def test_scope_disambiguates_rules_with_the_same_key(html_semantics, make_dom):
    dom = make_dom(
        "<table><thead><tr><th>Head</th></tr></thead>"
        "<tbody><tr><th>Row</th><td>Cell</td></tr></tbody></table>"
    )
    header, row_header = dom.find_all("th")
    assert html_semantics.get_implicit_role(header) == "columnheader"
    assert html_semantics.get_implicit_role(row_header) == "rowheader"
    assert html_semantics.get_implicit_role(dom.find("td")) == "gridcell"


def test_scoped_rules_without_a_matching_ancestor_give_no_role(html_semantics, make_dom):
    assert html_semantics.get_implicit_role(_first(make_dom, "<div><li>x</li></div>", "li")) is None


def test_dynamic_reading_normalizes_invalid_types(html_semantics, static_semantics, make_dom):
    bogus_input = _first(make_dom, '<input type="bogus">', "input")
    bogus_button = _first(make_dom, '<button type="bogus">x</button>', "button")

    assert html_semantics.get_implicit_role(bogus_input) == "textbox"
    assert html_semantics.get_implicit_role(bogus_button) == "button"
    assert static_semantics.get_implicit_role(bogus_input) is None
    assert static_semantics.get_implicit_role(bogus_button) is None


@pytest.mark.parametrize(
    "html, name, strength",
    [
        ("<script></script>", "script", Semantic.SACRED),
        ('<input type="hidden">', "input", Semantic.SACRED),
        ("<h2>x</h2>", "h2", Semantic.STRONG),
        ('<input type="checkbox">', "input", Semantic.STRONG),
        ("<article>x</article>", "article", Semantic.WEAK),
        ("<a>x</a>", "a", Semantic.WEAK),
        ("<span>x</span>", "span", Semantic.NONE),
    ],
)
def test_semantic_strength(html_semantics, make_dom, html, name, strength):
    assert html_semantics.get_semantic_strength(_first(make_dom, html, name)) == strength


def test_natively_supported(html_semantics, make_dom):
    checkbox = _first(make_dom, '<input type="checkbox">', "input")
    native = html_semantics.get_natively_supported(checkbox)
    assert native["aria-checked"] == "checked"
    assert native["aria-required"] == "required"
    assert native["aria-readonly"] == "readOnly"

    select = html_semantics.get_natively_supported(_first(make_dom, "<select></select>", "select"))
    assert set(select) == {"aria-disabled", "aria-multiselectable", "aria-required"}


def test_natively_supported_ignores_author_attributes(html_semantics, make_dom):
    span = _first(make_dom, "<span checked required>x</span>", "span")
    assert html_semantics.get_natively_supported(span) == {}


def test_find_descendants_matches_implicit_and_explicit_roles(html_semantics, make_dom):
    dom = make_dom(
        '<div id="root"><ul><li>one</li></ul><span role="listitem">two</span>'
        "<p>three</p></div>"
    )
    found = html_semantics.find_descendants(dom.find(id="root"), "listitem")
    assert [element.get_text() for element in found] == ["one", "two"]
    assert html_semantics.find_descendants(dom.find(id="root"), "") == []
    assert html_semantics.find_descendants(dom.find("p"), "listitem") == []


def test_modifying_attributes_and_native_map(html_semantics):
    assert "type" in html_semantics.modifying_attributes
    assert "href" in html_semantics.modifying_attributes
    assert html_semantics.native_attribute_map["checked"] == "aria-checked"


def test_set_xml_after_initialisation_is_rejected(html_semantics):
    html_semantics.get_xml()
    with pytest.raises(ConfigurationError):
        html_semantics.set_xml(None)


def test_custom_rules_document(tmp_path, make_dom):
    path = tmp_path / "rules.xml"
    path.write_text(CUSTOM_RULES, encoding="utf-8")
    semantics = HtmlSemantics(str(path))
    blink = _first(make_dom, "<blink>x</blink>", "blink")

    assert semantics.get_implicit_role(blink) == "marquee"
    assert semantics.get_semantic_strength(blink) == Semantic.STRONG
    assert semantics.modifying_attributes == ()


def test_property_reader(make_dom):
    dom = make_dom('<input type="Bogus" readonly size="12abc"><input size="x"><details open></details>')
    first, second = dom.find_all("input")
    reader = DomPropertyReader()

    assert reader.read(first, "type") == "text"
    assert reader.read(first, "readonly") == "true"
    assert reader.read(second, "readonly") == "false"
    assert reader.read(first, "size") == "12"
    assert reader.read(second, "size") == "20"
    assert reader.read(dom.find("details"), "open") == "true"
    assert RawAttributeReader().read(first, "type") == "Bogus"


def test_has_property_uses_the_element_interface(make_dom):
    reader = get_reader()
    checkbox = make_test_instance(_first(make_dom, '<input type="checkbox" checked>', "input"))
    assert checkbox.attrs == {}
    assert reader.has_property(checkbox, "checked")
    assert reader.has_property(checkbox, "hidden")
    assert not reader.has_property(make_test_instance(_first(make_dom, "<div></div>", "div")), "checked")
    assert isinstance(get_reader(False), RawAttributeReader)


def test_concurrent_first_use_loads_once(monkeypatch):
    loads = []
    resolve = html_semantics_module.resolve_document

    def slow_resolve(source, default_path):
        loads.append(source)
        time.sleep(0.05)
        return resolve(source, default_path)

    monkeypatch.setattr(html_semantics_module, "resolve_document", slow_resolve)
    semantics = HtmlSemantics()
    barrier = threading.Barrier(8)
    roles = []

    def worker():
        barrier.wait()
        roles.append(semantics.get_implicit_role(BeautifulSoup("<h1>x</h1>", "html.parser").h1))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert roles == ["heading"] * 8
    assert len(loads) == 1

# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

import threading
import time
from collections import ChainMap

import pytest
from bs4 import BeautifulSoup

from aria_validator.taxonomy.query import (
    DEFAULT_RDF_PATH,
    OntologyQuery,
    clean_resources,
    load_ontology,
    xpath_literal,
)
from aria_validator.taxonomy.roles import REQUIRED, SUPPORTED, RoleModel
from aria_validator.utils.logging_helper import ConfigurationError, TaxonomyLoadError

SMALL_RDF = """<?xml version="1.0" encoding="UTF-8"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns:rdfs="http://www.w3.org/2000/01/rdf-schema#"
         xmlns:owl="http://www.w3.org/2002/07/owl#"
         xmlns:role="http://www.w3.org/1999/xhtml/vocab#">
  <owl:Class rdf:ID="roletype">
    <role:supportedState rdf:resource="http://www.w3.org/2005/07/aaa#aria-hidden"/>
  </owl:Class>
  <owl:Class rdf:ID="chicken">
    <rdfs:subClassOf rdf:resource="#egg"/>
    <rdfs:subClassOf rdf:resource="#roletype"/>
    <role:requiredState rdf:resource="http://www.w3.org/2005/07/aaa#aria-chicken"/>
  </owl:Class>
  <owl:Class rdf:ID="egg">
    <rdfs:subClassOf rdf:resource="#chicken"/>
    <rdfs:subClassOf rdf:resource="#nest"/>
    <role:supportedState rdf:resource="http://www.w3.org/2005/07/aaa#aria-chicken"/>
  </owl:Class>
</rdf:RDF>
"""


def _declared_states(role_model, role, relation):
    query = OntologyQuery(role_model.get_rdf())
    return clean_resources(
        query.query(f"//owl:Class[@rdf:ID={xpath_literal(role)}]/{relation}/@rdf:resource")
    )


def test_base_role_is_roletype(role_model):
    assert role_model.base_role == "roletype"
    assert role_model.has_role("roletype")


def test_every_required_state_is_required(role_model):
    for role in role_model.roles():
        supported = role_model.get_supported(role)
        for state in _declared_states(role_model, role, "role:requiredState"):
            assert supported[state] == REQUIRED, (role, state)


def test_every_role_supports_the_global_states(role_model):
    global_states = role_model.get_supported()
    assert "aria-label" in global_states
    for role in role_model.roles():
        supported = role_model.get_supported(role)
        for state in global_states:
            assert supported.get(state) in (SUPPORTED, REQUIRED), (role, state)


def test_own_required_state_wins_over_inherited_support(role_model):
    # aria-controls is global, scrollbar requires it
    assert role_model.get_supported("roletype")["aria-controls"] == SUPPORTED
    assert role_model.get_supported("scrollbar")["aria-controls"] == REQUIRED


def test_required_state_is_inherited(role_model):
    assert role_model.descriptor("menuitemcheckbox").is_a("checkbox")
    assert role_model.get_supported("menuitemcheckbox")["aria-checked"] == REQUIRED


def test_get_supported_unknown_role_resolves_to_base_role(role_model):
    assert dict(role_model.get_supported("nonsense")) == dict(role_model.get_supported())
    assert dict(role_model.get_supported(None)) == dict(role_model.get_supported("roletype"))


def test_get_supported_accepts_an_element(role_model):
    element = BeautifulSoup('<span role="checkbox"></span>', "html.parser").span
    assert role_model.get_supported(element)["aria-checked"] == REQUIRED


def test_get_supported_wildcard_lists_every_state(role_model):
    states = role_model.get_supported("*")
    assert "aria-checked" in states
    assert "aria-sort" in states
    assert "aria-label" in states


def test_get_supported_result_can_not_change_the_taxonomy(role_model):
    supported = role_model.get_supported("checkbox")
    assert isinstance(supported, ChainMap)
    supported["aria-madeup"] = REQUIRED
    supported["aria-checked"] = SUPPORTED
    fresh = role_model.get_supported("checkbox")
    assert "aria-madeup" not in fresh
    assert fresh["aria-checked"] == REQUIRED


def test_has_role(role_model):
    assert role_model.has_role("checkbox")
    assert not role_model.has_role("chicken")
    assert not role_model.has_role("")
    assert not role_model.has_role(None)


def test_get_scope(role_model):
    assert role_model.get_scope("tab") == ["tablist"]
    assert sorted(role_model.get_scope("menuitem")) == ["menu", "menubar"]
    assert role_model.get_scope("tablist") == []
    assert role_model.get_scope("nonsense") == []


def test_get_must_contain(role_model):
    assert sorted(role_model.get_must_contain("list")) == ["group", "listitem"]
    assert role_model.get_must_contain("tablist") == ["tab"]
    assert role_model.get_must_contain("tab") == []


def test_scope_lookups_are_idempotent_copies(role_model):
    first = role_model.get_scope("row")
    first.append("mutated")
    assert role_model.get_scope("row") == role_model.get_scope("row")
    assert "mutated" not in role_model.get_scope("row")
    assert role_model.get_must_contain() == role_model.get_must_contain()


@pytest.mark.parametrize("lookup", ["get_scope", "get_must_contain"])
def test_listing_matches_individual_lookups(role_model, lookup):
    method = getattr(role_model, lookup)
    listing = method()
    assert listing
    for role in role_model.roles():
        assert (role in listing) == bool(method(role)), role


@pytest.mark.parametrize(
    "lookup", ["get_scope", "get_must_contain", "get_scoped_to", "get_scoped_by", "get_concept"]
)
@pytest.mark.parametrize("role", [None, ""])
def test_lookups_reject_a_missing_role(role_model, lookup, role):
    with pytest.raises(TypeError):
        getattr(role_model, lookup)(role)


def test_get_scoped_to_and_by(role_model):
    assert "tab" in role_model.get_scoped_to("tablist")
    assert sorted(role_model.get_scoped_to("menubar")) == [
        "menuitem",
        "menuitemcheckbox",
        "menuitemradio",
    ]
    assert "list" in role_model.get_scoped_by("listitem")
    assert "tablist" in role_model.get_scoped_by("tab")


def test_no_dangling_role_references(role_model):
    names = set(role_model.get_scope()) | set(role_model.get_must_contain())
    for role in role_model.roles():
        names.update(role_model.get_scope(role))
        names.update(role_model.get_must_contain(role))
        names.update(role_model.get_scoped_to(role))
        names.update(role_model.get_scoped_by(role))
    for name in names:
        assert role_model.has_role(name), name


def test_get_concept(role_model):
    assert role_model.get_concept("list") == ["UL", "OL"]
    assert role_model.get_concept("list", concept_only=True) == ["UL"]
    assert role_model.get_concept("checkbox") == ["INPUT"]
    assert role_model.get_concept("checkbox", concept_only=True) == []


def test_set_rdf_after_initialisation_is_rejected(role_model):
    role_model.roles()
    with pytest.raises(ConfigurationError):
        role_model.set_rdf(None)


def test_missing_taxonomy_file(tmp_path):
    model = RoleModel(str(tmp_path / "missing.rdf"))
    with pytest.raises(TaxonomyLoadError):
        model.has_role("button")


def test_malformed_taxonomy_file(tmp_path):
    path = tmp_path / "broken.rdf"
    path.write_text("<rdf:RDF", encoding="utf-8")
    with pytest.raises(TaxonomyLoadError):
        RoleModel(str(path)).roles()


def test_cyclic_and_undeclared_superclasses_are_skipped(tmp_path):
    path = tmp_path / "cyclic.rdf"
    path.write_text(SMALL_RDF, encoding="utf-8")
    model = RoleModel(str(path))

    assert model.base_role == "roletype"
    assert sorted(model.roles()) == ["chicken", "egg", "roletype"]
    assert model.get_supported("chicken")["aria-chicken"] == REQUIRED
    assert model.get_supported("chicken")["aria-hidden"] == SUPPORTED
    assert model.get_supported("egg")["aria-chicken"] == SUPPORTED
    assert not model.has_role("nest")


def test_load_ontology_is_memoized(tmp_path):
    assert load_ontology(DEFAULT_RDF_PATH) is load_ontology(str(DEFAULT_RDF_PATH))

    rdf = tmp_path / "small.rdf"
    rdf.write_text(SMALL_RDF, encoding="utf-8")
    first = load_ontology(rdf)
    rdf.write_text("not xml any more", encoding="utf-8")
    assert load_ontology(str(rdf)) is first


def test_concurrent_first_use_builds_once(monkeypatch):
    builds = []
    build = RoleModel._build_descriptors

    def slow_build(self):
        builds.append(self)
        time.sleep(0.05)
        return build(self)

    monkeypatch.setattr(RoleModel, "_build_descriptors", slow_build)
    model = RoleModel()
    barrier = threading.Barrier(8)
    results = []

    def worker():
        barrier.wait()
        results.append(model.has_role("button"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == [True] * 8
    assert len(builds) == 1
    assert model.base_role == "roletype"

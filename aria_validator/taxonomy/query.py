# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
XPath queries over taxonomy documents.

The taxonomy documents (the ARIA role RDF and the HTML implicit semantics XML)
are parsed once per path with lxml and never modified afterwards.
"""

import re
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Pattern, Union

from lxml import etree

from aria_validator.utils.logging_helper import setup_logger, TaxonomyLoadError

logger = setup_logger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_RDF_PATH = DATA_DIR / "aria-1.rdf"
DEFAULT_HTML_PATH = DATA_DIR / "aria-html.xml"

ANCHOR_ONLY_RE = re.compile(r"^.*?#")
HTML_CONCEPT_RE = re.compile(r"^.*?#edef-")

_loaded: Dict[str, etree._ElementTree] = {}
_load_lock = threading.Lock()


def load_ontology(path: Union[str, Path]) -> etree._ElementTree:
    """
    Parse a taxonomy document, at most once per resolved path.

    Args:
        path: Location of the XML/RDF document

    Returns:
        The parsed lxml element tree

    Raises:
        TaxonomyLoadError: If the file is missing or is not well formed XML
    """
    key = str(Path(path).resolve())
    document = _loaded.get(key)
    if document is not None:
        return document

    with _load_lock:
        document = _loaded.get(key)
        if document is None:
            if not Path(key).is_file():
                raise TaxonomyLoadError(f"Taxonomy document not found: {path}")
            try:
                document = etree.parse(key)
            except etree.XMLSyntaxError as e:
                raise TaxonomyLoadError(f"Could not parse taxonomy document {path}: {e}") from e
            logger.debug("Loaded taxonomy document %s", key)
            _loaded[key] = document
    return document


def xpath_literal(value: str) -> str:
    """
    Quote a string for use as an XPath 1.0 literal.

    XPath 1.0 has no escape syntax, so a value containing both quote characters
    is assembled with concat().
    """
    value = str(value)
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{part}'" for part in parts) + ")"


def clean_resources(values: Iterable[Any], pattern: Pattern = ANCHOR_ONLY_RE) -> List[str]:
    """Strip the URI prefix matched by ``pattern`` from each resource value."""
    return [pattern.sub("", str(value), count=1) for value in values]


class OntologyQuery:
    """
    Runs XPath expressions against one taxonomy document.

    Namespace prefixes are taken from the document root, so expressions can use
    the prefixes the document itself declares (``owl:``, ``rdf:``, ``role:``...).
    """

    def __init__(self, document: Union[etree._ElementTree, etree._Element]):
        if isinstance(document, etree._ElementTree):
            root = document.getroot()
        else:
            root = document
        if root is None:
            raise TaxonomyLoadError("Taxonomy document is empty")
        self.root = root
        self.namespaces = {
            prefix: uri for prefix, uri in root.nsmap.items() if prefix
        }

    def query(self, expression: str, first_match: bool = False) -> Union[List[Any], Any, None]:
        """
        Evaluate an XPath expression.

        Args:
            expression: XPath 1.0 expression, evaluated from the document root
            first_match: Return only the first result (or None)

        Returns:
            A list of element nodes or attribute strings, or a single result when
            first_match is set
        """
        try:
            result = self.root.xpath(expression, namespaces=self.namespaces)
        except etree.XPathError as e:
            raise TaxonomyLoadError(f"Invalid taxonomy query {expression!r}: {e}") from e

        if not isinstance(result, list):
            result = [result]
        result = [str(item) if isinstance(item, str) else item for item in result]

        if first_match:
            return result[0] if result else None
        return result


def resolve_document(
    source: Union[str, Path, etree._ElementTree, etree._Element, None],
    default_path: Path,
) -> Union[etree._ElementTree, etree._Element]:
    """Accept a path, an already parsed document or None (package default)."""
    if source is None:
        return load_ontology(default_path)
    if isinstance(source, (str, Path)):
        return load_ontology(source)
    return source

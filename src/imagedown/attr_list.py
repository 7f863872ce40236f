"""Attribute lists for imagedown.

An attribute list is a ``{...}`` token decorating the element before it:

    ## Heading {#intro .wide}
    ![A cat](cat.png){width=300 .rounded}

``#name`` sets the id (last one wins), ``.name`` adds a class (all of them,
in order) and anything else is decoded like a query string, so ``a=1&b=2``
sets two attributes and ``hidden`` sets an empty one.
"""

import re
from collections.abc import Mapping
from types import MappingProxyType
from urllib.parse import parse_qsl
from xml.etree.ElementTree import Element

from markdown.treeprocessors import Treeprocessor
from markdown.util import AtomicString

from .logging import debug

# `{...}` immediately at a position (used after inline images)
ATTR_LIST_RE = re.compile(r"\{[ ]*([^{}\n]*?)[ ]*\}")
# `## Heading {...}`
HEADER_ATTR_RE = re.compile(r"[ ]+\{[ ]*([^{}\n]*?)[ ]*\}[ ]*$")
# A block whose last line is only `{...}`
BLOCK_ATTR_RE = re.compile(r"\n[ ]*\{[ ]*([^{}\n]*?)[ ]*\}[ ]*$")
HEADER_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
NAME_RE = re.compile(r"^[A-Za-z_:][-\w:.]*$")
_WHITESPACE_RE = re.compile(r"\s+")


class AttributeListError(ValueError):
    """Raised for an attribute token that cannot be decoded."""


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def parse_attribute_token(piece: str) -> list[tuple[str, str]]:
    """Decode a single whitespace-free piece of an attribute list.

    Returns:
        (name, value) pairs; ``#x`` gives ``[("id", "x")]`` and ``.x``
        gives ``[("class", "x")]``

    Raises:
        AttributeListError: For an empty id/class or an invalid attribute name
    """
    if piece[0] in "#.":
        if len(piece) == 1:
            raise AttributeListError(f"missing name after {piece!r}")
        return [("id" if piece[0] == "#" else "class", piece[1:])]

    pairs = parse_qsl(piece, keep_blank_values=True)
    if not pairs:
        raise AttributeListError(f"no attribute in {piece!r}")
    for key, _ in pairs:
        if not NAME_RE.match(key):
            raise AttributeListError(f"invalid attribute name {key!r}")
    return [(key, _strip_quotes(value)) for key, value in pairs]


def parse_attribute_list(text: str) -> Mapping[str, str]:
    """Parse the inside of an attribute-list token into a read-only mapping.

    Pieces that cannot be decoded are logged and skipped. A leading colon,
    as in ``{: #id .class}``, is accepted.
    """
    text = text.strip()
    if text.startswith(":"):
        text = text[1:]

    element_id = None
    classes: list[str] = []
    attributes: dict[str, str] = {}

    for piece in _WHITESPACE_RE.split(text.strip()):
        if not piece:
            continue
        try:
            pairs = parse_attribute_token(piece)
        except AttributeListError as e:
            debug(f"Skipping attribute token {piece!r}: {e}")
            continue

        if piece[0] == "#":
            element_id = pairs[0][1]
        elif piece[0] == ".":
            classes.append(pairs[0][1])
        else:
            attributes.update(pairs)

    result: dict[str, str] = {}
    if element_id is not None:
        result["id"] = element_id
    if classes:
        result["class"] = " ".join(classes)
    # Explicit id=/class= pairs win over the shorthand forms
    result.update(attributes)
    return MappingProxyType(result)


def assign_attributes(elem: Element, attrs: Mapping[str, str]) -> None:
    """Set parsed attributes on an element, appending to an existing class."""
    for key, value in attrs.items():
        if key == "class" and elem.get("class"):
            value = f"{elem.get('class')} {value}"
        elem.set(key, value)


class AttributeListTreeprocessor(Treeprocessor):
    """Apply attribute lists trailing headings, blocks and inline elements."""

    def run(self, doc: Element) -> None:
        for elem in doc.iter():
            if elem.tag == "pre":
                continue
            if self.md.is_block_level(elem.tag):
                pattern = HEADER_ATTR_RE if elem.tag in HEADER_TAGS else BLOCK_ATTR_RE
                self._apply_trailing(elem, pattern)
            elif elem.tail and elem.tail.startswith("{"):
                m = ATTR_LIST_RE.match(elem.tail)
                if m:
                    assign_attributes(elem, parse_attribute_list(m.group(1)))
                    elem.tail = elem.tail[m.end() :]

    def _apply_trailing(self, elem: Element, pattern: re.Pattern) -> None:
        if len(elem):
            last = elem[-1]
            text = last.tail
        else:
            last = None
            text = elem.text
        if not text or isinstance(text, AtomicString):
            return

        m = pattern.search(text)
        if not m:
            return
        assign_attributes(elem, parse_attribute_list(m.group(1)))
        remaining = text[: m.start()]
        if last is not None:
            last.tail = remaining
        else:
            elem.text = remaining

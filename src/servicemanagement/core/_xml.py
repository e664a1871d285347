# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
XML helpers for Service Management payloads.

Responses are parsed with :mod:`defusedxml` and matched on local element
names, so the default ``http://schemas.microsoft.com/windowsazure`` namespace
(present on most, but not all, responses) does not matter to callers.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple, Union
from xml.etree.ElementTree import Element, ParseError, SubElement, tostring

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as SafeElementTree

from .errors import XMLDecodeError

_EXCERPT_LENGTH = 200


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def body_excerpt(payload: Union[bytes, str, None]) -> str:
    if payload is None:
        return ""
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")
    return payload[:_EXCERPT_LENGTH]


def parse_document(payload: Union[bytes, str], root: str) -> Element:
    """
    Parse an XML document and check its root element name.

    :raises ~servicemanagement.core.errors.XMLDecodeError: If the payload is empty, not
        well-formed, uses forbidden constructs (entities, DTDs), or has another root.
    """
    if not payload:
        raise XMLDecodeError(f"Expected <{root}> document, got an empty body", element=root)
    try:
        element = SafeElementTree.fromstring(payload)
    except (ParseError, DefusedXmlException) as exc:
        raise XMLDecodeError(
            f"Malformed <{root}> document: {exc}",
            element=root,
            body_excerpt=body_excerpt(payload),
        ) from exc
    if local_name(element.tag) != root:
        raise XMLDecodeError(
            f"Expected <{root}> document, got <{local_name(element.tag)}>",
            element=root,
            body_excerpt=body_excerpt(payload),
        )
    return element


def find_child(element: Element, name: str) -> Optional[Element]:
    for child in element:
        if local_name(child.tag) == name:
            return child
    return None


def find_children(element: Element, name: str) -> List[Element]:
    return [child for child in element if local_name(child.tag) == name]


def child_text(element: Element, name: str, default: Optional[str] = None) -> Optional[str]:
    child = find_child(element, name)
    if child is None:
        return default
    return (child.text or "").strip()


def child_bool(element: Element, name: str) -> Optional[bool]:
    text = child_text(element, name)
    if not text:
        return None
    return text.lower() == "true"


def child_texts(element: Element, container: str, item: str) -> List[str]:
    """Collect the text of every ``<item>`` below ``<container>``."""
    parent = find_child(element, container)
    if parent is None:
        return []
    return [(child.text or "").strip() for child in find_children(parent, item)]


def build_document(root: str, fields: Iterable[Tuple[str, Optional[str]]], namespace: Optional[str] = None) -> bytes:
    """
    Serialize a flat request document; fields whose value is None are omitted.

    The namespace is written as a plain ``xmlns`` attribute so child elements stay unprefixed.
    """
    attrib = {"xmlns": namespace} if namespace else {}
    document = Element(root, attrib)
    for name, value in fields:
        if value is None:
            continue
        SubElement(document, name).text = value
    return tostring(document, encoding="utf-8", xml_declaration=True)


__all__ = [
    "local_name",
    "body_excerpt",
    "parse_document",
    "find_child",
    "find_children",
    "child_text",
    "child_bool",
    "child_texts",
    "build_document",
]

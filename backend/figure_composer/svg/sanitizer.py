"""Figure sanitizer -- makes fetched SVG payloads safe to embed and self-contained.

Removes: comments, <script>, <foreignObject>, on* event attributes, and any
href that points outside the document (anything but ``#fragment`` or
``data:`` URIs). Keeps every visual attribute and internal <style>.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)

_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_XML_DECL_RE = re.compile(r"^\s*<\?xml[^>]*\?>", re.IGNORECASE)
_DOCTYPE_RE = re.compile(r"<!DOCTYPE[^>]*>", re.IGNORECASE)

REMOVE_TAGS = {"script", "foreignObject"}

_HREF_ATTRS = {"href", f"{{{XLINK_NS}}}href"}


def strip_ns(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def strip_prolog(svg_text: str) -> str:
    """Drop XML declaration, DOCTYPE and comments so the payload can be nested."""
    svg_text = _COMMENT_RE.sub("", svg_text)
    svg_text = _XML_DECL_RE.sub("", svg_text)
    svg_text = _DOCTYPE_RE.sub("", svg_text)
    return svg_text.strip()


def sanitize_tree(root: ET.Element) -> ET.Element:
    """Strip active content and external references in place. Returns ``root``."""
    _sanitize(root)
    return root


def qualify_tree(root: ET.Element) -> ET.Element:
    """Put un-namespaced elements into the SVG namespace in place."""
    for el in root.iter():
        if isinstance(el.tag, str) and not el.tag.startswith("{"):
            el.tag = f"{{{SVG_NS}}}{el.tag}"
    return root


def _sanitize(element: ET.Element) -> None:
    for child in list(element):
        if not isinstance(child.tag, str) or strip_ns(child.tag) in REMOVE_TAGS:
            element.remove(child)
            continue
        _sanitize(child)

    for attr in list(element.attrib):
        name = strip_ns(attr)
        if name.lower().startswith("on"):
            del element.attrib[attr]
        elif attr in _HREF_ATTRS and not _is_local_ref(element.attrib[attr]):
            del element.attrib[attr]


def _is_local_ref(value: str) -> bool:
    value = value.strip()
    return value.startswith("#") or value.lower().startswith("data:")

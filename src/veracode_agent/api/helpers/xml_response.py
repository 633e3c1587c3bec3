"""
Compact XML-to-dict conversion for Veracode XML API responses.

Each element becomes a key under its parent. Attributes are collected under
``_attributes``, text under ``_text``, and child elements are nested by tag
name. A tag that repeats under one parent becomes a list, a tag that occurs
once stays a dict:

    <applist account_id="1">
      <app app_id="10"/>
      <app app_id="11"/>
    </applist>

    {"applist": {"_attributes": {"account_id": "1"},
                 "app": [{"_attributes": {"app_id": "10"}},
                         {"_attributes": {"app_id": "11"}}]}}

Because of that collapse, callers expecting a list must go through
``controlled_array``.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, List

logger = logging.getLogger("veracode-agent")

ATTRIBUTES_KEY = "_attributes"
TEXT_KEY = "_text"


def _add_value(target: Dict[str, Any], key: str, value: Any) -> None:
    if key not in target:
        target[key] = value
    elif isinstance(target[key], list):
        target[key].append(value)
    else:
        target[key] = [target[key], value]


def _qualified_name(name: str, prefixes: Dict[str, str]) -> str:
    # ElementTree reports "{uri}local"; map it back to "prefix:local"
    if not name.startswith("{"):
        return name
    uri, local = name[1:].split("}", 1)
    prefix = prefixes.get(uri, "")
    return f"{prefix}:{local}" if prefix else local


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_xml(xml_text: str) -> Dict[str, Any]:
    """
    Parse XML text into the compact dict form.

    Namespace URIs are stripped from tag names; namespace declarations are
    kept as ``xmlns``/``xmlns:<prefix>`` attributes on the element that
    declares them.

    Args:
        xml_text: The raw XML document

    Returns:
        Dict keyed by the root tag name

    Raises:
        xml.etree.ElementTree.ParseError: If the document is not well-formed
    """
    parser = ET.XMLPullParser(events=("start-ns", "start", "end"))
    parser.feed(xml_text.lstrip("\ufeff").strip())
    parser.close()

    prefixes: Dict[str, str] = {}
    pending_ns: Dict[str, str] = {}
    root: Dict[str, Any] = {}
    stack: List[Dict[str, Any]] = [root]

    for event, payload in parser.read_events():
        if event == "start-ns":
            prefix, uri = payload
            prefixes.setdefault(uri, prefix)
            pending_ns["xmlns:" + prefix if prefix else "xmlns"] = uri
        elif event == "start":
            node: Dict[str, Any] = {}
            attributes = dict(pending_ns)
            pending_ns.clear()
            for name, value in payload.attrib.items():
                attributes[_qualified_name(name, prefixes)] = value
            if attributes:
                node[ATTRIBUTES_KEY] = attributes
            _add_value(stack[-1], _local_name(payload.tag), node)
            # The whole document is parsed up front, so text is already set here
            if payload.text and payload.text.strip():
                _add_value(node, TEXT_KEY, payload.text)
            stack.append(node)
        else:
            stack.pop()
            # Text after a child's closing tag belongs to the parent
            if payload.tail and payload.tail.strip() and len(stack) > 1:
                _add_value(stack[-1], TEXT_KEY, payload.tail)

    return root


def controlled_array(value: Any) -> List[Any]:
    """
    Normalize a possibly-collapsed XML list field into a list.

    Returns:
        ``[]`` for None, ``value`` unchanged when it is already a list,
        otherwise ``[value]``
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def error_message(tree: Dict[str, Any]) -> str:
    """Return the text of a top-level ``<error>`` element, or "" if absent."""
    error = tree.get("error")
    if error is None:
        return ""
    if isinstance(error, dict):
        text = error.get(TEXT_KEY, "")
        return "".join(text) if isinstance(text, list) else text
    return str(error)

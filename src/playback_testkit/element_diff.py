"""Structural diff for ElementTree markup.

Compares two node trees depth-first, left to right, and reports only the
first divergence. A node is either an element or a text string; the
children of an element are its text, then each sub-element followed by
its tail text (empty text is skipped).

Attributes are compared pairwise in insertion order, so two elements
holding the same attributes in a different order are reported as
different at the first mismatched position.
"""
from __future__ import annotations

import copy
import html
from dataclasses import dataclass
from typing import Union
from xml.etree import ElementTree as ET

Node = Union[ET.Element, str]


@dataclass(frozen=True)
class MatcherResult:
    """Outcome of a custom matcher, rendered as assertion output."""
    passed: bool
    message: str

    def __bool__(self) -> bool:
        return self.passed


def is_element(node: object) -> bool:
    return isinstance(node, (ET.Element, ET.ElementTree))


def _unwrap(node):
    if isinstance(node, ET.ElementTree):
        return node.getroot()
    return node


def child_nodes(element: ET.Element) -> list[Node]:
    """Return the element's children as an ordered list of nodes."""
    nodes: list[Node] = []
    if element.text:
        nodes.append(element.text)
    for child in element:
        nodes.append(child)
        if child.tail:
            nodes.append(child.tail)
    return nodes


def outer_markup(node) -> str:
    """Serialize a node including its own tag (without its tail)."""
    node = _unwrap(node)
    if not isinstance(node, ET.Element):
        return str(node)
    detached = copy.copy(node)
    detached.tail = None
    return ET.tostring(detached, encoding='unicode')


def inner_markup(node) -> str:
    """Serialize a node's content without its own tag."""
    node = _unwrap(node)
    if not isinstance(node, ET.Element):
        return str(node)
    parts = [html.escape(node.text, quote=False)] if node.text else []
    parts.extend(ET.tostring(child, encoding='unicode') for child in node)
    return ''.join(parts)


def _text_content(node) -> str:
    if isinstance(node, ET.Element):
        return ''.join(node.itertext())
    return str(node)


def diff_nodes(actual, expected) -> str | None:
    """Return None if the trees match, else a description of the first difference."""
    actual = _unwrap(actual)
    expected = _unwrap(expected)
    prefix = (
        f'The difference was in {outer_markup(actual)} '
        f'vs {outer_markup(expected)}: '
    )

    actual_is_element = isinstance(actual, ET.Element)
    expected_is_element = isinstance(expected, ET.Element)
    if actual_is_element != expected_is_element:
        return prefix + "One is element, one isn't."

    if not actual_is_element:
        if _text_content(actual) != _text_content(expected):
            return prefix + 'Nodes are different.'
        return None

    if actual.tag != expected.tag:
        return prefix + 'Different tagName.'

    actual_attrs = list(actual.attrib.items())
    expected_attrs = list(expected.attrib.items())
    if len(actual_attrs) != len(expected_attrs):
        return prefix + 'Different attribute list length.'
    for i, ((a_name, a_value), (e_name, e_value)) in enumerate(
        zip(actual_attrs, expected_attrs)
    ):
        if a_name != e_name or a_value != e_value:
            note = f'{a_name}={a_value} vs {e_name}={e_value}'
            return prefix + f'Attribute #{i} was different ({note}).'

    actual_children = child_nodes(actual)
    expected_children = child_nodes(expected)
    if len(actual_children) != len(expected_children):
        return prefix + 'Different child node list length.'
    for a_child, e_child in zip(actual_children, expected_children):
        diff = diff_nodes(a_child, e_child)
        if diff:
            return diff

    return None


def to_equal_element(actual, expected) -> MatcherResult:
    """Matcher comparing two element trees structurally."""
    diff = diff_nodes(actual, expected)
    actual_markup = inner_markup(actual)
    expected_markup = inner_markup(expected)
    if diff is None:
        return MatcherResult(
            passed=True,
            message=f'Expected {actual_markup} not to match {expected_markup}.',
        )
    return MatcherResult(
        passed=False,
        message=f'Expected {actual_markup} to match {expected_markup}. {diff}',
    )

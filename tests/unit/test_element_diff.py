"""Unit tests for the structural element diff."""
from xml.etree import ElementTree as ET

import pytest

from playback_testkit import (
    child_nodes,
    diff_nodes,
    inner_markup,
    outer_markup,
    to_equal_element,
)


def xml(text):
    return ET.fromstring(text)


# ── Node model ──


class TestNodeModel:

    def test_child_nodes_interleave_text_and_tails(self):
        el = xml('<p>one<b>two</b>three<i/></p>')
        nodes = child_nodes(el)
        assert nodes[0] == 'one'
        assert nodes[1].tag == 'b'
        assert nodes[2] == 'three'
        assert nodes[3].tag == 'i'
        assert len(nodes) == 4

    def test_outer_markup_excludes_tail(self):
        el = xml('<p><b>x</b>tail</p>')
        assert outer_markup(el[0]) == '<b>x</b>'

    def test_inner_markup(self):
        el = xml('<p>a<b>x</b>tail</p>')
        assert inner_markup(el) == 'a<b>x</b>tail'


# ── Matches ──


class TestMatches:

    @pytest.mark.parametrize('markup', [
        '<MPD/>',
        '<MPD type="static" minBufferTime="PT2S"/>',
        '<tt><body><div><p begin="00:00.000" end="00:01.000">Hello<br/>world</p></div></body></tt>',
        '<a><b><c><d><e><f>deep</f></e></d></c></b></a>',
    ])
    def test_identical_structures_match(self, markup):
        assert diff_nodes(xml(markup), xml(markup)) is None

    def test_same_object_matches(self):
        el = xml('<Period id="1"><AdaptationSet/></Period>')
        assert diff_nodes(el, el) is None

    def test_element_tree_documents_unwrapped(self):
        a = ET.ElementTree(xml('<MPD><Period/></MPD>'))
        assert diff_nodes(a, xml('<MPD><Period/></MPD>')) is None

    def test_text_nodes(self):
        assert diff_nodes('caption', 'caption') is None


# ── Divergences ──


class TestDivergence:

    def test_element_vs_text(self):
        diff = diff_nodes(xml('<p>x</p>'), 'x')
        assert diff == "The difference was in <p>x</p> vs x: One is element, one isn't."

    def test_different_text(self):
        diff = diff_nodes(xml('<p>Hello</p>'), xml('<p>Goodbye</p>'))
        assert diff == 'The difference was in Hello vs Goodbye: Nodes are different.'

    def test_different_tag(self):
        diff = diff_nodes(xml('<span/>'), xml('<div/>'))
        assert diff.endswith('Different tagName.')

    def test_attribute_count(self):
        diff = diff_nodes(xml('<p a="1"/>'), xml('<p a="1" b="2"/>'))
        assert diff.endswith('Different attribute list length.')

    def test_attribute_value(self):
        diff = diff_nodes(xml('<p a="1" b="2"/>'), xml('<p a="1" b="3"/>'))
        assert diff.endswith('Attribute #1 was different (b=2 vs b=3).')

    def test_attribute_order_matters(self):
        diff = diff_nodes(xml('<p a="1" b="2"/>'), xml('<p b="2" a="1"/>'))
        assert diff.endswith('Attribute #0 was different (a=1 vs b=2).')

    def test_child_count(self):
        diff = diff_nodes(xml('<p><b/></p>'), xml('<p><b/><i/></p>'))
        assert diff.endswith('Different child node list length.')

    def test_reports_only_differing_leaf(self):
        actual = xml('<tt><p>same</p><p>left</p><p>other</p></tt>')
        expected = xml('<tt><p>same</p><p>right</p><p>different</p></tt>')
        diff = diff_nodes(actual, expected)
        assert diff == 'The difference was in left vs right: Nodes are different.'

    def test_first_divergence_wins_depth_first(self):
        actual = xml('<r><a><b x="1"/></a><c/></r>')
        expected = xml('<r><a><b x="2"/></a><d/></r>')
        diff = diff_nodes(actual, expected)
        assert 'Attribute #0' in diff
        assert 'tagName' not in diff


# ── Matcher ──


class TestToEqualElement:

    def test_pass_message(self):
        result = to_equal_element(xml('<p>a<b/></p>'), xml('<p>a<b/></p>'))
        assert result.passed
        assert bool(result) is True
        assert result.message == 'Expected a<b /> not to match a<b />.'

    def test_fail_message_includes_diff(self):
        result = to_equal_element(xml('<p>a</p>'), xml('<p>b</p>'))
        assert not result.passed
        assert result.message.startswith('Expected a to match b. ')
        assert result.message.endswith('Nodes are different.')

    def test_assertrepr_hook_explains_difference(self):
        from playback_testkit.pytest_plugin import pytest_assertrepr_compare

        lines = pytest_assertrepr_compare(None, '==', xml('<p a="1"/>'), xml('<p a="2"/>'))
        assert lines[0] == 'element trees differ'
        assert 'Attribute #0' in lines[1]

    def test_assertrepr_hook_ignores_other_values(self):
        from playback_testkit.pytest_plugin import pytest_assertrepr_compare

        assert pytest_assertrepr_compare(None, '==', 1, 2) is None
        assert pytest_assertrepr_compare(None, '!=', xml('<a/>'), xml('<a/>')) is None

"""Unit tests for segment reference comparison."""
import dataclasses

import pytest

from playback_testkit import (
    InitSegmentReference,
    ReferenceKind,
    SegmentReference,
    compare_references,
    static_uris,
)


def segment(**overrides):
    fields = dict(
        position=3,
        start_time=20.0,
        end_time=30.0,
        uris=static_uris('http://example.com/video-3.mp4'),
        start_byte=0,
        end_byte=None,
    )
    fields.update(overrides)
    return SegmentReference(**fields)


def init_segment(**overrides):
    fields = dict(
        uris=static_uris('http://example.com/init.mp4'),
        start_byte=0,
        end_byte=1199,
    )
    fields.update(overrides)
    return InitSegmentReference(**fields)


class TestReferenceTypes:

    def test_kinds(self):
        assert segment().kind is ReferenceKind.SEGMENT
        assert init_segment().kind is ReferenceKind.INIT_SEGMENT

    def test_kind_is_not_a_field(self):
        names = [f.name for f in dataclasses.fields(SegmentReference)]
        assert 'kind' not in names

    def test_equal_references_are_not_identical(self):
        assert segment() != segment()

    def test_static_uris_returns_fresh_list(self):
        ref = segment()
        ref.get_uris().append('mutated')
        assert ref.get_uris() == ['http://example.com/video-3.mp4']


class TestCompareSegments:

    def test_identical_fields_equal(self):
        assert compare_references(segment(), segment()) is True

    @pytest.mark.parametrize('field,value', [
        ('position', 4),
        ('start_time', 20.5),
        ('end_time', 31.0),
        ('start_byte', 100),
        ('end_byte', 5000),
    ])
    def test_single_field_change_unequal(self, field, value):
        assert compare_references(segment(), segment(**{field: value})) is False

    def test_different_uris_unequal(self):
        other = segment(uris=static_uris('http://example.com/other.mp4'))
        assert compare_references(segment(), other) is False

    def test_uri_order_matters(self):
        a = segment(uris=static_uris('a', 'b'))
        b = segment(uris=static_uris('b', 'a'))
        assert compare_references(a, b) is False

    def test_uri_length_mismatch(self):
        a = segment(uris=static_uris('a'))
        b = segment(uris=static_uris('a', 'b'))
        assert compare_references(a, b) is False

    def test_uri_mismatch_wins_over_equal_fields(self):
        a = segment(uris=lambda: None)
        assert compare_references(a, segment()) is False

    def test_string_is_not_a_uri_list(self):
        a = segment(uris=lambda: 'http://example.com/video-3.mp4')
        b = segment(uris=lambda: 'http://example.com/video-3.mp4')
        assert compare_references(a, b) is False

    def test_tuple_and_list_uris_compare_by_value(self):
        a = segment(uris=lambda: ('x', 'y'))
        b = segment(uris=lambda: ['x', 'y'])
        assert compare_references(a, b) is True


class TestCompareInitSegments:

    def test_identical_fields_equal(self):
        assert compare_references(init_segment(), init_segment()) is True

    def test_end_byte_change_unequal(self):
        assert compare_references(init_segment(), init_segment(end_byte=1200)) is False

    def test_uris_checked(self):
        other = init_segment(uris=static_uris('http://example.com/init-2.mp4'))
        assert compare_references(init_segment(), other) is False


class TestNoOpinion:

    def test_segment_vs_init_segment(self):
        assert compare_references(segment(), init_segment()) is None

    @pytest.mark.parametrize('first,second', [
        (1, 1),
        ('a', 'b'),
        (None, None),
        ({'position': 3}, {'position': 3}),
    ])
    def test_unrelated_values(self, first, second):
        assert compare_references(first, second) is None

    def test_reference_vs_plain_value(self):
        assert compare_references(segment(), 3) is None

# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

import fontbuilder as fb
from glyphscope import Font, Rect, TableName
from glyphscope.core.variation_store import tuple_scalar
from glyphscope.tables.avar import map_value

WGHT = (b'wght', 0, 50, 100)
SEGMENTS = [(-16384, -16384), (0, 0), (8192, 4096), (16384, 16384)]


def variable_font(**tables):
    tables.setdefault('fvar', fb.fvar([WGHT]))
    return Font.from_data(fb.truetype_font(**tables))


class TestAxes:

    def test_axis_records(self):
        font = variable_font(fvar=fb.fvar([(b'wght', 100, 400, 900), (b'opsz', 8, 12, 72, 1)]))
        assert font.is_variable()
        assert font.variation_axes_count() == 2
        wght = font.variation_axis(0)
        assert wght.tag == b'wght'
        assert (wght.min_value, wght.def_value, wght.max_value) == (100, 400, 900)
        assert not wght.hidden
        assert font.variation_axis(1).hidden
        assert font.variation_axis(2) is None

    def test_axis_by_tag(self):
        font = variable_font()
        assert font.variation_axis_by_tag('wght').def_value == 50
        assert font.variation_axis_by_tag(b'wght') == font.variation_axis(0)
        assert font.variation_axis_by_tag('wdth') is None

    def test_static_font(self, font):
        assert not font.is_variable()
        assert font.variation_axes_count() == 0
        assert font.variation_axis(0) is None
        assert font.normalize_variation_coordinates([50]) is None

    def test_default_out_of_order_is_rejected(self):
        font = variable_font(fvar=fb.fvar([(b'wght', 100, 50, 900)]))
        assert not font.is_variable()


class TestNormalization:

    @pytest.mark.parametrize('user,expected', [
        (50, 0),
        (75, 8192),
        (100, 16384),
        (0, -16384),
        (25, -8192),
        (150, 16384),
        (-20, -16384),
    ])
    def test_normalize(self, user, expected):
        assert variable_font().normalize_variation_coordinates([user]) == [expected]

    def test_wrong_coordinate_count(self):
        font = variable_font()
        assert font.normalize_variation_coordinates([]) is None
        assert font.normalize_variation_coordinates([50, 50]) is None

    def test_avar_is_applied(self):
        font = variable_font(avar=fb.avar([SEGMENTS]))
        assert font.normalize_variation_coordinates([75]) == [4096]
        assert font.normalize_variation_coordinates([0]) == [-16384]

    def test_map_only(self):
        font = variable_font(avar=fb.avar([SEGMENTS]))
        assert font.map_variation_coordinates([12288]) == [10240]
        assert font.map_variation_coordinates([8192]) == [4096]
        assert font.map_variation_coordinates([8192, 0]) is None

    def test_map_without_avar_is_identity(self):
        assert variable_font().map_variation_coordinates([1234]) == [1234]

    def test_avar_axis_count_mismatch(self):
        font = variable_font(avar=fb.avar([SEGMENTS, SEGMENTS]))
        assert font.normalize_variation_coordinates([75]) is None


def test_segment_map_values():
    assert map_value(SEGMENTS, 0) == 0
    assert map_value(SEGMENTS, 4096) == 2048
    assert map_value(SEGMENTS, -8192) == -8192
    assert map_value([], 3000) == 3000
    # A single pair shifts every value
    assert map_value([(0, 100)], 50) == 150


@pytest.mark.parametrize('coords,peak,start,end,expected', [
    ([16384], [16384], None, None, 1.0),
    ([8192], [16384], None, None, 0.5),
    ([-8192], [16384], None, None, 0.0),
    ([0], [16384], None, None, 0.0),
    ([5000], [0], None, None, 1.0),
    ([-4096], [-16384], None, None, 0.25),
    ([12288], [8192], [0], [16384], 0.5),
    ([16384], [8192], [0], [16384], 0.0),
    ([8192, 8192], [16384, 16384], None, None, 0.25),
])
def test_tuple_scalar(coords, peak, start, end, expected):
    assert tuple_scalar(coords, peak, start, end) == pytest.approx(expected)


class TestGlyphVariations:

    ALL_POINTS_SHIFT = {
        fb.GID_NOTDEF: [{'peak': [16384], 'deltas': [(10, 0)] * 4 + [(0, 0)] * 4}],
    }

    def gvar_font(self, variations, **tables):
        return variable_font(gvar=fb.gvar(1, 6, variations), **tables)

    def test_default_instance_is_unchanged(self, outline):
        font = self.gvar_font(self.ALL_POINTS_SHIFT)
        events, _ = outline(font, fb.GID_NOTDEF, [0])
        assert events == outline(font, fb.GID_NOTDEF)[0]

    def test_full_delta(self, outline):
        font = self.gvar_font(self.ALL_POINTS_SHIFT)
        events, rect = outline(font, fb.GID_NOTDEF, [16384])
        assert events == [
            ('M', 60, 0), ('L', 60, 750), ('L', 460, 750), ('L', 460, 0), ('Z',),
        ]
        assert rect == Rect(60, 0, 460, 750)

    def test_half_delta(self, outline):
        font = self.gvar_font(self.ALL_POINTS_SHIFT)
        events, _ = outline(font, fb.GID_NOTDEF, [8192])
        assert events[0] == ('M', 55, 0)

    def test_opposite_direction_has_no_effect(self, outline):
        font = self.gvar_font(self.ALL_POINTS_SHIFT)
        events, _ = outline(font, fb.GID_NOTDEF, [-16384])
        assert events[0] == ('M', 50, 0)

    def test_single_touched_point_moves_contour(self, outline):
        font = self.gvar_font({
            fb.GID_A: [{'peak': [16384], 'points': [0], 'deltas': [(20, 0)]}],
        })
        events, _ = outline(font, fb.GID_A, [16384])
        assert events == [('M', 20, 0), ('Q', 270, 700, 520, 0), ('Z',)]

    def test_untouched_points_are_interpolated(self, outline):
        font = self.gvar_font({
            fb.GID_NOTDEF: [{'peak': [16384], 'points': [0, 2], 'deltas': [(0, 0), (100, 100)]}],
        })
        events, _ = outline(font, fb.GID_NOTDEF, [16384])
        assert events == [
            ('M', 50, 0), ('L', 50, 850), ('L', 550, 850), ('L', 550, 0), ('Z',),
        ]

    def test_intermediate_region(self, outline):
        font = self.gvar_font({
            fb.GID_NOTDEF: [{'peak': [8192], 'start': [0], 'end': [16384],
                             'deltas': [(10, 0)] * 4 + [(0, 0)] * 4}],
        })
        assert outline(font, fb.GID_NOTDEF, [8192])[0][0] == ('M', 60, 0)
        assert outline(font, fb.GID_NOTDEF, [12288])[0][0] == ('M', 55, 0)
        assert outline(font, fb.GID_NOTDEF, [16384])[0][0] == ('M', 50, 0)

    def test_composite_component_offset(self, outline):
        font = self.gvar_font({
            fb.GID_COMPOSITE: [{'peak': [16384], 'deltas': [(30, 0)] + [(0, 0)] * 4}],
        })
        events, _ = outline(font, fb.GID_COMPOSITE, [16384])
        assert events == [('M', 130, 50), ('Q', 380, 750, 630, 50), ('Z',)]

    def test_glyph_without_variations(self, outline):
        font = self.gvar_font(self.ALL_POINTS_SHIFT)
        events, _ = outline(font, fb.GID_A, [16384])
        assert events == [('M', 0, 0), ('Q', 250, 700, 500, 0), ('Z',)]

    def test_without_gvar_uses_static_outline(self, outline):
        font = variable_font()
        assert outline(font, fb.GID_NOTDEF, [16384]) == outline(font, fb.GID_NOTDEF)

    def test_coordinate_count_must_match(self, outline):
        font = self.gvar_font(self.ALL_POINTS_SHIFT)
        assert outline(font, fb.GID_NOTDEF, []) is None
        assert outline(font, fb.GID_NOTDEF, [0, 0]) is None

    def test_requires_fvar(self, font, outline):
        assert outline(font, fb.GID_NOTDEF, [0]) is None

    def test_truncated_deltas_fail(self, outline):
        data = fb.gvar(1, 6, self.ALL_POINTS_SHIFT)
        font = variable_font(gvar=data[:-6])
        assert outline(font, fb.GID_NOTDEF, [16384]) is None
        assert outline(font, fb.GID_A, [16384]) is not None


class TestMetricsVariations:

    STORE = fb.item_variation_store(
        1, [[(0, 16384, 16384)]], [([0], [[10], [20], [0], [0], [0], [0]])])

    def test_advance_without_mapping(self):
        font = variable_font(HVAR=fb.hvar(self.STORE))
        assert font.glyph_hor_advance_variation(1, [16384]) == 20.0
        assert font.glyph_hor_advance_variation(0, [8192]) == 5.0
        assert font.glyph_hor_advance_variation(0, [0]) == 0.0
        assert font.glyph_hor_side_bearing_variation(0, [16384]) is None

    def test_mapped_advance_and_side_bearing(self):
        hvar = fb.hvar(self.STORE,
                       advance_map=fb.delta_set_index_map([(0, 1), (0, 0)]),
                       side_bearing_map=fb.delta_set_index_map([(0, 2)]))
        font = variable_font(HVAR=hvar)
        assert font.glyph_hor_advance_variation(0, [16384]) == 20.0
        # Glyphs past the end of the map use its last entry
        assert font.glyph_hor_advance_variation(5, [16384]) == 10.0
        assert font.glyph_hor_side_bearing_variation(3, [16384]) == 0.0

    def test_vertical(self):
        font = variable_font(VVAR=fb.hvar(self.STORE))
        assert font.glyph_ver_advance_variation(1, [16384]) == 20.0
        assert font.glyph_ver_side_bearing_variation(1, [16384]) is None
        assert font.glyph_hor_advance_variation(1, [16384]) is None

    def test_invalid_queries(self):
        font = variable_font(HVAR=fb.hvar(self.STORE))
        assert font.glyph_hor_advance_variation(6, [16384]) is None
        assert font.glyph_hor_advance_variation(0, [16384, 0]) is None

    def test_font_wide_metric(self):
        font = variable_font(MVAR=fb.mvar(self.STORE, {b'xhgt': (0, 1), b'hasc': (0, 0)}))
        assert font.metrics_variation('xhgt', [16384]) == 20.0
        assert font.metrics_variation(b'hasc', [8192]) == 5.0
        assert font.metrics_variation('undo', [16384]) is None

    def test_missing_tables(self, font):
        assert font.glyph_hor_advance_variation(0, [0]) is None
        assert font.metrics_variation('xhgt', [0]) is None

    def test_malformed_store(self):
        font = variable_font(HVAR=fb.hvar(self.STORE[:12]))
        assert not font.has_table(TableName.HORIZONTAL_METRICS_VARIATIONS)

# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

import fontbuilder as fb
from fontbuilder import charstring as cs
from glyphscope import Font, Rect, TableName
from glyphscope.core.cff_parser import parse_cff, parse_cff2, parse_dict
from glyphscope.core.type2_charstring import MAX_SUBR_NESTING, _subr_bias

BIAS = 107

SQUARE = cs(500, 100, 0, 'rmoveto', 300, 0, 'rlineto', 0, 300, 'rlineto', -300, 0, 'rlineto', 'endchar')
SQUARE_EVENTS = [('M', 100, 0), ('L', 400, 0), ('L', 400, 300), ('L', 100, 300), ('Z',)]


def cff_font(charstrings, **options):
    table = fb.cff(charstrings, **options)
    return Font.from_data(fb.build_cff_font(table, len(charstrings)))


class TestCFFOutlines:

    def test_lines_with_width(self):
        font = cff_font([cs('endchar'), SQUARE])
        events, rect = font.outline_glyph_events(1)
        assert events == SQUARE_EVENTS
        assert rect == Rect(100, 0, 400, 300)

    def test_empty_glyph(self):
        font = cff_font([cs('endchar'), SQUARE])
        assert font.outline_glyph_events(0) == ([], Rect(0, 0, 0, 0))

    def test_local_subroutine(self):
        subr = cs(0, 100, 50, 100, 100, 0, 'rrcurveto', 'return')
        glyph = cs(10, 10, 'rmoveto', 0 - BIAS, 'callsubr', 'endchar')
        font = cff_font([cs('endchar'), glyph], local_subrs=[subr])
        events, rect = font.outline_glyph_events(1)
        assert events == [('M', 10, 10), ('C', 10, 110, 60, 210, 160, 210), ('Z',)]
        assert rect == Rect(10, 10, 160, 210)

    def test_global_subroutine(self):
        gsubr = cs(50, 'hlineto', 'return')
        glyph = cs(0, 0, 'rmoveto', 0 - BIAS, 'callgsubr', 'endchar')
        font = cff_font([cs('endchar'), glyph], global_subrs=[gsubr])
        events, _ = font.outline_glyph_events(1)
        assert events == [('M', 0, 0), ('L', 50, 0), ('Z',)]

    def test_endchar_inside_subroutine(self):
        subr = cs(0, 0, 'rmoveto', 40, 'vlineto', 'endchar')
        font = cff_font([cs('endchar'), cs(0 - BIAS, 'callsubr')], local_subrs=[subr])
        events, _ = font.outline_glyph_events(1)
        assert events == [('M', 0, 0), ('L', 0, 40), ('Z',)]

    def test_alternating_lines(self):
        glyph = cs(0, 0, 'rmoveto', 10, 20, 30, 'hlineto', 'endchar')
        events, _ = cff_font([cs('endchar'), glyph]).outline_glyph_events(1)
        assert events == [('M', 0, 0), ('L', 10, 0), ('L', 10, 20), ('L', 40, 20), ('Z',)]

    def test_curve_shorthands(self):
        glyph = cs(0, 0, 'rmoveto',
                   10, 20, 30, 40, 'hvcurveto',
                   5, 10, 20, 30, 40, 'hhcurveto',
                   'endchar')
        events, _ = cff_font([cs('endchar'), glyph]).outline_glyph_events(1)
        assert events[1] == ('C', 10, 0, 30, 30, 30, 70)
        assert events[2] == ('C', 40, 75, 60, 105, 100, 105)

    def test_each_moveto_closes_the_subpath(self):
        glyph = cs(0, 0, 'rmoveto', 10, 'hlineto', 100, 'hmoveto', 10, 'vlineto', 'endchar')
        events, _ = cff_font([cs('endchar'), glyph]).outline_glyph_events(1)
        assert [e[0] for e in events] == ['M', 'L', 'Z', 'M', 'L', 'Z']
        assert events[3] == ('M', 110, 0)

    def test_hint_masks_are_skipped(self):
        glyph = cs(10, 20, 'hstemhm', 30, 40, 'vstemhm', 'hintmask', b'\xc0',
                   0, 0, 'rmoveto', 10, 'hlineto', 'endchar')
        events, _ = cff_font([cs('endchar'), glyph]).outline_glyph_events(1)
        assert events == [('M', 0, 0), ('L', 10, 0), ('Z',)]

    def test_arithmetic_operators(self):
        # 7 + 3 = 10, 10 * 2 = 20, then put/get through the transient array
        glyph = cs(0, 0, 'rmoveto', 7, 3, 'add', 2, 'mul', 0, 'put', 0, 'get', 'hlineto', 'endchar')
        events, _ = cff_font([cs('endchar'), glyph]).outline_glyph_events(1)
        assert events[1] == ('L', 20, 0)

    def test_fixed_point_operand(self):
        glyph = cs(0, 0, 'rmoveto', 10.5, 'hlineto', 'endchar')
        events, _ = cff_font([cs('endchar'), glyph]).outline_glyph_events(1)
        assert events[1] == ('L', 10.5, 0)

    def test_large_operands(self):
        glyph = cs(0, 0, 'rmoveto', 1000, -1000, 'rlineto', 20000, 'hlineto', 'endchar')
        events, _ = cff_font([cs('endchar'), glyph]).outline_glyph_events(1)
        assert events[1] == ('L', 1000, -1000)
        assert events[2] == ('L', 21000, -1000)

    def test_flex(self):
        glyph = cs(0, 0, 'rmoveto', 10, 0, 10, 10, 10, 0, 10, 0, 10, -10, 10, 0, 50, 'flex', 'endchar')
        events, _ = cff_font([cs('endchar'), glyph]).outline_glyph_events(1)
        assert events[1] == ('C', 10, 0, 20, 10, 30, 10)
        assert events[2] == ('C', 40, 10, 50, 0, 60, 0)


class TestCFFFailures:

    def test_missing_endchar(self):
        font = cff_font([cs('endchar'), cs(0, 0, 'rmoveto', 10, 'hlineto')])
        assert font.outline_glyph_events(1) is None

    def test_line_before_move(self):
        font = cff_font([cs('endchar'), cs(10, 10, 'rlineto', 'endchar')])
        assert font.outline_glyph_events(1) is None

    def test_bad_operand_count(self):
        font = cff_font([cs('endchar'), cs(0, 0, 'rmoveto', 1, 2, 3, 'rlineto', 'endchar')])
        assert font.outline_glyph_events(1) is None

    def test_recursive_subroutine(self):
        subr = cs(0 - BIAS, 'callsubr', 'return')
        font = cff_font([cs('endchar'), cs(0, 0, 'rmoveto', 0 - BIAS, 'callsubr', 'endchar')],
                        local_subrs=[subr])
        assert font.outline_glyph_events(1) is None

    def test_subroutine_out_of_range(self):
        font = cff_font([cs('endchar'), cs(0, 0, 'rmoveto', 5, 'callsubr', 'endchar')])
        assert font.outline_glyph_events(1) is None

    def test_stack_overflow(self):
        glyph = cs(*([1] * 49), 'endchar')
        assert cff_font([cs('endchar'), glyph]).outline_glyph_events(1) is None

    def test_truncated_charstring(self):
        # 28 announces a two-byte integer that is missing
        assert cff_font([cs('endchar'), b'\x1c\x00']).outline_glyph_events(1) is None

    def test_glyph_out_of_range(self):
        font = cff_font([cs('endchar'), SQUARE])
        assert font.outline_glyph_events(2) is None

    def test_overflowing_arithmetic(self):
        # 30000 squared seven times is past the float range
        glyph = cs(0, 0, 'rmoveto', 30000, *(['dup', 'mul'] * 7), 'callsubr', 'endchar')
        assert cff_font([cs('endchar'), glyph]).outline_glyph_events(1) is None

    def test_index_past_the_stack_is_ignored(self):
        glyph = cs(0, 0, 'rmoveto', 5, 30000, 30000, 'mul', 'index', 'hlineto', 'endchar')
        events, _ = cff_font([cs('endchar'), glyph]).outline_glyph_events(1)
        assert events[1] == ('L', 5, 0)

    def test_blend_outside_cff2(self):
        glyph = cs(0, 0, 'rmoveto', 1, 1, 1, 'blend', 'hlineto', 'endchar')
        assert cff_font([cs('endchar'), glyph]).outline_glyph_events(1) is None

    def test_coords_on_cff_font(self):
        table = fb.cff([cs('endchar'), SQUARE])
        data = fb.build_cff_font(table, 2, fvar=fb.fvar([(b'wght', 100, 400, 900)]))
        font = Font.from_data(data)
        assert font.outline_glyph_events(1) is not None
        assert font.outline_glyph_events(1, [0]) is None


class TestSeac:

    def _font(self):
        base = cs(0, 0, 'rmoveto', 100, 'hlineto', 100, 'vlineto', 'endchar')
        accent = cs(0, 0, 'rmoveto', 50, 'hlineto', 'endchar')
        composed = cs(200, 300, 65, 194, 'endchar')
        # SIDs: 34 = 'A', 125 = 'acute'
        return cff_font([cs('endchar'), base, accent, composed], charset_sids=[34, 125, 391])

    def test_accented_glyph(self):
        events, rect = self._font().outline_glyph_events(3)
        assert events == [
            ('M', 0, 0), ('L', 100, 0), ('L', 100, 100), ('Z',),
            ('M', 200, 300), ('L', 250, 300), ('Z',),
        ]
        assert rect == Rect(0, 0, 250, 300)

    def test_unknown_component(self):
        font = cff_font([cs('endchar'), cs(0, 0, 65, 194, 'endchar')], charset_sids=[34])
        assert font.outline_glyph_events(1) is None


class TestCIDKeyed:

    def test_font_dict_selects_local_subroutines(self):
        subrs_0 = [cs(0, 0, 'rmoveto', 10, 'hlineto', 'return')]
        subrs_1 = [cs(0, 0, 'rmoveto', 20, 'hlineto', 'return')]
        glyph = cs(0 - BIAS, 'callsubr', 'endchar')
        font = cff_font([cs('endchar'), glyph, glyph],
                        fd_local_subrs=[subrs_0, subrs_1], fd_ranges=[(0, 0), (2, 1)])
        assert font.outline_glyph_events(1)[0][1] == ('L', 10, 0)
        assert font.outline_glyph_events(2)[0][1] == ('L', 20, 0)


class TestCFFTable:

    def test_parse(self):
        table = parse_cff(fb.cff([cs('endchar'), SQUARE], global_subrs=[cs('return')]))
        assert table is not None
        assert not table.is_cff2
        assert table.number_of_glyphs == 2
        assert len(table.global_subrs) == 1

    def test_wrong_major_version(self):
        data = bytearray(fb.cff([cs('endchar')]))
        data[0] = 2
        assert parse_cff(bytes(data)) is None

    def test_truncated_table(self):
        assert parse_cff(fb.cff([cs('endchar'), SQUARE])[:12]) is None

    def test_font_reports_cff(self):
        font = cff_font([cs('endchar'), SQUARE])
        assert font.has_table(TableName.COMPACT_FONT_FORMAT)
        assert not font.has_table(TableName.GLYPH_DATA)

    def test_bounding_box_comes_from_outline(self):
        font = cff_font([cs('endchar'), SQUARE])
        assert font.glyph_bounding_box(1) == Rect(100, 0, 400, 300)

    def test_dict_operands(self):
        # 139 -> 0, 28 -> i16, 29 -> i32, 30 -> real, then operator 17
        data = bytes([139, 28, 0x01, 0x00, 29, 0, 1, 0, 0, 30, 0x1A, 0x5F, 17])
        assert parse_dict(data) == {17: [0, 256, 65536, 1.5]}

    def test_infinite_dict_operand(self):
        glyphs = [cs('endchar'), SQUARE]
        table = fb.cff(glyphs)
        cs_offset = table.index(fb.cff_index(glyphs))
        # CharStrings offset written as the real 1E99999
        table = table.replace(fb._dict_int(cs_offset) + b'\x11', b'\x1e\x1b\x99\x99\x9f\x11')
        assert parse_cff(table) is None
        font = Font.from_data(fb.build_cff_font(table, 2))
        assert not font.has_table(TableName.COMPACT_FONT_FORMAT)
        assert font.outline_glyph_events(1) is None

    def test_fractional_dict_offset(self):
        glyphs = [cs('endchar'), SQUARE]
        table = fb.cff(glyphs)
        cs_offset = table.index(fb.cff_index(glyphs))
        # 12.5 in place of the CharStrings offset
        table = table.replace(fb._dict_int(cs_offset) + b'\x11', b'\x1e\x01\x2a\x50\xff\x11')
        assert parse_cff(table) is None

    def test_subroutine_bias(self):
        assert _subr_bias(0) == 107
        assert _subr_bias(1239) == 107
        assert _subr_bias(1240) == 1131
        assert _subr_bias(33900) == 32768
        assert MAX_SUBR_NESTING == 10


class TestCFF2:

    STORE = fb.item_variation_store(1, [[(0, 16384, 16384)]], [([0], [])])
    GLYPH = cs(100, 50, 1, 'blend', 0, 'rmoveto', 200, 'hlineto')

    def _font(self, charstrings=None, with_fvar=True):
        charstrings = charstrings or [b'', self.GLYPH]
        table = fb.cff2(charstrings, store=self.STORE)
        extra = {'fvar': fb.fvar([(b'wght', 100, 400, 900)])} if with_fvar else {}
        return Font.from_data(fb.build_cff_font(table, len(charstrings), tag=b'CFF2', **extra))

    def test_default_instance(self):
        events, _ = self._font().outline_glyph_events(1)
        assert events == [('M', 100, 0), ('L', 300, 0), ('Z',)]

    def test_blend_at_peak(self):
        events, _ = self._font().outline_glyph_events(1, [16384])
        assert events == [('M', 150, 0), ('L', 350, 0), ('Z',)]

    def test_blend_halfway(self):
        events, _ = self._font().outline_glyph_events(1, [8192])
        assert events[0] == ('M', 125, 0)

    def test_outside_region(self):
        events, _ = self._font().outline_glyph_events(1, [-8192])
        assert events[0] == ('M', 100, 0)

    def test_empty_charstring(self):
        assert self._font().outline_glyph_events(0) == ([], Rect(0, 0, 0, 0))

    def test_endchar_is_rejected(self):
        font = self._font([b'', cs(0, 0, 'rmoveto', 'endchar')])
        assert font.outline_glyph_events(1) is None

    def test_return_is_rejected(self):
        font = self._font([b'', cs(0, 0, 'rmoveto', 'return')])
        assert font.outline_glyph_events(1) is None

    def test_coordinate_count_must_match_axes(self):
        font = self._font()
        assert font.outline_glyph_events(1, [0, 0]) is None

    def test_coords_need_fvar(self):
        font = self._font(with_fvar=False)
        assert font.outline_glyph_events(1) is not None
        assert font.outline_glyph_events(1, [16384]) is None

    def test_local_subroutines(self):
        subr = cs(0, 0, 'rmoveto', 30, 'hlineto')
        table = fb.cff2([b'', cs(0 - BIAS, 'callsubr')], local_subrs=[subr])
        font = Font.from_data(fb.build_cff_font(table, 2, tag=b'CFF2'))
        events, _ = font.outline_glyph_events(1)
        assert events == [('M', 0, 0), ('L', 30, 0), ('Z',)]

    def test_private_dict_selects_variation_data(self):
        store = fb.item_variation_store(
            1, [[(0, 16384, 16384)], [(0, 16384, 16384)]], [([0], []), ([0, 1], [])])
        # Two deltas per blended value, as ItemVariationData 1 has two regions
        glyph = cs(100, 50, 20, 1, 'blend', 0, 'rmoveto', 200, 'hlineto')
        table = fb.cff2([b'', glyph], store=store, vsindex=1)
        data = fb.build_cff_font(table, 2, tag=b'CFF2', fvar=fb.fvar([(b'wght', 100, 400, 900)]))
        font = Font.from_data(data)
        assert parse_cff2(table).vsindex_for(1) == 1
        assert font.outline_glyph_events(1)[0][0] == ('M', 100, 0)
        events, _ = font.outline_glyph_events(1, [16384])
        assert events == [('M', 170, 0), ('L', 370, 0), ('Z',)]

    def test_private_vsindex_out_of_range(self):
        table = fb.cff2([b'', self.GLYPH], store=self.STORE, vsindex=3)
        font = Font.from_data(fb.build_cff_font(table, 2, tag=b'CFF2'))
        assert font.outline_glyph_events(1) is None

    def test_parse(self):
        table = parse_cff2(fb.cff2([b'', self.GLYPH], store=self.STORE))
        assert table.is_cff2
        assert table.number_of_glyphs == 2
        assert table.store.axis_count == 1

    def test_missing_font_dict_array(self):
        data = bytearray(fb.cff2([b'', self.GLYPH]))
        # Replace the FDArray operator (12 36) with a no-op charset operator
        index = bytes(data).index(bytes([12, 36]))
        data[index:index + 2] = bytes([12, 6])
        assert parse_cff2(bytes(data)) is None

    def test_blend_without_store(self):
        table = fb.cff2([b'', self.GLYPH])
        font = Font.from_data(fb.build_cff_font(table, 2, tag=b'CFF2'))
        assert font.outline_glyph_events(1) is None


@pytest.mark.parametrize('glyph_id', [0, 1])
def test_cff_outline_is_repeatable(glyph_id):
    font = cff_font([cs('endchar'), SQUARE])
    assert font.outline_glyph_events(glyph_id) == font.outline_glyph_events(glyph_id)

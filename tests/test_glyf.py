# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

import fontbuilder as fb
from glyphscope import Font, OutlineBuilder, RecordingBuilder, Rect
from glyphscope.tables.glyf import MAX_COMPONENTS_DEPTH

NOTDEF_EVENTS = [
    ('M', 50, 0), ('L', 50, 750), ('L', 450, 750), ('L', 450, 0), ('Z',),
]


def test_simple_glyph(font, outline):
    events, rect = outline(font, fb.GID_NOTDEF)
    assert events == NOTDEF_EVENTS
    assert rect == Rect(50, 0, 450, 750)


def test_quadratic_segment(font, outline):
    events, rect = outline(font, fb.GID_A)
    assert events == [('M', 0, 0), ('Q', 250, 700, 500, 0), ('Z',)]
    assert rect == Rect(0, 0, 500, 700)


def test_empty_glyph(font, outline):
    events, rect = outline(font, fb.GID_SPACE)
    assert events == []
    assert rect == Rect(0, 0, 0, 0)


def test_composite_offset(font, outline):
    events, rect = outline(font, fb.GID_COMPOSITE)
    assert events == [('M', 100, 50), ('Q', 350, 750, 600, 50), ('Z',)]
    assert rect == Rect(100, 50, 600, 750)


def test_composite_scale(font, outline):
    events, rect = outline(font, fb.GID_SCALED)
    assert events == [
        ('M', 25, 0), ('L', 25, 375), ('L', 225, 375), ('L', 225, 0), ('Z',),
    ]
    assert rect == Rect(25, 0, 225, 375)


def test_composite_two_by_two():
    glyphs = fb.default_glyphs()
    # Swap x and y
    glyphs.append(fb.composite_glyph([(fb.GID_A, 0, 0, (0.0, 1.0, 1.0, 0.0))]))
    font = Font.from_data(fb.build_font(fb.truetype_tables(glyphs)))
    events, _ = font.outline_glyph_events(6)
    assert events == [('M', 0, 0), ('Q', 700, 250, 0, 500), ('Z',)]


def test_composite_x_and_y_scale():
    glyphs = fb.default_glyphs()
    glyphs.append(fb.composite_glyph([(fb.GID_A, 0, 0, (1.5, 0.5))]))
    font = Font.from_data(fb.build_font(fb.truetype_tables(glyphs)))
    events, _ = font.outline_glyph_events(6)
    assert events == [('M', 0, 0), ('Q', 375, 350, 750, 0), ('Z',)]


def test_nested_composites():
    glyphs = fb.default_glyphs()
    glyphs.append(fb.composite_glyph([(fb.GID_COMPOSITE, 10, 0, None)]))
    font = Font.from_data(fb.build_font(fb.truetype_tables(glyphs)))
    events, _ = font.outline_glyph_events(6)
    assert events[0] == ('M', 110, 50)


def test_self_referencing_composite_fails(font, outline):
    assert outline(font, fb.GID_SELF_REFERENCE) is None


def test_nesting_limit():
    # Chain of composites, each referencing the next
    depth = MAX_COMPONENTS_DEPTH + 1
    glyphs = [fb.simple_glyph(fb.NOTDEF)]
    for i in range(depth):
        glyphs.append(fb.composite_glyph([(i, 0, 0, None)]))
    font = Font.from_data(fb.build_font(fb.truetype_tables(glyphs)))
    assert font.outline_glyph_events(MAX_COMPONENTS_DEPTH - 1) is not None
    assert font.outline_glyph_events(depth) is None


def test_all_off_curve_contour():
    square = [[(0, 0, False), (100, 0, False), (100, 100, False), (0, 100, False)]]
    font = Font.from_data(fb.build_font(fb.truetype_tables(fb.default_glyphs()[:3] + [
        fb.simple_glyph(square)])))
    events, _ = font.outline_glyph_events(3)
    assert events == [
        ('M', 0, 50),
        ('Q', 0, 0, 50, 0),
        ('Q', 100, 0, 100, 50),
        ('Q', 100, 100, 50, 100),
        ('Q', 0, 100, 0, 50),
        ('Z',),
    ]


def test_implied_on_curve_points():
    contour = [[(0, 0, True), (100, 200, False), (300, 200, False), (400, 0, True)]]
    font = Font.from_data(fb.build_font(fb.truetype_tables(fb.default_glyphs()[:3] + [
        fb.simple_glyph(contour)])))
    events, _ = font.outline_glyph_events(3)
    assert events == [
        ('M', 0, 0),
        ('Q', 100, 200, 200, 200),
        ('Q', 300, 200, 400, 0),
        ('Z',),
    ]


def test_multiple_contours_and_repeated_flags():
    contours = [
        [(0, 0, True), (0, 10, True), (10, 10, True), (10, 0, True)],
        [(1000, 1000, True), (1000, 1300, True), (1300, 1300, True)],
    ]
    font = Font.from_data(fb.build_font(fb.truetype_tables(fb.default_glyphs()[:3] + [
        fb.simple_glyph(contours)])))
    events, rect = font.outline_glyph_events(3)
    assert [e[0] for e in events] == ['M', 'L', 'L', 'L', 'Z', 'M', 'L', 'L', 'Z']
    assert rect == Rect(0, 0, 1300, 1300)


def test_long_loca():
    font = Font.from_data(fb.build_font(fb.truetype_tables(long_offsets=True)))
    events, _ = font.outline_glyph_events(fb.GID_NOTDEF)
    assert events == NOTDEF_EVENTS


def test_truncated_glyph_fails():
    glyphs = fb.default_glyphs()
    glyphs[fb.GID_A] = glyphs[fb.GID_A][:14]
    font = Font.from_data(fb.build_font(fb.truetype_tables(glyphs)))
    assert font.outline_glyph_events(fb.GID_A) is None
    assert font.outline_glyph_events(fb.GID_NOTDEF) is not None


def test_glyph_out_of_range(font, outline):
    assert outline(font, 6) is None
    assert outline(font, -1) is None
    assert font.glyph_bounding_box(6) is None


def test_stored_bounding_box(font):
    assert font.glyph_bounding_box(fb.GID_A) == Rect(0, 0, 500, 700)
    assert font.glyph_bounding_box(fb.GID_COMPOSITE) == Rect(100, 50, 600, 750)
    assert font.glyph_bounding_box(fb.GID_SPACE) == Rect(0, 0, 0, 0)


def test_outline_reports_stored_bounding_box():
    glyphs = fb.default_glyphs()
    # Stored box is wider than the component outline
    glyphs.append(fb.composite_glyph([(fb.GID_A, 100, 50, None)], bbox=(90, 40, 610, 760)))
    font = Font.from_data(fb.build_font(fb.truetype_tables(glyphs)))
    events, rect = font.outline_glyph_events(6)
    assert events[0] == ('M', 100, 50)
    assert rect == Rect(90, 40, 610, 760)
    assert font.glyph_bounding_box(6) == rect


def test_outline_is_repeatable(font):
    first = RecordingBuilder()
    second = RecordingBuilder()
    assert font.outline_glyph(fb.GID_COMPOSITE, first) == font.outline_glyph(fb.GID_COMPOSITE, second)
    assert first.events == second.events


def test_staged_events_never_leak_partial_paths(font):
    assert font.outline_glyph_events(fb.GID_SELF_REFERENCE) is None


def test_base_builder_accepts_everything(font):
    assert font.outline_glyph(fb.GID_A, OutlineBuilder()) == Rect(0, 0, 500, 700)


def test_missing_loca():
    tables = fb.truetype_tables()
    del tables[b'loca']
    font = Font.from_data(fb.build_font(tables))
    assert font.outline_glyph_events(0) is None


def test_svg_path(font):
    recorder = RecordingBuilder()
    font.outline_glyph(fb.GID_NOTDEF, recorder)
    assert recorder.to_svg_path() == 'M 50 0 L 50 750 L 450 750 L 450 0 Z'

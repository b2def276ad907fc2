# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

import fontbuilder as fb
from glyphscope import Font, RecordingBuilder


@pytest.fixture
def font():
    """The default TrueType test font (see fontbuilder.default_glyphs)."""
    with Font.from_data(fb.truetype_font()) as f:
        yield f


def outline_events(font, glyph_id, coords=None):
    """Return (events, rect) or None, going through the caller-builder API."""
    recorder = RecordingBuilder()
    if coords is None:
        rect = font.outline_glyph(glyph_id, recorder)
    else:
        rect = font.outline_variable_glyph(glyph_id, coords, recorder)
    if rect is None:
        return None
    return recorder.events, rect


@pytest.fixture
def outline():
    return outline_events

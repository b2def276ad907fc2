# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
Font Handle

The top-level aggregate over one font buffer. Construction reads the table
directory and the three required tables (head, hhea, maxp); every other
table is decoded on first use and cached on the handle.

All queries report absence with None (or False / 0 / a documented default)
rather than raising. Decoder exceptions from glyphscope.core.error are
caught here and logged at debug level.

Usage:
    font = Font.from_data(open('DejaVuSans.ttf', 'rb').read())
    gid = font.glyph_index(ord('A'))
    events, rect = font.outline_glyph_events(gid)
"""

import logging

from .core.cff_parser import parse_cff, parse_cff2
from .core.error import FontError
from .core.outline import BoundingBuilder, RecordingBuilder
from .core.table_directory import INT32_MAX, fonts_in_collection, parse_table_directory
from .core.type2_charstring import outline_glyph as outline_cff_glyph
from .core.types import GlyphClass, LineMetrics, OutlineBuilder, Rect, TableName, make_tag
from .tables.avar import AvarTable
from .tables.cmap import CmapTable
from .tables.fvar import FvarTable
from .tables.gdef import GDEFTable
from .tables.glyf import GlyfTable
from .tables.gvar import GvarTable
from .tables.head import HeadTable
from .tables.hhea import MetricsHeader
from .tables.hmtx import MetricsTable
from .tables.hvar import MetricsVariationTable
from .tables.kern import KernTable
from .tables.loca import LocaTable
from .tables.maxp import parse_number_of_glyphs
from .tables.mvar import MvarTable
from .tables.name import NAME_ID_FAMILY, NAME_ID_POST_SCRIPT_NAME, NameTable
from .tables.os2 import DEFAULT_WEIGHT, DEFAULT_WIDTH, OS2Table
from .tables.post import PostTable
from .tables.vorg import VorgTable

logger = logging.getLogger(__name__)

# Tables that from_data() guarantees
_REQUIRED_TABLES = (TableName.HEADER, TableName.HORIZONTAL_HEADER, TableName.MAXIMUM_PROFILE)


class Font:
    """A parsed TrueType/OpenType font.

    The handle keeps a read-only memoryview over the caller's buffer and
    never copies it. Decoded table views are created lazily; two threads
    racing on the same table compute equal views, so read-only queries need
    no locking.
    """

    def __init__(self, data, directory, head: HeadTable, hhea: MetricsHeader,
                 number_of_glyphs: int) -> None:
        self._data = data
        self._directory = directory
        self._head = head
        self._hhea = hhea
        self._number_of_glyphs = number_of_glyphs
        self._cache: dict[bytes, object] | None = {}

    # -------------------------------------------------------------------
    # Construction / destruction
    # -------------------------------------------------------------------

    @classmethod
    def from_data(cls, data, index: int = 0) -> Font | None:
        """Parse a font from `data` (bytes, bytearray or memoryview).

        `index` selects a sub-font of a TrueType collection and is ignored
        for single fonts. Returns None when the data is not a usable font.
        """
        directory = parse_table_directory(data, index)
        if directory is None:
            return None

        head = _parse_required(directory, b'head', HeadTable.parse)
        hhea = _parse_required(directory, b'hhea', MetricsHeader.parse)
        number_of_glyphs = _parse_required(directory, b'maxp', parse_number_of_glyphs)
        if head is None or hhea is None or number_of_glyphs is None:
            return None

        logger.debug("Font with %d tables, %d glyphs", len(directory.records), number_of_glyphs)
        return cls(directory.data, directory, head, hhea, number_of_glyphs)

    @staticmethod
    def fonts_in_collection_count(data) -> int:
        """Number of fonts in a collection; -1 for a single font or an overflowing count."""
        count = fonts_in_collection(data)
        if count is None or count > INT32_MAX:
            return -1
        return count

    def close(self) -> None:
        """Release the table cache and the buffer view. Safe to call more than once."""
        self._cache = None
        self._directory = None
        self._data = None

    def __enter__(self) -> Font:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Font(glyphs={self._number_of_glyphs})"

    # -------------------------------------------------------------------
    # Lazy table access
    # -------------------------------------------------------------------

    def _table(self, tag: bytes):
        """Return the decoded view for `tag`, or None when absent or malformed."""
        if self._cache is None:
            raise ValueError("operation on closed font")
        try:
            return self._cache[tag]
        except KeyError:
            pass

        table = None
        data = self._directory.table(tag)
        if data is not None:
            try:
                table = self._decode(tag, data)
            except FontError as e:
                logger.warning("Table %r is malformed: %s", tag, e)
                table = None
            if table is None:
                logger.debug("Table %r skipped", tag)
        self._cache[tag] = table
        return table

    def _decode(self, tag: bytes, data):
        if tag == b'cmap':
            return CmapTable.parse(data)
        if tag == b'hmtx':
            return MetricsTable.parse(data, self._hhea.number_of_metrics, self._number_of_glyphs)
        if tag == b'vhea':
            return MetricsHeader.parse(data)
        if tag == b'vmtx':
            vhea = self._table(b'vhea')
            if vhea is None:
                return None
            return MetricsTable.parse(data, vhea.number_of_metrics, self._number_of_glyphs)
        if tag == b'OS/2':
            return OS2Table.parse(data)
        if tag == b'post':
            return PostTable.parse(data)
        if tag == b'name':
            return NameTable.parse(data)
        if tag == b'kern':
            return KernTable.parse(data)
        if tag == b'GDEF':
            return GDEFTable.parse(data)
        if tag == b'loca':
            if self._head.index_to_loc_format is None:
                return None
            return LocaTable.parse(data, self._number_of_glyphs, self._head.index_to_loc_format)
        if tag == b'glyf':
            loca = self._table(b'loca')
            if loca is None:
                return None
            return GlyfTable(data, loca, self._table(b'hmtx'), self._table(b'vmtx'))
        if tag == b'CFF ':
            return parse_cff(data)
        if tag == b'CFF2':
            return parse_cff2(data)
        if tag == b'VORG':
            return VorgTable.parse(data)
        if tag == b'fvar':
            return FvarTable.parse(data)
        if tag == b'avar':
            return AvarTable.parse(data)
        if tag == b'gvar':
            return GvarTable.parse(data)
        if tag == b'HVAR' or tag == b'VVAR':
            return MetricsVariationTable.parse(data)
        if tag == b'MVAR':
            return MvarTable.parse(data)
        return None

    def has_table(self, name: TableName) -> bool:
        """True only for tables that are present and parsed successfully."""
        if name in _REQUIRED_TABLES:
            return True
        return self._table(name.value) is not None

    def table_tags(self) -> list[bytes]:
        """Tags of every in-range record in the table directory."""
        return self._directory.tags()

    def _valid_glyph(self, glyph_id: int) -> bool:
        return 0 <= glyph_id < self._number_of_glyphs

    # -------------------------------------------------------------------
    # Character mapping
    # -------------------------------------------------------------------

    def glyph_index(self, codepoint: int) -> int | None:
        cmap = self._table(b'cmap')
        if cmap is None:
            return None
        try:
            return cmap.glyph_index(codepoint)
        except FontError as e:
            logger.debug("cmap lookup of U+%04X failed: %s", codepoint, e)
            return None

    def glyph_variation_index(self, codepoint: int, variation_selector: int) -> int | None:
        cmap = self._table(b'cmap')
        if cmap is None:
            return None
        try:
            return cmap.variation_index(codepoint, variation_selector)
        except FontError as e:
            logger.debug("cmap variation lookup of U+%04X failed: %s", codepoint, e)
            return None

    # -------------------------------------------------------------------
    # Glyph metrics
    # -------------------------------------------------------------------

    def _metric(self, tag: bytes, glyph_id: int, advance: bool):
        if not self._valid_glyph(glyph_id):
            return None
        table = self._table(tag)
        if table is None:
            return None
        return table.advance(glyph_id) if advance else table.side_bearing(glyph_id)

    def glyph_hor_advance(self, glyph_id: int) -> int | None:
        return self._metric(b'hmtx', glyph_id, advance=True)

    def glyph_hor_side_bearing(self, glyph_id: int) -> int | None:
        return self._metric(b'hmtx', glyph_id, advance=False)

    def glyph_ver_advance(self, glyph_id: int) -> int | None:
        return self._metric(b'vmtx', glyph_id, advance=True)

    def glyph_ver_side_bearing(self, glyph_id: int) -> int | None:
        return self._metric(b'vmtx', glyph_id, advance=False)

    def glyph_y_origin(self, glyph_id: int) -> int | None:
        vorg = self._table(b'VORG')
        if vorg is None or not self._valid_glyph(glyph_id):
            return None
        return vorg.glyph_y_origin(glyph_id)

    def glyphs_kerning(self, left: int, right: int) -> int | None:
        kern = self._table(b'kern')
        if kern is None:
            return None
        try:
            return kern.glyphs_kerning(left, right)
        except FontError as e:
            logger.debug("kern lookup failed: %s", e)
            return None

    def glyph_name(self, glyph_id: int) -> str | None:
        post = self._table(b'post')
        if post is None or not self._valid_glyph(glyph_id):
            return None
        return post.glyph_name(glyph_id)

    # -------------------------------------------------------------------
    # Naming table
    # -------------------------------------------------------------------

    def name_records_count(self) -> int:
        name = self._table(b'name')
        return name.count if name is not None else 0

    def name_record(self, index: int):
        name = self._table(b'name')
        if name is None:
            return None
        return name.record(index)

    def name_record_string(self, index: int) -> bytes | None:
        """Raw, undecoded string bytes of a name record."""
        name = self._table(b'name')
        if name is None:
            return None
        return name.record_bytes(index)

    def name_record_string_into(self, index: int, buffer) -> bool:
        """Copy the record's bytes into `buffer`, whose length must equal the record size.

        On any failure the buffer is left untouched.
        """
        raw = self.name_record_string(index)
        if raw is None or len(buffer) != len(raw):
            return False
        buffer[:] = raw
        return True

    def family_name(self) -> str | None:
        name = self._table(b'name')
        if name is None:
            return None
        return name.find_name(NAME_ID_FAMILY)

    def post_script_name(self) -> str | None:
        name = self._table(b'name')
        if name is None:
            return None
        return name.find_name(NAME_ID_POST_SCRIPT_NAME)

    # -------------------------------------------------------------------
    # Font-wide facts
    # -------------------------------------------------------------------

    @property
    def number_of_glyphs(self) -> int:
        return self._number_of_glyphs

    @property
    def units_per_em(self) -> int | None:
        return self._head.units_per_em

    def global_bounding_box(self) -> Rect:
        return self._head.bbox

    def _typo_metrics(self):
        os2 = self._table(b'OS/2')
        if os2 is not None and os2.use_typo_metrics():
            return os2
        return None

    def ascender(self) -> int:
        os2 = self._typo_metrics()
        return os2.typo_ascender() if os2 is not None else self._hhea.ascender

    def descender(self) -> int:
        os2 = self._typo_metrics()
        return os2.typo_descender() if os2 is not None else self._hhea.descender

    def height(self) -> int:
        return self.ascender() - self.descender()

    def line_gap(self) -> int:
        os2 = self._typo_metrics()
        return os2.typo_line_gap() if os2 is not None else self._hhea.line_gap

    def vertical_ascender(self) -> int | None:
        vhea = self._table(b'vhea')
        return vhea.ascender if vhea is not None else None

    def vertical_descender(self) -> int | None:
        vhea = self._table(b'vhea')
        return vhea.descender if vhea is not None else None

    def vertical_height(self) -> int | None:
        vhea = self._table(b'vhea')
        return vhea.ascender - vhea.descender if vhea is not None else None

    def vertical_line_gap(self) -> int | None:
        vhea = self._table(b'vhea')
        return vhea.line_gap if vhea is not None else None

    # -------------------------------------------------------------------
    # Style
    # -------------------------------------------------------------------

    def is_regular(self) -> bool:
        os2 = self._table(b'OS/2')
        return os2 is not None and os2.is_regular()

    def is_italic(self) -> bool:
        os2 = self._table(b'OS/2')
        return os2 is not None and os2.is_italic()

    def is_bold(self) -> bool:
        os2 = self._table(b'OS/2')
        return os2 is not None and os2.is_bold()

    def is_oblique(self) -> bool:
        os2 = self._table(b'OS/2')
        return os2 is not None and os2.is_oblique()

    def weight(self) -> int:
        os2 = self._table(b'OS/2')
        return os2.weight() if os2 is not None else DEFAULT_WEIGHT

    def width(self) -> int:
        os2 = self._table(b'OS/2')
        return os2.width() if os2 is not None else DEFAULT_WIDTH

    def x_height(self) -> int | None:
        os2 = self._table(b'OS/2')
        return os2.x_height() if os2 is not None else None

    def capital_height(self) -> int | None:
        os2 = self._table(b'OS/2')
        return os2.cap_height() if os2 is not None else None

    # -------------------------------------------------------------------
    # Optional metrics
    # -------------------------------------------------------------------

    def underline_metrics(self) -> LineMetrics | None:
        post = self._table(b'post')
        return post.underline_metrics() if post is not None else None

    def strikeout_metrics(self) -> LineMetrics | None:
        os2 = self._table(b'OS/2')
        return os2.strikeout_metrics() if os2 is not None else None

    def subscript_metrics(self):
        os2 = self._table(b'OS/2')
        return os2.subscript_metrics() if os2 is not None else None

    def superscript_metrics(self):
        os2 = self._table(b'OS/2')
        return os2.superscript_metrics() if os2 is not None else None

    # -------------------------------------------------------------------
    # Glyph classification (GDEF)
    # -------------------------------------------------------------------

    def glyph_class(self, glyph_id: int) -> GlyphClass:
        gdef = self._table(b'GDEF')
        if gdef is None:
            return GlyphClass.UNKNOWN
        try:
            return gdef.glyph_class(glyph_id)
        except FontError:
            return GlyphClass.UNKNOWN

    def glyph_mark_attachment_class(self, glyph_id: int) -> int:
        gdef = self._table(b'GDEF')
        if gdef is None:
            return 0
        try:
            return gdef.glyph_mark_attachment_class(glyph_id)
        except FontError:
            return 0

    def is_mark_glyph(self, glyph_id: int, set_index: int | None = None) -> bool:
        gdef = self._table(b'GDEF')
        if gdef is None:
            return False
        try:
            return gdef.is_mark_glyph(glyph_id, set_index)
        except FontError:
            return False

    # -------------------------------------------------------------------
    # Outlines
    # -------------------------------------------------------------------

    def _emit_outline(self, glyph_id: int, builder: OutlineBuilder, coords) -> Rect | None:
        if not self._valid_glyph(glyph_id):
            return None
        bounding = BoundingBuilder(builder)
        try:
            glyf = self._table(b'glyf')
            if glyf is not None:
                gvar = self._table(b'gvar') if coords is not None else None
                glyf.outline(glyph_id, bounding, gvar, coords)
                if gvar is None:
                    # Static glyphs report the box stored in their header
                    bbox = glyf.bounding_box(glyph_id)
                    return Rect(*bbox) if bbox is not None else None
            else:
                cff = self._table(b'CFF ')
                if cff is None:
                    cff = self._table(b'CFF2')
                if cff is None:
                    return None
                if coords is not None and not cff.is_cff2:
                    return None
                outline_cff_glyph(cff, glyph_id, bounding, coords)
        except FontError as e:
            logger.debug("Outline of glyph %d failed: %s", glyph_id, e)
            return None
        return bounding.bbox.to_rect()

    def outline_glyph(self, glyph_id: int, builder: OutlineBuilder) -> Rect | None:
        """Send the glyph's path to `builder` and return its bounding box.

        glyf glyphs report the box stored in the glyph header; CFF glyphs and
        gvar-adjusted outlines report the box of the emitted points.

        Returns None on failure. The builder may already have received part
        of the path by then; discard everything it got during this call.
        """
        return self._emit_outline(glyph_id, builder, None)

    def outline_variable_glyph(self, glyph_id: int, coords, builder: OutlineBuilder) -> Rect | None:
        """Like outline_glyph(), at normalized F2Dot14 `coords` (one per axis).

        Supports glyf (with gvar deltas when present) and CFF2 fonts.
        """
        fvar = self._table(b'fvar')
        if fvar is None or len(coords) != len(fvar.axes):
            return None
        return self._emit_outline(glyph_id, builder, list(coords))

    def outline_glyph_events(self, glyph_id: int, coords=None):
        """Return (events, rect) for the glyph, or None on failure.

        Events are staged internally, so nothing partial ever escapes.
        """
        recorder = RecordingBuilder()
        if coords is None:
            rect = self.outline_glyph(glyph_id, recorder)
        else:
            rect = self.outline_variable_glyph(glyph_id, coords, recorder)
        if rect is None:
            return None
        return recorder.events, rect

    def glyph_bounding_box(self, glyph_id: int) -> Rect | None:
        """Stored glyf box, or the box of the CFF outline."""
        if not self._valid_glyph(glyph_id):
            return None
        glyf = self._table(b'glyf')
        if glyf is None:
            return self.outline_glyph(glyph_id, OutlineBuilder())
        bbox = glyf.bounding_box(glyph_id)
        return Rect(*bbox) if bbox is not None else None

    # -------------------------------------------------------------------
    # Variations
    # -------------------------------------------------------------------

    def is_variable(self) -> bool:
        return self._table(b'fvar') is not None

    def variation_axes_count(self) -> int:
        fvar = self._table(b'fvar')
        return len(fvar.axes) if fvar is not None else 0

    def variation_axis(self, index: int):
        fvar = self._table(b'fvar')
        return fvar.axis(index) if fvar is not None else None

    def variation_axis_by_tag(self, tag):
        fvar = self._table(b'fvar')
        return fvar.axis_by_tag(tag) if fvar is not None else None

    def normalize_variation_coordinates(self, user_coords) -> list[int] | None:
        """User-space axis values to F2Dot14 coordinates, avar applied."""
        fvar = self._table(b'fvar')
        if fvar is None:
            return None
        coords = fvar.normalize(user_coords)
        if coords is None:
            return None
        avar = self._table(b'avar')
        if avar is None:
            return coords
        return avar.map_coordinates(coords)

    def map_variation_coordinates(self, coords) -> list[int] | None:
        """Apply only the avar mapping to already normalized coordinates."""
        fvar = self._table(b'fvar')
        if fvar is None or len(coords) != len(fvar.axes):
            return None
        avar = self._table(b'avar')
        if avar is None:
            return list(coords)
        return avar.map_coordinates(coords)

    def _metrics_delta(self, tag: bytes, glyph_id: int, coords, advance: bool) -> float | None:
        table = self._table(tag)
        if table is None or not self._valid_glyph(glyph_id):
            return None
        try:
            if advance:
                return table.advance_delta(glyph_id, coords)
            return table.side_bearing_delta(glyph_id, coords)
        except FontError as e:
            logger.debug("%r delta for glyph %d failed: %s", tag, glyph_id, e)
            return None

    def glyph_hor_advance_variation(self, glyph_id: int, coords) -> float | None:
        return self._metrics_delta(b'HVAR', glyph_id, coords, advance=True)

    def glyph_hor_side_bearing_variation(self, glyph_id: int, coords) -> float | None:
        return self._metrics_delta(b'HVAR', glyph_id, coords, advance=False)

    def glyph_ver_advance_variation(self, glyph_id: int, coords) -> float | None:
        return self._metrics_delta(b'VVAR', glyph_id, coords, advance=True)

    def glyph_ver_side_bearing_variation(self, glyph_id: int, coords) -> float | None:
        return self._metrics_delta(b'VVAR', glyph_id, coords, advance=False)

    def metrics_variation(self, tag, coords) -> float | None:
        """MVAR delta for a metric tag such as 'hasc' or 'xhgt'."""
        mvar = self._table(b'MVAR')
        if mvar is None:
            return None
        try:
            return mvar.metric_delta(make_tag(tag), coords)
        except FontError as e:
            logger.debug("MVAR delta for %r failed: %s", tag, e)
            return None


def _parse_required(directory, tag: bytes, parser):
    data = directory.table(tag)
    if data is None:
        logger.warning("Required table %r is missing", tag)
        return None
    result = parser(data)
    if result is None:
        logger.warning("Required table %r is malformed", tag)
    return result

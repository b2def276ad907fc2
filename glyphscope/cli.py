# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
GlyphScope command-line inspector.

    glyphscope DejaVuSans.ttf info
    glyphscope DejaVuSans.ttf cmap A U+00E9
    glyphscope Inter.ttf outline --char A --coords 700,0
    glyphscope Inter.ttf render --char g -o g.svg
"""

import logging
import sys

from . import init_log
from .cli_args import build_argument_parser, parse_codepoint, parse_coordinates
from .core.outline import RecordingBuilder
from .core.types import TableName, tag_to_str
from .font import Font

_TABLES_BY_TAG = {name.value: name for name in TableName}


def _load_font(path: str, index: int) -> Font | None:
    try:
        with open(path, "rb") as f:
            data = f.read()
    except FileNotFoundError:
        print(f"GlyphScope Error: Font file '{path}' not found.")
        return None
    except PermissionError:
        print(f"GlyphScope Error: Permission denied reading '{path}'.")
        return None
    except OSError as e:
        print(f"GlyphScope Error: Cannot read '{path}': {e}")
        return None

    font = Font.from_data(data, index)
    if font is None:
        print(f"GlyphScope Error: '{path}' is not a usable font (index {index}).")
    return font


def _resolve_glyph(font: Font, args) -> int | None:
    try:
        if args.char:
            gid = font.glyph_index(parse_codepoint(args.glyph))
            if gid is None:
                print(f"GlyphScope Error: No glyph for '{args.glyph}'.")
            return gid
        return int(args.glyph)
    except ValueError as e:
        print(f"GlyphScope Error: {e}")
        return None


def _resolve_coords(font: Font, args):
    """Return (ok, coords); coords is None for the default instance."""
    if not args.coords:
        return True, None
    try:
        user = parse_coordinates(args.coords)
    except ValueError as e:
        print(f"GlyphScope Error: {e}")
        return False, None
    coords = font.normalize_variation_coordinates(user)
    if coords is None:
        print(f"GlyphScope Error: Font has {font.variation_axes_count()} axes, "
              f"got {len(user)} values.")
        return False, None
    return True, coords


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------

def _cmd_info(font: Font, args) -> int:
    print(f"Family:           {font.family_name()}")
    print(f"PostScript name:  {font.post_script_name()}")
    print(f"Glyphs:           {font.number_of_glyphs}")
    print(f"Units per em:     {font.units_per_em}")
    print(f"Ascender:         {font.ascender()}")
    print(f"Descender:        {font.descender()}")
    print(f"Line gap:         {font.line_gap()}")
    print(f"Height:           {font.height()}")
    print(f"x-height:         {font.x_height()}")
    print(f"Cap height:       {font.capital_height()}")
    print(f"Weight / width:   {font.weight()} / {font.width()}")
    flags = [name for name, on in (("regular", font.is_regular()), ("italic", font.is_italic()),
                                   ("bold", font.is_bold()), ("oblique", font.is_oblique())) if on]
    print(f"Style:            {', '.join(flags) or '-'}")
    underline = font.underline_metrics()
    if underline is not None:
        print(f"Underline:        position {underline.position}, thickness {underline.thickness}")
    strikeout = font.strikeout_metrics()
    if strikeout is not None:
        print(f"Strikeout:        position {strikeout.position}, thickness {strikeout.thickness}")
    print(f"Variable:         {'yes' if font.is_variable() else 'no'}")
    return 0


def _cmd_tables(font: Font, args) -> int:
    for tag in font.table_tags():
        name = _TABLES_BY_TAG.get(tag)
        if name is None:
            status = "not decoded"
        elif font.has_table(name):
            status = "ok"
        else:
            status = "invalid"
        print(f"{tag_to_str(tag)}  {status}")
    return 0


def _cmd_cmap(font: Font, args) -> int:
    try:
        vs = parse_codepoint(args.vs) if args.vs else None
        codepoints = [parse_codepoint(c) for c in args.codepoints]
    except ValueError as e:
        print(f"GlyphScope Error: {e}")
        return 1
    for cp in codepoints:
        if vs is None:
            gid = font.glyph_index(cp)
        else:
            gid = font.glyph_variation_index(cp, vs)
        name = font.glyph_name(gid) if gid is not None else None
        print(f"U+{cp:04X}  {gid if gid is not None else 0}" + (f"  {name}" if name else ""))
    return 0


def _cmd_names(font: Font, args) -> int:
    for i in range(font.name_records_count()):
        record = font.name_record(i)
        if record is None:
            continue
        raw = font.name_record_string(i) or b""
        if record.platform_id in (0, 3):
            text = raw.decode("utf-16-be", errors="replace")
        else:
            text = raw.decode("mac_roman", errors="replace")
        print(f"{i:3d}  {record.platform_id} {record.encoding_id} 0x{record.language_id:04X} "
              f"id={record.name_id:<3d} {text!r}")
    return 0


def _cmd_outline(font: Font, args) -> int:
    gid = _resolve_glyph(font, args)
    if gid is None:
        return 1
    ok, coords = _resolve_coords(font, args)
    if not ok:
        return 1

    recorder = RecordingBuilder()
    if coords is None:
        rect = font.outline_glyph(gid, recorder)
    else:
        rect = font.outline_variable_glyph(gid, coords, recorder)
    if rect is None:
        print(f"GlyphScope Error: Glyph {gid} could not be outlined.")
        return 1
    print(f"bbox {rect.x_min} {rect.y_min} {rect.x_max} {rect.y_max}")
    print(recorder.to_svg_path())
    return 0


def _cmd_axes(font: Font, args) -> int:
    if not font.is_variable():
        print("Font has no variation axes.")
        return 0
    for i in range(font.variation_axes_count()):
        axis = font.variation_axis(i)
        hidden = " (hidden)" if axis.hidden else ""
        print(f"{tag_to_str(axis.tag)}  {axis.min_value:g} {axis.def_value:g} {axis.max_value:g}"
              f"  name id {axis.name_id}{hidden}")
    return 0


def _cmd_normalize(font: Font, args) -> int:
    try:
        user = parse_coordinates(args.values)
    except ValueError as e:
        print(f"GlyphScope Error: {e}")
        return 1
    coords = font.normalize_variation_coordinates(user)
    if coords is None:
        print(f"GlyphScope Error: Font has {font.variation_axes_count()} axes, got {len(user)} values.")
        return 1
    print(" ".join(str(c) for c in coords))
    return 0


def _cmd_render(font: Font, args) -> int:
    try:
        from .devices.cairo_outline import render_glyph
    except ImportError as e:
        print(f"GlyphScope Error: Missing required Python module: {e}")
        print("      Install pycairo for rendering: pip install glyphscope[render]")
        return 1

    gid = _resolve_glyph(font, args)
    if gid is None:
        return 1
    ok, coords = _resolve_coords(font, args)
    if not ok:
        return 1
    if not render_glyph(font, gid, args.outputfile, args.size, coords, args.antialias):
        print(f"GlyphScope Error: Glyph {gid} could not be outlined.")
        return 1
    print(f"Wrote {args.outputfile}")
    return 0


_COMMANDS = {
    "info": _cmd_info,
    "tables": _cmd_tables,
    "cmap": _cmd_cmap,
    "names": _cmd_names,
    "outline": _cmd_outline,
    "axes": _cmd_axes,
    "normalize": _cmd_normalize,
    "render": _cmd_render,
}


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the GlyphScope inspector.

    Returns:
        Exit code: 0 for success, 1 for error
    """
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        init_log(logging.DEBUG)

    font = _load_font(args.fontfile, args.index)
    if font is None:
        return 1
    with font:
        return _COMMANDS[args.command](font, args)


if __name__ == "__main__":
    sys.exit(main())

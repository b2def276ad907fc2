# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
CLI argument parsing for GlyphScope.

Handles command-line argument definition and the small value syntaxes the
subcommands accept (codepoints, glyph selectors, axis coordinates).
"""

from __future__ import annotations

import argparse

from . import __version__


def parse_codepoint(arg: str) -> int:
    """Parse a codepoint given as ``U+0041``, ``0x41``, ``65`` or a single character.

    Raises:
        ValueError: If the text is not a codepoint.
    """
    text = arg.strip()
    if not text:
        raise ValueError("Empty codepoint")
    upper = text.upper()
    if upper.startswith("U+"):
        try:
            return int(text[2:], 16)
        except ValueError:
            raise ValueError(f"Invalid codepoint: '{arg}'")
    if upper.startswith("0X"):
        try:
            return int(text, 16)
        except ValueError:
            raise ValueError(f"Invalid codepoint: '{arg}'")
    if len(text) == 1:
        return ord(text)
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"Invalid codepoint: '{arg}'")


def parse_coordinates(arg: str) -> list[float]:
    """Parse comma-separated axis values, e.g. ``400,100`` or ``wght=400``.

    Tagged values are returned in the order given; the caller matches them
    to axes.
    """
    values = []
    for part in arg.split(","):
        part = part.strip()
        if not part:
            continue
        if "=" in part:
            part = part.split("=", 1)[1]
        try:
            values.append(float(part))
        except ValueError:
            raise ValueError(f"Invalid axis value: '{part}'")
    if not values:
        raise ValueError("No axis values given")
    return values


def _add_glyph_selector(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("glyph", help="Glyph id, or a character/codepoint when --char is given")
    parser.add_argument(
        "-c", "--char", action="store_true",
        help="Interpret GLYPH as a character or codepoint (U+0041, 0x41) instead of a glyph id"
    )
    parser.add_argument(
        "--coords",
        help="User-space axis values for variable fonts, comma-separated in fvar order (e.g. 700,100)"
    )


def build_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the GlyphScope argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="glyphscope",
        description="GlyphScope - TrueType/OpenType Font Inspector",
    )

    parser.add_argument(
        "-V", "--version", action="version",
        version=f"GlyphScope {__version__}"
    )
    parser.add_argument("fontfile", help="Font file (.ttf, .otf, .ttc, .otc)")
    parser.add_argument(
        "-i", "--index", type=int, default=0,
        help="Font index inside a collection (default: 0)"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    commands.add_parser("info", help="Print font-wide facts and style flags")
    commands.add_parser("tables", help="List table directory records and parse status")

    cmap = commands.add_parser("cmap", help="Map codepoints to glyph ids")
    cmap.add_argument("codepoints", nargs="+", help="Characters or codepoints (A, U+0041, 0x41, 65)")
    cmap.add_argument("--vs", help="Variation selector codepoint (e.g. U+FE0F)")

    commands.add_parser("names", help="Dump name table records")

    outline = commands.add_parser("outline", help="Print a glyph outline as SVG path data")
    _add_glyph_selector(outline)

    commands.add_parser("axes", help="List variation axes")

    normalize = commands.add_parser("normalize", help="Normalize user-space axis values to F2Dot14")
    normalize.add_argument("values", help="Comma-separated axis values in fvar order")

    render = commands.add_parser(
        "render", help="Render a glyph preview with Cairo (PNG or SVG); needs the render extra"
    )
    _add_glyph_selector(render)
    render.add_argument(
        "-o", "--output", dest="outputfile", default="glyph.png",
        help="Output file; a .svg extension selects SVG (default: glyph.png)"
    )
    render.add_argument(
        "-s", "--size", type=int, default=512,
        help="Canvas size in pixels (default: 512)"
    )
    render.add_argument(
        "--antialias",
        choices=["none", "fast", "good", "best", "gray", "subpixel"],
        default="gray",
        help="Set anti-aliasing mode for Cairo rendering (default: gray)"
    )

    return parser

# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Exception hierarchy for the table decoders and outline machinery.

Decoders raise these internally; the Font handle catches them at its
boundary and turns them into the None / False / 0 sentinels of the public
query API. Nothing outside glyphscope should ever see one.
"""


class FontError(Exception):
    """Base class for all parsing errors."""
    pass


class StreamError(FontError):
    """Read past the end of a byte range."""
    pass


class TableError(FontError):
    """A table is structurally malformed."""
    pass


class CFFError(FontError):
    """Error during CFF/CFF2 parsing."""
    pass


class Type2Error(FontError):
    """Error during Type 2 charstring execution."""
    pass


class OutlineError(FontError):
    """Glyph outline could not be produced."""
    pass

# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
GlyphScope - Public API

Read-only TrueType/OpenType parsing: glyph lookup, metrics, outline
extraction and variable-font coordinate resolution over a caller-owned
byte buffer.

**Usage:**
```python
import glyphscope

with glyphscope.Font.from_data(data) as font:
    gid = font.glyph_index(ord('A'))
    rect = font.outline_glyph(gid, my_builder)
```

The library logs through the ``glyphscope`` logger and installs only a
NullHandler; call init_log() to see diagnostics on stderr.
"""

import logging
import threading

from .core.error import (
    CFFError, FontError, OutlineError, StreamError, TableError, Type2Error,
)
from .core.outline import RecordingBuilder
from .core.table_directory import fonts_in_collection
from .core.types import (
    CLOSE_PATH, CURVE_TO, LINE_TO, MOVE_TO, QUAD_TO,
    GlyphClass, LineMetrics, NameRecord, OutlineBuilder, Rect, ScriptMetrics,
    TableName, VariationAxis, make_tag, tag_to_str,
)
from .font import Font

__version__ = "0.4.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

_log_lock = threading.Lock()
_log_handler = None


def init_log(level=logging.WARNING) -> logging.Handler:
    """Attach a stderr handler to the glyphscope logger (once per process).

    Later calls only adjust the level. Logging is purely diagnostic; no
    query behaves differently with or without it.
    """
    global _log_handler
    logger = logging.getLogger(__name__)
    with _log_lock:
        if _log_handler is None:
            _log_handler = logging.StreamHandler()
            _log_handler.setFormatter(
                logging.Formatter("%(levelname)s %(name)s: %(message)s"))
            logger.addHandler(_log_handler)
        logger.setLevel(level)
    return _log_handler


__all__ = [
    "Font", "fonts_in_collection", "init_log",
    "OutlineBuilder", "RecordingBuilder",
    "GlyphClass", "LineMetrics", "NameRecord", "Rect", "ScriptMetrics",
    "TableName", "VariationAxis", "make_tag", "tag_to_str",
    "MOVE_TO", "LINE_TO", "QUAD_TO", "CURVE_TO", "CLOSE_PATH",
    "FontError", "StreamError", "TableError", "CFFError", "Type2Error", "OutlineError",
]

# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Bounded Binary Cursor

Big-endian reads over a byte range with every access checked against the
end of that range. Font data is attacker controlled, so no declared length
or offset is trusted: a read that would run past the range raises
StreamError instead of returning short data.

The underlying buffer is wrapped in a memoryview, so sub-ranges handed to
table decoders share memory with the caller's buffer instead of copying it.
"""

import struct

from .error import StreamError

_U8 = struct.Struct('>B')
_I8 = struct.Struct('>b')
_U16 = struct.Struct('>H')
_I16 = struct.Struct('>h')
_U32 = struct.Struct('>I')
_I32 = struct.Struct('>i')

_STRUCT_CACHE = {}


def _get_struct(fmt):
    s = _STRUCT_CACHE.get(fmt)
    if s is None:
        s = struct.Struct(fmt)
        _STRUCT_CACHE[fmt] = s
    return s


def as_view(data):
    """Return a read-only byte memoryview over data without copying."""
    if isinstance(data, memoryview):
        if data.format != 'B' or data.ndim != 1:
            data = data.cast('B')
        return data.toreadonly()
    return memoryview(data).toreadonly()


def sub_range(data, offset, length):
    """Return data[offset:offset + length], or raise if it is out of bounds."""
    if offset < 0 or length < 0 or offset + length > len(data):
        raise StreamError(f"range {offset}+{length} outside {len(data)} bytes")
    return data[offset:offset + length]


def read_at(data, fmt, offset):
    """Unpack a single struct format at an absolute offset."""
    s = _get_struct(fmt)
    if offset < 0 or offset + s.size > len(data):
        raise StreamError(f"read of {s.size} bytes at {offset} outside {len(data)} bytes")
    values = s.unpack_from(data, offset)
    return values[0] if len(values) == 1 else values


def f2dot14_to_float(value):
    """Convert a raw F2Dot14 integer to float."""
    return value / 16384.0


def float_to_f2dot14(value):
    """Convert a float to a raw F2Dot14 integer, clamped to the int16 range."""
    raw = int(round(value * 16384.0))
    return max(-32768, min(32767, raw))


def fixed_to_float(value):
    """Convert a raw 16.16 Fixed integer to float."""
    return value / 65536.0


class Stream:
    """Forward-reading cursor over a byte range."""
    __slots__ = ('data', 'offset')

    def __init__(self, data, offset=0):
        self.data = data
        self.offset = offset

    def __len__(self):
        return len(self.data)

    def at_end(self):
        return self.offset >= len(self.data)

    def remaining(self):
        return max(0, len(self.data) - self.offset)

    def tail(self):
        """Bytes from the current position to the end of the range."""
        if self.offset > len(self.data):
            raise StreamError("cursor past end of data")
        return self.data[self.offset:]

    def skip(self, n):
        self.offset += n

    def _unpack(self, s):
        offset = self.offset
        if offset < 0 or offset + s.size > len(self.data):
            raise StreamError(
                f"read of {s.size} bytes at {offset} outside {len(self.data)} bytes")
        self.offset = offset + s.size
        return s.unpack_from(self.data, offset)[0]

    def read_u8(self):
        return self._unpack(_U8)

    def read_i8(self):
        return self._unpack(_I8)

    def read_u16(self):
        return self._unpack(_U16)

    def read_i16(self):
        return self._unpack(_I16)

    def read_u24(self):
        b = self.read_bytes(3)
        return (b[0] << 16) | (b[1] << 8) | b[2]

    def read_u32(self):
        return self._unpack(_U32)

    def read_i32(self):
        return self._unpack(_I32)

    def read_fixed(self):
        """Read a 16.16 Fixed value as float."""
        return fixed_to_float(self.read_i32())

    def read_f2dot14(self):
        """Read a raw F2Dot14 value (int16, not converted)."""
        return self.read_i16()

    def read_tag(self):
        return bytes(self.read_bytes(4))

    def read_offset(self, off_size):
        """Read an offset of off_size bytes (1-4), big-endian unsigned."""
        if off_size == 1:
            return self.read_u8()
        elif off_size == 2:
            return self.read_u16()
        elif off_size == 3:
            return self.read_u24()
        elif off_size == 4:
            return self.read_u32()
        raise StreamError(f"Invalid offSize: {off_size}")

    def read_bytes(self, n):
        offset = self.offset
        if n < 0 or offset < 0 or offset + n > len(self.data):
            raise StreamError(f"read of {n} bytes at {offset} outside {len(self.data)} bytes")
        self.offset = offset + n
        return self.data[offset:offset + n]

    def read_array(self, fmt_char, count):
        """Read count big-endian values of one struct type (e.g. 'H')."""
        if count <= 0:
            return ()
        s = _get_struct(f'>{count}{fmt_char}')
        offset = self.offset
        if offset < 0 or offset + s.size > len(self.data):
            raise StreamError(
                f"array of {count}{fmt_char} at {offset} outside {len(self.data)} bytes")
        self.offset = offset + s.size
        return s.unpack_from(self.data, offset)

# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from glyphscope.core.error import FontError, StreamError
from glyphscope.core.stream import (
    Stream, as_view, f2dot14_to_float, fixed_to_float, float_to_f2dot14, read_at, sub_range,
)


def test_reads_are_big_endian():
    s = Stream(b'\x01\x02\xff\xfe\x00\x01\x00\x00\x12\x34\x56')
    assert s.read_u16() == 0x0102
    assert s.read_i16() == -2
    assert s.read_fixed() == 1.0
    assert s.read_u24() == 0x123456
    assert s.at_end()


def test_read_past_end_raises_and_keeps_position():
    s = Stream(b'\x00\x01\x02')
    s.read_u16()
    with pytest.raises(StreamError):
        s.read_u16()
    assert s.offset == 2
    assert s.read_u8() == 2


def test_stream_error_is_a_font_error():
    assert issubclass(StreamError, FontError)


def test_read_array_bounds():
    s = Stream(b'\x00\x01\x00\x02\x00\x03')
    assert s.read_array('H', 3) == (1, 2, 3)
    assert Stream(b'').read_array('H', 0) == ()
    with pytest.raises(StreamError):
        Stream(b'\x00\x01').read_array('H', 2)


def test_read_offset_sizes():
    s = Stream(b'\x01\x00\x02\x00\x00\x03\x00\x00\x00\x04')
    assert s.read_offset(1) == 1
    assert s.read_offset(2) == 2
    assert s.read_offset(3) == 3
    assert s.read_offset(4) == 4
    with pytest.raises(StreamError):
        Stream(b'\x00' * 8).read_offset(5)


def test_read_at_and_sub_range():
    data = as_view(b'\x00\x10\x00\x20')
    assert read_at(data, '>H', 2) == 0x20
    assert read_at(data, '>HH', 0) == (0x10, 0x20)
    with pytest.raises(StreamError):
        read_at(data, '>I', 1)
    with pytest.raises(StreamError):
        read_at(data, '>H', -1)

    assert bytes(sub_range(data, 1, 2)) == b'\x10\x00'
    with pytest.raises(StreamError):
        sub_range(data, 3, 2)


def test_as_view_shares_memory_and_is_read_only():
    buffer = bytearray(b'abcd')
    view = as_view(buffer)
    buffer[0] = ord('z')
    assert bytes(view[0:1]) == b'z'
    with pytest.raises(TypeError):
        view[0] = 0


def test_fixed_point_helpers():
    assert f2dot14_to_float(16384) == 1.0
    assert f2dot14_to_float(-8192) == -0.5
    assert float_to_f2dot14(0.5) == 8192
    assert float_to_f2dot14(4.0) == 32767
    assert float_to_f2dot14(-4.0) == -32768
    assert fixed_to_float(0x00018000) == 1.5

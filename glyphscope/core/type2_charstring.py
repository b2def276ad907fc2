# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
Type 2 CharString Interpreter for CFF and CFF2 Fonts

Runs the glyph programs of CFF and CFF2 fonts and sends the resulting path
to an OutlineBuilder. Notes on the program format:
- A CFF glyph may start with its advance width as an extra operand of the
  first stack-clearing operator; it is dropped. CFF2 programs have none.
- Operand byte 255 is a 16.16 fixed-point value.
- Flex is built in as four 12-escaped operators.
- Path operators repeat over their operands (rlineto takes N pairs).
- Mask bytes after hintmask/cntrmask are skipped; hints are not applied.
- Each moveto and the end of the glyph close the open subpath.
- endchar with four extra operands composes a seac accented glyph.
- CFF2 adds blend and vsindex and drops endchar and return.
"""

import logging
import math
import operator

from .cff_parser import STANDARD_ENCODING
from .error import CFFError, StreamError, Type2Error
from .stream import Stream

logger = logging.getLogger(__name__)

MAX_SUBR_NESTING = 10
MAX_ARGUMENTS_STACK_LEN = 48
MAX_ARGUMENTS_STACK_LEN_CFF2 = 513

_TRANSIENT_ARRAY_LEN = 32


def _finite(value) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise Type2Error("arithmetic result is not a finite number")
    return value


def _subr_bias(n_subrs: int) -> int:
    """Subroutine bias from the subr count (107, 1131 or 32768)."""
    if n_subrs < 1240:
        return 107
    elif n_subrs < 33900:
        return 1131
    else:
        return 32768


class Type2CharStringInterpreter:
    """Type 2 CharString execution engine.

    One instance runs one glyph program. `coords` are normalized F2Dot14
    coordinates for CFF2 blending; None evaluates the default instance.
    """

    def __init__(self, table, builder, glyph_id: int, coords=None,
                 offset: tuple[float, float] = (0.0, 0.0), in_seac: bool = False) -> None:
        self.table = table
        self.builder = builder
        self.is_cff2 = table.is_cff2
        self.global_subrs = table.global_subrs
        self.local_subrs = table.local_subrs_for(glyph_id)
        self.max_stack = MAX_ARGUMENTS_STACK_LEN_CFF2 if self.is_cff2 else MAX_ARGUMENTS_STACK_LEN
        self.coords = coords
        self.offset = offset
        self.in_seac = in_seac

        self.stack: list[float] = []
        self.current_point = (0.0, 0.0)
        self.width_parsed = self.is_cff2
        self.has_move_to = False
        self.path_open = False
        self.finished = False

        self.num_h_hints = 0
        self.num_v_hints = 0

        self.transient_array = [0.0] * _TRANSIENT_ARRAY_LEN
        self.depth = 0

        self.vsindex = table.vsindex_for(glyph_id) if self.is_cff2 else 0
        self.scalars: list[float] | None = None

    def execute(self, charstring_data) -> None:
        """Execute a Type 2 charstring. Raises Type2Error on malformed programs."""
        try:
            self._execute_bytes(charstring_data)
        except StreamError as e:
            raise Type2Error(f"truncated charstring: {e}") from e

        if not self.is_cff2 and not self.finished:
            raise Type2Error("charstring has no endchar")
        self._close_path()

    def _push(self, value: float) -> None:
        if len(self.stack) >= self.max_stack:
            raise Type2Error("argument stack limit reached")
        self.stack.append(value)

    def _pop_int(self) -> int:
        """Pop an operand used as an index or count."""
        if not self.stack:
            raise Type2Error("missing integer operand")
        value = self.stack.pop()
        if not math.isfinite(value):
            raise Type2Error(f"operand {value} is not a finite number")
        return int(value)

    def _execute_bytes(self, data) -> None:
        """Decode operands and operators until the data or a return runs out."""
        s = Stream(data)

        while not s.at_end():
            b0 = s.read_u8()

            if 32 <= b0 <= 246:
                self._push(float(b0 - 139))

            elif 247 <= b0 <= 250:
                self._push(float((b0 - 247) * 256 + s.read_u8() + 108))

            elif 251 <= b0 <= 254:
                self._push(float(-(b0 - 251) * 256 - s.read_u8() - 108))

            elif b0 == 255:
                # 16.16 fixed-point number
                self._push(s.read_i32() / 65536.0)

            elif b0 == 28:
                # 3-byte signed integer (byte 28 is a number, not an operator)
                self._push(float(s.read_i16()))

            elif b0 == 12:
                self._execute_operator_12(s.read_u8())

            elif b0 == 19 or b0 == 20:
                # hintmask / cntrmask: consume implicit vstem args then the mask bytes
                self._handle_hint_mask()
                s.read_bytes((self.num_h_hints + self.num_v_hints + 7) // 8)

            elif b0 == 10 or b0 == 29:
                self._call_subr(self.local_subrs if b0 == 10 else self.global_subrs)
                if self.finished:
                    return

            elif b0 == 11:
                if self.is_cff2:
                    raise Type2Error("return is not allowed in CFF2")
                return

            elif b0 == 14:
                if self.is_cff2:
                    raise Type2Error("endchar is not allowed in CFF2")
                self._op_endchar()
                return

            else:
                self._execute_operator(b0)

    # -------------------------------------------------------------------
    # Width handling
    # -------------------------------------------------------------------

    def _check_width(self, expected_args: int) -> None:
        """Drop the optional width operand before the first stack-clearing operator.

        If the stack has one extra argument beyond what the operator expects,
        the bottom element is the width.
        """
        if self.width_parsed:
            return
        self.width_parsed = True
        if len(self.stack) > expected_args:
            self.stack.pop(0)

    # -------------------------------------------------------------------
    # Path helpers
    # -------------------------------------------------------------------

    def _point(self, x: float, y: float) -> tuple[float, float]:
        return x + self.offset[0], y + self.offset[1]

    def _close_path(self) -> None:
        if self.path_open:
            self.builder.close()
            self.path_open = False

    def _do_moveto(self, dx: float, dy: float) -> None:
        """Relative moveto; closes the previous subpath."""
        self._close_path()
        self.current_point = (self.current_point[0] + dx, self.current_point[1] + dy)
        self.has_move_to = True
        self.path_open = True
        self.builder.move_to(*self._point(*self.current_point))

    def _do_lineto(self, dx: float, dy: float) -> None:
        if not self.has_move_to:
            raise Type2Error("lineto before moveto")
        self.current_point = (self.current_point[0] + dx, self.current_point[1] + dy)
        self.builder.line_to(*self._point(*self.current_point))

    def _do_curveto(self, dx1: float, dy1: float, dx2: float, dy2: float, dx3: float, dy3: float) -> None:
        if not self.has_move_to:
            raise Type2Error("curveto before moveto")
        x1 = self.current_point[0] + dx1
        y1 = self.current_point[1] + dy1
        x2 = x1 + dx2
        y2 = y1 + dy2
        x3 = x2 + dx3
        y3 = y2 + dy3
        self.current_point = (x3, y3)
        self.builder.curve_to(*self._point(x1, y1), *self._point(x2, y2), *self._point(x3, y3))

    # -------------------------------------------------------------------
    # Operator dispatch
    # -------------------------------------------------------------------

    def _run_operator(self, table: dict, op: int, name: str) -> None:
        handler = table.get(op)
        if handler is None:
            raise Type2Error(f"invalid operator {name}")
        handler(self)

    def _execute_operator(self, op: int) -> None:
        self._run_operator(_OPERATORS, op, str(op))

    def _execute_operator_12(self, sub_op: int) -> None:
        self._run_operator(_OPERATORS_12, sub_op, f"12 {sub_op}")

    # -------------------------------------------------------------------
    # Hint operators (stack-clearing, count stems, no path output)
    # -------------------------------------------------------------------

    def _op_hstem(self) -> None:
        """hstem / hstemhm: horizontal stem hints."""
        self._check_width(len(self.stack) // 2 * 2)
        self.num_h_hints += len(self.stack) // 2
        self.stack.clear()

    def _op_vstem(self) -> None:
        """vstem / vstemhm: vertical stem hints."""
        self._check_width(len(self.stack) // 2 * 2)
        self.num_v_hints += len(self.stack) // 2
        self.stack.clear()

    def _handle_hint_mask(self) -> None:
        """hintmask / cntrmask: pending operands are implicit vstem hints."""
        if self.stack:
            self._op_vstem()
        else:
            self._check_width(0)

    # -------------------------------------------------------------------
    # Path construction operators
    # -------------------------------------------------------------------

    def _op_rmoveto(self) -> None:
        """rmoveto: dx dy"""
        self._check_width(2)
        if len(self.stack) != 2:
            raise Type2Error("rmoveto expects 2 operands")
        dx, dy = self.stack
        self.stack.clear()
        self._do_moveto(dx, dy)

    def _op_hmoveto(self) -> None:
        """hmoveto: dx"""
        self._check_width(1)
        if len(self.stack) != 1:
            raise Type2Error("hmoveto expects 1 operand")
        dx = self.stack.pop()
        self._do_moveto(dx, 0.0)

    def _op_vmoveto(self) -> None:
        """vmoveto: dy"""
        self._check_width(1)
        if len(self.stack) != 1:
            raise Type2Error("vmoveto expects 1 operand")
        dy = self.stack.pop()
        self._do_moveto(0.0, dy)

    def _op_rlineto(self) -> None:
        """rlineto: {dx dy}+ multiple relative lines."""
        args = self.stack[:]
        self.stack.clear()
        if not args or len(args) % 2:
            raise Type2Error("rlineto expects pairs of operands")
        for i in range(0, len(args), 2):
            self._do_lineto(args[i], args[i + 1])

    def _op_hlineto(self) -> None:
        """hlineto: alternating horizontal/vertical lines, starting horizontal."""
        self._alternating_lines(horizontal=True)

    def _op_vlineto(self) -> None:
        """vlineto: alternating vertical/horizontal lines, starting vertical."""
        self._alternating_lines(horizontal=False)

    def _alternating_lines(self, horizontal: bool) -> None:
        args = self.stack[:]
        self.stack.clear()
        if not args:
            raise Type2Error("line operator without operands")
        for val in args:
            if horizontal:
                self._do_lineto(val, 0.0)
            else:
                self._do_lineto(0.0, val)
            horizontal = not horizontal

    def _op_rrcurveto(self) -> None:
        """rrcurveto: {dx1 dy1 dx2 dy2 dx3 dy3}+ multiple curves."""
        args = self.stack[:]
        self.stack.clear()
        if not args or len(args) % 6:
            raise Type2Error("rrcurveto expects groups of 6 operands")
        for i in range(0, len(args), 6):
            self._do_curveto(*args[i:i + 6])

    def _op_hhcurveto(self) -> None:
        """hhcurveto: dy1? {dxa dxb dyb dxc}+, curves that start and end flat.

        An odd leading operand is the start slope of the first curve only.
        """
        args = self.stack[:]
        self.stack.clear()
        i = 0
        dy1_extra = 0.0
        if len(args) % 4 == 1:
            dy1_extra = args[0]
            i = 1
        if len(args) < 4 or (len(args) - i) % 4:
            raise Type2Error("hhcurveto has a bad operand count")

        while i < len(args):
            dxa, dxb, dyb, dxc = args[i:i + 4]
            self._do_curveto(dxa, dy1_extra, dxb, dyb, dxc, 0.0)
            dy1_extra = 0.0
            i += 4

    def _op_vvcurveto(self) -> None:
        """vvcurveto: dx1? {dya dxb dyb dyc}+, the vertical twin of hhcurveto."""
        args = self.stack[:]
        self.stack.clear()
        i = 0
        dx1_extra = 0.0
        if len(args) % 4 == 1:
            dx1_extra = args[0]
            i = 1
        if len(args) < 4 or (len(args) - i) % 4:
            raise Type2Error("vvcurveto has a bad operand count")

        while i < len(args):
            dya, dxb, dyb, dyc = args[i:i + 4]
            self._do_curveto(dx1_extra, dya, dxb, dyb, 0.0, dyc)
            dx1_extra = 0.0
            i += 4

    def _op_hvcurveto(self) -> None:
        """hvcurveto: alternating h-start/v-end and v-start/h-end curves."""
        self._alternating_curves(start_horizontal=True)

    def _op_vhcurveto(self) -> None:
        """vhcurveto: alternating v-start/h-end and h-start/v-end curves."""
        self._alternating_curves(start_horizontal=False)

    def _alternating_curves(self, start_horizontal: bool) -> None:
        """Shared logic for hvcurveto / vhcurveto.

        The last curve may take a fifth operand for its final tangent.
        """
        args = self.stack[:]
        self.stack.clear()
        n = len(args)
        if n < 4 or n % 4 not in (0, 1):
            raise Type2Error("hvcurveto/vhcurveto has a bad operand count")

        i = 0
        phase = start_horizontal
        while i + 3 < n:
            last = (n - i) == 5
            extra = args[i + 4] if last else 0.0
            if phase:
                # H-start curve: dx1 dx2 dy2 dy3 [dxf]
                dx1, dx2, dy2, dy3 = args[i:i + 4]
                self._do_curveto(dx1, 0.0, dx2, dy2, extra, dy3)
            else:
                # V-start curve: dy1 dx2 dy2 dx3 [dyf]
                dy1, dx2, dy2, dx3 = args[i:i + 4]
                self._do_curveto(0.0, dy1, dx2, dy2, dx3, extra)
            i += 5 if last else 4
            phase = not phase

    def _op_rcurveline(self) -> None:
        """rcurveline: {dx1 dy1 dx2 dy2 dx3 dy3}+ dxl dyl, curves then one line."""
        args = self.stack[:]
        self.stack.clear()
        if len(args) < 8 or (len(args) - 2) % 6:
            raise Type2Error("rcurveline has a bad operand count")
        curve_end = len(args) - 2
        for i in range(0, curve_end, 6):
            self._do_curveto(*args[i:i + 6])
        self._do_lineto(args[curve_end], args[curve_end + 1])

    def _op_rlinecurve(self) -> None:
        """rlinecurve: {dx dy}+ dx1 dy1 dx2 dy2 dx3 dy3, lines then one curve."""
        args = self.stack[:]
        self.stack.clear()
        if len(args) < 8 or (len(args) - 6) % 2:
            raise Type2Error("rlinecurve has a bad operand count")
        curve_start = len(args) - 6
        for i in range(0, curve_start, 2):
            self._do_lineto(args[i], args[i + 1])
        self._do_curveto(*args[curve_start:])

    # -------------------------------------------------------------------
    # endchar / seac
    # -------------------------------------------------------------------

    def _op_endchar(self) -> None:
        """endchar: finish character, or compose base + accent (seac form)."""
        self._check_width(4 if len(self.stack) >= 4 else 0)

        if len(self.stack) == 4:
            achar = self._pop_int()
            bchar = self._pop_int()
            adx, ady = self.stack
            self.stack.clear()
            self._close_path()
            self._seac(adx, ady, bchar, achar)
        elif self.stack:
            raise Type2Error("endchar with unexpected operands")

        self._close_path()
        self.finished = True

    def _seac(self, adx: float, ady: float, bchar: int, achar: int) -> None:
        if self.in_seac:
            raise Type2Error("nested seac")
        base_gid = self._standard_glyph(bchar)
        accent_gid = self._standard_glyph(achar)
        for gid, offset in ((base_gid, (0.0, 0.0)), (accent_gid, (adx, ady))):
            component = Type2CharStringInterpreter(
                self.table, self.builder, gid, offset=offset, in_seac=True)
            component.execute(self.table.char_strings.get(gid))

    def _standard_glyph(self, code: int) -> int:
        sid = STANDARD_ENCODING.get(code)
        gid = self.table.glyph_for_sid(sid) if sid is not None else None
        if gid is None:
            raise Type2Error(f"seac component code {code} has no glyph")
        return gid

    # -------------------------------------------------------------------
    # Subroutine operators
    # -------------------------------------------------------------------

    def _call_subr(self, subrs) -> None:
        """callsubr / callgsubr: pop index, apply bias, execute subroutine."""
        if not self.stack:
            raise Type2Error("subroutine call without index")
        if self.depth >= MAX_SUBR_NESTING:
            logger.warning("Charstring subroutine nesting exceeds %d", MAX_SUBR_NESTING)
            raise Type2Error("subroutine nesting limit reached")
        biased = self._pop_int() + _subr_bias(len(subrs))
        if not 0 <= biased < len(subrs):
            raise Type2Error(f"subroutine {biased} out of range ({len(subrs)})")
        self.depth += 1
        self._execute_bytes(subrs.get(biased))
        self.depth -= 1

    # -------------------------------------------------------------------
    # CFF2 variation operators
    # -------------------------------------------------------------------

    def _op_vsindex(self) -> None:
        if not self.is_cff2:
            raise Type2Error("vsindex is only allowed in CFF2")
        if len(self.stack) != 1:
            raise Type2Error("vsindex expects 1 operand")
        self.vsindex = self._pop_int()
        self.scalars = None

    def _region_scalars(self) -> list[float]:
        store = self.table.store
        if store is None:
            raise Type2Error("blend without a variation store")
        if not 0 <= self.vsindex < len(store.subtables):
            raise Type2Error(f"vsindex {self.vsindex} out of range")
        if self.coords is None:
            # Default instance: every delta is ignored
            return [0.0] * len(store.subtables[self.vsindex].region_indexes)
        return store.region_scalars(self.vsindex, self.coords)

    def _op_blend(self) -> None:
        """blend: n default values followed by n * k deltas, then n."""
        if not self.is_cff2:
            raise Type2Error("blend is only allowed in CFF2")
        if not self.stack:
            raise Type2Error("blend without operand count")
        if self.scalars is None:
            self.scalars = self._region_scalars()
        n = self._pop_int()
        k = len(self.scalars)
        needed = n * (k + 1)
        if n < 0 or needed > len(self.stack):
            raise Type2Error("not enough blend operands")

        base = len(self.stack) - needed
        values = self.stack[base:base + n]
        deltas = self.stack[base + n:]
        for i in range(n):
            row = deltas[i * k:(i + 1) * k]
            values[i] += sum(d * sc for d, sc in zip(row, self.scalars))
            if not math.isfinite(values[i]):
                raise Type2Error("blended value is not a finite number")
        self.stack[base:] = values

    # -------------------------------------------------------------------
    # Flex operators (12, 34-37)
    # -------------------------------------------------------------------

    def _flex_args(self, count: int) -> list[float]:
        if len(self.stack) != count:
            raise Type2Error(f"flex operator expects {count} operands")
        args = self.stack[:]
        self.stack.clear()
        return args

    def _op12_hflex(self) -> None:
        """hflex: 7 args, dx1 dx2 dy2 dx3 dx4 dx5 dx6"""
        dx1, dx2, dy2, dx3, dx4, dx5, dx6 = self._flex_args(7)
        self._do_curveto(dx1, 0.0, dx2, dy2, dx3, 0.0)
        self._do_curveto(dx4, 0.0, dx5, -dy2, dx6, 0.0)

    def _op12_flex(self) -> None:
        """flex: 13 args, dx1 dy1 dx2 dy2 dx3 dy3 dx4 dy4 dx5 dy5 dx6 dy6 fd"""
        args = self._flex_args(13)
        # args[12] is the flex depth, not used for outlines
        self._do_curveto(*args[0:6])
        self._do_curveto(*args[6:12])

    def _op12_hflex1(self) -> None:
        """hflex1: 9 args, dx1 dy1 dx2 dy2 dx3 dx4 dx5 dy5 dx6"""
        dx1, dy1, dx2, dy2, dx3, dx4, dx5, dy5, dx6 = self._flex_args(9)
        self._do_curveto(dx1, dy1, dx2, dy2, dx3, 0.0)
        # dy6 returns to the starting height
        self._do_curveto(dx4, 0.0, dx5, dy5, dx6, -(dy1 + dy2 + dy5))

    def _op12_flex1(self) -> None:
        """flex1: 11 args, dx1 dy1 dx2 dy2 dx3 dy3 dx4 dy4 dx5 dy5 d6

        The last arg d6 is either dx6 or dy6 depending on cumulative direction.
        """
        dx1, dy1, dx2, dy2, dx3, dy3, dx4, dy4, dx5, dy5, d6 = self._flex_args(11)
        sum_dx = dx1 + dx2 + dx3 + dx4 + dx5
        sum_dy = dy1 + dy2 + dy3 + dy4 + dy5

        if abs(sum_dx) > abs(sum_dy):
            dx6 = d6
            dy6 = -sum_dy
        else:
            dx6 = -sum_dx
            dy6 = d6

        self._do_curveto(dx1, dy1, dx2, dy2, dx3, dy3)
        self._do_curveto(dx4, dy4, dx5, dy5, dx6, dy6)

    # -------------------------------------------------------------------
    # Arithmetic and logic operators (12, N)
    # -------------------------------------------------------------------

    def _binary(self, fn) -> None:
        # Too few operands leaves the stack alone
        if len(self.stack) >= 2:
            b = self.stack.pop()
            a = self.stack.pop()
            self.stack.append(_finite(fn(a, b)))

    def _unary(self, fn) -> None:
        if self.stack:
            self.stack[-1] = _finite(fn(self.stack[-1]))

    def _op12_add(self) -> None:
        self._binary(operator.add)

    def _op12_sub(self) -> None:
        self._binary(operator.sub)

    def _op12_mul(self) -> None:
        self._binary(operator.mul)

    def _op12_div(self) -> None:
        self._binary(lambda a, b: a / b if b != 0 else 0.0)

    def _op12_abs(self) -> None:
        self._unary(abs)

    def _op12_neg(self) -> None:
        self._unary(operator.neg)

    def _op12_sqrt(self) -> None:
        self._unary(lambda a: math.sqrt(abs(a)))

    def _op12_random(self) -> None:
        # Outlines must be reproducible, so "random" is a constant in (0, 1]
        self._push(1.0)

    def _op12_and(self) -> None:
        self._binary(lambda a, b: a != 0 and b != 0)

    def _op12_or(self) -> None:
        self._binary(lambda a, b: a != 0 or b != 0)

    def _op12_not(self) -> None:
        self._unary(lambda a: a == 0)

    def _op12_eq(self) -> None:
        self._binary(operator.eq)

    def _op12_ifelse(self) -> None:
        """ifelse: s1 s2 v1 v2 -> s1 if v1<=v2, else s2"""
        if len(self.stack) >= 4:
            v2 = self.stack.pop()
            v1 = self.stack.pop()
            s2 = self.stack.pop()
            s1 = self.stack.pop()
            self.stack.append(s1 if v1 <= v2 else s2)

    # -------------------------------------------------------------------
    # Stack manipulation operators (12, N)
    # -------------------------------------------------------------------

    def _op12_drop(self) -> None:
        if self.stack:
            self.stack.pop()

    def _op12_dup(self) -> None:
        if self.stack:
            self._push(self.stack[-1])

    def _op12_exch(self) -> None:
        if len(self.stack) >= 2:
            self.stack[-1], self.stack[-2] = self.stack[-2], self.stack[-1]

    def _op12_index(self) -> None:
        """index: i -> stack[-(i+1)] (copy ith element from top)."""
        if self.stack:
            idx = self._pop_int()
            if idx < 0:
                idx = 0
            if idx < len(self.stack):
                self.stack.append(self.stack[-(idx + 1)])

    def _op12_roll(self) -> None:
        """roll: n j, roll top n elements by j positions."""
        if len(self.stack) >= 2:
            j = self._pop_int()
            n = self._pop_int()
            if 0 < n <= len(self.stack):
                subset = self.stack[-n:]
                j = j % n
                self.stack[-n:] = subset[-j:] + subset[:-j] if j else subset

    # -------------------------------------------------------------------
    # Storage operators (12, N): transient array
    # -------------------------------------------------------------------

    def _op12_put(self) -> None:
        """put: val i -> transient[i] = val"""
        if len(self.stack) >= 2:
            i = self._pop_int()
            val = self.stack.pop()
            if 0 <= i < _TRANSIENT_ARRAY_LEN:
                self.transient_array[i] = val

    def _op12_get(self) -> None:
        """get: i -> transient[i]"""
        if self.stack:
            i = self._pop_int()
            if 0 <= i < _TRANSIENT_ARRAY_LEN:
                self.stack.append(self.transient_array[i])
            else:
                self.stack.append(0.0)

    def _op12_dotsection(self) -> None:
        # Deprecated hint operator
        self.stack.clear()


_T2 = Type2CharStringInterpreter

# Single-byte operators; callsubr, return, endchar, hintmask and cntrmask
# are handled inline by _execute_bytes
_OPERATORS = {
    1: _T2._op_hstem, 18: _T2._op_hstem,
    3: _T2._op_vstem, 23: _T2._op_vstem,
    4: _T2._op_vmoveto, 21: _T2._op_rmoveto, 22: _T2._op_hmoveto,
    5: _T2._op_rlineto, 6: _T2._op_hlineto, 7: _T2._op_vlineto,
    8: _T2._op_rrcurveto, 24: _T2._op_rcurveline, 25: _T2._op_rlinecurve,
    26: _T2._op_vvcurveto, 27: _T2._op_hhcurveto,
    30: _T2._op_vhcurveto, 31: _T2._op_hvcurveto,
    15: _T2._op_vsindex, 16: _T2._op_blend,
}

# Escaped operators (12, sub_op)
_OPERATORS_12 = {
    0: _T2._op12_dotsection,
    3: _T2._op12_and, 4: _T2._op12_or, 5: _T2._op12_not,
    9: _T2._op12_abs, 10: _T2._op12_add, 11: _T2._op12_sub, 12: _T2._op12_div,
    14: _T2._op12_neg, 15: _T2._op12_eq, 18: _T2._op12_drop,
    20: _T2._op12_put, 21: _T2._op12_get, 22: _T2._op12_ifelse,
    23: _T2._op12_random, 24: _T2._op12_mul, 26: _T2._op12_sqrt,
    27: _T2._op12_dup, 28: _T2._op12_exch, 29: _T2._op12_index, 30: _T2._op12_roll,
    34: _T2._op12_hflex, 35: _T2._op12_flex, 36: _T2._op12_hflex1, 37: _T2._op12_flex1,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def outline_glyph(table, glyph_id: int, builder, coords=None) -> None:
    """Execute the charstring of `glyph_id` and send its path to `builder`.

    Raises Type2Error or CFFError when the glyph cannot be outlined; the
    builder may have received part of the path by then.
    """
    if not 0 <= glyph_id < table.number_of_glyphs:
        raise CFFError(f"glyph {glyph_id} out of range")
    interpreter = Type2CharStringInterpreter(table, builder, glyph_id, coords)
    interpreter.execute(table.char_strings.get(glyph_id))

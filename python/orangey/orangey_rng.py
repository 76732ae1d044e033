"""Jumpable 128-bit permuted LCG with derived samplers and peek views."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

import numpy as np

from .constants import (
    DEFAULT_INC,
    DEFAULT_STATE,
    DOUBLE_ONE_EXPONENT,
    DOUBLE_SIGNIFICAND_MASK,
    MASK64,
    MASK128,
    MIN_DOUBLE_EXPONENT,
    MUL,
    OUTPUT_BITS,
    ROTATE_SHIFT,
)
from .sequences import DrawSequence, PeekSequence

if TYPE_CHECKING:
    from .config import SeedConfig

_BELOW_ONE = math.nextafter(1.0, 0.0)


def output(state: int) -> int:
    """Fold 128 bits of state into a 64-bit value and rotate by the top 6 bits."""
    xored = ((state >> 64) ^ state) & MASK64
    rot = (state >> ROTATE_SHIFT) & 63
    return ((xored >> rot) | (xored << ((-rot) & 63))) & MASK64


def advance(state: int, delta: int, cur_mult: int, cur_plus: int) -> int:
    """Return the state reached after `delta` affine steps, in O(log delta).

    `delta` is taken modulo 2**128, so negative values walk the stream
    backwards.
    """
    delta &= MASK128
    acc_mult = 1
    acc_plus = 0
    while delta > 0:
        if delta & 1:
            acc_mult = (acc_mult * cur_mult) & MASK128
            acc_plus = (acc_plus * cur_mult + cur_plus) & MASK128
        cur_plus = ((cur_mult + 1) * cur_plus) & MASK128
        cur_mult = (cur_mult * cur_mult) & MASK128
        delta >>= 1
    return (acc_mult * state + acc_plus) & MASK128


@dataclass
class OrangeyRng:
    """128-bit LCG with an xor-fold/rotate output and O(log n) skip/peek."""

    state: int = DEFAULT_STATE
    inc: int = DEFAULT_INC

    def __post_init__(self) -> None:
        self.state = int(self.state) & MASK128
        self.inc = (int(self.inc) & MASK128) | 1

    @classmethod
    def seeded(cls, init_state: int, init_seq: int) -> OrangeyRng:
        rng = cls()
        rng.reseed(init_state, init_seq)
        return rng

    @classmethod
    def from_config(cls, config: SeedConfig) -> OrangeyRng:
        if not config.is_seeded:
            return cls()
        return cls.seeded(config.init_state or 0, config.init_seq or 0)

    def copy(self) -> OrangeyRng:
        return replace(self)

    # -- core ---------------------------------------------------------------

    def _step(self) -> None:
        self.state = (self.state * MUL + self.inc) & MASK128

    def reseed(self, init_state: int, init_seq: int) -> None:
        """Derive a fresh state and stream from two 128-bit seed values."""
        self.state = 0
        self.inc = ((int(init_seq) << 1) | 1) & MASK128
        self._step()
        self.state = (self.state + int(init_state)) & MASK128
        self._step()

    def rand(self) -> int:
        self._step()
        return output(self.state)

    def skip(self, delta: int) -> None:
        """Jump `delta` values ahead in the stream (negative jumps back)."""
        self.state = advance(self.state, int(delta), MUL, self.inc)

    def peek(self, delta: int = 0) -> int:
        """Return the `delta`-th upcoming raw value without changing state.

        `peek(0)` is what the next `rand()` returns.
        """
        return output(advance(self.state, int(delta) + 1, MUL, self.inc))

    # -- samplers -----------------------------------------------------------

    def rand_range(self, low: int, high: int) -> int:
        """Unbiased integer in `[min(low, high), max(low, high))`.

        A degenerate range returns the bound itself.
        """
        lo = min(int(low), int(high))
        hi = max(int(low), int(high))
        width = hi - lo
        if width == 0:
            return lo
        if width > 1 << OUTPUT_BITS:
            raise ValueError(f"range width {width} exceeds 64-bit output")

        if width & (width - 1) == 0:
            return lo + (self.rand() & (width - 1))

        limit = ((-width) & MASK64) % width
        cursor = 0
        while self.peek(cursor) < limit:
            cursor += 1
        self.skip(cursor)
        return lo + self.rand() % width

    def uniform_double(self) -> float:
        """Float in [0, 1) with uniform density and 2**-52 granularity.

        This does not hit every representable float in range; use
        `all_doubles()` for that.
        """
        bits = (self.rand() & DOUBLE_SIGNIFICAND_MASK) | DOUBLE_ONE_EXPONENT
        return float(np.array(bits, dtype=np.uint64).view(np.float64)) - 1.0

    def all_doubles(self) -> float:
        """Float in [0, 1) with an equal chance of every representable double.

        Biased toward small values, since doubles are denser near zero.
        """
        exponent = 0
        while True:
            exponent -= OUTPUT_BITS
            if exponent < MIN_DOUBLE_EXPONENT:
                return 0.0
            significand = self.rand()
            if significand != 0:
                break

        shift = OUTPUT_BITS - significand.bit_length()
        if shift != 0:
            exponent -= shift
            significand = (significand << shift) & MASK64
            significand |= self.peek(1) >> (OUTPUT_BITS - shift)
        significand |= 1

        value = math.ldexp(float(significand), exponent)
        if value >= 1.0:
            return _BELOW_ONE
        return value

    def gaussian(self) -> float:
        """Standard-normal style variate.

        The scale factor multiplies a peeked uniform that is not retired from
        the stream, so consecutive results are correlated.
        """
        rsq = self.uniform_double()
        while rsq == 0.0:
            rsq = self.uniform_double()
        return self.peek_uniform_double(1) * math.sqrt(-2.0 * math.log(rsq) / rsq)

    def poisson(self, ev: float) -> int:
        """Knuth's multiplicative Poisson sampler with expected value `ev`.

        `ev` must be finite and non-negative; this is not checked.
        """
        n = 0
        em = math.exp(-ev)
        x = self.uniform_double()
        while x > em:
            n += 1
            x *= self.peek_uniform_double(1)
        return n

    # -- peeks --------------------------------------------------------------

    def _ahead(self, delta: int) -> OrangeyRng:
        dup = self.copy()
        dup.skip(delta)
        return dup

    def peek_range(self, delta: int, low: int, high: int) -> int:
        return self._ahead(delta).rand_range(low, high)

    def peek_uniform_double(self, delta: int) -> float:
        return self._ahead(delta).uniform_double()

    def peek_all_doubles(self, delta: int) -> float:
        return self._ahead(delta).all_doubles()

    def peek_gaussian(self, delta: int) -> float:
        return self._ahead(delta).gaussian()

    def peek_poisson(self, delta: int, ev: float) -> int:
        return self._ahead(delta).poisson(ev)

    # -- lazy sequences -----------------------------------------------------

    def rand_iter(self) -> DrawSequence[int]:
        return DrawSequence(self.rand)

    def rand_range_iter(self, low: int, high: int) -> DrawSequence[int]:
        return DrawSequence(lambda: self.rand_range(low, high))

    def uniform_double_iter(self) -> DrawSequence[float]:
        return DrawSequence(self.uniform_double)

    def all_doubles_iter(self) -> DrawSequence[float]:
        return DrawSequence(self.all_doubles)

    def gaussian_iter(self) -> DrawSequence[float]:
        return DrawSequence(self.gaussian)

    def poisson_iter(self, ev: float) -> DrawSequence[int]:
        return DrawSequence(lambda: self.poisson(ev))

    def peek_iter(self, *, start: int = 0) -> PeekSequence[int]:
        return PeekSequence(self.peek, start=start)

    def peek_range_iter(self, low: int, high: int, *, start: int = 0) -> PeekSequence[int]:
        return PeekSequence(lambda delta: self.peek_range(delta, low, high), start=start)

    def peek_uniform_double_iter(self, *, start: int = 0) -> PeekSequence[float]:
        return PeekSequence(self.peek_uniform_double, start=start)

    def peek_all_doubles_iter(self, *, start: int = 0) -> PeekSequence[float]:
        return PeekSequence(self.peek_all_doubles, start=start)

    def peek_gaussian_iter(self, *, start: int = 0) -> PeekSequence[float]:
        return PeekSequence(self.peek_gaussian, start=start)

    def peek_poisson_iter(self, ev: float, *, start: int = 0) -> PeekSequence[int]:
        return PeekSequence(lambda delta: self.peek_poisson(delta, ev), start=start)

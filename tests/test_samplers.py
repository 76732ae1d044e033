import math

import numpy as np
import pytest
from orangey import DEFAULT_INC, MUL, OrangeyRng, take
from orangey.constants import MASK128

PEEKERS = {
    "rand_range": (lambda rng: rng.rand_range(3, 1003), lambda rng, d: rng.peek_range(d, 3, 1003)),
    "uniform_double": (lambda rng: rng.uniform_double(), lambda rng, d: rng.peek_uniform_double(d)),
    "all_doubles": (lambda rng: rng.all_doubles(), lambda rng, d: rng.peek_all_doubles(d)),
    "gaussian": (lambda rng: rng.gaussian(), lambda rng, d: rng.peek_gaussian(d)),
    "poisson": (lambda rng: rng.poisson(2.5), lambda rng, d: rng.peek_poisson(d, 2.5)),
}


def _rng_with_next_output_zero() -> OrangeyRng:
    # Equal 64-bit halves fold to zero; step back once so rand() lands there.
    half = 0x0123456789ABCDEF
    target = (half << 64) | half
    prev = ((target - DEFAULT_INC) * pow(MUL, -1, 1 << 128)) & MASK128
    return OrangeyRng(state=prev)


def test_rand_range_pinned_values() -> None:
    rng = OrangeyRng()
    assert [rng.rand_range(0, 10) for _ in range(5)] == [8, 2, 4, 0, 1]

    rng = OrangeyRng()
    assert [rng.rand_range(64, 128) for _ in range(3)] == [100, 70, 66]


def test_rand_range_rejection_consumes_exactly_the_accepted_draw() -> None:
    width = (1 << 63) + 1
    rng = OrangeyRng()
    values = [rng.rand_range(0, width) for _ in range(4)]

    # Raw draws 4..7 fall below the bias threshold; the 8th is accepted.
    assert values == [
        8794256020324378339,
        6880976524725532613,
        6861056850935606465,
        7270160485663435329,
    ]
    expected = OrangeyRng()
    expected.skip(8)
    assert rng == expected


def test_rand_range_degenerate_returns_bound() -> None:
    rng = OrangeyRng()
    before = rng.copy()
    assert rng.rand_range(17, 17) == 17
    assert rng == before


def test_rand_range_normalizes_unordered_bounds() -> None:
    a = OrangeyRng()
    b = OrangeyRng()
    assert [a.rand_range(100, 10) for _ in range(20)] == [b.rand_range(10, 100) for _ in range(20)]


def test_rand_range_rejects_width_beyond_64_bits() -> None:
    rng = OrangeyRng()
    with pytest.raises(ValueError, match="exceeds 64-bit"):
        rng.rand_range(0, (1 << 64) + 1)


def test_rand_range_full_64_bit_width_is_raw_output() -> None:
    rng = OrangeyRng()
    assert rng.rand_range(0, 1 << 64) == 18017628057179154148


@pytest.mark.parametrize("width", [1, 2, 4, 8, 64, 1024, 3, 5, 7, 13, 97, 65537])
def test_rand_range_stays_in_bounds(width: int) -> None:
    rng = OrangeyRng.seeded(width, 99)
    low = -50
    for _ in range(2000):
        value = rng.rand_range(low, low + width)
        assert low <= value < low + width


def test_rand_range_buckets_are_roughly_uniform() -> None:
    rng = OrangeyRng.seeded(2024, 1)
    counts = np.bincount(take(rng.rand_range_iter(0, 10), 20000, dtype=np.int64), minlength=10)
    # 2000 expected per bucket, sigma ~42.
    assert np.all(np.abs(counts - 2000) < 250)


def test_uniform_double_pinned_and_bit_exact() -> None:
    rng = OrangeyRng()
    raw = OrangeyRng().rand()
    value = rng.uniform_double()
    assert value == (raw & ((1 << 52) - 1)) / 2.0**52
    assert value == 0.7171036425046902


def test_uniform_double_range_and_granularity() -> None:
    values = take(OrangeyRng.seeded(5, 6).uniform_double_iter(), 5000)
    assert np.all(values >= 0.0)
    assert np.all(values < 1.0)
    nonzero = values[values != 0.0]
    assert np.all(nonzero >= 2.0**-52)
    assert abs(float(np.mean(values)) - 0.5) < 0.02
    assert abs(float(np.var(values)) - 1.0 / 12.0) < 0.01


def test_uniform_double_of_zero_draw_is_zero() -> None:
    assert _rng_with_next_output_zero().uniform_double() == 0.0


def test_all_doubles_pinned_first_value() -> None:
    rng = OrangeyRng()
    assert rng.all_doubles() == 0.9767375741314709


def test_all_doubles_stays_in_unit_interval() -> None:
    values = take(OrangeyRng.seeded(11, 12).all_doubles_iter(), 5000)
    assert np.all(values >= 0.0)
    assert np.all(values < 1.0)
    assert abs(float(np.mean(values)) - 0.5) < 0.02


def test_all_doubles_reaches_below_uniform_granularity() -> None:
    rng = _rng_with_next_output_zero()
    value = rng.all_doubles()
    assert 0.0 < value < 2.0**-64
    assert value < 2.0**-52


def test_all_doubles_normalizes_leading_zeros() -> None:
    # Values below 0.5 need normalization and borrow bits from a peeked draw.
    rng = OrangeyRng.seeded(77, 78)
    for _ in range(500):
        raw = rng.peek()
        value = rng.all_doubles()
        if raw == 0:
            continue
        assert 2.0 ** (raw.bit_length() - 65) <= value <= 2.0 ** (raw.bit_length() - 64)


def test_gaussian_matches_formula_and_consumes_one_draw() -> None:
    rng = OrangeyRng.seeded(3, 4)
    dup = rng.copy()

    rsq = dup.uniform_double()
    assert rsq != 0.0
    expected = dup.peek_uniform_double(1) * math.sqrt(-2.0 * math.log(rsq) / rsq)

    assert rng.gaussian() == expected
    assert rng == dup


def test_gaussian_values_are_finite_and_non_negative() -> None:
    values = take(OrangeyRng.seeded(8, 8).gaussian_iter(), 2000)
    assert np.all(np.isfinite(values))
    assert np.all(values >= 0.0)


def test_gaussian_skips_zero_rsq() -> None:
    rng = _rng_with_next_output_zero()
    expected = rng.copy()
    expected.skip(2)

    value = rng.gaussian()
    assert math.isfinite(value)
    assert value > 0.0
    assert rng == expected


def test_poisson_zero_expectation_is_zero() -> None:
    rng = OrangeyRng()
    assert [rng.poisson(0.0) for _ in range(50)] == [0] * 50


def test_poisson_matches_knuth_loop_with_peeked_factor() -> None:
    rng = OrangeyRng.seeded(21, 22)
    for ev in (0.5, 1.33333333, 4.0):
        dup = rng.copy()
        x = dup.uniform_double()
        factor = dup.peek_uniform_double(1)
        n = 0
        while x > math.exp(-ev):
            n += 1
            x *= factor

        assert rng.poisson(ev) == n
        assert rng == dup


def test_poisson_is_non_negative_int() -> None:
    rng = OrangeyRng.seeded(1, 2)
    for _ in range(200):
        value = rng.poisson(1.5)
        assert isinstance(value, int)
        assert value >= 0


@pytest.mark.parametrize("name", sorted(PEEKERS))
def test_peek_does_not_change_real_stream(name: str) -> None:
    draw, peek = PEEKERS[name]
    rng = OrangeyRng.seeded(31, 41)
    reference = OrangeyRng.seeded(31, 41)

    for delta in (0, 1, 5, 40, 0):
        peek(rng, delta)
    assert rng == reference

    for _ in range(10):
        assert draw(rng) == draw(reference)


@pytest.mark.parametrize("name", sorted(PEEKERS))
def test_peek_zero_equals_next_draw(name: str) -> None:
    draw, peek = PEEKERS[name]
    rng = OrangeyRng.seeded(59, 26)
    for _ in range(10):
        peeked = peek(rng, 0)
        assert draw(rng) == peeked


@pytest.mark.parametrize("name", sorted(PEEKERS))
def test_peek_delta_equals_draw_after_skip(name: str) -> None:
    draw, peek = PEEKERS[name]
    rng = OrangeyRng.seeded(53, 58)
    skipped = rng.copy()
    skipped.skip(17)
    assert peek(rng, 17) == draw(skipped)

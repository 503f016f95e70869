"""Unit tests for the unsigned kernels in mpn."""

import array_api_strict
import numpy as np
import pytest

import mpn
from limbs import LIMB_BITS, NUMB_MAX, Limbs
from tests.helpers import random_int


def to_int(limbs):
    return sum(d << (LIMB_BITS * i) for i, d in enumerate(limbs))


def to_limbs(value, xp):
    out = []
    while value:
        out.append(value & NUMB_MAX)
        value >>= LIMB_BITS
    return Limbs(out, xp=xp)


class TestCmp:
    """Tests for magnitude comparison."""

    def test_by_length(self, xp) -> None:
        assert mpn.cmp(Limbs([1], xp=xp), Limbs([0, 1], xp=xp)) == -1
        assert mpn.cmp(Limbs([0, 1], xp=xp), Limbs([NUMB_MAX], xp=xp)) == 1

    def test_by_highest_differing_limb(self, xp) -> None:
        assert mpn.cmp(Limbs([9, 1, 5], xp=xp), Limbs([0, 2, 5], xp=xp)) == -1
        assert mpn.cmp(Limbs([1, 2], xp=xp), Limbs([0, 2], xp=xp)) == 1

    def test_equal(self, xp) -> None:
        assert mpn.cmp(Limbs([3, 4], xp=xp), Limbs([3, 4], xp=xp)) == 0
        assert mpn.cmp(Limbs(xp=xp), Limbs(xp=xp)) == 0

    def test_ignores_high_zeros(self, xp) -> None:
        assert mpn.cmp(Limbs([3, 0, 0], xp=xp), Limbs([3], xp=xp)) == 0


class TestAddN:
    """Tests for addition with carry."""

    def test_single_carry(self, xp) -> None:
        assert mpn.add_n(Limbs([NUMB_MAX], xp=xp), Limbs([1], xp=xp)).tolist() == [0, 1]

    def test_carry_chain(self, xp) -> None:
        u = Limbs([NUMB_MAX, NUMB_MAX, NUMB_MAX], xp=xp)
        assert mpn.add_n(u, Limbs([1], xp=xp)).tolist() == [0, 0, 0, 1]

    def test_carry_into_all_ones_limb(self, xp) -> None:
        # the incoming carry lands on a limb whose own sum already wrapped
        u = Limbs([1, NUMB_MAX], xp=xp)
        v = Limbs([NUMB_MAX, NUMB_MAX], xp=xp)
        assert mpn.add_n(u, v).tolist() == [0, NUMB_MAX, 1]

    def test_zero(self, xp) -> None:
        assert mpn.add_n(Limbs(xp=xp), Limbs(xp=xp)).tolist() == []
        assert mpn.add_n(Limbs([5], xp=xp), Limbs(xp=xp)).tolist() == [5]

    def test_random(self, xp, rng) -> None:
        for _ in range(50):
            a = random_int(rng, 6, signed=False)
            b = random_int(rng, 6, signed=False)
            assert to_int(mpn.add_n(to_limbs(a, xp), to_limbs(b, xp))) == a + b

    def test_long_carry_chain(self, xp) -> None:
        n = 20000
        u = Limbs(xp.full(n, NUMB_MAX, dtype=xp.uint32))
        assert mpn.add_n(u, Limbs([1], xp=xp)).tolist() == [0] * n + [1]

    def test_carry_chains_with_gaps(self, xp, rng) -> None:
        # limbs biased to the extremes give many runs of all ones between carries
        for _ in range(30):
            a = [int(d) for d in rng.choice([0, 1, NUMB_MAX - 1, NUMB_MAX], size=12)]
            b = [int(d) for d in rng.choice([0, 1, NUMB_MAX], size=12)]
            s = mpn.add_n(Limbs(a, xp=xp), Limbs(b, xp=xp))
            assert to_int(s) == to_int(a) + to_int(b)


class TestSubN:
    """Tests for subtraction with borrow."""

    def test_borrow_chain(self, xp) -> None:
        u = Limbs([0, 0, 1], xp=xp)
        assert mpn.sub_n(u, Limbs([1], xp=xp)).tolist() == [NUMB_MAX, NUMB_MAX]

    def test_borrowing_limb_is_wrapped_difference(self, xp) -> None:
        # 0x1_00000002 - 0x5: the low limb borrows and comes out as B - 3
        u = Limbs([2, 1], xp=xp)
        assert mpn.sub_n(u, Limbs([5], xp=xp)).tolist() == [(1 << 32) - 3]

    def test_equal_operands_give_empty(self, xp) -> None:
        u = Limbs([7, 8], xp=xp)
        assert mpn.sub_n(u, u).tolist() == []
        assert mpn.sub_n(Limbs(xp=xp), Limbs(xp=xp)).tolist() == []

    def test_requires_u_at_least_v(self, xp) -> None:
        with pytest.raises(AssertionError):
            mpn.sub_n(Limbs([1], xp=xp), Limbs([2], xp=xp))

    def test_random(self, xp, rng) -> None:
        for _ in range(50):
            a = random_int(rng, 6, signed=False)
            b = random_int(rng, 6, signed=False)
            a, b = max(a, b), min(a, b)
            assert to_int(mpn.sub_n(to_limbs(a, xp), to_limbs(b, xp))) == a - b

    def test_long_borrow_chain(self, xp) -> None:
        n = 20000
        u = Limbs([0] * n + [1], xp=xp)
        assert mpn.sub_n(u, Limbs([1], xp=xp)).tolist() == [NUMB_MAX] * n

    def test_borrow_chains_with_gaps(self, xp, rng) -> None:
        for _ in range(30):
            a = [int(d) for d in rng.choice([0, 1, NUMB_MAX], size=12)]
            b = [int(d) for d in rng.choice([0, 1, NUMB_MAX - 1, NUMB_MAX], size=12)]
            a, b = max(a, b, key=to_int), min(a, b, key=to_int)
            d = mpn.sub_n(Limbs(a, xp=xp), Limbs(b, xp=xp))
            assert to_int(d) == to_int(a) - to_int(b)


class TestMul:
    """Tests for the digit-by-vector and school-book products."""

    def test_mul_1(self, xp) -> None:
        assert mpn.mul_1(Limbs([NUMB_MAX], xp=xp), NUMB_MAX).tolist() == [1, NUMB_MAX - 1]

    def test_mul_1_by_zero(self, xp) -> None:
        assert mpn.mul_1(Limbs([1, 2], xp=xp), 0).tolist() == []
        assert mpn.mul_1(Limbs(xp=xp), 7).tolist() == []

    def test_mul_1_rejects_wide_digit(self, xp) -> None:
        with pytest.raises(ValueError):
            mpn.mul_1(Limbs([1], xp=xp), 1 << 32)

    def test_mul_1_low_zero_limb(self, xp) -> None:
        # a zero low limb stays in place rather than being dropped
        assert mpn.mul_1(Limbs([0, 1], xp=xp), 3).tolist() == [0, 3]

    def test_mul(self, xp) -> None:
        u = Limbs([NUMB_MAX, NUMB_MAX], xp=xp)
        v = Limbs([NUMB_MAX], xp=xp)
        assert to_int(mpn.mul(u, v)) == ((1 << 64) - 1) * ((1 << 32) - 1)
        assert to_int(mpn.mul(v, u)) == ((1 << 64) - 1) * ((1 << 32) - 1)

    def test_mul_zero(self, xp) -> None:
        assert mpn.mul(Limbs([1, 2], xp=xp), Limbs(xp=xp)).tolist() == []

    def test_random(self, xp, rng) -> None:
        for _ in range(30):
            a = random_int(rng, 5, signed=False)
            b = random_int(rng, 5, signed=False)
            assert to_int(mpn.mul(to_limbs(a, xp), to_limbs(b, xp))) == a * b


class TestDivision:
    """Tests for small_divide and long division."""

    def test_small_divide(self, xp) -> None:
        v = Limbs([3], xp=xp)
        assert mpn.small_divide(Limbs([0, 1], xp=xp), v) == 0x55555555
        assert mpn.small_divide(Limbs([2], xp=xp), v) == 0
        assert mpn.small_divide(Limbs([3], xp=xp), v) == 1

    def test_small_divide_full_limb(self, xp) -> None:
        # r = v*B - 1 gives the largest possible quotient limb
        v = Limbs([7, 1], xp=xp)
        r = to_limbs(to_int(v) * (1 << 32) - 1, xp)
        assert mpn.small_divide(r, v) == NUMB_MAX

    def test_divrem(self, xp) -> None:
        q, r = mpn.divrem(Limbs([0, 1], xp=xp), Limbs([3], xp=xp))
        assert q.tolist() == [0x55555555]
        assert r.tolist() == [1]

    def test_divrem_exact(self, xp) -> None:
        q, r = mpn.divrem(Limbs([0, 0, 1], xp=xp), Limbs([0, 1], xp=xp))
        assert q.tolist() == [0, 1]
        assert r.tolist() == []

    def test_divrem_by_zero(self, xp) -> None:
        with pytest.raises(ZeroDivisionError):
            mpn.divrem(Limbs([1], xp=xp), Limbs([0], xp=xp))

    def test_random(self, xp, rng) -> None:
        for _ in range(20):
            a = random_int(rng, 4, signed=False)
            b = random_int(rng, 3, signed=False) or 1
            q, r = mpn.divrem(to_limbs(a, xp), to_limbs(b, xp))
            assert (to_int(q), to_int(r)) == divmod(a, b)
            assert q.is_normalized()
            assert r.is_normalized()


class TestNamespaces:
    """Mixed operands run in the namespace of the first one."""

    def test_mixed_operands(self) -> None:
        u = Limbs([NUMB_MAX], xp=np)
        v = Limbs([1], xp=array_api_strict)
        s = mpn.add_n(u, v)
        assert s.xp is np
        assert s.tolist() == [0, 1]
        assert mpn.add_n(v, u).xp is array_api_strict
        assert mpn.cmp(v, u) == -1

# unsigned kernels over Limbs.
# every result is normalized. operands need not be, trailing zeros are ignored.
#
# the kernels are school-book but run over whole limb arrays at once:
# limb sums wrap in uint32 exactly as a machine word would, and a wrapped
# limb is detected by comparing it against what was added to it.
# a wrapped limb carries out; a limb left all ones by the sum passes an
# incoming carry on. the carries of a whole chain are resolved in one pass
# from those two masks, then shifted up a limb and added.

from limbs import (
    ASSERT_LIMB,
    ASSERT_NORMALIZED,
    LIMB_BITS,
    NUMB_MASK,
    NUMB_MAX,
    Limbs,
    check_limb,
)

def _coerce(u, v):
    # the second operand follows the first into its namespace
    if v.xp is not u.xp:
        v = v.to_namespace(u.xp)
    return u, v

def _shift_up(xp, flags):
    # flags at limb i become a 0/1 limb at i+1; the top flag must be clear
    return xp.concat([xp.zeros(1, dtype=xp.uint32), xp.astype(flags[:-1], xp.uint32)])

def cmp(u, v):
    u, v = _coerce(u.normalized(), v.normalized())
    if len(u) != len(v):
        return -1 if len(u) < len(v) else 1
    if len(u) == 0:
        return 0
    xp = u.xp
    differ = xp.nonzero(u.data != v.data)[0]
    if differ.shape[0] == 0:
        return 0
    top = int(differ[-1])
    return -1 if u[top] < v[top] else 1

def _ripple(xp, gen, prop):
    # carry out of every limb in one pass. gen marks limbs that carry out on
    # their own, prop marks limbs that pass an incoming carry on. no limb is
    # both, so a limb carries out exactly when the nearest non-propagating
    # limb at or below it generates.
    heads = xp.logical_not(prop)
    starts = xp.nonzero(heads)[0]
    if starts.shape[0] == 0:
        return gen
    run = xp.cumulative_sum(xp.astype(heads, xp.int64)) - 1
    first = xp.take(starts, xp.maximum(run, xp.zeros_like(run)), axis=0)
    return xp.logical_and(xp.take(gen, first, axis=0), run >= 0)

def add_n(u, v):
    u, v = _coerce(u, v)
    xp = u.xp
    # one spare limb so the final carry has somewhere to land
    n = max(len(u), len(v)) + 1
    up = u.padded(n)
    vp = v.padded(n)
    s = up + vp
    # in cases of overflow, the sum is less than the addend
    gen = s < up
    if xp.any(gen):
        # only an all ones limb can pass a carry on
        s = s + _shift_up(xp, _ripple(xp, gen, s == NUMB_MAX))
    return Limbs._wrap(xp, s).normalized()

def sub_n(u, v):
    '''u - v for u >= v. a borrowing limb comes out as the wrapped
    difference, which is B - (b - a), with 1 borrowed from the next limb.'''
    u, v = _coerce(u, v)
    assert cmp(u, v) >= 0, 'sub_n needs u >= v'
    xp = u.xp
    n = max(len(u), len(v))
    if n == 0:
        return Limbs._wrap(xp, u.data[:0])
    up = u.padded(n)
    vp = v.padded(n)
    d = up - vp
    gen = up < vp
    if xp.any(gen):
        # only a zero limb passes a borrow on
        d = d - _shift_up(xp, _ripple(xp, gen, d == 0))
    return Limbs._wrap(xp, d).normalized()

def mul_1(u, d):
    d = check_limb(d)
    xp = u.xp
    u = u.normalized()
    if d == 0 or len(u) == 0:
        return Limbs._wrap(xp, u.data[:0])
    # each limb product fits in two limbs; the high halves are the carries
    p = xp.astype(u.data, xp.uint64) * d
    lo = xp.astype(p & NUMB_MASK, xp.uint32)
    hi = xp.astype(p >> LIMB_BITS, xp.uint32)
    return add_n(Limbs._wrap(xp, lo), Limbs._wrap(xp, hi).prepend_zeros(1))

def mul(u, v):
    u, v = _coerce(u.normalized(), v.normalized())
    if len(v) > len(u):
        # fewer rows with the shorter operand on the right
        u, v = v, u
    acc = Limbs._wrap(u.xp, u.data[:0])
    for i, d in enumerate(v):
        if d == 0:
            continue
        acc = add_n(acc, mul_1(u, d).prepend_zeros(i))
    ASSERT_NORMALIZED(acc)
    return acc

def small_divide(r, v):
    '''The quotient limb q with q*v <= r < (q+1)*v, found one bit at a
    time from the top. r must be below v*B.'''
    r, v = _coerce(r, v)
    if cmp(r, v) < 0:
        return 0
    q = 0
    for bit in range(LIMB_BITS - 1, -1, -1):
        candidate = q | (1 << bit)
        ASSERT_LIMB(candidate)
        if cmp(mul_1(v, candidate), r) <= 0:
            q = candidate
    return q

def divrem(u, v):
    u, v = _coerce(u.normalized(), v.normalized())
    if len(v) == 0:
        raise ZeroDivisionError('mpn.divrem by zero')
    xp = u.xp
    q = Limbs._wrap(xp, u.data[:0])
    r = q
    for i in range(len(u) - 1, -1, -1):
        # bring down the next limb: r = r*B + u[i]
        r = r.push_front(u[i]).normalized()
        qi = small_divide(r, v)
        # leading zero limbs of the quotient are never emitted
        if len(q) or qi:
            q = q.push_front(qi)
        if qi:
            r = sub_n(r, mul_1(v, qi))
    ASSERT_NORMALIZED(q)
    ASSERT_NORMALIZED(r)
    return q, r

if __name__ == '__main__':
    import numpy as np
    rng = np.random.default_rng(0)
    def to_int(limbs):
        return sum(d << (LIMB_BITS * i) for i, d in enumerate(limbs))
    for _ in range(32):
        a = Limbs(rng.integers(0, 1<<32, 5, dtype=np.uint64))
        b = Limbs(rng.integers(0, 1<<32, 3, dtype=np.uint64))
        assert to_int(add_n(a, b)) == to_int(a) + to_int(b)
        assert to_int(sub_n(a, b)) == to_int(a) - to_int(b)
        assert to_int(mul(a, b)) == to_int(a) * to_int(b)
        q, r = divrem(a, b)
        assert (to_int(q), to_int(r)) == divmod(to_int(a), to_int(b))

# representation:
#  a magnitude as normalized Limbs plus a separate sign flag.
#  zero is the empty magnitude and is never flagged negative by any operation
#    here, though a hand-built BigInt([], True) still compares equal to zero.
#  every signed operation is rewritten in terms of magnitudes and handed to
#    the unsigned kernels in mpn.
#
# division truncates toward zero: the quotient takes the xor of the signs
# and the remainder takes the sign of the dividend, so x == q*y + r and
# abs(r) < abs(y) for every sign combination. // and % follow divide, not
# python's flooring ints.

import logging

import mpn
from hexstr import MalformedLiteral, hex_from_limbs, limbs_from_hex, split_sign
from limbs import LIMB_BITS, NUMB_MASK, Limbs

logger = logging.getLogger(__name__)

__all__ = [
    'BigInt',
    'DivisionByZero',
    'MalformedLiteral',
    'ZERO',
    'absolute_value',
    'add',
    'divide',
    'equal',
    'from_digits',
    'from_hex',
    'from_int',
    'is_zero',
    'less_than',
    'multiply',
    'negate',
    'shift_left',
    'shift_right',
    'subtract',
    'to_hex',
]

class DivisionByZero(ZeroDivisionError):
    pass

class BigInt:
    def __init__(self, digits=(), negative=False, *, xp=None):
        # no normalization here, the kernels normalize what they return
        if type(digits) is not Limbs:
            digits = Limbs(digits, xp=xp)
        elif xp is not None:
            digits = digits.to_namespace(xp)
        self._digits = digits
        self._negative = bool(negative)

    @property
    def digits(self):
        return self._digits
    @property
    def negative(self):
        return self._negative
    @property
    def xp(self):
        return self._digits.xp

    @classmethod
    def from_hex(cls, text, *, xp=None):
        negative, body = split_sign(text)
        return _canonical(limbs_from_hex(body, xp=xp), negative)

    @classmethod
    def from_int(cls, value, *, xp=None):
        if not isinstance(value, int):
            raise TypeError(f'expected int, got {type(value).__name__}')
        negative = value < 0
        value = abs(value)
        limbs = []
        while value:
            limbs.append(value & NUMB_MASK)
            value >>= LIMB_BITS
        return cls(Limbs(limbs, xp=xp), negative)

    def to_hex(self, uppercase=True):
        return to_hex(self, uppercase)

    def __int__(self):
        accum = 0
        for d in reversed(self._digits.tolist()):
            accum <<= LIMB_BITS
            accum += d
        return -accum if self._negative else accum
    def __bool__(self):
        return not is_zero(self)
    def __hash__(self):
        # consistent with == against plain ints
        return hash(int(self))
    def __str__(self):
        return to_hex(self)
    def __repr__(self):
        return f"BigInt('{to_hex(self)}')"

    def __neg__(self):
        return negate(self)
    def __pos__(self):
        return self
    def __abs__(self):
        return absolute_value(self)
    def __lshift__(self, k):
        if not isinstance(k, int):
            return NotImplemented
        return shift_left(self, k)
    def __rshift__(self, k):
        if not isinstance(k, int):
            return NotImplemented
        return shift_right(self, k)

def _canonical(limbs, negative):
    limbs = limbs.normalized()
    return BigInt(limbs, negative and len(limbs) > 0)

def _zero_like(x):
    return BigInt(x.digits.truncate(0))

def from_digits(digits, negative=False):
    return BigInt(digits, negative)

def from_hex(text, *, xp=None):
    return BigInt.from_hex(text, xp=xp)

def from_int(value, *, xp=None):
    return BigInt.from_int(value, xp=xp)

def to_hex(x, uppercase=True):
    return hex_from_limbs(x.digits.normalized(), x.negative and not is_zero(x), uppercase)

ZERO = BigInt()

def is_zero(x):
    return len(x.digits.normalized()) == 0

def negate(x):
    if is_zero(x):
        return _zero_like(x)
    return BigInt(x.digits, not x.negative)

def absolute_value(x):
    return BigInt(x.digits, False)

def less_than(x, y):
    if is_zero(x) and is_zero(y):
        return False
    if x.negative != y.negative:
        return x.negative
    if x.negative:
        return less_than(absolute_value(y), absolute_value(x))
    return mpn.cmp(x.digits, y.digits) < 0

def equal(x, y):
    if is_zero(x) and is_zero(y):
        return True
    return x.negative == y.negative and x.digits.normalized() == y.digits.normalized()

# add and subtract reduce to each other; each hop leaves fewer negative
# operands, so the recursion bottoms out in a kernel call.

def add(x, y):
    # -x + -y = -(x + y)
    if x.negative and y.negative:
        return negate(add(absolute_value(x), absolute_value(y)))
    # -x + y = y - x
    if x.negative:
        return subtract(y, absolute_value(x))
    # x + -y = x - y
    if y.negative:
        return subtract(x, absolute_value(y))
    return _canonical(mpn.add_n(x.digits, y.digits), False)

def subtract(x, y):
    # x - y = -(y - x)
    if less_than(x, y):
        return negate(subtract(y, x))
    # from here on x >= y
    # -x - -y = -(x - y) on the magnitudes
    if x.negative and y.negative:
        return negate(subtract(absolute_value(x), absolute_value(y)))
    # -x - y = -(x + y)
    if x.negative:
        return negate(add(absolute_value(x), y))
    # x - -y = x + y
    if y.negative:
        return add(x, absolute_value(y))
    return _canonical(mpn.sub_n(x.digits, y.digits), False)

def shift_left(x, k):
    if k < 0:
        raise ValueError(f'negative shift count: {k}')
    # zeros under a zero would break the empty-zero form
    if is_zero(x):
        return _zero_like(x)
    return _canonical(x.digits.prepend_zeros(k), x.negative)

def shift_right(x, k):
    if k < 0:
        raise ValueError(f'negative shift count: {k}')
    return _canonical(x.digits.drop_front(k), x.negative)

def multiply(x, y):
    if len(y.digits) > len(x.digits):
        x, y = y, x
    negative = x.negative != y.negative
    return _canonical(mpn.mul(x.digits, y.digits), negative)

def divide(x, y):
    '''(quotient, remainder), truncating toward zero.'''
    if is_zero(y):
        logger.debug('refusing to divide %d limbs by zero', len(x.digits))
        raise DivisionByZero('division by zero')
    if less_than(absolute_value(x), absolute_value(y)):
        return _zero_like(x), _canonical(x.digits, x.negative)
    logger.debug('long division of %d limbs by %d limbs', len(x.digits), len(y.digits))
    q, r = mpn.divrem(x.digits, y.digits)
    return _canonical(q, x.negative != y.negative), _canonical(r, x.negative)

def __BigIntOpBinary(func, reflected=False):
    def op(x, y):
        if type(y) is not BigInt:
            if not isinstance(y, int):
                return NotImplemented
            y = from_int(y, xp=x.xp)
        return func(y, x) if reflected else func(x, y)
    return op
for opname, func in [
        ['add', add],
        ['sub', subtract],
        ['mul', multiply],
        ['divmod', divide],
        ['floordiv', lambda x, y: divide(x, y)[0]],
        ['mod', lambda x, y: divide(x, y)[1]],
]:
    setattr(BigInt, f'__{opname}__', __BigIntOpBinary(func))
    setattr(BigInt, f'__r{opname}__', __BigIntOpBinary(func, reflected=True))
for opname, func in [
        ['eq', equal],
        ['ne', lambda x, y: not equal(x, y)],
        ['lt', less_than],
        ['gt', lambda x, y: less_than(y, x)],
        ['le', lambda x, y: not less_than(y, x)],
        ['ge', lambda x, y: not less_than(x, y)],
]:
    setattr(BigInt, f'__{opname}__', __BigIntOpBinary(func))

if __name__ == '__main__':
    import array_api_strict as xp
    import numpy as np
    rng = np.random.default_rng(0)
    def rand_int(limbs):
        value = int.from_bytes(rng.bytes(4 * limbs), 'little')
        return -value if rng.integers(2) else value

    assert from_hex('FFFFFFFF') + from_hex('1') == from_hex('100000000')
    assert from_hex('100000000') - 1 == from_hex('FFFFFFFF')
    assert str(from_hex('FFFFFFFF') * from_hex('FFFFFFFF')) == 'FFFFFFFE00000001'
    for _ in range(64):
        a = rand_int(int(rng.integers(0, 6)))
        b = rand_int(int(rng.integers(0, 4)))
        x = from_int(a, xp=xp)
        y = from_int(b, xp=xp)
        assert int(x + y) == a + b
        assert int(x - y) == a - b
        assert int(x * y) == a * b
        assert (x < y) == (a < b)
        if b:
            q, r = divide(x, y)
            assert int(q) * b + int(r) == a
            assert abs(int(r)) < abs(b)
        assert from_hex(to_hex(x), xp=xp) == x

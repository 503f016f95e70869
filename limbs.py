# representation:
#  a 1-d array of uint32 limbs, least significant first.
#  the high end carries no zero limbs once normalized; zero is the empty array.
#  buffers are never written after construction. slicing updates (drop_front,
#    truncate) hand out views of the same buffer, everything else allocates.
# NOTE: LIMBS are the mp term for WORDS. here each one is a base 2**32 digit.

import numpy as np

WANT_ASSERT = True
LIMB_BITS = 32
NUMB_MASK = (1<<LIMB_BITS)-1
NUMB_MAX = NUMB_MASK
BASE = 1<<LIMB_BITS

if WANT_ASSERT:
    def ASSERT_NORMALIZED(limbs):
        assert limbs.is_normalized(), limbs
    def ASSERT_LIMB(d):
        assert 0 <= d <= NUMB_MAX, d
else:
    def ASSERT_NORMALIZED(limbs):
        pass
    def ASSERT_LIMB(d):
        pass

def check_limb(d):
    d = int(d)
    if not 0 <= d <= NUMB_MAX:
        raise ValueError(f'limb out of range: {d}')
    return d

class Limbs:
    def __init__(self, data=(), *, xp=None):
        if type(data) is Limbs:
            if xp is not None and xp is not data.xp:
                data = data.to_namespace(xp)
            self.xp = data.xp
            self._data = data._data
        elif hasattr(data, '__array_namespace__'):
            src = self.xp = data.__array_namespace__()
            if not src.isdtype(data.dtype, 'integral'):
                raise TypeError(data.dtype)
            if len(data.shape) != 1:
                raise ValueError(f'limbs must be 1-d, got shape {data.shape}')
            # only compare against bounds the dtype can represent
            info = src.iinfo(data.dtype)
            if data.shape[0]:
                if info.min < 0 and src.any(data < 0):
                    raise ValueError('limb out of range')
                if info.max > NUMB_MAX and src.any(data > NUMB_MAX):
                    raise ValueError('limb out of range')
            # the value owns its limbs, later writes to data must not show through
            self._data = src.astype(data, src.uint32, copy=True)
            if xp is not None and xp is not src:
                moved = self.to_namespace(xp)
                self.xp = xp
                self._data = moved._data
        else:
            if xp is None:
                xp = np
            self.xp = xp
            self._data = xp.asarray([check_limb(d) for d in data], dtype=xp.uint32)

    @classmethod
    def _wrap(cls, xp, data):
        # trusted constructor for kernel output already in uint32
        limbs = cls.__new__(cls)
        limbs.xp = xp
        limbs._data = data
        return limbs

    @property
    def data(self):
        return self._data

    def __len__(self):
        return self._data.shape[0]
    def __getitem__(self, idx):
        n = len(self)
        if idx < 0:
            idx += n
        if not 0 <= idx < n:
            raise IndexError(idx)
        return int(self._data[idx])
    def digit(self, idx):
        # limbs past the end read as leading zeros
        return int(self._data[idx]) if idx < len(self) else 0
    def __iter__(self):
        for idx in range(len(self)):
            yield int(self._data[idx])
    def tolist(self):
        return list(self)

    def push_back(self, d):
        xp = self.xp
        tail = xp.asarray([check_limb(d)], dtype=xp.uint32)
        return Limbs._wrap(xp, xp.concat([self._data, tail]))
    def push_front(self, d):
        xp = self.xp
        head = xp.asarray([check_limb(d)], dtype=xp.uint32)
        return Limbs._wrap(xp, xp.concat([head, self._data]))
    def prepend_zeros(self, k):
        if k < 0:
            raise ValueError(f'negative limb count: {k}')
        if k == 0:
            return self
        xp = self.xp
        return Limbs._wrap(xp, xp.concat([xp.zeros(k, dtype=xp.uint32), self._data]))
    def drop_front(self, k):
        if k < 0:
            raise ValueError(f'negative limb count: {k}')
        return Limbs._wrap(self.xp, self._data[min(k, len(self)):])
    def truncate(self, k):
        if k < 0:
            raise ValueError(f'negative limb count: {k}')
        return Limbs._wrap(self.xp, self._data[:min(k, len(self))])
    def padded(self, n):
        # zero extension at the high end, used to line operands up for the kernels
        old = len(self)
        if n <= old:
            return self._data
        xp = self.xp
        return xp.concat([self._data, xp.zeros(n - old, dtype=xp.uint32)])

    def normalized(self):
        xp = self.xp
        if len(self) == 0 or self._data[-1] != 0:
            return self
        nz = xp.nonzero(self._data)[0]
        if nz.shape[0] == 0:
            return Limbs._wrap(xp, self._data[:0])
        return Limbs._wrap(xp, self._data[:int(nz[-1]) + 1])
    def is_normalized(self):
        return len(self) == 0 or int(self._data[-1]) != 0

    def to_namespace(self, xp):
        if xp is self.xp:
            return self
        return Limbs._wrap(xp, xp.asarray(self.tolist(), dtype=xp.uint32))

    def __eq__(x, y):
        if type(y) is not Limbs:
            return NotImplemented
        if len(x) != len(y):
            return False
        if len(x) == 0:
            return True
        y = y.to_namespace(x.xp)
        return bool(x.xp.all(x._data == y._data))
    def __hash__(self):
        return hash(tuple(self))
    def __repr__(self):
        return 'Limbs([' + ', '.join(f'0x{d:08x}' for d in self) + '])'

if __name__ == '__main__':
    import array_api_strict as xp
    v = Limbs([1, 2, 0, 0], xp=xp)
    assert not v.is_normalized()
    assert v.normalized() == Limbs([1, 2])
    assert v.push_front(7).tolist() == [7, 1, 2, 0, 0]
    assert v.drop_front(1).truncate(1).tolist() == [2]
    # updates never disturb the original
    assert v.tolist() == [1, 2, 0, 0]
    assert Limbs(np.asarray([NUMB_MAX], dtype=np.uint64))[0] == NUMB_MAX

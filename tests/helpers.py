def random_int(rng, max_limbs, signed=True):
    """A python int with up to max_limbs limbs, sign chosen at random."""
    limbs = int(rng.integers(0, max_limbs + 1))
    value = int.from_bytes(rng.bytes(4 * limbs), 'little')
    if signed and rng.integers(2):
        return -value
    return value

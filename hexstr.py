# hex text <-> limbs.
# each hex character is 4 bits, so 8 characters fill one limb exactly.
# characters are read from the right (least significant) end and packed
# upward inside the current limb; the printer walks the other way.

from limbs import LIMB_BITS, Limbs

BITS_PER_CHAR = 4
CHARS_PER_LIMB = LIMB_BITS // BITS_PER_CHAR
RADIX = 1 << BITS_PER_CHAR

class MalformedLiteral(ValueError):
    pass

def char_value(c):
    # 0-9 then a-z in either case, so up to base 36
    o = ord(c)
    if ord('0') <= o <= ord('9'):
        return o - ord('0')
    if ord('a') <= o <= ord('z'):
        return 10 + o - ord('a')
    if ord('A') <= o <= ord('Z'):
        return 10 + o - ord('A')
    raise MalformedLiteral(f'not a digit character: {c!r}')

def char_for(value, uppercase=True):
    assert 0 <= value < 36, value
    if value < 10:
        return chr(ord('0') + value)
    return chr(ord('A' if uppercase else 'a') + value - 10)

def split_sign(text):
    if type(text) is not str:
        raise TypeError(f'hex literal must be str, got {type(text).__name__}')
    if text[:1] in ('-', '+'):
        return text[0] == '-', text[1:]
    return False, text

def limbs_from_hex(text, *, xp=None):
    '''Unsigned hex digits to normalized limbs. An empty string is zero.'''
    limbs = []
    current = 0
    counter = 0
    for c in reversed(text):
        value = char_value(c)
        if value >= RADIX:
            raise MalformedLiteral(f'not a hex digit: {c!r} in {text!r}')
        current |= value << (BITS_PER_CHAR * counter)
        counter = (counter + 1) % CHARS_PER_LIMB
        if counter == 0:
            limbs.append(current)
            current = 0
    if current:
        limbs.append(current)
    # leading zero characters leave zero limbs at the high end
    return Limbs(limbs, xp=xp).normalized()

def hex_from_limbs(limbs, negative=False, uppercase=True):
    out = ['-'] if negative else []
    started = False
    for idx in range(len(limbs) - 1, -1, -1):
        d = limbs[idx]
        for shift in range(LIMB_BITS - BITS_PER_CHAR, -1, -BITS_PER_CHAR):
            nibble = (d >> shift) & (RADIX - 1)
            # leading zeros are skipped
            if started or nibble:
                out.append(char_for(nibble, uppercase))
                started = True
    if not started:
        # zero prints as 0, never as an empty string or -0
        return '0'
    return ''.join(out)

if __name__ == '__main__':
    assert limbs_from_hex('100000000').tolist() == [0, 1]
    assert limbs_from_hex('00000000ff').tolist() == [0xff]
    assert hex_from_limbs(Limbs([0, 1])) == '100000000'
    assert hex_from_limbs(Limbs([0xabc]), True, uppercase=False) == '-abc'
    assert hex_from_limbs(Limbs([])) == '0'

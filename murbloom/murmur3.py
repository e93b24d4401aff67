"""
MurmurHash3, x86 32-bit variant, seed 0.
https://en.wikipedia.org/wiki/MurmurHash
"""

MASK_32 = 0xFFFFFFFF

C1 = 0xcc9e2d51
C2 = 0x1b873593


def to_signed32(value: int) -> int:
    value &= MASK_32
    return value - 0x100000000 if value & 0x80000000 else value


def to_unsigned32(value: int) -> int:
    return value & MASK_32


def _rotl(value, bits):
    return ((value << bits) | (value >> (32 - bits))) & MASK_32


def _scramble(block):
    block = (block * C1) & MASK_32
    block = _rotl(block, 15)
    return (block * C2) & MASK_32


def _fold(h, block):
    h ^= block
    h = _rotl(h, 13)
    return (h * 5 + 0xe6546b64) & MASK_32


def final_mix(h: int, length: int) -> int:
    """
    Xor the length in and run the avalanche mix. `h` may be given signed or unsigned,
    the result is always a signed 32-bit int.
    """
    h = (h ^ length) & MASK_32
    h ^= h >> 16
    h = (h * 0x85ebca6b) & MASK_32
    h ^= h >> 13
    h = (h * 0xc2b2ae35) & MASK_32
    h ^= h >> 16
    return to_signed32(h)


def hash_bytes(data: bytes) -> int:
    h = 0
    length = len(data)
    n_blocks = length // 4

    for i in range(0, n_blocks * 4, 4):
        h = _fold(h, _scramble(int.from_bytes(data[i:i + 4], byteorder='little')))

    # the tail is scrambled but skips the fold
    tail = data[n_blocks * 4:]
    if tail:
        h ^= _scramble(int.from_bytes(tail, byteorder='little'))

    return final_mix(h, length)


def hash_string(s: str, encoding: str = 'utf-8', errors: str = 'replace') -> int:
    # pin the encoding if hashes have to match across machines.
    # unencodable characters (lone surrogates included) hash as '?'
    return hash_bytes(s.encode(encoding, errors))

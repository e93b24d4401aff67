# Sizing formulas: https://en.wikipedia.org/wiki/Bloom_filter#Probability_of_false_positives.

import codecs
import logging
from math import exp, floor, log
from sys import getsizeof

from bitarray import bitarray

from murbloom.murmur3 import final_mix, hash_bytes, hash_string

logger = logging.getLogger(__name__)

POSITIVE_MASK = 0x7FFFFFFF


class InvalidArgument(ValueError):
    pass


def _check_argument(condition, message):
    if not condition:
        raise InvalidArgument(message)


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _is_text_encoding(encoding):
    # codecs.lookup also accepts binary codecs such as 'base64', str.encode does not
    try:
        codecs.lookup(encoding)
        ''.encode(encoding)
    except (LookupError, TypeError):
        return False
    return True


def calc_num_bits(expected_insertions, false_positive_prob):
    # truncated, not rounded up
    return int(-expected_insertions * log(false_positive_prob) / (log(2) ** 2))


def calc_num_hash_functions(expected_insertions, num_bits):
    # round half up
    return max(1, floor(num_bits / expected_insertions * log(2) + 0.5))


class BloomFilter:
    """
    Bloom filter over text keys, hashed with Murmur3 (x86, 32 bit).

    With `fast_hash` off, the i-th bit position comes from hashing the key with `str(i)` appended,
    so every position costs a full pass over the key. With `fast_hash` on, the key is hashed once and
    the following positions are derived by re-running the Murmur3 finalizer on the previous hash, which
    is cheaper but gives a slightly higher false positive rate.

    Not thread-safe.
    """

    def __init__(self, num_bits: int, num_hash_functions: int, fast_hash: bool = False, encoding: str = 'utf-8'):
        _check_argument(_is_int(num_bits) and num_bits > 0, 'Length of bitset must be positive.')
        _check_argument(_is_int(num_hash_functions) and num_hash_functions > 0,
                        'Number of hash functions must be positive.')
        _check_argument(_is_text_encoding(encoding), f'Unknown text encoding: {encoding!r}')

        self._num_bits = num_bits
        self._num_hash_funcs = num_hash_functions
        self._fast_hash = bool(fast_hash)
        self._encoding = encoding

        self.bitarray = bitarray(num_bits)
        self.bitarray.setall(False)

    @classmethod
    def for_capacity(cls, expected_insertions: int, false_positive_prob: float, fast_hash: bool = False,
                     encoding: str = 'utf-8'):
        """
        Sizes the filter for `expected_insertions` keys at `false_positive_prob`. The bit count is truncated,
        so parameters that size the filter to zero bits (e.g. n=1, p=0.9) raise InvalidArgument.
        """
        _check_argument(_is_int(expected_insertions) and expected_insertions > 0,
                        'Number of expected insertions must be positive.')
        _check_argument(0.0 < false_positive_prob < 1.0,
                        'False positive probability must be greater than 0.0 and less than 1.0')

        num_bits = calc_num_bits(expected_insertions, false_positive_prob)
        num_hash_funcs = calc_num_hash_functions(expected_insertions, num_bits)
        logger.debug('sized filter for n=%d, p=%s: %d bits, %d hash functions',
                     expected_insertions, false_positive_prob, num_bits, num_hash_funcs)

        return cls(num_bits, num_hash_funcs, fast_hash=fast_hash, encoding=encoding)

    @property
    def num_bits(self):
        return self._num_bits

    @property
    def num_hash_functions(self):
        return self._num_hash_funcs

    @property
    def fast_hash(self):
        return self._fast_hash

    @property
    def encoding(self):
        return self._encoding

    def _positions(self, key: str):
        if self._fast_hash:
            data = key.encode(self._encoding, 'replace')
            key_len = len(data)
            h = hash_bytes(data) & POSITIVE_MASK
            yield h % self._num_bits
            for _ in range(1, self._num_hash_funcs):
                h = final_mix(h, key_len) & POSITIVE_MASK
                yield h % self._num_bits
        else:
            for i in range(self._num_hash_funcs):
                yield (hash_string(key + str(i), self._encoding) & POSITIVE_MASK) % self._num_bits

    def insert(self, key: str) -> bool:
        """
        Returns True if at least one bit was flipped, i.e. the key was definitely not present before.
        """
        changed = False
        for pos in self._positions(key):
            if not self.bitarray[pos]:
                self.bitarray[pos] = True
                changed = True
        return changed

    def might_contain(self, key: str) -> bool:
        for pos in self._positions(key):
            if not self.bitarray[pos]:
                return False
        return True

    def __contains__(self, key):
        return self.might_contain(key)

    @property
    def bits_set(self):
        return self.bitarray.count(1)

    @property
    def fill_ratio(self):
        return self.bits_set / self._num_bits

    def expected_false_positive_rate(self, num_inserted: int) -> float:
        """Analytical false positive rate after `num_inserted` distinct keys."""
        return (1 - exp(-self._num_hash_funcs * num_inserted / self._num_bits)) ** self._num_hash_funcs

    def __sizeof__(self):
        return getsizeof(self.bitarray)

    def __repr__(self):
        return (f'{type(self).__name__}(num_bits={self._num_bits}, num_hash_functions={self._num_hash_funcs}, '
                f'fast_hash={self._fast_hash})')


def create(a, b, fast_hash=False, encoding='utf-8') -> BloomFilter:
    """
    create(num_bits, num_hash_functions) or create(expected_insertions, false_positive_prob).
    A float second argument selects sizing by capacity.
    """
    if isinstance(b, float):
        return BloomFilter.for_capacity(a, b, fast_hash=fast_hash, encoding=encoding)
    return BloomFilter(a, b, fast_hash=fast_hash, encoding=encoding)

from murbloom.bloom import BloomFilter, InvalidArgument, create
from murbloom.murmur3 import hash_bytes, hash_string, final_mix

__all__ = ['BloomFilter', 'InvalidArgument', 'create', 'hash_bytes', 'hash_string', 'final_mix']

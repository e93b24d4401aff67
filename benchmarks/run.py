"""
Compares the standard and the fast hashing modes: insert/query throughput and observed false positive rate.
"""

import sys
import itertools
from argparse import ArgumentParser
from random import Random
from sys import getsizeof

import pandas as pd
from tqdm import tqdm

sys.path.append('.')  # make it runnable from the top level

from benchmarks import Timer
from murbloom import BloomFilter


def make_keys(rng, n_keys, klen):
    keys = {}
    while len(keys) < n_keys:
        keys[rng.randbytes(klen).hex()] = None
    return list(keys)


def main():
    parser = ArgumentParser()
    parser.add_argument('--insertions', type=int, nargs='+', default=[10_000, 100_000])
    parser.add_argument('--fpp', type=float, nargs='+', default=[0.01, 0.03, 0.05, 0.10])
    parser.add_argument('--klen', type=int, nargs='+', default=[4, 16, 64], help='key length in random bytes')
    parser.add_argument('--seed', type=int, default=1)
    parser.add_argument('-o', type=str, help='output csv', default='measurements.csv')
    args = parser.parse_args()

    rng = Random(args.seed)
    data = []

    for n, klen in tqdm(list(itertools.product(args.insertions, args.klen)), desc='Global', position=0):
        # twice as many keys as insertions, the second half is never inserted
        keys = make_keys(rng, 2 * n, klen)
        inserted, absent = keys[:n], keys[n:]

        for fpp, fast_hash in tqdm(list(itertools.product(args.fpp, [False, True])), desc=' Filters', position=1,
                                   leave=False):
            bf = BloomFilter.for_capacity(n, fpp, fast_hash=fast_hash)
            row = {'n': n, 'klen': klen, 'fpp': fpp, 'fast_hash': fast_hash, 'num_bits': bf.num_bits,
                   'num_hash_functions': bf.num_hash_functions}

            with Timer(n_ops=len(inserted)) as t:
                for k in inserted:
                    bf.insert(k)
            data.append({**row, 'metric': 'insert', 'value': float(t)})
            data.append({**row, 'metric': 'insert_ops_per_sec', 'value': t.ops_per_sec})

            with Timer(n_ops=len(absent)) as t:
                false_positives = sum(1 for k in absent if bf.might_contain(k))
            data.append({**row, 'metric': 'query', 'value': float(t)})
            data.append({**row, 'metric': 'query_ops_per_sec', 'value': t.ops_per_sec})
            data.append({**row, 'metric': 'fp_rate', 'value': false_positives / len(absent)})
            data.append({**row, 'metric': 'fill_ratio', 'value': bf.fill_ratio})
            data.append({**row, 'metric': 'ram', 'value': getsizeof(bf)})

    pd.DataFrame.from_dict(data).to_csv(args.o, index=None)


if __name__ == '__main__':
    main()

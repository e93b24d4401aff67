import time


class Timer:
    """Wall-clock timer for a block of `n_ops` filter operations."""

    def __init__(self, name='', n_ops=0):
        self.name = name
        self.n_ops = n_ops
        self.interval = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.interval = time.perf_counter() - self.start

    def __float__(self):
        return self.interval

    @property
    def ops_per_sec(self):
        return self.n_ops / self.interval if self.interval else float('inf')

    def __str__(self):
        label = f'{self.name}:\t' if self.name else ''
        if self.n_ops:
            return f'{label}{self.interval:.3f}s ({self.ops_per_sec:,.0f} ops/s)'
        return f'{label}{self.interval:.3f}s'

from benchmarks.timer import Timer

__all__ = ['Timer']

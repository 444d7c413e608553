"""Benchmark construction, storage and statistics."""

from .builder import RoleBucket, bucket_roster, build_benchmarks, merge_buckets, summarize_bucket
from .store import DEFAULT_BENCHMARK_FILENAME, BenchmarkStore

__all__ = [
    "BenchmarkStore",
    "DEFAULT_BENCHMARK_FILENAME",
    "RoleBucket",
    "bucket_roster",
    "build_benchmarks",
    "merge_buckets",
    "summarize_bucket",
]

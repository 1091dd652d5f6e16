#!/usr/bin/env python3
"""
msetbench: Benchmarks for Multiset Hashing

Measures per-operation latency of MultisetHash on each preset field,
the gain of batched removal, and throughput when independent hashes
are built on several threads.

Usage:
    msetbench.py ops       [--output DIR] [--iterations N]
    msetbench.py batch     [--output DIR] [--batch-size N]
    msetbench.py threads   [--output DIR] [--items N]
    msetbench.py all       [--output DIR]
"""

from __future__ import annotations
import argparse
import json
import platform
import statistics
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Callable, Dict, List

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from msethash import (
    MultisetHash,
    Expander,
    FieldHasher,
    BLS12_381_SCALAR,
    BN254_SCALAR,
    GOLDILOCKS,
)


FIELDS = [BLS12_381_SCALAR, BN254_SCALAR, GOLDILOCKS]
THREAD_COUNTS = [1, 2, 4, 8]


@dataclass
class OpResult:
    """Latency of one operation on one field."""
    field: str
    operation: str
    iterations: int
    median_latency_us: float
    p95_latency_us: float
    throughput_ops: float


@dataclass
class BatchResult:
    field: str
    batch_size: int
    single_ms: float
    batched_ms: float
    speedup: float


@dataclass
class ThreadResult:
    threads: int
    items: int
    duration_ms: float
    throughput_ops: float
    scaling_efficiency: float


def _time_op(fn: Callable[[], Any], iterations: int) -> List[float]:
    samples = []
    for _ in range(iterations):
        start = time.perf_counter()
        fn()
        samples.append((time.perf_counter() - start) * 1e6)
    return samples


def _summarize(field: str, operation: str, samples: List[float]) -> OpResult:
    median = statistics.median(samples)
    p95 = sorted(samples)[int(len(samples) * 0.95) - 1]
    return OpResult(
        field=field,
        operation=operation,
        iterations=len(samples),
        median_latency_us=median,
        p95_latency_us=p95,
        throughput_ops=1e6 / median if median else 0.0,
    )


def run_ops(iterations: int = 2000) -> List[OpResult]:
    """Single-operation latency on every preset field."""
    results = []
    for field in FIELDS:
        elem = field.random()
        count = 2**64 - 1
        h = MultisetHash.new(field).add(field.random(), 3)
        other = MultisetHash.new(field).add(field.random(), 5)

        ops = {
            'add': lambda: h.add(elem, count),
            'remove': lambda: h.remove(elem, count),
            'union': lambda: h.multiset_union(other),
            'difference': lambda: h.multiset_difference(other),
            'add_elem': lambda: h.add_elem("benchmark-value", 1),
        }
        for name, fn in ops.items():
            results.append(_summarize(field.name, name, _time_op(fn, iterations)))

        for expander in Expander:
            hasher = FieldHasher(field, expander=expander)
            samples = _time_op(lambda: hasher.map("benchmark-value"), iterations)
            results.append(_summarize(field.name, f"map[{expander.value}]", samples))
    return results


def run_batch(batch_size: int = 1000) -> List[BatchResult]:
    """remove vs remove_many on the same pairs."""
    results = []
    for field in FIELDS:
        pairs = [(field.random(), 1) for _ in range(batch_size)]

        start = time.perf_counter()
        h = MultisetHash.new(field)
        for elem, count in pairs:
            h = h.remove(elem, count)
        single_ms = (time.perf_counter() - start) * 1000

        start = time.perf_counter()
        batched = MultisetHash.new(field).remove_many(pairs)
        batched_ms = (time.perf_counter() - start) * 1000

        assert batched == h
        results.append(BatchResult(
            field=field.name,
            batch_size=batch_size,
            single_ms=single_ms,
            batched_ms=batched_ms,
            speedup=single_ms / batched_ms if batched_ms else 0.0,
        ))
    return results


def _build_chunk(values: List[str]) -> MultisetHash:
    h = MultisetHash.new()
    for v in values:
        h = h.add_elem(v, 1)
    return h


def run_threads(items: int = 4000) -> List[ThreadResult]:
    """
    Build one hash per chunk on N threads and union the chunks.

    Every chunk is an independent value, so no locking is involved.
    """
    values = [f"row-{i}" for i in range(items)]
    expected = _build_chunk(values)
    results = []
    base_throughput = None

    for threads in THREAD_COUNTS:
        chunks = [values[i::threads] for i in range(threads)]
        start = time.perf_counter()
        with ThreadPoolExecutor(max_workers=threads) as pool:
            partials = list(pool.map(_build_chunk, chunks))
        total = MultisetHash.new()
        for partial in partials:
            total = total + partial
        duration_ms = (time.perf_counter() - start) * 1000

        assert total == expected
        throughput = items / (duration_ms / 1000) if duration_ms else 0.0
        if base_throughput is None:
            base_throughput = throughput
        results.append(ThreadResult(
            threads=threads,
            items=items,
            duration_ms=duration_ms,
            throughput_ops=throughput,
            scaling_efficiency=throughput / (threads * base_throughput) if base_throughput else 0.0,
        ))
    return results


class MsetBench:
    """Main benchmark orchestrator."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def run_ops(self, iterations: int = 2000) -> Dict[str, Any]:
        print("=" * 60)
        print("RUNNER 1: Operation Latency")
        print("=" * 60)

        results = run_ops(iterations)
        for r in results:
            print(f"  {r.field:18s} {r.operation:20s}: {r.median_latency_us:8.2f} µs, "
                  f"{r.throughput_ops:10.0f} ops/s")
        return {'ops': [asdict(r) for r in results]}

    def run_batch(self, batch_size: int = 1000) -> Dict[str, Any]:
        print("\n" + "=" * 60)
        print("RUNNER 2: Batched Removal")
        print("=" * 60)

        results = run_batch(batch_size)
        for r in results:
            print(f"  {r.field:18s} n={r.batch_size}: single {r.single_ms:8.2f} ms, "
                  f"batched {r.batched_ms:8.2f} ms ({r.speedup:.1f}x)")
        return {'batch': [asdict(r) for r in results]}

    def run_threads(self, items: int = 4000) -> Dict[str, Any]:
        print("\n" + "=" * 60)
        print("RUNNER 3: Independent Hashes on Threads")
        print("=" * 60)

        results = run_threads(items)
        for r in results:
            print(f"  threads={r.threads}: {r.throughput_ops:10.0f} items/s, "
                  f"efficiency {r.scaling_efficiency:.2f}")
        return {'threads': [asdict(r) for r in results]}

    def run_all(self) -> Dict[str, Any]:
        results = {}
        results.update(self.run_ops())
        results.update(self.run_batch())
        results.update(self.run_threads())
        return results

    def save(self, name: str, results: Dict[str, Any]) -> Path:
        report = {
            'msetbench_version': '1.0.0',
            'timestamp': time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            'environment': {
                'python': platform.python_version(),
                'platform': platform.platform(),
            },
            'results': results,
        }
        path = self.output_dir / f"{name}.json"
        path.write_text(json.dumps(report, indent=2))
        print(f"\nReport written to {path}")
        return path


def main():
    parser = argparse.ArgumentParser(description="Multiset hash benchmarks")
    parser.add_argument('command', choices=['ops', 'batch', 'threads', 'all'])
    parser.add_argument('--output', type=Path, default=Path('bench_results'))
    parser.add_argument('--iterations', type=int, default=2000)
    parser.add_argument('--batch-size', type=int, default=1000)
    parser.add_argument('--items', type=int, default=4000)
    args = parser.parse_args()

    bench = MsetBench(args.output)
    if args.command == 'ops':
        results = bench.run_ops(args.iterations)
    elif args.command == 'batch':
        results = bench.run_batch(args.batch_size)
    elif args.command == 'threads':
        results = bench.run_threads(args.items)
    else:
        results = bench.run_all()
    bench.save(args.command, results)


if __name__ == '__main__':
    main()

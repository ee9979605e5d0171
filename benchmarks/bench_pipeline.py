#!/usr/bin/env python3
"""
Pipeline performance benchmarks.

Measures throughput and peak traced memory of the pipeline stages.
"""

import io
import time
import tracemalloc
from collections.abc import Iterator
from typing import Any

from gpx_stream.pipeline import (
    JsonArrayEncoder,
    Pipeline,
    RecordDecoder,
    XmlTokenCursor,
    is_valid_record,
    lazy_filter,
)


class NullSink:
    """Sink discarding everything."""

    def write(self, data: bytes) -> int:
        return len(data)


def generate_gpx(count: int, chunk_records: int = 256) -> Iterator[bytes]:
    """Yield a GPX document with ``count`` waypoints in batched chunks."""
    yield b'<?xml version="1.0"?>\n<gpx version="1.1" xmlns="http://www.topografix.com/GPX/1/1">\n'
    batch = []
    for i in range(count):
        batch.append(
            f'<wpt lat="{i % 180 - 90}.{i:06d}" lon="{i % 360 - 180}.{i:06d}">'
            f"<ele>{i % 3000}</ele><name>WP{i}</name></wpt>\n"
        )
        if len(batch) == chunk_records:
            yield "".join(batch).encode()
            batch = []
    if batch:
        yield "".join(batch).encode()
    yield b"</gpx>\n"


def benchmark_tokenizer(iterations: int = 50_000) -> dict[str, Any]:
    """Benchmark tokenizer throughput."""
    start = time.perf_counter()
    tokens = sum(1 for _ in XmlTokenCursor(generate_gpx(iterations)))
    elapsed = time.perf_counter() - start

    return {
        "name": "XmlTokenCursor",
        "iterations": iterations,
        "items": tokens,
        "elapsed_seconds": elapsed,
        "throughput": tokens / elapsed,
        "latency_us": (elapsed / tokens) * 1_000_000,
    }


def benchmark_decoder(iterations: int = 50_000) -> dict[str, Any]:
    """Benchmark tokenizer + decoder + filter throughput."""
    start = time.perf_counter()
    records = lazy_filter(RecordDecoder(XmlTokenCursor(generate_gpx(iterations))), is_valid_record)
    count = sum(1 for _ in records)
    elapsed = time.perf_counter() - start

    return {
        "name": "RecordDecoder",
        "iterations": iterations,
        "items": count,
        "elapsed_seconds": elapsed,
        "throughput": count / elapsed,
        "latency_us": (elapsed / count) * 1_000_000,
    }


def benchmark_encoder(iterations: int = 50_000) -> dict[str, Any]:
    """Benchmark encoder throughput on precomputed coordinates."""
    sink = io.BytesIO()
    coordinates = list(Pipeline().cursor(generate_gpx(iterations)))

    start = time.perf_counter()
    count = JsonArrayEncoder(sink).encode(iter(coordinates))
    elapsed = time.perf_counter() - start

    return {
        "name": "JsonArrayEncoder",
        "iterations": iterations,
        "items": count,
        "elapsed_seconds": elapsed,
        "throughput": count / elapsed,
        "latency_us": (elapsed / count) * 1_000_000,
    }


def benchmark_full_pipeline(iterations: int = 50_000) -> dict[str, Any]:
    """Benchmark full pipeline throughput and peak memory."""
    tracemalloc.start()
    start = time.perf_counter()
    stats = Pipeline().run(generate_gpx(iterations), NullSink())
    elapsed = time.perf_counter() - start
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()

    return {
        "name": "FullPipeline",
        "iterations": iterations,
        "items": stats.coordinates_written,
        "elapsed_seconds": elapsed,
        "throughput": stats.coordinates_written / elapsed,
        "latency_us": (elapsed / stats.coordinates_written) * 1_000_000,
        "peak_kib": peak / 1024,
    }


def run_benchmarks() -> None:
    """Run all benchmarks and print results."""
    print("=" * 60)
    print("Pipeline Benchmarks")
    print("=" * 60)
    print()

    benchmarks = [
        benchmark_tokenizer,
        benchmark_decoder,
        benchmark_encoder,
        benchmark_full_pipeline,
    ]

    for bench in benchmarks:
        result = bench()
        print(f"{result['name']}:")
        print(f"  Iterations: {result['iterations']}")
        print(f"  Elapsed: {result['elapsed_seconds']:.4f}s")
        print(f"  Throughput: {result['throughput']:.0f} items/sec")
        print(f"  Latency: {result['latency_us']:.2f} µs/item")
        if "peak_kib" in result:
            print(f"  Peak traced memory: {result['peak_kib']:.1f} KiB")
        print()

    # Peak memory should stay flat as the input grows
    print("Peak memory by record count:")
    for count in (1_000, 10_000, 100_000):
        result = benchmark_full_pipeline(count)
        print(f"  {count:>7} records: {result['peak_kib']:.1f} KiB")


if __name__ == "__main__":
    run_benchmarks()

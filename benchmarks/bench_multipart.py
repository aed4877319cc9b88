"""Repeatable benchmark for multipart response parsing.

Generates a synthetic eval response with N XML parts and measures
parse_multipart() / aggregate() / format_record() wall time and peak memory.
Doubling --parts should roughly double parse time (linear scan).

Usage:
    uv run python benchmarks/bench_multipart.py              # default 5000 parts
    uv run python benchmarks/bench_multipart.py --parts 20000
    uv run python benchmarks/bench_multipart.py --json       # machine-readable output
"""

import argparse
import json
import time
import tracemalloc

from ml_results.core.formatting import format_record
from ml_results.core.multipart import aggregate, parse_multipart

BOUNDARY = "ML_BOUNDARY_7b3f"


def generate_response(n_parts: int, boundary: str = BOUNDARY) -> str:
    """Build a CRLF multipart eval response with *n_parts* XML documents."""
    lines: list[str] = []
    for i in range(n_parts):
        lines.extend([
            f"--{boundary}",
            "Content-Type: application/xml",
            "X-Primitive: element",
            f"X-Uri: /ligands/{i:05d}.xml",
            "X-Path: /ligand",
            "",
            f'<ligand><id>{i}</id><name>compound-{i}</name><atoms count="{i % 50}"/></ligand>',
        ])
    lines.append(f"--{boundary}--")
    lines.append("")
    return "\r\n".join(lines)


def _timed(fn, *args):
    start = time.perf_counter()
    value = fn(*args)
    return value, (time.perf_counter() - start) * 1000.0


def run(n_parts: int) -> dict:
    text = generate_response(n_parts)

    tracemalloc.start()
    records, parse_ms = _timed(parse_multipart, text)
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()

    _, aggregate_ms = _timed(aggregate, text)

    start = time.perf_counter()
    for record in records:
        format_record(record)
    format_ms = (time.perf_counter() - start) * 1000.0

    assert len(records) == n_parts, f"expected {n_parts} records, got {len(records)}"
    return {
        "parts": n_parts,
        "input_chars": len(text),
        "parse_ms": round(parse_ms, 2),
        "aggregate_ms": round(aggregate_ms, 2),
        "format_all_ms": round(format_ms, 2),
        "parse_peak_kib": round(peak / 1024, 1),
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark multipart parsing")
    parser.add_argument("--parts", type=int, default=5000, help="Number of parts (default: 5000)")
    parser.add_argument("--json", action="store_true", help="Emit JSON")
    args = parser.parse_args()

    result = run(args.parts)
    if args.json:
        print(json.dumps(result, indent=2))
        return
    for key, value in result.items():
        print(f"{key:>16}: {value}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
planframe Core Benchmarks

Times plan execution for the main DataFrame operations at a few scales.
Run with: python benchmarks/bench_core.py [--save]

Results are printed as a table and, with --save, written to
benchmarks/results.json
"""

import argparse
import json
import os
import random
import sys
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List

from tabulate import tabulate

sys.path.insert(0, str(Path(__file__).parent.parent / "py-planframe"))

import planframe.functions as f  # noqa: E402
from planframe import Session, col, order_by, window  # noqa: E402


@dataclass
class BenchmarkResult:
    name: str
    rows: int
    time_ms: float
    rows_per_sec: float

    def to_dict(self):
        return {
            "name": self.name,
            "rows": self.rows,
            "time_ms": round(self.time_ms, 2),
            "rows_per_sec": round(self.rows_per_sec, 0),
        }


@contextmanager
def timer():
    """Yields a dict whose "elapsed_ms" is filled in on exit."""
    start = time.perf_counter()
    result = {"elapsed_ms": 0.0}
    yield result
    result["elapsed_ms"] = (time.perf_counter() - start) * 1000


def generate_csv(path: str, num_rows: int) -> None:
    """id, value, category, amount, name columns with a fixed seed."""
    rng = random.Random(42)
    categories = ["A", "B", "C", "D", "E"]
    names = ["Alice", "Bob", "Charlie", "Diana", "Eve"]
    with open(path, "w") as out:
        out.write("id,value,category,amount,name\n")
        for i in range(num_rows):
            out.write(
                f"{i},{rng.randint(1, 1000)},{rng.choice(categories)},"
                f"{rng.uniform(0, 10000):.2f},{rng.choice(names)}\n"
            )


def generate_join_csv(path: str, num_rows: int, key_range: int) -> None:
    rng = random.Random(43)
    with open(path, "w") as out:
        out.write("order_id,customer_id,data\n")
        for i in range(num_rows):
            out.write(f"{i},{rng.randint(0, key_range - 1)},{rng.randint(1, 100)}\n")


class Benchmarks:
    """Each bench_* method registers its CSV once and times collect()."""

    def __init__(self, session: Session, temp_dir: str):
        self.session = session
        self.temp_dir = temp_dir
        self.results: List[BenchmarkResult] = []
        self._tables = {}

    def table(self, num_rows: int):
        if num_rows not in self._tables:
            path = os.path.join(self.temp_dir, f"data_{num_rows}.csv")
            generate_csv(path, num_rows)
            self._tables[num_rows] = self.session.read_csv(path)
        return self._tables[num_rows]

    def run_benchmark(
        self,
        name: str,
        rows: int,
        fn: Callable[[], None],
        warmup: int = 1,
        iterations: int = 3,
    ) -> BenchmarkResult:
        for _ in range(warmup):
            fn()

        times = []
        for _ in range(iterations):
            with timer() as t:
                fn()
            times.append(t["elapsed_ms"])

        avg_time = sum(times) / len(times)
        result = BenchmarkResult(
            name=name,
            rows=rows,
            time_ms=avg_time,
            rows_per_sec=(rows / avg_time) * 1000 if avg_time > 0 else 0,
        )
        self.results.append(result)
        return result

    def bench_filter(self, num_rows: int) -> BenchmarkResult:
        df = self.table(num_rows).filter(col("value") > 500)
        return self.run_benchmark(f"filter_{num_rows}", num_rows, df.collect)

    def bench_filter_complex(self, num_rows: int) -> BenchmarkResult:
        df = self.table(num_rows).filter(
            (col("value") > 200) & (col("value") < 800) & (col("category") == "A")
        )
        return self.run_benchmark(f"filter_complex_{num_rows}", num_rows, df.collect)

    def bench_with_column(self, num_rows: int) -> BenchmarkResult:
        df = (
            self.table(num_rows)
            .with_column("doubled", col("value") * 2)
            .with_column("ratio", col("amount") / col("value"))
        )
        return self.run_benchmark(f"with_column_{num_rows}", num_rows, df.collect)

    def bench_join(self, left_rows: int, right_rows: int) -> BenchmarkResult:
        path = os.path.join(self.temp_dir, f"orders_{right_rows}.csv")
        generate_join_csv(path, right_rows, key_range=left_rows)
        orders = self.session.read_csv(path)
        df = self.table(left_rows).join(orders, (["id"], ["customer_id"]))
        return self.run_benchmark(
            f"join_{left_rows}x{right_rows}", left_rows + right_rows, df.collect
        )

    def bench_window_lag(self, num_rows: int) -> BenchmarkResult:
        df = self.table(num_rows).select(
            col("id"),
            window("lag", [col("value")], order_by=[order_by(col("id"))]).alias("prev"),
        )
        return self.run_benchmark(f"window_lag_{num_rows}", num_rows, df.collect)

    def bench_aggregate(self, num_rows: int) -> BenchmarkResult:
        df = self.table(num_rows).aggregate(
            [col("category")],
            [
                f.sum(col("value")).alias("total"),
                f.avg(col("amount")).alias("avg"),
                f.count(col("id")).alias("cnt"),
            ],
        )
        return self.run_benchmark(f"aggregate_{num_rows}", num_rows, df.collect)

    def bench_chain(self, num_rows: int) -> BenchmarkResult:
        df = (
            self.table(num_rows)
            .filter(col("value") > 100)
            .with_column("doubled", col("value") * 2)
            .select_columns("id", "value", "doubled", "category")
            .filter(col("category") == "A")
            .sort(order_by(col("doubled"), asc=False))
            .limit(100)
        )
        return self.run_benchmark(f"chain_{num_rows}", num_rows, df.collect)


def print_results(results: List[BenchmarkResult]) -> None:
    rows = [
        (r.name, f"{r.rows:,}", f"{r.time_ms:.2f}", f"{r.rows_per_sec:,.0f}")
        for r in results
    ]
    print()
    print(
        tabulate(
            rows,
            headers=["Benchmark", "Rows", "Time (ms)", "Rows/sec"],
            tablefmt="psql",
            colalign=("left", "right", "right", "right"),
        )
    )


def save_results(results: List[BenchmarkResult], path: str) -> None:
    data = {
        "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        "results": [r.to_dict() for r in results],
    }
    with open(path, "w") as out:
        json.dump(data, out, indent=2)
    print(f"\nResults saved to {path}")


def main():
    parser = argparse.ArgumentParser(description="planframe core benchmarks")
    parser.add_argument("--save", action="store_true", help="write results.json")
    args = parser.parse_args()

    small, medium, large = 10_000, 100_000, 1_000_000

    with Session() as session, tempfile.TemporaryDirectory() as temp_dir:
        bench = Benchmarks(session, temp_dir)

        print("[1/6] filter")
        for n in (small, medium, large):
            bench.bench_filter(n)
        bench.bench_filter_complex(medium)

        print("[2/6] with_column")
        for n in (small, medium, large):
            bench.bench_with_column(n)

        print("[3/6] join")
        bench.bench_join(small, small)
        bench.bench_join(medium, small)
        bench.bench_join(medium, medium)

        print("[4/6] window")
        bench.bench_window_lag(small)
        bench.bench_window_lag(medium)

        print("[5/6] aggregate")
        bench.bench_aggregate(small)
        bench.bench_aggregate(medium)

        print("[6/6] chain")
        for n in (small, medium, large):
            bench.bench_chain(n)

        print_results(bench.results)
        if args.save:
            save_results(bench.results, str(Path(__file__).parent / "results.json"))


if __name__ == "__main__":
    main()

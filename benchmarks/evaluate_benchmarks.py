"""Benchmark cold vs memoized evaluation and sequential vs parallel forcing."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable

from rpn_jax import Calculator, CalculatorConfig
from _bench_utils import host_metadata, sample_ms, summarize_ms


N_DEFAULT = (10, 100, 1000)
ROOTS_DEFAULT = 8


@dataclass(frozen=True)
class BenchCase:
    name: str
    build: Callable[[int], list[str]]
    parallel: bool
    warm: bool


@dataclass(frozen=True)
class BenchRow:
    name: str
    operand: str
    n: int
    weighted_size: int
    mean_ms: float
    stdev_ms: float
    p50_ms: float
    p95_ms: float
    samples: int


def _sizes_from_arg(raw: str) -> tuple[int, ...]:
    out = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        out.append(int(part))
    if not out:
        raise ValueError("at least one size must be provided")
    return tuple(out)


def _chain(n: int) -> list[str]:
    tokens = ["1"]
    for i in range(n):
        tokens.extend([str(i % 7 + 1), "+" if i % 2 else "*"])
    return tokens


def _forest(n: int) -> list[str]:
    tokens: list[str] = []
    for _ in range(ROOTS_DEFAULT):
        tokens.extend(_chain(max(1, n // ROOTS_DEFAULT)))
        tokens.append("sqrt")
    return tokens


def _all_cases() -> list[BenchCase]:
    return [
        BenchCase("chain_cold", _chain, parallel=False, warm=False),
        BenchCase("chain_memoized", _chain, parallel=False, warm=True),
        BenchCase("forest_sequential", _forest, parallel=False, warm=False),
        BenchCase("forest_parallel", _forest, parallel=True, warm=False),
    ]


def _run_case(case: BenchCase, n: int, *, config: CalculatorConfig, samples: int) -> BenchRow:
    tokens = case.build(n)
    state: dict[str, Calculator] = {}

    def _setup() -> None:
        calc = Calculator.from_config(config)
        error = calc.accept_many(tokens)
        if error is not None:
            raise RuntimeError(f"benchmark tokens rejected: {error}")
        if case.warm:
            calc.evaluate()
        state["calc"] = calc

    def _call() -> None:
        state["calc"].evaluate(parallel=case.parallel)

    per_call_ms = sample_ms(_call, setup=_setup, samples=samples)
    return BenchRow(
        name=case.name,
        operand=config.operand,
        n=n,
        weighted_size=state["calc"].stack.weighted_count(),
        **summarize_ms(per_call_ms),
        samples=samples,
    )


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--sizes", default=",".join(str(n) for n in N_DEFAULT), help="comma-separated tree sizes")
    parser.add_argument("--samples", type=int, default=7)
    parser.add_argument("--operand", choices=("decimal", "array"), default="decimal")
    parser.add_argument("--json-out", default="benchmarks/output/evaluate_benchmarks.json")
    args = parser.parse_args()

    config = CalculatorConfig.from_env().with_overrides(operand=args.operand)
    rows = [
        _run_case(case, n, config=config, samples=max(1, args.samples))
        for case in _all_cases()
        for n in _sizes_from_arg(args.sizes)
    ]
    for row in rows:
        print(f"{row.name:<20} n={row.n:<6} size={row.weighted_size:<6} mean={row.mean_ms:.3f}ms p95={row.p95_ms:.3f}ms")

    payload = {
        "generated_at": datetime.now(UTC).isoformat(),
        "host": host_metadata(),
        "rows": [asdict(row) for row in rows],
    }
    out = Path(args.json_out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Shared benchmark runtime helpers."""

from __future__ import annotations

import os
import platform
import statistics
import time
from typing import Any, Callable

import jax

THREAD_ENV_VARS = (
    "OMP_NUM_THREADS",
    "JAX_NUM_THREADS",
    "XLA_FLAGS",
    "RPN_JAX_MAX_WORKERS",
    "RPN_JAX_PARALLEL_EVALUATE",
)


def thread_env_snapshot() -> dict[str, str]:
    return {name: os.environ[name] for name in THREAD_ENV_VARS if name in os.environ}


def host_metadata() -> dict[str, Any]:
    return {
        "platform": platform.platform(),
        "python": platform.python_version(),
        "jax": getattr(jax, "__version__", "unknown"),
        "backend": jax.default_backend(),
        "cpu_count": os.cpu_count(),
        "thread_env": thread_env_snapshot(),
    }


def summarize_ms(values: list[float]) -> dict[str, float]:
    """Mean, sample standard deviation and p50/p95 of per-call timings."""
    if len(values) < 2:
        only = values[0]
        return {"mean_ms": only, "stdev_ms": 0.0, "p50_ms": only, "p95_ms": only}
    cuts = statistics.quantiles(values, n=20, method="inclusive")
    return {
        "mean_ms": statistics.fmean(values),
        "stdev_ms": statistics.stdev(values),
        "p50_ms": statistics.median(values),
        "p95_ms": cuts[18],
    }


def sample_ms(fn: Callable[[], object], *, setup: Callable[[], None] | None = None, samples: int) -> list[float]:
    """Time ``fn`` once per sample, running ``setup`` untimed before each call."""
    rows: list[float] = []
    for _ in range(samples):
        if setup is not None:
            setup()
        start_ns = time.perf_counter_ns()
        fn()
        rows.append((time.perf_counter_ns() - start_ns) / 1e6)
    return rows

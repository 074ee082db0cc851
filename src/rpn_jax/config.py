"""Calculator settings with environment-variable overrides."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Final

from .values import DEFAULT_DISPLAY_PRECISION, DEFAULT_PRECISION

OPERAND_KINDS: Final[tuple[str, ...]] = ("decimal", "array")
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class CalculatorConfig:
    precision: int = DEFAULT_PRECISION
    display_precision: int = DEFAULT_DISPLAY_PRECISION
    operand: str = "decimal"
    parallel_evaluate: bool = False
    max_workers: int | None = None
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.operand not in OPERAND_KINDS:
            raise ValueError(f"operand must be one of {', '.join(OPERAND_KINDS)}; got {self.operand!r}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}; got {self.log_level!r}")
        object.__setattr__(self, "precision", max(1, int(self.precision)))
        object.__setattr__(self, "display_precision", max(0, int(self.display_precision)))
        object.__setattr__(self, "log_level", self.log_level.upper())
        if self.max_workers is not None:
            object.__setattr__(self, "max_workers", max(1, int(self.max_workers)))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CalculatorConfig:
        env = os.environ if environ is None else environ
        max_workers_raw = env.get("RPN_JAX_MAX_WORKERS", "").strip()
        return cls(
            precision=int(env.get("RPN_JAX_PRECISION", str(DEFAULT_PRECISION))),
            display_precision=int(env.get("RPN_JAX_DISPLAY_PRECISION", str(DEFAULT_DISPLAY_PRECISION))),
            operand=env.get("RPN_JAX_OPERAND", "decimal").strip().lower(),
            parallel_evaluate=env.get("RPN_JAX_PARALLEL_EVALUATE", "0") == "1",
            max_workers=int(max_workers_raw) if max_workers_raw else None,
            log_level=env.get("RPN_JAX_LOG_LEVEL", "WARNING"),
        )

    def with_overrides(self, **changes: object) -> CalculatorConfig:
        """Copy with every non-``None`` keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

"""Evaluation engine: builds deferred expression trees from RPN tokens."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Callable

from .config import CalculatorConfig
from .errors import InsufficientOperandsError, RejectedTokenError, RPNBuildError, UnknownTokenError
from .memo import memoize
from .nodes import Node, Outcome
from .registry import Arity, OperationRegistry, transform
from .stack import OperandStack
from .values import Number

logger = logging.getLogger(__name__)


def operand_parser(config: CalculatorConfig) -> Callable[[str], object | None]:
    """Literal parser for the operand kind selected in ``config``."""
    if config.operand == "array":
        from .arrays import ArrayOperand

        return partial(ArrayOperand.parse, display_precision=config.display_precision)
    return partial(Number.parse, precision=config.precision, display_precision=config.display_precision)


class Calculator:
    """Maintains the operand stack and evaluates it on demand.

    ``accept`` builds the expression tree on the fly and never forces it;
    ``evaluate`` forces every root. ``accept``/``accept_many`` must not be
    called concurrently on the same instance. The stack itself and the memo
    cells are thread-safe, so ``evaluate`` may force roots in parallel.
    """

    def __init__(
        self,
        parse_operand: Callable[[str], object | None] = Number.parse,
        stack_factory: Callable[[], OperandStack] = OperandStack,
        *,
        parallel_evaluate: bool = False,
        max_workers: int | None = None,
    ) -> None:
        self._storage = stack_factory()
        self._registry = OperationRegistry(parse_operand)
        self.parallel_evaluate = parallel_evaluate
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, config: CalculatorConfig | None = None) -> Calculator:
        config = CalculatorConfig.from_env() if config is None else config
        return cls(
            operand_parser(config),
            parallel_evaluate=config.parallel_evaluate,
            max_workers=config.max_workers,
        )

    @property
    def stack(self) -> OperandStack:
        return self._storage

    @property
    def registry(self) -> OperationRegistry:
        return self._registry

    def accept(self, token: str) -> RPNBuildError | None:
        """Apply one number or operator; on failure the stack is left untouched."""
        try:
            definition = self._registry.resolve(token)
        except Exception as exc:
            logger.warning("resolving %r failed", token, exc_info=True)
            return RejectedTokenError(token, str(exc) or type(exc).__name__)
        if definition is None:
            error = UnknownTokenError(token)
            logger.debug("rejected token %r: %s", token, error)
            return error

        arity = definition.arity
        if arity is Arity.ALL:
            children = self._storage.drain_all()
        else:
            if self._storage.shallow_count() < arity.value:
                error = InsufficientOperandsError(token, self._storage.weighted_count() + 1)
                logger.debug("rejected token %r: %s", token, error)
                return error
            # pop(0) is empty, which is what operand literals expect.
            children = self._storage.pop(arity.value)

        try:
            roots = transform(definition, children)
        except Exception as exc:
            self._storage.push(children)
            logger.warning("applying %r failed", token, exc_info=True)
            return RejectedTokenError(token, str(exc) or type(exc).__name__)
        self._storage.push(memoize(root) for root in roots)
        logger.debug(
            "accepted %r (arity=%s): %d root(s), weighted size %d",
            token,
            arity.name,
            self._storage.shallow_count(),
            self._storage.weighted_count(),
        )
        return None

    def accept_many(self, tokens: Iterable[str]) -> RPNBuildError | None:
        """Apply tokens in order, stopping at the first failure."""
        for token in tokens:
            error = self.accept(token)
            if error is not None:
                return error
        return None

    def evaluate(self, parallel: bool | None = None) -> list[Outcome]:
        """Force every root, bottom to top; failures stay in their own slot."""
        roots = self._storage.snapshot()
        parallel = self.parallel_evaluate if parallel is None else parallel
        if parallel and len(roots) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                outcomes = list(executor.map(_force, roots))
        else:
            outcomes = [root.force() for root in roots]
        logger.debug(
            "evaluated %d root(s), %d failed",
            len(outcomes),
            sum(1 for outcome in outcomes if not outcome.ok),
        )
        return outcomes

    def render(self, parallel: bool | None = None) -> list[str]:
        """Display strings per root: the value, or the failure message."""
        return [str(outcome) for outcome in self.evaluate(parallel)]


def _force(node: Node) -> Outcome:
    return node.force()

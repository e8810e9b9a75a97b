"""
Boolean expression evaluation for user filters.

Expressions use Jinja2 expression syntax, e.g.
``user.state == "enabled" and "admin" in user.groups``. They run in a
sandboxed environment with strict undefined handling, so referencing an
unknown name is an error rather than a silent miss.
"""
from collections.abc import Callable
from functools import lru_cache
from typing import Any, Protocol

from jinja2 import StrictUndefined, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from services.exceptions import FilterEvaluationError

# Errors an expression can raise at runtime, besides Jinja2's own
_RUNTIME_ERRORS = (TypeError, ValueError, LookupError, ArithmeticError, AttributeError)

# Distinct filter strings kept compiled per evaluator
COMPILED_CACHE_SIZE = 128


class ExpressionEvaluator(Protocol):
    """Evaluates a boolean expression against named bindings."""

    def evaluate(self, expression: str, bindings: dict[str, Any]) -> bool:
        """
        Evaluate expression with bindings as its variables.

        Raises:
            FilterEvaluationError: If the expression cannot be evaluated.
        """
        ...


class JinjaExpressionEvaluator:
    """ExpressionEvaluator backed by sandboxed Jinja2 expressions."""

    def __init__(self) -> None:
        self._env = SandboxedEnvironment(undefined=StrictUndefined)
        self._compile = lru_cache(maxsize=COMPILED_CACHE_SIZE)(self._compile_expression)

    def evaluate(self, expression: str, bindings: dict[str, Any]) -> bool:
        compiled = self._compile(expression)
        try:
            # bool() inside the try: truth-testing a StrictUndefined raises
            return bool(compiled(**bindings))
        except TemplateError as e:
            raise FilterEvaluationError(expression, f"Expression error: {e}") from e
        except _RUNTIME_ERRORS as e:
            raise FilterEvaluationError(
                expression, f"{type(e).__name__}: {e}",
            ) from e

    def _compile_expression(self, expression: str) -> Callable[..., Any]:
        try:
            return self._env.compile_expression(expression, undefined_to_none=False)
        except TemplateError as e:
            raise FilterEvaluationError(
                expression, f"Expression syntax error: {e}",
            ) from e

"""
Deterministic grader for eval tasks.

A grader is a named list of predicates run against one output, typically a
ValidationResult. Predicates that raise are reported as errors, not crashes,
so one broken check never hides the others.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]


class Check(NamedTuple):
    name: str
    predicate: Predicate


@dataclass(frozen=True)
class CodeGraderResult:
    eval_name: str
    checks_total: int
    failures: tuple[str, ...] = ()

    @property
    def checks_passed(self) -> int:
        return self.checks_total - len(self.failures)

    @property
    def passed(self) -> bool:
        return not self.failures

    @property
    def summary(self) -> str:
        return (
            f"[{'PASS' if self.passed else 'FAIL'}] {self.eval_name}: "
            f"{self.checks_passed}/{self.checks_total}"
        )


def _failure(check: Check, output: Any) -> str | None:
    """Failure line for one check, or None when it holds."""
    try:
        holds = check.predicate(output)
    except Exception as e:
        return f"ERROR: {check.name} -- {e}"
    return None if holds else f"FAIL: {check.name}"


class CodeGrader:
    """Collects named predicates; add_check chains, grade runs them all."""

    def __init__(self, eval_name: str):
        self.eval_name = eval_name
        self.checks: list[Check] = []

    def add_check(self, name: str, predicate: Predicate) -> "CodeGrader":
        self.checks.append(Check(name, predicate))
        return self

    def grade(self, output: Any) -> CodeGraderResult:
        outcomes = (_failure(check, output) for check in self.checks)
        result = CodeGraderResult(
            eval_name=self.eval_name,
            checks_total=len(self.checks),
            failures=tuple(f for f in outcomes if f is not None),
        )
        logger.debug(f"[Eval] {result.summary}")
        return result

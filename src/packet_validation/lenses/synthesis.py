"""
SYNTHESIS_LENS -- reconciles the findings of every lens that ran before it.

Must run last. Its score is the mean of prior lens scores (1.0 when it is
the only lens), so it never adds an independent opinion, only escalations.
"""

import logging
import time
from collections.abc import Sequence

from ..report import DiagnosticReport
from .models import FindingCollector, FindingType, LensResult, Severity, ValidationLensId

logger = logging.getLogger(__name__)

WARNING_ESCALATION_LIMIT = 3
CONFIDENCE_DIVERGENCE = 0.2


def mean_score(results: Sequence[LensResult]) -> float:
    if not results:
        return 1.0
    return sum(r.score for r in results) / len(results)


def run_synthesis_lens(report: DiagnosticReport, prior: Sequence[LensResult]) -> LensResult:
    start = time.perf_counter()
    out = FindingCollector()

    errors = sum(r.count(Severity.ERROR) for r in prior)
    warnings = sum(r.count(Severity.WARNING) for r in prior)

    if errors > 0:
        out.add(
            FindingType.CONSISTENCY,
            Severity.ERROR,
            "validation",
            f"{errors} error-level finding(s) detected across validation passes",
        )

    if warnings > WARNING_ESCALATION_LIMIT:
        out.add(
            FindingType.CONSISTENCY,
            Severity.WARNING,
            "validation",
            f"{warnings} warning-level findings indicate potential quality issues",
        )

    avg = mean_score(prior)
    stated = report.integrity.confidence / 100
    if abs(avg - stated) > CONFIDENCE_DIVERGENCE:
        out.add(
            FindingType.CONSISTENCY,
            Severity.INFO,
            "integrity.confidence",
            f"Validation score ({round(avg * 100)}%) differs from stated confidence "
            f"({report.integrity.confidence:g}%)",
        )

    return LensResult(
        lens_id=ValidationLensId.SYNTHESIS_LENS,
        success=True,
        findings=tuple(out.findings),
        score=avg,
        execution_time_ms=(time.perf_counter() - start) * 1000,
    )

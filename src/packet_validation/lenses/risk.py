"""RISK_LENS (5-pass only) -- risks raised in the packet must be answered by its options and plan."""

import logging
import time

from ..report import DiagnosticReport
from . import patterns
from .models import FindingCollector, FindingType, LensResult, Severity, ValidationLensId

logger = logging.getLogger(__name__)

RISK_KEYWORDS = ("risk", "threat", "vulnerability", "failure", "downside")
URGENCY_KEYWORDS = ("immediate", "urgent", "critical", "priority")
DEBT_KEYWORDS = ("debt", "secured")
LENDER_KEYWORDS = ("debt", "lender")
HIGH_DOWNSIDE_PROBABILITY = 40


def alignment_score(out: FindingCollector) -> float:
    """Score shared by the risk and value lenses."""
    return max(0.0, 1 - out.count(Severity.ERROR) * 0.2 - out.count(Severity.WARNING) * 0.1)


def run_risk_lens(report: DiagnosticReport) -> LensResult:
    start = time.perf_counter()
    sections = report.sections
    out = FindingCollector()

    risks_in_brief = patterns.matching_keywords(sections.executive_brief, RISK_KEYWORDS)
    risks_in_options = patterns.matching_keywords(sections.options, RISK_KEYWORDS)
    if len(risks_in_brief) > len(risks_in_options):
        out.add(
            FindingType.RISK,
            Severity.WARNING,
            "sections.options",
            "Some risks identified in brief are not addressed in strategic options",
            ("sections.executiveBrief",),
        )

    downside = patterns.scenario_probability(sections.scenarios, "Downside")
    if downside is not None and downside > HIGH_DOWNSIDE_PROBABILITY:
        if not patterns.contains_any(sections.execution_plan, URGENCY_KEYWORDS):
            out.add(
                FindingType.RISK,
                Severity.WARNING,
                "sections.executionPlan",
                f"Downside probability ({downside}%) is high but execution plan lacks urgency language",
                ("sections.scenarios",),
            )

    if patterns.contains_any(sections.value_ledger, DEBT_KEYWORDS) and not patterns.contains_any(
        sections.options, LENDER_KEYWORDS
    ):
        out.add(
            FindingType.RISK,
            Severity.INFO,
            "sections.options",
            "Debt constraints from Value Ledger not explicitly addressed in options",
            ("sections.valueLedger",),
        )

    return LensResult(
        lens_id=ValidationLensId.RISK_LENS,
        success=True,
        findings=tuple(out.findings),
        score=alignment_score(out),
        execution_time_ms=(time.perf_counter() - start) * 1000,
    )

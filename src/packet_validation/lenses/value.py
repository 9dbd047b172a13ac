"""VALUE_LENS (5-pass only) -- value figures in the ledger must carry through to options and plan."""

import logging
import time

from ..report import DiagnosticReport
from . import patterns
from .models import FindingCollector, FindingType, LensResult, Severity, ValidationLensId
from .risk import alignment_score

logger = logging.getLogger(__name__)

VALUE_REFERENCE_KEYWORDS = ("recovery", "value", "return")
ROI_KEYWORDS = ("roi", "return", "payback")
UPSIDE_ACTION_KEYWORDS = ("upside", "opportunity", "growth")
CREDIBLE_UPSIDE_PROBABILITY = 20


def run_value_lens(report: DiagnosticReport) -> LensResult:
    start = time.perf_counter()
    sections = report.sections
    out = FindingCollector()

    recovery_figures = patterns.PERCENT_PATTERN.findall(sections.value_ledger or "")
    if recovery_figures and not patterns.contains_any(sections.options, VALUE_REFERENCE_KEYWORDS):
        out.add(
            FindingType.VALUE,
            Severity.WARNING,
            "sections.options",
            "Value Ledger contains recovery estimates not referenced in options analysis",
            ("sections.valueLedger",),
        )

    investments = patterns.INVESTMENT_PATTERN.findall(sections.options or "")
    if investments and not patterns.contains_any(sections.options, ROI_KEYWORDS):
        out.add(
            FindingType.VALUE,
            Severity.INFO,
            "sections.options",
            "Investment amounts listed without explicit ROI or payback period",
        )

    upside = patterns.scenario_probability(sections.scenarios, "Upside")
    if upside is not None and upside > CREDIBLE_UPSIDE_PROBABILITY:
        if not patterns.contains_any(sections.execution_plan, UPSIDE_ACTION_KEYWORDS):
            out.add(
                FindingType.VALUE,
                Severity.INFO,
                "sections.executionPlan",
                "Upside scenario not explicitly targeted in execution plan actions",
                ("sections.scenarios",),
            )

    return LensResult(
        lens_id=ValidationLensId.VALUE_LENS,
        success=True,
        findings=tuple(out.findings),
        score=alignment_score(out),
        execution_time_ms=(time.perf_counter() - start) * 1000,
    )

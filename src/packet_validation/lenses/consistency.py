"""
CONSISTENCY_LENS -- cross-references the narrative sections against each other.

Checks:
  - Runway stated in the executive brief vs. the month in the scenario timeline
    (warning beyond RUNWAY_TOLERANCE_MONTHS)
  - Options section references Value Ledger metrics (info)
  - Execution plan only references options defined in the options section (error)
  - Warning signals in the brief are addressed in the execution plan (info)
"""

import logging
import time

from ..report import DiagnosticReport
from . import patterns
from .models import FindingCollector, FindingType, LensResult, Severity, ValidationLensId

logger = logging.getLogger(__name__)

RUNWAY_TOLERANCE_MONTHS = 3
VALUE_REFERENCE_KEYWORDS = ("value", "recovery")
SIGNAL_RESPONSE_KEYWORDS = ("signal", "risk")


def run_consistency_lens(report: DiagnosticReport) -> LensResult:
    start = time.perf_counter()
    sections = report.sections
    out = FindingCollector()

    stated_runway = patterns.runway_months(sections.executive_brief)
    if stated_runway is not None:
        scenario_month = patterns.first_month_reference(sections.scenarios)
        if scenario_month is not None and abs(scenario_month - stated_runway) > RUNWAY_TOLERANCE_MONTHS:
            out.add(
                FindingType.CONSISTENCY,
                Severity.WARNING,
                "sections.scenarios",
                f"Scenario timeline (Month {scenario_month}) differs from stated "
                f"runway ({stated_runway} months)",
                ("sections.executiveBrief",),
            )

    if not patterns.contains_any(sections.options, VALUE_REFERENCE_KEYWORDS):
        out.add(
            FindingType.CONSISTENCY,
            Severity.INFO,
            "sections.options",
            "Options section does not explicitly reference Value Ledger metrics",
            ("sections.valueLedger",),
        )

    defined = set(patterns.option_refs(sections.options))
    for option in patterns.option_refs(sections.execution_plan):
        if option not in defined:
            out.add(
                FindingType.CONSISTENCY,
                Severity.ERROR,
                "sections.executionPlan",
                f"Execution plan references {option} which is not defined in options",
                ("sections.options",),
            )

    signals_raised = patterns.WARNING_SIGNALS_PATTERN.search(sections.executive_brief or "")
    if signals_raised and not patterns.contains_any(sections.execution_plan, SIGNAL_RESPONSE_KEYWORDS):
        out.add(
            FindingType.CONSISTENCY,
            Severity.INFO,
            "sections.executionPlan",
            "Warning signals mentioned in executive brief not addressed in execution plan",
            ("sections.executiveBrief",),
        )

    errors = out.count(Severity.ERROR)
    warnings = out.count(Severity.WARNING)
    score = max(0.0, 1 - errors * 0.2 - warnings * 0.1 - len(out.findings) * 0.02)

    return LensResult(
        lens_id=ValidationLensId.CONSISTENCY_LENS,
        success=True,
        findings=tuple(out.findings),
        score=score,
        execution_time_ms=(time.perf_counter() - start) * 1000,
    )

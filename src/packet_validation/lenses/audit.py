"""
AUDIT_LENS -- checks evidence provenance and data-gap acknowledgment.

Score starts from the report's own evidenceQuality (0-100 -> 0..1) and is
penalized per error and warning, so a report that claims strong evidence but
fails these checks is pulled down.
"""

import logging
import time

from ..report import DiagnosticReport
from . import patterns
from .models import FindingCollector, FindingType, LensResult, Severity, ValidationLensId

logger = logging.getLogger(__name__)

VALUATION_MARKERS = ("FMV", "Book Value", "%")
GAP_ACKNOWLEDGMENT_KEYWORDS = ("missing", "gap", "pending")
MIN_REGISTER_COMPLETION = 0.5
UNACKNOWLEDGED_GAP_LIMIT = 3

ERROR_PENALTY = 0.15
WARNING_PENALTY = 0.08


def run_audit_lens(report: DiagnosticReport) -> LensResult:
    start = time.perf_counter()
    sections = report.sections
    integrity = report.integrity
    out = FindingCollector()

    if not patterns.has_evidence_tags(sections.executive_brief):
        out.add(
            FindingType.CITATION,
            Severity.INFO,
            "sections.executiveBrief",
            "Executive brief contains no evidence provenance tags",
        )

    ledger = sections.value_ledger or ""
    if not any(marker in ledger for marker in VALUATION_MARKERS):
        out.add(
            FindingType.EVIDENCE,
            Severity.WARNING,
            "sections.valueLedger",
            "Value Ledger lacks clear valuation methodology references",
        )

    if "Probability" not in (sections.scenarios or ""):
        out.add(
            FindingType.CITATION,
            Severity.WARNING,
            "sections.scenarios",
            "Scenario probabilities lack cited methodology or source",
        )

    received, pending = patterns.evidence_register_counts(sections.evidence_register)
    completion = received / max(1, received + pending)
    if completion < MIN_REGISTER_COMPLETION:
        out.add(
            FindingType.EVIDENCE,
            Severity.WARNING,
            "sections.evidenceRegister",
            f"Evidence register is {round(completion * 100)}% complete - significant gaps remain",
        )

    missing = integrity.missing_data
    if len(missing) > UNACKNOWLEDGED_GAP_LIMIT and not patterns.contains_any(
        sections.executive_brief, GAP_ACKNOWLEDGMENT_KEYWORDS
    ):
        out.add(
            FindingType.EVIDENCE,
            Severity.WARNING,
            "integrity.missingData",
            f"{len(missing)} missing data items not acknowledged in executive brief",
        )

    base = integrity.evidence_quality / 100
    score = base - out.count(Severity.ERROR) * ERROR_PENALTY - out.count(Severity.WARNING) * WARNING_PENALTY
    score = min(1.0, max(0.0, score))

    return LensResult(
        lens_id=ValidationLensId.AUDIT_LENS,
        success=True,
        findings=tuple(out.findings),
        score=score,
        execution_time_ms=(time.perf_counter() - start) * 1000,
    )

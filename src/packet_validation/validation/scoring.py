"""
Disagreement detector and scorer for the validation path.

Material disagreement is a union of independent triggers, not a weighted
composite. Any one trigger is sufficient and every trigger that fires adds
its own note:
  (a) any error-severity finding         -> one note per error finding
  (b) a field with >= 2 warning findings -> one note per such field
  (c) mean lens score < consensus_threshold -> one note
"""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..lenses import LensResult, Severity, ValidationLensId
from ..report import DiagnosticReport
from .models import FieldDiff

WARNINGS_PER_FIELD_LIMIT = 2
MAX_FIELD_DIFFS = 10


@dataclass
class DisagreementVerdict:
    material_disagreement: bool = False
    notes: list[str] = field(default_factory=list)


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def _mean(results: Sequence[LensResult]) -> float | None:
    if not results:
        return None
    return sum(r.score for r in results) / len(results)


def consensus_score(results: Sequence[LensResult]) -> float:
    """Mean lens score rounded to 2 places; 1.0 when no lens ran."""
    avg = _mean(results)
    if avg is None:
        return 1.0
    return round(_clamp(avg), 2)


def evidence_score(report: DiagnosticReport, results: Sequence[LensResult]) -> float:
    """Average of stated evidence quality and the audit lens score, if it ran."""
    base = _clamp(report.integrity.evidence_quality / 100)
    audit = next((r for r in results if r.lens_id is ValidationLensId.AUDIT_LENS), None)
    if audit is not None:
        return round(_clamp((base + audit.score) / 2), 2)
    return round(base, 2)


def detect_disagreement(
    results: Sequence[LensResult], consensus_threshold: float
) -> DisagreementVerdict:
    verdict = DisagreementVerdict()

    for result in results:
        for finding in result.findings:
            if finding.severity is Severity.ERROR:
                verdict.material_disagreement = True
                verdict.notes.append(finding.message)

    warnings_by_field = Counter(
        f.field for r in results for f in r.findings if f.severity is Severity.WARNING
    )
    for field_name, count in warnings_by_field.items():
        if count >= WARNINGS_PER_FIELD_LIMIT:
            verdict.material_disagreement = True
            verdict.notes.append(f"Multiple validation warnings on {field_name}")

    avg = _mean(results)
    if avg is not None and avg < consensus_threshold:
        verdict.material_disagreement = True
        verdict.notes.append(
            f"Overall validation score ({round(avg * 100)}%) below acceptable "
            f"threshold ({round(consensus_threshold * 100)}%)"
        )

    return verdict


def extract_field_diffs(results: Sequence[LensResult]) -> list[FieldDiff]:
    """Error and warning findings as field diffs, in lens order, capped at 10."""
    diffs = [
        FieldDiff(field=f.field, issue=f.message)
        for r in results
        for f in r.findings
        if f.severity in (Severity.ERROR, Severity.WARNING)
    ]
    return diffs[:MAX_FIELD_DIFFS]

"""
Field comparator -- extracts comparable fields from report variants and
scores how much the variants agree on each.

Agreement for numeric sets is 1 - coefficient of variation (clamped at 0);
for string sets it is 1 - (unique - 1) / count. When agreement on a numeric
field is low, the median replaces the synthesis pass's value.
"""

import math
from collections.abc import Sequence

from ..lenses import patterns
from ..report import DiagnosticReport
from .models import FieldComparison, FieldValue

LOW_AGREEMENT = 0.7
SYNTHESIS_REASON = "Selected from synthesis pass"
MEDIAN_REASON = "Median selected due to disagreement"


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def extract_key_values(report: DiagnosticReport) -> dict[str, FieldValue]:
    """Comparable scalar fields of one report. Absent narrative matches are omitted."""
    integrity = report.integrity
    sections = report.sections
    values: dict[str, FieldValue] = {
        "confidence": integrity.confidence,
        "completeness": integrity.completeness,
        "evidenceQuality": integrity.evidence_quality,
        "missingDataCount": len(integrity.missing_data),
    }

    optional: dict[str, FieldValue | None] = {
        "runwayMonths": patterns.runway_months(sections.executive_brief),
        "signalCount": patterns.signal_count(sections.executive_brief),
        "baseCaseProbability": patterns.scenario_probability(sections.scenarios, "Base"),
        "upsideCaseProbability": patterns.scenario_probability(sections.scenarios, "Upside"),
        "downsideCaseProbability": patterns.scenario_probability(sections.scenarios, "Downside"),
        "diagnosis": patterns.diagnosis_label(sections.executive_brief),
    }
    values.update({k: v for k, v in optional.items() if v is not None})
    return values


def numeric_variance(values: Sequence[FieldValue]) -> float:
    """Population variance of the numeric members (0 for fewer than two)."""
    numbers = [v for v in values if _is_number(v)]
    if len(numbers) < 2:
        return 0.0
    mean = sum(numbers) / len(numbers)
    return sum((v - mean) ** 2 for v in numbers) / len(numbers)


def agreement_score(values: Sequence[FieldValue]) -> float:
    if len(values) <= 1:
        return 1.0

    if all(_is_number(v) for v in values):
        mean = sum(values) / len(values)
        if mean == 0:
            return 1.0 if all(v == 0 for v in values) else 0.5
        cv = math.sqrt(numeric_variance(values)) / abs(mean)
        return max(0.0, 1 - cv)

    normalized = [str(v).lower().strip() for v in values]
    return 1 - (len(set(normalized)) - 1) / len(normalized)


def median(numbers: Sequence[float]) -> float:
    """Middle element of the sorted values (upper middle for even counts)."""
    ordered = sorted(numbers)
    return ordered[len(ordered) // 2]


def compare_field(name: str, values: Sequence[FieldValue]) -> FieldComparison:
    score = agreement_score(values)
    numbers = [v for v in values if _is_number(v)]

    selected: FieldValue = values[-1]
    reason = SYNTHESIS_REASON
    if score < LOW_AGREEMENT and numbers:
        selected = median(numbers)
        reason = MEDIAN_REASON

    return FieldComparison(
        field=name,
        values=tuple(values),
        variance=numeric_variance(values),
        agreement_score=score,
        selected_value=selected,
        selection_reason=reason,
    )


def compare_fields(reports: Sequence[DiagnosticReport]) -> list[FieldComparison]:
    """One comparison per field seen in any variant, values in variant order."""
    collected: dict[str, list[FieldValue]] = {}
    for report in reports:
        for key, value in extract_key_values(report).items():
            collected.setdefault(key, []).append(value)
    return [compare_field(name, values) for name, values in collected.items()]

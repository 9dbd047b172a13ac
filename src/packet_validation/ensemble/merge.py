"""
Ensemble merge -- reconciles independently generated report variants into one.

Policies:
  - Final report: the pass tagged SYNTHESIS if it succeeded, else the last
    successful pass. Zero successes raises NoSuccessfulPassesError.
  - Integrity: conservative minima across successful variants, confidence
    docked CONFIDENCE_PENALTY points on material disagreement, missing data
    is the ordered union.
  - Material disagreement: value-variance fields beyond the configured
    percent, an ROI flip between first and last variant, a diagnosis label
    mismatch, or mean field agreement under the consensus threshold.
"""

import logging
from collections.abc import Sequence

from ..config import EnsembleConfig
from ..errors import NoSuccessfulPassesError
from ..lenses import GenerationLensId, patterns
from ..report import DiagnosticReport, IntegrityMetrics
from ..validation.scoring import DisagreementVerdict
from .comparator import compare_fields
from .models import EnsembleValidationMetadata, FieldComparison, MergeResult, PassResult

logger = logging.getLogger(__name__)

VALUE_VARIANCE_FIELDS = ("confidence", "baseCaseProbability", "downsideCaseProbability")
CONFIDENCE_PENALTY = 15
DEFAULT_EVIDENCE_QUALITY = 50.0


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def _upside_favorable(report: DiagnosticReport) -> bool | None:
    upside = patterns.scenario_probability(report.sections.scenarios, "Upside")
    downside = patterns.scenario_probability(report.sections.scenarios, "Downside")
    if upside is None or downside is None:
        return None
    return upside > downside


def detect_variant_disagreement(
    comparisons: Sequence[FieldComparison],
    reports: Sequence[DiagnosticReport],
    config: EnsembleConfig,
) -> DisagreementVerdict:
    thresholds = config.material_disagreement_thresholds
    verdict = DisagreementVerdict()
    by_field = {c.field: c for c in comparisons}

    floor = 1 - thresholds.value_variance_percent / 100
    for name in VALUE_VARIANCE_FIELDS:
        comparison = by_field.get(name)
        if comparison and comparison.agreement_score < floor:
            verdict.material_disagreement = True
            verdict.notes.append(
                f"High variance in {name}: values differ by more than "
                f"{thresholds.value_variance_percent:g}%"
            )

    if thresholds.roi_flip_detection and len(reports) > 1:
        first, last = _upside_favorable(reports[0]), _upside_favorable(reports[-1])
        if first is not None and last is not None and first != last:
            verdict.material_disagreement = True
            verdict.notes.append(
                "ROI outlook flipped between passes (upside vs downside probability reversal)"
            )

    diagnosis = by_field.get("diagnosis")
    if thresholds.diagnosis_code_mismatch and diagnosis and diagnosis.agreement_score < 1.0:
        verdict.material_disagreement = True
        verdict.notes.append(
            f"Diagnosis differs between passes: {', '.join(dict.fromkeys(map(str, diagnosis.values)))}"
        )

    avg = sum(c.agreement_score for c in comparisons) / max(len(comparisons), 1)
    if comparisons and avg < config.consensus_threshold:
        verdict.material_disagreement = True
        verdict.notes.append(
            f"Overall consensus score ({avg * 100:.0f}%) below threshold "
            f"({config.consensus_threshold * 100:.0f}%)"
        )

    return verdict


def calculate_scores(
    comparisons: Sequence[FieldComparison], pass_results: Sequence[PassResult]
) -> tuple[float, float]:
    """(consensus_score, evidence_score), both in [0, 1]."""
    consensus = (
        sum(c.agreement_score for c in comparisons) / len(comparisons) if comparisons else 1.0
    )

    successful = [p.report for p in pass_results if p.success and p.report is not None]
    success_rate = len(successful) / len(pass_results) if pass_results else 0.0
    avg_quality = (
        sum(r.integrity.evidence_quality for r in successful) / len(successful)
        if successful
        else DEFAULT_EVIDENCE_QUALITY
    )
    evidence = success_rate * 0.4 + (avg_quality / 100) * 0.6
    return _clamp(consensus), _clamp(evidence)


def merge_integrity(
    reports: Sequence[DiagnosticReport], material_disagreement: bool
) -> IntegrityMetrics:
    if not reports:
        return IntegrityMetrics(missing_data=["No valid passes completed"])

    confidence = min(r.integrity.confidence for r in reports)
    if material_disagreement:
        confidence = max(0, confidence - CONFIDENCE_PENALTY)

    missing: dict[str, None] = {}
    for report in reports:
        for item in report.integrity.missing_data:
            missing.setdefault(item, None)

    return IntegrityMetrics(
        completeness=min(r.integrity.completeness for r in reports),
        evidence_quality=min(r.integrity.evidence_quality for r in reports),
        confidence=confidence,
        missing_data=list(missing),
    )


def select_final_report(pass_results: Sequence[PassResult]) -> DiagnosticReport:
    successful = [p for p in pass_results if p.success and p.report is not None]
    for p in successful:
        if p.pass_id is GenerationLensId.SYNTHESIS:
            return p.report
    if successful:
        return successful[-1].report
    raise NoSuccessfulPassesError("No successful passes to merge")


def merge_pass_results(
    pass_results: Sequence[PassResult],
    config: EnsembleConfig,
    execution_time_ms: float = 0.0,
) -> MergeResult:
    """Combine pass results into one report with ensemble validation metadata."""
    final = select_final_report(pass_results)
    reports = [p.report for p in pass_results if p.success and p.report is not None]

    comparisons = compare_fields(reports)
    verdict = detect_variant_disagreement(comparisons, reports, config)
    consensus, evidence = calculate_scores(comparisons, pass_results)

    validation = EnsembleValidationMetadata(
        ensemble_mode=config.mode,
        consensus_score=consensus,
        evidence_score=evidence,
        material_disagreement=verdict.material_disagreement,
        disagreement_notes=tuple(verdict.notes),
        pass_count=len(pass_results),
        passes_completed=len(reports),
        fallback_used=len(reports) < len(pass_results),
        execution_time_total_ms=execution_time_ms,
    )

    if verdict.material_disagreement:
        logger.info(
            f"[EnsembleMerge] Material disagreement across {len(reports)} variants: "
            f"{'; '.join(verdict.notes)}"
        )

    merged = final.with_integrity(merge_integrity(reports, verdict.material_disagreement))
    return MergeResult(
        final_report=merged.with_validation(validation),
        validation=validation,
        field_comparisons=tuple(comparisons),
    )

"""Data models for the generation-ensemble (multi-variant) path."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..config import EnsembleMode
from ..lenses import GenerationLensId
from ..report import DiagnosticReport
from ..validation.models import FALLBACK_NOTE_PREFIX

FieldValue = int | float | str


@dataclass(frozen=True)
class PassResult:
    """One generated report variant (or the failure to produce it)."""

    pass_id: GenerationLensId
    success: bool
    report: DiagnosticReport | None = None
    execution_time_ms: float = 0.0
    error: str | None = None


@dataclass(frozen=True)
class FieldComparison:
    """How one extracted field varied across variants and which value was kept."""

    field: str
    values: tuple[FieldValue, ...]
    variance: float
    agreement_score: float
    selected_value: FieldValue
    selection_reason: str

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "values": list(self.values),
            "variance": self.variance,
            "agreement_score": self.agreement_score,
            "selected_value": self.selected_value,
            "selection_reason": self.selection_reason,
        }


@dataclass(frozen=True)
class EnsembleValidationMetadata:
    ensemble_mode: EnsembleMode
    consensus_score: float
    evidence_score: float
    material_disagreement: bool
    disagreement_notes: tuple[str, ...] = ()
    pass_count: int = 1
    passes_completed: int = 1
    fallback_used: bool = False
    execution_time_total_ms: float = 0.0
    system_fault: bool = False

    def to_dict(self) -> dict:
        return {
            "ensemble_mode": self.ensemble_mode.value,
            "consensus_score": self.consensus_score,
            "evidence_score": self.evidence_score,
            "material_disagreement": self.material_disagreement,
            "disagreement_notes": list(self.disagreement_notes),
            "pass_count": self.pass_count,
            "passes_completed": self.passes_completed,
            "fallback_used": self.fallback_used,
            "execution_time_total_ms": self.execution_time_total_ms,
            "system_fault": self.system_fault,
        }


@dataclass(frozen=True)
class MergeResult:
    final_report: DiagnosticReport
    validation: EnsembleValidationMetadata
    field_comparisons: tuple[FieldComparison, ...] = ()


def single_pass_validation() -> EnsembleValidationMetadata:
    return EnsembleValidationMetadata(
        ensemble_mode=EnsembleMode.OFF,
        consensus_score=1.0,
        evidence_score=1.0,
        material_disagreement=False,
    )


def ensemble_fallback_validation(
    mode: EnsembleMode, error: str, execution_time_ms: float
) -> EnsembleValidationMetadata:
    return EnsembleValidationMetadata(
        ensemble_mode=mode,
        consensus_score=0.5,
        evidence_score=0.5,
        material_disagreement=True,
        disagreement_notes=(
            f"{FALLBACK_NOTE_PREFIX}: multi-pass failed; returned baseline result. Error: {error}",
        ),
        pass_count=mode.pass_count,
        passes_completed=0,
        fallback_used=True,
        execution_time_total_ms=execution_time_ms,
        system_fault=True,
    )


@dataclass
class EnsembleQARecord:
    """Developer-only record of one ensemble run."""

    report_id: str
    mode: EnsembleMode
    pass_count: int
    validation: EnsembleValidationMetadata
    key_field_diffs: list[FieldComparison] = field(default_factory=list)
    pass_results: list[PassResult] = field(default_factory=list)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "report_id": self.report_id,
            "config": {"mode": self.mode.value, "pass_count": self.pass_count},
            "validation": self.validation.to_dict(),
            "key_field_diffs": [c.to_dict() for c in self.key_field_diffs],
            "pass_results": [
                {
                    "pass_id": p.pass_id.value,
                    "success": p.success,
                    "time_ms": round(p.execution_time_ms, 3),
                    "error": p.error,
                }
                for p in self.pass_results
            ],
            "top_disagreements": list(self.validation.disagreement_notes[:3]),
        }

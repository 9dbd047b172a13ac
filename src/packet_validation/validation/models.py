"""Data models for the single-report validation path."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..config import EnsembleMode
from ..lenses import LensResult

FALLBACK_NOTE_PREFIX = "Validation fallback"


@dataclass(frozen=True)
class FieldDiff:
    """A report field a lens found fault with."""

    field: str
    issue: str
    expected: str | None = None
    actual: str | None = None

    def to_dict(self) -> dict:
        data = {"field": self.field, "issue": self.issue}
        if self.expected is not None:
            data["expected"] = self.expected
        if self.actual is not None:
            data["actual"] = self.actual
        return data


@dataclass(frozen=True)
class ValidationMetadata:
    """Verdict attached to a validated report. Never merged into report fields.

    Attributes:
        ensemble_mode: Mode the run executed under.
        consensus_score: Mean lens score, 0..1.
        evidence_score: Blend of stated evidence quality and the audit lens, 0..1.
        material_disagreement: True means the packet needs human review.
        disagreement_notes: One note per disagreement trigger that fired.
        follow_up_questions: Targeted questions for the user (max 7).
        field_diffs: Fields with error/warning findings (max 10).
        system_fault: True only when validation itself crashed (fallback).
    """

    ensemble_mode: EnsembleMode
    consensus_score: float
    evidence_score: float
    material_disagreement: bool
    disagreement_notes: tuple[str, ...] = ()
    follow_up_questions: tuple[str, ...] = ()
    field_diffs: tuple[FieldDiff, ...] = ()
    system_fault: bool = False

    def to_dict(self) -> dict:
        return {
            "ensemble_mode": self.ensemble_mode.value,
            "consensus_score": self.consensus_score,
            "evidence_score": self.evidence_score,
            "material_disagreement": self.material_disagreement,
            "disagreement_notes": list(self.disagreement_notes),
            "follow_up_questions": list(self.follow_up_questions),
            "field_diffs": [d.to_dict() for d in self.field_diffs],
            "system_fault": self.system_fault,
        }


def default_validation() -> ValidationMetadata:
    """The fixed "perfect consensus" result used when validation is off."""
    return ValidationMetadata(
        ensemble_mode=EnsembleMode.OFF,
        consensus_score=1.0,
        evidence_score=1.0,
        material_disagreement=False,
    )


def fallback_validation(mode: EnsembleMode, error: str) -> ValidationMetadata:
    """Untrusted result returned when the lens sequence raised."""
    return ValidationMetadata(
        ensemble_mode=mode,
        consensus_score=0.0,
        evidence_score=0.0,
        material_disagreement=True,
        disagreement_notes=(
            f"{FALLBACK_NOTE_PREFIX}: multi-pass validation failed; returned baseline "
            f"packet. Error: {error}",
        ),
        system_fault=True,
    )


@dataclass
class ValidationQARecord:
    """Developer-only record of one validation run. Observability, not contract."""

    report_id: str
    mode: EnsembleMode
    pass_count: int
    validation: ValidationMetadata
    lens_results: list[LensResult] = field(default_factory=list)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def top_disagreements(self) -> list[str]:
        return list(self.validation.disagreement_notes[:3])

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "report_id": self.report_id,
            "config": {"mode": self.mode.value, "pass_count": self.pass_count},
            "validation": self.validation.to_dict(),
            "lens_results": [
                {
                    "lens_id": r.lens_id.value,
                    "success": r.success,
                    "score": r.score,
                    "findings_count": len(r.findings),
                    "time_ms": round(r.execution_time_ms, 3),
                }
                for r in self.lens_results
            ],
            "top_disagreements": self.top_disagreements,
        }

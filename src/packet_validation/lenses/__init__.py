"""
Validation lenses -- independent, deterministic checks over one Decision Packet.

Components:
  - CONSISTENCY_LENS: cross-section references (runway, option ids, signals)
  - AUDIT_LENS: evidence provenance and register completeness
  - RISK_LENS: risks answered by options and plan (5-pass)
  - VALUE_LENS: value figures carried into options and plan (5-pass)
  - SYNTHESIS_LENS: escalates prior findings; always last

Every lens id has exactly one executor in LENS_EXECUTORS; adding an id to
ValidationLensId without an executor fails at import.
"""

from collections.abc import Callable, Sequence

from ..report import DiagnosticReport
from .audit import run_audit_lens
from .catalog import generation_lenses, validation_lenses
from .consistency import run_consistency_lens
from .models import (
    Finding,
    FindingType,
    GenerationLensId,
    LensDefinition,
    LensResult,
    Severity,
    ValidationLensId,
)
from .risk import run_risk_lens
from .synthesis import run_synthesis_lens
from .value import run_value_lens

LensExecutor = Callable[[DiagnosticReport, Sequence[LensResult]], LensResult]

LENS_EXECUTORS: dict[ValidationLensId, LensExecutor] = {
    ValidationLensId.CONSISTENCY_LENS: lambda report, prior: run_consistency_lens(report),
    ValidationLensId.AUDIT_LENS: lambda report, prior: run_audit_lens(report),
    ValidationLensId.RISK_LENS: lambda report, prior: run_risk_lens(report),
    ValidationLensId.VALUE_LENS: lambda report, prior: run_value_lens(report),
    ValidationLensId.SYNTHESIS_LENS: run_synthesis_lens,
}

_unhandled = set(ValidationLensId) - set(LENS_EXECUTORS)
if _unhandled:
    missing = sorted(lens_id.value for lens_id in _unhandled)
    raise ImportError(f"No executor registered for lens ids: {missing}")


def run_lens(
    lens_id: ValidationLensId, report: DiagnosticReport, prior: Sequence[LensResult] = ()
) -> LensResult:
    """Execute one lens. `prior` is only read by the synthesis lens."""
    return LENS_EXECUTORS[lens_id](report, prior)


__all__ = [
    "Finding",
    "FindingType",
    "GenerationLensId",
    "LENS_EXECUTORS",
    "LensDefinition",
    "LensResult",
    "Severity",
    "ValidationLensId",
    "generation_lenses",
    "run_lens",
    "validation_lenses",
]

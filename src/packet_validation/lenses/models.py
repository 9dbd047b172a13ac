"""Data models for validation lenses."""

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class FindingType(str, Enum):
    CONSISTENCY = "consistency"
    CITATION = "citation"
    EVIDENCE = "evidence"
    RISK = "risk"
    VALUE = "value"


class ValidationLensId(str, Enum):
    """Lenses that re-examine an existing report."""

    CONSISTENCY_LENS = "CONSISTENCY_LENS"
    AUDIT_LENS = "AUDIT_LENS"
    RISK_LENS = "RISK_LENS"
    VALUE_LENS = "VALUE_LENS"
    SYNTHESIS_LENS = "SYNTHESIS_LENS"


class GenerationLensId(str, Enum):
    """Role lenses used when generating independent report variants."""

    CORE_DIAGNOSTIC = "CORE_DIAGNOSTIC"
    RISK_AUDIT = "RISK_AUDIT"
    VALUE_LENS = "VALUE_LENS"
    AUDIT_LENS = "AUDIT_LENS"
    SYNTHESIS = "SYNTHESIS"


@dataclass(frozen=True)
class LensDefinition:
    """Catalog entry for a lens.

    Attributes:
        id: Lens identifier (validation or generation enum member).
        name: Short display name.
        description: One-line purpose.
        instructions: Instruction text for an external reasoning engine.
            Inert metadata in the deterministic lenses.
    """

    id: ValidationLensId | GenerationLensId
    name: str
    description: str
    instructions: str = ""


@dataclass(frozen=True)
class Finding:
    """A single issue raised by one lens.

    Attributes:
        type: Category of the check that fired.
        severity: "error" forces material disagreement; "warning" counts
            toward per-field escalation; "info" is advisory.
        field: Dotted report path the finding is about (e.g. "sections.options").
        message: Human-readable explanation.
        related_fields: Other report paths involved in the comparison.
    """

    type: FindingType
    severity: Severity
    field: str
    message: str
    related_fields: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        data = {
            "type": self.type.value,
            "severity": self.severity.value,
            "field": self.field,
            "message": self.message,
        }
        if self.related_fields:
            data["related_fields"] = list(self.related_fields)
        return data


@dataclass(frozen=True)
class LensResult:
    """Outcome of one lens invocation."""

    lens_id: ValidationLensId
    success: bool
    findings: tuple[Finding, ...] = ()
    score: float = 1.0  # 0..1
    execution_time_ms: float = 0.0
    error: str | None = None

    def count(self, severity: Severity) -> int:
        return sum(1 for f in self.findings if f.severity is severity)


@dataclass
class FindingCollector:
    """Mutable scratch list a lens fills before freezing into a LensResult."""

    findings: list[Finding] = field(default_factory=list)

    def add(
        self,
        type: FindingType,
        severity: Severity,
        field: str,
        message: str,
        related_fields: tuple[str, ...] = (),
    ) -> None:
        self.findings.append(Finding(type, severity, field, message, related_fields))

    def count(self, severity: Severity) -> int:
        return sum(1 for f in self.findings if f.severity is severity)

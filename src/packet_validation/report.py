"""
Pydantic models for the Decision Packet under validation.

The report is produced by an external generator and arrives as camelCase
JSON. These models accept either camelCase keys or snake_case names, are
frozen, and keep any extra fields the generator supplies so that a
validated copy round-trips without losing data.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .errors import ReportLoadError

REPORT_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    extra="allow",
)


class IntegrityMetrics(BaseModel):
    """Completeness, evidence quality and confidence (each 0-100)."""

    model_config = REPORT_MODEL_CONFIG

    completeness: float = 0.0
    evidence_quality: float = 0.0
    confidence: float = 0.0
    missing_data: list[str] = Field(default_factory=list)


class ReportSections(BaseModel):
    """Narrative sections, each a formatted markdown blob.

    Missing sections default to "" so lens checks no-op instead of failing.
    """

    model_config = REPORT_MODEL_CONFIG

    executive_brief: str = ""
    value_ledger: str = ""
    scenarios: str = ""
    options: str = ""
    execution_plan: str = ""
    evidence_register: str = ""
    pattern_analysis: str | None = None
    gcas_narrative: str | None = None
    course_correction: str | None = None


class DiagnosticReport(BaseModel):
    """The Decision Packet. Read-only except for the additive `validation` field."""

    model_config = REPORT_MODEL_CONFIG

    id: str = ""
    generated_at: str = ""
    output_mode: str = ""
    integrity: IntegrityMetrics = Field(default_factory=IntegrityMetrics)
    sections: ReportSections = Field(default_factory=ReportSections)
    input_summary: str = ""
    validation: Any = None

    def with_validation(self, validation: Any) -> "DiagnosticReport":
        """Return a shallow copy with validation metadata attached."""
        return self.model_copy(update={"validation": validation})

    def with_integrity(self, integrity: IntegrityMetrics) -> "DiagnosticReport":
        return self.model_copy(update={"integrity": integrity})


def load_report(source: str | Path | dict) -> DiagnosticReport:
    """Build a DiagnosticReport from a dict or a JSON file path."""
    if isinstance(source, dict):
        data = source
    else:
        path = Path(source)
        try:
            data = json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise ReportLoadError(f"Cannot read report {path}: {e}") from e

    if not isinstance(data, dict):
        raise ReportLoadError(f"Report must be a JSON object, got {type(data).__name__}")

    try:
        return DiagnosticReport.model_validate(data)
    except ValidationError as e:
        raise ReportLoadError(f"Invalid report: {e}") from e


def dump_report(report: DiagnosticReport) -> dict[str, Any]:
    """Serialize a report (and any attached validation) to camelCase JSON-ready data."""
    data = report.model_dump(mode="json", by_alias=True, exclude={"validation"})
    validation = report.validation
    if validation is not None:
        data["validation"] = validation.to_dict() if hasattr(validation, "to_dict") else validation
    return data

"""
Decision Packet validation -- multi-pass validation and reconciliation for
generated diagnostic reports.

Two paths:
  - Validation: re-examine one finished report through independent lenses and
    attach a ValidationMetadata verdict (run_validation / ValidationRunner).
  - Generation ensemble: reconcile several generated variants of one report
    into a single packet (EnsembleRunner / merge_pass_results).

Both are OFF by default. Enable per run with an EnsembleConfig, or process-wide
with set_config(mode="3pass").
"""

from .badge import ValidationBadge, validation_badge
from .config import (
    EnsembleConfig,
    EnsembleMode,
    MaterialDisagreementThresholds,
    ModeRegistry,
    config_from_env,
    get_config,
    get_pass_count,
    is_active,
    reset_config,
    set_config,
)
from .ensemble import EnsembleRunner, MergeResult, ReportGenerator, merge_pass_results
from .errors import NoSuccessfulPassesError, PacketValidationError, ReportLoadError
from .report import DiagnosticReport, IntegrityMetrics, ReportSections, dump_report, load_report
from .validation import ValidationMetadata, ValidationRunner, run_validation

__version__ = "0.1.0"

__all__ = [
    "DiagnosticReport",
    "EnsembleConfig",
    "EnsembleMode",
    "EnsembleRunner",
    "IntegrityMetrics",
    "MaterialDisagreementThresholds",
    "MergeResult",
    "ModeRegistry",
    "NoSuccessfulPassesError",
    "PacketValidationError",
    "ReportGenerator",
    "ReportLoadError",
    "ReportSections",
    "ValidationBadge",
    "ValidationMetadata",
    "ValidationRunner",
    "config_from_env",
    "dump_report",
    "get_config",
    "get_pass_count",
    "is_active",
    "load_report",
    "merge_pass_results",
    "reset_config",
    "run_validation",
    "set_config",
    "validation_badge",
]

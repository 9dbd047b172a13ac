"""
Generation-ensemble path -- several independently generated variants of the
same packet, reconciled into one by field comparison and conservative merge.
"""

from .comparator import agreement_score, compare_fields, extract_key_values, median
from .merge import merge_integrity, merge_pass_results, select_final_report
from .models import (
    EnsembleQARecord,
    EnsembleValidationMetadata,
    FieldComparison,
    MergeResult,
    PassResult,
    ensemble_fallback_validation,
    single_pass_validation,
)
from .runner import EnsembleRunner, ReportGenerator

__all__ = [
    "EnsembleQARecord",
    "EnsembleRunner",
    "EnsembleValidationMetadata",
    "FieldComparison",
    "MergeResult",
    "PassResult",
    "ReportGenerator",
    "agreement_score",
    "compare_fields",
    "ensemble_fallback_validation",
    "extract_key_values",
    "median",
    "merge_integrity",
    "merge_pass_results",
    "select_final_report",
    "single_pass_validation",
]

"""
Single-report validation path.

Runs the validation lenses over one finished Decision Packet and attaches a
ValidationMetadata verdict without touching any substantive field.
"""

from .follow_up import generate_follow_up_questions
from .models import (
    FALLBACK_NOTE_PREFIX,
    FieldDiff,
    ValidationMetadata,
    ValidationQARecord,
    default_validation,
    fallback_validation,
)
from .runner import ValidationRunner, run_validation
from .scoring import consensus_score, detect_disagreement, evidence_score, extract_field_diffs

__all__ = [
    "FALLBACK_NOTE_PREFIX",
    "FieldDiff",
    "ValidationMetadata",
    "ValidationQARecord",
    "ValidationRunner",
    "consensus_score",
    "default_validation",
    "detect_disagreement",
    "evidence_score",
    "extract_field_diffs",
    "fallback_validation",
    "generate_follow_up_questions",
    "run_validation",
]

"""Tests for the display badge derived from validation metadata."""

from packet_validation.badge import validation_badge
from packet_validation.config import EnsembleMode
from packet_validation.ensemble import EnsembleValidationMetadata, ensemble_fallback_validation
from packet_validation.validation import ValidationMetadata, default_validation, fallback_validation


class TestValidationBadge:
    def test_hidden_when_absent_or_off(self):
        assert not validation_badge(None).show
        assert not validation_badge(default_validation()).show

    def test_success(self):
        badge = validation_badge(
            ValidationMetadata(
                ensemble_mode=EnsembleMode.THREE_PASS,
                consensus_score=0.9,
                evidence_score=0.8,
                material_disagreement=False,
            )
        )
        assert badge.show
        assert badge.label == "Validated (90%)"
        assert badge.variant == "success"
        assert badge.tooltip == "Multi-pass validation complete. Consensus: 90%, Evidence: 80%"

    def test_ensemble_success_names_pass_count(self):
        badge = validation_badge(
            EnsembleValidationMetadata(
                ensemble_mode=EnsembleMode.FIVE_PASS,
                consensus_score=0.95,
                evidence_score=0.88,
                material_disagreement=False,
                pass_count=5,
                passes_completed=5,
            )
        )
        assert badge.tooltip.startswith("5-pass validation complete.")

    def test_material_disagreement_is_warning(self):
        badge = validation_badge(
            ValidationMetadata(
                ensemble_mode=EnsembleMode.THREE_PASS,
                consensus_score=0.6,
                evidence_score=0.7,
                material_disagreement=True,
                disagreement_notes=("first", "second", "third"),
            )
        )
        assert badge.variant == "warning"
        assert badge.label == "Validated (60%)"
        assert badge.tooltip == "Material issues detected. first second"

    def test_validation_fallback_is_warning(self):
        badge = validation_badge(fallback_validation(EnsembleMode.THREE_PASS, "boom"))
        assert badge.variant == "warning"
        assert badge.label == "Validated (0%)"

    def test_ensemble_fallback_shows_baseline(self):
        badge = validation_badge(ensemble_fallback_validation(EnsembleMode.FIVE_PASS, "boom", 12.0))
        assert badge.label == "Baseline"
        assert badge.variant == "warning"

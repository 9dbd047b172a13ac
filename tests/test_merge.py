"""Tests for ensemble merge: final report selection, integrity and disagreement."""

import pytest

from packet_validation.config import EnsembleConfig, EnsembleMode
from packet_validation.ensemble import PassResult, merge_integrity, merge_pass_results, select_final_report
from packet_validation.errors import NoSuccessfulPassesError
from packet_validation.lenses import GenerationLensId

from .conftest import with_integrity, with_sections

CONFIG = EnsembleConfig(mode="3pass")
PASS_IDS = (GenerationLensId.CORE_DIAGNOSTIC, GenerationLensId.RISK_AUDIT, GenerationLensId.SYNTHESIS)


def _passes(*reports):
    return [
        PassResult(pass_id=pass_id, success=True, report=report)
        for pass_id, report in zip(PASS_IDS, reports)
    ]


def _failed(pass_id, error="generator timeout"):
    return PassResult(pass_id=pass_id, success=False, error=error)


class TestSelectFinalReport:
    def test_prefers_synthesis(self, sample_report):
        synthesis = sample_report.model_copy(update={"id": "synth"})
        passes = [
            PassResult(pass_id=GenerationLensId.SYNTHESIS, success=True, report=synthesis),
            PassResult(pass_id=GenerationLensId.CORE_DIAGNOSTIC, success=True, report=sample_report),
        ]
        assert select_final_report(passes).id == "synth"

    def test_last_success_when_synthesis_failed(self, sample_report):
        risk = sample_report.model_copy(update={"id": "risk"})
        passes = [
            PassResult(pass_id=GenerationLensId.CORE_DIAGNOSTIC, success=True, report=sample_report),
            PassResult(pass_id=GenerationLensId.RISK_AUDIT, success=True, report=risk),
            _failed(GenerationLensId.SYNTHESIS),
        ]
        assert select_final_report(passes).id == "risk"

    def test_no_success_raises(self):
        with pytest.raises(NoSuccessfulPassesError):
            select_final_report([_failed(p) for p in PASS_IDS])


class TestMergeIntegrity:
    def test_minima_and_union(self, sample_report):
        other = with_integrity(
            sample_report, completeness=60, evidence_quality=90, missing_data=["Customer concentration data", "Board minutes"]
        )
        merged = merge_integrity([sample_report, other], material_disagreement=False)
        assert merged.completeness == 60
        assert merged.evidence_quality == 80
        assert merged.confidence == 78
        assert merged.missing_data == ["AR aging detail", "Customer concentration data", "Board minutes"]

    def test_disagreement_penalty(self, sample_report):
        merged = merge_integrity([sample_report], material_disagreement=True)
        assert merged.confidence == 63

    def test_penalty_floors_at_zero(self, sample_report):
        low = with_integrity(sample_report, confidence=10)
        assert merge_integrity([low], material_disagreement=True).confidence == 0

    def test_no_reports(self):
        merged = merge_integrity([], material_disagreement=True)
        assert merged.missing_data == ["No valid passes completed"]


class TestMergePassResults:
    def test_identical_variants_agree(self, sample_report):
        result = merge_pass_results(_passes(sample_report, sample_report, sample_report), CONFIG)
        v = result.validation
        assert v.ensemble_mode is EnsembleMode.THREE_PASS
        assert v.consensus_score == 1.0
        assert v.evidence_score == pytest.approx(0.88)
        assert v.material_disagreement is False
        assert v.pass_count == 3
        assert v.passes_completed == 3
        assert v.fallback_used is False
        assert result.final_report.integrity == sample_report.integrity
        assert result.final_report.validation is v

    def test_confidence_variance_is_material(self, sample_report):
        variants = [with_integrity(sample_report, confidence=c) for c in (80, 80, 20)]
        result = merge_pass_results(_passes(*variants), CONFIG)
        v = result.validation
        assert v.material_disagreement is True
        assert any("High variance in confidence" in n for n in v.disagreement_notes)
        # min(80, 80, 20) - 15
        assert result.final_report.integrity.confidence == 5
        confidence = next(c for c in result.field_comparisons if c.field == "confidence")
        assert confidence.selected_value == 80

    def test_roi_flip(self, sample_report):
        flipped = with_sections(
            sample_report,
            scenarios=(
                "### Base Case\nProbability: 40%\nStabilize by Month 6.\n\n"
                "### Upside Case\nProbability: 33%\n\n"
                "### Downside Case\nProbability: 27%"
            ),
        )
        result = merge_pass_results(_passes(sample_report, sample_report, flipped), CONFIG)
        assert any("ROI outlook flipped" in n for n in result.validation.disagreement_notes)

    def test_roi_flip_detection_can_be_disabled(self, sample_report):
        flipped = with_sections(
            sample_report,
            scenarios=(
                "### Base Case\nProbability: 40%\n\n"
                "### Upside Case\nProbability: 33%\n\n"
                "### Downside Case\nProbability: 27%"
            ),
        )
        config = CONFIG.with_updates(material_disagreement_thresholds={"roi_flip_detection": False})
        result = merge_pass_results(_passes(sample_report, sample_report, flipped), config)
        assert not any("ROI outlook flipped" in n for n in result.validation.disagreement_notes)

    def test_diagnosis_mismatch(self, sample_report):
        brief = sample_report.sections.executive_brief.replace("Cash Constrained", "Liquidity Crisis")
        other = with_sections(sample_report, executive_brief=brief)
        result = merge_pass_results(_passes(sample_report, sample_report, other), CONFIG)
        assert result.validation.material_disagreement is True
        assert "Diagnosis differs between passes: Cash Constrained, Liquidity Crisis" in (
            result.validation.disagreement_notes
        )

    def test_failed_pass_is_excluded(self, sample_report):
        passes = _passes(sample_report, sample_report) + [_failed(GenerationLensId.SYNTHESIS)]
        result = merge_pass_results(passes, CONFIG)
        v = result.validation
        assert v.pass_count == 3
        assert v.passes_completed == 2
        assert v.fallback_used is True
        # 2/3 success rate * 0.4 + 0.8 quality * 0.6
        assert v.evidence_score == pytest.approx(0.7467, abs=1e-3)

    def test_all_failed_raises(self):
        with pytest.raises(NoSuccessfulPassesError):
            merge_pass_results([_failed(p) for p in PASS_IDS], CONFIG)

    def test_inputs_not_mutated(self, sample_report):
        variants = [with_integrity(sample_report, confidence=c) for c in (80, 80, 20)]
        merge_pass_results(_passes(*variants), CONFIG)
        assert [v.integrity.confidence for v in variants] == [80, 80, 20]
        assert all(v.validation is None for v in variants)

"""Tests for consensus/evidence scoring, disagreement detection and follow-up questions."""

import pytest

from packet_validation.lenses import Finding, FindingType, LensResult, Severity, ValidationLensId
from packet_validation.validation import (
    consensus_score,
    detect_disagreement,
    evidence_score,
    extract_field_diffs,
    generate_follow_up_questions,
)
from packet_validation.validation.follow_up import DATA_GAP_QUESTIONS

from .conftest import with_integrity


def _warning(field, message="warning"):
    return Finding(FindingType.EVIDENCE, Severity.WARNING, field, message)


def _error(field, message="error"):
    return Finding(FindingType.CONSISTENCY, Severity.ERROR, field, message)


def _result(lens_id=ValidationLensId.CONSISTENCY_LENS, score=1.0, findings=()):
    return LensResult(lens_id=lens_id, success=True, findings=tuple(findings), score=score)


class TestScores:
    def test_consensus_is_rounded_mean(self):
        results = [_result(score=1.0), _result(score=0.8), _result(score=0.75)]
        assert consensus_score(results) == 0.85

    def test_consensus_without_results(self):
        assert consensus_score([]) == 1.0

    def test_evidence_blends_audit(self, sample_report):
        results = [_result(ValidationLensId.AUDIT_LENS, score=0.4)]
        assert evidence_score(sample_report, results) == pytest.approx(0.6)

    def test_evidence_without_audit(self, sample_report):
        assert evidence_score(sample_report, [_result(score=0.1)]) == 0.8

    def test_evidence_is_clamped(self, sample_report):
        report = with_integrity(sample_report, evidence_quality=150)
        assert evidence_score(report, []) == 1.0


class TestDetectDisagreement:
    def test_clean_results(self):
        verdict = detect_disagreement([_result(), _result(score=0.9)], 0.7)
        assert not verdict.material_disagreement
        assert verdict.notes == []

    def test_error_note_per_finding(self):
        results = [_result(findings=[_error("a", "first"), _error("b", "second")])]
        verdict = detect_disagreement(results, 0.0)
        assert verdict.material_disagreement
        assert verdict.notes == ["first", "second"]

    def test_two_warnings_on_one_field(self):
        results = [
            _result(findings=[_warning("sections.scenarios")]),
            _result(ValidationLensId.AUDIT_LENS, findings=[_warning("sections.scenarios")]),
        ]
        verdict = detect_disagreement(results, 0.0)
        assert verdict.notes == ["Multiple validation warnings on sections.scenarios"]

    def test_single_warnings_on_distinct_fields_are_not_material(self):
        results = [_result(findings=[_warning("a"), _warning("b"), _warning("c")])]
        assert not detect_disagreement(results, 0.0).material_disagreement

    def test_low_mean_score(self):
        verdict = detect_disagreement([_result(score=0.5), _result(score=0.6)], 0.7)
        assert verdict.material_disagreement
        assert verdict.notes == ["Overall validation score (55%) below acceptable threshold (70%)"]

    def test_all_triggers_accumulate(self):
        results = [
            _result(score=0.2, findings=[_error("x", "bad ref"), _warning("y"), _warning("y")]),
        ]
        verdict = detect_disagreement(results, 0.7)
        assert len(verdict.notes) == 3


class TestFieldDiffs:
    def test_only_errors_and_warnings(self):
        info = Finding(FindingType.CITATION, Severity.INFO, "z", "advisory")
        results = [_result(findings=[info, _warning("a", "w"), _error("b", "e")])]
        diffs = extract_field_diffs(results)
        assert [(d.field, d.issue) for d in diffs] == [("a", "w"), ("b", "e")]

    def test_capped_at_ten(self):
        results = [_result(findings=[_warning(f"f{i}") for i in range(15)])]
        diffs = extract_field_diffs(results)
        assert len(diffs) == 10
        assert diffs[0].field == "f0"


class TestFollowUpQuestions:
    def test_silent_when_trustworthy(self):
        assert generate_follow_up_questions(["P&L statements"], [], 0.8, False) == []

    def test_missing_data_mapped(self):
        questions = generate_follow_up_questions(
            ["AR aging detail", "Customer concentration data"], [], 0.8, True
        )
        assert questions == [
            DATA_GAP_QUESTIONS["financials.receivables"],
            DATA_GAP_QUESTIONS["market.customers"],
        ]

    def test_low_evidence_alone_triggers(self):
        questions = generate_follow_up_questions(["Last 3 years of revenue"], [], 0.4, False)
        assert questions == [DATA_GAP_QUESTIONS["financials.revenue"]]

    def test_warning_sections_mapped_and_deduplicated(self):
        results = [
            _result(findings=[_warning("sections.valueLedger"), _warning("sections.valueLedger")]),
            _result(findings=[_warning("sections.scenarios")]),
        ]
        questions = generate_follow_up_questions([], results, 0.3, False)
        assert questions == [
            "Can you provide supporting documentation for key valuation assumptions?",
            "What methodology was used for scenario probability estimates?",
        ]

    def test_only_first_three_warnings_considered(self):
        results = [
            _result(
                findings=[
                    _warning("a"),
                    _warning("b"),
                    _warning("c"),
                    _warning("sections.scenarios"),
                ]
            )
        ]
        assert generate_follow_up_questions([], results, 0.3, True) == []

    def test_capped_at_seven(self):
        missing = ["P&L", "customer list", "aging report", "org chart", "capex plan"]
        results = [_result(findings=[_warning("sections.valueLedger"), _warning("sections.scenarios")])]
        questions = generate_follow_up_questions(missing, results, 0.1, True)
        assert len(questions) == 7
        assert len(set(questions)) == 7

    def test_unknown_labels_ignored(self):
        assert generate_follow_up_questions(["Weather data"], [], 0.1, True) == []

"""
ValidationRunner -- post-generation, multi-pass validation of one Decision Packet.

Two states:
  SINGLE_PASS (mode off): the report comes back with the fixed "perfect
      consensus" metadata. No lens runs.
  MULTI_PASS (3pass/5pass): lenses run strictly in catalog order, synthesis
      last. Scores, disagreement, follow-ups and field diffs are derived from
      the lens results.

Fault policy is all-or-nothing: if any lens (or the scoring after it) raises,
the whole run degrades to fallback metadata when fallback_on_error is set;
otherwise the exception propagates to the caller.

The input report is never mutated. The caller gets a shallow copy with
`validation` attached.
"""

import logging

from ..config import EnsembleConfig, get_config
from ..lenses import LensResult, run_lens, validation_lenses
from ..qa import emit_qa_record
from ..report import DiagnosticReport
from .follow_up import generate_follow_up_questions
from .models import ValidationMetadata, ValidationQARecord, default_validation, fallback_validation
from .scoring import consensus_score, detect_disagreement, evidence_score, extract_field_diffs

logger = logging.getLogger(__name__)


class ValidationRunner:
    """Validates Decision Packets through the lenses of the configured mode.

    Usage:
        runner = ValidationRunner(EnsembleConfig(mode="3pass"))
        validated = await runner.validate(report)
        if validated.validation.material_disagreement:
            # route to human review -- never auto-repair
    """

    def __init__(self, config: EnsembleConfig | None = None):
        self._config = config

    async def validate(self, report: DiagnosticReport) -> DiagnosticReport:
        # Resolve config once; a registry change mid-run cannot affect this run
        config = self._config if self._config is not None else get_config()

        if not config.is_active:
            return report.with_validation(default_validation())

        try:
            results = self._run_lenses(report, config)
            validation = self._build_metadata(report, results, config)
        except Exception as e:
            if not config.fallback_on_error:
                raise
            logger.warning(
                f"[ValidationRunner] Validation failed for report '{report.id}', "
                f"returning baseline: {e}"
            )
            return report.with_validation(fallback_validation(config.mode, str(e)))

        emit_qa_record(
            ValidationQARecord(
                report_id=report.id,
                mode=config.mode,
                pass_count=config.pass_count,
                validation=validation,
                lens_results=results,
            ),
            config,
            "validation_qa",
        )
        return report.with_validation(validation)

    def _run_lenses(self, report: DiagnosticReport, config: EnsembleConfig) -> list[LensResult]:
        results: list[LensResult] = []
        for lens in validation_lenses(config.mode):
            result = run_lens(lens.id, report, tuple(results))
            logger.debug(
                f"[ValidationRunner] {lens.id.value}: score={result.score:.2f}, "
                f"findings={len(result.findings)} ({result.execution_time_ms:.2f}ms)"
            )
            results.append(result)
        return results

    def _build_metadata(
        self, report: DiagnosticReport, results: list[LensResult], config: EnsembleConfig
    ) -> ValidationMetadata:
        consensus = consensus_score(results)
        evidence = evidence_score(report, results)
        verdict = detect_disagreement(results, config.consensus_threshold)
        questions = generate_follow_up_questions(
            report.integrity.missing_data, results, evidence, verdict.material_disagreement
        )
        return ValidationMetadata(
            ensemble_mode=config.mode,
            consensus_score=consensus,
            evidence_score=evidence,
            material_disagreement=verdict.material_disagreement,
            disagreement_notes=tuple(verdict.notes),
            follow_up_questions=tuple(questions),
            field_diffs=tuple(extract_field_diffs(results)),
        )


async def run_validation(
    report: DiagnosticReport, config: EnsembleConfig | None = None
) -> DiagnosticReport:
    """Validate one report. Uses the registry snapshot when no config is given."""
    return await ValidationRunner(config).validate(report)

"""
EnsembleRunner -- multi-pass generation with merge and reconciliation.

Drives an external ReportGenerator once per generation lens, in catalog order
(synthesis last), then merges the variants. Unlike the validation path,
individual pass failures are recorded and excluded rather than aborting the
run; only a failed merge (e.g. zero successful passes) triggers the fallback.

Usage:
    runner = EnsembleRunner(generator=MyGenerator(), config=EnsembleConfig(mode="5pass"))
    report = await runner.run(intake)
    report.validation.passes_completed
"""

import logging
import time
from typing import Any, Protocol, runtime_checkable

from ..config import EnsembleConfig, get_config
from ..lenses import LensDefinition, generation_lenses
from ..qa import emit_qa_record
from ..report import DiagnosticReport
from .merge import merge_pass_results
from .models import (
    EnsembleQARecord,
    PassResult,
    ensemble_fallback_validation,
    single_pass_validation,
)

logger = logging.getLogger(__name__)

KEY_DIFF_AGREEMENT = 0.9


@runtime_checkable
class ReportGenerator(Protocol):
    """Produces a Decision Packet from intake data.

    `lens` is None for the single baseline pass; otherwise the generator should
    apply `lens.instructions` to steer that variant.
    """

    async def generate(self, intake: Any, lens: LensDefinition | None) -> DiagnosticReport: ...


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class EnsembleRunner:
    def __init__(self, generator: ReportGenerator, config: EnsembleConfig | None = None):
        self._generator = generator
        self._config = config

    async def run(self, intake: Any) -> DiagnosticReport:
        config = self._config if self._config is not None else get_config()
        start = time.perf_counter()

        if not config.is_active:
            report = await self._generator.generate(intake, None)
            return report.with_validation(single_pass_validation())

        pass_results: list[PassResult] = []
        try:
            for lens in generation_lenses(config.mode):
                pass_results.append(await self._execute_pass(lens, intake))
            merged = merge_pass_results(pass_results, config, _elapsed_ms(start))
        except Exception as e:
            if not config.fallback_on_error:
                raise
            logger.warning(f"[EnsembleRunner] Multi-pass failed, falling back to single-pass: {e}")
            report = await self._generator.generate(intake, None)
            return report.with_validation(
                ensemble_fallback_validation(config.mode, str(e), _elapsed_ms(start))
            )

        emit_qa_record(
            EnsembleQARecord(
                report_id=merged.final_report.id,
                mode=config.mode,
                pass_count=config.pass_count,
                validation=merged.validation,
                key_field_diffs=[
                    c for c in merged.field_comparisons if c.agreement_score < KEY_DIFF_AGREEMENT
                ],
                pass_results=pass_results,
            ),
            config,
            "ensemble_qa",
        )
        return merged.final_report

    async def _execute_pass(self, lens: LensDefinition, intake: Any) -> PassResult:
        start = time.perf_counter()
        try:
            report = await self._generator.generate(intake, lens)
        except Exception as e:
            logger.error(f"[EnsembleRunner] {lens.id.value} pass failed: {e}")
            return PassResult(
                pass_id=lens.id,
                success=False,
                error=str(e),
                execution_time_ms=_elapsed_ms(start),
            )
        return PassResult(
            pass_id=lens.id,
            success=True,
            report=report,
            execution_time_ms=_elapsed_ms(start),
        )

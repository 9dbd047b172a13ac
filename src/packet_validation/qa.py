"""
Developer QA side channel -- logs run records and optionally writes them to disk.

Only active when the run's config has enable_dev_panel set. Artifacts land in
<qa_artifacts_dir>/<report_id>/<kind>.json for after-the-fact auditing.
Failures here are logged and never affect the validation result.
"""

import json
import logging
import re
from typing import Any

from .config import EnsembleConfig

logger = logging.getLogger(__name__)

# Report ids become directory names; anything else is written under "unknown"
SAFE_REPORT_ID = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_.-]*$")
UNKNOWN_REPORT_ID = "unknown"


def emit_qa_record(record: Any, config: EnsembleConfig, kind: str) -> None:
    """Log a QA record (anything with to_dict()) and write it as an artifact if configured."""
    if not config.enable_dev_panel:
        return

    data = record.to_dict()
    validation = data.get("validation", {})
    logger.info(
        f"[ValidationQA] {kind}: mode={data['config']['mode']} "
        f"({data['config']['pass_count']} passes) "
        f"consensus={validation.get('consensus_score', 0):.0%} "
        f"evidence={validation.get('evidence_score', 0):.0%} "
        f"material_disagreement={validation.get('material_disagreement')}"
    )
    for note in validation.get("disagreement_notes", []):
        logger.info(f"[ValidationQA]   - {note}")
    for question in validation.get("follow_up_questions", []):
        logger.info(f"[ValidationQA]   ? {question}")
    for lens in data.get("lens_results", []):
        logger.info(
            f"[ValidationQA]   {lens['lens_id']}: score={lens['score']:.0%}, "
            f"findings={lens['findings_count']} ({lens['time_ms']}ms)"
        )
    for diff in data.get("key_field_diffs", []):
        logger.info(
            f"[ValidationQA]   {diff['field']}: agreement={diff['agreement_score']:.0%}, "
            f"values={diff['values']}"
        )

    _write_artifact(config, artifact_dir_name(data.get("report_id")), kind, data)


def artifact_dir_name(report_id: str | None) -> str:
    """Directory name for a report's artifacts; unsafe or empty ids map to "unknown"."""
    if report_id and SAFE_REPORT_ID.match(report_id) and ".." not in report_id:
        return report_id
    if report_id:
        logger.warning(
            f"[ValidationQA] Unsafe report id {report_id!r}, "
            f"writing artifact under {UNKNOWN_REPORT_ID!r}"
        )
    return UNKNOWN_REPORT_ID


def _write_artifact(config: EnsembleConfig, report_id: str, kind: str, data: dict) -> None:
    if config.qa_artifacts_dir is None:
        return
    artifact_dir = config.qa_artifacts_dir / report_id
    path = artifact_dir / f"{kind}.json"
    try:
        artifact_dir.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(data, f, indent=2, default=str)
        logger.debug(f"[ValidationQA] Artifact: {path}")
    except OSError as e:
        logger.warning(f"[ValidationQA] Artifact write failed: {e}")

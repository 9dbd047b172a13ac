"""Compact badge summary of validation metadata for display layers."""

from dataclasses import dataclass

from .config import EnsembleMode
from .ensemble.models import EnsembleValidationMetadata
from .validation.models import ValidationMetadata


@dataclass(frozen=True)
class ValidationBadge:
    show: bool
    label: str = ""
    variant: str = "default"  # "success", "warning", "default"
    tooltip: str = ""


def validation_badge(
    validation: ValidationMetadata | EnsembleValidationMetadata | None,
) -> ValidationBadge:
    """Badge for either metadata shape. Hidden when absent or when validation was off."""
    if validation is None or validation.ensemble_mode is EnsembleMode.OFF:
        return ValidationBadge(show=False)

    consensus = f"{validation.consensus_score * 100:.0f}%"
    evidence = f"{validation.evidence_score * 100:.0f}%"
    label = f"Validated ({consensus})"

    if isinstance(validation, EnsembleValidationMetadata) and validation.fallback_used:
        return ValidationBadge(
            show=True,
            label="Baseline",
            variant="warning",
            tooltip="Multi-pass validation failed; showing baseline result",
        )

    if validation.material_disagreement:
        return ValidationBadge(
            show=True,
            label=label,
            variant="warning",
            tooltip=f"Material issues detected. {' '.join(validation.disagreement_notes[:2])}".strip(),
        )

    if isinstance(validation, EnsembleValidationMetadata):
        passes = f"{validation.pass_count}-pass validation complete."
    else:
        passes = "Multi-pass validation complete."
    return ValidationBadge(
        show=True,
        label=label,
        variant="success",
        tooltip=f"{passes} Consensus: {consensus}, Evidence: {evidence}",
    )

"""
Lens catalog -- the fixed set of lenses for 3-pass and 5-pass modes.

Two families:
  - Validation lenses re-examine one finished report (CONSISTENCY, AUDIT,
    RISK, VALUE, SYNTHESIS).
  - Generation lenses parameterize independent report variants that are later
    merged (CORE_DIAGNOSTIC, RISK_AUDIT, VALUE_LENS, AUDIT_LENS, SYNTHESIS).

The synthesis lens is always last in both families: it depends on every
lens before it.
"""

from ..config import EnsembleMode
from .models import GenerationLensId, LensDefinition, ValidationLensId

# =============================================================================
# VALIDATION LENSES
# =============================================================================

CONSISTENCY = LensDefinition(
    id=ValidationLensId.CONSISTENCY_LENS,
    name="Consistency Check",
    description="Verify internal consistency across all Decision Packet sections",
    instructions=(
        "Cross-check the sections against each other:\n"
        "- runway stated in the brief matches scenario timelines\n"
        "- options reference Value Ledger metrics\n"
        "- the execution plan only references options that are defined\n"
        "- warning signals in the brief are addressed by the plan"
    ),
)

AUDIT = LensDefinition(
    id=ValidationLensId.AUDIT_LENS,
    name="Audit Check",
    description="Verify claims have proper evidence citations",
    instructions=(
        "Check evidence provenance:\n"
        "- claims carry [OBSERVED], [INFERRED], [ASSUMED] or [COMPUTED] tags\n"
        "- the Value Ledger names its valuation basis\n"
        "- scenario probabilities are labeled\n"
        "- the evidence register is at least half complete\n"
        "- missing data is acknowledged in the brief"
    ),
)

RISK = LensDefinition(
    id=ValidationLensId.RISK_LENS,
    name="Risk Alignment Check",
    description="Verify risks are properly addressed in options and constraints",
    instructions=(
        "Check risk alignment:\n"
        "- risks raised in the brief are addressed by at least one option\n"
        "- a likely downside is matched by urgency in the plan\n"
        "- secured debt constraints are reflected in options"
    ),
)

VALUE = LensDefinition(
    id=ValidationLensId.VALUE_LENS,
    name="Value Alignment Check",
    description="Verify decision aligns with value metrics and data gaps",
    instructions=(
        "Check value alignment:\n"
        "- recovery estimates from the Value Ledger feed the options analysis\n"
        "- investment amounts come with ROI or payback\n"
        "- a credible upside is targeted by the plan"
    ),
)

SYNTHESIS = LensDefinition(
    id=ValidationLensId.SYNTHESIS_LENS,
    name="Synthesis Check",
    description="Produce final validation scores and follow-up questions",
    instructions=(
        "Reconcile prior lens findings:\n"
        "- escalate any error-level finding\n"
        "- flag an accumulation of warnings\n"
        "- compare lens scores against the stated confidence"
    ),
)

THREE_PASS_VALIDATION_LENSES: tuple[LensDefinition, ...] = (CONSISTENCY, AUDIT, SYNTHESIS)
FIVE_PASS_VALIDATION_LENSES: tuple[LensDefinition, ...] = (
    CONSISTENCY,
    AUDIT,
    RISK,
    VALUE,
    SYNTHESIS,
)


# =============================================================================
# GENERATION LENSES
# =============================================================================

_STRUCTURE_RULE = "Output must follow the exact Decision Packet structure."

CORE_DIAGNOSTIC = LensDefinition(
    id=GenerationLensId.CORE_DIAGNOSTIC,
    name="Core Diagnostic",
    description="Neutral baseline diagnosis and recommendations",
    instructions=(
        "You are performing the CORE DIAGNOSTIC pass. Assess the situation "
        "objectively, state the primary diagnosis and baseline recommendations. "
        f"Cite evidence explicitly and label uncertain items [ASSUMED]. {_STRUCTURE_RULE}"
    ),
)

RISK_AUDIT_3 = LensDefinition(
    id=GenerationLensId.RISK_AUDIT,
    name="Risk Audit",
    description="Failure modes, weak assumptions, missing evidence, governance issues",
    instructions=(
        "You are performing the RISK AUDIT pass. Challenge optimistic assumptions, "
        f"surface failure modes, evidence gaps and governance risks. {_STRUCTURE_RULE}"
    ),
)

RISK_AUDIT_5 = LensDefinition(
    id=GenerationLensId.RISK_AUDIT,
    name="Risk Lens",
    description="Failure modes, risk factors, threat assessment",
    instructions=(
        "You are performing the RISK LENS pass. Enumerate risk factors, threats to "
        f"value and execution risks, including worst-case implications. {_STRUCTURE_RULE}"
    ),
)

VALUE_GEN = LensDefinition(
    id=GenerationLensId.VALUE_LENS,
    name="Value Lens",
    description="Recoverable value, levers, Value Ledger impact",
    instructions=(
        "You are performing the VALUE LENS pass. Quantify recoverable value, value "
        f"creation levers and upside scenarios with their probability. {_STRUCTURE_RULE}"
    ),
)

AUDIT_GEN = LensDefinition(
    id=GenerationLensId.AUDIT_LENS,
    name="Audit Lens",
    description="Assumptions review, evidence sufficiency",
    instructions=(
        "You are performing the AUDIT LENS pass. Review evidence quality, validate "
        f"assumptions and flag every [ASSUMED] item by materiality. {_STRUCTURE_RULE}"
    ),
)

SYNTHESIS_GEN = LensDefinition(
    id=GenerationLensId.SYNTHESIS,
    name="Synthesis",
    description="Final reconciliation and output",
    instructions=(
        "You are performing the SYNTHESIS pass. Reconcile all prior passes, resolve "
        "contradictions explicitly and downgrade confidence where they disagree. "
        f"{_STRUCTURE_RULE}"
    ),
)

THREE_PASS_GENERATION_LENSES: tuple[LensDefinition, ...] = (
    CORE_DIAGNOSTIC,
    RISK_AUDIT_3,
    SYNTHESIS_GEN,
)
FIVE_PASS_GENERATION_LENSES: tuple[LensDefinition, ...] = (
    CORE_DIAGNOSTIC,
    RISK_AUDIT_5,
    VALUE_GEN,
    AUDIT_GEN,
    SYNTHESIS_GEN,
)


def validation_lenses(mode: EnsembleMode) -> tuple[LensDefinition, ...]:
    """Validation lenses for a mode, in execution order (empty when off)."""
    if mode is EnsembleMode.THREE_PASS:
        return THREE_PASS_VALIDATION_LENSES
    if mode is EnsembleMode.FIVE_PASS:
        return FIVE_PASS_VALIDATION_LENSES
    return ()


def generation_lenses(mode: EnsembleMode) -> tuple[LensDefinition, ...]:
    """Generation lenses for a mode, in execution order (empty when off)."""
    if mode is EnsembleMode.THREE_PASS:
        return THREE_PASS_GENERATION_LENSES
    if mode is EnsembleMode.FIVE_PASS:
        return FIVE_PASS_GENERATION_LENSES
    return ()

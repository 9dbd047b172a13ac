"""
Ensemble configuration -- mode, thresholds, and the process-wide registry.

Validation is OFF by default (kill switch). Two ways to configure a run:

  1. Pass an explicit EnsembleConfig to the runner (preferred -- run-scoped,
     immutable, safe if runs are ever parallelized).
  2. Toggle the process-wide ModeRegistry. Runners snapshot it once at the
     start of a run and never re-read it mid-run.

Environment variables (read by config_from_env):
  PACKET_VALIDATION_MODE                   off | 3pass | 5pass
  PACKET_VALIDATION_DEV_PANEL              true/1/yes enables QA logging
  PACKET_VALIDATION_FALLBACK               false disables safe fallback
  PACKET_VALIDATION_CONSENSUS_THRESHOLD    float, default 0.7
  PACKET_VALIDATION_VALUE_VARIANCE_PERCENT float, default 30
  PACKET_VALIDATION_QA_DIR                 directory for QA artifacts
"""

import logging
import os
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

ENV_PREFIX = "PACKET_VALIDATION_"
TRUTHY = ("true", "1", "yes")


class EnsembleMode(str, Enum):
    """How many analytical lenses execute per run."""

    OFF = "off"
    THREE_PASS = "3pass"
    FIVE_PASS = "5pass"

    @property
    def pass_count(self) -> int:
        if self is EnsembleMode.THREE_PASS:
            return 3
        if self is EnsembleMode.FIVE_PASS:
            return 5
        return 1


@dataclass(frozen=True)
class MaterialDisagreementThresholds:
    """Thresholds that decide when variant disagreement is material."""

    value_variance_percent: float = 30.0
    roi_flip_detection: bool = True
    diagnosis_code_mismatch: bool = True


@dataclass(frozen=True)
class EnsembleConfig:
    """Immutable configuration for one validation or ensemble run."""

    mode: EnsembleMode = EnsembleMode.OFF
    enable_dev_panel: bool = False
    fallback_on_error: bool = True
    consensus_threshold: float = 0.7
    material_disagreement_thresholds: MaterialDisagreementThresholds = field(
        default_factory=MaterialDisagreementThresholds
    )
    qa_artifacts_dir: Path | None = None

    def __post_init__(self):
        # Unknown modes raise ValueError instead of degrading to off
        object.__setattr__(self, "mode", EnsembleMode(self.mode))
        if isinstance(self.material_disagreement_thresholds, dict):
            object.__setattr__(
                self,
                "material_disagreement_thresholds",
                MaterialDisagreementThresholds(**self.material_disagreement_thresholds),
            )
        if self.qa_artifacts_dir is not None and not isinstance(self.qa_artifacts_dir, Path):
            object.__setattr__(self, "qa_artifacts_dir", Path(self.qa_artifacts_dir))

    @property
    def is_active(self) -> bool:
        return self.mode is not EnsembleMode.OFF

    @property
    def pass_count(self) -> int:
        return self.mode.pass_count

    def with_updates(self, **updates: Any) -> "EnsembleConfig":
        """Return a copy with top-level fields shallow-merged in."""
        return replace(self, **updates)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        data["qa_artifacts_dir"] = str(self.qa_artifacts_dir) if self.qa_artifacts_dir else None
        return data


DEFAULT_CONFIG = EnsembleConfig()


# =============================================================================
# PROCESS-WIDE REGISTRY
# =============================================================================


class ModeRegistry:
    """Holds the current process-wide EnsembleConfig.

    Usage:
        registry = ModeRegistry()
        registry.set(mode="3pass")
        registry.is_active()   # True
        registry.reset()       # back to OFF

    No lock: mutation is synchronous and a run reads the config exactly once.
    """

    def __init__(self, defaults: EnsembleConfig = DEFAULT_CONFIG):
        self._defaults = defaults
        self._config = defaults

    def get(self) -> EnsembleConfig:
        # Frozen value -- callers can never hold a copy that changes under them
        return self._config

    def set(self, **updates: Any) -> EnsembleConfig:
        self._config = self._config.with_updates(**updates)
        if self._config.enable_dev_panel:
            logger.info(f"[ModeRegistry] Configuration updated: {self._config.to_dict()}")
        return self._config

    def reset(self) -> EnsembleConfig:
        self._config = self._defaults
        logger.info("[ModeRegistry] Configuration reset to defaults (validation OFF)")
        return self._config

    def is_active(self) -> bool:
        return self._config.is_active

    def pass_count(self) -> int:
        return self._config.pass_count


registry = ModeRegistry()


def get_config() -> EnsembleConfig:
    return registry.get()


def set_config(**updates: Any) -> EnsembleConfig:
    return registry.set(**updates)


def reset_config() -> EnsembleConfig:
    return registry.reset()


def is_active() -> bool:
    return registry.is_active()


def get_pass_count() -> int:
    return registry.pass_count()


# =============================================================================
# ENVIRONMENT
# =============================================================================


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(ENV_PREFIX + name, "").strip().lower()
    if not raw:
        return default
    return raw in TRUTHY


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(ENV_PREFIX + name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"[ModeRegistry] Ignoring non-numeric {ENV_PREFIX}{name}={raw!r}")
        return default


def config_from_env(base: EnsembleConfig = DEFAULT_CONFIG) -> EnsembleConfig:
    """Build an EnsembleConfig from PACKET_VALIDATION_* environment variables."""
    mode = os.environ.get(ENV_PREFIX + "MODE", "").strip().lower() or base.mode
    qa_dir = os.environ.get(ENV_PREFIX + "QA_DIR", "").strip()
    thresholds = replace(
        base.material_disagreement_thresholds,
        value_variance_percent=_env_float(
            "VALUE_VARIANCE_PERCENT",
            base.material_disagreement_thresholds.value_variance_percent,
        ),
    )
    return base.with_updates(
        mode=mode,
        enable_dev_panel=_env_flag("DEV_PANEL", base.enable_dev_panel),
        fallback_on_error=_env_flag("FALLBACK", base.fallback_on_error),
        consensus_threshold=_env_float("CONSENSUS_THRESHOLD", base.consensus_threshold),
        material_disagreement_thresholds=thresholds,
        qa_artifacts_dir=Path(qa_dir) if qa_dir else base.qa_artifacts_dir,
    )

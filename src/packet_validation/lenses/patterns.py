"""
Narrative extractors -- every regex the lenses and the field comparator use.

All extraction is match-based: a section that does not contain a pattern
yields None / empty, and the dependent check is skipped. Nothing here raises
on malformed narrative.
"""

import re

RUNWAY_PATTERN = re.compile(r"runway is approximately (\d+)", re.IGNORECASE)
MONTH_PATTERN = re.compile(r"\bMonth (\d+)", re.IGNORECASE)
OPTION_REF_PATTERN = re.compile(r"\bOption \d+\b", re.IGNORECASE)
SIGNAL_COUNT_PATTERN = re.compile(r"(\d+) warning signals", re.IGNORECASE)
WARNING_SIGNALS_PATTERN = re.compile(r"warning signals", re.IGNORECASE)
PERCENT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)%")
INVESTMENT_PATTERN = re.compile(r"Investment Required.*?\$[\d.]+[MK]?", re.IGNORECASE)
PENDING_ITEM_PATTERN = re.compile(r"\[ \]")
RECEIVED_ITEM_PATTERN = re.compile(r"\b(?:Good|Fair|Poor)\b", re.IGNORECASE)
DIAGNOSIS_PATTERN = re.compile(r"facing an? \*\*(.+?)\*\* situation", re.IGNORECASE)

SCENARIO_CASES = ("Base", "Upside", "Downside")
_SCENARIO_PATTERNS = {
    case: re.compile(rf"{case} Case[\s\S]*?Probability:\s*(\d+)%", re.IGNORECASE)
    for case in SCENARIO_CASES
}

EVIDENCE_TAGS = ("[OBSERVED]", "[INFERRED]", "[ASSUMED]", "[COMPUTED]")


def first_int(pattern: re.Pattern, text: str | None) -> int | None:
    if not text:
        return None
    match = pattern.search(text)
    return int(match.group(1)) if match else None


def contains_any(text: str | None, keywords: tuple[str, ...]) -> bool:
    """Case-insensitive substring test."""
    lowered = (text or "").lower()
    return any(k in lowered for k in keywords)


def matching_keywords(text: str | None, keywords: tuple[str, ...]) -> list[str]:
    lowered = (text or "").lower()
    return [k for k in keywords if k in lowered]


def runway_months(brief: str | None) -> int | None:
    return first_int(RUNWAY_PATTERN, brief)


def first_month_reference(scenarios: str | None) -> int | None:
    return first_int(MONTH_PATTERN, scenarios)


def signal_count(brief: str | None) -> int | None:
    return first_int(SIGNAL_COUNT_PATTERN, brief)


def scenario_probability(scenarios: str | None, case: str) -> int | None:
    """Probability (percent) stated under "<case> Case", e.g. case="Downside"."""
    return first_int(_SCENARIO_PATTERNS[case], scenarios)


def option_refs(text: str | None) -> list[str]:
    """Distinct option identifiers, normalized to lowercase, in order of appearance."""
    seen: dict[str, None] = {}
    for match in OPTION_REF_PATTERN.finditer(text or ""):
        seen.setdefault(" ".join(match.group(0).lower().split()), None)
    return list(seen)


def evidence_register_counts(register: str | None) -> tuple[int, int]:
    """(received, pending) item counts from an evidence register.

    Received items carry a quality grade (Good/Fair/Poor); pending items are
    unchecked "[ ]" checkboxes.
    """
    text = register or ""
    received = len(RECEIVED_ITEM_PATTERN.findall(text))
    pending = len(PENDING_ITEM_PATTERN.findall(text))
    return received, pending


def has_evidence_tags(text: str | None) -> bool:
    return any(tag in (text or "") for tag in EVIDENCE_TAGS)


def diagnosis_label(brief: str | None) -> str | None:
    match = DIAGNOSIS_PATTERN.search(brief or "")
    return match.group(1).strip() if match else None

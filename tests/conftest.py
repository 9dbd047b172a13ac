"""Shared fixtures -- a well-formed Decision Packet and helpers to perturb it."""

import pytest

from packet_validation.config import reset_config
from packet_validation.report import DiagnosticReport, load_report

SAMPLE_REPORT = {
    "id": "report_001",
    "generatedAt": "2026-01-15T10:00:00Z",
    "outputMode": "full",
    "integrity": {
        "completeness": 75,
        "evidenceQuality": 80,
        "confidence": 78,
        "missingData": ["AR aging detail", "Customer concentration data"],
    },
    "sections": {
        "executiveBrief": (
            "Your business is facing a **Cash Constrained** situation. "
            "Cash runway is approximately 6 months [OBSERVED]. "
            "We identified 3 warning signals, including customer concentration risk. "
            "Two data requests remain pending."
        ),
        "valueLedger": (
            "| Asset | Book Value | FMV | Recovery |\n"
            "| Receivables | $1.2M | $1.0M | 85% |\n"
            "| Inventory | $0.8M | $0.5M | 60% |\n"
            "Secured debt: $1.5M term loan."
        ),
        "scenarios": (
            "### Base Case\nProbability: 40%\nStabilize by Month 6.\n\n"
            "### Upside Case\nProbability: 25%\nNew contract lands in Month 9.\n\n"
            "### Downside Case\nProbability: 35%\nCash exhausted by Month 5."
        ),
        "options": (
            "**Option 1: Operational Turnaround** - Investment Required: $250K. "
            "Expected recovery value 1.4x with 18-month payback. "
            "Addresses customer concentration risk.\n"
            "**Option 2: Refinance** - Negotiate covenants with the lender on existing debt.\n"
            "**Option 3: Strategic Sale** - Recovery value 70-85% of book.\n"
            "**Option 4: Orderly Wind-down**"
        ),
        "executionPlan": (
            "Days 1-30: Launch Option 1 immediately; monitor warning signals weekly.\n"
            "Days 31-60: Open lender talks under Option 2.\n"
            "Days 61-90: Pursue the growth opportunity in core accounts."
        ),
        "evidenceRegister": (
            "| Item | Status | Quality |\n"
            "| Bank statements | Received | Good |\n"
            "| AR aging | Received | Fair |\n"
            "| Customer contracts | [ ] Pending | - |"
        ),
    },
    "inputSummary": "Regional distributor, 45 employees",
}


def with_sections(report: DiagnosticReport, **sections) -> DiagnosticReport:
    """Copy of report with the given sections (snake_case names) replaced."""
    return report.model_copy(update={"sections": report.sections.model_copy(update=sections)})


def with_integrity(report: DiagnosticReport, **integrity) -> DiagnosticReport:
    return report.with_integrity(report.integrity.model_copy(update=integrity))


@pytest.fixture(autouse=True)
def _reset_registry():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def sample_report_data():
    return SAMPLE_REPORT


@pytest.fixture
def sample_report():
    return load_report(SAMPLE_REPORT)


@pytest.fixture
def empty_report():
    return DiagnosticReport(id="empty")

"""Eval fixtures -- a small corpus of packets from clean to degenerate."""

import pytest

from packet_validation.config import reset_config
from packet_validation.report import DiagnosticReport, load_report

CLEAN_PACKET = {
    "id": "eval_clean",
    "integrity": {
        "completeness": 85,
        "evidenceQuality": 75,
        "confidence": 80,
        "missingData": ["Customer concentration data"],
    },
    "sections": {
        "executiveBrief": (
            "Your business is facing a **Margin Compression** situation. "
            "Cash runway is approximately 9 months [OBSERVED]. "
            "We identified 2 warning signals tied to pricing risk."
        ),
        "valueLedger": "| Asset | Book Value | FMV |\n| Equipment | $2.0M | $1.4M (70%) |",
        "scenarios": (
            "### Base Case\nProbability: 50%\nMargins recover by Month 9.\n\n"
            "### Upside Case\nProbability: 20%\n\n"
            "### Downside Case\nProbability: 30%"
        ),
        "options": (
            "**Option 1: Reprice** - recovery of 4 margin points, pricing risk managed.\n"
            "**Option 2: Cost Program** - value from procurement."
        ),
        "executionPlan": "Days 1-30: Start Option 1; track warning signals.\nDays 31-90: Option 2.",
        "evidenceRegister": "| P&L | Received | Good |\n| Pricing study | Received | Fair |",
    },
}

CONFLICTED_PACKET = {
    "id": "eval_conflicted",
    "integrity": {
        "completeness": 40,
        "evidenceQuality": 30,
        "confidence": 90,
        "missingData": ["P&L statements", "AR aging", "Org chart", "Capex plan"],
    },
    "sections": {
        "executiveBrief": "Cash runway is approximately 3 months. We identified 5 warning signals.",
        "valueLedger": "Inventory and receivables.",
        "scenarios": "### Downside Case\nCash gone by Month 14.",
        "options": "**Option 1: Sell**",
        "executionPlan": "Execute Option 3 now, then Option 4.",
        "evidenceRegister": "| Bank statements | [ ] | - |\n| Contracts | [ ] | - |",
    },
}


@pytest.fixture(autouse=True)
def _reset_registry():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def clean_packet():
    return load_report(CLEAN_PACKET)


@pytest.fixture
def conflicted_packet():
    return load_report(CONFLICTED_PACKET)


@pytest.fixture
def packet_corpus(clean_packet, conflicted_packet):
    return [clean_packet, conflicted_packet, DiagnosticReport(id="eval_empty")]

"""
Follow-up question generator.

Stays silent when the packet is already trustworthy (evidence score >= 0.6
and no material disagreement). Otherwise maps missing-data labels and the
first few warnings to canonical questions, deduplicated and capped.
"""

from collections.abc import Sequence

from ..lenses import LensResult, Severity

EVIDENCE_FLOOR = 0.6
MAX_QUESTIONS = 7
WARNINGS_CONSIDERED = 3

DATA_GAP_QUESTIONS: dict[str, str] = {
    "financials.revenue": "What is the current annual revenue and monthly trend?",
    "financials.costs": "What is the current cost structure breakdown (fixed vs variable)?",
    "financials.cash": "What is the current cash position and burn rate?",
    "financials.debt": "What are the outstanding debt obligations and covenants?",
    "financials.receivables": "What is the current A/R aging schedule and collection trends?",
    "financials.capex": "What are the near-term capital expenditure requirements?",
    "operational.headcount": "What is the current headcount and organizational structure?",
    "operational.systems": "What are the critical operational systems and their condition?",
    "market.competition": "Who are the primary competitors and what is the competitive position?",
    "market.customers": "What is the customer concentration and churn rate?",
    "market.pricing": "What is the pricing power and margin trajectory?",
    "governance.board": "What is the board composition and decision-making process?",
    "governance.management": "What is management tenure and succession readiness?",
}

# (substrings in a missing-data label, question key) -- first match per rule wins
MISSING_DATA_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("p&l", "revenue"), "financials.revenue"),
    (("customer", "concentration"), "market.customers"),
    (("aging", "receivable"), "financials.receivables"),
    (("org", "management"), "governance.management"),
    (("capex", "capital"), "financials.capex"),
)

# Report section a warning points at -> question
WARNING_SECTION_QUESTIONS: tuple[tuple[str, str], ...] = (
    ("valueLedger", "Can you provide supporting documentation for key valuation assumptions?"),
    ("scenarios", "What methodology was used for scenario probability estimates?"),
)


def generate_follow_up_questions(
    missing_data: Sequence[str],
    results: Sequence[LensResult],
    evidence_score: float,
    material_disagreement: bool,
) -> list[str]:
    if evidence_score >= EVIDENCE_FLOOR and not material_disagreement:
        return []

    questions: list[str] = []

    for label in missing_data:
        normalized = label.lower()
        for needles, key in MISSING_DATA_RULES:
            if any(n in normalized for n in needles):
                questions.append(DATA_GAP_QUESTIONS[key])

    warnings = [f for r in results for f in r.findings if f.severity is Severity.WARNING]
    for finding in warnings[:WARNINGS_CONSIDERED]:
        for section, question in WARNING_SECTION_QUESTIONS:
            if section in finding.field:
                questions.append(question)

    return list(dict.fromkeys(questions))[:MAX_QUESTIONS]

"""
Evaluation suite -- behavioral evals for the validation engine.

Run evals: pytest evals/ -v

Each task exercises a whole path (validation or ensemble) against a
property that must hold for every packet, graded with CodeGrader.
"""

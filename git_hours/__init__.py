"""Estimate time spent on a git repository from its commit history.

Package layout:
- git_hours.history: git log retrieval, parsing and commit normalization
- git_hours.estimation: author grouping and the session-gap hour estimator
- git_hours.reporting: report assembly, JSON rendering and Excel export
"""

__version__ = "0.1.0"

__all__ = [
    "history",
    "estimation",
    "reporting",
]

"""
Scoring package: insight metrics computed over a repository bundle.
"""

from .metrics import RepoInsights, compute_insights

__all__ = ["RepoInsights", "compute_insights"]

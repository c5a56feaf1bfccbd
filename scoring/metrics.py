"""
Repository insight metrics.
Simple arithmetic over an already-fetched RepoDataBundle: contributor ranking, merge cadence,
issue resolution time and a 0-100 health score.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from normalize.models import Contributor, ItemState, RepoDataBundle

TOP_CONTRIBUTORS = 5

# health score components and their caps
PR_SCORE_MAX = 30.0
PR_FREQUENCY_CEILING_DAYS = 10.0
ISSUE_SCORE_MAX = 30.0
ISSUE_RESOLUTION_CEILING_DAYS = 30.0
CONTRIBUTOR_SCORE_MAX = 20.0
CONTRIBUTOR_SATURATION = 10
STAR_SCORE_MAX = 20.0

SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class RepoInsights:
    top_contributors: Tuple[Contributor, ...] = ()
    pr_frequency_days: float = 0.0
    avg_resolution_days: float = 0.0
    health_score: int = 0
    open_issues: int = 0
    closed_issues: int = 0
    open_prs: int = 0
    closed_prs: int = 0
    components: dict = field(default_factory=dict)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a GitHub ISO-8601 timestamp ("2011-01-26T19:01:12Z"); returns None when missing or malformed."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _days_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / SECONDS_PER_DAY


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def merge_frequency_days(merged_at: List[str]) -> float:
    """Average days between consecutive merges; 0.0 with fewer than two merges."""
    stamps = sorted(ts for ts in (parse_timestamp(m) for m in merged_at) if ts is not None)
    if len(stamps) < 2:
        return 0.0
    total = sum(_days_between(a, b) for a, b in zip(stamps, stamps[1:]))
    return total / (len(stamps) - 1)


def average_resolution_days(spans: List[Tuple[str, str]]) -> float:
    """Average days from creation to close over (created_at, closed_at) pairs; 0.0 when empty."""
    days = []
    for created_at, closed_at in spans:
        created, closed = parse_timestamp(created_at), parse_timestamp(closed_at)
        if created and closed:
            days.append(_days_between(created, closed))
    return sum(days) / len(days) if days else 0.0


def pr_score(frequency_days: float) -> float:
    if frequency_days == 0:
        return 0.0
    return _clamp(PR_SCORE_MAX - (frequency_days / PR_FREQUENCY_CEILING_DAYS * PR_SCORE_MAX), 0.0, PR_SCORE_MAX)


def issue_score(resolution_days: float) -> float:
    if resolution_days == 0:
        return 0.0
    return _clamp(ISSUE_SCORE_MAX - (resolution_days / ISSUE_RESOLUTION_CEILING_DAYS * ISSUE_SCORE_MAX), 0.0, ISSUE_SCORE_MAX)


def contributor_score(count: int) -> float:
    return min(CONTRIBUTOR_SCORE_MAX, count / CONTRIBUTOR_SATURATION * CONTRIBUTOR_SCORE_MAX)


def star_score(stars: int) -> float:
    return min(STAR_SCORE_MAX, math.log10(max(stars, 0) + 1) * 10)


def compute_insights(bundle: RepoDataBundle) -> RepoInsights:
    """Compute RepoInsights for a bundle. Pull requests listed by the issues endpoint are not counted as issues."""
    contributors = bundle.contributors
    issues = [i for i in bundle.issues if not i.is_pull_request]
    pulls = bundle.pull_requests

    top = tuple(sorted(contributors, key=lambda c: c.contributions, reverse=True)[:TOP_CONTRIBUTORS])
    closed_issues = [i for i in issues if i.closed_at]

    frequency = merge_frequency_days([p.merged_at for p in pulls if p.merged_at])
    resolution = average_resolution_days([(i.created_at, i.closed_at) for i in closed_issues])

    components = {
        'pull_requests': pr_score(frequency),
        'issues': issue_score(resolution),
        'contributors': contributor_score(len(contributors)),
        'stars': star_score(bundle.stats.stargazers_count),
    }

    return RepoInsights(
        top_contributors=top,
        pr_frequency_days=frequency,
        avg_resolution_days=resolution,
        health_score=int(math.floor(sum(components.values()) + 0.5)),
        open_issues=sum(1 for i in issues if i.state == ItemState.OPEN),
        closed_issues=len(closed_issues),
        open_prs=sum(1 for p in pulls if p.state == ItemState.OPEN),
        closed_prs=sum(1 for p in pulls if p.state == ItemState.CLOSED),
        components=components,
    )

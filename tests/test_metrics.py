import math
import unittest

from normalize.models import Available, RepoDataBundle, Unavailable
from normalize.util import normalize_contributors, normalize_issues, normalize_pull_requests, normalize_repository_stats
from ingest.errors import NoResponseError
from scoring.metrics import (
    average_resolution_days,
    compute_insights,
    contributor_score,
    issue_score,
    merge_frequency_days,
    parse_timestamp,
    pr_score,
    star_score,
)
from payloads import contributor_payload, issue_payload, pr_payload, repo_payload


def _bundle(stars=0, contributors=(), issues=(), pulls=(), issues_ok=True):
    return RepoDataBundle(
        owner='octocat',
        repo='Hello-World',
        stats=normalize_repository_stats(repo_payload(stargazers_count=stars)),
        contributors=tuple(normalize_contributors(list(contributors))),
        issues_result=Available(tuple(normalize_issues(list(issues)))) if issues_ok else Unavailable(NoResponseError()),
        pull_requests_result=Available(tuple(normalize_pull_requests(list(pulls)))),
    )


class TestMetricHelpers(unittest.TestCase):
    def test_parse_timestamp(self):
        self.assertIsNotNone(parse_timestamp('2024-01-01T00:00:00Z'))
        self.assertIsNotNone(parse_timestamp('2024-01-01'))
        self.assertIsNone(parse_timestamp(''))
        self.assertIsNone(parse_timestamp('yesterday'))

    def test_merge_frequency(self):
        self.assertEqual(merge_frequency_days([]), 0.0)
        self.assertEqual(merge_frequency_days(['2024-01-01T00:00:00Z']), 0.0)
        merged = ['2024-01-07T00:00:00Z', '2024-01-01T00:00:00Z', '2024-01-03T00:00:00Z']
        self.assertAlmostEqual(merge_frequency_days(merged), 3.0)

    def test_average_resolution(self):
        spans = [('2024-01-01T00:00:00Z', '2024-01-03T00:00:00Z'), ('2024-01-01T00:00:00Z', '2024-01-05T00:00:00Z')]
        self.assertAlmostEqual(average_resolution_days(spans), 3.0)
        self.assertEqual(average_resolution_days([]), 0.0)

    def test_component_scores(self):
        self.assertEqual(pr_score(0), 0.0)
        self.assertAlmostEqual(pr_score(5), 15.0)
        self.assertEqual(pr_score(20), 0.0)
        self.assertEqual(issue_score(0), 0.0)
        self.assertAlmostEqual(issue_score(15), 15.0)
        self.assertEqual(contributor_score(5), 10.0)
        self.assertEqual(contributor_score(50), 20.0)
        self.assertEqual(star_score(0), 0.0)
        self.assertAlmostEqual(star_score(99), 20.0)
        self.assertAlmostEqual(star_score(9), 10.0)


class TestComputeInsights(unittest.TestCase):
    def test_empty_bundle(self):
        insights = compute_insights(_bundle())
        self.assertEqual(insights.top_contributors, ())
        self.assertEqual(insights.health_score, 0)
        self.assertEqual(insights.pr_frequency_days, 0.0)

    def test_mixed_bundle(self):
        contributors = [contributor_payload(f'user{i}', contributions=i, id=i) for i in range(1, 8)]
        issues = [
            issue_payload(1),
            issue_payload(2, state='closed', created_at='2024-01-01T00:00:00Z', closed_at='2024-01-16T00:00:00Z'),
            issue_payload(3, state='closed', closed_at='2024-01-02T00:00:00Z', pull_request=True),
        ]
        pulls = [
            pr_payload(10, merged_at='2024-01-01T00:00:00Z', closed_at='2024-01-01T00:00:00Z'),
            pr_payload(11, merged_at='2024-01-06T00:00:00Z', closed_at='2024-01-06T00:00:00Z'),
            pr_payload(12, state='open'),
        ]
        insights = compute_insights(_bundle(stars=9, contributors=contributors, issues=issues, pulls=pulls))

        self.assertEqual([c.login for c in insights.top_contributors], ['user7', 'user6', 'user5', 'user4', 'user3'])
        self.assertAlmostEqual(insights.pr_frequency_days, 5.0)
        self.assertAlmostEqual(insights.avg_resolution_days, 15.0)
        self.assertEqual(insights.open_issues, 1)
        self.assertEqual(insights.closed_issues, 1)
        self.assertEqual(insights.open_prs, 1)
        self.assertEqual(insights.closed_prs, 2)
        # 15 (prs) + 15 (issues) + 14 (7 contributors) + 10 (9 stars)
        self.assertEqual(insights.health_score, 54)
        self.assertTrue(math.isclose(sum(insights.components.values()), 54.0))

    def test_unavailable_issues_count_as_none(self):
        insights = compute_insights(_bundle(stars=0, issues_ok=False))
        self.assertEqual(insights.open_issues, 0)
        self.assertEqual(insights.avg_resolution_days, 0.0)


if __name__ == '__main__':
    unittest.main()

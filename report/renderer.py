"""
Report renderer: generate plain-text/Markdown/CSV/JSON/HTML summaries of a repository bundle and its insights.
HTML is rendered with Jinja2 using report/templates/report.html.j2.
"""

from typing import Optional, Dict, Any
from dataclasses import asdict
from enum import Enum
import os
import json
import io
import csv

from jinja2 import Environment, FileSystemLoader, select_autoescape

from normalize.models import RepoDataBundle, ResourceResult
from scoring.metrics import RepoInsights, compute_insights

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), 'templates')

CSV_HEADER = [
    'full_name',
    'stars',
    'forks',
    'watchers',
    'open_issues',
    'contributors',
    'issues',
    'pull_requests',
    'health_score',
    'pr_frequency_days',
    'avg_resolution_days',
]


def _resource_label(result: ResourceResult) -> str:
    if result.available:
        return str(len(result.items))
    return f"unavailable ({getattr(result.reason, 'message', result.reason)})"


def render_text(bundle: RepoDataBundle, insights: RepoInsights) -> str:
    """Render a simple plain-text summary."""
    stats = bundle.stats
    lines = [
        f"Repository: {stats.full_name or bundle.owner + '/' + bundle.repo}",
        f"Description: {stats.description}",
        f"Language: {stats.language or 'n/a'}",
        f"Stars: {stats.stargazers_count}",
        f"Forks: {stats.forks_count}",
        f"Watchers: {stats.watchers_count}",
        f"Contributors: {len(bundle.contributors)}",
        f"Issues: {_resource_label(bundle.issues_result)}",
        f"Pull Requests: {_resource_label(bundle.pull_requests_result)}",
        f"Health Score: {insights.health_score}/100",
    ]
    return "\n".join(lines)


def render_markdown(bundle: RepoDataBundle, insights: RepoInsights) -> str:
    """Render a Markdown section for a repository."""
    stats = bundle.stats
    md = []
    md.append(f"# {stats.full_name or bundle.owner + '/' + bundle.repo}\n")
    if stats.description:
        md.append(f"> {stats.description}\n")
    md.append(f"- Stars: **{stats.stargazers_count}**")
    md.append(f"- Forks: **{stats.forks_count}**")
    md.append(f"- Open Issues: **{stats.open_issues_count}**")
    md.append(f"- Language: **{stats.language or 'n/a'}**")
    md.append(f"- Health Score: **{insights.health_score}/100**")
    md.append(f"- Merge Cadence: **{insights.pr_frequency_days:.1f} days**")
    md.append(f"- Issue Resolution: **{insights.avg_resolution_days:.1f} days**")
    md.append("")
    md.append("## Top Contributors\n")
    if insights.top_contributors:
        for c in insights.top_contributors:
            md.append(f"1. [{c.login}]({c.html_url}) ({c.contributions} contributions)")
    else:
        md.append("_No contributors found._")
    if bundle.degraded:
        md.append("")
        md.append("_Some data could not be fetched:_")
        md.append(f"- Issues: {_resource_label(bundle.issues_result)}")
        md.append(f"- Pull Requests: {_resource_label(bundle.pull_requests_result)}")
    return "\n".join(md)


def render_csv(bundle: RepoDataBundle, insights: RepoInsights) -> str:
    """Render a single-line CSV summary with a header."""
    stats = bundle.stats
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADER)
    writer.writerow([
        stats.full_name,
        stats.stargazers_count,
        stats.forks_count,
        stats.watchers_count,
        stats.open_issues_count,
        len(bundle.contributors),
        len(bundle.issues) if bundle.issues_result.available else '',
        len(bundle.pull_requests) if bundle.pull_requests_result.available else '',
        insights.health_score,
        f"{insights.pr_frequency_days:.1f}",
        f"{insights.avg_resolution_days:.1f}",
    ])
    return output.getvalue()


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, BaseException):
        return getattr(value, 'message', str(value))
    return str(value)


def _resource_dict(result: ResourceResult) -> Dict[str, Any]:
    if result.available:
        return {'available': True, 'items': [asdict(i) for i in result.items]}
    return {'available': False, 'reason': _jsonable(result.reason), 'items': []}


def bundle_to_dict(bundle: RepoDataBundle, insights: Optional[RepoInsights] = None) -> Dict[str, Any]:
    data = {
        'owner': bundle.owner,
        'repo': bundle.repo,
        'stats': asdict(bundle.stats),
        'contributors': [asdict(c) for c in bundle.contributors],
        'issues': _resource_dict(bundle.issues_result),
        'pull_requests': _resource_dict(bundle.pull_requests_result),
        'degraded': bundle.degraded,
    }
    if insights is not None:
        data['insights'] = asdict(insights)
    return data


def render_json(bundle: RepoDataBundle, insights: Optional[RepoInsights] = None) -> str:
    """Export the bundle (and insights) as JSON."""
    return json.dumps(bundle_to_dict(bundle, insights), indent=2, default=_jsonable)


def render_html(bundle: RepoDataBundle, insights: RepoInsights, generated_at: Optional[str] = None) -> str:
    env = Environment(loader=FileSystemLoader(TEMPLATES_DIR), autoescape=select_autoescape(['html', 'xml', 'j2']))
    tmpl = env.get_template('report.html.j2')
    context = {
        'bundle': bundle,
        'stats': bundle.stats,
        'insights': insights,
        'issues_label': _resource_label(bundle.issues_result),
        'pull_requests_label': _resource_label(bundle.pull_requests_result),
        'generated_at': generated_at,
    }
    return tmpl.render(**context)


FORMAT_ALIASES = {
    'markdown': 'md',
    'htm': 'html',
    'js': 'json',
    'txt': 'text',
}


def canonical_format(fmt: Optional[str]) -> str:
    """Map a requested output format (or alias) to text, md, csv, html or json."""
    fmt_l = (fmt or 'text').strip().lower()
    fmt_l = FORMAT_ALIASES.get(fmt_l, fmt_l)
    return fmt_l if fmt_l in ('md', 'csv', 'html', 'json') else 'text'


def render(
    bundle: RepoDataBundle,
    insights: Optional[RepoInsights] = None,
    fmt: str = 'text',
    generated_at: Optional[str] = None,
) -> str:
    """Main render function. Insights are computed from the bundle when not supplied."""
    if insights is None:
        insights = compute_insights(bundle)
    fmt_l = canonical_format(fmt)
    if fmt_l == 'md':
        return render_markdown(bundle, insights)
    if fmt_l == 'csv':
        return render_csv(bundle, insights)
    if fmt_l == 'html':
        return render_html(bundle, insights, generated_at)
    if fmt_l == 'json':
        return render_json(bundle, insights)
    return render_text(bundle, insights)

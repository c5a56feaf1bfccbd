"""
CLI entry point for repo_story. Wires the pipeline: ingest -> score -> report
"""

import argparse
import logging
import os
import sys
import webbrowser
from datetime import datetime, timezone
from typing import Optional, Sequence, Tuple

from ingest.aggregator import RepoDataAggregator
from ingest.config import ClientConfig, load_config
from ingest.errors import ConfigError, InvalidIdentifierError, RepoDataError
from ingest.github import GitHubClient
from ingest.identifiers import normalize_identifiers, parse_repository_reference
from report.renderer import canonical_format, render
from scoring.metrics import compute_insights

EXIT_OK = 0
EXIT_FETCH_ERROR = 1
EXIT_USAGE_ERROR = 2

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def _resolve_config(args) -> ClientConfig:
    """Resolve client configuration. CLI flags take precedence over the config file, then the environment."""
    config = load_config(args.config or None)
    return config.with_overrides(token=args.token or None, base_url=args.base_url or None, timeout=args.timeout)


def _resolve_repository(args) -> Tuple[str, str]:
    """Return the (owner, repo) pair from the positional reference or --owner/--repo."""
    if args.repository:
        return parse_repository_reference(args.repository)
    return normalize_identifiers(args.owner or '', args.repo or '')


def run_pipeline(args, config: ClientConfig):
    """Execute ingest -> score -> render and return (fmt, rendered, bundle)."""
    owner, repo = _resolve_repository(args)
    with GitHubClient(config) as client:
        bundle = RepoDataAggregator(client).get_repo_data(owner, repo)
        rate = client.last_rate_limit
        if rate is not None and rate.remaining is not None:
            logger.info("Rate budget after fetch: %s/%s remaining", rate.remaining, rate.limit)
    insights = compute_insights(bundle)
    fmt = canonical_format(args.output)
    rendered = render(bundle, insights, fmt=fmt, generated_at=datetime.now(timezone.utc).isoformat())
    return fmt, rendered, bundle


def _open_file_in_browser(path: str):
    """Open a file URL in the system default web browser."""
    webbrowser.open("file://" + os.path.abspath(path))


def write_output(fmt: str, rendered: str, args, bundle=None):
    """Write output to a file or stdout and optionally open HTML in the browser.

    HTML always goes to a file; other formats go to stdout unless --out-file is given.
    """
    if fmt != "html" and not args.out_file.strip():
        print(rendered)
        return None
    ext_map = {"html": "html", "md": "md", "csv": "csv", "json": "json"}
    ext = ext_map.get(fmt, "txt")
    name = f"{bundle.owner}_{bundle.repo}" if bundle is not None else "repo"
    out_path = args.out_file.strip() or f"repo_story_{name}_{datetime.now(timezone.utc).strftime('%Y%m%dT%H%M%SZ')}.{ext}"
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(out_path, "w", encoding="utf-8", newline="") as f:
        f.write(rendered)
    print(f"Wrote report to {out_path}")
    if args.open and fmt == "html":
        try:
            _open_file_in_browser(out_path)
        except webbrowser.Error:
            print("Failed to open browser automatically; file saved at", out_path)
    return out_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="repo-story", description="Summarize a GitHub repository")
    parser.add_argument("repository", nargs="?", default="", help="Repository as OWNER/REPO or a GitHub URL")
    parser.add_argument("--owner", type=str, default="", help="Repository owner (alternative to the positional argument)")
    parser.add_argument("--repo", type=str, default="", help="Repository name (alternative to the positional argument)")
    parser.add_argument("--token", type=str, default="", help="GitHub API token (or set GITHUB_TOKEN env var)")
    parser.add_argument("--config", type=str, default="", help="Path to a YAML config file (token, base_url, timeout, user_agent)")
    parser.add_argument("--base-url", type=str, default="", help="GitHub API base URL (overrides REPO_STORY_BASE_URL env)")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds (overrides REPO_STORY_TIMEOUT env)")
    parser.add_argument("--output", type=str, default="text", help="Output format (text, md, csv, json, html; aliases markdown, htm, js)")
    parser.add_argument("--out-file", type=str, default="", help="Output file path. HTML is always written to a file and gets a default name if omitted")
    parser.add_argument("--open", action="store_true", help="Open the generated HTML report in the default browser")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if not args.repository and not (args.owner and args.repo):
        parser.error("a repository is required: pass OWNER/REPO or both --owner and --repo")

    try:
        config = _resolve_config(args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    try:
        fmt, rendered, bundle = run_pipeline(args, config)
    except InvalidIdentifierError as err:
        print(f"Error: {err.message}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    except RepoDataError as err:
        print(f"Error: {err.message}", file=sys.stderr)
        return EXIT_FETCH_ERROR

    write_output(fmt, rendered, args, bundle)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

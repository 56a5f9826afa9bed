#!/usr/bin/env python3
#
# Copyright 2026 ABSA Group Limited
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

"""Audit Dependabot vulnerability alerts across GitHub repositories and
exit with a pass/fail verdict for CI gating.

Input:
- Repositories given as ``owner/name`` (or a bare ``name`` of the
  authenticated user); without arguments, every repository owned by the
  authenticated user.

Exit codes:
- 0  no fail condition met
- 1  fail-age or fail-disabled condition met, or a fatal error
- 2  invalid command line
- 1 + severity (2..5 for low..critical) when --fail-severity or
  --fail-match is met

Requirements:
- A token in GITHUB_TOKEN / GH_TOKEN, or ``~/.config/ghsa-audit/hosts.yml``.

Examples:
    `ghsa-audit --list-all --fail-disabled`
    `ghsa-audit -s medium -f high my-org/api my-org/web`
    `ghsa-audit --advisory GHSA-xxxx-xxxx-xxxx --fail-match`
"""

from __future__ import annotations

import argparse
import os
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from github import GithubException

from ghsa_audit import __version__
from ghsa_audit.shared.github_repos import GitHubAlertSource, build_client
from ghsa_audit.shared.hosts_config import HostsConfigError, hosts_file_path, resolve_token
from ghsa_audit.shared.teams import TeamsDeliveryError, build_payload, send_to_teams
from ghsa_audit.utils.alert_filter import filter_alerts
from ghsa_audit.utils.common import parse_runner_debug, set_verbose_enabled, utc_now, vprint, warn
from ghsa_audit.utils.models import (
    AuditConfig,
    ExitDisposition,
    FilterCriteria,
    RepoReport,
    VerdictAccumulator,
)
from ghsa_audit.utils.report import build_summary_markdown, describe_verdict, print_repo_report
from ghsa_audit.utils.severity import InvalidSeverity, SeverityLevel, parse_severity
from ghsa_audit.utils.verdict import ConflictingThresholds, accumulate, compute_disposition, validate_thresholds


def _severity_arg(text: str) -> SeverityLevel:
    try:
        return parse_severity(text)
    except InvalidSeverity as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _days_arg(text: str) -> int:
    try:
        days = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid day count {text!r}") from exc
    if days < 0:
        raise argparse.ArgumentTypeError(f"day count cannot be negative: {days}")
    return days


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="ghsa-audit",
        description="Audit Dependabot vulnerability alerts across GitHub repositories",
    )
    p.add_argument("repos", nargs="*", metavar="owner/repo", help="repositories to check (default: repos you own)")
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")

    listing = p.add_argument_group("listing")
    listing.add_argument(
        "-l",
        "--list-all",
        action="store_true",
        help="list all repos that were checked, even those without vulnerabilities",
    )
    listing.add_argument(
        "-c",
        "--closed",
        action="store_true",
        help="also list closed alerts (they never count toward failure)",
    )

    matching = p.add_argument_group("matching")
    matching.add_argument("-a", "--advisory", default="", metavar="GHSA-ID", help="only consider this advisory")
    matching.add_argument("--cve", default="", metavar="CVE-ID", help="only consider this CVE")
    matching.add_argument(
        "-s",
        "--severity",
        type=_severity_arg,
        default=SeverityLevel.UNKNOWN,
        metavar="LEVEL",
        help="only consider alerts at or above the specified severity level",
    )
    matching.add_argument(
        "-t",
        "--min-age",
        type=_days_arg,
        default=0,
        metavar="DAYS",
        help="only consider alerts created more than DAYS days ago",
    )

    failing = p.add_argument_group("fail conditions")
    failing.add_argument(
        "-f",
        "--fail-severity",
        type=_severity_arg,
        default=SeverityLevel.UNKNOWN,
        metavar="LEVEL",
        help="fail if alerts exist at or above the specified severity level",
    )
    failing.add_argument(
        "-F",
        "--fail-match",
        action="store_true",
        help="fail if any matching open alert exists",
    )
    failing.add_argument(
        "-T",
        "--fail-age",
        type=_days_arg,
        default=0,
        metavar="DAYS",
        help="fail if a matching open alert is older than DAYS days",
    )
    failing.add_argument(
        "-d",
        "--fail-disabled",
        action="store_true",
        help="fail if vulnerability alerts are disabled for a repo",
    )

    output = p.add_argument_group("output")
    output.add_argument(
        "--summary-file",
        default=os.environ.get("GITHUB_STEP_SUMMARY"),
        metavar="PATH",
        help="append a Markdown summary to PATH (default: $GITHUB_STEP_SUMMARY)",
    )
    output.add_argument(
        "--teams-webhook-url",
        default=os.environ.get("TEAMS_WEBHOOK_URL"),
        metavar="URL",
        help="post the summary to a Teams Incoming Webhook (default: $TEAMS_WEBHOOK_URL)",
    )
    output.add_argument(
        "--notify-on-failure-only",
        action="store_true",
        help="only post to Teams when the run fails",
    )
    output.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logs (also enabled when RUNNER_DEBUG=1)",
    )
    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> AuditConfig:
    return AuditConfig(
        criteria=FilterCriteria(
            advisory_id=args.advisory,
            cve_id=args.cve,
            min_severity=args.severity,
            min_age_days=args.min_age,
        ),
        fail_severity=args.fail_severity,
        fail_age_days=args.fail_age,
        fail_match=bool(args.fail_match),
        fail_disabled=bool(args.fail_disabled),
    )


def run_audit(
    source: Any,
    repos: Sequence[Any],
    config: AuditConfig,
    now: datetime,
    *,
    include_closed: bool = False,
    list_all: bool = False,
) -> tuple[VerdictAccumulator, list[RepoReport]]:
    """Examine *repos* one at a time and fold each into a fresh accumulator.

    An interrupt stops the loop; whatever was accumulated so far is returned.
    """
    acc = VerdictAccumulator.new(now)
    reports: list[RepoReport] = []

    try:
        for repo in repos:
            if source.is_alerting_enabled(repo):
                alerts = source.list_alerts(repo, include_closed)
                report = RepoReport(repo.full_name, True, filter_alerts(alerts, config.criteria, now))
            else:
                report = RepoReport(repo.full_name, False)

            accumulate(acc, report.enabled, report.alerts, now)
            reports.append(report)
            print_repo_report(report, now, list_all=list_all, show_disabled=config.fail_disabled)
    except KeyboardInterrupt:
        warn(f"interrupted after {len(reports)} of {len(repos)} repositories; reporting partial results")

    return acc, reports


def publish_summary(
    args: argparse.Namespace,
    reports: list[RepoReport],
    acc: VerdictAccumulator,
    disposition: ExitDisposition,
    now: datetime,
) -> None:
    if not args.summary_file and not args.teams_webhook_url:
        return

    body = build_summary_markdown(reports, acc, disposition, now)

    if args.summary_file:
        try:
            with open(args.summary_file, "a", encoding="utf-8") as fh:
                fh.write(body)
        except OSError as exc:
            warn(f"could not write summary to {args.summary_file}: {exc}")
        else:
            vprint(f"Summary written to {args.summary_file}")

    if not args.teams_webhook_url:
        return
    if args.notify_on_failure_only and not disposition.failed:
        vprint("Run passed – skipping Teams notification")
        return

    title = f"Vulnerability alert audit: {describe_verdict(disposition)}"
    try:
        send_to_teams(args.teams_webhook_url, build_payload(body, title, disposition.failed))
    except TeamsDeliveryError as exc:
        warn(str(exc))
    else:
        vprint("Summary sent to Teams")


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)

    set_verbose_enabled(bool(args.verbose) or parse_runner_debug())

    config = build_config(args)
    try:
        validate_thresholds(config)
    except ConflictingThresholds as exc:
        raise SystemExit(f"ERROR: {exc}") from exc

    try:
        token = resolve_token()
    except HostsConfigError as exc:
        raise SystemExit(f"ERROR: invalid host configuration: {exc}") from exc
    if not token:
        raise SystemExit(f"ERROR: no GitHub token found. Set GITHUB_TOKEN or add one to {hosts_file_path()}")

    source = GitHubAlertSource(build_client(token, os.getenv("GITHUB_API_URL")))

    try:
        repos = source.resolve_repos(args.repos)
        vprint(f"Examining {len(repos)} repositories")
        now = utc_now()
        acc, reports = run_audit(
            source,
            repos,
            config,
            now,
            include_closed=bool(args.closed),
            list_all=bool(args.list_all),
        )
    except GithubException as exc:
        raise SystemExit(f"ERROR: GitHub API request failed: {exc}") from exc

    disposition = compute_disposition(acc, config, now)
    vprint(
        f"Verdict: {describe_verdict(disposition)} "
        f"(worst={acc.worst_severity.name.lower()}, matches={acc.matching_open_count}, "
        f"disabled={acc.has_disabled_repo})"
    )

    publish_summary(args, reports, acc, disposition, now)
    raise SystemExit(disposition.code)


if __name__ == "__main__":
    main()

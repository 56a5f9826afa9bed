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

"""Presentation – terminal listing per repository and the Markdown run
summary. Consumes filtered and aggregated results; makes no decisions.
"""

from __future__ import annotations

from datetime import datetime

from ghsa_audit.shared.templates import render_markdown_template

from .common import age_in_days
from .models import AlertRecord, ExitDisposition, RepoReport, VerdictAccumulator
from .severity import abbreviate
from .templates import NONE_LINE, SUMMARY_TEMPLATE

MSG_DISABLED = "vulnerability alerts are disabled"
MSG_NO_MATCHES = "no matching vulnerability alerts found"


def format_alert_line(alert: AlertRecord, now: datetime) -> str:
    parts = [
        abbreviate(alert.severity),
        alert.ghsa_id,
        alert.cve_id or "-",
        f"{age_in_days(alert.created_at, now)}d",
    ]
    if not alert.is_open:
        parts.append(f"[{alert.state}]")
    parts.append(alert.summary)
    return " ".join(parts)


def render_repo_report(
    report: RepoReport,
    now: datetime,
    *,
    list_all: bool = False,
    show_disabled: bool = False,
) -> list[str]:
    """Return the lines to print for one repository (possibly none)."""
    if not report.enabled:
        if list_all or show_disabled:
            return [report.full_name, MSG_DISABLED]
        return []

    if not report.alerts:
        if list_all:
            return [report.full_name, MSG_NO_MATCHES]
        return []

    return [report.full_name] + [format_alert_line(a, now) for a in report.alerts]


def print_repo_report(
    report: RepoReport,
    now: datetime,
    *,
    list_all: bool = False,
    show_disabled: bool = False,
) -> None:
    for line in render_repo_report(report, now, list_all=list_all, show_disabled=show_disabled):
        print(line)


def describe_verdict(disposition: ExitDisposition) -> str:
    if not disposition.failed:
        return "PASS"
    return f"FAIL ({disposition.reason}, exit code {disposition.code})"


def build_summary_markdown(
    reports: list[RepoReport],
    acc: VerdictAccumulator,
    disposition: ExitDisposition,
    now: datetime,
) -> str:
    """Render the Markdown summary of a finished (or interrupted) run."""
    disabled_lines = [f"- {r.full_name}" for r in reports if not r.enabled]

    alert_lines: list[str] = []
    for r in reports:
        for a in r.alerts:
            if not a.is_open:
                continue
            ref = f"[{a.ghsa_id}]({a.html_url})" if a.html_url else a.ghsa_id
            package = f" `{a.package}`" if a.package else ""
            alert_lines.append(
                f"- **{abbreviate(a.severity)}** {ref}{package} in {r.full_name} "
                f"({age_in_days(a.created_at, now)} days) – {a.summary}"
            )

    if acc.matching_open_count:
        oldest_age = f"{age_in_days(acc.oldest_created_at, now)} days"
    else:
        oldest_age = "n/a"

    values = {
        "generated_at": now.isoformat(timespec="seconds"),
        "repos_examined": acc.repos_examined,
        "disabled_count": len(disabled_lines),
        "matching_open_count": acc.matching_open_count,
        "worst_severity": str(acc.worst_severity) or ("unknown" if acc.matching_open_count else "none"),
        "oldest_age": oldest_age,
        "verdict": describe_verdict(disposition),
        "disabled_lines": disabled_lines or [NONE_LINE],
        "alert_lines": alert_lines or [NONE_LINE],
    }
    return render_markdown_template(SUMMARY_TEMPLATE, values)

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

"""Verdict aggregation – folding per-repository results into the run-wide
accumulator, turning the accumulator into an exit disposition, and the
pre-run threshold-conflict check.

Disposition rules are evaluated in this order; the first that holds wins:

==================  =======================================  ==================
rule                condition                                exit code
==================  =======================================  ==================
fail-severity       worst open severity >= --fail-severity   1 + worst severity
fail-age            oldest open alert older than --fail-age  1
fail-match          any matching open alert (--fail-match)   1 + worst severity
fail-disabled       a repo has alerts disabled               1
==================  =======================================  ==================
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

from .common import days_before
from .models import AlertRecord, AuditConfig, ExitDisposition, VerdictAccumulator
from .severity import SeverityLevel

FLAG_SEVERITY = '"-s, --severity"'
FLAG_FAIL_SEVERITY = '"-f, --fail-severity"'
FLAG_MIN_AGE = '"-t, --min-age"'
FLAG_FAIL_AGE = '"-T, --fail-age"'


class ConflictingThresholds(ValueError):
    """Raised when a fail threshold can never be reached given the filters."""

    def __init__(self, fail_flag: str, filter_flag: str, detail: str) -> None:
        super().__init__(f"conflicting options for {fail_flag} and {filter_flag} flags\n{detail}")
        self.fail_flag = fail_flag
        self.filter_flag = filter_flag


def validate_thresholds(config: AuditConfig) -> None:
    """Reject fail thresholds that contradict the matching criteria."""
    criteria = config.criteria

    if config.fail_severity != SeverityLevel.UNKNOWN and config.fail_severity < criteria.min_severity:
        raise ConflictingThresholds(
            FLAG_FAIL_SEVERITY,
            FLAG_SEVERITY,
            "fail-severity threshold cannot be lower than severity filter",
        )

    if criteria.min_age_days > 0 and config.fail_age_days > 0 and criteria.min_age_days > config.fail_age_days:
        raise ConflictingThresholds(
            FLAG_FAIL_AGE,
            FLAG_MIN_AGE,
            "fail-age threshold cannot be lower than min-age filter",
        )


def accumulate(
    acc: VerdictAccumulator,
    repo_enabled: bool,
    filtered_alerts: Iterable[AlertRecord],
    now: datetime,
) -> None:
    """Fold one repository's filtered alerts into *acc*.

    Disabled repositories only set the disabled flag. Closed alerts never
    count toward severity, count or age.
    """
    acc.repos_examined += 1

    if not repo_enabled:
        acc.has_disabled_repo = True
        return

    for alert in filtered_alerts:
        if not alert.is_open:
            continue
        if alert.severity > acc.worst_severity:
            acc.worst_severity = alert.severity
        acc.matching_open_count += 1
        if alert.created_at < acc.oldest_created_at:
            acc.oldest_created_at = alert.created_at


@dataclass(frozen=True)
class DispositionRule:
    name: str
    applies: Callable[[VerdictAccumulator, AuditConfig, datetime], bool]
    code: Callable[[VerdictAccumulator], int]


def _severity_code(acc: VerdictAccumulator) -> int:
    return 1 + int(acc.worst_severity)


DISPOSITION_RULES: tuple[DispositionRule, ...] = (
    DispositionRule(
        "fail-severity",
        lambda acc, cfg, now: (
            cfg.fail_severity != SeverityLevel.UNKNOWN and acc.worst_severity >= cfg.fail_severity
        ),
        _severity_code,
    ),
    DispositionRule(
        "fail-age",
        lambda acc, cfg, now: (
            cfg.fail_age_days > 0 and acc.oldest_created_at < days_before(now, cfg.fail_age_days)
        ),
        lambda acc: 1,
    ),
    DispositionRule(
        "fail-match",
        lambda acc, cfg, now: cfg.fail_match and acc.matching_open_count > 0,
        _severity_code,
    ),
    DispositionRule(
        "fail-disabled",
        lambda acc, cfg, now: cfg.fail_disabled and acc.has_disabled_repo,
        lambda acc: 1,
    ),
)


def compute_disposition(acc: VerdictAccumulator, config: AuditConfig, now: datetime) -> ExitDisposition:
    for rule in DISPOSITION_RULES:
        if rule.applies(acc, config, now):
            return ExitDisposition(code=rule.code(acc), reason=rule.name)
    return ExitDisposition(code=0)

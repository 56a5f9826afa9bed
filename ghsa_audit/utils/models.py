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

"""Audit data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .severity import SeverityLevel, parse_severity_lenient

ALERT_STATE_OPEN = "open"


@dataclass(frozen=True)
class AlertRecord:
    """One Dependabot alert as seen by the triage core."""
    ghsa_id: str
    cve_id: str
    summary: str
    severity: SeverityLevel
    created_at: datetime
    state: str = ALERT_STATE_OPEN
    number: int = 0
    package: str = ""
    html_url: str = ""

    @property
    def is_open(self) -> bool:
        # An empty state is reported for alerts fetched with the open-only filter.
        return self.state in ("", ALERT_STATE_OPEN)

    @classmethod
    def from_dependabot_alert(cls, alert: Any) -> AlertRecord:
        """Build a record from a PyGithub ``DependabotAlert``."""
        adv = alert.security_advisory
        dependency = getattr(alert, "dependency", None)
        package = getattr(dependency, "package", None)
        return cls(
            ghsa_id=adv.ghsa_id or "",
            cve_id=adv.cve_id or "",
            summary=adv.summary or "",
            severity=parse_severity_lenient(adv.severity),
            created_at=_as_utc(alert.created_at),
            state=alert.state or "",
            number=alert.number or 0,
            package=getattr(package, "name", None) or "",
            html_url=alert.html_url or "",
        )


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class FilterCriteria:
    """Selection criteria; zero / empty values disable a criterion."""
    advisory_id: str = ""
    cve_id: str = ""
    min_severity: SeverityLevel = SeverityLevel.UNKNOWN
    min_age_days: int = 0


@dataclass(frozen=True)
class AuditConfig:
    """Matching criteria plus the fail thresholds of one run."""
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    fail_severity: SeverityLevel = SeverityLevel.UNKNOWN
    fail_age_days: int = 0
    fail_match: bool = False
    fail_disabled: bool = False


@dataclass
class VerdictAccumulator:
    """Run-wide aggregate folded from every examined repository."""
    oldest_created_at: datetime
    has_disabled_repo: bool = False
    worst_severity: SeverityLevel = SeverityLevel.UNKNOWN
    matching_open_count: int = 0
    repos_examined: int = 0

    @classmethod
    def new(cls, now: datetime) -> VerdictAccumulator:
        return cls(oldest_created_at=now)


@dataclass(frozen=True)
class ExitDisposition:
    code: int
    reason: str = ""

    @property
    def failed(self) -> bool:
        return self.code != 0


@dataclass
class RepoReport:
    """Per-repository result handed to the presentation layer."""
    full_name: str
    enabled: bool
    alerts: list[AlertRecord] = field(default_factory=list)

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

"""Alert selection – narrows a repository's alert list to the alerts that
match the advisory / CVE / severity / age criteria of the current run.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime

from .common import days_before
from .models import AlertRecord, FilterCriteria
from .severity import SeverityLevel

AlertPredicate = Callable[[AlertRecord], bool]


def build_predicates(criteria: FilterCriteria, now: datetime) -> list[AlertPredicate]:
    """Return one predicate per active criterion.

    Criteria left at their zero value contribute no predicate, so an empty
    list means every alert passes.
    """
    predicates: list[AlertPredicate] = []

    if criteria.advisory_id:
        advisory_id = criteria.advisory_id
        predicates.append(lambda a: a.ghsa_id == advisory_id)

    if criteria.cve_id:
        cve_id = criteria.cve_id
        predicates.append(lambda a: bool(a.cve_id) and a.cve_id == cve_id)

    if criteria.min_severity != SeverityLevel.UNKNOWN:
        min_severity = criteria.min_severity
        predicates.append(lambda a: a.severity >= min_severity)

    if criteria.min_age_days > 0:
        cutoff = days_before(now, criteria.min_age_days)
        predicates.append(lambda a: a.created_at < cutoff)

    return predicates


def filter_alerts(
    alerts: Iterable[AlertRecord],
    criteria: FilterCriteria,
    now: datetime,
) -> list[AlertRecord]:
    """Return the alerts satisfying every active criterion, in input order."""
    predicates = build_predicates(criteria, now)
    return [a for a in alerts if all(p(a) for p in predicates)]

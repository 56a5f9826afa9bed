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

"""Alert triage utilities.

Modules
-------
common          Shared low-level utilities (verbose logging, warnings, clock helpers).
severity        ``SeverityLevel`` ordering, token parsing and abbreviations.
models          Core dataclass definitions (AlertRecord, FilterCriteria, AuditConfig, VerdictAccumulator).
alert_filter    Per-repository alert selection by advisory, CVE, severity and age.
verdict         Accumulation across repositories, exit disposition, threshold-conflict validation.
templates       Markdown template for the run summary.
report          Terminal listing and Markdown summary rendering.
"""

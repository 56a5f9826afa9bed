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

"""Markdown template for the run summary."""

SUMMARY_TEMPLATE = """# Vulnerability Alert Audit

- **Generated at:** {{ generated_at }}
- **Repositories examined:** {{ repos_examined }}
- **Repositories with alerts disabled:** {{ disabled_count }}
- **Matching open alerts:** {{ matching_open_count }}
- **Worst severity:** {{ worst_severity }}
- **Oldest matching alert:** {{ oldest_age }}
- **Verdict:** {{ verdict }}

## Disabled Repositories

{{ disabled_lines }}

## Matching Alerts

{{ alert_lines }}
"""

NONE_LINE = "_none_"

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

"""Generic ``{{ placeholder }}`` Markdown template rendering engine."""

import re
from typing import Any


PLACEHOLDER_RE = re.compile(r"\{\{\s*([a-zA-Z0-9_\.]+)\s*\}\}")


def _lookup(values: dict[str, Any], dotted_key: str) -> Any:
    """Resolve a dot-separated key path; unresolved keys render empty."""
    cur: Any = values
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return ""
        cur = cur[part]
    return "" if cur is None else cur


def render_markdown_template(template: str, values: dict[str, Any]) -> str:
    """Replace ``{{ key }}`` placeholders in *template* with values from *values*.

    List values are rendered one item per line, so a list of pre-formatted
    bullet strings becomes a Markdown list.
    """
    def repl(match: re.Match[str]) -> str:
        v = _lookup(values, match.group(1))
        if isinstance(v, (list, tuple)):
            return "\n".join(str(item) for item in v)
        return str(v)

    return PLACEHOLDER_RE.sub(repl, template)

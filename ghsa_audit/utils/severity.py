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

"""Severity levels – ordering, parsing of user thresholds and advisory
severities, and the fixed-width abbreviations used in listings.
"""

from __future__ import annotations

from enum import IntEnum

from .common import vprint


class InvalidSeverity(ValueError):
    """Raised for a severity token outside ``"" | low | medium | high | critical``."""

    def __init__(self, token: str) -> None:
        super().__init__(
            f"invalid severity {token!r}: severity must be low, medium, high, or critical"
        )
        self.token = token


class SeverityLevel(IntEnum):
    """Ordered from lowest to highest; ``UNKNOWN`` doubles as "no threshold"."""
    UNKNOWN = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    def __str__(self) -> str:
        return _TOKENS[self]


_TOKENS: dict[SeverityLevel, str] = {
    SeverityLevel.UNKNOWN: "",
    SeverityLevel.LOW: "low",
    SeverityLevel.MEDIUM: "medium",
    SeverityLevel.HIGH: "high",
    SeverityLevel.CRITICAL: "critical",
}

_BY_TOKEN: dict[str, SeverityLevel] = {token: level for level, token in _TOKENS.items()}

_ABBREVIATIONS: dict[SeverityLevel, str] = {
    SeverityLevel.UNKNOWN: "??",
    SeverityLevel.LOW: "LO",
    SeverityLevel.MEDIUM: "MD",
    SeverityLevel.HIGH: "HI",
    SeverityLevel.CRITICAL: "CR",
}


def parse_severity(text: str | None) -> SeverityLevel:
    """Parse a lowercase severity token.

    The empty string (or ``None``) maps to ``UNKNOWN``. Matching is
    case-sensitive, so ``"High"`` is rejected just like ``"severe"``.
    """
    token = text or ""
    try:
        return _BY_TOKEN[token]
    except KeyError:
        raise InvalidSeverity(token) from None


def parse_severity_lenient(text: str | None) -> SeverityLevel:
    """Parse an advisory severity, degrading unparsable values to ``UNKNOWN``."""
    try:
        return parse_severity(text)
    except InvalidSeverity as exc:
        vprint(f"Treating unparsable advisory severity as unknown: {exc}")
        return SeverityLevel.UNKNOWN


def compare(a: SeverityLevel, b: SeverityLevel) -> int:
    return (a > b) - (a < b)


def abbreviate(level: SeverityLevel) -> str:
    return _ABBREVIATIONS[level]

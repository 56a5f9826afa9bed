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

"""Credential resolution – API token from the environment or from the
per-host ``hosts.yml`` config file.

Example ``~/.config/ghsa-audit/hosts.yml``::

    github.com:
      oauth_token: ghp_xxxxxxxxxxxx
"""

from __future__ import annotations

import os
from dataclasses import dataclass

import yaml

DEFAULT_HOST = "github.com"
TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


class HostsConfigError(ValueError):
    pass


@dataclass(frozen=True)
class HostConfig:
    oauth_token: str = ""


def hosts_file_path() -> str:
    config_home = os.getenv("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(config_home, "ghsa-audit", "hosts.yml")


def current_host() -> str:
    return os.getenv("GH_HOST") or DEFAULT_HOST


def load_hosts(path: str) -> dict[str, HostConfig]:
    """Load ``host -> HostConfig`` from *path*; unknown fields are rejected."""
    with open(path, encoding="utf-8") as fh:
        try:
            raw = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise HostsConfigError(f"{path}: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise HostsConfigError(f"{path}: expected a mapping of host names")

    hosts: dict[str, HostConfig] = {}
    for host, entry in raw.items():
        entry = entry or {}
        if not isinstance(entry, dict):
            raise HostsConfigError(f"{path}: entry for {host!r} must be a mapping")
        unknown = sorted(set(entry) - {"oauth_token"})
        if unknown:
            raise HostsConfigError(f"{path}: unknown field(s) for {host!r}: {', '.join(map(str, unknown))}")
        hosts[str(host)] = HostConfig(oauth_token=str(entry.get("oauth_token") or ""))
    return hosts


def resolve_token(host: str | None = None, path: str | None = None) -> str:
    """Return the token from ``GITHUB_TOKEN`` / ``GH_TOKEN`` or the hosts file.

    Raises :class:`HostsConfigError` when no environment token is set and the
    hosts file is missing or invalid.
    """
    for key in TOKEN_ENV_VARS:
        token = os.getenv(key)
        if token:
            return token

    path = path or hosts_file_path()
    try:
        hosts = load_hosts(path)
    except OSError as exc:
        raise HostsConfigError(str(exc)) from exc

    return hosts.get(host or current_host(), HostConfig()).oauth_token

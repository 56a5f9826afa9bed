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

"""GitHub REST operations via PyGithub – repository resolution, the
vulnerability-alerts switch, and Dependabot alert listing.
"""

from __future__ import annotations

from github import Auth, Github
from github.Repository import Repository

from ghsa_audit.utils.common import vprint
from ghsa_audit.utils.models import ALERT_STATE_OPEN, AlertRecord

USER_AGENT = "ghsa-audit"


def build_client(token: str, base_url: str | None = None) -> Github:
    kwargs = {"auth": Auth.Token(token), "user_agent": USER_AGENT}
    if base_url:
        kwargs["base_url"] = base_url.rstrip("/")
    return Github(**kwargs)


class GitHubAlertSource:
    """Repository source and resolver backed by a PyGithub client.

    ``GithubException`` from any call propagates to the caller.
    """

    def __init__(self, client: Github) -> None:
        self._client = client
        self._login: str | None = None

    def _user_login(self) -> str:
        if self._login is None:
            self._login = self._client.get_user().login
            vprint(f"Authenticated as {self._login}")
        return self._login

    def resolve_repos(self, names: list[str] | None = None) -> list[Repository]:
        """Resolve ``owner/name`` strings to repositories.

        Without names, returns the repositories owned by the authenticated
        user. A bare ``name`` is looked up under the authenticated user, as
        ``gh`` does.
        """
        if not names:
            return list(self._client.get_user().get_repos(affiliation="owner"))

        repos: list[Repository] = []
        for name in names:
            owner, sep, repo_name = name.partition("/")
            if not sep:
                owner, repo_name = self._user_login(), name
            vprint(f"Resolving repository {owner}/{repo_name}")
            repos.append(self._client.get_repo(f"{owner}/{repo_name}"))
        return repos

    def is_alerting_enabled(self, repo: Repository) -> bool:
        return bool(repo.get_vulnerability_alert())

    def list_alerts(self, repo: Repository, include_closed: bool = False) -> list[AlertRecord]:
        if include_closed:
            alerts = repo.get_dependabot_alerts()
        else:
            alerts = repo.get_dependabot_alerts(state=ALERT_STATE_OPEN)
        records = [AlertRecord.from_dependabot_alert(a) for a in alerts]
        vprint(f"Fetched {len(records)} alert(s) for {repo.full_name}")
        return records

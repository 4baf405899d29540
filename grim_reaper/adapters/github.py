"""GitHub API adapter."""

import logging
from datetime import UTC, datetime
from typing import Any, Callable, Dict, List

import requests

from grim_reaper.adapters.base import GitPlatformError, VCSAdapter
from grim_reaper.models import PullRequest
from grim_reaper.utils import inactivity_days, parse_iso

LOG = logging.getLogger("grim_reaper.adapters.github")

PER_PAGE = 100


def _utcnow() -> datetime:
    return datetime.now(UTC)


class GitHubAdapter(VCSAdapter):
    """GitHub API implementation of VCSAdapter."""

    def __init__(
        self,
        token: str | None = None,
        api_url: str = "https://api.github.com",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.token = token
        self.api_url = api_url.rstrip("/")
        self._clock = clock
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, path: str, **kwargs: object) -> requests.Response:
        url = path if path.startswith("http") else f"{self.api_url}{path}"
        try:
            resp = self._session.request(method, url, timeout=30, **kwargs)
        except requests.RequestException as e:
            raise GitPlatformError(f"GitHub request failed: {method} {url}: {e}") from e
        if resp.status_code == 404:
            raise GitPlatformError(f"Not found: {path}")
        if resp.status_code >= 400:
            msg = resp.text
            try:
                data = resp.json()
                if isinstance(data, dict) and "message" in data:
                    msg = data["message"]
            except ValueError:
                pass
            raise GitPlatformError(f"GitHub API error {resp.status_code}: {msg}")
        return resp

    def _paginate(self, path: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """GET every page of a list endpoint, following Link rel=next."""
        items: List[Dict[str, Any]] = []
        resp = self._request("GET", path, params=params)
        items.extend(resp.json() or [])
        next_link = resp.links.get("next")
        while next_link:
            # next URL already carries the query string
            resp = self._request("GET", next_link["url"])
            items.extend(resp.json() or [])
            next_link = resp.links.get("next")
        return items

    def _parse_pull_request(self, repo: str, data: dict, now: datetime) -> PullRequest:
        """Build PullRequest from GitHub API pull dict."""
        labels = [lb.get("name", "") for lb in data.get("labels", []) if lb.get("name")]
        updated = parse_iso(data["updated_at"])
        user = data.get("user") or {}
        return PullRequest(
            id=data["id"],
            repository=repo,
            number=data["number"],
            title=data.get("title", ""),
            url=data.get("html_url", ""),
            created_at=parse_iso(data["created_at"]),
            updated_at=updated,
            inactivity_days=inactivity_days(updated, now),
            author=user.get("login") or "unknown",
            labels=labels,
        )

    def list_accessible_repositories(self) -> List[str]:
        """Full names of all repositories the token can access."""
        data_list = self._paginate(
            "/user/repos",
            {"visibility": "all", "sort": "updated", "per_page": PER_PAGE},
        )
        return [data["full_name"] for data in data_list]

    def list_inactive_pull_requests(self, repositories: List[str], threshold_days: int) -> List[PullRequest]:
        """List open PRs across repositories inactive for >= threshold_days.

        PRs are requested oldest-update first; inactivity is computed
        against a single ``now`` taken at the start of the call.
        """
        repos = list(repositories)
        if not repos:
            repos = self.list_accessible_repositories()
            LOG.info("No repositories configured; checking %s accessible repos", len(repos))

        now = self._clock()
        result: List[PullRequest] = []
        for repo in repos:
            LOG.debug("Checking %s for inactive PRs", repo)
            data_list = self._paginate(
                f"/repos/{repo}/pulls",
                {"state": "open", "sort": "updated", "direction": "asc", "per_page": PER_PAGE},
            )
            for data in data_list:
                pr = self._parse_pull_request(repo, data, now)
                if pr.inactivity_days >= threshold_days:
                    result.append(pr)
        return result

    def get_pull_request(self, repo: str, pr_number: int) -> PullRequest:
        """Fetch a pull request by number."""
        resp = self._request("GET", f"/repos/{repo}/pulls/{pr_number}")
        return self._parse_pull_request(repo, resp.json(), self._clock())

    def post_comment(self, repo: str, pr_number: int, body: str) -> None:
        """Post a comment on a pull request (issue comments endpoint)."""
        self._request("POST", f"/repos/{repo}/issues/{pr_number}/comments", json={"body": body})

    def close_pull_request(self, repo: str, pr_number: int) -> None:
        """Set the pull request state to closed."""
        self._request("PATCH", f"/repos/{repo}/pulls/{pr_number}", json={"state": "closed"})

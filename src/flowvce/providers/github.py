"""GitHub REST API provider."""

from __future__ import annotations

import base64
import logging
import time

import requests
from requests.utils import quote

from flowvce.file_filter import get_language_hint
from flowvce.models import (
    FileChange,
    FileRecord,
    GitBranch,
    GitCommit,
    GitHubUser,
    GitRepository,
    PullRequest,
    RepoInfo,
)
from flowvce.providers.base import SourceControlProvider

logger = logging.getLogger(__name__)

PAGES_BRANCH = "gh-pages"


class GitHubError(Exception):
    """Raised for GitHub API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class RateLimitError(GitHubError):
    """Raised when GitHub rate limit is exceeded."""

    def __init__(self, reset_at: int):
        self.reset_at = reset_at
        wait = max(0, reset_at - int(time.time()))
        super().__init__(
            f"GitHub API rate limit exceeded. Resets in {wait} seconds.",
            status_code=403,
        )


def _encode(content: str) -> str:
    return base64.b64encode(content.encode("utf-8")).decode("ascii")


def _repository(data: dict) -> GitRepository:
    return GitRepository(
        url=data["html_url"],
        owner=(data.get("owner") or {}).get("login", "Unknown"),
        name=data["name"],
        branch=data.get("default_branch") or "main",
        private=bool(data.get("private", False)),
    )


def _pull_request(data: dict) -> PullRequest:
    return PullRequest(
        number=data["number"],
        title=data["title"],
        description=data.get("body") or "",
        author=(data.get("user") or {}).get("login", "Unknown"),
        source=data["head"]["ref"],
        target=data["base"]["ref"],
        status="merged" if data.get("merged_at") else data["state"],
        created_at=data.get("created_at", ""),
        updated_at=data.get("updated_at", ""),
        comments=data.get("comments", 0),
        changes=data.get("changed_files", 0),
    )


class GitHubProvider(SourceControlProvider):
    """Provider for GitHub repositories using the REST API."""

    API_BASE = "https://api.github.com"
    RAW_BASE = "https://raw.githubusercontent.com"

    fatal_errors = (RateLimitError,)

    def __init__(self, token: str | None = None):
        self.session = requests.Session()
        self.session.headers["Accept"] = "application/vnd.github+json"
        self.session.headers["User-Agent"] = "FlowVCE/1.0"
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    # -- transport ---------------------------------------------------------

    def _check_rate_limit(self, response: requests.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining is not None and int(remaining) == 0:
            reset_at = int(response.headers.get("X-RateLimit-Reset", 0))
            raise RateLimitError(reset_at)

    def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        json: dict | None = None,
    ) -> dict | list:
        url = f"{self.API_BASE}{path}"
        try:
            resp = self.session.request(method, url, params=params, json=json, timeout=30)
        except requests.RequestException as exc:
            logger.error("GitHub request %s %s failed: %s", method, path, exc)
            raise GitHubError(f"Could not reach GitHub: {exc}") from exc

        self._check_rate_limit(resp)

        if resp.ok:
            if resp.status_code == 204 or not resp.content:
                return {}
            return resp.json()

        logger.error("GitHub API %s %s returned %s", method, path, resp.status_code)
        if resp.status_code == 404:
            raise GitHubError(
                "Not found. Check the repository, or provide a token for private repos.",
                status_code=404,
            )
        if resp.status_code == 401:
            raise GitHubError("Authentication failed. Check your GitHub token.", status_code=401)
        if resp.status_code == 403:
            raise GitHubError(
                "Access denied. The token may lack permissions, or rate limit exceeded.",
                status_code=403,
            )
        try:
            detail = resp.json().get("message", resp.reason)
        except ValueError:
            detail = resp.reason
        raise GitHubError(f"GitHub API error {resp.status_code}: {detail}", status_code=resp.status_code)

    def _api_get(self, path: str, params: dict | None = None) -> dict | list:
        return self._request("GET", path, params=params)

    # -- user and repositories --------------------------------------------

    def get_user_info(self) -> GitHubUser:
        data = self._api_get("/user")
        return GitHubUser(
            username=data["login"],
            name=data.get("name"),
            email=data.get("email"),
            avatar=data.get("avatar_url"),
            profile=data.get("html_url"),
        )

    def list_repositories(self) -> list[GitRepository]:
        data = self._api_get("/user/repos", params={"sort": "updated", "per_page": 100})
        return [_repository(item) for item in data]

    def search_repositories(self, query: str, sort: str = "updated") -> list[GitRepository]:
        """Search the authenticated user's repositories."""
        username = self.get_user_info().username
        data = self._api_get(
            "/search/repositories",
            params={"q": f"{query} user:{username}", "sort": sort, "per_page": 30},
        )
        return [_repository(item) for item in data.get("items", [])]

    def create_repository(
        self, name: str, description: str = "", private: bool = False
    ) -> GitRepository:
        data = self._request(
            "POST",
            "/user/repos",
            json={
                "name": name,
                "description": description,
                "private": private,
                "auto_init": True,
            },
        )
        return _repository(data)

    def delete_repository(self, owner: str, repo: str) -> None:
        self._request("DELETE", f"/repos/{owner}/{repo}")

    def get_default_branch(self, repo_info: RepoInfo) -> str:
        data = self._api_get(f"/repos/{repo_info.owner}/{repo_info.repo}")
        return data["default_branch"]

    # -- files --------------------------------------------------------------

    def list_files(self, repo_info: RepoInfo) -> list[FileRecord]:
        branch = repo_info.branch
        if not branch:
            branch = self.get_default_branch(repo_info)
            repo_info.branch = branch

        data = self._api_get(
            f"/repos/{repo_info.owner}/{repo_info.repo}/git/trees/{branch}",
            params={"recursive": "1"},
        )
        if data.get("truncated"):
            logger.warning(
                "Tree listing for %s/%s is truncated", repo_info.owner, repo_info.repo
            )

        records: list[FileRecord] = []
        for item in data.get("tree", []):
            if item["type"] != "blob":
                continue
            path = item["path"]
            records.append(
                FileRecord(
                    id=item.get("sha", path),
                    path=path,
                    size=item.get("size", 0),
                    language=get_language_hint(path),
                )
            )
        return records

    def fetch_file_content(self, repo_info: RepoInfo, record: FileRecord) -> str:
        branch = repo_info.branch or "main"

        # raw.githubusercontent.com is not rate limited
        raw_url = f"{self.RAW_BASE}/{repo_info.owner}/{repo_info.repo}/{branch}/{record.path}"
        try:
            resp = self.session.get(raw_url, timeout=30)
            if resp.status_code == 200:
                return resp.text
        except requests.RequestException:
            logger.warning("Raw download of %s failed; using the contents API", record.path)

        # Contents API works for private repos with a token
        data = self._api_get(
            f"/repos/{repo_info.owner}/{repo_info.repo}/contents/{quote(record.path)}",
            params={"ref": branch},
        )
        if data.get("encoding") == "base64":
            return base64.b64decode(data["content"]).decode("utf-8", errors="replace")
        return data.get("content", "")

    def get_file_sha(self, owner: str, repo: str, path: str, branch: str = "main") -> str | None:
        """Return the blob sha of *path*, or None if it does not exist."""
        try:
            data = self._api_get(
                f"/repos/{owner}/{repo}/contents/{quote(path)}", params={"ref": branch}
            )
        except GitHubError as exc:
            if exc.status_code == 404:
                return None
            raise
        return data.get("sha")

    def create_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str = "main",
    ) -> None:
        self._request(
            "PUT",
            f"/repos/{owner}/{repo}/contents/{quote(path)}",
            json={"message": message, "content": _encode(content), "branch": branch},
        )

    def update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str = "main",
        sha: str | None = None,
    ) -> None:
        """Create or update *path*; the current sha is looked up when not given."""
        if sha is None:
            sha = self.get_file_sha(owner, repo, path, branch)
        payload = {"message": message, "content": _encode(content), "branch": branch}
        if sha:
            payload["sha"] = sha
        self._request("PUT", f"/repos/{owner}/{repo}/contents/{quote(path)}", json=payload)

    def delete_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        sha: str | None = None,
        branch: str = "main",
    ) -> None:
        if sha is None:
            sha = self.get_file_sha(owner, repo, path, branch)
            if sha is None:
                raise GitHubError(f"File not found: {path}", status_code=404)
        self._request(
            "DELETE",
            f"/repos/{owner}/{repo}/contents/{quote(path)}",
            json={"message": message, "sha": sha, "branch": branch},
        )

    # -- commits ------------------------------------------------------------

    def list_commits(
        self, owner: str, repo: str, branch: str = "main", limit: int = 50
    ) -> list[GitCommit]:
        data = self._api_get(
            f"/repos/{owner}/{repo}/commits", params={"sha": branch, "per_page": limit}
        )
        commits: list[GitCommit] = []
        for item in data:
            author = item["commit"].get("author") or {}
            commits.append(
                GitCommit(
                    sha=item["sha"],
                    message=item["commit"]["message"],
                    author_name=author.get("name") or "Unknown",
                    author_email=author.get("email") or "",
                    author_avatar=(item.get("author") or {}).get("avatar_url"),
                    timestamp=author.get("date", ""),
                    branch=branch,
                )
            )
        return commits

    def get_commit_changes(self, owner: str, repo: str, commit_sha: str) -> list[FileChange]:
        data = self._api_get(f"/repos/{owner}/{repo}/commits/{commit_sha}")
        return [
            FileChange(
                path=f["filename"],
                status=f["status"],
                additions=f.get("additions", 0),
                deletions=f.get("deletions", 0),
                old_path=f.get("previous_filename"),
            )
            for f in data.get("files", [])
        ]

    def create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        files: dict[str, str],
        branch: str = "main",
    ) -> str:
        """Commit several files at once through the git data API."""
        base = f"/repos/{owner}/{repo}/git"

        ref = self._api_get(f"{base}/ref/heads/{branch}")
        latest_sha = ref["object"]["sha"]
        commit = self._api_get(f"{base}/commits/{latest_sha}")

        entries = []
        for path, content in files.items():
            blob = self._request(
                "POST", f"{base}/blobs", json={"content": _encode(content), "encoding": "base64"}
            )
            entries.append({"path": path, "mode": "100644", "type": "blob", "sha": blob["sha"]})

        tree = self._request(
            "POST", f"{base}/trees", json={"base_tree": commit["tree"]["sha"], "tree": entries}
        )
        new_commit = self._request(
            "POST",
            f"{base}/commits",
            json={"message": message, "tree": tree["sha"], "parents": [latest_sha]},
        )
        self._request("PATCH", f"{base}/refs/heads/{branch}", json={"sha": new_commit["sha"]})

        logger.info("Committed %d files to %s/%s@%s", len(files), owner, repo, branch)
        return new_commit["sha"]

    # -- branches -----------------------------------------------------------

    def list_branches(self, owner: str, repo: str) -> list[GitBranch]:
        data = self._api_get(f"/repos/{owner}/{repo}/branches")
        return [
            GitBranch(
                name=b["name"],
                commit=b["commit"]["sha"],
                is_protected=bool(b.get("protected", False)),
            )
            for b in data
        ]

    def create_branch(
        self, owner: str, repo: str, branch_name: str, from_branch: str = "main"
    ) -> None:
        ref = self._api_get(f"/repos/{owner}/{repo}/git/ref/heads/{from_branch}")
        self._request(
            "POST",
            f"/repos/{owner}/{repo}/git/refs",
            json={"ref": f"refs/heads/{branch_name}", "sha": ref["object"]["sha"]},
        )

    def delete_branch(self, owner: str, repo: str, branch_name: str) -> None:
        self._request("DELETE", f"/repos/{owner}/{repo}/git/refs/heads/{branch_name}")

    # -- pull requests ------------------------------------------------------

    def list_pull_requests(self, owner: str, repo: str, state: str = "open") -> list[PullRequest]:
        data = self._api_get(
            f"/repos/{owner}/{repo}/pulls", params={"state": state, "per_page": 50}
        )
        return [_pull_request(item) for item in data]

    def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        description: str,
        head: str,
        base: str = "main",
    ) -> PullRequest:
        data = self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls",
            json={"title": title, "body": description, "head": head, "base": base},
        )
        return _pull_request(data)

    # -- pages --------------------------------------------------------------

    def deploy_to_pages(
        self,
        owner: str,
        repo: str,
        files: dict[str, str],
        commit_message: str = "Deploy to GitHub Pages",
        from_branch: str | None = None,
    ) -> str:
        """Publish *files* on the ``gh-pages`` branch and return the site URL.

        A missing ``gh-pages`` branch is created from *from_branch*, or from
        the repository's default branch when none is given.
        """
        try:
            self._api_get(f"/repos/{owner}/{repo}/git/ref/heads/{PAGES_BRANCH}")
        except GitHubError as exc:
            if exc.status_code != 404:
                raise
            if not from_branch:
                from_branch = self.get_default_branch(RepoInfo(owner=owner, repo=repo))
            self.create_branch(owner, repo, PAGES_BRANCH, from_branch)

        self.create_commit(owner, repo, commit_message, files, PAGES_BRANCH)

        try:
            self._request(
                "POST",
                f"/repos/{owner}/{repo}/pages",
                json={"source": {"branch": PAGES_BRANCH, "path": "/"}},
            )
        except RateLimitError:
            raise
        except GitHubError:
            logger.info("GitHub Pages already enabled or configuration failed")

        return f"https://{owner}.github.io/{repo}"

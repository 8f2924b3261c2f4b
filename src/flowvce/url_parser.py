"""GitHub repository URL parsing."""

from __future__ import annotations

from urllib.parse import urlparse

from flowvce.models import RepoInfo


class URLParseError(Exception):
    """Raised when a URL cannot be parsed."""


def parse_repo_url(url: str) -> RepoInfo:
    """Parse a GitHub repository URL.

    Supported formats:
      - https://github.com/owner/repo
      - https://github.com/owner/repo.git
      - https://github.com/owner/repo/tree/branch
      - https://github.com/owner/repo/tree/branch/with/slashes
    """
    url = url.strip()
    if not url:
        raise URLParseError("URL is empty.")

    parsed = urlparse(url)
    if not parsed.scheme:
        raise URLParseError(f"Invalid URL (no scheme): {url}")
    if parsed.scheme not in ("http", "https"):
        raise URLParseError(f"Unsupported scheme: {parsed.scheme}")

    host = parsed.hostname or ""
    if host not in ("github.com", "www.github.com"):
        raise URLParseError(f"Only GitHub repositories are supported: {host}")

    parts = parsed.path.strip("/").split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise URLParseError(f"GitHub URL must include owner/repo: {url}")

    owner = parts[0]
    repo = parts[1].removesuffix(".git")
    branch = None
    if len(parts) >= 4 and parts[2] == "tree":
        branch = "/".join(parts[3:])

    return RepoInfo(
        owner=owner,
        repo=repo,
        branch=branch,
        url=f"https://github.com/{owner}/{repo}",
        raw_url=url,
    )

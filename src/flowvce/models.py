"""Data classes for Flow VCE."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass
class FileRecord:
    id: str
    path: str
    content: str = ""
    language: str = ""
    size: int = 0
    is_generated: bool = False
    is_editable: bool = True


@dataclass
class FolderNode:
    name: str
    path: str
    children: list[TreeNode] = field(default_factory=list)

    @property
    def is_folder(self) -> bool:
        return True


@dataclass
class FileNode:
    name: str
    path: str
    size: int = 0
    language: str = ""

    @property
    def is_folder(self) -> bool:
        return False


TreeNode = Union[FolderNode, FileNode]


@dataclass
class SiteMetadata:
    title: str
    description: str
    theme: str
    responsive: bool = True


@dataclass
class GeneratedSite:
    html: str
    css: str
    js: str
    metadata: SiteMetadata
    assets: dict[str, str] = field(default_factory=dict)


@dataclass
class Deployment:
    object_id: str
    blob_id: str
    url: str
    transaction_digest: str


@dataclass
class SiteStatus:
    status: str
    url: str | None = None


@dataclass
class RepoInfo:
    owner: str
    repo: str
    branch: str | None = None
    url: str = ""
    raw_url: str = ""


@dataclass
class GitRepository:
    url: str
    owner: str
    name: str
    branch: str = "main"
    private: bool = False


@dataclass
class GitHubUser:
    username: str
    name: str | None = None
    email: str | None = None
    avatar: str | None = None
    profile: str | None = None


@dataclass
class GitCommit:
    sha: str
    message: str
    author_name: str = "Unknown"
    author_email: str = ""
    author_avatar: str | None = None
    timestamp: str = ""
    branch: str = "main"


@dataclass
class FileChange:
    path: str
    status: str
    additions: int = 0
    deletions: int = 0
    old_path: str | None = None


@dataclass
class GitBranch:
    name: str
    commit: str
    is_protected: bool = False


@dataclass
class PullRequest:
    number: int
    title: str
    description: str = ""
    author: str = "Unknown"
    source: str = ""
    target: str = ""
    status: str = "open"
    created_at: str = ""
    updated_at: str = ""
    comments: int = 0
    changes: int = 0


@dataclass
class FetchProgress:
    total_files: int = 0
    fetched_files: int = 0
    skipped_binary: int = 0
    current_file: str = ""
    errors: list[str] = field(default_factory=list)

"""Abstract base class for source-control providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generator

from flowvce.file_filter import is_binary_by_extension
from flowvce.models import FetchProgress, FileRecord, RepoInfo


class SourceControlProvider(ABC):
    """Base class for code hosts the generated files are committed to."""

    # Errors that abort fetch_all_files instead of being retried
    fatal_errors: tuple[type[Exception], ...] = ()

    @abstractmethod
    def get_default_branch(self, repo_info: RepoInfo) -> str:
        """Return the default branch name for the repository."""

    @abstractmethod
    def list_files(self, repo_info: RepoInfo) -> list[FileRecord]:
        """List all files in the repository."""

    @abstractmethod
    def fetch_file_content(self, repo_info: RepoInfo, record: FileRecord) -> str:
        """Fetch the content of a single file."""

    @abstractmethod
    def create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        files: dict[str, str],
        branch: str = "main",
    ) -> str:
        """Commit ``{path: content}`` to *branch* and return the new commit sha."""

    def fetch_all_files(
        self,
        repo_info: RepoInfo,
        records: list[FileRecord],
        max_file_size: int = 1_000_000,
    ) -> Generator[FetchProgress, None, None]:
        """Fetch content for all records, yielding progress updates.

        Binary files and files above *max_file_size* bytes are skipped. A
        failed fetch is retried once before being recorded as an error.
        """
        progress = FetchProgress(total_files=len(records))

        for record in records:
            progress.current_file = record.path

            if is_binary_by_extension(record.path) or record.size > max_file_size > 0:
                progress.skipped_binary += 1
                progress.fetched_files += 1
                yield progress
                continue

            for attempt in range(2):
                try:
                    record.content = self.fetch_file_content(repo_info, record)
                    break
                except self.fatal_errors:
                    raise
                except Exception as exc:
                    if attempt == 1:
                        progress.errors.append(f"{record.path}: {exc}")

            progress.fetched_files += 1
            yield progress

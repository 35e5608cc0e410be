"""GitHub source — downloads repositories as zip archives and scans them locally.

Works against github.com and GitHub Enterprise (``/api/v3``) hosts. Either a
single ``owner/name[/branch]`` repository is scanned, or every repository the
access token can list on the host.
"""

from __future__ import annotations

import io
import logging
import tempfile
import zipfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import requests
from github import Auth, Github, GithubException
from github.Repository import Repository

from gitdetect.config.schema import DEFAULT_GITHUB_HOSTNAME
from gitdetect.findings.aggregator import reduce_and_exploit
from gitdetect.findings.models import FileRepo, Report
from gitdetect.output.yaml_report import save_report
from gitdetect.scanner.engine import FileScanner, ScanError

logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT = 300  # seconds


def api_base_url(hostname: str) -> str:
    """Return the REST API root for *hostname*."""
    if hostname == DEFAULT_GITHUB_HOSTNAME:
        return "https://api.github.com"
    return f"https://{hostname}/api/v3"


def extract_archive(content: bytes, dest: Path) -> Path:
    """Unzip a GitHub zipball into *dest*; return its single top-level directory."""
    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        names = archive.namelist()
        if not names:
            raise ScanError("Downloaded archive is empty")
        archive.extractall(dest)
    return dest / names[0].split("/", 1)[0]


class GithubFileRepository:
    """Scans one repository, or every repository visible on a GitHub host."""

    def __init__(
        self,
        file_scanner: FileScanner,
        access_token: str,
        work_dir: str,
        hostname: str = DEFAULT_GITHUB_HOSTNAME,
        repo_name: str = "",
        last_modified_cutoff: int = 0,
        client: Optional[Github] = None,
    ) -> None:
        self.file_scanner = file_scanner
        self.access_token = access_token
        self.work_dir = work_dir
        self.hostname = hostname
        self.repo_owner = self.repo_name = self.repo_branch = ""
        if repo_name:
            parts = repo_name.split("/")
            self.repo_owner, self.repo_name = parts[0], parts[1]
            if len(parts) == 3:
                self.repo_branch = parts[2]

        self.cutoff: Optional[datetime] = None
        if last_modified_cutoff > 0:
            self.cutoff = datetime.now(timezone.utc) - timedelta(days=last_modified_cutoff)

        self.client = client or Github(
            auth=Auth.Token(access_token), base_url=api_base_url(hostname)
        )
        self.scanned_repos = 0

    # ---- FileRepository ----

    def scan(self, report: Report) -> None:
        if self.repo_name:
            full_name = f"{self.repo_owner}/{self.repo_name}"
            try:
                repository = self.client.get_repo(full_name)
            except GithubException as exc:
                raise ScanError(f"Failed getting repository {full_name}: {exc.status}") from exc
            self.scan_repo(repository, report)
        else:
            self.scan_repos(report)
            logger.info("Total number of github repositories scanned: %d", self.scanned_repos)

    def scan_repos(self, report: Report) -> None:
        """Scan every repository on the host, skipping those that fail."""
        try:
            for listed in self.client.get_repos():
                try:
                    # the listing carries only a summary; fetch the full record
                    repository = self.client.get_repo(listed.id)
                except GithubException:
                    logger.error(
                        "Failed getting detailed repository data for %s, skipping this repository.",
                        listed.full_name,
                    )
                    continue

                if not self.modified_since_cutoff(repository):
                    continue

                try:
                    self.scan_repo(repository, report)
                except ScanError as exc:
                    logger.error("Scan failed on %s, skipping this repository: %s", repository.full_name, exc)
        except GithubException as exc:
            raise ScanError(f"Failed listing repositories on {self.hostname}: {exc.status}") from exc

    def modified_since_cutoff(self, repository: Repository) -> bool:
        if self.cutoff is None:
            return True
        pushed_at = repository.pushed_at
        if pushed_at is None:
            return False
        if pushed_at.tzinfo is None:
            pushed_at = pushed_at.replace(tzinfo=timezone.utc)
        return pushed_at > self.cutoff

    def scan_repo(self, repository: Repository, report: Report) -> None:
        logger.info("Scanning repo id %d %s", repository.id, repository.full_name)

        try:
            with tempfile.TemporaryDirectory(dir=self.work_dir, prefix="gitdetect-") as tmp:
                local_repo_dir = str(self.download_repo_archive(repository, Path(tmp)))
                secrets = self.file_scanner.scan(local_repo_dir)
                self.scanned_repos += 1

                if secrets:
                    defects = reduce_and_exploit(report, secrets, local_repo_dir)
                    report.add_defects(self.repo_details(repository), defects)
                    save_report(report)
        except OSError as exc:
            raise ScanError(f"Failed scanning {repository.full_name}: {exc}") from exc

    def download_repo_archive(self, repository: Repository, dest: Path) -> Path:
        try:
            if self.repo_branch:
                url = repository.get_archive_link("zipball", ref=self.repo_branch)
            else:
                url = repository.get_archive_link("zipball")
            response = requests.get(
                url,
                headers={"Authorization": f"token {self.access_token}"},
                timeout=DOWNLOAD_TIMEOUT,
            )
            response.raise_for_status()
        except (GithubException, requests.RequestException) as exc:
            raise ScanError(f"Error downloading {repository.full_name}: {exc}") from exc

        try:
            return extract_archive(response.content, dest)
        except (zipfile.BadZipFile, OSError) as exc:
            raise ScanError(f"Failed extracting archive for {repository.full_name}: {exc}") from exc

    def repo_details(self, repository: Repository) -> FileRepo:
        branch = self.repo_branch or repository.default_branch
        pushed_at = repository.pushed_at
        head: Optional[str] = None
        try:
            head = repository.get_branch(branch).commit.sha
        except GithubException:
            logger.warning("Failed getting head commit id for repository %s", repository.full_name)

        return FileRepo(
            id=repository.id,
            org=repository.owner.login,
            name=repository.name,
            branch=branch,
            head=head,
            last_push=pushed_at.strftime("%Y-%m-%d") if pushed_at else None,
        )

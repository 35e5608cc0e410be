"""Tests for the GitHub file repository, with a fake PyGithub client."""

import io
import zipfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest
import requests
from github import GithubException

from gitdetect.findings.models import Report
from gitdetect.output.yaml_report import REPORT_FILENAME
from gitdetect.repos import github as github_repo
from gitdetect.repos.github import GithubFileRepository, api_base_url, extract_archive
from gitdetect.rules.compiler import load_detection_rules
from gitdetect.scanner.engine import FileScanner, ScanError

from conftest import SECRET_A


def _zipball(files: dict, top: str = "my-org-proj-abc123") -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as archive:
        archive.writestr(f"{top}/", "")
        for name, content in files.items():
            archive.writestr(f"{top}/{name}", content)
    return buf.getvalue()


class FakeRepository:
    def __init__(self, id, name, pushed_days_ago=1, archive=b""):
        self.id = id
        self.name = name
        self.full_name = f"my-org/{name}"
        self.owner = SimpleNamespace(login="my-org")
        self.default_branch = "main"
        self.pushed_at = datetime.now(timezone.utc) - timedelta(days=pushed_days_ago)
        self.archive = archive
        self.archive_refs = []

    def get_archive_link(self, archive_format, ref=None):
        self.archive_refs.append(ref)
        return f"https://example.invalid/{self.full_name}/{archive_format}"

    def get_branch(self, branch):
        return SimpleNamespace(commit=SimpleNamespace(sha=f"sha-{branch}"))


class FakeGithub:
    def __init__(self, repos):
        self.repos = {r.id: r for r in repos}

    def get_repos(self):
        return [SimpleNamespace(id=r.id, full_name=r.full_name) for r in self.repos.values()]

    def get_repo(self, full_name_or_id):
        for repo in self.repos.values():
            if full_name_or_id in (repo.id, repo.full_name):
                return repo
        raise GithubException(404, {"message": "Not Found"}, None)


@pytest.fixture
def fake_download(monkeypatch):
    """Serve zipballs from FakeRepository.archive instead of the network."""
    by_url = {}

    def fake_get(url, headers=None, timeout=None):
        content = by_url.get(url)
        if content is None:
            raise requests.ConnectionError("unreachable")
        return SimpleNamespace(content=content, raise_for_status=lambda: None)

    monkeypatch.setattr(github_repo.requests, "get", fake_get)
    return by_url


def _register(by_url, repo):
    by_url[f"https://example.invalid/{repo.full_name}/zipball"] = repo.archive


@pytest.fixture
def scanner(rule_config_file, exploit_registry) -> FileScanner:
    return FileScanner(rules=load_detection_rules(rule_config_file, exploit_registry))


class TestHelpers:
    def test_api_base_url(self):
        assert api_base_url("github.com") == "https://api.github.com"
        assert api_base_url("git.corp.example") == "https://git.corp.example/api/v3"

    def test_extract_archive(self, tmp_path: Path):
        root = extract_archive(_zipball({"src/a.txt": "hello\n"}), tmp_path)
        assert root == tmp_path / "my-org-proj-abc123"
        assert (root / "src" / "a.txt").read_text() == "hello\n"

    def test_extract_bad_archive(self, tmp_path: Path):
        with pytest.raises(zipfile.BadZipFile):
            extract_archive(b"not a zip", tmp_path)


class TestGithubFileRepository:
    def test_single_repo_scan(self, tmp_path, scanner, fake_download):
        repo = FakeRepository(7, "proj", archive=_zipball({"conf/app.cfg": f'secret = "{SECRET_A}"\n'}))
        _register(fake_download, repo)
        source = GithubFileRepository(
            scanner, "token", str(tmp_path), repo_name="my-org/proj", client=FakeGithub([repo])
        )
        report = Report(output_dir=tmp_path)
        source.scan(report)

        ((descriptor, file_defects),) = report.repositories.items()
        assert descriptor.name == "proj"
        assert descriptor.org == "my-org"
        assert descriptor.branch == "main"
        assert descriptor.head == "sha-main"
        assert descriptor.id == 7
        assert descriptor.last_push is not None
        (defect,) = file_defects.get("conf/app.cfg")
        assert defect.lines == [1]
        assert report.defect_count == 1
        assert (tmp_path / REPORT_FILENAME).is_file()

    def test_archive_removed_after_scan(self, tmp_path, scanner, fake_download):
        repo = FakeRepository(7, "proj", archive=_zipball({"a.txt": "x\n"}))
        _register(fake_download, repo)
        GithubFileRepository(
            scanner, "token", str(tmp_path), repo_name="my-org/proj", client=FakeGithub([repo])
        ).scan(Report(output_dir=tmp_path))
        assert not any(p.name.startswith("gitdetect-") for p in tmp_path.iterdir())

    def test_branch_from_repo_name(self, tmp_path, scanner, fake_download):
        repo = FakeRepository(7, "proj", archive=_zipball({"a.txt": f'secret = "{SECRET_A}"\n'}))
        _register(fake_download, repo)
        report = Report(output_dir=tmp_path)
        GithubFileRepository(
            scanner, "token", str(tmp_path), repo_name="my-org/proj/feature", client=FakeGithub([repo])
        ).scan(report)
        assert repo.archive_refs == ["feature"]
        (descriptor,) = report.repositories
        assert descriptor.branch == "feature"

    def test_unknown_single_repo_raises(self, tmp_path, scanner):
        source = GithubFileRepository(
            scanner, "token", str(tmp_path), repo_name="my-org/missing", client=FakeGithub([])
        )
        with pytest.raises(ScanError):
            source.scan(Report(output_dir=tmp_path))

    def test_download_failure_on_single_repo_raises(self, tmp_path, scanner, fake_download):
        repo = FakeRepository(7, "proj")
        source = GithubFileRepository(
            scanner, "token", str(tmp_path), repo_name="my-org/proj", client=FakeGithub([repo])
        )
        with pytest.raises(ScanError):
            source.scan(Report(output_dir=tmp_path))

    def test_full_scan_skips_failures_and_honours_cutoff(self, tmp_path, scanner, fake_download):
        content = {"a.txt": f'secret = "{SECRET_A}"\n'}
        fresh = FakeRepository(1, "fresh", pushed_days_ago=1, archive=_zipball(content))
        stale = FakeRepository(2, "stale", pushed_days_ago=30, archive=_zipball(content))
        broken = FakeRepository(3, "broken", pushed_days_ago=1)
        for repo in (fresh, stale):
            _register(fake_download, repo)

        source = GithubFileRepository(
            scanner, "token", str(tmp_path), last_modified_cutoff=7,
            client=FakeGithub([fresh, stale, broken]),
        )
        report = Report(output_dir=tmp_path)
        source.scan(report)

        assert [d.name for d in report.repositories] == ["fresh"]
        assert source.scanned_repos == 1
        assert report.defect_count == 1

    def test_full_scan_without_cutoff(self, tmp_path, scanner, fake_download):
        content = {"a.txt": f'secret = "{SECRET_A}"\n'}
        repos = [FakeRepository(i, f"r{i}", pushed_days_ago=400, archive=_zipball(content)) for i in (1, 2)]
        for repo in repos:
            _register(fake_download, repo)
        report = Report(output_dir=tmp_path)
        GithubFileRepository(scanner, "token", str(tmp_path), client=FakeGithub(repos)).scan(report)
        # same value in the same relative file of two repositories: two defects
        assert report.defect_count == 2
        assert len(report.repositories) == 2

    def test_full_scan_continues_after_extraction_failure(self, tmp_path, scanner, fake_download, monkeypatch):
        content = {"a.txt": f'secret = "{SECRET_A}"\n'}
        bad = FakeRepository(1, "bad", archive=_zipball(content, top="bad"))
        good = FakeRepository(2, "good", archive=_zipball(content, top="good"))
        for repo in (bad, good):
            _register(fake_download, repo)

        real_extract = github_repo.extract_archive

        def extract(content, dest):
            root = real_extract(content, dest)
            if root.name == "bad":
                raise OSError(36, "File name too long")
            return root

        monkeypatch.setattr(github_repo, "extract_archive", extract)
        report = Report(output_dir=tmp_path)
        GithubFileRepository(scanner, "token", str(tmp_path), client=FakeGithub([bad, good])).scan(report)

        assert [d.name for d in report.repositories] == ["good"]
        assert report.defect_count == 1

    def test_unwritable_work_dir_is_scan_error(self, tmp_path, scanner, fake_download):
        repo = FakeRepository(7, "proj", archive=_zipball({"a.txt": "x\n"}))
        _register(fake_download, repo)
        source = GithubFileRepository(
            scanner, "token", str(tmp_path / "missing"), repo_name="my-org/proj", client=FakeGithub([repo])
        )
        with pytest.raises(ScanError):
            source.scan(Report(output_dir=tmp_path))

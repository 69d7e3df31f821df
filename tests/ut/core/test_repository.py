"""仓库列表测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from sprout.core.exceptions import RepositoryError, ValidationError
from sprout.core.repository import Repository
from sprout.utils.shell import CommandResult


def _repo(tmp_path: Path, fake_executor) -> Repository:
    return Repository(str(tmp_path / "repos/repos"), executor=fake_executor)


class TestAddRepository:
    def test_add_normalizes_url(self, tmp_path: Path, fake_executor) -> None:
        repo = _repo(tmp_path, fake_executor)
        tag = repo.add_repository("https://github.com/owner/Foo.git")
        assert tag == "HEAD"
        assert repo.list_repositories() == ["https://github.com/owner/Foo"]

    def test_returns_latest_tag(self, tmp_path: Path, fake_executor) -> None:
        fake_executor.on(lambda args, cwd: CommandResult(
            0, "aaa\trefs/tags/v1.0\nbbb\trefs/tags/v1.1\n", "",
        ) if args[:2] == ["git", "ls-remote"] else None)
        repo = _repo(tmp_path, fake_executor)
        assert repo.add_repository("https://github.com/owner/foo") == "v1.1"

    def test_duplicate_is_skipped(self, tmp_path: Path, fake_executor) -> None:
        repo = _repo(tmp_path, fake_executor)
        repo.add_repository("https://github.com/owner/foo")
        repo.add_repository("https://github.com/owner/foo.git")
        assert repo.list_repositories() == ["https://github.com/owner/foo"]

    def test_add_from_file(self, tmp_path: Path, fake_executor) -> None:
        src = tmp_path / "list.txt"
        src.write_text("https://a.example/x/one\n\nhttps://a.example/x/two.git\n")
        repo = _repo(tmp_path, fake_executor)
        assert repo.add_repositories_from_file(str(src)) == 2
        assert repo.list_repositories() == ["https://a.example/x/one", "https://a.example/x/two"]

    def test_add_from_missing_file(self, tmp_path: Path, fake_executor) -> None:
        with pytest.raises(RepositoryError, match="仓库列表文件不存在"):
            _repo(tmp_path, fake_executor).add_repositories_from_file(str(tmp_path / "nope"))

    def test_add_from_url_rejects_file_scheme(self, tmp_path: Path, fake_executor) -> None:
        with pytest.raises(ValidationError):
            _repo(tmp_path, fake_executor).add_repositories_from_url("file:///etc/passwd")


class TestQueries:
    @pytest.fixture()
    def repo(self, tmp_path: Path, fake_executor) -> Repository:
        r = _repo(tmp_path, fake_executor)
        r.add_repository("https://github.com/owner/Ripgrep")
        r.add_repository("https://github.com/owner/fd")
        r.add_repository("https://github.com/other/ripgrep-all")
        return r

    def test_find_package_url_exact_name(self, repo: Repository) -> None:
        assert repo.find_package_url("ripgrep") == "https://github.com/owner/Ripgrep"
        assert repo.find_package_url("fd") == "https://github.com/owner/fd"
        assert repo.find_package_url("bat") is None

    def test_search_case_insensitive(self, repo: Repository) -> None:
        assert repo.search_repositories("RIPGREP") == [
            "https://github.com/owner/Ripgrep",
            "https://github.com/other/ripgrep-all",
        ]

    def test_remove(self, repo: Repository) -> None:
        repo.remove_repository("https://github.com/owner/fd.git")
        assert "https://github.com/owner/fd" not in repo.list_repositories()

    def test_remove_missing(self, repo: Repository) -> None:
        with pytest.raises(RepositoryError, match="仓库不存在"):
            repo.remove_repository("https://github.com/owner/bat")

"""VersionManager 单元测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from sprout.core.exceptions import ValidationError
from sprout.core.version_manager import VersionManager


def _install(pkgs: Path, name: str, *versions: str) -> None:
    for v in versions:
        (pkgs / name / v).mkdir(parents=True)


class TestVersionManager:
    def test_paths(self, tmp_path: Path) -> None:
        vm = VersionManager(str(tmp_path / "pkgs"), str(tmp_path / "build"))
        assert vm.package_path("foo", "v1") == tmp_path / "pkgs/foo/v1"
        assert vm.build_path("foo", "HEAD") == tmp_path / "build/foo/HEAD"

    def test_is_installed(self, tmp_path: Path) -> None:
        vm = VersionManager(str(tmp_path / "pkgs"), str(tmp_path / "build"))
        assert not vm.is_installed("foo")
        _install(tmp_path / "pkgs", "foo", "v1")
        assert vm.is_installed("foo")
        assert vm.is_installed("foo", "v1")
        assert not vm.is_installed("foo", "v2")

    def test_installed_versions_sorted(self, tmp_path: Path) -> None:
        vm = VersionManager(str(tmp_path / "pkgs"), str(tmp_path / "build"))
        _install(tmp_path / "pkgs", "foo", "v2", "v1")
        (tmp_path / "pkgs/foo/stray.txt").write_text("x")
        assert vm.installed_versions("foo") == ["v1", "v2"]

    def test_latest_installed_prefers_head(self, tmp_path: Path) -> None:
        vm = VersionManager(str(tmp_path / "pkgs"), str(tmp_path / "build"))
        _install(tmp_path / "pkgs", "foo", "v9", "HEAD")
        assert vm.latest_installed("foo") == "HEAD"

    def test_latest_installed_lexicographic(self, tmp_path: Path) -> None:
        vm = VersionManager(str(tmp_path / "pkgs"), str(tmp_path / "build"))
        _install(tmp_path / "pkgs", "foo", "v1.2", "v1.10")
        # 纯字典序比较，不解析语义化版本
        assert vm.latest_installed("foo") == "v1.2"

    def test_latest_installed_none(self, tmp_path: Path) -> None:
        vm = VersionManager(str(tmp_path / "pkgs"), str(tmp_path / "build"))
        assert vm.latest_installed("foo") is None

    def test_list_all_installed(self, tmp_path: Path) -> None:
        vm = VersionManager(str(tmp_path / "pkgs"), str(tmp_path / "build"))
        assert vm.list_all_installed() == []
        _install(tmp_path / "pkgs", "bar", "HEAD")
        _install(tmp_path / "pkgs", "foo", "v1", "v2")
        items = [(p.name, p.version) for p in vm.list_all_installed()]
        assert items == [("bar", "HEAD"), ("foo", "v1"), ("foo", "v2")]


class TestStorePathLabels:
    @pytest.mark.parametrize("bad", ["", ".", "..", "a/b", "../other"])
    def test_bad_version_rejected(self, tmp_path: Path, bad: str) -> None:
        _install(tmp_path / "pkgs", "foo", "v1")
        vm = VersionManager(str(tmp_path / "pkgs"), str(tmp_path / "build"))
        with pytest.raises(ValidationError, match="无效的版本"):
            vm.package_path("foo", bad)
        if bad:
            # 空版本等同于未指定版本
            with pytest.raises(ValidationError):
                vm.is_installed("foo", bad)

    @pytest.mark.parametrize("bad", ["", ".", "..", "a/b"])
    def test_bad_name_rejected(self, tmp_path: Path, bad: str) -> None:
        vm = VersionManager(str(tmp_path / "pkgs"), str(tmp_path / "build"))
        with pytest.raises(ValidationError, match="无效的包名"):
            vm.installed_versions(bad)
        with pytest.raises(ValidationError):
            vm.is_installed(bad)

    def test_dotted_tag_allowed(self, tmp_path: Path) -> None:
        vm = VersionManager(str(tmp_path / "pkgs"), str(tmp_path / "build"))
        assert vm.package_path("foo", "v1.2..3") == tmp_path / "pkgs/foo/v1.2..3"

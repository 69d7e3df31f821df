"""构建产物分类测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from sprout.services.install.scanner import FileScanner, is_header, is_library


def _touch(path: Path, mode: int = 0o644) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("")
    path.chmod(mode)
    return path


class TestNaming:
    @pytest.mark.parametrize("name", ["libfoo.so", "libfoo.a", "foo.o", "libfoo.so.1.2.3", "Qt.prl"])
    def test_libraries(self, name: str) -> None:
        assert is_library(name)

    @pytest.mark.parametrize("name", ["foo.h", "foo.hpp", "foo.hxx", "foo.h++"])
    def test_headers(self, name: str) -> None:
        assert is_header(name)

    def test_plain_files(self) -> None:
        assert not is_library("README.md")
        assert not is_header("main.c")


class TestScan:
    def test_classifies_loose_files(self, tmp_path: Path) -> None:
        exe = _touch(tmp_path / "tool", 0o755)
        lib = _touch(tmp_path / "out/libfoo.so.1")
        hdr = _touch(tmp_path / "src/foo.h")
        _touch(tmp_path / "README.md")
        s = FileScanner().scan(tmp_path)
        assert s.executables == [str(exe)]
        assert s.libraries == [str(lib)]
        assert s.headers == [str(hdr)]

    def test_include_dir_captured_not_header(self, tmp_path: Path) -> None:
        _touch(tmp_path / "include/foo.h")
        s = FileScanner().scan(tmp_path)
        assert s.include_dirs == [str(tmp_path / "include")]
        assert s.headers == []

    def test_bin_and_lib_dirs(self, tmp_path: Path) -> None:
        _touch(tmp_path / "bin/tool", 0o755)
        _touch(tmp_path / "lib64/libx.so")
        s = FileScanner().scan(tmp_path)
        assert s.bin_dirs == [str(tmp_path / "bin")]
        assert s.lib_dirs == [str(tmp_path / "lib64")]
        assert s.executables == []
        assert s.libraries == []

    def test_special_dirs_deduplicated(self, tmp_path: Path) -> None:
        _touch(tmp_path / "include/a.h")
        _touch(tmp_path / "include/b.h")
        assert FileScanner().scan(tmp_path).include_dirs == [str(tmp_path / "include")]

    def test_nested_special_dirs_each_captured(self, tmp_path: Path) -> None:
        _touch(tmp_path / "a/include/x.h")
        _touch(tmp_path / "b/include/y.h")
        s = FileScanner().scan(tmp_path)
        assert s.include_dirs == [str(tmp_path / "a/include"), str(tmp_path / "b/include")]

    def test_bldit_and_git_ignored(self, tmp_path: Path) -> None:
        _touch(tmp_path / "bldit", 0o755)
        _touch(tmp_path / ".git/hooks/pre-commit", 0o755)
        s = FileScanner().scan(tmp_path)
        assert s.empty

    def test_executable_precedes_library_rule(self, tmp_path: Path) -> None:
        so = _touch(tmp_path / "libplugin.so", 0o755)
        s = FileScanner().scan(tmp_path)
        assert s.executables == [str(so)]
        assert s.libraries == []

"""命令行端到端测试（CliRunner + 假执行器）"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from sprout import __version__
from sprout.cli import main
from sprout.core.config import Config
from sprout.utils.logger import reset_logging
from sprout.utils.shell import CommandResult

URL = "https://git.example.com/dev/hello"


@pytest.fixture(autouse=True)
def _clean_logging():
    yield
    reset_logging()


@pytest.fixture()
def root(tmp_path: Path) -> Path:
    return tmp_path / "root"


@pytest.fixture()
def cli(tmp_path: Path, root: Path, fake_executor):
    """调用 CLI 的快捷函数，自动带上指向 tmp_path 的配置文件"""
    cfg_file = tmp_path / "config.yml"
    cfg_file.write_text(f"prefix: {root}\n", encoding="utf-8")
    runner = CliRunner()

    def invoke(*args: str):
        return runner.invoke(main, ["--config", str(cfg_file), *args])

    return invoke


@pytest.fixture()
def cfg(root: Path) -> Config:
    return Config.rooted(root)


def _serve_hello(executor) -> None:
    def clone(args: list[str], cwd: str) -> CommandResult | None:
        if args[:1] != ["git"] or "clone" not in args:
            return None
        dest = Path(args[-1])
        dest.mkdir(parents=True)
        (dest / "bldit").write_text("bldit() { :; }\n")
        (dest / "hello").write_text("#!/bin/sh\necho hello\n")
        (dest / "hello").chmod(0o755)
        return CommandResult(0, "", "")

    executor.on(clone)


class TestBasics:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_config_prints_rooted_dirs(self, cli, root: Path) -> None:
        result = cli("config")
        assert result.exit_code == 0
        assert f"pkgs_dir: {root}/var/sprout/pkgs" in result.output
        assert "require_root: false" in result.output

    def test_bad_config_file(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yml"
        bad.write_text("a: [\n")
        result = CliRunner().invoke(main, ["--config", str(bad), "list"])
        assert result.exit_code == 1
        assert "[CONFIG_ERROR]" in result.output


class TestRepoCommands:
    def test_add_search_remove(self, cli) -> None:
        assert cli("add-repo", URL + ".git").exit_code == 0

        result = cli("s", "hel")
        assert result.exit_code == 0
        assert URL in result.output

        result = cli("rr", "hello")
        assert result.exit_code == 0
        assert "仓库已删除" in result.output
        assert "未找到匹配的包: hel" in cli("search", "hel").output

    def test_add_from_file(self, cli, tmp_path: Path, cfg: Config) -> None:
        lst = tmp_path / "repos.txt"
        lst.write_text(f"{URL}\nhttps://git.example.com/dev/other\n")
        result = cli("arp", str(lst))
        assert result.exit_code == 0
        assert "已处理 2 个仓库" in result.output
        assert Path(cfg.repos_file).read_text().splitlines() == [URL, "https://git.example.com/dev/other"]

    def test_remove_missing_repo(self, cli) -> None:
        result = cli("remove-repo", "https://git.example.com/dev/none")
        assert result.exit_code == 1
        assert "[REPOSITORY_ERROR]" in result.output


class TestPackageCommands:
    def test_install_list_versions_remove(self, cli, cfg: Config, fake_executor) -> None:
        _serve_hello(fake_executor)
        cli("ar", URL)

        result = cli("i", "hello")
        assert result.exit_code == 0, result.output
        assert "安装完成: hello:HEAD (bldit)" in result.output
        link = Path(cfg.bin_dir) / "hello"
        assert os.readlink(link) == str(Path(cfg.pkgs_dir) / "hello/HEAD/hello")

        result = cli("l")
        assert "hello" in result.output and "HEAD" in result.output

        result = cli("v", "hello")
        assert "HEAD <- 当前" in result.output

        result = cli("f", "hello")
        assert str(Path(cfg.pkgs_dir) / "hello/HEAD/hello") in result.output

        result = cli("r", "hello")
        assert result.exit_code == 0
        assert not link.is_symlink()

    def test_install_repo_with_version_and_switch(self, cli, cfg: Config, fake_executor) -> None:
        _serve_hello(fake_executor)
        assert cli("ir", URL, "--version", "v1").exit_code == 0
        assert cli("ir", URL, "--version", "v2").exit_code == 0

        result = cli("sw", "hello:v1")
        assert result.exit_code == 0
        assert "已切换: hello:v1" in result.output
        assert "v1 <- 当前" in cli("versions", "hello").output

    def test_install_unknown(self, cli) -> None:
        result = cli("install", "ghost")
        assert result.exit_code == 1
        assert "[PACKAGE_NOT_FOUND] 包不存在: ghost" in result.output

    def test_remove_not_installed(self, cli) -> None:
        result = cli("remove", "ghost:v1")
        assert result.exit_code == 1
        assert "包未安装: ghost:v1" in result.output

    def test_remove_rejects_bad_label(self, cli) -> None:
        for target in (":", "ghost:..", "../../etc"):
            result = cli("remove", target)
            assert result.exit_code == 1
            assert "[VALIDATION_ERROR]" in result.output

    def test_list_empty(self, cli) -> None:
        assert "没有已安装的包" in cli("list").output


class TestMiscCommands:
    def test_detect(self, cli, tmp_path: Path) -> None:
        project = tmp_path / "proj"
        project.mkdir()
        assert "未检测到构建系统" in cli("detect", str(project)).output
        (project / "meson.build").write_text("")
        (project / "build.ninja").write_text("")
        out = cli("detect", str(project)).output
        assert "Meson" in out
        assert "Ninja" not in out

    def test_desktop(self, cli, cfg: Config) -> None:
        result = cli("desktop", "hello")
        assert result.exit_code == 1
        (Path(cfg.pkgs_dir) / "hello/HEAD").mkdir(parents=True)
        result = cli("desktop", "hello")
        assert result.exit_code == 0
        assert (Path(cfg.apps_dir) / "hello.desktop").exists()

    def test_root_required(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        cfg_file = tmp_path / "c.yml"
        cfg_file.write_text(f"prefix: {tmp_path}\nrequire_root: true\n")
        monkeypatch.setattr("os.geteuid", lambda: 1000)
        result = CliRunner().invoke(main, ["--config", str(cfg_file), "add-repo", URL])
        assert result.exit_code == 1
        assert "root 权限" in result.output

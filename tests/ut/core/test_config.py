"""配置与异常体系测试"""

from __future__ import annotations

from pathlib import Path

import pytest

import sprout.core.config as cfgmod
from sprout.core.config import Config, get_config, init_config, set_config
from sprout.core.exceptions import (
    BuildError,
    ConfigError,
    DependencyError,
    PackageNotFoundError,
    SproutError,
)


class TestConfig:
    def test_defaults(self) -> None:
        cfg = Config()
        assert cfg.pkgs_dir == "/var/sprout/pkgs"
        assert cfg.bin_dir == "/usr/bin"
        assert cfg.repos_file == "/etc/sprout/repos/repos"
        assert cfg.require_root is True

    def test_rooted_puts_everything_under_prefix(self, tmp_path: Path) -> None:
        cfg = Config.rooted(tmp_path)
        for d in cfg.essential_dirs():
            assert d.startswith(str(tmp_path))
        assert cfg.require_root is False

    def test_from_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        cfg = Config.from_file(str(tmp_path / "nope.yml"))
        assert cfg == Config()

    def test_from_file_with_prefix_and_overrides(self, tmp_path: Path) -> None:
        f = tmp_path / "config.yml"
        f.write_text(
            f"prefix: {tmp_path / 'root'}\n"
            "bin_dir: /opt/bin\n"
            "mirror: https://example.com\n",
            encoding="utf-8",
        )
        cfg = Config.from_file(str(f))
        assert cfg.pkgs_dir == str(tmp_path / "root/var/sprout/pkgs")
        assert cfg.bin_dir == "/opt/bin"
        assert cfg.extra == {"mirror": "https://example.com"}

    def test_invalid_yaml_raises_config_error(self, tmp_path: Path) -> None:
        f = tmp_path / "config.yml"
        f.write_text("a: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="配置文件无法读取"):
            Config.from_file(str(f))

    def test_to_dict_round_trips_fields(self) -> None:
        d = Config().to_dict()
        assert d["deps_dir"] == "/etc/sprout/deps"
        assert "extra" in d


class TestGlobalConfig:
    def test_init_from_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        f = tmp_path / "c.yml"
        f.write_text("bin_dir: /custom/bin\n", encoding="utf-8")
        monkeypatch.setattr(cfgmod, "_current", None)
        monkeypatch.setenv(cfgmod.CONFIG_ENV_VAR, str(f))
        cfg = init_config()
        assert cfg.bin_dir == "/custom/bin"
        assert get_config() is cfg

    def test_get_config_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(cfgmod, "_current", None)
        assert get_config() == Config()

    def test_set_config(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setattr(cfgmod, "_current", None)
        cfg = Config.rooted(tmp_path)
        set_config(cfg)
        assert get_config() is cfg


class TestExceptions:
    def test_codes(self) -> None:
        assert BuildError("x").code == "BUILD_FAILED"
        assert DependencyError("x").code == "DEPENDENCY_ERROR"
        assert ConfigError("x").code == "CONFIG_ERROR"

    def test_all_inherit_base(self) -> None:
        assert isinstance(PackageNotFoundError("foo"), SproutError)

    def test_package_not_found_default_message(self) -> None:
        e = PackageNotFoundError("foo")
        assert str(e) == "包不存在: foo"
        assert e.package_name == "foo"

    def test_build_error_carries_build_system(self) -> None:
        e = BuildError("boom", "CMake")
        assert e.build_system == "CMake"

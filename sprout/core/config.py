"""集中配置管理

所有目录与文件位置都是配置而非硬编码常量，组件通过构造参数接收。
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path

import yaml

from sprout.core.exceptions import ConfigError
from sprout.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "/etc/sprout/config.yml"
CONFIG_ENV_VAR = "SPROUT_CONFIG"


@dataclass
class Config:
    """sprout 全局配置"""

    # 包存储
    root_dir: str = "/var/sprout"
    pkgs_dir: str = "/var/sprout/pkgs"
    build_dir: str = "/var/sprout/build"

    # 系统目录
    bin_dir: str = "/usr/bin"
    lib_dir: str = "/usr/lib"
    include_dir: str = "/usr/include"
    apps_dir: str = "/usr/share/applications"

    # sprout 自身配置
    config_dir: str = "/etc/sprout"
    repos_dir: str = "/etc/sprout/repos"
    deps_dir: str = "/etc/sprout/deps"
    bldit_dir: str = "/etc/sprout/bldit"
    repos_file: str = "/etc/sprout/repos/repos"

    # 修改系统目录的命令是否要求 root
    require_root: bool = True

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"配置文件无法读取: {path}: {e}") from e
        if not data:
            return cls()
        prefix = data.pop("prefix", None)
        base = cls.rooted(prefix) if prefix else cls()
        known = {f.name for f in cls.__dataclass_fields__.values()} - {"extra"}
        for k, v in data.items():
            if k in known:
                setattr(base, k, v)
            else:
                base.extra[k] = v
        return base

    @classmethod
    def rooted(cls, prefix: str | Path) -> Config:
        """把所有目录放到同一个前缀下（非特权安装 / 测试）"""
        p = Path(prefix)
        return cls(
            root_dir=str(p / "var/sprout"),
            pkgs_dir=str(p / "var/sprout/pkgs"),
            build_dir=str(p / "var/sprout/build"),
            bin_dir=str(p / "usr/bin"),
            lib_dir=str(p / "usr/lib"),
            include_dir=str(p / "usr/include"),
            apps_dir=str(p / "usr/share/applications"),
            config_dir=str(p / "etc/sprout"),
            repos_dir=str(p / "etc/sprout/repos"),
            deps_dir=str(p / "etc/sprout/deps"),
            bldit_dir=str(p / "etc/sprout/bldit"),
            repos_file=str(p / "etc/sprout/repos/repos"),
            require_root=False,
        )

    def essential_dirs(self) -> list[str]:
        """初始化时必须存在的目录"""
        return [
            self.root_dir, self.pkgs_dir, self.build_dir,
            self.bin_dir, self.lib_dir, self.include_dir,
            self.config_dir, self.repos_dir, self.deps_dir,
            self.bldit_dir, self.apps_dir,
        ]

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "") -> Config:
    """从文件初始化全局配置（未指定路径时读取 SPROUT_CONFIG 环境变量）"""
    global _current  # noqa: PLW0603
    path = path or os.getenv(CONFIG_ENV_VAR, "") or DEFAULT_CONFIG_FILE
    _current = Config.from_file(path)
    logger.debug("配置已加载: %s", path)
    return _current


def set_config(cfg: Config) -> None:
    """直接替换全局配置（用于测试或编程式调用）"""
    global _current  # noqa: PLW0603
    _current = cfg

"""核心数据模型

包版本、扫描结果、已安装条目、软链接操作结果等领域实体集中定义。
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from sprout.core.exceptions import ValidationError

# 伪版本号: 默认分支最新提交
HEAD = "HEAD"

# 自定义构建脚本文件名（同时也是脚本内被调用的函数名）
BLDIT_SCRIPT = "bldit"


def check_path_component(value: str, what: str) -> str:
    """包名与版本标签会直接拼进存储路径，只允许单个普通路径分段"""
    if not value or value in (".", "..") or any(c in value for c in ("/", os.sep, "\0")):
        raise ValidationError(f"无效的{what}: {value!r}")
    return value


@dataclass(frozen=True)
class PackageVersion:
    """(包名, 版本标签)

    版本标签是 HEAD 或不透明的 tag 字符串，任何地方都不做语义化版本解析。
    安装目录与构建目录均由 store/{pkgs|build}/<name>/<version> 确定性推导。
    """

    name: str
    version: str = HEAD

    def __post_init__(self) -> None:
        check_path_component(self.name, "包名")
        check_path_component(self.version, "版本")

    @property
    def label(self) -> str:
        return f"{self.name}:{self.version}"

    def install_dir(self, pkgs_dir: str | Path) -> Path:
        return Path(pkgs_dir) / self.name / self.version

    def build_dir(self, build_dir: str | Path) -> Path:
        return Path(build_dir) / self.name / self.version


@dataclass
class InstalledPackage:
    """包存储中一个已安装版本"""

    name: str
    version: str
    path: str


@dataclass
class ScannedFileSet:
    """一次构建目录遍历的分类结果（不持久化，每次安装重新计算）

    特殊目录按绝对路径去重；文件列表保持遍历顺序。
    """

    executables: list[str] = field(default_factory=list)
    libraries: list[str] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)
    include_dirs: list[str] = field(default_factory=list)
    lib_dirs: list[str] = field(default_factory=list)
    bin_dirs: list[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not any((
            self.executables, self.libraries, self.headers,
            self.include_dirs, self.lib_dirs, self.bin_dirs,
        ))

    def summary(self) -> dict[str, int]:
        return {
            "executables": len(self.executables),
            "libraries": len(self.libraries),
            "headers": len(self.headers),
            "include_dirs": len(self.include_dirs),
            "lib_dirs": len(self.lib_dirs),
            "bin_dirs": len(self.bin_dirs),
        }


class LinkOutcome(Enum):
    """单个软链接写入的结果"""

    CREATED = "created"        # 新建或重新指向
    UNCHANGED = "unchanged"    # 已指向目标，幂等跳过
    SKIPPED = "skipped"        # 目标位置是目录，不碰
    FAILED = "failed"          # 文件系统错误


@dataclass
class VersionStatus:
    """某个已安装版本及其是否为当前激活版本"""

    version: str
    active: bool = False

"""依赖条目数据模型"""

from __future__ import annotations

from dataclasses import dataclass

# 克隆仓库根目录中的依赖声明文件名
PKGDEPS_FILE = "pkgdeps"


@dataclass(frozen=True)
class Dependency:
    """pkgdeps 中的一行: url [version]"""

    url: str
    name: str
    version: str | None = None

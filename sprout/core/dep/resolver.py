"""依赖查询

职责:
- 汇总包的依赖（克隆目录中的 pkgdeps + 配置目录中的 <name>.pkgdeps）
- 查找依赖某个包的其他已安装包（删除前检查）
- 基于「安装中」栈的循环依赖检测

不做拓扑排序，也不做版本约束求解: 依赖按文件顺序逐个处理。
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from pathlib import Path

from sprout.core.dep.models import PKGDEPS_FILE, Dependency
from sprout.core.dep.parser import parse_dependency_file
from sprout.core.exceptions import DependencyError

logger = logging.getLogger(__name__)


class DependencyResolver:
    """依赖查询器"""

    def __init__(self, deps_dir: str, build_dir: str, pkgs_dir: str) -> None:
        self.deps_dir = Path(deps_dir)
        self.build_dir = Path(build_dir)
        self.pkgs_dir = Path(pkgs_dir)

    def custom_pkgdeps(self, name: str) -> Path:
        return self.deps_dir / f"{name}.pkgdeps"

    def get_dependencies(self, name: str, project_dir: str | Path) -> list[Dependency]:
        """项目自带声明在前，用户自定义声明在后"""
        deps = parse_dependency_file(Path(project_dir) / PKGDEPS_FILE)
        deps += parse_dependency_file(self.custom_pkgdeps(name))
        return deps

    @staticmethod
    def resolve_dependency_order(deps: list[Dependency]) -> list[Dependency]:
        """保持声明顺序原样返回"""
        return list(deps)

    @staticmethod
    def check_circular(name: str, installing: Collection[str]) -> None:
        """name 已在安装栈上则构成循环依赖"""
        if name in installing:
            chain = " -> ".join([*installing, name])
            raise DependencyError(f"检测到循环依赖: {chain}", package_name=name)

    def is_dependency_of(self, name: str, dependent: str) -> bool:
        """dependent 的任一版本构建目录或自定义声明中是否声明了 name"""
        sources = [self.custom_pkgdeps(dependent)]
        dep_build = self.build_dir / dependent
        if dep_build.is_dir():
            sources += [
                d / PKGDEPS_FILE for d in sorted(dep_build.iterdir()) if d.is_dir()
            ]
        return any(
            dep.name == name
            for src in sources
            for dep in parse_dependency_file(src)
        )

    def find_dependents(self, name: str) -> list[str]:
        """依赖 name 的其他已安装包"""
        if not self.pkgs_dir.is_dir():
            return []
        dependents = [
            pkg.name for pkg in sorted(self.pkgs_dir.iterdir())
            if pkg.is_dir() and pkg.name != name and self.is_dependency_of(name, pkg.name)
        ]
        if dependents:
            logger.debug("%s 被以下包依赖: %s", name, ", ".join(dependents))
        return dependents

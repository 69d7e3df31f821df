"""已安装版本查询 — 包存储的只读视图

每次调用都重新读取文件系统，不做缓存。
「已安装」当且仅当 pkgs/<name>/<version> 目录存在。
"""

from __future__ import annotations

from pathlib import Path

from sprout.core.models import HEAD, InstalledPackage, PackageVersion, check_path_component


class VersionManager:
    """包存储只读查询"""

    def __init__(self, pkgs_dir: str, build_dir: str) -> None:
        self.pkgs_dir = Path(pkgs_dir)
        self.build_dir = Path(build_dir)

    def package_path(self, name: str, version: str) -> Path:
        return PackageVersion(name, version).install_dir(self.pkgs_dir)

    def build_path(self, name: str, version: str) -> Path:
        return PackageVersion(name, version).build_dir(self.build_dir)

    def is_installed(self, name: str, version: str | None = None) -> bool:
        """不指定版本时，只要包目录存在即视为已安装"""
        if version:
            return self.package_path(name, version).is_dir()
        return (self.pkgs_dir / check_path_component(name, "包名")).is_dir()

    def installed_versions(self, name: str) -> list[str]:
        """列出包的所有已安装版本（按名称排序）"""
        pkg_dir = self.pkgs_dir / check_path_component(name, "包名")
        if not pkg_dir.is_dir():
            return []
        return sorted(d.name for d in pkg_dir.iterdir() if d.is_dir())

    def latest_installed(self, name: str) -> str | None:
        """HEAD 优先；否则取版本标签的字典序最大值（不做语义化版本比较）"""
        versions = self.installed_versions(name)
        if not versions:
            return None
        if HEAD in versions:
            return HEAD
        return max(versions)

    def list_all_installed(self) -> list[InstalledPackage]:
        if not self.pkgs_dir.is_dir():
            return []
        result: list[InstalledPackage] = []
        for pkg_dir in sorted(self.pkgs_dir.iterdir()):
            if not pkg_dir.is_dir():
                continue
            for version in self.installed_versions(pkg_dir.name):
                result.append(InstalledPackage(
                    name=pkg_dir.name,
                    version=version,
                    path=str(pkg_dir / version),
                ))
        return result

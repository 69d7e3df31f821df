"""包管理编排 — install / remove / update / switch

install 流程: 克隆 → 依赖（深度优先、同步）→ 构建 → 安装 → 发布软链接。
remove 与 switch 只经由 VersionManager + SymlinkManager，不涉及构建与安装。

依赖安装用显式的「安装中」栈记录当前调用链，同一包再次入栈即判定循环依赖。
整个过程单线程顺序执行，对同一包存储的并发调用没有互斥保护。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from sprout.core.config import Config
from sprout.core.dep import DependencyResolver
from sprout.core.exceptions import (
    DependencyError,
    InstallError,
    PackageNotFoundError,
)
from sprout.core.models import HEAD, InstalledPackage, PackageVersion, VersionStatus
from sprout.core.repository import Repository
from sprout.core.version_manager import VersionManager
from sprout.services.build import Builder
from sprout.services.install import Installer, SymlinkManager
from sprout.utils.fs import ensure_dir, remove_dir, walk_dir
from sprout.utils.git import extract_package_name, git_clone
from sprout.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


def parse_package_spec(spec: str) -> PackageVersion:
    """"name[:version]" → PackageVersion，缺省版本为 HEAD"""
    name, _, version = spec.partition(":")
    return PackageVersion(name=name.strip(), version=version.strip() or HEAD)


@dataclass
class InstallOutcome:
    """一次 install_from_url 的结果"""

    package: PackageVersion
    build_system: str = ""
    symlinks: int = 0
    skipped: bool = False


class PackageManager:
    """包管理编排器"""

    def __init__(
        self,
        config: Config,
        *,
        repository: Repository,
        versions: VersionManager,
        dependencies: DependencyResolver,
        builder: Builder,
        installer: Installer,
        symlinks: SymlinkManager,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.config = config
        self.repository = repository
        self.versions = versions
        self.dependencies = dependencies
        self.builder = builder
        self.installer = installer
        self.symlinks = symlinks
        self._executor = executor
        # 当前调用链上正在安装的包名（栈顶在末尾）
        self._installing: list[str] = []

    def initialize(self) -> None:
        for d in self.config.essential_dirs():
            ensure_dir(d)
        self.repository.initialize()

    # ---- 安装 ----

    def install(self, spec: str) -> InstallOutcome:
        """按包名安装（从仓库列表解析 URL）"""
        self.initialize()
        pkg = parse_package_spec(spec)
        if self.versions.is_installed(pkg.name, pkg.version):
            logger.info("%s 已安装", pkg.label)
            return InstallOutcome(package=pkg, skipped=True)

        url = self.repository.find_package_url(pkg.name)
        if url is None:
            raise PackageNotFoundError(pkg.name)
        return self.install_from_url(url, pkg.version)

    def install_from_url(self, url: str, version: str = HEAD) -> InstallOutcome:
        """从 git URL 克隆、构建并安装指定版本"""
        self.initialize()
        name = extract_package_name(url)
        pkg = PackageVersion(name, version)
        DependencyResolver.check_circular(name, self._installing)

        self._installing.append(name)
        try:
            return self._install_pipeline(pkg, url)
        finally:
            self._installing.pop()

    def _install_pipeline(self, pkg: PackageVersion, url: str) -> InstallOutcome:
        build_dir = self.versions.build_path(pkg.name, pkg.version)
        install_dir = self.versions.package_path(pkg.name, pkg.version)

        remove_dir(build_dir)
        ensure_dir(build_dir.parent)
        logger.info("克隆 %s ...", pkg.label)
        cloned = git_clone(
            url, build_dir,
            branch=None if pkg.version == HEAD else pkg.version,
            depth=1,
            executor=self._executor,
        )
        if not cloned:
            raise InstallError(f"克隆仓库失败: {url}", pkg.name)

        self._install_dependencies(pkg.name, build_dir)

        logger.info("构建 %s ...", pkg.label)
        build_system = self.builder.build(pkg.name, build_dir, install_dir, url, pkg.version)

        logger.info("安装 %s ...", pkg.label)
        count = self.installer.install(pkg.name, build_dir, install_dir, pkg.version)
        logger.info("安装完成: %s", pkg.label)
        return InstallOutcome(package=pkg, build_system=build_system, symlinks=count)

    def _install_dependencies(self, name: str, build_dir: Path) -> None:
        deps = self.dependencies.resolve_dependency_order(
            self.dependencies.get_dependencies(name, build_dir),
        )
        if not deps:
            return
        logger.info("安装 %d 个依赖 ...", len(deps))
        for dep in deps:
            version = dep.version or HEAD
            if self.versions.is_installed(dep.name, dep.version):
                logger.info("依赖已安装: %s", dep.name)
                continue
            try:
                self.install_from_url(dep.url, version)
            except DependencyError:
                raise
            except Exception as e:
                raise DependencyError(
                    f"{name} 的依赖 {dep.name}:{version} 安装失败: {e}", package_name=dep.name,
                ) from e

    # ---- 删除 ----

    def remove(self, name: str, version: str | None = None, *, purge: bool = False) -> PackageVersion:
        """删除一个已安装版本（未指定版本时取 latest_installed）"""
        self.initialize()
        target = version or self.versions.latest_installed(name)
        if not target or not self.versions.is_installed(name, target):
            label = f"{name}:{target}" if target else name
            raise PackageNotFoundError(name, f"包未安装: {label}")

        dependents = self.dependencies.find_dependents(name)
        if dependents:
            raise DependencyError(
                f"无法删除 {name}: 被以下包依赖: {', '.join(dependents)}", package_name=name,
            )

        pkg = PackageVersion(name, target)
        install_dir = self.versions.package_path(name, target)
        removed = self.symlinks.remove_symlinks(install_dir, name, target)
        logger.info("已删除 %d 个软链接", removed)

        remove_dir(install_dir)
        remove_dir(self.versions.build_path(name, target))
        self._prune_empty(Path(self.config.pkgs_dir) / name)
        self._prune_empty(Path(self.config.build_dir) / name)

        if purge and not self.versions.installed_versions(name):
            self._purge_system_files(name)
        logger.info("已删除: %s", pkg.label)
        return pkg

    @staticmethod
    def _prune_empty(path: Path) -> None:
        if path.is_dir() and not any(path.iterdir()):
            path.rmdir()

    def _purge_system_files(self, name: str) -> None:
        for path in (
            Path(self.config.include_dir) / name,
            Path(self.config.lib_dir) / name,
            self.installer.desktop_file_path(name),
        ):
            if remove_dir(path):
                logger.info("已清除: %s", path)

    # ---- 查询 / 维护 ----

    def update(self) -> list[InstalledPackage]:
        """重新安装每个可解析 URL 的已安装版本，返回被更新的条目"""
        self.initialize()
        installed = self.versions.list_all_installed()
        logger.info("更新 %d 个包 ...", len(installed))
        updated: list[InstalledPackage] = []
        for item in installed:
            url = self.repository.find_package_url(item.name)
            if url is None:
                logger.warning("找不到 %s 的仓库，跳过", item.name)
                continue
            self.install_from_url(url, item.version)
            updated.append(item)
        return updated

    def list_installed(self) -> list[InstalledPackage]:
        return self.versions.list_all_installed()

    def search(self, query: str) -> list[tuple[str, str]]:
        """(包名, URL) 列表"""
        self.initialize()
        return [
            (extract_package_name(url), url)
            for url in self.repository.search_repositories(query)
        ]

    def switch_version(self, name: str, version: str) -> None:
        if not self.versions.is_installed(name, version):
            raise PackageNotFoundError(name, f"该版本未安装: {name}:{version}")
        if not self.symlinks.switch_version(name, version):
            raise InstallError(f"切换 {name} 到 {version} 失败", name)
        logger.info("%s 已切换到 %s", name, version)

    def list_versions(self, name: str) -> list[VersionStatus]:
        versions = self.versions.installed_versions(name)
        if not versions:
            raise PackageNotFoundError(name, f"包未安装: {name}")
        active = self.symlinks.active_version(name)
        return [VersionStatus(version=v, active=v == active) for v in versions]

    def files(self, name: str) -> dict[str, list[str]]:
        """每个已安装版本的文件，以及该包在系统 include/lib 下的子目录内容"""
        versions = self.versions.installed_versions(name)
        if not versions:
            raise PackageNotFoundError(name, f"包未安装: {name}")
        shared = [
            str(p)
            for root in (Path(self.config.include_dir) / name, Path(self.config.lib_dir) / name)
            for p in walk_dir(root)
        ]
        return {
            v: [str(p) for p in walk_dir(self.versions.package_path(name, v))] + shared
            for v in versions
        }

    def detect_build_system(self, project_dir: str) -> str | None:
        return self.builder.detect_build_system(project_dir)

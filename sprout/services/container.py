"""服务容器 — 统一依赖注入

所有组件通过容器获取，同一容器内的实例共享。
CLI 通过 get_container() 获取服务，而非直接 import 构造。

依赖关系图（→ 表示依赖）:
  installer → symlinks
  packages  → repository, versions, deps, builder, installer, symlinks
  其余组件均为独立实例

Config 注入:
  容器接受可选 Config 参数，将目录配置显式传递给各组件。
  若不提供，则使用全局 get_config()。
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sprout.core.config import Config
    from sprout.core.dep import DependencyResolver
    from sprout.core.package_manager import PackageManager
    from sprout.core.repository import Repository
    from sprout.core.version_manager import VersionManager
    from sprout.services.build import Builder
    from sprout.services.install import Installer, SymlinkManager
    from sprout.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(
        self, config: Config | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from sprout.core.config import get_config
            config = get_config()
        self._config = config
        self._executor = executor

    @property
    def config(self) -> Config:
        return self._config

    @property
    def repository(self) -> Repository:
        if "repository" not in self._instances:
            from sprout.core.repository import Repository
            self._instances["repository"] = Repository(
                repos_file=self._config.repos_file, executor=self._executor,
            )
        return self._instances["repository"]  # type: ignore[return-value]

    @property
    def versions(self) -> VersionManager:
        if "versions" not in self._instances:
            from sprout.core.version_manager import VersionManager
            self._instances["versions"] = VersionManager(
                pkgs_dir=self._config.pkgs_dir, build_dir=self._config.build_dir,
            )
        return self._instances["versions"]  # type: ignore[return-value]

    @property
    def deps(self) -> DependencyResolver:
        if "deps" not in self._instances:
            from sprout.core.dep import DependencyResolver
            self._instances["deps"] = DependencyResolver(
                deps_dir=self._config.deps_dir,
                build_dir=self._config.build_dir,
                pkgs_dir=self._config.pkgs_dir,
            )
        return self._instances["deps"]  # type: ignore[return-value]

    @property
    def builder(self) -> Builder:
        if "builder" not in self._instances:
            from sprout.services.build import Builder
            self._instances["builder"] = Builder(
                bldit_dir=self._config.bldit_dir, executor=self._executor,
            )
        return self._instances["builder"]  # type: ignore[return-value]

    @property
    def symlinks(self) -> SymlinkManager:
        if "symlinks" not in self._instances:
            from sprout.services.install import SymlinkManager
            self._instances["symlinks"] = SymlinkManager(
                bin_dir=self._config.bin_dir, pkgs_dir=self._config.pkgs_dir,
            )
        return self._instances["symlinks"]  # type: ignore[return-value]

    @property
    def installer(self) -> Installer:
        if "installer" not in self._instances:
            from sprout.services.install import Installer
            self._instances["installer"] = Installer(
                lib_dir=self._config.lib_dir,
                include_dir=self._config.include_dir,
                apps_dir=self._config.apps_dir,
                symlinks=self.symlinks,
            )
        return self._instances["installer"]  # type: ignore[return-value]

    @property
    def packages(self) -> PackageManager:
        if "packages" not in self._instances:
            from sprout.core.package_manager import PackageManager
            self._instances["packages"] = PackageManager(
                self._config,
                repository=self.repository,
                versions=self.versions,
                dependencies=self.deps,
                builder=self.builder,
                installer=self.installer,
                symlinks=self.symlinks,
                executor=self._executor,
            )
        return self._instances["packages"]  # type: ignore[return-value]


# ---- 全局单例 ----

_global: ServiceContainer | None = None
_global_lock = threading.Lock()


def get_container() -> ServiceContainer:
    """获取全局 ServiceContainer 单例"""
    global _global  # noqa: PLW0603
    if _global is not None:
        return _global
    with _global_lock:
        if _global is None:
            _global = ServiceContainer()
        return _global


def reset_container() -> None:
    """重置全局容器（配置变更后或测试中调用）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = None

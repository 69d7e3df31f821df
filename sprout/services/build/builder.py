"""构建策略注册表

选择顺序:
  1. 配置目录中以包名命名的覆盖脚本 (bldit_dir/<package>)
  2. 项目根目录中的 bldit 脚本
  3. 按固定优先级逐个检测构建策略

覆盖脚本被 source 后调用其中的 bldit 函数，退出码即成败，完全跳过策略检测。

策略顺序是契约: 一个项目可能同时存在多种标记文件（如 Cargo.toml 与 go.mod），
排在前面的策略胜出。某策略抛 BuildError 时记录日志并尝试下一个检测命中的策略；
其他异常立即中止，不再尝试。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from sprout.core.exceptions import BuildError
from sprout.core.models import BLDIT_SCRIPT
from sprout.services.build.strategies import (
    AutotoolsStrategy,
    CargoStrategy,
    CMakeStrategy,
    GoStrategy,
    MakeStrategy,
    MesonStrategy,
    NimbleStrategy,
    NinjaStrategy,
    PnpmStrategy,
    PythonStrategy,
    ZigStrategy,
)
from sprout.services.build.strategy import BuildContext, BuildStrategy
from sprout.utils.shell import CommandExecutor, get_executor, source_and_run

logger = logging.getLogger(__name__)

NO_BUILD_SYSTEM = "未找到可用的构建系统"
CUSTOM_BLDIT = "Custom bldit"


def default_strategies() -> list[BuildStrategy]:
    """固定优先级的策略链"""
    return [
        AutotoolsStrategy(),
        CargoStrategy(),
        CMakeStrategy(),
        GoStrategy(),
        MakeStrategy(),
        MesonStrategy(),
        NinjaStrategy(),
        NimbleStrategy(),
        PnpmStrategy(),
        PythonStrategy(),
        ZigStrategy(),
    ]


class Builder:
    """构建策略注册表"""

    def __init__(
        self,
        bldit_dir: str,
        strategies: Sequence[BuildStrategy] | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.bldit_dir = Path(bldit_dir)
        self.strategies: list[BuildStrategy] = list(
            strategies if strategies is not None else default_strategies()
        )
        self._executor = executor

    @property
    def executor(self) -> CommandExecutor:
        return self._executor or get_executor()

    def _override_script(self, package_name: str, project_dir: Path) -> tuple[str, Path] | None:
        custom = self.bldit_dir / package_name
        if custom.is_file():
            return CUSTOM_BLDIT, custom
        local = project_dir / BLDIT_SCRIPT
        if local.is_file():
            return BLDIT_SCRIPT, local
        return None

    def build(
        self,
        package_name: str,
        project_dir: str | Path,
        install_dir: str | Path,
        url: str,
        version: str,
    ) -> str:
        """构建项目，返回实际使用的构建系统名称

        Raises:
            BuildError: 覆盖脚本失败，或没有任何策略检测命中/构建成功
        """
        src = Path(project_dir)
        override = self._override_script(package_name, src)
        if override is not None:
            label, script = override
            logger.info("检测到构建脚本: %s (%s)", label, script)
            self._build_with_script(script, src, label)
            return label

        ctx = BuildContext(
            package_name=package_name,
            project_dir=src,
            install_dir=Path(install_dir),
            url=url,
            version=version,
            executor=self.executor,
        )
        attempted: list[str] = []
        for strategy in self.strategies:
            if not strategy.detect(src):
                continue
            logger.info("检测到构建系统: %s", strategy.name)
            attempted.append(strategy.name)
            try:
                strategy.build(ctx)
            except BuildError as e:
                logger.error("%s 构建失败，尝试下一个构建系统: %s", strategy.name, e)
                continue
            logger.info("构建完成: %s (%s)", package_name, strategy.name)
            return strategy.name

        if attempted:
            raise BuildError(f"{NO_BUILD_SYSTEM} (均已失败: {', '.join(attempted)})", "Unknown")
        raise BuildError(NO_BUILD_SYSTEM, "Unknown")

    def _build_with_script(self, script: Path, project_dir: Path, label: str) -> None:
        r = source_and_run(
            str(script), BLDIT_SCRIPT, cwd=str(project_dir), executor=self.executor,
        )
        if not r.success:
            raise BuildError(f"bldit 脚本执行失败 (rc={r.returncode}): {r.tail()}", label)

    def detect_build_system(
        self, project_dir: str | Path, package_name: str | None = None,
    ) -> str | None:
        """返回将被使用的构建脚本或策略名称，无匹配时返回 None"""
        src = Path(project_dir)
        override = self._override_script(package_name or src.name, src)
        if override is not None:
            return override[0]
        for strategy in self.strategies:
            if strategy.detect(src):
                return strategy.name
        return None

"""构建策略协议

每个工具链一个实现类型，能力对为 {detect, build}:
  - detect(project_dir): 仅凭标记文件是否存在判断
  - build(ctx): 先检查所需外部工具，缺失时以具名错误快速失败

策略无状态，由 Builder 按固定优先级排列。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from sprout.core.exceptions import BuildError, ExecutionError
from sprout.utils.shell import CommandExecutor, command_exists, run_cmd

logger = logging.getLogger(__name__)


@dataclass
class BuildContext:
    """一次构建的输入"""

    package_name: str
    project_dir: Path
    install_dir: Path
    url: str
    version: str
    executor: CommandExecutor
    env: dict[str, str] = field(default_factory=dict)

    def merged_env(self, **extra: str) -> dict[str, str] | None:
        """需要额外环境变量时返回完整环境，否则返回 None（继承当前进程）"""
        if not self.env and not extra:
            return None
        return {**os.environ, **self.env, **extra}


class BuildStrategy(Protocol):
    """构建策略协议"""

    name: str
    detection_file: str

    def detect(self, project_dir: Path) -> bool:
        ...

    def build(self, ctx: BuildContext) -> None:
        ...


class MarkerStrategy:
    """按标记文件检测的策略公共部分

    子类设置 name / markers，并实现 build()。
    """

    name: str = ""
    markers: tuple[str, ...] = ()

    @property
    def detection_file(self) -> str:
        return self.markers[0] if self.markers else ""

    def detect(self, project_dir: Path) -> bool:
        return any((Path(project_dir) / m).exists() for m in self.markers)

    def build(self, ctx: BuildContext) -> None:
        raise NotImplementedError

    def require(self, *tools: str) -> None:
        """所需工具缺失时抛 BuildError"""
        for tool in tools:
            if not command_exists(tool):
                raise BuildError(f"{tool} 未安装", self.name)

    def run(
        self, ctx: BuildContext, args: list[str], failure: str, *,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        """执行构建命令，失败转换为 BuildError"""
        try:
            run_cmd(
                args, cwd=str(cwd or ctx.project_dir), env=env,
                label=self.name, executor=ctx.executor,
            )
        except ExecutionError as e:
            raise BuildError(f"{failure}: {e}", self.name) from e

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"

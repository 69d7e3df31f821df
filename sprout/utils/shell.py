"""Shell 命令执行工具 — 统一子进程调用

通过 CommandExecutor 协议抽象子进程执行，构建工具与 git 都经由执行器调用，
测试时可注入记录型实现，无需 patch subprocess。
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Protocol

from sprout.core.exceptions import ExecutionError

logger = logging.getLogger(__name__)


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def tail(self, limit: int = 500) -> str:
        """错误信息摘要：优先 stderr，为空时取 stdout"""
        text = (self.stderr or self.stdout).strip()
        return text[-limit:]


# =========================================================================
# 命令执行器协议
# =========================================================================

class CommandExecutor(Protocol):
    """命令执行器协议 — 抽象子进程调用

    不设置超时: 构建工具可能运行很久，由使用者自行中断。
    """

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        """执行命令并返回结果"""
        ...


# =========================================================================
# 默认实现: 本地执行器
# =========================================================================

class LocalExecutor:
    """本地子进程执行器（默认实现）"""

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        args = shlex.split(cmd) if isinstance(cmd, str) else cmd
        logger.debug("RUN: %s (cwd=%s)", shlex.join(args), cwd)
        try:
            r = subprocess.run(
                args, capture_output=True, text=True,
                cwd=cwd, env=env, check=False, timeout=timeout,
            )
        except FileNotFoundError as e:
            # 可执行文件不存在，按 shell 约定返回 127
            return CommandResult(returncode=127, stdout="", stderr=str(e))
        if r.returncode != 0 and r.stderr:
            logger.debug("stderr (%s): %s", args[0], r.stderr.strip()[-1000:])
        return CommandResult(
            returncode=r.returncode,
            stdout=r.stdout,
            stderr=r.stderr,
        )


# =========================================================================
# 全局默认执行器（可替换）
# =========================================================================

_default_executor: CommandExecutor = LocalExecutor()


def get_executor() -> CommandExecutor:
    """获取全局默认命令执行器"""
    return _default_executor


def set_executor(executor: CommandExecutor) -> None:
    """替换全局默认命令执行器（用于测试）"""
    global _default_executor  # noqa: PLW0603
    _default_executor = executor


# =========================================================================
# 便捷函数
# =========================================================================

def command_exists(name: str) -> bool:
    """检查命令是否在 PATH 中"""
    return shutil.which(name) is not None


def source_and_run(
    script_path: str, function_name: str, *,
    cwd: str = ".",
    executor: CommandExecutor | None = None,
) -> CommandResult:
    """在 bash 中 source 脚本并调用其中定义的函数，退出码即结果"""
    ex = executor or get_executor()
    command = f"source {shlex.quote(script_path)} && {function_name}"
    return ex.execute(["bash", "-c", command], cwd=cwd)


def run_cmd(
    cmd: str | list[str], *, cwd: str = ".",
    env: dict[str, str] | None = None,
    label: str = "cmd",
    executor: CommandExecutor | None = None,
) -> CommandResult:
    """执行命令，失败抛 ExecutionError

    Args:
        cmd: 命令字符串或参数列表
        cwd: 工作目录
        env: 环境变量（不传则继承当前进程）
        label: 日志标签
    """
    ex = executor or get_executor()
    shown = cmd if isinstance(cmd, str) else shlex.join(cmd)
    logger.info("  %s: %s (cwd=%s)", label, shown, cwd)
    r = ex.execute(cmd, cwd=cwd, env=env)
    if not r.success:
        raise ExecutionError(f"{label}失败 (rc={r.returncode}): {r.tail()}")
    return r

"""共享 fixture: 独立目录树的配置与记录调用的假执行器"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

import sprout.core.config as cfgmod
import sprout.utils.shell as shellmod
from sprout.core.config import Config
from sprout.services.container import reset_container
from sprout.utils.shell import CommandResult

Handler = Callable[[list[str], str], CommandResult | None]


class FakeExecutor:
    """按顺序记录命令；handler 可以返回自定义结果或产生副作用（如模拟 git clone）"""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], str, dict[str, str] | None]] = []
        self.handlers: list[Handler] = []
        self.failing: set[str] = set()

    def fail_on(self, program: str) -> None:
        self.failing.add(program)

    def on(self, handler: Handler) -> None:
        self.handlers.append(handler)

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        args = cmd.split() if isinstance(cmd, str) else list(cmd)
        self.calls.append((args, str(cwd), env))
        for handler in self.handlers:
            r = handler(args, str(cwd))
            if r is not None:
                return r
        if args and args[0] in self.failing:
            return CommandResult(returncode=1, stdout="", stderr=f"{args[0]} boom")
        return CommandResult(returncode=0, stdout="", stderr="")

    def commands(self) -> list[list[str]]:
        return [c[0] for c in self.calls]


@pytest.fixture()
def config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Config]:
    """所有目录都位于 tmp_path 下的配置，并设为全局配置"""
    cfg = Config.rooted(tmp_path / "root")
    monkeypatch.setattr(cfgmod, "_current", cfg)
    reset_container()
    yield cfg
    reset_container()


@pytest.fixture()
def fake_executor(monkeypatch: pytest.MonkeyPatch) -> FakeExecutor:
    """替换全局默认执行器"""
    ex = FakeExecutor()
    monkeypatch.setattr(shellmod, "_default_executor", ex)
    return ex
